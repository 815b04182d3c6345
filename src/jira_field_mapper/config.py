"""
Mapping configuration model and loader.

The configuration is a JSON document with a type map (Jira issue type to
Azure DevOps work item type) and an ordered field map:

    {
      "type-map": {"type": [{"source": "Bug", "target": "Bug"}]},
      "field-map": {"field": [
        {"source": "priority", "target": "Microsoft.VSTS.Common.Priority",
         "for": "Bug,Task", "not-for": "", "mapper": "MapValue",
         "mapping": {"values": [{"source": "High", "target": "1"}]}}
      ]}
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, Literal

from .exceptions import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger(__name__)

ALL_TYPES: Final[str] = "All"


@dataclass(frozen=True)
class TypeMapping:
    """Maps a source issue type to a target work item type."""

    source: str
    target: str


@dataclass(frozen=True)
class ValueMapping:
    """One entry of a value substitution table."""

    source: str
    target: str


@dataclass(frozen=True)
class FieldMappingRule:
    """A configured directive turning a source field into a target field.

    for_types is either "All" or the set of target types the rule applies to.
    not_for lists target types the rule must not apply to.
    """

    source: str
    target: str
    for_types: Literal["All"] | frozenset[str] = ALL_TYPES
    not_for: frozenset[str] = frozenset()
    values: tuple[ValueMapping, ...] = ()
    mapper: str | None = None

    def applies_to(self, target_type: str | None) -> bool:
        """Check the for/not-for applicability of this rule for a target type."""
        if target_type in self.not_for:
            return False
        return self.for_types == ALL_TYPES or target_type in self.for_types


@dataclass(frozen=True)
class MappingConfig:
    """In-memory mapping configuration."""

    type_map: tuple[TypeMapping, ...] = ()
    field_map: tuple[FieldMappingRule, ...] = ()

    def target_type_for(self, source_type: str) -> str | None:
        """Return the target type of the first type mapping for source_type."""
        return next((t.target for t in self.type_map if t.source == source_type), None)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MappingConfig:
        """Build a configuration from its JSON document form.

        Raises:
            ConfigError: If the document does not have the expected layout
        """
        try:
            type_map = tuple(
                TypeMapping(source=entry["source"], target=entry["target"])
                for entry in (data.get("type-map") or {}).get("type") or []
            )
            field_map = tuple(_parse_rule(entry) for entry in (data.get("field-map") or {}).get("field") or [])
        except (KeyError, TypeError, AttributeError) as e:
            msg = f"Invalid mapping configuration: {e!r}"
            raise ConfigError(msg) from e

        logger.debug(f"Loaded {len(type_map)} type mappings and {len(field_map)} field mapping rules")
        return cls(type_map=type_map, field_map=field_map)


def _split_types(value: str | None) -> frozenset[str]:
    if not value:
        return frozenset()
    return frozenset(part.strip() for part in value.split(",") if part.strip())


def _parse_rule(entry: Mapping[str, Any]) -> FieldMappingRule:
    for_value: str = entry.get("for") or ALL_TYPES
    values = tuple(
        ValueMapping(source=str(v["source"]), target=str(v["target"]))
        for v in (entry.get("mapping") or {}).get("values") or []
    )
    return FieldMappingRule(
        source=entry["source"],
        target=entry["target"],
        for_types=ALL_TYPES if for_value.strip() == ALL_TYPES else _split_types(for_value),
        not_for=_split_types(entry.get("not-for")),
        values=values,
        mapper=entry.get("mapper"),
    )


def load_config(path: str | Path) -> MappingConfig:
    """Load a mapping configuration from a JSON file.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    config_path = Path(path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        msg = f"Failed to read mapping configuration {config_path}: {e}"
        raise ConfigError(msg) from e

    if not isinstance(data, dict):
        msg = f"Mapping configuration {config_path} must be a JSON object"
        raise ConfigError(msg)

    return MappingConfig.from_dict(data)

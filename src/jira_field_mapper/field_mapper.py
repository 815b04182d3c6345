"""
Field mappers turning Jira revision values into Azure DevOps field values.

Mappers that only need a value are plain functions. Mappers that need the
mapping configuration or per-run state (the LexoRank cache) live on
FieldMapper, which is created once per migration run.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, Final, NamedTuple

from .exceptions import ConfigError, InvalidArgumentError, MissingArgumentError
from .models import field_value_to_text
from .rank import LexoRankCodec
from .rendered_html import HtmlFieldRewriter
from .rules import apply_substitution, resolve_rule

if TYPE_CHECKING:
    from collections.abc import Callable
    from decimal import Decimal

    from .config import FieldMappingRule, MappingConfig
    from .models import FieldValue, Revision

logger: logging.Logger = logging.getLogger(__name__)

SUMMARY_FIELD: Final[str] = "summary"
RENDERED_FIELD_SUFFIX: Final[str] = "$Rendered"
SECONDS_PER_HOUR: Final[int] = 3600


class MappingResult(NamedTuple):
    """Result of mapping one field.

    found is False when the source field is absent and the target field
    should not be emitted. found with an empty value means emit it empty.
    """

    found: bool
    value: Any = None


NOT_FOUND: Final[MappingResult] = MappingResult(found=False)


def map_title(revision: Revision) -> MappingResult:
    """Map the summary to a title prefixed with the item key: "[PROJ-1] Summary"."""
    if SUMMARY_FIELD not in revision.fields:
        return NOT_FOUND
    summary = field_value_to_text(revision.fields[SUMMARY_FIELD])
    return MappingResult(found=True, value=f"[{revision.parent_key}] {summary}")


def map_title_without_key(revision: Revision) -> MappingResult:
    """Map the summary to a title as-is."""
    if SUMMARY_FIELD not in revision.fields:
        return NOT_FOUND
    return MappingResult(found=True, value=revision.fields[SUMMARY_FIELD])


def map_remaining_work(seconds: str | None) -> float:
    """Convert a Jira time estimate in seconds to hours.

    Raises:
        MissingArgumentError: If seconds is None
        InvalidArgumentError: If seconds is not a finite number
    """
    if seconds is None:
        msg = "Remaining work seconds must not be None"
        raise MissingArgumentError(msg)

    # Python-only numeric forms such as "3_600" are not accepted
    if "_" in seconds:
        msg = f"Remaining work '{seconds}' is not a number"
        raise InvalidArgumentError(msg)

    try:
        secs = float(seconds)
    except ValueError as e:
        msg = f"Remaining work '{seconds}' is not a number"
        raise InvalidArgumentError(msg) from e

    if not math.isfinite(secs):
        msg = f"Remaining work '{seconds}' is not a finite number"
        raise InvalidArgumentError(msg)

    return secs / SECONDS_PER_HOUR


def map_tags(labels: str | None) -> str:
    """Convert space separated Jira labels to semicolon separated tags."""
    if labels is None:
        msg = "Labels must not be None"
        raise MissingArgumentError(msg)

    if not labels.strip():
        return ""

    return ";".join(labels.split(" "))


def map_array(field: str | None) -> str | None:
    """Convert a comma separated value list to a semicolon separated one.

    Returns None (no value) rather than "" for blank input.
    """
    if field is None:
        msg = "Array field must not be None"
        raise MissingArgumentError(msg)

    if not field.strip():
        return None

    return ";".join(field.split(","))


def map_sprint(iteration_paths: str | None) -> str | None:
    """Pick the most recent sprint from a comma separated sprint list."""
    if iteration_paths is None or not iteration_paths.strip():
        return None

    return [path.strip() for path in iteration_paths.split(",")][-1]


class FieldMapper:
    """Maps fields of Jira revisions using a mapping configuration.

    Create one instance per migration run: it owns the LexoRank cache that
    detects duplicate ranks across all revisions of the run.
    """

    config: MappingConfig
    rank_codec: LexoRankCodec
    html_rewriter: HtmlFieldRewriter

    def __init__(
        self,
        config: MappingConfig,
        *,
        rank_codec: LexoRankCodec | None = None,
        html_rewriter: HtmlFieldRewriter | None = None,
    ) -> None:
        self.config = config
        self.rank_codec = rank_codec if rank_codec is not None else LexoRankCodec()
        self.html_rewriter = html_rewriter if html_rewriter is not None else HtmlFieldRewriter()

        self._scalar_mappers: dict[str, Callable[[str], Any]] = {
            "MapTags": map_tags,
            "MapArray": map_array,
            "MapSprint": map_sprint,
            "MapRemainingWork": map_remaining_work,
            "MapLexoRank": self.map_lexo_rank,
        }

    def map_value(self, revision: Revision, source_field: str, target_field: str) -> MappingResult:
        """Map a field value, substituting it when a rule's value table applies.

        Returns the raw value unchanged when no rule with a value table matches.
        """
        target_type = self.config.target_type_for(revision.type)

        if source_field not in revision.fields:
            return NOT_FOUND
        value = revision.fields[source_field]

        rule = resolve_rule(self.config.field_map, source_field, target_field, target_type)
        if rule is None:
            return MappingResult(found=True, value=value)

        result = apply_substitution(
            rule, field_value_to_text(value), field_name=source_field, item_type=revision.type
        )
        return MappingResult(found=True, value=result.value)

    def map_rendered_value(
        self,
        revision: Revision,
        source_field: str,
        is_custom_field: bool,
        custom_field_name: str | None,
    ) -> MappingResult:
        """Map the rendered (HTML) variant of a field.

        Value tables are matched on the rendered field name only; without a
        matching rule the HTML is rewritten for the target system.
        """
        if is_custom_field and custom_field_name:
            source_field = custom_field_name
        field_name = source_field + RENDERED_FIELD_SUFFIX

        target_type = self.config.target_type_for(revision.type)

        if field_name not in revision.fields:
            return NOT_FOUND
        value = revision.fields[field_name]

        rule = resolve_rule(self.config.field_map, field_name, None, target_type)
        if rule is not None:
            result = apply_substitution(rule, field_value_to_text(value), field_name=field_name)
            return MappingResult(found=True, value=result.value)

        return MappingResult(found=True, value=self.html_rewriter.rewrite(value, revision))

    def map_lexo_rank(self, lexo_rank: str | None) -> Decimal:
        """Decode a LexoRank into a backlog priority using this run's cache."""
        return self.rank_codec.decode(lexo_rank)

    def map_field(self, revision: Revision, rule: FieldMappingRule) -> MappingResult:
        """Map the field described by a rule, using the rule's configured mapper.

        Raises:
            ConfigError: If the rule names an unknown mapper
        """
        mapper = rule.mapper or "MapValue"

        if mapper == "MapValue":
            return self.map_value(revision, rule.source, rule.target)
        if mapper == "MapTitle":
            return map_title(revision)
        if mapper == "MapTitleWithoutKey":
            return map_title_without_key(revision)
        if mapper == "MapRendered":
            return self.map_rendered_value(revision, rule.source, False, None)

        scalar_mapper = self._scalar_mappers.get(mapper)
        if scalar_mapper is None:
            msg = f"Unknown mapper '{mapper}' for field '{rule.source}'"
            raise ConfigError(msg)

        if rule.source not in revision.fields:
            return NOT_FOUND
        value: FieldValue = revision.fields[rule.source]
        if value is None:
            if mapper == "MapLexoRank":
                return MappingResult(found=True, value=self.map_lexo_rank(None))
            return MappingResult(found=True, value=None)
        return MappingResult(found=True, value=scalar_mapper(field_value_to_text(value)))

    def map_revision(self, revision: Revision) -> dict[str, Any]:
        """Map every configured field that applies to the revision's target type.

        Returns:
            Target field name -> value, for fields present in the revision.
            When several rules produce the same target field, the first wins.
        """
        target_type = self.config.target_type_for(revision.type)
        if target_type is None:
            logger.debug(f"No target type configured for {revision.type} ({revision.origin_id})")

        mapped: dict[str, Any] = {}
        for rule in self.config.field_map:
            if not rule.applies_to(target_type) or rule.target in mapped:
                continue
            result = self.map_field(revision, rule)
            if result.found:
                mapped[rule.target] = result.value

        logger.debug(f"Mapped {len(mapped)} fields for {revision.origin_id}")
        return mapped

"""
Field mapping rule resolution and value substitution.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from .config import ALL_TYPES

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .config import FieldMappingRule

logger: logging.Logger = logging.getLogger(__name__)


class SubstitutionResult(NamedTuple):
    """Result of looking up a value in a rule's substitution table."""

    value: str
    """Mapped value, empty if the table has no entry for the source value."""
    warned: bool
    """Whether a missing mapping warning was logged."""


def _matches(rule: FieldMappingRule, source_field: str, target_field: str | None, target_type: str | None) -> bool:
    if rule.source != source_field or not rule.values:
        return False

    target_matches = target_field is None or rule.target == target_field
    if target_matches and (rule.for_types == ALL_TYPES or target_type in rule.for_types):
        return True

    # Excluding by type applies the rule whatever its declared target
    return bool(rule.not_for) and target_type not in rule.not_for


def resolve_rule(
    rules: Iterable[FieldMappingRule],
    source_field: str,
    target_field: str | None,
    target_type: str | None,
) -> FieldMappingRule | None:
    """Find the first rule that substitutes values of source_field for target_type.

    A rule matches when its source is source_field, it carries a substitution
    table, and either:
    - its target is target_field and it is "for" all types or for target_type, or
    - it has a "not-for" list that does not contain target_type.

    Args:
        rules: Configured rules, in configuration order
        source_field: Source field name
        target_field: Target field name, or None to skip the target check
        target_type: Target work item type (None if the type map has no entry)

    Returns:
        The first matching rule, or None
    """
    for rule in rules:
        if _matches(rule, source_field, target_field, target_type):
            logger.debug(f"Rule {rule.source} -> {rule.target} matches {source_field} for {target_type}")
            return rule
    return None


def apply_substitution(
    rule: FieldMappingRule,
    raw_text: str,
    *,
    field_name: str,
    item_type: str | None = None,
) -> SubstitutionResult:
    """Substitute raw_text using the rule's value table.

    A missing entry is a data problem, not an error: it is logged and an
    empty value is returned.
    """
    mapped = next((v.target for v in rule.values if v.source == raw_text), None)
    if mapped:
        return SubstitutionResult(value=mapped, warned=False)

    type_info = f" for item type '{item_type}'" if item_type is not None else ""
    logger.warning(f"Missing mapping value '{raw_text}' for field '{field_name}'{type_info}.")
    return SubstitutionResult(value="", warned=True)

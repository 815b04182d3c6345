"""Data models for a single Jira revision.

A revision is one historical snapshot of a source work item: the values of
its fields at that point plus the attachment changes made in it. The models
are read-only inputs to the field mappers.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Literal, get_args

from .exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Mapping

type FieldValue = str | bool | int | float | Decimal | dt.datetime | list[FieldValue] | None

ChangeType = Literal["Added", "Removed", "Updated"]


def field_value_to_text(value: FieldValue) -> str:
    """Return the text form of a field value.

    Substitution tables and titles compare and format values on this form, so
    it must stay stable: integral floats lose their fractional part, booleans
    are capitalized and lists are joined with ", ".
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, dt.datetime):
        return value.isoformat()
    if isinstance(value, list):
        return ", ".join(field_value_to_text(item) for item in value)
    return str(value)


@dataclass(frozen=True)
class Attachment:
    """An attachment referenced by a revision."""

    url: str | None
    filename: str = ""


@dataclass(frozen=True)
class AttachmentAction:
    """An attachment change recorded in a revision."""

    change_type: ChangeType
    value: Attachment


@dataclass
class Revision:
    """A single revision of a Jira work item.

    Field names are case-sensitive. A missing key means the field is not
    present in this revision, which is different from a key holding None or "".
    """

    origin_id: str
    type: str
    fields: dict[str, FieldValue] = field(default_factory=dict)
    parent_key: str = ""  # Key of the item owning this revision (e.g., "PROJ-1")
    attachment_actions: list[AttachmentAction] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Revision:
        """Build a revision from its JSON document form.

        Args:
            data: Mapping with "origin-id", "type", "parent-key", "fields"
                and an optional "attachments" list of {"change", "url", "filename"}

        Raises:
            InvalidArgumentError: If a required key is missing or has the wrong shape
        """
        try:
            origin_id = str(data["origin-id"])
            item_type = str(data["type"])
            fields = dict(data.get("fields") or {})
            actions = [
                AttachmentAction(
                    change_type=_parse_change_type(entry.get("change", "Added")),
                    value=Attachment(url=entry.get("url"), filename=entry.get("filename", "")),
                )
                for entry in data.get("attachments") or []
            ]
        except (KeyError, TypeError, AttributeError) as e:
            msg = f"Invalid revision document: {e}"
            raise InvalidArgumentError(msg) from e

        return cls(
            origin_id=origin_id,
            type=item_type,
            fields=fields,
            parent_key=str(data.get("parent-key", origin_id)),
            attachment_actions=actions,
        )


def _parse_change_type(value: str) -> ChangeType:
    if value not in get_args(ChangeType):
        msg = f"Unknown attachment change type: {value}"
        raise InvalidArgumentError(msg)
    return value  # pyright: ignore[reportReturnType]

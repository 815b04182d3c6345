"""Tests for revision models."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from jira_field_mapper.exceptions import InvalidArgumentError
from jira_field_mapper.models import Revision, field_value_to_text


@pytest.mark.unit
class TestFieldValueToText:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            ("text", "text"),
            (True, "True"),
            (False, "False"),
            (42, "42"),
            (3.0, "3"),
            (2.5, "2.5"),
            (Decimal("1.50"), "1.50"),
            (dt.datetime(2024, 1, 15, 10, 30, tzinfo=dt.UTC), "2024-01-15T10:30:00+00:00"),
            (["a", 1, None], "a, 1, "),
        ],
    )
    def test_text_form(self, value: object, expected: str) -> None:
        assert field_value_to_text(value) == expected  # pyright: ignore[reportArgumentType]


@pytest.mark.unit
class TestRevisionFromDict:
    def test_full_document(self) -> None:
        revision = Revision.from_dict(
            {
                "origin-id": "PROJ-7",
                "type": "Story",
                "parent-key": "PROJ-7",
                "fields": {"summary": "Login page", "storypoints": 3},
                "attachments": [
                    {"change": "Added", "url": "https://jira/att/1/a.png", "filename": "a.png"},
                    {"change": "Removed", "url": "https://jira/att/2/b.png"},
                ],
            }
        )

        assert revision.origin_id == "PROJ-7"
        assert revision.type == "Story"
        assert revision.fields == {"summary": "Login page", "storypoints": 3}
        assert [a.change_type for a in revision.attachment_actions] == ["Added", "Removed"]
        assert revision.attachment_actions[0].value.filename == "a.png"

    def test_defaults(self) -> None:
        revision = Revision.from_dict({"origin-id": "PROJ-8", "type": "Bug"})
        assert revision.parent_key == "PROJ-8"
        assert revision.fields == {}
        assert revision.attachment_actions == []

    def test_missing_type(self) -> None:
        with pytest.raises(InvalidArgumentError, match="Invalid revision document"):
            Revision.from_dict({"origin-id": "PROJ-9"})

    def test_unknown_change_type(self) -> None:
        with pytest.raises(InvalidArgumentError, match="Unknown attachment change type"):
            Revision.from_dict({"origin-id": "PROJ-9", "type": "Bug", "attachments": [{"change": "Moved"}]})

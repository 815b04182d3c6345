"""
Pytest configuration and fixtures.

Integration tests fail when the code under test logs a WARNING: a clean
configuration and revision must map without data-quality warnings. Unit
tests may log warnings and usually assert on them with caplog.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, override

import pytest

from jira_field_mapper.config import MappingConfig
from jira_field_mapper.models import Attachment, AttachmentAction, Revision

if TYPE_CHECKING:
    from collections.abc import Generator

_warning_records: dict[str, list[logging.LogRecord]] = {}


class _WarningCollector(logging.Handler):
    """Collects WARNING and above records emitted by jira_field_mapper."""

    test_nodeid: str

    def __init__(self, test_nodeid: str) -> None:
        super().__init__(level=logging.WARNING)
        self.test_nodeid = test_nodeid

    @override
    def emit(self, record: logging.LogRecord) -> None:
        if record.name.startswith("jira_field_mapper"):
            _warning_records.setdefault(self.test_nodeid, []).append(record)


@pytest.fixture(autouse=True)
def fail_on_log_warnings_for_integration_tests(request: pytest.FixtureRequest) -> Generator[None]:
    """Collect mapper warnings during integration tests."""
    if request.node.get_closest_marker("integration") is None:
        yield
        return

    handler = _WarningCollector(request.node.nodeid)
    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    try:
        yield
    finally:
        root_logger.removeHandler(handler)


@pytest.hookimpl(tryfirst=True, hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]) -> Generator[None]:  # type: ignore[misc]
    """Mark a passed integration test as failed if mapper warnings were logged."""
    outcome = yield
    report = outcome.get_result()

    if call.when != "call":
        return

    records = _warning_records.pop(item.nodeid, [])
    if records and report.outcome == "passed":
        report.outcome = "failed"
        report.longrepr = f"Integration test failed: {len(records)} warning(s) detected:\n" + "\n".join(
            f"  - {r.levelname}: {r.getMessage()} (in {r.name}:{r.lineno})" for r in records
        )


@pytest.fixture
def config_data() -> dict[str, object]:
    """A mapping configuration in its JSON document form."""
    return {
        "type-map": {
            "type": [
                {"source": "Bug", "target": "Bug"},
                {"source": "Story", "target": "User Story"},
                {"source": "Sub-task", "target": "Task"},
            ]
        },
        "field-map": {
            "field": [
                {"source": "summary", "target": "System.Title", "mapper": "MapTitle"},
                {
                    "source": "priority",
                    "target": "Microsoft.VSTS.Common.Priority",
                    "for": "Bug,User Story",
                    "mapping": {
                        "values": [
                            {"source": "Highest", "target": "1"},
                            {"source": "High", "target": "2"},
                            {"source": "Medium", "target": "3"},
                        ]
                    },
                },
                {"source": "labels", "target": "System.Tags", "mapper": "MapTags"},
                {"source": "customfield_10010", "target": "System.IterationPath", "mapper": "MapSprint"},
                {"source": "customfield_10019", "target": "Microsoft.VSTS.Common.BacklogPriority", "mapper": "MapLexoRank"},
                {
                    "source": "timeestimate",
                    "target": "Microsoft.VSTS.Scheduling.RemainingWork",
                    "for": "Task",
                    "mapper": "MapRemainingWork",
                },
                {"source": "description", "target": "System.Description", "mapper": "MapRendered"},
            ]
        },
    }


@pytest.fixture
def config(config_data: dict[str, object]) -> MappingConfig:
    return MappingConfig.from_dict(config_data)


@pytest.fixture
def revision() -> Revision:
    """A Bug revision with the fields used by the default configuration."""
    return Revision(
        origin_id="PROJ-1",
        type="Bug",
        parent_key="PROJ-1",
        fields={
            "summary": "Fix bug",
            "priority": "High",
            "labels": "backend regression",
            "customfield_10010": "Sprint 1, Sprint 2",
            "customfield_10019": "0|i0005r:",
            "description$Rendered": "<p>Broken since <b>1.2</b></p>",
        },
        attachment_actions=[
            AttachmentAction(
                change_type="Added",
                value=Attachment(url="https://jira.example.com/secure/attachment/10001/log.txt", filename="log.txt"),
            )
        ],
    )

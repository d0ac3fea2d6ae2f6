from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from taskcsv.config import EngineConfig
from taskcsv.dates import ConcreteDate, PlaceholderDate
from taskcsv.extract import CandidateRecord
from taskcsv.records import (
    TaskStatus,
    materialize,
    merge_import,
    new_task,
    remove_task,
    update_task,
)

NOW = datetime(2026, 10, 17, 9, 0, tzinfo=timezone.utc)


def _candidate(content="Submit report"):
    due = ConcreteDate(value=date(2024, 3, 15))
    return CandidateRecord(
        content=content,
        termini_raw="7",
        original_due_date=due,
        adjusted_date=due,
        source_row=4,
    )


def test_materialize_assigns_identity_and_defaults():
    task = materialize(_candidate(), now=NOW, id_factory=lambda: "task-1")
    assert task.id == "task-1"
    assert task.status is TaskStatus.PENDING
    assert task.color == "#E9F5E8"
    assert task.created_at == NOW
    assert task.adjusted_date == task.original_due_date


def test_materialize_uses_config_defaults():
    config = EngineConfig(default_status="En progrés", default_color="#ffdab9")
    task = materialize(_candidate(), config)
    assert task.status is TaskStatus.IN_PROGRESS
    assert task.color == "#FFDAB9"


def test_materialize_generates_unique_ids():
    first = materialize(_candidate())
    second = materialize(_candidate())
    assert first.id != second.id


def test_new_task_defaults():
    task = new_task("Call school", now=NOW)
    assert task.termini_raw == "N/A"
    assert task.original_due_date == PlaceholderDate(text="Data no especificada")
    assert task.adjusted_date == task.original_due_date
    assert task.status is TaskStatus.PENDING


def test_new_task_rejects_blank_content():
    with pytest.raises(ValidationError):
        new_task("   ")


def test_new_task_rejects_bad_color():
    with pytest.raises(ValueError):
        new_task("Paint", color="green")


def test_colors_come_from_the_palette():
    assert new_task("Paint", color="#fffacd").color == "#FFFACD"
    with pytest.raises(ValueError):
        new_task("Paint", color="#123456")
    with pytest.raises(ValueError):
        update_task(new_task("Paint"), color="#123456")
    assert update_task(new_task("Paint"), color="#ADD8E6").color == "#ADD8E6"


def test_update_task_replaces_whole_fields():
    task = new_task("Report", due_date=date(2024, 3, 15), now=NOW)
    moved = update_task(task, adjusted_date=date(2024, 3, 20), status=TaskStatus.COMPLETED)

    assert moved.adjusted_date == ConcreteDate(value=date(2024, 3, 20))
    assert moved.original_due_date == ConcreteDate(value=date(2024, 3, 15))
    assert moved.status is TaskStatus.COMPLETED
    assert moved.id == task.id
    assert moved.created_at == task.created_at
    assert task.status is TaskStatus.PENDING


def test_update_task_accepts_date_text():
    task = new_task("Report", due_date=date(2024, 3, 15))
    assert update_task(task, adjusted_date="next week").adjusted_date == PlaceholderDate(text="next week")


@pytest.mark.parametrize("field", ["id", "created_at"])
def test_update_task_refuses_identity_changes(field):
    task = new_task("Report")
    with pytest.raises(ValueError):
        update_task(task, **{field: "x"})


def test_update_task_refuses_unknown_fields():
    with pytest.raises(ValueError):
        update_task(new_task("Report"), priority=3)


def test_records_are_immutable():
    task = new_task("Report")
    with pytest.raises(ValidationError):
        task.content = "Changed"


def test_merge_and_remove():
    existing = [new_task("Old")]
    imported = [new_task("New 1"), new_task("New 2")]

    assert [t.content for t in merge_import(existing, imported)] == ["Old", "New 1", "New 2"]
    assert [t.content for t in merge_import(existing, imported, replace=True)] == ["New 1", "New 2"]

    remaining = remove_task(imported, imported[0].id)
    assert [t.content for t in remaining] == ["New 2"]


def test_update_task_uses_config_sentinels_and_placeholder():
    config = EngineConfig(date_sentinels=("TBD",), not_specified="Sense data")
    task = new_task("Report", due_date=date(2024, 3, 15), config=config)

    assert update_task(task, config=config, adjusted_date="tbd").adjusted_date == PlaceholderDate(text="tbd")
    assert update_task(task, config=config, adjusted_date=None).adjusted_date == PlaceholderDate(text="Sense data")

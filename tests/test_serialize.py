from datetime import date

from taskcsv.dates import ConcreteDate, PlaceholderDate
from taskcsv.normalize import export_tasks, import_tasks
from taskcsv.records import new_task
from taskcsv.serialize import escape_cell, serialize_records


def test_escape_cell():
    assert escape_cell("plain") == "plain"
    assert escape_cell("Buy milk, eggs") == '"Buy milk, eggs"'
    assert escape_cell('say "hi"') == '"say ""hi"""'
    assert escape_cell("two\nlines") == '"two\nlines"'
    assert escape_cell("two\rlines") == '"two\rlines"'
    assert escape_cell(None) == ""


def test_serialize_header_and_rows():
    tasks = [
        new_task("Submit report", termini_raw="7", due_date=date(2024, 3, 15)),
        new_task("Check value", termini_raw="3", due_date="#VALUE!"),
    ]
    text = serialize_records(tasks)
    assert text.split("\n") == [
        "#TERMINI,#DOCUMENTS/ACCIONS,#DATA A FER",
        "7,Submit report,15/03/2024",
        "3,Check value,#VALUE!",
    ]


def test_serialize_uses_original_due_date():
    task = new_task("Move", due_date=date(2024, 3, 15), adjusted_date=date(2024, 4, 1))
    assert serialize_records([task]).endswith("Move,15/03/2024")


def test_quoted_content_on_export():
    task = new_task("Buy milk, eggs", termini_raw="1", due_date="01/01/2025")
    assert serialize_records([task]).split("\n")[1] == '1,"Buy milk, eggs",01/01/2025'


def test_export_reimports_to_same_records():
    tasks = [
        new_task("Submit report", termini_raw="7", due_date=date(2024, 3, 15)),
        new_task("Unknown date", termini_raw="N/A", due_date="Data Desconeguda"),
        new_task("Leap", termini_raw="10", due_date=date(2024, 2, 29)),
    ]
    data = export_tasks(tasks)
    assert data.startswith(b"\xef\xbb\xbf")

    result = import_tasks(data)
    assert [(r.termini_raw, r.content, r.original_due_date) for r in result.records] == [
        ("7", "Submit report", ConcreteDate(value=date(2024, 3, 15))),
        ("N/A", "Unknown date", PlaceholderDate(text="Data Desconeguda")),
        ("10", "Leap", ConcreteDate(value=date(2024, 2, 29))),
    ]


def test_carriage_return_in_cell_stays_in_one_row():
    task = new_task("line one\rline two", termini_raw="1", due_date="01/01/2025")
    text = serialize_records([task])
    assert text.split("\n")[1] == '1,"line one\rline two",01/01/2025'

from datetime import datetime, timezone

import pytest

from mailtriage.lib.shared.models.email import EmailRecord, parse_date

pytestmark = pytest.mark.offline

NOW = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)

def test_defaults_for_empty_document():
    record = EmailRecord.from_document("abc", {}, now=NOW)
    assert record.id == "abc"
    assert record.subject == "No Subject"
    assert record.sender == "Unknown Sender"
    assert record.content == "No content available"
    assert record.date == NOW
    assert record.classification is None
    assert record.is_important is False
    assert record.is_read is False

def test_legacy_keys():
    record = EmailRecord.from_document("abc", {
        "from": "old@example.com",
        "body": "old body",
        "timestamp": "2024-01-02T03:04:05Z",
        "date": "1999-01-01T00:00:00Z",
    })
    assert record.sender == "old@example.com"
    assert record.content == "old body"
    assert record.date == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

def test_current_keys_win_over_legacy():
    record = EmailRecord.from_document("abc", {"sender": "new@example.com", "from": "old@example.com",
                                               "content": "new", "body": "old"})
    assert record.sender == "new@example.com"
    assert record.content == "new"

@pytest.mark.parametrize("value, expected", [
    ("2024-01-02T00:00:00", datetime(2024, 1, 2, tzinfo=timezone.utc)),
    ("2024-01-02T00:00:00+00:00", datetime(2024, 1, 2, tzinfo=timezone.utc)),
    (1704153600, datetime(2024, 1, 2, tzinfo=timezone.utc)),
    (1704153600000, datetime(2024, 1, 2, tzinfo=timezone.utc)),
    (datetime(2024, 1, 2), datetime(2024, 1, 2, tzinfo=timezone.utc)),
])
def test_parse_date(value, expected):
    assert parse_date(value) == expected

def test_wire_form():
    record = EmailRecord(id="1", date=NOW, classification="IMPORTANT", is_important=True)
    data = record.to_json()
    assert data == {
        "id": "1",
        "subject": "No Subject",
        "sender": "Unknown Sender",
        "content": "No content available",
        "date": "2024-05-01T08:00:00+00:00",
        "classification": "IMPORTANT",
        "isImportant": True,
        "isRead": False,
    }
    assert EmailRecord.from_json(data) == record

@pytest.mark.parametrize("raw", ["Tue Jan 02 2024", "yesterday", 10 ** 20])
def test_unparseable_date_falls_back_to_now(raw, caplog):
    record = EmailRecord.from_document("abc", {"subject": "Hi", "date": raw}, now=NOW)
    assert record.date == NOW
    assert record.subject == "Hi"
    assert "Unparseable date" in caplog.text

def test_naive_date_taken_as_utc():
    record = EmailRecord(id="1", date=datetime(2024, 1, 2))
    assert record.date == datetime(2024, 1, 2, tzinfo=timezone.utc)

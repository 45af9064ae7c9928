import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

IMPORTANT = "IMPORTANT"
NOT_IMPORTANT = "NOT_IMPORTANT"

DEFAULT_SUBJECT = "No Subject"
DEFAULT_SENDER = "Unknown Sender"
DEFAULT_CONTENT = "No content available"

logger = logging.getLogger(__name__)

@dataclass
class EmailRecord:
    id: str
    subject: str = DEFAULT_SUBJECT
    sender: str = DEFAULT_SENDER
    content: str = DEFAULT_CONTENT
    date: Optional[datetime] = None
    classification: Optional[str] = None
    is_important: bool = False
    is_read: bool = False

    def __post_init__(self):
        if self.date is not None and self.date.tzinfo is None:
            self.date = self.date.replace(tzinfo=timezone.utc)

    @classmethod
    def from_document(cls, doc_id: str, doc: Dict[str, Any], now: Optional[datetime] = None) -> "EmailRecord":
        """
        Builds a record from a raw stored document, filling defaults for missing fields.
        Legacy keys `from`, `body` and `timestamp` are honoured.
        """
        raw_date = doc.get("timestamp") or doc.get("date")
        date = None
        if raw_date:
            try:
                date = parse_date(raw_date)
            except (ValueError, OverflowError, OSError):
                logger.warning(f"⚠️ Unparseable date {raw_date!r} on email {doc_id}, using current time")
        return cls(
            id=doc_id,
            subject=doc.get("subject") or DEFAULT_SUBJECT,
            sender=doc.get("sender") or doc.get("from") or DEFAULT_SENDER,
            content=doc.get("content") or doc.get("body") or DEFAULT_CONTENT,
            date=date or now or datetime.now(timezone.utc),
            classification=doc.get("classification") or None,
            is_important=doc.get("isImportant") is True,
            is_read=doc.get("isRead") is True,
        )

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "EmailRecord":
        """Parses the wire form returned by `GET /emails`."""
        return cls.from_document(str(data.get("id") or data.get("_id")), data)

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "subject": self.subject,
            "sender": self.sender,
            "content": self.content,
            "date": self.date.isoformat() if self.date else None,
            "classification": self.classification,
            "isImportant": self.is_important,
            "isRead": self.is_read,
        }


def parse_date(value: Any) -> datetime:
    """Accepts datetimes, ISO strings (with a trailing Z) and epoch numbers. Naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        # epoch milliseconds are what JS producers write
        seconds = value / 1000 if value > 1e11 else value
        parsed = datetime.fromtimestamp(seconds, tz=timezone.utc)
    else:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

from dataclasses import dataclass, replace
from enum import Enum

from mailtriage.lib.shared.models.email import EmailRecord, IMPORTANT, NOT_IMPORTANT

class Bucket(Enum):
    IMPORTANT = "important"
    REGULAR = "regular"

@dataclass(frozen=True)
class ImportancePatch:
    is_important: bool
    classification: str

    def to_json(self) -> dict:
        return {"isImportant": self.is_important, "classification": self.classification}


def is_important(record: EmailRecord) -> bool:
    """
    A record is important if either of its two importance fields says so.
    Externally ingested records may have only one of them set, so both are read.
    """
    classification = record.classification or ""
    return classification.upper() == IMPORTANT or record.is_important is True

def is_regular(record: EmailRecord) -> bool:
    return not is_important(record)

def in_bucket(record: EmailRecord, bucket: Bucket) -> bool:
    if bucket == Bucket.IMPORTANT:
        return is_important(record)
    return is_regular(record)

def toggle_importance(record: EmailRecord) -> ImportancePatch:
    """Returns the write that moves `record` to the other bucket. Both fields are always set together."""
    current = is_important(record)
    return ImportancePatch(
        is_important=not current,
        classification=NOT_IMPORTANT if current else IMPORTANT,
    )

def apply_importance(record: EmailRecord, patch: ImportancePatch) -> EmailRecord:
    return replace(record, is_important=patch.is_important, classification=patch.classification)

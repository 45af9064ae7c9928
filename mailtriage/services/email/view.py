from datetime import datetime, timezone
from typing import Dict, Iterable, List

from mailtriage.lib.shared.models.email import EmailRecord
from mailtriage.services.email.classification import Bucket, in_bucket

VIEW_TITLES = {
    Bucket.IMPORTANT: "Important Emails",
    Bucket.REGULAR: "Regular Emails",
}

PREVIEW_LENGTH = 40

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def matches_query(record: EmailRecord, query: str) -> bool:
    """Case-insensitive substring match over subject, sender, content and classification."""
    needle = query.lower()
    fields = (record.subject, record.sender, record.content, record.classification)
    return any(needle in field.lower() for field in fields if field)

def filter_view(records: Iterable[EmailRecord], bucket: Bucket, query: str = "") -> List[EmailRecord]:
    """
    Produces the visible list for one bucket: bucket partition, then search, then
    newest first. Python's sort is stable, so records with equal dates keep their
    input order. The input is never mutated.
    """
    visible = [r for r in records if in_bucket(r, bucket)]

    query = (query or "").strip()
    if query:
        visible = [r for r in visible if matches_query(r, query)]

    visible.sort(key=lambda r: r.date or _OLDEST, reverse=True)
    return visible

def bucket_counts(records: Iterable[EmailRecord]) -> Dict[Bucket, int]:
    # Badge counts ignore the search text
    counts = {bucket: 0 for bucket in Bucket}
    for record in records:
        bucket = Bucket.IMPORTANT if in_bucket(record, Bucket.IMPORTANT) else Bucket.REGULAR
        counts[bucket] += 1
    return counts

def view_title(bucket: Bucket) -> str:
    return VIEW_TITLES[bucket]

def preview(content: str, limit: int = PREVIEW_LENGTH) -> str:
    if len(content) > limit:
        return content[:limit] + "..."
    return content

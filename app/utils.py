import html
import re
from datetime import datetime, timezone
from typing import Optional

_TAG_RE = re.compile(r"<[^>]*>")


def sanitize_text(value: Optional[str]) -> str:
    """Strip HTML tags and surrounding whitespace, then escape what is left."""
    if not value:
        return ""
    return html.escape(_TAG_RE.sub("", value).strip(), quote=True)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values are taken as UTC."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

"""Shared timestamp parsing and display helpers."""
from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_datetime_token(token: str) -> datetime | None:
    cleaned = token.strip()
    if not cleaned:
        return None
    try:
        return datetime.fromisoformat(cleaned.replace("Z", "+00:00"))
    except ValueError:
        pass
    for fmt in ("%Y/%m/%d", "%m/%d/%Y", "%Y-%m-%d %H:%M:%S"):
        try:
            return datetime.strptime(cleaned, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


def parse_iso_datetime(value: Any) -> datetime | None:
    """Parse a transcript timestamp into an aware UTC datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        token = value.strip()
        if _DATE_ONLY_RE.match(token):
            try:
                dt = datetime.combine(date.fromisoformat(token), datetime.min.time())
            except ValueError:
                return None
        else:
            parsed = _parse_datetime_token(token)
            if parsed is None:
                return None
            dt = parsed
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def iso_to_epoch(value: Any) -> float:
    """Epoch seconds for *value*; unparsable or missing values map to 0.0."""
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return 0.0
    return parsed.timestamp()


def format_display_date(value: Any) -> str:
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return ""
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"


def format_display_time(value: Any) -> str:
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return ""
    return parsed.strftime("%H:%M")

"""Parsing helpers for race result text: durations, paces, dates, placements.

Every parser here is total: malformed input degrades to 0 / None instead of
raising, so one bad field never blocks a batch.
"""

import math
import re
from datetime import date, datetime

UNKNOWN_MARKERS = {"", "--"}

DATE_FORMATS = (
    "%B %d, %Y",    # March 20, 2025
    "%b %d, %Y",    # Mar 20, 2025
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%d %B %Y",
    "%B %d %Y",
)

PLACEMENT_RE = re.compile(r'^\s*(\d+)\s*(?:of|/)\s*(\d+)\s*$', re.IGNORECASE)
RANK_ONLY_RE = re.compile(r'^\s*(\d+)\s*$')
SEPT_RE = re.compile(r"\bSept\b", re.IGNORECASE)


def _split_numeric(text) -> list[float] | None:
    """Split 'A:B[:C]' into floats, or None if any part is not a number."""
    if text is None:
        return None
    text = str(text).strip()
    if text in UNKNOWN_MARKERS:
        return None
    try:
        parts = [float(p) for p in text.split(":")]
    except ValueError:
        return None
    if any(not math.isfinite(p) or p < 0 for p in parts):
        return None
    return parts


def parse_duration(text) -> float:
    """Convert 'H:MM:SS' or 'MM:SS' to total minutes (2 decimals); 0 if unknown."""
    parts = _split_numeric(text)
    if parts is None:
        return 0
    if len(parts) == 3:
        minutes = parts[0] * 60 + parts[1] + parts[2] / 60
    elif len(parts) == 2:
        minutes = parts[0] + parts[1] / 60
    else:
        return 0
    if not math.isfinite(minutes):
        return 0
    return round(minutes, 2)


def parse_pace(text) -> float:
    """Convert pace 'MM:SS' to seconds per mile; 0 if unknown."""
    parts = _split_numeric(text)
    if parts is None or len(parts) != 2:
        return 0
    seconds = parts[0] * 60 + parts[1]
    return seconds if math.isfinite(seconds) else 0


def parse_date(value) -> datetime | None:
    """Best-effort parse of a race date. Returns None when unparsable."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = " ".join(value.replace(".", "").split())
    if not text:
        return None
    text = SEPT_RE.sub("Sep", text)
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    # ISO date-times, e.g. "2024-03-05T08:00:00" or "2024-03-05 08:00:00+00:00"
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def parse_placement(text) -> tuple[int, int | None] | None:
    """Parse '3 of 120' or '3/120' into (rank, total).

    A bare rank ('3') gives (3, None). Anything else returns None.
    """
    if text is None:
        return None
    text = str(text)
    m = PLACEMENT_RE.match(text)
    if m:
        return int(m.group(1)), int(m.group(2))
    m = RANK_ONLY_RE.match(text)
    if m:
        return int(m.group(1)), None
    return None


def format_duration(minutes: float) -> str:
    """Format minutes as 'H:MM:SS', or 'MM:SS' under an hour."""
    total = int(round((minutes or 0) * 60))
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


def format_pace(seconds_per_mile: float) -> str:
    """Format pace as 'M:SS'; '--' when unknown."""
    if not seconds_per_mile:
        return "--"
    m, s = divmod(int(round(seconds_per_mile)), 60)
    return f"{m}:{s:02d}"

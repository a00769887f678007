"""Turn raw race records into the canonical, categorized record set."""

import hashlib
from collections.abc import Mapping
from datetime import datetime

from racelog.categorize import DEFAULT_TABLE, DEFAULT_RULES, categorize
from racelog.models import NormalizedRecord, RawRecord
from racelog.parsing import parse_date, parse_duration, parse_pace


def _coerce(raw) -> RawRecord:
    if isinstance(raw, RawRecord):
        # Same cleanup as mapping input: None text becomes "", year must be int-like
        return RawRecord.from_dict({**raw.to_dict(), "id": raw.id})
    if isinstance(raw, Mapping):
        return RawRecord.from_dict(raw)
    return RawRecord()


def _synthetic_id(index: int, raw: RawRecord) -> str:
    """Positional id with a content token, stable across reprocessing."""
    key = "|".join((raw.event, raw.date, raw.location, raw.time))
    token = hashlib.sha1(key.encode("utf-8")).hexdigest()[:8]
    return f"race-{index}-{token}"


def normalize_record(raw, index: int = 0, *, table=DEFAULT_TABLE,
                     rules=DEFAULT_RULES) -> NormalizedRecord:
    """Normalize a single raw record (mapping or RawRecord)."""
    rec = _coerce(raw)
    category, label, miles = categorize(
        rec.event, rec.time, rec.pace, rec.distance_type, table=table, rules=rules,
    )
    return NormalizedRecord(
        id=rec.id or _synthetic_id(index, rec),
        event=rec.event,
        date=rec.date,
        location=rec.location,
        time=rec.time,
        pace=rec.pace,
        overall=rec.overall,
        gender=rec.gender,
        division=rec.division,
        year=rec.year,
        distance_type=rec.distance_type,
        parsed_date=parse_date(rec.date),
        pace_seconds=parse_pace(rec.pace),
        total_minutes=parse_duration(rec.time),
        category=category,
        distance_label=label,
        distance_miles=miles,
    )


def _recency_key(record: NormalizedRecord) -> datetime:
    # Unparsable dates sort as oldest, so they land at the end
    return record.parsed_date or datetime.min


def normalize(raw_records, *, table=DEFAULT_TABLE, rules=DEFAULT_RULES) -> list[NormalizedRecord]:
    """Normalize every record and sort most recent first.

    One output per input, never raises on malformed records. Records with
    equal (or unparsable) dates keep their input order.
    """
    records = [
        normalize_record(raw, i, table=table, rules=rules)
        for i, raw in enumerate(raw_records)
    ]
    return sorted(records, key=_recency_key, reverse=True)

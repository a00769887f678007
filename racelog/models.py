from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Optional


class RaceCategory(str, Enum):
    ULTRA_100_MILE = "100 Miler"
    ULTRA_50_MILE = "50 Miler"
    ULTRA_50_K = "50K"
    MARATHON = "Marathon"
    METRIC_MARATHON = "Metric Marathon"
    HALF = "Half Marathon"
    TEN_MILE = "10 Miler"
    TEN_K = "10K"
    EIGHT_K = "8K"
    FIVE_MILE = "5 Miler"
    FIVE_K = "5K"
    TWO_MILE = "2 Miler"
    THREE_K = "3K"
    ONE_MILE = "1 Mile"
    OTHER = "Other"


ULTRA_CATEGORIES = frozenset({
    RaceCategory.ULTRA_50_K,
    RaceCategory.ULTRA_50_MILE,
    RaceCategory.ULTRA_100_MILE,
})

# Source keys that differ from our field names
_RAW_ALIASES = {
    "distanceType": "distance_type",
}


@dataclass
class RawRecord:
    event: str = ""
    date: str = ""
    location: str = ""
    time: str = ""
    pace: str = ""
    overall: str = ""
    gender: str = ""
    division: str = ""
    year: Optional[int] = None
    distance_type: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "RawRecord":
        """Build a RawRecord from a loosely shaped mapping.

        Unknown keys are ignored, None text fields become "" and the year is
        kept only when it is an integer-like value.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            key = _RAW_ALIASES.get(key, key)
            if key in known:
                values[key] = value

        for name in ("event", "date", "location", "time", "pace",
                     "overall", "gender", "division"):
            value = values.get(name)
            values[name] = "" if value is None else str(value).strip()

        year = values.get("year")
        try:
            values["year"] = int(year) if year not in (None, "") else None
        except (ValueError, TypeError, OverflowError):
            values["year"] = None

        distance_type = values.get("distance_type")
        values["distance_type"] = str(distance_type).strip() if distance_type else None

        record_id = values.get("id")
        values["id"] = str(record_id) if record_id not in (None, "") else None

        return cls(**values)

    def to_dict(self) -> dict:
        return {
            "event": self.event,
            "date": self.date,
            "location": self.location,
            "time": self.time,
            "pace": self.pace,
            "overall": self.overall,
            "gender": self.gender,
            "division": self.division,
            "year": self.year,
            "distance_type": self.distance_type,
        }


@dataclass(frozen=True)
class NormalizedRecord:
    id: str
    event: str
    date: str
    location: str
    time: str
    pace: str
    overall: str
    gender: str
    division: str
    year: Optional[int]
    distance_type: Optional[str]
    parsed_date: Optional[datetime]
    pace_seconds: float
    total_minutes: float
    category: RaceCategory
    distance_label: str
    distance_miles: float

    @property
    def race_year(self) -> Optional[int]:
        """Recorded year, falling back to the parsed date's year."""
        if self.year is not None:
            return self.year
        if self.parsed_date is not None:
            return self.parsed_date.year
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "event": self.event,
            "date": self.date,
            "location": self.location,
            "time": self.time,
            "pace": self.pace,
            "overall": self.overall,
            "gender": self.gender,
            "division": self.division,
            "year": self.year,
            "distance_type": self.distance_type,
            "parsed_date": self.parsed_date.strftime("%Y-%m-%d") if self.parsed_date else None,
            "pace_seconds": self.pace_seconds,
            "total_minutes": self.total_minutes,
            "category": self.category.value,
            "distance_label": self.distance_label,
            "distance_miles": self.distance_miles,
        }

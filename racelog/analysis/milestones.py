"""Journey milestones: firsts, mileage clubs, and race-count landmarks."""

from dataclasses import dataclass
from datetime import datetime

from racelog.models import RaceCategory, ULTRA_CATEGORIES

MILE_MARKERS = (100, 500, 1000, 2000, 5000)
RACE_COUNT_MARKERS = {50: "50th Race", 100: "100th Race Hall of Fame"}


@dataclass
class Milestone:
    kind: str
    title: str
    date: str
    event_name: str
    parsed_date: datetime

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "title": self.title,
            "date": self.date,
            "event_name": self.event_name,
        }


def find_milestones(records) -> list[Milestone]:
    """Walk races oldest-first and collect milestones, returned newest first.

    Races without a parseable date are skipped since they can't be placed
    on the timeline.
    """
    dated = sorted((r for r in records if r.parsed_date is not None),
                   key=lambda r: r.parsed_date)
    if not dated:
        return []

    first = dated[0]
    milestones = [Milestone("first_race", "The Journey Begins", first.date,
                            first.event, first.parsed_date)]

    total_miles = 0.0
    reached = set()
    seen = set()

    for index, race in enumerate(dated, start=1):
        total_miles += race.distance_miles

        for marker in MILE_MARKERS:
            if total_miles >= marker and marker not in reached:
                reached.add(marker)
                milestones.append(Milestone(
                    "mileage", f"{marker} Mile Club", race.date,
                    f"Crossed at {race.event}", race.parsed_date,
                ))

        if race.category == RaceCategory.HALF and "half" not in seen:
            seen.add("half")
            milestones.append(Milestone("first_half", "First Half Marathon", race.date,
                                        race.event, race.parsed_date))
        if race.category == RaceCategory.MARATHON and "marathon" not in seen:
            seen.add("marathon")
            milestones.append(Milestone("first_marathon", "First Marathon", race.date,
                                        race.event, race.parsed_date))
        if race.category in ULTRA_CATEGORIES and "ultra" not in seen:
            seen.add("ultra")
            milestones.append(Milestone("first_ultra", "Ultra Runner Status", race.date,
                                        race.event, race.parsed_date))

        if index in RACE_COUNT_MARKERS:
            milestones.append(Milestone("race_count", RACE_COUNT_MARKERS[index], race.date,
                                        race.event, race.parsed_date))

    # Stable sort keeps same-day milestones in discovery order
    return sorted(milestones, key=lambda m: m.parsed_date, reverse=True)

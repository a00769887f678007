"""Aggregate statistics over normalized race records.

Every function takes a list of NormalizedRecord and returns plain
dicts/lists ready for JSON. Pace and duration of 0 mean "unknown" and are
left out of averages and bests.
"""

from collections import Counter
from datetime import datetime

from racelog.models import RaceCategory
from racelog.parsing import format_pace, parse_placement

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# Shortest to longest, for personal bests display
DISTANCE_ORDER = [
    RaceCategory.ONE_MILE,
    RaceCategory.THREE_K,
    RaceCategory.TWO_MILE,
    RaceCategory.FIVE_K,
    RaceCategory.FIVE_MILE,
    RaceCategory.EIGHT_K,
    RaceCategory.TEN_K,
    RaceCategory.TEN_MILE,
    RaceCategory.HALF,
    RaceCategory.METRIC_MARATHON,
    RaceCategory.MARATHON,
    RaceCategory.ULTRA_50_K,
    RaceCategory.ULTRA_50_MILE,
    RaceCategory.ULTRA_100_MILE,
]

PODIUM_RANK = 3


def summarize(records) -> dict:
    """Headline numbers: total races, total miles, avg distance, avg pace."""
    total_races = len(records)
    if total_races == 0:
        return {"total_races": 0, "total_miles": 0.0, "avg_distance": 0.0,
                "avg_pace_s": 0, "avg_pace": "--"}

    total_miles = sum(r.distance_miles for r in records)
    paces = [r.pace_seconds for r in records if r.pace_seconds > 0]
    avg_pace = round(sum(paces) / len(paces), 1) if paces else 0

    return {
        "total_races": total_races,
        "total_miles": round(total_miles, 1),
        "avg_distance": round(total_miles / total_races, 1),
        "avg_pace_s": avg_pace,
        "avg_pace": format_pace(avg_pace),
    }


def distance_counts(records) -> list[tuple[str, int]]:
    """(distance_label, count) pairs, most raced first."""
    counts = Counter(r.distance_label for r in records)
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))


def personal_bests(records) -> list[dict]:
    """Fastest known finish per category, shortest distance first."""
    bests = []
    for category in DISTANCE_ORDER:
        timed = [r for r in records if r.category == category and r.total_minutes > 0]
        if not timed:
            continue
        pb = min(timed, key=lambda r: r.total_minutes)
        bests.append({
            "category": pb.distance_label,
            "time": pb.time,
            "total_minutes": pb.total_minutes,
            "pace": pb.pace,
            "event": pb.event,
            "date": pb.date,
            "id": pb.id,
        })
    return bests


def is_podium(record) -> bool:
    """True when any placement (division, gender, overall) is top three."""
    for text in (record.division, record.gender, record.overall):
        placement = parse_placement(text)
        if placement and 1 <= placement[0] <= PODIUM_RANK:
            return True
    return False


def fun_stats(records) -> dict:
    """Total time racing, favorite month, podium finishes, unique cities."""
    total_minutes = sum(r.total_minutes for r in records)
    days, rem = divmod(int(total_minutes), 24 * 60)
    hours = rem // 60

    months = Counter(MONTH_NAMES[r.parsed_date.month - 1]
                     for r in records if r.parsed_date is not None)
    favorite = months.most_common(1)

    cities = {r.location.split(",")[0].strip().lower()
              for r in records if r.location.strip()}

    return {
        "total_minutes": round(total_minutes, 2),
        "time_racing_days": days,
        "time_racing_hours": hours,
        "favorite_month": favorite[0][0] if favorite else None,
        "favorite_month_races": favorite[0][1] if favorite else 0,
        "podium_finishes": sum(1 for r in records if is_podium(r)),
        "unique_cities": len(cities),
    }


def races_per_year(records) -> list[dict]:
    counts = Counter(r.race_year for r in records if r.race_year is not None)
    return [{"year": y, "count": counts[y]} for y in sorted(counts)]


def miles_per_year(records) -> list[dict]:
    miles = {}
    for r in records:
        if r.race_year is None:
            continue
        miles[r.race_year] = miles.get(r.race_year, 0) + r.distance_miles
    return [{"year": y, "miles": round(miles[y], 1)} for y in sorted(miles)]


def races_per_month(records) -> list[dict]:
    """Race count for each calendar month (all years combined)."""
    counts = Counter(r.parsed_date.month for r in records if r.parsed_date is not None)
    return [{"month": MONTH_NAMES[m - 1][:3], "races": counts.get(m, 0)}
            for m in range(1, 13)]


def cumulative_miles(records) -> list[dict]:
    """Running mileage total in chronological order (dated races only)."""
    dated = sorted((r for r in records if r.parsed_date is not None),
                   key=lambda r: r.parsed_date)
    total = 0.0
    points = []
    for r in dated:
        total += r.distance_miles
        points.append({
            "date": r.parsed_date.strftime("%Y-%m-%d"),
            "event": r.event,
            "total_miles": round(total, 1),
        })
    return points


def avg_pace_by_distance(records) -> list[dict]:
    """Average known pace per distance label, shortest distance first."""
    groups: dict[str, dict] = {}
    for r in records:
        if r.pace_seconds <= 0:
            continue
        g = groups.setdefault(r.distance_label,
                              {"sum": 0.0, "count": 0, "distance": r.distance_miles})
        g["sum"] += r.pace_seconds
        g["count"] += 1

    rows = []
    for label, g in groups.items():
        avg = g["sum"] / g["count"]
        rows.append({
            "label": label,
            "distance_miles": g["distance"],
            "avg_pace_s": round(avg, 1),
            "avg_pace": format_pace(avg),
            "races": g["count"],
        })
    return sorted(rows, key=lambda row: row["distance_miles"])


def year_to_date_miles(records, today: datetime, years: int = 5) -> list[dict]:
    """Race miles logged by today's day-of-year, for the most recent years.

    Lets the current season be compared with the same point in past ones.
    """
    cutoff = today.timetuple().tm_yday
    by_year: dict[int, float] = {}
    for r in records:
        if r.parsed_date is None:
            continue
        year = r.parsed_date.year
        by_year.setdefault(year, 0.0)
        if r.parsed_date.timetuple().tm_yday <= cutoff:
            by_year[year] += r.distance_miles

    recent = sorted(by_year, reverse=True)[:years]
    return [{"year": y, "miles": round(by_year[y], 1)} for y in recent]

"""Race distance categorization from free-form event names.

Resolves an event to a (category, label, distance_miles) triple with an
ordered rule cascade, checked in this order, first match wins:

  1. Manual override (a curated category label)
  2. Named events whose titles don't follow distance conventions
  3. Combined race weekends (marathon + half under one name), split by
     finish time
  4. Ultra keywords, longest distance first
  5. Generic distance keywords, longest distance first
  6. Fallback: Other, 5 miles

Rule order is load-bearing. A generic keyword rule placed ahead of a named
event would shadow it, so new exceptions go where they are checked before
the rule they override.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, NamedTuple

from racelog.models import RaceCategory
from racelog.parsing import parse_duration

AUTO_DETECT = "Auto Detect"

DISTANCE_MILES = {
    RaceCategory.ULTRA_100_MILE: 100,
    RaceCategory.ULTRA_50_MILE: 50,
    RaceCategory.ULTRA_50_K: 31.07,
    RaceCategory.MARATHON: 26.2,
    RaceCategory.METRIC_MARATHON: 16.3,
    RaceCategory.HALF: 13.1,
    RaceCategory.TEN_MILE: 10,
    RaceCategory.TEN_K: 6.2,
    RaceCategory.EIGHT_K: 4.97,
    RaceCategory.FIVE_MILE: 5,
    RaceCategory.FIVE_K: 3.1,
    RaceCategory.TWO_MILE: 2.0,
    RaceCategory.THREE_K: 1.86,
    RaceCategory.ONE_MILE: 1.0,
    RaceCategory.OTHER: 0,
}

FALLBACK_LABEL = "Other"
FALLBACK_MILES = 5

# Heuristic 50K matches carry 31.1 mi; the table value (31.07) applies to overrides.
ULTRA_50_K_MILES = 31.1

# Finish-time splits (minutes) for events hosting two distances under one name
ROCK_N_ROLL_USA_MARATHON_MIN = 150
HAMPTONS_MARATHON_MIN = 150
POLICE_CHALLENGE_50K_MIN = 120
B_AND_A_MARATHON_MIN = 140
BALTIMORE_FESTIVAL_MARATHON_MIN = 145
COMBINED_MARATHON_HALF_MIN = 150


class Resolution(NamedTuple):
    category: RaceCategory
    label: str
    distance_miles: float


class CategoryTable:
    """Immutable category -> canonical miles lookup.

    Every RaceCategory member must be present.
    """

    def __init__(self, miles: dict):
        missing = [c.value for c in RaceCategory if c not in miles]
        if missing:
            raise ValueError(f"Category table missing: {', '.join(missing)}")
        self._miles = MappingProxyType({RaceCategory(k): v for k, v in miles.items()})

    @property
    def miles(self):
        return self._miles

    def lookup(self, value) -> RaceCategory | None:
        """Return the category for a label like '10K', or None."""
        try:
            category = RaceCategory(value)
        except ValueError:
            return None
        return category if category in self._miles else None

    def resolve(self, category: RaceCategory) -> Resolution:
        return Resolution(category, category.value, self._miles[category])


DEFAULT_TABLE = CategoryTable(DISTANCE_MILES)


@dataclass(frozen=True)
class RaceContext:
    event: str          # lowercased event name
    minutes: float      # parsed finish time, 0 if unknown


@dataclass(frozen=True)
class Rule:
    name: str
    stage: str
    predicate: Callable[[RaceContext], bool]
    resolve: Callable[[RaceContext, CategoryTable], Resolution]


# ── Predicate / resolver builders ───────────────────────────────────

def _contains(*needles: str):
    return lambda ctx: any(n in ctx.event for n in needles)


def _contains_all(*needles: str):
    return lambda ctx: all(n in ctx.event for n in needles)


def _fixed(category: RaceCategory, miles: float | None = None):
    def resolve(ctx, table):
        res = table.resolve(category)
        if miles is not None:
            return res._replace(distance_miles=miles)
        return res
    return resolve


def _exception(label: str, miles: float):
    return lambda ctx, table: Resolution(RaceCategory.OTHER, label, miles)


def _by_time(threshold_min: float, long: RaceCategory, short: RaceCategory,
             long_miles: float | None = None):
    """Pick `long` when the finish time exceeds the threshold, else `short`."""
    long_resolve = _fixed(long, long_miles)
    short_resolve = _fixed(short)

    def resolve(ctx, table):
        if ctx.minutes > threshold_min:
            return long_resolve(ctx, table)
        return short_resolve(ctx, table)
    return resolve


def _marathon_or_half(threshold_min: float):
    return _by_time(threshold_min, RaceCategory.MARATHON, RaceCategory.HALF)


def _baltimore_festival(ctx, table):
    if "half" in ctx.event:
        return table.resolve(RaceCategory.HALF)
    return _marathon_or_half(BALTIMORE_FESTIVAL_MARATHON_MIN)(ctx, table)


def _hundred_miler(ctx):
    return "100" in ctx.event and any(
        k in ctx.event for k in ("mile", "endurance", "vermont"))


def _bare_mile(ctx):
    # "mile" alone, so 10 Mile / 5 Mile / 50 Mile / 100 Mile aren't read as 1 Mile
    return "mile" in ctx.event and not any(
        n in ctx.event for n in ("10", "5", "50", "100"))


NAMED = "named_event"
COMBINED = "combined_weekend"
EXCEPTION = "fixed_distance"
ULTRA = "ultra"
GENERIC = "generic"

DEFAULT_RULES = (
    Rule("club_challenge", NAMED, _contains("club challenge"), _fixed(RaceCategory.TEN_MILE)),
    Rule("turkey_burnoff", NAMED, _contains("turkey burnoff"), _fixed(RaceCategory.TEN_MILE)),
    Rule("jingle_bell_jog", NAMED, _contains("jingle bell jog"), _fixed(RaceCategory.EIGHT_K)),
    Rule("warrior_dash", NAMED, _contains("warrior dash"), _fixed(RaceCategory.FIVE_K)),
    Rule("june_bugs_xc", NAMED, _contains("june bugs cross country"), _fixed(RaceCategory.FIVE_K)),
    Rule("kensington_parkrun", NAMED, _contains("kensington parkrun"), _fixed(RaceCategory.FIVE_K)),
    Rule("damiens_run", NAMED, _contains("damien's run"), _fixed(RaceCategory.FIVE_K)),
    Rule("rotary_remembrance", NAMED, _contains("rotary remembrance run"), _fixed(RaceCategory.FIVE_K)),
    Rule("going_green_track_meet", NAMED, _contains("going green track meet"), _fixed(RaceCategory.TWO_MILE)),
    Rule("firebirds_mile", NAMED, _contains("firebirds mile"), _fixed(RaceCategory.ONE_MILE)),
    Rule("piece_of_cake", NAMED, _contains("piece of cake"), _fixed(RaceCategory.TEN_K)),
    Rule("rock_n_roll_usa", COMBINED, _contains("rock n roll usa", "rock 'n' roll usa"),
         _marathon_or_half(ROCK_N_ROLL_USA_MARATHON_MIN)),
    Rule("hamptons_marathon", COMBINED, _contains("hamptons marathon"),
         _marathon_or_half(HAMPTONS_MARATHON_MIN)),
    Rule("seneca_slopes_9k", EXCEPTION, _contains("seneca slopes 9k"), _exception("9K", 5.59)),
    Rule("seneca_slopes_8_5k", EXCEPTION, _contains("seneca slopes 8.5k"), _exception("8.5K", 5.28)),
    Rule("national_police_challenge", COMBINED, _contains("national police challenge", "npc"),
         _by_time(POLICE_CHALLENGE_50K_MIN, RaceCategory.ULTRA_50_K, RaceCategory.FIVE_K,
                  long_miles=ULTRA_50_K_MILES)),
    Rule("country_road_run", NAMED, _contains("country road run"), _fixed(RaceCategory.FIVE_MILE)),
    Rule("ymca_turkey_chase", NAMED, _contains_all("ymca", "turkey chase"), _fixed(RaceCategory.TEN_K)),
    Rule("baltimore_annapolis", COMBINED, _contains("baltimore and annapolis", "b&a", "b & a"),
         _marathon_or_half(B_AND_A_MARATHON_MIN)),
    Rule("baltimore_running_festival", COMBINED, _contains("baltimore running festival"),
         _baltimore_festival),
    Rule("ultra_100_mile", ULTRA, _hundred_miler, _fixed(RaceCategory.ULTRA_100_MILE)),
    Rule("ultra_50_mile", ULTRA, _contains("50 mile", "50 mi", "jfk"), _fixed(RaceCategory.ULTRA_50_MILE)),
    Rule("ultra_50k", ULTRA, _contains("50k", "50 k", "endurance challenge"),
         _fixed(RaceCategory.ULTRA_50_K, ULTRA_50_K_MILES)),
    Rule("metric_marathon", GENERIC, _contains("metric marathon"), _fixed(RaceCategory.METRIC_MARATHON)),
    Rule("marathon_and_half", GENERIC, _contains_all("marathon", "half"),
         _marathon_or_half(COMBINED_MARATHON_HALF_MIN)),
    Rule("half", GENERIC, _contains("half"), _fixed(RaceCategory.HALF)),
    Rule("marathon", GENERIC, _contains("marathon"), _fixed(RaceCategory.MARATHON)),
    Rule("ten_mile", GENERIC, _contains("10 mile", "10-mile", "10m", "cherry blossom", "army ten"),
         _fixed(RaceCategory.TEN_MILE)),
    Rule("ten_k", GENERIC, _contains("10k"), _fixed(RaceCategory.TEN_K)),
    Rule("eight_k", GENERIC, _contains("8k"), _fixed(RaceCategory.EIGHT_K)),
    Rule("five_mile", GENERIC, _contains("5 mile", "5-miler"), _fixed(RaceCategory.FIVE_MILE)),
    Rule("five_k", GENERIC, _contains("5k"), _fixed(RaceCategory.FIVE_K)),
    Rule("three_k", GENERIC, _contains("3k"), _fixed(RaceCategory.THREE_K)),
    Rule("two_mile", GENERIC, _contains("2 miler", "2 mile"), _fixed(RaceCategory.TWO_MILE)),
    Rule("one_mile", GENERIC, _bare_mile, _fixed(RaceCategory.ONE_MILE)),
)


# ── Public API ──────────────────────────────────────────────────────

def _override(manual_override, table: CategoryTable) -> RaceCategory | None:
    if manual_override is None:
        return None
    value = getattr(manual_override, "value", manual_override)
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value == AUTO_DETECT:
        return None
    return table.lookup(value)


def _match(event, time_text, manual_override, table, rules):
    """Return (rule_name, Resolution) for the first matching rule."""
    category = _override(manual_override, table)
    if category is not None:
        return "manual_override", table.resolve(category)

    ctx = RaceContext(
        event=str(event or "").lower(),
        minutes=parse_duration(time_text),
    )
    for rule in rules:
        if rule.predicate(ctx):
            return rule.name, rule.resolve(ctx, table)

    return "fallback", Resolution(RaceCategory.OTHER, FALLBACK_LABEL, FALLBACK_MILES)


def categorize(event, time_text, pace_text, manual_override=None, *,
               table: CategoryTable = DEFAULT_TABLE, rules=DEFAULT_RULES) -> Resolution:
    """Resolve an event to (category, label, distance_miles).

    pace_text is accepted for signature parity with the record fields;
    no current rule reads it.
    """
    return _match(event, time_text, manual_override, table, rules)[1]


def explain(event, time_text, pace_text, manual_override=None, *,
            table: CategoryTable = DEFAULT_TABLE, rules=DEFAULT_RULES) -> str:
    """Name of the rule that categorizes this event ('fallback' if none)."""
    return _match(event, time_text, manual_override, table, rules)[0]

#!/usr/bin/env python3
"""Report how stored races categorize, to spot events that need a rule.

Prints the count per rule and lists every race that falls through to the
fallback (Other, 5 mi) so a named-event rule or a manual distance type can
be added for it.

Usage:
    python scripts/report_categories.py [-v]
"""

import argparse
import sys
from collections import Counter
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from racelog.categorize import explain
from racelog.config import load_config
from racelog.db import get_connection, load_raw_records
from racelog.models import RawRecord


def main():
    parser = argparse.ArgumentParser(description="Report race categorization by rule")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="List every race with the rule that matched it")
    args = parser.parse_args()

    config = load_config()
    conn = get_connection(config)
    raw_records = [RawRecord.from_dict(r) for r in load_raw_records(conn)]
    conn.close()

    by_rule = Counter()
    unmatched = []
    for rec in raw_records:
        rule = explain(rec.event, rec.time, rec.pace, rec.distance_type)
        by_rule[rule] += 1
        if rule == "fallback":
            unmatched.append(rec)
        if args.verbose:
            print(f"  {rule:<28} {rec.date:<20} {rec.event}")

    print(f"\n{len(raw_records)} race(s) by rule:")
    for rule, count in by_rule.most_common():
        print(f"  {rule:<28} {count}")

    if unmatched:
        print(f"\n{len(unmatched)} race(s) fell back to Other (5 mi):")
        for rec in unmatched:
            print(f"  #{rec.id}  {rec.date:<20} {rec.event}  [{rec.time or '--'}]")


if __name__ == "__main__":
    main()

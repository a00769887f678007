import argparse
import sys


def _load_config_or_none():
    from racelog.config import load_config

    try:
        return load_config()
    except FileNotFoundError:
        return None


def _load_records(config):
    from racelog.db import get_connection, init_db, load_raw_records
    from racelog.normalize import normalize

    init_db(config)
    conn = get_connection(config)
    try:
        return normalize(load_raw_records(conn))
    finally:
        conn.close()


def cmd_db_init(args):
    from racelog.db import init_db

    db_path = init_db(_load_config_or_none())
    print(f"Database initialized at {db_path}")


def cmd_import(args):
    from racelog.config import load_config
    from racelog.db import init_db

    config = load_config()

    if not args.xlsx and not args.json:
        print("No import source specified. Use --xlsx or --json.")
        sys.exit(1)
    if args.xlsx and args.json and args.path:
        print("--path names a single file; import --xlsx and --json separately.")
        sys.exit(1)

    init_db(config)

    if args.xlsx:
        from racelog.ingest.xlsx_import import import_xlsx

        result = import_xlsx(config, path=args.path, dry_run=args.dry_run, verbose=args.verbose)
        _print_import_summary("XLSX", result, dry_run=args.dry_run)

    if args.json:
        from racelog.ingest.json_import import import_json

        result = import_json(config, path=args.path, dry_run=args.dry_run, verbose=args.verbose)
        _print_import_summary("JSON", result, dry_run=args.dry_run)


def _print_import_summary(kind: str, result: dict, dry_run: bool = False):
    prefix = "[DRY RUN] " if dry_run else ""

    if result.get("already_imported"):
        print(f"\n{prefix}{kind} already imported (file hash match). Nothing to do.")
        return

    print(f"\n{prefix}{kind} import complete:")
    print(f"  New:      {result['new']}")
    print(f"  Skipped:  {result['skipped']}")
    print(f"  Errors:   {result['errors']}")


def cmd_list(args):
    from racelog.config import load_config

    records = _load_records(load_config())

    if args.category:
        records = [r for r in records if r.category.value == args.category]
    if args.year:
        records = [r for r in records if r.race_year == args.year]
    if args.limit:
        records = records[:args.limit]

    if not records:
        print("No races found.")
        return

    for r in records:
        date_str = r.parsed_date.strftime("%Y-%m-%d") if r.parsed_date else "????-??-??"
        print(f"  {date_str}  {r.distance_label:<15} {r.distance_miles:>6.2f}mi  "
              f"{r.time or '--':>8}  {r.event}")
    print(f"\n{len(records)} race(s)")


def cmd_stats(args):
    from racelog.analysis.milestones import find_milestones
    from racelog.analysis.stats import distance_counts, fun_stats, personal_bests, summarize
    from racelog.config import load_config

    records = _load_records(load_config())
    summary = summarize(records)

    print("Racing summary:")
    print(f"  Races:         {summary['total_races']}")
    print(f"  Miles:         {summary['total_miles']:.1f}")
    print(f"  Avg distance:  {summary['avg_distance']:.1f} mi")
    print(f"  Avg pace:      {summary['avg_pace']}/mi")

    fun = fun_stats(records)
    print(f"  Time racing:   {fun['time_racing_days']}d {fun['time_racing_hours']}h")
    if fun["favorite_month"]:
        print(f"  Favorite month: {fun['favorite_month']} ({fun['favorite_month_races']} races)")
    print(f"  Podiums:       {fun['podium_finishes']}")
    print(f"  Cities:        {fun['unique_cities']}")

    counts = distance_counts(records)
    if counts:
        print("\nRaces by distance:")
        for label, count in counts:
            print(f"  {label:<15} {count}")

    bests = personal_bests(records)
    if bests:
        print("\nPersonal bests:")
        for pb in bests:
            print(f"  {pb['category']:<15} {pb['time']:>8}  {pb['event']} ({pb['date']})")

    found = find_milestones(records)
    if found and args.verbose:
        print("\nMilestones:")
        for m in found:
            print(f"  {m.date:<20} {m.title}: {m.event_name}")


def cmd_categorize(args):
    from racelog.categorize import categorize, explain
    from racelog.parsing import parse_duration

    category, label, miles = categorize(args.event, args.time, args.pace, args.distance_type)
    rule = explain(args.event, args.time, args.pace, args.distance_type)
    print(f"Event:     {args.event}")
    if args.time:
        print(f"Time:      {args.time} ({parse_duration(args.time)} min)")
    print(f"Category:  {category.value}")
    print(f"Label:     {label}")
    print(f"Distance:  {miles} mi")
    print(f"Rule:      {rule}")


def cmd_review(args):
    from racelog.config import load_config
    from racelog.review.app import create_app

    config = load_config()
    review_cfg = config.get("review") or {}
    host = args.host or review_cfg.get("host", "127.0.0.1")
    port = args.port or review_cfg.get("port", 5050)

    app = create_app(config)
    app.run(host=host, port=port, debug=args.debug)


def main():
    parser = argparse.ArgumentParser(prog="racelog", description="racelog — race history normalization")
    subparsers = parser.add_subparsers(dest="command")

    # db subcommand with its own subcommands
    db_parser = subparsers.add_parser("db", help="Database operations")
    db_sub = db_parser.add_subparsers(dest="db_command")
    db_init = db_sub.add_parser("init", help="Initialize the database schema")
    db_init.set_defaults(func=cmd_db_init)

    # import subcommand
    import_parser = subparsers.add_parser("import", help="Import race results")
    import_parser.add_argument("--xlsx", action="store_true", help="Import from a race results .xlsx")
    import_parser.add_argument("--json", action="store_true", help="Import from a JSON race export")
    import_parser.add_argument("--path", type=str, help="Input file (default: from config paths)")
    import_parser.add_argument("--dry-run", action="store_true", help="Show what would be imported without writing")
    import_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    import_parser.set_defaults(func=cmd_import)

    list_parser = subparsers.add_parser("list", help="List normalized races, most recent first")
    list_parser.add_argument("--category", type=str, help="Only this category (e.g. '10K')")
    list_parser.add_argument("--year", type=int, help="Only races from this year")
    list_parser.add_argument("--limit", type=int, help="Show at most N races")
    list_parser.set_defaults(func=cmd_list)

    stats_parser = subparsers.add_parser("stats", help="Show racing summary statistics")
    stats_parser.add_argument("-v", "--verbose", action="store_true", help="Include milestones")
    stats_parser.set_defaults(func=cmd_stats)

    cat_parser = subparsers.add_parser("categorize", help="Categorize a single event name")
    cat_parser.add_argument("event", type=str, help="Event name")
    cat_parser.add_argument("--time", type=str, default="", help="Finish time (H:MM:SS or MM:SS)")
    cat_parser.add_argument("--pace", type=str, default="", help="Pace (MM:SS)")
    cat_parser.add_argument("--distance-type", type=str, help="Manual category override")
    cat_parser.set_defaults(func=cmd_categorize)

    review_parser = subparsers.add_parser("review", help="Launch the review API")
    review_parser.add_argument("--host", type=str, help="Bind address")
    review_parser.add_argument("--port", type=int, help="Port")
    review_parser.add_argument("--debug", action="store_true", help="Flask debug mode")
    review_parser.set_defaults(func=cmd_review)

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)
    if args.command == "db" and not getattr(args, "db_command", None):
        db_parser.print_help()
        sys.exit(1)
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

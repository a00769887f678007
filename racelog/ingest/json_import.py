"""Import races from a JSON export (a list of race objects) into the racelog DB."""

import json
from pathlib import Path

from racelog.config import get_path
from racelog.db import get_connection
from racelog.ingest.xlsx_import import (
    ParsedRow,
    already_processed,
    compute_file_hash,
    insert_rows,
    record_processed,
)

SOURCE = "json"


def import_json(config: dict, path=None, dry_run: bool = False, verbose: bool = False) -> dict:
    """Import races from a JSON array file.

    Each element is a race object with the raw record keys (event, date,
    location, time, pace, overall, gender, division, year, distanceType).
    Returns dict with keys: new, skipped, errors, already_imported.
    """
    json_path = Path(path) if path else get_path(config, "json_import")
    if json_path is None:
        raise FileNotFoundError("No JSON path given and paths.json_import not configured")
    json_path = str(json_path.expanduser())

    if not Path(json_path).exists():
        raise FileNotFoundError(f"JSON file not found: {json_path}")

    with open(json_path) as f:
        data = json.load(f)
    if isinstance(data, dict) and isinstance(data.get("races"), list):
        data = data["races"]
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON list of races in {json_path}")

    conn = get_connection(config)

    file_hash = compute_file_hash(json_path)
    if already_processed(conn, file_hash, SOURCE):
        if verbose:
            print("JSON already imported (hash match). Skipping.")
        conn.close()
        return {"new": 0, "skipped": 0, "errors": 0, "already_imported": True}

    rows = []
    skipped = 0
    for i, item in enumerate(data, start=1):
        if not isinstance(item, dict) or not str(item.get("event") or "").strip():
            skipped += 1
            if verbose:
                print(f"  SKIP  item {i}: no event name")
            continue
        # Ids belong to the exporting store, not ours
        record = {k: v for k, v in item.items() if k != "id"}
        rows.append(ParsedRow(row_number=i, record=record))

    if verbose:
        print(f"Read {len(rows)} races from {json_path}, skipped {skipped}")

    result = insert_rows(conn, rows, SOURCE, dry_run, verbose)
    result["skipped"] += skipped

    if not dry_run and result["new"] > 0:
        record_processed(conn, json_path, file_hash, SOURCE)

    conn.close()
    return result

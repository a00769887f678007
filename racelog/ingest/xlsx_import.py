"""Import race results from a spreadsheet export into the racelog DB."""

import hashlib
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from pathlib import Path

import openpyxl

from racelog.config import get_path
from racelog.db import get_connection, insert_race

SOURCE = "xlsx"

# Header text (lowercased) -> raw record field
HEADER_FIELDS = {
    "event": "event",
    "race": "event",
    "date": "date",
    "location": "location",
    "overall": "overall",
    "gender": "gender",
    "division": "division",
    "pace": "pace",
    "time": "time",
    "year": "year",
    "distance type": "distance_type",
    "distancetype": "distance_type",
}

REQUIRED_FIELDS = ("event", "date", "time")


@dataclass
class ParsedRow:
    row_number: int
    record: dict


def compute_file_hash(path: str) -> str:
    """SHA-256 of a file's contents."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            h.update(chunk)
    return h.hexdigest()


def already_processed(conn, file_hash: str, source: str) -> bool:
    row = conn.execute(
        "SELECT id FROM processed_files WHERE file_hash = ? AND source = ?",
        (file_hash, source),
    ).fetchone()
    return row is not None


def record_processed(conn, path: str, file_hash: str, source: str):
    conn.execute(
        "INSERT INTO processed_files (file_path, file_hash, source) VALUES (?, ?, ?)",
        (path, file_hash, source),
    )
    conn.commit()


def insert_rows(conn, rows: list[ParsedRow], source: str,
                dry_run: bool, verbose: bool) -> dict:
    """Insert parsed rows one at a time; a failing row is rolled back and counted."""
    result = {"new": 0, "skipped": 0, "errors": 0, "already_imported": False}

    for row in rows:
        if dry_run:
            if verbose:
                rec = row.record
                print(f"  DRY   row {row.row_number}: {rec.get('date')} {rec.get('event')} "
                      f"[{rec.get('time') or '--'}]")
            result["new"] += 1
            continue
        try:
            race_id = insert_race(conn, row.record, source=source)
            conn.commit()
            result["new"] += 1
            if verbose:
                print(f"  NEW   row {row.row_number} → race {race_id}: "
                      f"{row.record.get('date')} {row.record.get('event')}")
        except Exception as e:
            conn.rollback()
            result["errors"] += 1
            if verbose:
                print(f"  ERROR row {row.row_number}: {e}")

    return result


def import_xlsx(config: dict, path=None, dry_run: bool = False, verbose: bool = False) -> dict:
    """Import races from the first sheet of an .xlsx workbook.

    Returns dict with keys: new, skipped, errors, already_imported.
    """
    xlsx_path = Path(path) if path else get_path(config, "xlsx_import")
    if xlsx_path is None:
        raise FileNotFoundError("No XLSX path given and paths.xlsx_import not configured")
    xlsx_path = str(xlsx_path.expanduser())

    if not Path(xlsx_path).exists():
        raise FileNotFoundError(f"XLSX file not found: {xlsx_path}")

    parsed_rows, skipped = _read_xlsx(xlsx_path)

    conn = get_connection(config)

    file_hash = compute_file_hash(xlsx_path)
    if already_processed(conn, file_hash, SOURCE):
        if verbose:
            print("XLSX already imported (hash match). Skipping.")
        conn.close()
        return {"new": 0, "skipped": 0, "errors": 0, "already_imported": True}

    if verbose:
        print(f"Read {len(parsed_rows)} race rows from {xlsx_path}, skipped {skipped} blank")

    result = insert_rows(conn, parsed_rows, SOURCE, dry_run, verbose)
    result["skipped"] += skipped

    if not dry_run and result["new"] > 0:
        record_processed(conn, xlsx_path, file_hash, SOURCE)

    conn.close()
    return result


def _map_header(header_row) -> dict[int, str]:
    """Map column index -> record field from the header row."""
    columns = {}
    for idx, cell in enumerate(header_row):
        if cell is None:
            continue
        name = " ".join(str(cell).strip().lower().split())
        field = HEADER_FIELDS.get(name)
        if field and field not in columns.values():
            columns[idx] = field

    missing = [f for f in REQUIRED_FIELDS if f not in columns.values()]
    if missing:
        raise ValueError(f"XLSX header missing required column(s): {', '.join(missing)}")
    return columns


def _read_xlsx(path: str) -> tuple[list[ParsedRow], int]:
    """Read the workbook. Returns (parsed rows, rows skipped for no event)."""
    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        rows = wb.active.iter_rows(values_only=True)

        header = next(rows, None)
        if header is None:
            raise ValueError(f"XLSX file is empty: {path}")
        columns = _map_header(header)

        parsed = []
        skipped = 0
        for row_idx, row in enumerate(rows, start=2):
            if not row or all(v is None for v in row):
                continue
            record = {}
            for idx, field in columns.items():
                value = row[idx] if idx < len(row) else None
                record[field] = _cell_text(field, value)

            if not record.get("event"):
                skipped += 1
                continue
            parsed.append(ParsedRow(row_number=row_idx, record=record))
    finally:
        wb.close()
    return parsed, skipped


def _cell_text(field: str, value):
    """Coerce a cell value into the text shape raw records use."""
    if value is None:
        return None
    if field == "year":
        try:
            return int(value)
        except (ValueError, TypeError):
            return None
    if field == "date" and isinstance(value, (datetime, date)):
        return value.strftime("%B %d, %Y")
    if field in ("time", "pace"):
        return _format_clock(value)
    return str(value).strip()


def _format_clock(value) -> str:
    """Render a time cell as 'H:MM:SS' or 'MM:SS'."""
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        total = value.hour * 3600 + value.minute * 60 + value.second
    elif isinstance(value, timedelta):
        total = int(value.total_seconds())
    else:
        return str(value).strip()

    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"

import sqlite3
from pathlib import Path

from racelog.config import get_path
from racelog.models import RawRecord

SCHEMA_SQL = """\
-- Raw race results as supplied by the source (one per race entered)
CREATE TABLE IF NOT EXISTS races (
    id                  INTEGER PRIMARY KEY,
    event               TEXT NOT NULL,
    date                TEXT NOT NULL,
    location            TEXT,
    time                TEXT,
    pace                TEXT,
    overall             TEXT,
    gender              TEXT,
    division            TEXT,
    year                INTEGER,
    distance_type       TEXT,
    source              TEXT,
    created_at          TEXT DEFAULT (datetime('now')),
    updated_at          TEXT DEFAULT (datetime('now'))
);

-- Processed file manifest (avoid re-importing)
CREATE TABLE IF NOT EXISTS processed_files (
    id                  INTEGER PRIMARY KEY,
    file_path           TEXT NOT NULL,
    file_hash           TEXT,
    source              TEXT,
    processed_at        TEXT DEFAULT (datetime('now'))
);

-- Indexes
CREATE INDEX IF NOT EXISTS idx_races_year ON races(year);
CREATE INDEX IF NOT EXISTS idx_processed_files_hash ON processed_files(file_hash);
"""

RACE_COLUMNS = (
    "event", "date", "location", "time", "pace",
    "overall", "gender", "division", "year", "distance_type",
)

DEFAULT_DB_PATH = Path.home() / "racelog" / "data" / "racelog.db"


def get_db_path(config=None) -> Path:
    """paths.db from config, else ~/racelog/data/racelog.db."""
    return get_path(config, "db") or DEFAULT_DB_PATH


def get_connection(config=None):
    """Open the race store, creating its directory on first use."""
    race_db = get_db_path(config)
    race_db.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(race_db))
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def _migrate_schema(conn):
    """Add columns that may be missing from existing databases."""
    migrations = [
        # manual category override
        ("races", "distance_type", "TEXT"),
        # import provenance
        ("races", "source", "TEXT"),
    ]

    existing = {}
    for table, col, col_type in migrations:
        if table not in existing:
            rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
            existing[table] = {r[1] for r in rows}
        if col not in existing[table]:
            conn.execute(f"ALTER TABLE {table} ADD COLUMN {col} {col_type}")

    conn.commit()


def init_db(config=None):
    """Create all tables and indexes."""
    conn = get_connection(config)
    conn.executescript(SCHEMA_SQL)
    _migrate_schema(conn)
    conn.close()
    return get_db_path(config)


def _row_to_dict(row) -> dict:
    d = dict(zip(("id",) + RACE_COLUMNS, row))
    # Empty overrides are stored as NULL
    if not d["distance_type"]:
        d["distance_type"] = None
    return d


def load_raw_records(conn) -> list[dict]:
    """Return every stored race as a raw record dict, in insertion order."""
    cols = ", ".join(("id",) + RACE_COLUMNS)
    rows = conn.execute(f"SELECT {cols} FROM races ORDER BY id").fetchall()
    return [_row_to_dict(r) for r in rows]


def get_race(conn, race_id: int) -> dict | None:
    cols = ", ".join(("id",) + RACE_COLUMNS)
    row = conn.execute(f"SELECT {cols} FROM races WHERE id = ?", (race_id,)).fetchone()
    return _row_to_dict(row) if row else None


def insert_race(conn, raw, source: str | None = None) -> int:
    """Insert a raw race (mapping or RawRecord). Returns the new row id.

    Does not commit; callers own the transaction.
    """
    rec = raw if isinstance(raw, RawRecord) else RawRecord.from_dict(raw)
    values = rec.to_dict()
    placeholders = ", ".join("?" * (len(RACE_COLUMNS) + 1))
    cursor = conn.execute(
        f"INSERT INTO races ({', '.join(RACE_COLUMNS)}, source) VALUES ({placeholders})",
        tuple(values[c] for c in RACE_COLUMNS) + (source,),
    )
    return cursor.lastrowid


def set_distance_type(conn, race_id: int, distance_type: str | None) -> bool:
    """Set or clear (None / '') the manual category override.

    Returns False when no race has this id.
    """
    cursor = conn.execute(
        "UPDATE races SET distance_type = ?, updated_at = datetime('now') WHERE id = ?",
        (distance_type or None, race_id),
    )
    conn.commit()
    return cursor.rowcount > 0

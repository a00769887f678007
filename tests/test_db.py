"""Tests for the SQLite race store."""

import sqlite3

from racelog.db import (
    _migrate_schema,
    get_connection,
    get_db_path,
    get_race,
    insert_race,
    load_raw_records,
    set_distance_type,
    DEFAULT_DB_PATH,
)
from racelog.models import RawRecord


class TestStore:
    """Tests for race CRUD."""

    def test_db_path_from_config(self, config, tmp_path):
        assert get_db_path(config) == tmp_path / "data" / "racelog.db"
        assert get_db_path(None) == DEFAULT_DB_PATH

    def test_insert_and_load(self, config, raw_races):
        conn = get_connection(config)
        ids = [insert_race(conn, r, source="test") for r in raw_races]
        conn.commit()
        rows = load_raw_records(conn)
        conn.close()

        assert [r["id"] for r in rows] == ids
        assert rows[0]["event"] == "Boston Marathon"
        assert rows[0]["year"] == 2023
        assert rows[0]["distance_type"] is None

    def test_insert_raw_record(self, config):
        conn = get_connection(config)
        race_id = insert_race(conn, RawRecord(event="Fun Run 5K", date="2024-01-01"))
        conn.commit()
        assert get_race(conn, race_id)["event"] == "Fun Run 5K"
        conn.close()

    def test_set_and_clear_distance_type(self, config):
        conn = get_connection(config)
        race_id = insert_race(conn, {"event": "Mystery Run", "date": "2024-01-01"})
        conn.commit()

        assert set_distance_type(conn, race_id, "8K")
        assert get_race(conn, race_id)["distance_type"] == "8K"
        assert set_distance_type(conn, race_id, "")
        assert get_race(conn, race_id)["distance_type"] is None
        conn.close()

    def test_set_distance_type_unknown_race(self, config):
        conn = get_connection(config)
        assert not set_distance_type(conn, 999, "5K")
        assert get_race(conn, 999) is None
        conn.close()


class TestMigrate:
    """Older databases gain late columns."""

    def test_adds_missing_columns(self, tmp_path):
        db_path = tmp_path / "old.db"
        conn = sqlite3.connect(str(db_path))
        conn.execute("CREATE TABLE races (id INTEGER PRIMARY KEY, event TEXT NOT NULL, "
                     "date TEXT NOT NULL)")
        _migrate_schema(conn)
        cols = {r[1] for r in conn.execute("PRAGMA table_info(races)").fetchall()}
        conn.close()
        assert {"distance_type", "source"} <= cols

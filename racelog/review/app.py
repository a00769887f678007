from datetime import date, datetime

from flask import Flask, jsonify, request

from racelog.analysis import locations, milestones, stats
from racelog.categorize import AUTO_DETECT, DEFAULT_TABLE
from racelog.config import load_config
from racelog.db import (
    _migrate_schema,
    get_connection,
    get_race,
    init_db,
    insert_race,
    load_raw_records,
    set_distance_type,
)
from racelog.normalize import normalize

REQUIRED_RACE_FIELDS = ("event", "date", "time")


def create_app(config=None):
    app = Flask(__name__)

    if config is None:
        config = load_config()
    app.config["RACELOG"] = config
    init_db(config)

    def get_db():
        conn = get_connection(config)
        _migrate_schema(conn)
        return conn

    def _load_records():
        conn = get_db()
        try:
            return normalize(load_raw_records(conn))
        finally:
            conn.close()

    # ── Races ────────────────────────────────────────────────────────

    @app.route("/api/races")
    def api_races():
        records = _load_records()

        category = request.args.get("category")
        if category:
            records = [r for r in records if r.category.value == category]
        year = request.args.get("year", type=int)
        if year is not None:
            records = [r for r in records if r.race_year == year]

        return jsonify({"races": [r.to_dict() for r in records], "count": len(records)})

    @app.route("/api/races", methods=["POST"])
    def api_add_race():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "JSON body required"}), 400

        missing = [f for f in REQUIRED_RACE_FIELDS if not str(data.get(f) or "").strip()]
        if missing:
            return jsonify({"error": f"missing required field(s): {', '.join(missing)}"}), 400

        distance_type = data.get("distance_type", data.get("distanceType"))
        if distance_type and distance_type != AUTO_DETECT \
                and DEFAULT_TABLE.lookup(distance_type) is None:
            return jsonify({"error": f"unknown distance type '{distance_type}'"}), 400

        record = dict(data)
        record.pop("id", None)
        record.pop("distanceType", None)
        record["distance_type"] = None if distance_type == AUTO_DETECT else distance_type
        if not record.get("year"):
            record["year"] = date.today().year

        conn = get_db()
        try:
            race_id = insert_race(conn, record, source="review")
            conn.commit()
            race = get_race(conn, race_id)
        finally:
            conn.close()

        normalized = normalize([race])[0]
        return jsonify({"ok": True, "race": normalized.to_dict()}), 201

    @app.route("/api/races/<int:race_id>/distance-type", methods=["PUT"])
    def api_set_distance_type(race_id):
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "distance_type" not in data:
            return jsonify({"error": "distance_type required"}), 400

        value = data["distance_type"] or None
        if value == AUTO_DETECT:
            value = None
        if value is not None and DEFAULT_TABLE.lookup(value) is None:
            return jsonify({"error": f"unknown distance type '{value}'"}), 400

        conn = get_db()
        try:
            if not set_distance_type(conn, race_id, value):
                return jsonify({"error": "race not found"}), 404
            race = get_race(conn, race_id)
        finally:
            conn.close()

        normalized = normalize([race])[0]
        return jsonify({"ok": True, "race": normalized.to_dict()})

    # ── Aggregates ───────────────────────────────────────────────────

    @app.route("/api/stats")
    def api_stats():
        records = _load_records()
        today = datetime.combine(date.today(), datetime.min.time())
        return jsonify({
            "summary": stats.summarize(records),
            "distance_counts": [{"label": label, "count": count}
                                for label, count in stats.distance_counts(records)],
            "personal_bests": stats.personal_bests(records),
            "fun_stats": stats.fun_stats(records),
            "races_per_year": stats.races_per_year(records),
            "miles_per_year": stats.miles_per_year(records),
            "races_per_month": stats.races_per_month(records),
            "cumulative_miles": stats.cumulative_miles(records),
            "avg_pace_by_distance": stats.avg_pace_by_distance(records),
            "year_to_date_miles": stats.year_to_date_miles(records, today),
            "milestones": [m.to_dict() for m in milestones.find_milestones(records)],
        })

    @app.route("/api/map")
    def api_map():
        return jsonify({"points": locations.map_points(_load_records())})

    @app.route("/api/categories")
    def api_categories():
        return jsonify({
            "categories": [
                {"label": category.value, "distance_miles": miles}
                for category, miles in DEFAULT_TABLE.miles.items()
            ],
        })

    return app

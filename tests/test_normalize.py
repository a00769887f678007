"""Tests for the record normalizer."""

import json
from datetime import datetime

import pytest

from racelog.models import NormalizedRecord, RaceCategory, RawRecord
from racelog.normalize import normalize, normalize_record


class TestNormalizeRecord:
    """Tests for normalize_record."""

    def test_parsed_fields(self, raw_races):
        rec = normalize_record(raw_races[0], 0)
        assert rec.parsed_date == datetime(2023, 4, 17)
        assert rec.pace_seconds == 515
        assert rec.total_minutes == 225
        assert rec.category == RaceCategory.MARATHON
        assert rec.distance_label == "Marathon"
        assert rec.distance_miles == 26.2

    def test_raw_fields_carried(self, raw_races):
        rec = normalize_record(raw_races[1], 1)
        assert rec.event == "Turkey Trot 5K"
        assert rec.location == "Columbia, MD"
        assert rec.division == "2 of 60"
        assert rec.year == 2023

    def test_reuses_source_id(self):
        rec = normalize_record({"id": 42, "event": "Fun Run 5K", "date": "2024-01-01"}, 3)
        assert rec.id == "42"

    def test_synthetic_id_is_positional(self):
        rec = normalize_record({"event": "Fun Run 5K", "date": "2024-01-01"}, 3)
        assert rec.id.startswith("race-3-")

    def test_camel_case_distance_type(self):
        rec = normalize_record({"event": "Boston Marathon", "distanceType": "10K"})
        assert rec.category == RaceCategory.TEN_K
        assert rec.distance_type == "10K"

    def test_accepts_raw_record(self):
        rec = normalize_record(RawRecord(event="Downtown Mile", time="5:59", pace="5:59"))
        assert rec.category == RaceCategory.ONE_MILE
        assert rec.pace_seconds == 359

    def test_raw_record_with_none_fields(self):
        rec = normalize_record(RawRecord(event=None, date=None, time=None), 2)
        assert rec.event == ""
        assert rec.id.startswith("race-2-")
        assert rec.category == RaceCategory.OTHER
        assert normalize([RawRecord(event=None, date=None)])[0].parsed_date is None

    def test_record_is_frozen(self, raw_races):
        rec = normalize_record(raw_races[0])
        with pytest.raises(AttributeError):
            rec.category = RaceCategory.OTHER


class TestNormalize:
    """Tests for the batch normalize."""

    def test_no_records_dropped(self, raw_races):
        assert len(normalize(raw_races)) == len(raw_races)

    def test_sorted_most_recent_first(self, raw_races):
        out = normalize(raw_races)
        dates = [r.parsed_date for r in out]
        assert dates == sorted(dates, reverse=True)
        assert out[0].event == "Turkey Trot 5K"

    def test_invalid_dates_last_in_input_order(self, raw_races):
        batch = [
            {"event": "Mystery Run A", "date": "who knows"},
            raw_races[0],
            {"event": "Mystery Run B", "date": ""},
        ]
        out = normalize(batch)
        assert out[0].event == "Boston Marathon"
        assert [r.event for r in out[1:]] == ["Mystery Run A", "Mystery Run B"]
        assert out[1].parsed_date is None

    def test_malformed_records_degrade(self):
        batch = [
            {"event": None, "date": None, "time": "abc", "pace": "x:y"},
            {"event": 123, "time": 45, "year": "not a year"},
            {"event": "Mystery", "date": "", "year": float("inf")},
            "not a record",
            None,
        ]
        out = normalize(batch)
        assert len(out) == 5
        for rec in out:
            assert isinstance(rec, NormalizedRecord)
            assert rec.pace_seconds == 0
            assert rec.total_minutes == 0
            assert rec.category == RaceCategory.OTHER
            assert rec.distance_miles == 5

    def test_overflowing_year_from_json(self):
        batch = json.loads('[{"event": "Fun Run 5K", "date": "May 1, 2024", "year": 1e999},'
                           ' {"event": "Boston Marathon", "date": "April 17, 2023"}]')
        out = normalize(batch)
        assert [r.event for r in out] == ["Fun Run 5K", "Boston Marathon"]
        assert out[0].year is None
        assert out[0].race_year == 2024

    def test_idempotent(self, raw_races):
        first = normalize(raw_races)
        second = normalize(raw_races)
        assert first == second

    def test_ids_unique(self):
        same = {"event": "Fun Run 5K", "date": "2024-01-01", "time": "25:00"}
        out = normalize([same, dict(same), dict(same)])
        assert len({r.id for r in out}) == 3

    def test_input_not_mutated(self, raw_races):
        before = [dict(r) for r in raw_races]
        normalize(raw_races)
        assert raw_races == before

    def test_empty(self):
        assert normalize([]) == []

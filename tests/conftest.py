import pytest

from racelog.db import init_db


@pytest.fixture
def config(tmp_path):
    """Config pointing at a fresh SQLite DB under tmp_path."""
    cfg = {
        "paths": {
            "db": str(tmp_path / "data" / "racelog.db"),
            "xlsx_import": str(tmp_path / "races.xlsx"),
            "json_import": str(tmp_path / "races.json"),
        },
    }
    init_db(cfg)
    return cfg


@pytest.fixture
def raw_races():
    return [
        {"event": "Boston Marathon", "date": "April 17, 2023", "location": "Boston, MA",
         "time": "3:45:00", "pace": "8:35", "overall": "12000 of 30000",
         "gender": "8000 of 17000", "division": "900 of 3000", "year": 2023},
        {"event": "Turkey Trot 5K", "date": "November 23, 2023", "location": "Columbia, MD",
         "time": "22:30", "pace": "7:15", "overall": "40 of 900",
         "gender": "35 of 450", "division": "2 of 60", "year": 2023},
        {"event": "Cherry Blossom", "date": "April 2, 2023", "location": "Washington, DC",
         "time": "1:20:00", "pace": "8:00", "overall": "", "gender": "", "division": "",
         "year": 2023},
        {"event": "Rock n Roll USA", "date": "March 11, 2022", "location": "Washington, DC",
         "time": "1:55:00", "pace": "8:47", "overall": "3 of 5000", "gender": "",
         "division": "", "year": 2022},
    ]

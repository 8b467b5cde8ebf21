# tests/test_migrations.py
"""The alembic chain builds the same schema the models describe."""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import IntegrityError

ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def migrated_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url)
    command.upgrade(cfg, "head")
    yield url
    command.downgrade(cfg, "base")


def test_upgrade_creates_registry_tables(migrated_url):
    eng = create_engine(migrated_url)
    insp = inspect(eng)
    tables = set(insp.get_table_names())
    assert {"users", "owners", "vehicles", "plate_numbers", "ownerships"} <= tables
    assert "version" in {c["name"] for c in insp.get_columns("ownerships")}
    eng.dispose()


def test_one_open_record_per_vehicle_enforced(migrated_url):
    eng = create_engine(migrated_url)
    with eng.begin() as conn:
        conn.execute(text(
            "INSERT INTO users (id, \"firstName\", \"lastName\", email, \"phoneNumber\", \"nationalId\", "
            "role, status, enabled, \"isActive\") "
            "VALUES (1, 'A', 'B', 'a@mail.rw', '0780000000', '1199000000000001', 'OWNER', 'ACTIVE', 1, 1)"
        ))
        conn.execute(text("INSERT INTO owners (id, \"userId\", \"isActive\") VALUES (1, 1, 1)"))
        conn.execute(text(
            "INSERT INTO vehicles (id, \"chassisNumber\", \"modelName\", \"manufacturedYear\", price, \"isActive\") "
            "VALUES (1, 'MIGR00001', 'Golf', 2015, 100, 1)"
        ))
        conn.execute(text(
            "INSERT INTO ownerships (\"vehicleId\", \"ownerId\", \"startDate\", version) "
            "VALUES (1, 1, '2026-01-01 00:00:00', 1)"
        ))

    with pytest.raises(IntegrityError):
        with eng.begin() as conn:
            conn.execute(text(
                "INSERT INTO ownerships (\"vehicleId\", \"ownerId\", \"startDate\", version) "
                "VALUES (1, 1, '2026-02-01 00:00:00', 1)"
            ))
    eng.dispose()

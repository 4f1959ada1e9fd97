# tests/test_migrations.py
from pathlib import Path

import sqlalchemy as sa
from alembic import command
from alembic.config import Config

import registration_service
from registration_service.models import Base


def _alembic_config(db_file):
    cfg = Config()
    cfg.set_main_option(
        "script_location", str(Path(registration_service.__file__).parent / "alembic")
    )
    cfg.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_file}")
    return cfg


def test_upgrade_creates_users_table_with_unique_email(tmp_path):
    db_file = tmp_path / "migrated.db"

    command.upgrade(_alembic_config(db_file), "head")

    engine = sa.create_engine(f"sqlite:///{db_file}")
    try:
        inspector = sa.inspect(engine)
        columns = {column["name"] for column in inspector.get_columns("users")}
        indexes = {index["name"]: index for index in inspector.get_indexes("users")}
    finally:
        engine.dispose()

    assert columns == {"id", "username", "email", "hashed_password", "created_at"}
    assert indexes["ix_users_email"]["unique"]


def test_downgrade_drops_users_table(tmp_path):
    db_file = tmp_path / "migrated.db"
    cfg = _alembic_config(db_file)

    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")

    engine = sa.create_engine(f"sqlite:///{db_file}")
    try:
        assert "users" not in sa.inspect(engine).get_table_names()
    finally:
        engine.dispose()


def _index_names(db_file):
    engine = sa.create_engine(f"sqlite:///{db_file}")
    try:
        return {
            index["name"]: bool(index["unique"])
            for index in sa.inspect(engine).get_indexes("users")
        }
    finally:
        engine.dispose()


def test_create_all_and_migration_agree_on_index_names(tmp_path):
    migrated = tmp_path / "migrated.db"
    created = tmp_path / "created.db"
    command.upgrade(_alembic_config(migrated), "head")
    engine = sa.create_engine(f"sqlite:///{created}")
    try:
        Base.metadata.create_all(engine)
    finally:
        engine.dispose()

    assert _index_names(created) == _index_names(migrated) == {
        "ix_users_email": True,
        "ix_users_id": False,
    }

"""Unit tests for configuration loading and the Alembic config builder."""

from pathlib import Path

import pytest

from brick_orm import config
from brick_orm.config import DatabaseConfig
from brick_orm.interfaces.errors import ConfigurationError, DatabaseUrlNotSetError


def test_defaults():
    cfg = DatabaseConfig(dsn="sqlite://")

    assert cfg.pool_size == config.DEFAULT_POOL_SIZE == 15
    assert not cfg.debug
    assert not cfg.disable_second_level_cache
    assert cfg.driver is cfg.username is cfg.password is cfg.dialect is None
    assert cfg.migrations_path is None


@pytest.mark.parametrize("kwargs", [{"dsn": ""}, {"dsn": "sqlite://", "pool_size": 0}])
def test_invalid_values(kwargs):
    with pytest.raises(ConfigurationError):
        DatabaseConfig(**kwargs)


def test_from_env_reads_every_variable():
    env = {
        "BRICK_ORM_DB_URL": "postgresql://localhost/app",
        "BRICK_ORM_DB_DRIVER": "psycopg",
        "BRICK_ORM_DB_USERNAME": "svc",
        "BRICK_ORM_DB_PASSWORD": "pw",
        "BRICK_ORM_DB_POOL_SIZE": "4",
        "BRICK_ORM_DB_DEBUG": "true",
        "BRICK_ORM_DB_DIALECT": "postgres",
        "BRICK_ORM_DB_DISABLE_L2C": "1",
        "BRICK_ORM_MIGRATIONS_PATH": "dbmigrations",
    }

    cfg = DatabaseConfig.from_env(env)

    assert cfg == DatabaseConfig(
        dsn="postgresql://localhost/app",
        driver="psycopg",
        username="svc",
        password="pw",
        pool_size=4,
        debug=True,
        dialect="postgres",
        disable_second_level_cache=True,
        migrations_path=Path("dbmigrations"),
    )


def test_from_env_minimal():
    cfg = DatabaseConfig.from_env({"BRICK_ORM_DB_URL": "sqlite://", "BRICK_ORM_DB_DEBUG": "no"})

    assert cfg == DatabaseConfig(dsn="sqlite://")


def test_from_env_defaults_to_os_environ(monkeypatch):
    monkeypatch.setenv("BRICK_ORM_DB_URL", "sqlite://")
    monkeypatch.setenv("BRICK_ORM_DB_POOL_SIZE", "2")

    assert DatabaseConfig.from_env().pool_size == 2


def test_from_env_requires_url():
    with pytest.raises(DatabaseUrlNotSetError):
        DatabaseConfig.from_env({})


def test_from_env_rejects_bad_pool_size():
    with pytest.raises(ConfigurationError, match="POOL_SIZE"):
        DatabaseConfig.from_env(
            {"BRICK_ORM_DB_URL": "sqlite://", "BRICK_ORM_DB_POOL_SIZE": "many"}
        )


def test_get_db_url(monkeypatch):
    monkeypatch.setenv("BRICK_ORM_DB_URL", "sqlite://")
    assert config.get_db_url() == "sqlite://"

    monkeypatch.delenv("BRICK_ORM_DB_URL")
    with pytest.raises(DatabaseUrlNotSetError):
        config.get_db_url()


def test_build_alembic_config(tmp_path):
    cfg = config.build_alembic_config(
        "postgresql://u:p%40ss@h/db", version_location=tmp_path
    )

    assert cfg.get_main_option("sqlalchemy.url") == "postgresql://u:p%40ss@h/db"
    assert cfg.get_main_option("version_locations") == str(tmp_path)
    assert cfg.get_main_option("path_separator") == "os"
    script_location = Path(cfg.get_main_option("script_location"))
    assert (script_location / "env.py").is_file()
    assert (script_location / "script.py.mako").is_file()


def test_build_alembic_config_without_url():
    cfg = config.build_alembic_config()

    assert cfg.get_main_option("sqlalchemy.url") is None
    assert cfg.get_main_option("version_locations") is None

import pytest
from pydantic import ValidationError

from healthaccess.core.config import Settings


def test_database_uri_derived_from_postgres_settings():
    config = Settings(
        SECRET_KEY="x",
        SQLALCHEMY_DATABASE_URI=None,
        POSTGRES_USER="care",
        POSTGRES_PASSWORD="p@ss",
        POSTGRES_SERVER="db",
        POSTGRES_DB="clinic",
    )
    assert config.SQLALCHEMY_DATABASE_URI == "postgresql://care:p%40ss@db:5432/clinic"
    assert not config.uses_sqlite


def test_blank_redis_url_disables_fan_out():
    assert Settings(SECRET_KEY="x", REDIS_URL="  ").REDIS_URL is None


def test_production_requires_real_secret():
    with pytest.raises(ValidationError):
        Settings(ENVIRONMENT="production", SECRET_KEY="change-me")


def test_production_keeps_window_enforced():
    with pytest.raises(ValidationError):
        Settings(ENVIRONMENT="production", SECRET_KEY="s3cret", ENFORCE_CONSULTATION_WINDOW=False)

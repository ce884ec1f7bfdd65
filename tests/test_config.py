"""Tests for settings and logging bootstrap."""

import pytest

from strictio.config import Settings
from strictio.infrastructure import logging_setup

_SETTING_NAMES = (
    "LOG_LEVEL",
    "LOG_JSON",
    "ESCALATE_ALL_WARNINGS",
    "DATA_URI_ENABLED",
    "DEFAULT_PERMISSIONS",
    "SKIP_CHUNK_SIZE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run each test without strictio env vars or a stray .env file."""
    monkeypatch.chdir(tmp_path)
    for name in _SETTING_NAMES:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"STRICTIO_{name}", raising=False)


def test_defaults():
    """With no environment every setting has its documented default."""
    config = Settings()
    assert config.log_level == "INFO"
    assert config.log_json is False
    assert config.escalate_all_warnings is True
    assert config.data_uri_enabled is True
    assert config.default_permissions == 0o666
    assert config.skip_chunk_size == 65536


def test_env_overrides(monkeypatch):
    """STRICTIO_* env vars override every setting."""
    monkeypatch.setenv("STRICTIO_LOG_LEVEL", "debug")
    monkeypatch.setenv("STRICTIO_LOG_JSON", "1")
    monkeypatch.setenv("STRICTIO_ESCALATE_ALL_WARNINGS", "off")
    monkeypatch.setenv("STRICTIO_DATA_URI_ENABLED", "no")
    monkeypatch.setenv("STRICTIO_DEFAULT_PERMISSIONS", "0o640")
    monkeypatch.setenv("STRICTIO_SKIP_CHUNK_SIZE", "0")
    config = Settings()
    assert config.log_level == "DEBUG"
    assert config.log_json is True
    assert config.escalate_all_warnings is False
    assert config.data_uri_enabled is False
    assert config.default_permissions == 0o640
    assert config.skip_chunk_size == 1


def test_env_permissions_without_0o_are_octal(monkeypatch):
    """A bare "644" in the environment means rw-r--r--, not decimal 644."""
    monkeypatch.setenv("STRICTIO_DEFAULT_PERMISSIONS", "644")
    assert Settings().default_permissions == 0o644


def test_unprefixed_env_vars_are_ignored(monkeypatch):
    """Generic names like LOG_LEVEL belong to other programs."""
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DEFAULT_PERMISSIONS", "644")
    monkeypatch.setenv("SKIP_CHUNK_SIZE", "12")
    config = Settings()
    assert config.log_level == "INFO"
    assert config.default_permissions == 0o666
    assert config.skip_chunk_size == 65536


def test_dotenv_file_is_read(tmp_path):
    """Prefixed values in .env go through the same parsing as env vars."""
    (tmp_path / ".env").write_text(
        "STRICTIO_DEFAULT_PERMISSIONS=600\nSTRICTIO_DATA_URI_ENABLED=false\n",
        encoding="utf-8",
    )
    config = Settings()
    assert config.default_permissions == 0o600
    assert config.data_uri_enabled is False


def test_invalid_env_values_fall_back(monkeypatch):
    """Unparseable values fall back to defaults instead of failing import."""
    monkeypatch.setenv("STRICTIO_LOG_JSON", "sometimes")
    monkeypatch.setenv("STRICTIO_DEFAULT_PERMISSIONS", "rwxr-xr-x")
    monkeypatch.setenv("STRICTIO_SKIP_CHUNK_SIZE", "lots")
    config = Settings()
    assert config.log_json is False
    assert config.default_permissions == 0o666
    assert config.skip_chunk_size == 65536


def test_explicit_values_are_normalized():
    """Keyword arguments go through the same parsing as env vars."""
    config = Settings(log_level="warn", default_permissions=0o600)
    assert config.log_level == "WARNING"
    assert config.default_permissions == 0o600


def test_setup_logging_configures_once(monkeypatch):
    """setup_logging marks logging as configured."""
    monkeypatch.setattr(logging_setup, "_LOG_CONFIGURED", False)
    Settings(log_level="debug").setup_logging()
    assert logging_setup.is_logging_configured() is True

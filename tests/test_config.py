# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for OrmConfig defaults and environment loading."""

from __future__ import annotations

import pytest

from genro_orm import OrmConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove GENRO_ORM_* variables set by the caller's environment."""
    for name in ("DB", "DIALECT", "VALIDATE", "LOG_LEVEL"):
        monkeypatch.delenv(f"GENRO_ORM_{name}", raising=False)


class TestOrmConfig:
    """Tests for OrmConfig."""

    def test_defaults(self):
        config = OrmConfig()
        assert config.db_path == ":memory:"
        assert config.dialect == "sqlite"
        assert config.validate_on_insert is False
        assert config.log_level == "WARNING"

    def test_from_env_without_variables(self):
        assert OrmConfig.from_env() == OrmConfig()

    def test_from_env_reads_variables(self, monkeypatch):
        monkeypatch.setenv("GENRO_ORM_DB", "/data/app.db")
        monkeypatch.setenv("GENRO_ORM_DIALECT", "postgresql")
        monkeypatch.setenv("GENRO_ORM_VALIDATE", "yes")
        monkeypatch.setenv("GENRO_ORM_LOG_LEVEL", "debug")

        config = OrmConfig.from_env()
        assert config == OrmConfig(
            db_path="/data/app.db",
            dialect="postgresql",
            validate_on_insert=True,
            log_level="DEBUG",
        )

    @pytest.mark.parametrize("value,expected", [("1", True), ("On", True), ("0", False), ("no", False)])
    def test_validate_flag(self, monkeypatch, value, expected):
        monkeypatch.setenv("GENRO_ORM_VALIDATE", value)
        assert OrmConfig.from_env().validate_on_insert is expected

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("APP_DB", "sqlite::memory:")
        assert OrmConfig.from_env(prefix="APP_").db_path == "sqlite::memory:"

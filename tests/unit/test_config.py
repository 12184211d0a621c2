"""Tests for settings groups and startup validation."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from claimlens.core.config import (
    AppSettings,
    ClassificationConfig,
    PersistenceConfig,
    RulesConfig,
)
from claimlens.core.startup_checks import validate_settings
from claimlens.domains.claims.validation import create_rules_engine
from claimlens.validation.policy import BUILTIN_SOURCE


class TestSettings:
    def test_defaults(self) -> None:
        settings = AppSettings()
        assert settings.rules.policy_backend == "file"
        assert settings.rules.amount_tolerance == 0.01
        assert settings.classification.max_concurrent_pages == 4
        assert settings.observability.service_name == "claimlens"

    def test_group_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLAIMLENS_RULES_AMOUNT_TOLERANCE", "0.5")
        monkeypatch.setenv("CLAIMLENS_PERSISTENCE_BACKEND", "memory")
        assert RulesConfig().amount_tolerance == 0.5
        assert PersistenceConfig().backend == "memory"


class TestStartupChecks:
    def test_valid_settings_pass(self) -> None:
        validate_settings(AppSettings())

    @pytest.mark.parametrize(
        "settings",
        [
            AppSettings(rules=RulesConfig(amount_tolerance=-1)),
            AppSettings(rules=RulesConfig(min_keyword_length=-1)),
            AppSettings(classification=ClassificationConfig(extraction_timeout_seconds=0)),
            AppSettings(classification=ClassificationConfig(max_concurrent_pages=0)),
        ],
    )
    def test_fatal_misconfig(self, settings: AppSettings) -> None:
        with pytest.raises(ValueError):
            validate_settings(settings)

    def test_missing_policy_file_warns(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        settings = AppSettings(rules=RulesConfig(policy_path=tmp_path / "missing.yaml"))
        with caplog.at_level(logging.WARNING, logger="claimlens.core.startup_checks"):
            validate_settings(settings)
        assert "built-in exclusion list" in caplog.text

    def test_container_file_persistence_warns(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("KUBERNETES_SERVICE_HOST", "10.0.0.1")
        with caplog.at_level(logging.WARNING, logger="claimlens.core.startup_checks"):
            validate_settings(AppSettings(persistence=PersistenceConfig(backend="file")))
        assert "container environment" in caplog.text


class TestRulesEngineFactory:
    def test_packaged_policy_file(self) -> None:
        engine = create_rules_engine(AppSettings())
        assert engine.policy.source.endswith("tnc_exclusions.yaml")
        assert "protein supplement" in engine.policy.excluded_items

    def test_missing_policy_falls_back_to_builtin(self, tmp_path: Path) -> None:
        settings = AppSettings(rules=RulesConfig(policy_path=tmp_path / "missing.yaml"))
        assert create_rules_engine(settings).policy.source == BUILTIN_SOURCE

    def test_memory_policy(self) -> None:
        settings = AppSettings(rules=RulesConfig(policy_backend="memory"))
        engine = create_rules_engine(settings)
        assert engine.policy.source == "memory"
        assert "cosmetic" in engine.policy.excluded_categories

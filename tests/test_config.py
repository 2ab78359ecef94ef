from __future__ import annotations

import os
import stat

import pytest  # type: ignore[import]

from cadence_cli.config import (
    DEFAULT_EXCLUDE_FILES,
    AIConfig,
    Thresholds,
    WebhookConfig,
    generate_sample_config,
    load_config,
)
from cadence_cli.errors import ConfigError


def test_defaults_without_file() -> None:
    config = load_config(env={})

    assert config.thresholds.suspicious_additions == 500
    assert config.thresholds.suspicious_deletions == 1000
    assert config.thresholds.max_additions_per_min == 100
    assert config.thresholds.max_deletions_per_min == 500
    assert config.thresholds.min_time_delta_seconds == 60
    assert config.thresholds.max_files_per_commit == 50
    assert config.thresholds.max_addition_ratio == 0.95
    assert config.thresholds.min_deletion_ratio == 0.95
    assert config.thresholds.min_commit_size_ratio == 100
    assert config.thresholds.enable_precision_analysis is True
    assert config.exclude_files == DEFAULT_EXCLUDE_FILES
    assert config.webhook == WebhookConfig()
    assert config.ai == AIConfig()


def test_sample_config_round_trip(tmp_path) -> None:
    path = tmp_path / "cadence.yaml"
    generate_sample_config(path)

    config = load_config(path, env={})

    assert config.thresholds == Thresholds()
    assert config.exclude_files == DEFAULT_EXCLUDE_FILES
    assert config.webhook.port == 3000
    assert config.webhook.max_workers == 4
    assert config.ai.model == "gpt-4o-mini"
    if os.name == "posix":
        assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_file_overrides_defaults_and_missing_keys_fall_back(tmp_path) -> None:
    path = tmp_path / "cadence.yaml"
    path.write_text("thresholds:\n  suspicious_additions: 800\nwebhook:\n  port: 0\n", encoding="utf-8")

    config = load_config(path, env={})

    assert config.thresholds.suspicious_additions == 800
    assert config.thresholds.suspicious_deletions == 1000
    assert config.webhook.port == 3000


def test_environment_overrides_file(tmp_path) -> None:
    path = tmp_path / "cadence.yaml"
    path.write_text("thresholds:\n  suspicious_additions: 800\n", encoding="utf-8")
    env = {
        "CADENCE_THRESHOLDS_SUSPICIOUS_ADDITIONS": "900",
        "CADENCE_THRESHOLDS_ENABLE_PRECISION_ANALYSIS": "false",
        "CADENCE_WEBHOOK_MAX_WORKERS": "8",
        "CADENCE_EXCLUDE_FILES": "*.lock, dist/**",
    }

    config = load_config(path, env=env)

    assert config.thresholds.suspicious_additions == 900
    assert config.thresholds.enable_precision_analysis is False
    assert config.webhook.max_workers == 8
    assert config.exclude_files == ["*.lock", "dist/**"]


def test_ai_key_alias() -> None:
    config = load_config(env={"CADENCE_AI_KEY": "sk-test"})

    assert config.ai.api_key == "sk-test"


def test_missing_file_is_wrapped(tmp_path) -> None:
    with pytest.raises(ConfigError, match="failed to read") as excinfo:
        load_config(tmp_path / "absent.yaml", env={})

    assert isinstance(excinfo.value.__cause__, OSError)


def test_unparsable_file_is_wrapped(tmp_path) -> None:
    path = tmp_path / "broken.yaml"
    path.write_text("thresholds: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="failed to parse"):
        load_config(path, env={})


def test_bad_values_are_rejected(tmp_path) -> None:
    with pytest.raises(ConfigError):
        load_config(env={"CADENCE_THRESHOLDS_MAX_ADDITION_RATIO": "1.5"})
    with pytest.raises(ConfigError):
        load_config(env={"CADENCE_THRESHOLDS_SUSPICIOUS_ADDITIONS": "lots"})
    with pytest.raises(ConfigError):
        Thresholds(min_time_delta_seconds=-1)

"""Configuration loading for cadence.

Sources are merged in priority order:
    1. Defaults (the dataclass fields below)
    2. YAML config file (``--config``)
    3. Environment variables, ``CADENCE_<SECTION>_<KEY>``

Example:
    >>> config = load_config("cadence.yaml")
    >>> config.thresholds.suspicious_additions
    500
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from cadence_cli.errors import ConfigError

ENV_PREFIX = "CADENCE"

DEFAULT_EXCLUDE_FILES = [
    "package-lock.json",
    "yarn.lock",
    "*.min.js",
    "*.min.css",
    "node_modules/**",
]


@dataclass(frozen=True)
class Thresholds:
    """Tunable numeric thresholds.

    Only the ratio fields ``max_addition_ratio`` and ``min_deletion_ratio`` are
    fractions; ``min_commit_size_ratio`` is a line count despite its name.
    """

    # size
    suspicious_additions: int = 500
    suspicious_deletions: int = 1000
    # velocity
    max_additions_per_min: float = 100.0
    max_deletions_per_min: float = 500.0
    min_time_delta_seconds: int = 60
    # dispersion
    max_files_per_commit: int = 50
    # ratios
    max_addition_ratio: float = 0.95
    min_deletion_ratio: float = 0.95
    min_commit_size_ratio: int = 100
    enable_precision_analysis: bool = True

    def __post_init__(self):
        for name in ("max_addition_ratio", "min_deletion_ratio"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"thresholds.{name} must be within [0, 1], got {value}")
        for name in (
            "suspicious_additions",
            "suspicious_deletions",
            "max_additions_per_min",
            "max_deletions_per_min",
            "min_time_delta_seconds",
            "max_files_per_commit",
            "min_commit_size_ratio",
        ):
            value = getattr(self, name)
            if value < 0:
                raise ConfigError(f"thresholds.{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class WebhookConfig:
    enabled: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    secret: str = ""
    max_workers: int = 4
    read_timeout: int = 30
    write_timeout: int = 30


@dataclass(frozen=True)
class AIConfig:
    enabled: bool = False
    provider: str = "openai"
    api_key: str = ""
    model: str = "gpt-4o-mini"


@dataclass(frozen=True)
class Config:
    thresholds: Thresholds = field(default_factory=Thresholds)
    exclude_files: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_FILES))
    webhook: WebhookConfig = field(default_factory=WebhookConfig)
    ai: AIConfig = field(default_factory=AIConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _coerce(value: Any, default: Any, key: str) -> Any:
    """Coerce ``value`` to the type of ``default``."""
    try:
        if isinstance(default, bool):
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in _TRUE:
                return True
            if text in _FALSE:
                return False
            raise ValueError(f"not a boolean: {value!r}")
        if isinstance(default, int):
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(f"not an integer: {value!r}")
            return int(value)
        if isinstance(default, float):
            return float(value)
        if isinstance(default, list):
            if isinstance(value, str):
                return [item.strip() for item in value.split(",") if item.strip()]
            return [str(item) for item in value]
        return "" if value is None else str(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid value for {key}: {value!r}") from exc


def _read_file(path: Union[str, Path]) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigError(f"failed to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"failed to parse config file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping at the top level")
    return data


def _build_section(cls, section: str, file_values: Mapping[str, Any], env: Mapping[str, str]):
    defaults = cls()
    values = {}
    for f in fields(cls):
        default = getattr(defaults, f.name)
        key = f"{section}.{f.name}"
        env_key = f"{ENV_PREFIX}_{section}_{f.name}".upper()
        if env_key in env:
            values[f.name] = _coerce(env[env_key], default, key)
        elif f.name in file_values:
            values[f.name] = _coerce(file_values[f.name], default, key)
    return replace(defaults, **values)


def load_config(path: Optional[Union[str, Path]] = None, env: Optional[Mapping[str, str]] = None) -> Config:
    """Load configuration from defaults, an optional YAML file and the environment.

    Missing keys keep their defaults. A file that cannot be read or parsed, or a
    value that cannot be coerced, raises ConfigError.
    """
    env = os.environ if env is None else env
    data = _read_file(path) if path else {}

    sections = {}
    for name in ("thresholds", "webhook", "ai"):
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"config section '{name}' must be a mapping")
        sections[name] = section

    thresholds = _build_section(Thresholds, "thresholds", sections["thresholds"], env)
    webhook = _build_section(WebhookConfig, "webhook", sections["webhook"], env)
    ai = _build_section(AIConfig, "ai", sections["ai"], env)

    if not ai.api_key and env.get(f"{ENV_PREFIX}_AI_KEY"):
        ai = replace(ai, api_key=env[f"{ENV_PREFIX}_AI_KEY"])

    # zero/empty values mean "unset" for these keys
    webhook_defaults = WebhookConfig()
    webhook = replace(
        webhook,
        host=webhook.host or webhook_defaults.host,
        port=webhook.port or webhook_defaults.port,
        max_workers=webhook.max_workers or webhook_defaults.max_workers,
        read_timeout=webhook.read_timeout or webhook_defaults.read_timeout,
        write_timeout=webhook.write_timeout or webhook_defaults.write_timeout,
    )
    ai = replace(ai, model=ai.model or AIConfig().model)

    env_excludes = env.get(f"{ENV_PREFIX}_EXCLUDE_FILES")
    if env_excludes is not None:
        exclude_files = _coerce(env_excludes, DEFAULT_EXCLUDE_FILES, "exclude_files")
    elif "exclude_files" in data:
        exclude_files = _coerce(data["exclude_files"] or [], DEFAULT_EXCLUDE_FILES, "exclude_files")
    else:
        exclude_files = list(DEFAULT_EXCLUDE_FILES)

    return Config(thresholds=thresholds, exclude_files=exclude_files, webhook=webhook, ai=ai)


SAMPLE_CONFIG = """\
# Cadence configuration - AI-generated code detection
# Analyzes git repositories to detect potential AI-generated code patterns

thresholds:
  # SIZE-BASED DETECTION
  suspicious_additions: 500
  suspicious_deletions: 1000

  # VELOCITY-BASED DETECTION
  max_additions_per_min: 100
  max_deletions_per_min: 500

  # TIMING-BASED DETECTION
  min_time_delta_seconds: 60

  # FILE DISPERSION DETECTION
  max_files_per_commit: 50

  # RATIO-BASED DETECTION
  max_addition_ratio: 0.95
  min_deletion_ratio: 0.95
  min_commit_size_ratio: 100

  # PRECISION ANALYSIS
  enable_precision_analysis: true

# File patterns to exclude from analysis
exclude_files:
  - package-lock.json
  - yarn.lock
  - "*.min.js"
  - "*.min.css"
  - "node_modules/**"

# WEBHOOK SERVER
webhook:
  enabled: false
  host: "0.0.0.0"
  port: 3000
  # Secret for X-Hub-Signature-256 verification (set this!)
  secret: "your-webhook-secret-key-here"
  # Concurrent workers processing webhook events
  max_workers: 4
  # Request timeouts in seconds
  read_timeout: 30
  write_timeout: 30

# AI ANALYSIS (optional, requires an API key)
ai:
  enabled: false
  # "openai" or "anthropic"
  provider: "openai"
  # Or set CADENCE_AI_API_KEY in the environment / .env
  api_key: ""
  model: "gpt-4o-mini"
"""


def generate_sample_config(path: Union[str, Path]) -> None:
    path = Path(path)
    try:
        path.write_text(SAMPLE_CONFIG, encoding="utf-8")
        os.chmod(path, 0o600)
    except OSError as exc:
        raise ConfigError(f"failed to write sample config to {path}: {exc}") from exc

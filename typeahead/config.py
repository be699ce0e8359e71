"""Engine settings loaded from YAML with environment overrides."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .cache import DEFAULT_TTL_SECONDS
from .debounce import DEFAULT_DELAY_SECONDS
from .errors import ConfigError

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parents[1]
CONFIG_PATH = BASE_DIR / "config" / "typeahead.yml"
ENV_PREFIX = "TYPEAHEAD_"

DEFAULT_QUOTAS: Dict[str, int] = {
    "history": 3,
    "cities": 3,
    "countries": 3,
    "spots": 3,
    "trending": 2,
    "custom": 2,
}

_ENV_LOADED = False


@dataclass(frozen=True)
class EngineSettings:
    default_limit: int = 8
    legacy_limit: int = 10
    max_history: int = 20
    cache_ttl_seconds: float = float(DEFAULT_TTL_SECONDS)
    debounce_delay_seconds: float = DEFAULT_DELAY_SECONDS
    fuzzy_threshold: float = 0.6
    description_threshold: float = 0.5
    no_query_quota: int = 3
    quotas: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_QUOTAS))
    storage_path: Optional[Path] = None
    persist_cache: bool = False
    spots_path: Optional[Path] = None
    trending_path: Optional[Path] = None
    telemetry_enabled: bool = False

    def quota(self, source: str) -> int:
        return self.quotas.get(source, DEFAULT_QUOTAS.get(source, 0))


_INT_FIELDS = {"default_limit", "legacy_limit", "max_history", "no_query_quota"}
_FLOAT_FIELDS = {"cache_ttl_seconds", "debounce_delay_seconds", "fuzzy_threshold", "description_threshold"}
_BOOL_FIELDS = {"persist_cache", "telemetry_enabled"}
_PATH_FIELDS = {"storage_path", "spots_path", "trending_path"}


def _load_env_once() -> None:
    """Populate os.environ from a local .env file if available."""

    global _ENV_LOADED
    if _ENV_LOADED:
        return

    env_paths = [BASE_DIR / ".env"]
    cwd_path = Path.cwd() / ".env"
    if cwd_path not in env_paths:
        env_paths.append(cwd_path)

    for env_path in env_paths:
        if not env_path.exists():
            continue
        try:
            for raw_line in env_path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value
        except OSError:
            logger.debug("Unable to read .env file at %s", env_path)

    _ENV_LOADED = True


def _env_truthy(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _coerce(name: str, value: Any) -> Any:
    if name in _PATH_FIELDS and (value is None or value == ""):
        return None
    try:
        if name in _INT_FIELDS:
            coerced: Any = int(value)
        elif name in _FLOAT_FIELDS:
            coerced = float(value)
        elif name in _BOOL_FIELDS:
            coerced = _env_truthy(value) if isinstance(value, str) else bool(value)
        elif name in _PATH_FIELDS:
            coerced = Path(str(value)).expanduser()
        elif name == "quotas":
            if not isinstance(value, Mapping):
                raise TypeError("quotas must be a mapping")
            coerced = {**DEFAULT_QUOTAS, **{str(k): int(v) for k, v in value.items()}}
        else:
            coerced = value
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from exc
    return coerced


def _validate(settings: EngineSettings) -> EngineSettings:
    for name in ("default_limit", "legacy_limit", "max_history"):
        if getattr(settings, name) <= 0:
            raise ConfigError(f"{name} must be positive")
    for name in ("cache_ttl_seconds", "debounce_delay_seconds"):
        if getattr(settings, name) < 0:
            raise ConfigError(f"{name} must not be negative")
    for name in ("fuzzy_threshold", "description_threshold"):
        if not 0.0 <= getattr(settings, name) <= 1.0:
            raise ConfigError(f"{name} must be between 0 and 1")
    if any(value < 0 for value in settings.quotas.values()):
        raise ConfigError("quotas must not be negative")
    return settings


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Unable to parse {path}") from exc
    if isinstance(data, dict) and "engine" in data:
        data = data["engine"]
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def load_settings(path: Optional[Path] = None, *, environ: Optional[Mapping[str, str]] = None) -> EngineSettings:
    """Build settings from defaults, the YAML file and ``TYPEAHEAD_*`` variables."""

    if environ is None:
        _load_env_once()
        environ = os.environ
    config_path = path or Path(environ.get(f"{ENV_PREFIX}CONFIG", CONFIG_PATH))

    overrides: Dict[str, Any] = {}
    known = {f.name for f in fields(EngineSettings)}
    if config_path.exists():
        for name, value in _read_yaml(config_path).items():
            if name not in known:
                logger.warning("ignoring unknown setting %s in %s", name, config_path)
                continue
            overrides[name] = _coerce(name, value)

    for name in known - {"quotas"}:
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            overrides[name] = _coerce(name, raw)

    return _validate(replace(EngineSettings(), **overrides))

from __future__ import annotations

from pathlib import Path

import pytest

from typeahead.config import CONFIG_PATH, DEFAULT_QUOTAS, EngineSettings, load_settings
from typeahead.errors import ConfigError


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "typeahead.yml"
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_gives_defaults(tmp_path):
    settings = load_settings(tmp_path / "absent.yml", environ={})

    assert settings == EngineSettings()
    assert settings.quota("history") == 3
    assert settings.quota("unknown") == 0


def test_yaml_values_are_applied(tmp_path):
    path = _write(
        tmp_path,
        "engine:\n"
        "  default_limit: 5\n"
        "  cache_ttl_seconds: 60\n"
        "  persist_cache: yes\n"
        "  storage_path: var/kv.duckdb\n"
        "  quotas:\n"
        "    spots: 5\n",
    )

    settings = load_settings(path, environ={})

    assert settings.default_limit == 5
    assert settings.cache_ttl_seconds == 60.0
    assert settings.persist_cache is True
    assert settings.storage_path == Path("var/kv.duckdb")
    assert settings.quota("spots") == 5
    assert settings.quota("cities") == DEFAULT_QUOTAS["cities"]


def test_environment_overrides_yaml(tmp_path):
    path = _write(tmp_path, "cache_ttl_seconds: 60\ntelemetry_enabled: false\n")

    settings = load_settings(
        path,
        environ={
            "TYPEAHEAD_CACHE_TTL_SECONDS": "15",
            "TYPEAHEAD_TELEMETRY_ENABLED": "true",
            "TYPEAHEAD_SPOTS_PATH": "",
        },
    )

    assert settings.cache_ttl_seconds == 15.0
    assert settings.telemetry_enabled is True
    assert settings.spots_path is None


def test_config_path_from_environment(tmp_path):
    path = _write(tmp_path, "legacy_limit: 12\n")

    settings = load_settings(environ={"TYPEAHEAD_CONFIG": str(path)})

    assert settings.legacy_limit == 12


def test_unknown_keys_are_ignored(tmp_path):
    path = _write(tmp_path, "colour: blue\nmax_history: 5\n")

    assert load_settings(path, environ={}).max_history == 5


@pytest.mark.parametrize(
    "text, environ",
    [
        ("default_limit: 0\n", {}),
        ("fuzzy_threshold: 1.5\n", {}),
        ("quotas: [1, 2]\n", {}),
        ("", {"TYPEAHEAD_DEFAULT_LIMIT": "lots"}),
        ("", {"TYPEAHEAD_CACHE_TTL_SECONDS": "-1"}),
        ("engine: [unclosed\n", {}),
        ("- just\n- a list\n", {}),
    ],
)
def test_invalid_settings_raise(tmp_path, text, environ):
    path = _write(tmp_path, text)

    with pytest.raises(ConfigError):
        load_settings(path, environ=environ)


def test_shipped_config_loads():
    settings = load_settings(CONFIG_PATH, environ={})

    assert settings.default_limit == 8
    assert settings.debounce_delay_seconds == 0.3

# tests/test_config.py
from __future__ import annotations

import json

import pytest

from tabline.config import AppConfig, load_config


def test_defaults(tmp_path):
    config = load_config(cwd=tmp_path, environ={})
    assert isinstance(config, AppConfig)
    assert config.plugin_package == "tabline.plugins"
    assert config.log_level is None
    assert config.log_file_path is None
    assert config.provider_timeout == 2.0
    assert config.max_completion_results == 200
    assert config.enable_completion is True
    assert config.prompt is None
    assert config.show_banner is True
    assert config.extra == {}


def test_environment_overrides(tmp_path):
    config = load_config(cwd=tmp_path, environ={
        "TABLINE_PROVIDER_TIMEOUT": "0.5",
        "TABLINE_LOG_LEVEL": "debug",
        "TABLINE_ENABLE_COMPLETION": "off",
        "OTHER_SETTING": "ignored",
    })
    assert config.provider_timeout == 0.5
    assert config.log_level == "DEBUG"
    assert config.enable_completion is False
    assert "OTHER_SETTING" not in config.extra


def test_files_and_precedence(tmp_path):
    (tmp_path / ".env").write_text('TABLINE_PROMPT="tab> "\nSHOW_BANNER=no\n# comment\n', encoding="utf-8")
    (tmp_path / "config.ini").write_text("[tabline]\nmax_completion_results = 7\n", encoding="utf-8")
    (tmp_path / "config.json").write_text(json.dumps({"provider_timeout": 1.5}), encoding="utf-8")
    (tmp_path / "config.toml").write_text(
        '[tabline]\nlog_level = "info"\n\n[completion]\nstyle = "menu"\n', encoding="utf-8")

    config = load_config(cwd=tmp_path, environ={"TABLINE_SHOW_BANNER": "yes"})
    assert config.prompt == "tab> "
    assert config.max_completion_results == 7
    assert config.provider_timeout == 1.5
    assert config.log_level == "INFO"
    assert config.show_banner is True
    assert config.extra == {"COMPLETION_STYLE": "menu"}


def test_relative_log_file_is_resolved_against_cwd(tmp_path):
    config = load_config(cwd=tmp_path, environ={"TABLINE_LOG_FILE_PATH": "logs/tabline.log"})
    assert config.log_file_path == (tmp_path / "logs" / "tabline.log").resolve()


@pytest.mark.parametrize("key, value", [
    ("PROVIDER_TIMEOUT", "0"),
    ("PROVIDER_TIMEOUT", "soon"),
    ("MAX_COMPLETION_RESULTS", "0"),
    ("LOG_LEVEL", "loud"),
    ("PLUGIN_PACKAGE", "not a package"),
    ("ENABLE_COMPLETION", "maybe"),
])
def test_invalid_values_raise(tmp_path, key, value):
    with pytest.raises(ValueError):
        load_config(cwd=tmp_path, environ={f"TABLINE_{key}": value})


def test_config_is_frozen(tmp_path):
    config = load_config(cwd=tmp_path, environ={})
    with pytest.raises(AttributeError):
        config.prompt = "x"

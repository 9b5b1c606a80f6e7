#!/usr/bin/env python3
# tabline/config/config.py
from __future__ import annotations

"""
Configuration loader (stdlib-only).

Precedence (low → high):
  1) Built-in defaults
  2) Files in CWD: .env, config.ini, config.json, config.toml
  3) Environment variables prefixed with TABLINE_

Validation:
  - PLUGIN_PACKAGE: dotted module path
  - LOG_LEVEL: None or one of {'DEBUG','INFO','WARNING','ERROR','CRITICAL'}
  - LOG_FILE_PATH: None or normalized path
  - PROVIDER_TIMEOUT: float > 0 (seconds a candidate provider may run)
  - MAX_COMPLETION_RESULTS: int >= 1
  - ENABLE_COMPLETION / SHOW_BANNER: bool
  - PROMPT: None or str
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping
import configparser
import json
import os
import re
import tomllib  # stdlib in 3.11+

ENV_PREFIX = "TABLINE_"

DEFAULTS: dict[str, Any] = {
    "PLUGIN_PACKAGE": "tabline.plugins",
    "LOG_LEVEL": None,              # 'DEBUG'/'INFO'/'WARNING'/'ERROR'/'CRITICAL'
    "LOG_FILE_PATH": None,
    "PROVIDER_TIMEOUT": 2.0,
    "MAX_COMPLETION_RESULTS": 200,
    "ENABLE_COMPLETION": True,
    "PROMPT": None,
    "SHOW_BANNER": True,
}

_DOTTED_RE = re.compile(r"[A-Za-z_]\w*(\.[A-Za-z_]\w*)*")


# ---------- data model ----------

@dataclass(frozen=True)
class AppConfig:
    plugin_package: str
    log_level: str | None
    log_file_path: Path | None

    provider_timeout: float
    max_completion_results: int
    enable_completion: bool

    prompt: str | None
    show_banner: bool

    # Unrecognized keys preserved for debugging/forward-compat
    extra: dict[str, Any] = field(default_factory=dict)


# ---------- file loaders (stdlib) ----------

def _load_env_file(path: Path) -> dict[str, str]:
    """Very small .env parser: KEY=VALUE, supports quotes; ignores comments/blank lines."""
    out: dict[str, str] = {}
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return out

    line_re = re.compile(r"""^\s*([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*?)\s*$""")
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = line_re.match(line)
        if not m:
            continue
        k, v = m.group(1), m.group(2)
        if (v.startswith("'") and v.endswith("'")) or (v.startswith('"') and v.endswith('"')):
            v = v[1:-1]
        out[k] = v
    return out


def _load_ini_file(path: Path) -> dict[str, str]:
    cfg = configparser.ConfigParser()
    if not cfg.read(path, encoding="utf-8"):
        return {}
    flat: dict[str, str] = {}
    for sec in cfg.sections():
        for k, v in cfg.items(sec):
            flat[k.upper()] = v
    return flat


def _load_json_file(path: Path) -> dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _load_toml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return {}


def _flatten_mapping(obj: Any, prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested dicts to UPPER_SNAKE keys.
    Example: {'completion': {'max_results': 50}} -> {'COMPLETION_MAX_RESULTS': 50}
    Sections named 'tabline' are transparent: [tabline] log_level = ... -> LOG_LEVEL.
    """
    flat: dict[str, Any] = {}
    if isinstance(obj, Mapping):
        for k, v in obj.items():
            if not prefix and str(k).lower() == "tabline" and isinstance(v, Mapping):
                flat.update(_flatten_mapping(v))
                continue
            key = f"{prefix}_{k}" if prefix else str(k)
            if isinstance(v, Mapping):
                flat.update(_flatten_mapping(v, key))
            else:
                flat[str(key).upper()] = v
    return flat


def _find_config_files(base: Path) -> list[Path]:
    return [
        base / ".env",
        base / "config.ini",
        base / "config.json",
        base / "config.toml",
    ]


# ---------- normalization & coercion ----------

_BOOL_TRUE = {"1", "true", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "no", "n", "off"}


def _as_bool(val: Any) -> bool:
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in _BOOL_TRUE:
        return True
    if s in _BOOL_FALSE:
        return False
    raise ValueError(f"Expected boolean, got: {val!r}")


def _as_int(val: Any) -> int:
    if isinstance(val, int) and not isinstance(val, bool):
        return val
    try:
        return int(str(val).strip())
    except ValueError as exc:
        raise ValueError(f"Expected integer, got: {val!r}") from exc


def _as_float(val: Any) -> float:
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return float(val)
    try:
        return float(str(val).strip())
    except ValueError as exc:
        raise ValueError(f"Expected number, got: {val!r}") from exc


def _as_opt_str(val: Any) -> str | None:
    return None if val is None or str(val).strip().lower() in {"", "none"} else str(val)


def _as_log_level(val: Any) -> str | None:
    lv = _as_opt_str(val)
    if lv is None:
        return None
    up = lv.upper()
    allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if up not in allowed:
        raise ValueError(
            f"LOG_LEVEL must be one of {sorted(allowed)}, got {lv!r}")
    return up


def _as_opt_path(val: Any, base: Path) -> Path | None:
    v = _as_opt_str(val)
    if v is None:
        return None
    # expand both ~ and env vars
    p = Path(os.path.expandvars(os.path.expanduser(v)))
    return (p if p.is_absolute() else base / p).resolve()


# ---------- merge & load ----------

def _normalize_keys(d: Mapping[str, Any]) -> dict[str, Any]:
    return {str(k).upper(): v for k, v in d.items()}


def _strip_prefix(d: Mapping[str, Any]) -> dict[str, Any]:
    """Accept both 'TABLINE_LOG_LEVEL' and 'LOG_LEVEL' spellings inside config files."""
    return {(k[len(ENV_PREFIX):] if k.startswith(ENV_PREFIX) else k): v for k, v in d.items()}


def _merge_sources(base: Path, environ: Mapping[str, str]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(DEFAULTS)

    for file in _find_config_files(base):
        if file.name == ".env":
            merged.update(_strip_prefix(_normalize_keys(_load_env_file(file))))
        elif file.suffix == ".ini":
            merged.update(_strip_prefix(_normalize_keys(_load_ini_file(file))))
        elif file.suffix == ".json":
            merged.update(_strip_prefix(_normalize_keys(_flatten_mapping(_load_json_file(file)))))
        elif file.suffix == ".toml":
            merged.update(_strip_prefix(_normalize_keys(_flatten_mapping(_load_toml_file(file)))))

    # Environment variables override all; only TABLINE_* keys
    env_overrides = {k[len(ENV_PREFIX):]: v for k, v in environ.items()
                     if k.startswith(ENV_PREFIX) and re.fullmatch(r"[A-Z0-9_]+", k)}
    merged.update(env_overrides)
    return merged


# ---------- validation ----------

def _validate_and_build(config: dict[str, Any], base: Path) -> AppConfig:
    plugin_package = str(config.get("PLUGIN_PACKAGE", DEFAULTS["PLUGIN_PACKAGE"])).strip()
    log_level = _as_log_level(config.get("LOG_LEVEL", DEFAULTS["LOG_LEVEL"]))
    log_file_path = _as_opt_path(config.get("LOG_FILE_PATH", DEFAULTS["LOG_FILE_PATH"]), base)
    provider_timeout = _as_float(config.get("PROVIDER_TIMEOUT", DEFAULTS["PROVIDER_TIMEOUT"]))
    max_results = _as_int(config.get("MAX_COMPLETION_RESULTS", DEFAULTS["MAX_COMPLETION_RESULTS"]))
    enable_completion = _as_bool(config.get("ENABLE_COMPLETION", DEFAULTS["ENABLE_COMPLETION"]))
    prompt = _as_opt_str(config.get("PROMPT", DEFAULTS["PROMPT"]))
    show_banner = _as_bool(config.get("SHOW_BANNER", DEFAULTS["SHOW_BANNER"]))

    # --- constraints (no filesystem creation here) ---
    if not _DOTTED_RE.fullmatch(plugin_package):
        raise ValueError(f"PLUGIN_PACKAGE must be a dotted module path, got {plugin_package!r}")
    if provider_timeout <= 0:
        raise ValueError("PROVIDER_TIMEOUT must be > 0")
    if max_results < 1:
        raise ValueError("MAX_COMPLETION_RESULTS must be >= 1")

    # Carry through extra keys
    recognized = set(DEFAULTS.keys())
    extra = {k: v for k, v in config.items() if k not in recognized}

    return AppConfig(
        plugin_package=plugin_package,
        log_level=log_level,
        log_file_path=log_file_path,
        provider_timeout=provider_timeout,
        max_completion_results=max_results,
        enable_completion=enable_completion,
        prompt=prompt,
        show_banner=show_banner,
        extra=extra,
    )


# ---------- public API ----------

def load_config(*, cwd: Path | None = None, environ: Mapping[str, str] | None = None) -> AppConfig:
    """
    Load, merge, normalize, and validate configuration.

    `cwd` and `environ` default to the process working directory and
    os.environ. Raises ValueError for invalid values; no filesystem
    side-effects.
    """
    base = (cwd or Path.cwd()).resolve()
    raw = _merge_sources(base, os.environ if environ is None else environ)
    return _validate_and_build(raw, base)

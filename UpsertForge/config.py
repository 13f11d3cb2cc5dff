"""Configuration for the call logger."""
from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

import yaml

_warned_config = False


def _print_once(msg: str) -> None:
    """Print a config warning to stderr once per process."""
    global _warned_config
    if not _warned_config:
        print(msg, file=sys.stderr)
        _warned_config = True


@dataclass(frozen=True)
class LogConfig:
    """Call logger controls."""
    enabled: bool = False
    dir: str = "log"
    max_repr_len: int = 2000
    bucket_minutes: int = 10


def _resolve_config_path(path: Optional[Union[str, Path]]) -> Optional[Path]:
    if path is not None:
        return Path(path)
    cwd_path = Path.cwd() / "config.yml"
    return cwd_path if cwd_path.exists() else None


def _positive_int(key: str, value, config_path: Path) -> int:
    default = getattr(LogConfig, key)
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = 0
    if number < 1:
        _print_once(f"[logger] invalid {key}={value!r} in {config_path} (using {default})")
        return default
    return number


def load_log_config(path: Optional[Union[str, Path]] = None) -> LogConfig:
    """Load the ``logging`` section of config.yml, falling back to defaults.

    Resolution order:
    - explicit ``path``
    - CWD/config.yml
    """
    config_path = _resolve_config_path(path)
    if config_path is None:
        return LogConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        _print_once(f"[logger] failed to load {config_path}: {e} (using defaults)")
        return LogConfig()

    section = user_config.get("logging") if isinstance(user_config, dict) else None
    if not isinstance(section, dict):
        return LogConfig()
    known = {f.name for f in fields(LogConfig)}
    values = {k: v for k, v in section.items() if k in known}
    for key in ("max_repr_len", "bucket_minutes"):
        if key in values:
            values[key] = _positive_int(key, values[key], config_path)
    return LogConfig(**values)

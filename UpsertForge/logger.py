"""
Lightweight function call + snapshot logger with 10-min file bucketing.
"""
import inspect
import json
import os
import sys
from datetime import datetime
from functools import wraps
from pathlib import Path

import pandas as pd

from .config import load_log_config

# ===================== CONFIG =====================

_warned_logfile = False


def _print_once(msg: str) -> None:
    """Print a logfile warning to stderr once per process."""
    global _warned_logfile
    if not _warned_logfile:
        print(msg, file=sys.stderr)
        _warned_logfile = True


_LOG_CONFIG = load_log_config()

LOG_DIR = Path.cwd() / _LOG_CONFIG.dir
SEP = "-" * 42
MAX_REPR_LEN = _LOG_CONFIG.max_repr_len
BUCKET_MINUTES = max(1, int(_LOG_CONFIG.bucket_minutes))

# Environment variable override
ENV_LOGGING = os.getenv("UPSERT_LOGGING")
if ENV_LOGGING is not None:
    ENABLE_LOGGING = ENV_LOGGING.lower() == "true"
else:
    ENABLE_LOGGING = bool(_LOG_CONFIG.enabled)

# ===================== CORE =====================


def _bucketed_filename() -> Path:
    now = datetime.now()
    minute = (now.minute // BUCKET_MINUTES) * BUCKET_MINUTES
    ts = now.replace(minute=minute, second=0).strftime("%d%m%Y-%H%M")
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    return LOG_DIR / f"log_{ts}.txt"


def _safe_str(obj, maxlen=None):
    maxlen = MAX_REPR_LEN if maxlen is None else maxlen
    if obj is None:
        return "None"

    if isinstance(obj, (str, int, float, bool)):
        return str(obj)

    if isinstance(obj, bytes):
        s = obj[:maxlen].hex()
        return s + ("..." if len(obj) > maxlen else "")

    if isinstance(obj, pd.DataFrame):
        return f"DataFrame(shape={obj.shape}, columns={list(obj.columns)})"

    try:
        s = repr(obj)
        return s[:maxlen] + ("..." if len(s) > maxlen else "")
    except Exception:
        return f"<unserializable {type(obj).__name__}>"


def _append(lines) -> None:
    try:
        fname = _bucketed_filename()
        with fname.open("a", encoding="utf-8") as f:
            f.write("".join(lines))
    except OSError as e:
        _print_once(f"[logger] failed to write to {LOG_DIR}: {e}")


# ===================== DECORATOR =====================


def log_call(func):
    """Decorator that logs function call inputs and outputs/errors if logging is enabled."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        if not ENABLE_LOGGING:
            return func(*args, **kwargs)

        header = f"# {func.__module__} - {func.__qualname__}"
        lines = [f"{header} (START)\n", "- inputs:\n"]
        try:
            bound = inspect.signature(func).bind_partial(*args, **kwargs)
            for k, v in bound.arguments.items():
                lines.append(f"  {k}: {_safe_str(v)}\n")
        except TypeError as e:
            lines.append(f"  <failed to parse signature: {e}>\n")
        lines.append("\n")
        _append(lines)

        try:
            out = func(*args, **kwargs)
        except Exception as e:
            _append([f"{header} (FAILURE)\n", f"- error: {type(e).__name__}: {e}\n", f"{SEP}\n"])
            raise
        _append([f"{header} (SUCCESS)\n", "- outputs:\n", f"  {_safe_str(out)}\n", f"{SEP}\n"])
        return out

    return wrapper


# ===================== SNAPSHOT HELPERS =====================


def log_string(label: str, value: str):
    """Append labeled string snapshot."""
    if not ENABLE_LOGGING:
        return
    if not isinstance(value, str):
        raise TypeError("log_string expects str")
    _append([f"# STRING - {label}\n\n", value + "\n", f"{SEP}\n"])


def log_json(label: str, obj):
    """Append JSON snapshot (best-effort serialization)."""
    if not ENABLE_LOGGING:
        return
    try:
        payload = json.dumps(obj, indent=2, default=str)
    except (TypeError, ValueError) as e:
        payload = f"<json serialization failed: {e}>"
    _append([f"# JSON - {label}\n\n", payload + "\n", f"{SEP}\n"])


def log_dataframe(label: str, df: pd.DataFrame, max_rows=20):
    """Append dataframe snapshot (head only)."""
    if not ENABLE_LOGGING:
        return
    if not isinstance(df, pd.DataFrame):
        raise TypeError("log_dataframe expects pandas.DataFrame")
    lines = [f"# DATAFRAME - {label}\n\n", f"shape={df.shape}\n\n", df.head(max_rows).to_string(index=False)]
    if len(df) > max_rows:
        lines.append(f"\n... ({len(df) - max_rows} more rows)")
    lines.append(f"\n{SEP}\n")
    _append(lines)

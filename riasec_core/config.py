from __future__ import annotations
import os, json, pathlib


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


ITEM_COUNT: int = 30
OPTIONS_PER_ITEM: int = 3
OPTION_SUFFIXES: str = "abc"
PASS_VALUE: str = "pass"

RESPONSE_TIME_MAX_SEC: float = 600.0

PROFILE_LENGTH: int = 6
TOP_N_PERSISTED: int = 10
PREVIEW_LIMIT_DEFAULT: int = 15
PREVIEW_LIMIT_MAX: int = 20
SCORE_DECIMALS: int = 2
# scores equal to this many decimals tie and fall back to name order
SCORE_TIE_DIGITS: int = 9

NAME_MAX: int = 50
SUBJECT_MAX: int = 30
MAJOR_NAME_MAX: int = 150
USER_ID_MAX: int = 128
SATISFACTION_MIN: int = 1
SATISFACTION_MAX: int = 5

RESPONSES_EXPORT_ENABLED: bool = True
LOG_LEVEL: str = "INFO"

# env overrides for deployments
TOP_N_PERSISTED = _env_int("TOP_N_PERSISTED", TOP_N_PERSISTED)
PREVIEW_LIMIT_DEFAULT = _env_int("PREVIEW_LIMIT_DEFAULT", PREVIEW_LIMIT_DEFAULT)
PREVIEW_LIMIT_MAX = _env_int("PREVIEW_LIMIT_MAX", PREVIEW_LIMIT_MAX)
RESPONSE_TIME_MAX_SEC = _env_float("RESPONSE_TIME_MAX_SEC", RESPONSE_TIME_MAX_SEC)
RESPONSES_EXPORT_ENABLED = _env_bool("RESPONSES_EXPORT_ENABLED", RESPONSES_EXPORT_ENABLED)
LOG_LEVEL = (os.getenv("LOG_LEVEL") or LOG_LEVEL).strip().upper()

_TUNABLE = ("TOP_N_PERSISTED", "PREVIEW_LIMIT_DEFAULT", "PREVIEW_LIMIT_MAX")


def load_config(path: str = "config.json") -> dict:
    """Module defaults, overlaid with integer keys from an optional JSON file."""
    cfg = {k: globals()[k] for k in _TUNABLE}
    p = pathlib.Path(path)
    if p.exists():
        raw = json.loads(p.read_text(encoding="utf-8"))
        for k in _TUNABLE:
            if k in raw:
                cfg[k] = int(raw[k])
    cfg["PREVIEW_LIMIT_MAX"] = max(1, cfg["PREVIEW_LIMIT_MAX"])
    cfg["PREVIEW_LIMIT_DEFAULT"] = max(1, min(cfg["PREVIEW_LIMIT_DEFAULT"], cfg["PREVIEW_LIMIT_MAX"]))
    cfg["TOP_N_PERSISTED"] = max(1, cfg["TOP_N_PERSISTED"])
    return cfg

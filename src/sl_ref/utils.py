from __future__ import annotations

import logging
import os
from typing import Optional

from .types import EvalLimits, SlBool, SlFn, SlInteger, SlNoValue, SlString, SlValue

DEFAULT_MAX_CALL_DEPTH = 1000

_UNLIMITED = {"none", "off", "unlimited", "0"}


def env_limit(env_var: str, default: Optional[int]) -> Optional[int]:
    """Read a positive integer limit; 'none'/'off'/0 disable it, junk keeps the default."""
    raw = os.getenv(env_var)
    if raw is None or not raw.strip():
        return default

    raw = raw.strip()
    if raw.lower() in _UNLIMITED:
        return None

    try:
        value = int(raw)
    except ValueError:
        return default

    return value if value > 0 else None


def default_limits() -> EvalLimits:
    return EvalLimits(
        max_call_depth=env_limit("SL_MAX_CALL_DEPTH", DEFAULT_MAX_CALL_DEPTH),
        max_steps=env_limit("SL_MAX_STEPS", None),
    )


def log_level_from_env(default: int = logging.WARNING) -> int:
    raw = os.getenv("SL_LOG_LEVEL")
    if not raw:
        return default

    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


def sl_equals(lhs: SlValue, rhs: SlValue) -> bool:
    match (lhs, rhs):
        case (SlInteger(value=a), SlInteger(value=b)):
            return a == b
        case (SlBool(value=a), SlBool(value=b)):
            return a == b
        case (SlString(value=a), SlString(value=b)):
            return a == b
        case (SlFn(), SlFn()):
            return lhs is rhs
        case (SlNoValue(), SlNoValue()):
            return True
        case _:
            return False

# lifeweeks/util/env.py
from __future__ import annotations

import os

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_flag(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    v = (raw or "").strip().lower()
    if v in _FALSE:
        return False
    if v in _TRUE:
        return True
    return default


def env_flag(name: str, default: bool = False) -> bool:
    return parse_flag(os.getenv(name), default)

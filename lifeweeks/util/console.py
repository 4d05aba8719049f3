# lifeweeks/util/console.py
from __future__ import annotations

import sys
from typing import Any

from .env import env_flag


def eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


def obs_enabled() -> bool:
    return env_flag("LIFEWEEKS_OBS_LOG", default=False)


def obs_warn(component: str, msg: str) -> None:
    """Print an observability warning when LIFEWEEKS_OBS_LOG is on."""
    if obs_enabled():
        eprint(f"[lifeweeks.{component}] WARN: {msg}")

# lifeweeks/config.py
from __future__ import annotations

import datetime as dt
import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .colors import DEFAULT_PALETTE
from .util.dates import parse_date_yyyy_mm_dd
from .util.env import env_flag, parse_flag

DEFAULT_SPAN_YEARS = 90


@dataclass(frozen=True)
class GridConfig:
    birth_date: dt.date
    start_year: int
    end_year: int
    show_world_events: bool = True
    show_presidents: bool = True
    show_personal_event_dates: bool = True
    compact: bool = False
    palette: Tuple[str, ...] = DEFAULT_PALETTE
    personal_events: Optional[str] = None
    world_events: Optional[str] = None
    president_events: Optional[str] = None


def _flag(raw: Dict[str, Any], key: str, default: bool) -> bool:
    v = raw.get(key)
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        return parse_flag(v, default)
    return default


def _year(raw: Dict[str, Any], key: str, default: int) -> int:
    v = raw.get(key)
    if v is None:
        return default
    try:
        return int(v)
    except (TypeError, ValueError) as ex:
        raise ValueError(f"{key} must be an integer year, got {v!r}") from ex


def _path(raw: Dict[str, Any], key: str, base_dir: str) -> Optional[str]:
    v = str(raw.get(key) or "").strip()
    if not v:
        return None
    v = os.path.expanduser(v)
    if not os.path.isabs(v):
        v = os.path.join(base_dir, v)
    return v


def config_from_dict(raw: Dict[str, Any], *, base_dir: str = ".") -> GridConfig:
    """Build a GridConfig from a parsed JSON object.

    Fields:
      birth_date (required; YYYY-MM-DD)
      start_year (optional; default birth year)
      end_year (optional; default birth year + 90)
      show_world_events, show_presidents, show_personal_event_dates (optional; default true)
      compact (optional; default env LIFEWEEKS_COMPACT or false)
      palette (optional; list of CSS colors)
      events.personal / events.world / events.president (optional; JSON paths,
        relative to the config file)
    """
    bd = str(raw.get("birth_date") or "").strip()
    if not bd:
        raise ValueError("birth_date is required")
    try:
        birth_date = parse_date_yyyy_mm_dd(bd)
    except ValueError as ex:
        raise ValueError(f"birth_date must be YYYY-MM-DD, got {bd!r}") from ex

    start_year = _year(raw, "start_year", birth_date.year)
    end_year = _year(raw, "end_year", birth_date.year + DEFAULT_SPAN_YEARS)

    palette_raw = raw.get("palette")
    if palette_raw is None:
        palette = DEFAULT_PALETTE
    elif isinstance(palette_raw, list):
        palette = tuple(str(c).strip() for c in palette_raw if str(c).strip())
        if not palette:
            raise ValueError("palette must list at least one color")
    else:
        raise ValueError("palette must be a list of colors")

    events = raw.get("events") if isinstance(raw.get("events"), dict) else {}

    return GridConfig(
        birth_date=birth_date,
        start_year=start_year,
        end_year=end_year,
        show_world_events=_flag(raw, "show_world_events", True),
        show_presidents=_flag(raw, "show_presidents", True),
        show_personal_event_dates=_flag(raw, "show_personal_event_dates", True),
        compact=_flag(raw, "compact", env_flag("LIFEWEEKS_COMPACT", default=False)),
        palette=palette,
        personal_events=_path(events, "personal", base_dir),
        world_events=_path(events, "world", base_dir),
        president_events=_path(events, "president", base_dir),
    )


def load_config(path: str) -> GridConfig:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as ex:
        raise ValueError(f"Failed to read config {path}: {ex}") from ex
    if not isinstance(raw, dict):
        raise ValueError(f"config must be a JSON object: {path}")
    return config_from_dict(raw, base_dir=os.path.dirname(os.path.abspath(path)))

# lifeweeks/events.py
from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .model import SOURCES, Event, EventMapping
from .util.console import obs_warn
from .util.dates import parse_date_yyyy_mm_dd

_CORE_KEYS = {"headline", "description", "milestone", "color", "eventType", "source"}


def normalize_event(raw: Any, source: str) -> Optional[Event]:
    """Turn one raw event record into an Event tagged with `source`.

    Unknown keys (category, party, termNumber, ...) are kept in `extra`.
    """
    if source not in SOURCES:
        raise ValueError(f"Unknown event source: {source!r}")
    if isinstance(raw, Event):
        return raw if raw.source == source else Event(
            headline=raw.headline,
            source=source,
            description=raw.description,
            milestone=raw.milestone,
            color=raw.color,
            extra=dict(raw.extra),
        )
    if not isinstance(raw, dict):
        return None

    headline = str(raw.get("headline") or "").strip()
    if not headline:
        return None

    desc = raw.get("description")
    desc_s = str(desc).strip() if desc is not None else ""
    color = raw.get("color")
    color_s = str(color).strip() if color is not None else ""

    return Event(
        headline=headline,
        source=source,
        description=desc_s or None,
        milestone=raw.get("milestone") is True,
        color=color_s or None,
        extra={k: v for k, v in raw.items() if k not in _CORE_KEYS},
    )


def normalize_event_mapping(raw: Mapping[str, Sequence[Any]], source: str) -> EventMapping:
    out: EventMapping = {}
    for date_key, records in raw.items():
        key = str(date_key).strip()
        try:
            parse_date_yyyy_mm_dd(key)
        except ValueError:
            obs_warn("events", f"skipping invalid date key source={source} key={date_key!r}")
            continue
        if not isinstance(records, (list, tuple)):
            obs_warn("events", f"skipping non-list entry source={source} key={key}")
            continue
        events: List[Event] = []
        for rec in records:
            ev = normalize_event(rec, source)
            if ev is None:
                obs_warn("events", f"skipping event without headline source={source} key={key}")
                continue
            events.append(ev)
        if events:
            out.setdefault(key, []).extend(events)
    return out


def load_event_mapping(path: str, source: str) -> EventMapping:
    """Load a date-keyed event table from JSON.

    Format: { "YYYY-MM-DD": [ {"headline": ..., "description": ..., ...}, ... ] }
    """
    if not path or not os.path.exists(path):
        raise ValueError(f"Missing {source} events file: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as ex:
        raise ValueError(f"Failed to read {source} events from {path}: {ex}") from ex
    if not isinstance(raw, dict):
        raise ValueError(f"{source} events file must hold a JSON object: {path}")
    return normalize_event_mapping(raw, source)


def merge_events(
    personal: Mapping[str, Sequence[Any]],
    world: Optional[Mapping[str, Sequence[Any]]] = None,
    president: Optional[Mapping[str, Sequence[Any]]] = None,
    *,
    show_world_events: bool = True,
    show_presidents: bool = True,
) -> EventMapping:
    """Merge the event sources into one mapping keyed by ISO date.

    Per date, personal events come first, then world, then president.
    Nothing is dropped or deduplicated, and the inputs are left untouched.
    """
    sources: List[tuple[str, Mapping[str, Sequence[Any]]]] = [("personal", personal)]
    if show_world_events and world:
        sources.append(("world", world))
    if show_presidents and president:
        sources.append(("president", president))

    merged: Dict[str, List[Event]] = {}
    for source, mapping in sources:
        for date_key, records in mapping.items():
            tagged = [ev for ev in (normalize_event(r, source) for r in records) if ev is not None]
            merged.setdefault(str(date_key), []).extend(tagged)
    return merged


def milestone_dates(merged: Mapping[str, Sequence[Event]]) -> set[str]:
    return {d for d, events in merged.items() if any(e.is_milestone for e in events)}


def first_milestone(events: Sequence[Event]) -> Optional[Event]:
    for e in events:
        if e.is_milestone:
            return e
    return None


__all__ = [
    "normalize_event",
    "normalize_event_mapping",
    "load_event_mapping",
    "merge_events",
    "milestone_dates",
    "first_milestone",
]

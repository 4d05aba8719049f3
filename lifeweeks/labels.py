# lifeweeks/labels.py
from __future__ import annotations

import re
from typing import List, Optional, Sequence

from .model import Event
from .util.dates import format_tooltip_date

# Emoji blocks; a flag is a pair of regional indicators.
_EMOJI_RE = re.compile(
    "[\U0001F600-\U0001F64F]"
    "|[\U0001F300-\U0001F5FF]"
    "|[\U0001F680-\U0001F6FF]"
    "|[\U0001F1E0-\U0001F1FF]{2}"
    "|[\u2600-\u26FF]"
    "|[\u2700-\u27BF]"
    "|[\U0001F900-\U0001F9FF]"
    "|[\U0001F018-\U0001F270]"
    "|[\U0001F000-\U0001F02F]"
    "|[\U0001F0A0-\U0001F0FF]"
)

SOURCE_PREFIX = {
    "world": "🌍 ",
    "president": "🇺🇸 ",
}


def extract_first_emoji(text: str) -> Optional[str]:
    m = _EMOJI_RE.search(text or "")
    return m.group(0) if m else None


def create_compact_event_label(headline: str) -> str:
    return extract_first_emoji(headline) or ""


def should_show_in_compact(headline: str) -> bool:
    return extract_first_emoji(headline) is not None


def create_tooltip(
    week_date: str,
    description: Optional[str] = None,
    event_date: Optional[str] = None,
    source: Optional[str] = None,
    show_personal_event_dates: bool = True,
    doing: Optional[str] = None,
    association: Optional[str] = None,
    based: Optional[str] = None,
) -> str:
    """Tooltip text for a week or event box.

    Day-of-month is hidden only for personal events when
    `show_personal_event_dates` is off.
    """
    show_full_date = source != "personal" or show_personal_event_dates
    formatted = format_tooltip_date(event_date or week_date, show_full_date)

    if description:
        return f"{formatted} – {description}"

    contexts: List[str] = []
    if doing:
        contexts.append(doing)
    if association:
        contexts.append(f"at {association}")
    if based:
        contexts.append(f"based in {based}")
    if not contexts:
        return formatted
    return f"{formatted} – {', '.join(contexts)}"


def describe_events(events: Sequence[Event]) -> str:
    lines = []
    for e in events:
        line = SOURCE_PREFIX.get(e.source, "") + e.headline
        if e.description:
            line += f" - {e.description}"
        lines.append(line)
    return "\n".join(lines)


def create_birthday_label(age: int, year: int, compact: bool = False) -> str:
    if compact:
        return f"🎂{age}"
    return f"🎂 {age} in {year}"


def create_birthday_tooltip(date: str, age: int, show_full_date: bool = False) -> str:
    year_text = "year" if age == 1 else "years"
    return f"{format_tooltip_date(date, show_full_date)} – Turned {age} {year_text} old"


__all__ = [
    "extract_first_emoji",
    "create_compact_event_label",
    "should_show_in_compact",
    "create_tooltip",
    "describe_events",
    "create_birthday_label",
    "create_birthday_tooltip",
]

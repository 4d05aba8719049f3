# lifeweeks/calendar.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import FrozenSet, List, Mapping, Sequence, Tuple

from .labels import (
    create_birthday_label,
    create_birthday_tooltip,
    create_compact_event_label,
    create_tooltip,
    describe_events,
    should_show_in_compact,
)
from .events import first_milestone
from .model import Event, GridBox
from .util.dates import age_on, anniversary, iso, week_start_sunday

LAST_WEEK_INDEX = 52


@dataclass(frozen=True)
class CalendarWalk:
    boxes: Tuple[GridBox, ...]
    milestone_dates: FrozenSet[str]


def week_anchor(birth_date: dt.date, year: int, week: int) -> dt.date:
    """Sunday-aligned start of week `week` of the age-year beginning in `year`.

    Weeks are counted from the birthday anniversary, re-synchronized every
    year so leap days never accumulate drift. In the birth year this is the
    Sunday before (or on) the birth date plus `week` weeks.
    """
    return week_start_sunday(anniversary(birth_date, year) + dt.timedelta(days=7 * week))


def find_week_events(
    anchor: dt.date,
    next_birthday: dt.date,
    merged: Mapping[str, Sequence[Event]],
) -> Tuple[str, Sequence[Event]]:
    """Return (day, events) for the first day of the week that has events.

    Events are stored on their exact calendar date, so the week's seven
    days are scanned from the anchor, never crossing the next birthday.
    Falls back to (anchor, []) when the week is empty.
    """
    anchor_key = iso(anchor)
    found = merged.get(anchor_key) or ()
    if found:
        return anchor_key, found
    for offset in range(7):
        day = anchor + dt.timedelta(days=offset)
        if day >= next_birthday:
            break
        key = iso(day)
        events = merged.get(key) or ()
        if events:
            return key, events
    return anchor_key, ()


def primary_event(events: Sequence[Event]) -> Event:
    return first_milestone(events) or events[0]


def _week_box(anchor_key: str, age: int, year: int) -> GridBox:
    return GridBox(
        kind="week",
        label="",
        date=anchor_key,
        tooltip=create_tooltip(anchor_key),
        age=age,
        year=year,
    )


def walk_calendar(
    birth_date: dt.date,
    start_year: int,
    end_year: int,
    merged: Mapping[str, Sequence[Event]],
    *,
    compact: bool = False,
    show_personal_event_dates: bool = True,
) -> CalendarWalk:
    """Emit every birthday/event/week box from `start_year` to `end_year`.

    Each age-year yields 52 or 53 week boxes; no week box is anchored on or
    after the next birthday. A start year after the end year yields nothing.
    """
    boxes: List[GridBox] = []
    milestones: set[str] = set()

    for year in range(start_year, end_year + 1):
        age = year - start_year
        birthday = anniversary(birth_date, year)
        next_birthday = anniversary(birth_date, year + 1)

        if age > 0:
            bday_key = iso(birthday)
            boxes.append(
                GridBox(
                    kind="birthday",
                    label=create_birthday_label(age, year, compact),
                    date=bday_key,
                    tooltip=create_birthday_tooltip(bday_key, age, show_personal_event_dates),
                    age=age,
                    year=year,
                )
            )

        # Week 0 of later years is the previous year's last week.
        first_week = 0 if age == 0 else 1

        for week in range(first_week, LAST_WEEK_INDEX + 1):
            anchor = week_anchor(birth_date, year, week)
            if anchor >= next_birthday:
                continue

            anchor_key = iso(anchor)
            week_age = age_on(anchor, birth_date)
            day_key, events = find_week_events(anchor, next_birthday, merged)

            if not events:
                boxes.append(_week_box(anchor_key, week_age, year))
                continue

            if any(e.is_milestone for e in events):
                milestones.add(anchor_key)

            primary = primary_event(events)
            if compact and not should_show_in_compact(primary.headline):
                boxes.append(_week_box(anchor_key, week_age, year))
                continue

            boxes.append(
                GridBox(
                    kind="event",
                    label=create_compact_event_label(primary.headline) if compact else primary.headline,
                    date=anchor_key,
                    tooltip=create_tooltip(
                        anchor_key,
                        describe_events(events),
                        day_key,
                        primary.source,
                        show_personal_event_dates,
                    ),
                    age=week_age,
                    year=year,
                    source=primary.source,
                    event_date=day_key,
                )
            )

    return CalendarWalk(boxes=tuple(boxes), milestone_dates=frozenset(milestones))

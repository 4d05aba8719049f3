# lifeweeks/colors.py
from __future__ import annotations

from dataclasses import dataclass
from itertools import accumulate
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from .events import milestone_dates
from .model import Event, GridBox

# Used when the caller supplies no palette of its own.
DEFAULT_PALETTE: Tuple[str, ...] = (
    "#fde2e4",
    "#e2ece9",
    "#fff1e6",
    "#dfe7fd",
    "#eae4e9",
    "#f0efeb",
    "#d7e3fc",
    "#cddafd",
    "#bee1e6",
    "#fad2e1",
)


class PaletteError(ValueError):
    """Raised when a palette cannot be used to color boxes."""


@dataclass(frozen=True)
class MilestoneColorMap:
    colors: Dict[str, str]
    default: str

    def get(self, date: str) -> str:
        return self.colors.get(date, self.default)

    def __contains__(self, date: object) -> bool:
        return date in self.colors

    def __len__(self) -> int:
        return len(self.colors)


@dataclass(frozen=True)
class _ColorState:
    index: int
    color: str
    last_date: Optional[str]


def _check_palette(palette: Sequence[str]) -> Tuple[str, ...]:
    out = tuple(str(c) for c in palette)
    if not out:
        raise PaletteError("palette must contain at least one color")
    return out


def _override_for(box: GridBox, merged: Mapping[str, Sequence[Event]]) -> Optional[str]:
    """Last explicit color among the events keyed at the box's date."""
    found = None
    for e in merged.get(box.date) or ():
        if e.color:
            found = e.color
    return found


def box_milestone_dates(
    boxes: Iterable[GridBox],
    merged: Mapping[str, Sequence[Event]],
) -> set[str]:
    """Dates of event boxes whose underlying events include a milestone."""
    out: set[str] = set()
    for box in boxes:
        if box.kind != "event":
            continue
        for key in {box.date, box.event_date or box.date}:
            if any(e.is_milestone for e in merged.get(key) or ()):
                out.add(box.date)
    return out


def assign_milestone_colors(
    boxes: Sequence[GridBox],
    merged: Mapping[str, Sequence[Event]],
    palette: Sequence[str],
    extra_milestone_dates: Iterable[str] = (),
) -> MilestoneColorMap:
    """Color every box date by walking the boxes chronologically.

    The palette index advances once per distinct milestone date; past the
    end of the palette the current color is kept. An explicit event color
    keyed at the box date replaces the current color until the next advance
    or override.
    """
    colors = _check_palette(palette)

    marks = milestone_dates(merged)
    marks |= box_milestone_dates(boxes, merged)
    marks |= set(extra_milestone_dates)

    def step(state: _ColorState, box: GridBox) -> _ColorState:
        if box.date == state.last_date:
            return state
        index, color = state.index, state.color
        if box.date in marks:
            index += 1
            if index < len(colors):
                color = colors[index]
        override = _override_for(box, merged)
        if override:
            color = override
        return _ColorState(index=index, color=color, last_date=box.date)

    ordered = sorted(boxes, key=lambda b: b.date)
    start = _ColorState(index=0, color=colors[0], last_date=None)
    states = accumulate(ordered, step, initial=start)
    next(states)
    return MilestoneColorMap(colors={s.last_date: s.color for s in states}, default=colors[0])


__all__ = [
    "DEFAULT_PALETTE",
    "PaletteError",
    "MilestoneColorMap",
    "assign_milestone_colors",
    "box_milestone_dates",
]

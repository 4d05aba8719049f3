# lifeweeks/model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

SOURCES = ("personal", "world", "president")


@dataclass(frozen=True)
class Event:
    headline: str
    source: str  # "personal" | "world" | "president"
    description: Optional[str] = None
    milestone: bool = False
    color: Optional[str] = None

    # category, party, president, termNumber, based, doing, association, ...
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def is_milestone(self) -> bool:
        return self.source == "personal" and bool(self.milestone)


# ISO date -> events in source-merge order
EventMapping = Dict[str, List[Event]]


@dataclass(frozen=True)
class GridBox:
    kind: str  # "birthday" | "event" | "week"
    label: str
    date: str
    tooltip: str
    age: int
    year: int

    # event boxes only
    source: Optional[str] = None
    event_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "kind": self.kind,
            "label": self.label,
            "date": self.date,
            "tooltip": self.tooltip,
            "age": self.age,
            "year": self.year,
        }
        if self.kind == "event":
            out["source"] = self.source
            out["event_date"] = self.event_date
        return out


@dataclass(frozen=True)
class ResponsiveConstants:
    container_width: int
    base_padding: int
    char_width: int
    week_box_min_width: int


Row = Tuple[GridBox, ...]


@dataclass(frozen=True)
class DecadeSection:
    decade_id: str
    age: int
    boxes: Tuple[GridBox, ...]


@dataclass(frozen=True)
class RowBreakCalculation:
    current_width: int
    new_box_width: int
    total_after_add: int
    should_break: bool


__all__ = [
    "SOURCES",
    "Event",
    "EventMapping",
    "GridBox",
    "ResponsiveConstants",
    "Row",
    "DecadeSection",
    "RowBreakCalculation",
]

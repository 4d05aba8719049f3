# lifeweeks/payload.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .calendar import walk_calendar
from .colors import DEFAULT_PALETTE, MilestoneColorMap, assign_milestone_colors, box_milestone_dates
from .events import merge_events
from .layout import group_boxes_by_decade, process_boxes_into_rows, resolve_constants, usable_width
from .model import GridBox, ResponsiveConstants, Row

SCHEMA_VERSION = 1


@dataclass(frozen=True)
class GridResult:
    boxes: Tuple[GridBox, ...]
    rows: Tuple[Row, ...]
    colors: MilestoneColorMap
    milestone_dates: Tuple[str, ...]
    constants: ResponsiveConstants
    start_year: int
    end_year: int


def build_grid(
    birth_date: dt.date,
    personal: Mapping[str, Sequence[Any]],
    world: Optional[Mapping[str, Sequence[Any]]] = None,
    president: Optional[Mapping[str, Sequence[Any]]] = None,
    *,
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
    palette: Sequence[str] = DEFAULT_PALETTE,
    compact: bool = False,
    measured_width: Optional[float] = None,
    viewport_width: Optional[float] = None,
    show_world_events: bool = True,
    show_presidents: bool = True,
    show_personal_event_dates: bool = True,
) -> GridResult:
    """Run merge -> calendar walk -> colors -> rows for one render.

    Pure function of its arguments: nothing is cached between calls.
    """
    first = birth_date.year if start_year is None else int(start_year)
    last = first if end_year is None else int(end_year)

    merged = merge_events(
        personal,
        world,
        president,
        show_world_events=show_world_events,
        show_presidents=show_presidents,
    )
    walk = walk_calendar(
        birth_date,
        first,
        last,
        merged,
        compact=compact,
        show_personal_event_dates=show_personal_event_dates,
    )
    colors = assign_milestone_colors(walk.boxes, merged, palette, walk.milestone_dates)

    constants = resolve_constants(compact, measured_width, viewport_width)
    rows = process_boxes_into_rows(
        walk.boxes,
        compact,
        measured_width,
        viewport_width,
        constants=constants,
    )

    marks = set(walk.milestone_dates) | box_milestone_dates(walk.boxes, merged)
    return GridResult(
        boxes=walk.boxes,
        rows=tuple(rows),
        colors=colors,
        milestone_dates=tuple(sorted(marks)),
        constants=constants,
        start_year=first,
        end_year=last,
    )


def _constants_dict(c: ResponsiveConstants) -> Dict[str, int]:
    return {
        "container_width": c.container_width,
        "base_padding": c.base_padding,
        "char_width": c.char_width,
        "week_box_min_width": c.week_box_min_width,
    }


def grid_to_payload(result: GridResult, cfg: Dict[str, Any]) -> Dict[str, Any]:
    rows: List[List[Dict[str, Any]]] = [[b.to_dict() for b in row] for row in result.rows]
    decades = [
        {
            "decade_id": sec.decade_id,
            "age": sec.age,
            "start": sec.boxes[0].date,
            "end": sec.boxes[-1].date,
            "box_count": len(sec.boxes),
        }
        for sec in group_boxes_by_decade(result.boxes)
    ]
    return {
        "schema_version": SCHEMA_VERSION,
        "cfg": dict(cfg, constants=_constants_dict(result.constants)),
        "rows": rows,
        "colors": {b.date: result.colors.get(b.date) for b in result.boxes},
        "default_color": result.colors.default,
        "milestones": list(result.milestone_dates),
        "decades": decades,
        "meta": {
            "box_count": len(result.boxes),
            "row_count": len(result.rows),
        },
    }


def build_payload(
    birth_date: dt.date,
    personal: Mapping[str, Sequence[Any]],
    world: Optional[Mapping[str, Sequence[Any]]] = None,
    president: Optional[Mapping[str, Sequence[Any]]] = None,
    *,
    start_year: Optional[int] = None,
    end_year: Optional[int] = None,
    palette: Sequence[str] = DEFAULT_PALETTE,
    compact: bool = False,
    measured_width: Optional[float] = None,
    viewport_width: Optional[float] = None,
    show_world_events: bool = True,
    show_presidents: bool = True,
    show_personal_event_dates: bool = True,
) -> Dict[str, Any]:
    """Build a JSON-safe grid payload.

    Identical inputs give an identical payload; serialize with
    `lifeweeks.jsonio.dumps_payload` for byte-identical output.
    """
    result = build_grid(
        birth_date,
        personal,
        world,
        president,
        start_year=start_year,
        end_year=end_year,
        palette=palette,
        compact=compact,
        measured_width=measured_width,
        viewport_width=viewport_width,
        show_world_events=show_world_events,
        show_presidents=show_presidents,
        show_personal_event_dates=show_personal_event_dates,
    )

    cfg = {
        "birth_date": birth_date.isoformat(),
        "start_year": result.start_year,
        "end_year": result.end_year,
        "compact": bool(compact),
        "measured_width": usable_width(measured_width),
        "viewport_width": usable_width(viewport_width),
        "show_world_events": bool(show_world_events),
        "show_presidents": bool(show_presidents),
        "show_personal_event_dates": bool(show_personal_event_dates),
        "palette": [str(c) for c in palette],
    }
    return grid_to_payload(result, cfg)

# lifeweeks/layout.py
from __future__ import annotations

import math
from dataclasses import dataclass
from functools import reduce
from typing import Dict, List, Optional, Sequence, Tuple

from .model import DecadeSection, GridBox, ResponsiveConstants, Row, RowBreakCalculation
from .util.console import obs_warn

BORDER_WIDTH = 2  # 1px each side
GAP_WIDTH = 1
SAFETY_MARGIN = 0.95
COMPACT_WEEK_CELL_WIDTH = 4 + 2 + BORDER_WIDTH + GAP_WIDTH
SMALL_VIEWPORT_MAX = 768
DEFAULT_VIEWPORT_WIDTH = 1200

BREAKPOINTS = ("extraSmall", "mobile", "tablet", "desktop", "wide", "ultrawide")


def _c(container_width: int, base_padding: int, char_width: int, week_box_min_width: int) -> ResponsiveConstants:
    return ResponsiveConstants(
        container_width=container_width,
        base_padding=base_padding,
        char_width=char_width,
        week_box_min_width=week_box_min_width,
    )


# Measured container widths per breakpoint; these mirror the stylesheet's
# media queries and must change together with it.
GRID_CONSTANTS: Dict[str, Dict[str, ResponsiveConstants]] = {
    "normal": {
        "ultrawide": _c(1440, 8, 8, 20),  # 1800px x 80%
        "wide": _c(1190, 8, 8, 20),  # 1400px x 85%
        "desktop": _c(668, 7, 8, 20),
        "tablet": _c(573, 4, 7, 17),
        "mobile": _c(737, 3, 6, 15),  # 768px x 96%
        "extraSmall": _c(307, 2, 5, 12),
    },
    "compact": {
        "ultrawide": _c(1440, 1, 8, 8),
        "wide": _c(1190, 1, 8, 8),
        "desktop": _c(668, 1, 8, 8),
        "tablet": _c(573, 1, 7, 6),
        "mobile": _c(461, 0, 6, 5),
        "extraSmall": _c(307, 0, 5, 4),
    },
}


def breakpoint_for_viewport(viewport_width: float) -> str:
    if viewport_width < 480:
        return "extraSmall"
    if viewport_width <= 768:
        return "mobile"
    if viewport_width < 1024:
        return "tablet"
    if viewport_width < 1400:
        return "desktop"
    if viewport_width < 1800:
        return "wide"
    return "ultrawide"


def calculate_dynamic_constants(container_width: float, compact: bool = False) -> ResponsiveConstants:
    """Derive constants from a measured container width.

    Thresholds follow the font sizes and paddings of the grid's stylesheet.
    The returned container width already carries the safety margin.
    """
    if compact:
        if container_width <= 480:
            char_width, base_padding, week_box_min_width = 7, 2, 14
        elif container_width <= 768:
            char_width, base_padding, week_box_min_width = 8, 2, 14
        else:
            char_width, base_padding, week_box_min_width = 10, 2, 16
    else:
        if container_width < 350:
            char_width = 5
        elif container_width < 500:
            char_width = 6
        elif container_width < 650:
            char_width = 7
        else:
            char_width = 8
        base_padding = max(2, min(8, math.floor(container_width / 150)))
        week_box_min_width = max(12, min(20, math.floor(container_width / 50)))

    return _c(
        int(math.floor(container_width * SAFETY_MARGIN)),
        int(base_padding),
        int(char_width),
        int(week_box_min_width),
    )


def usable_width(width: Optional[float]) -> Optional[float]:
    """Return `width` if it is a finite positive number, else None."""
    if width is None or isinstance(width, bool):
        return None
    try:
        w = float(width)
    except (TypeError, ValueError):
        obs_warn("layout", f"ignoring non-numeric measured width {width!r}")
        return None
    if not math.isfinite(w) or w <= 0:
        if w != 0:
            obs_warn("layout", f"ignoring unusable measured width {width!r}")
        return None
    return w


def resolve_constants(
    compact: bool = False,
    measured_width: Optional[float] = None,
    viewport_width: Optional[float] = None,
) -> ResponsiveConstants:
    """Pick layout constants from a measured width or the breakpoint table.

    A usable measured width wins. Otherwise the viewport width selects a
    breakpoint; with no viewport either, the desktop entry is used.
    """
    measured = usable_width(measured_width)
    if measured is not None:
        return calculate_dynamic_constants(measured, compact)

    table = GRID_CONSTANTS["compact" if compact else "normal"]
    viewport = usable_width(viewport_width)
    if viewport is None:
        return table["desktop"]
    return table[breakpoint_for_viewport(viewport)]


def week_cell_width(compact: bool = False, viewport_width: Optional[float] = None) -> int:
    """Fixed pixel width of an empty week cell.

    Sized against the viewport, not the container, so the cells keep the
    fixed visual grid the stylesheet draws.
    """
    if compact:
        return COMPACT_WEEK_CELL_WIDTH
    viewport = usable_width(viewport_width)
    if viewport is None:
        viewport = DEFAULT_VIEWPORT_WIDTH
    return 18 if viewport <= SMALL_VIEWPORT_MAX else 26


def label_length(label: str) -> int:
    # UTF-16 code units: an emoji counts as two characters.
    return len(label.encode("utf-16-le")) // 2


def calculate_box_width(label: str, constants: ResponsiveConstants) -> int:
    text_width = label_length(label) * constants.char_width
    return text_width + constants.base_padding * 2 + BORDER_WIDTH + GAP_WIDTH


def box_pixel_width(
    box: GridBox,
    constants: ResponsiveConstants,
    compact: bool = False,
    viewport_width: Optional[float] = None,
) -> int:
    if box.kind == "week" or not box.label:
        return week_cell_width(compact, viewport_width)
    return calculate_box_width(box.label, constants)


def should_break_row(
    current_width: int,
    box: GridBox,
    constants: ResponsiveConstants,
    compact: bool = False,
    viewport_width: Optional[float] = None,
) -> RowBreakCalculation:
    new_box_width = box_pixel_width(box, constants, compact, viewport_width)
    total = current_width + new_box_width
    return RowBreakCalculation(
        current_width=current_width,
        new_box_width=new_box_width,
        total_after_add=total,
        should_break=total >= constants.container_width,
    )


@dataclass(frozen=True)
class _PackState:
    rows: Tuple[Row, ...]
    row: Tuple[GridBox, ...]
    width: int


def process_boxes_into_rows(
    boxes: Sequence[GridBox],
    compact: bool = False,
    measured_width: Optional[float] = None,
    viewport_width: Optional[float] = None,
    constants: Optional[ResponsiveConstants] = None,
) -> List[Row]:
    """Greedy single-pass row packing.

    A row is closed before a box that would make it reach the container
    width; a box is never rejected, so one wider than the container still
    gets a row of its own.
    """
    viewport_width = usable_width(viewport_width)
    if constants is None:
        constants = resolve_constants(compact, measured_width, viewport_width)

    def step(state: _PackState, box: GridBox) -> _PackState:
        calc = should_break_row(state.width, box, constants, compact, viewport_width)
        if calc.should_break and state.row:
            return _PackState(rows=state.rows + (state.row,), row=(box,), width=calc.new_box_width)
        return _PackState(rows=state.rows, row=state.row + (box,), width=calc.total_after_add)

    final = reduce(step, boxes, _PackState(rows=(), row=(), width=0))
    rows = list(final.rows)
    if final.row:
        rows.append(final.row)
    return rows


def group_boxes_by_decade(boxes: Sequence[GridBox]) -> List[DecadeSection]:
    decades: Dict[int, List[GridBox]] = {}
    for box in boxes:
        decade = (box.age // 10) * 10
        decades.setdefault(decade, []).append(box)
    return [
        DecadeSection(decade_id=f"decade-{decade}", age=decade, boxes=tuple(decades[decade]))
        for decade in sorted(decades)
    ]


__all__ = [
    "BREAKPOINTS",
    "GRID_CONSTANTS",
    "SAFETY_MARGIN",
    "breakpoint_for_viewport",
    "calculate_dynamic_constants",
    "resolve_constants",
    "week_cell_width",
    "label_length",
    "calculate_box_width",
    "box_pixel_width",
    "should_break_row",
    "process_boxes_into_rows",
    "group_boxes_by_decade",
]

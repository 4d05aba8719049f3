"""lifeweeks.api

Stable *library* entrypoint for lifeweeks.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from lifeweeks.calendar import CalendarWalk, walk_calendar, week_anchor
from lifeweeks.colors import DEFAULT_PALETTE, MilestoneColorMap, PaletteError, assign_milestone_colors
from lifeweeks.config import GridConfig, load_config
from lifeweeks.events import load_event_mapping, merge_events
from lifeweeks.jsonio import dumps_payload
from lifeweeks.layout import (
    GRID_CONSTANTS,
    group_boxes_by_decade,
    process_boxes_into_rows,
    resolve_constants,
)
from lifeweeks.model import Event, GridBox, ResponsiveConstants
from lifeweeks.payload import GridResult, build_grid, build_payload
from lifeweeks.validate import PayloadValidationError, assert_valid_payload, validate_payload

__all__ = [
    "build_grid",
    "build_payload",
    "dumps_payload",
    "merge_events",
    "load_event_mapping",
    "walk_calendar",
    "week_anchor",
    "assign_milestone_colors",
    "resolve_constants",
    "process_boxes_into_rows",
    "group_boxes_by_decade",
    "load_config",
    "validate_payload",
    "assert_valid_payload",
    "Event",
    "GridBox",
    "GridResult",
    "GridConfig",
    "CalendarWalk",
    "MilestoneColorMap",
    "ResponsiveConstants",
    "PaletteError",
    "PayloadValidationError",
    "GRID_CONSTANTS",
    "DEFAULT_PALETTE",
]

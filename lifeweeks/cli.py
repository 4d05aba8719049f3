from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

from .colors import DEFAULT_PALETTE
from .config import DEFAULT_SPAN_YEARS, GridConfig, load_config
from .events import load_event_mapping
from .jsonio import write_payload
from .model import EventMapping
from .payload import build_payload
from .util.console import eprint
from .util.dates import parse_date_yyyy_mm_dd
from .util.env import env_flag
from .validate import validate_payload


def _load_events(path: Optional[str], source: str) -> EventMapping:
    if not path:
        return {}
    try:
        return load_event_mapping(path, source)
    except ValueError as e:
        raise SystemExit(f"Failed to load {source} events: {e}")


def _resolve_config(args: argparse.Namespace) -> GridConfig:
    if args.config:
        try:
            base = load_config(args.config)
        except ValueError as e:
            raise SystemExit(f"Failed to load config: {e}")
    else:
        if not args.birth_date:
            raise SystemExit("--birth-date is required when --config is not given")
        try:
            birth = parse_date_yyyy_mm_dd(args.birth_date)
        except ValueError:
            raise SystemExit(f"Invalid --birth-date: {args.birth_date!r} (expected YYYY-MM-DD)")
        base = GridConfig(
            birth_date=birth,
            start_year=birth.year,
            end_year=birth.year + DEFAULT_SPAN_YEARS,
            compact=env_flag("LIFEWEEKS_COMPACT", default=False),
        )

    birth_date = base.birth_date
    if args.config and args.birth_date:
        try:
            birth_date = parse_date_yyyy_mm_dd(args.birth_date)
        except ValueError:
            raise SystemExit(f"Invalid --birth-date: {args.birth_date!r} (expected YYYY-MM-DD)")

    palette = base.palette
    if args.palette:
        palette = tuple(c.strip() for c in args.palette.split(",") if c.strip())
        if not palette:
            raise SystemExit("--palette must list at least one color")

    return GridConfig(
        birth_date=birth_date,
        start_year=base.start_year if args.start_year is None else int(args.start_year),
        end_year=base.end_year if args.end_year is None else int(args.end_year),
        show_world_events=base.show_world_events and not args.no_world_events,
        show_presidents=base.show_presidents and not args.no_presidents,
        show_personal_event_dates=base.show_personal_event_dates and not args.hide_personal_dates,
        compact=base.compact or bool(args.compact),
        palette=palette,
        personal_events=args.personal_events or base.personal_events,
        world_events=args.world_events or base.world_events,
        president_events=args.president_events or base.president_events,
    )


def main(argv: list[str] | None = None) -> int:
    default_out = os.path.join("build", "lifeweeks.json")
    ap = argparse.ArgumentParser(
        prog="lifeweeks",
        description="Build a life-in-weeks grid (boxes, milestone colors and rows) as JSON.",
    )
    ap.add_argument("--config", default=None, help="Grid config JSON (birth_date, years, flags, palette, event paths)")
    ap.add_argument("--birth-date", default=None, help="Birth date YYYY-MM-DD (overrides config)")
    ap.add_argument("--start-year", type=int, default=None, help="First year of the grid (default: birth year)")
    ap.add_argument("--end-year", type=int, default=None, help=f"Last year of the grid (default: birth year + {DEFAULT_SPAN_YEARS})")
    ap.add_argument("--personal-events", default=None, help="Personal events JSON (date -> [events])")
    ap.add_argument("--world-events", default=None, help="World events JSON (date -> [events])")
    ap.add_argument("--president-events", default=None, help="Presidential terms JSON (date -> [events])")
    ap.add_argument("--no-world-events", action="store_true", help="Leave world events out of the grid")
    ap.add_argument("--no-presidents", action="store_true", help="Leave presidential terms out of the grid")
    ap.add_argument("--hide-personal-dates", action="store_true", help="Hide day-of-month in personal event tooltips")
    ap.add_argument("--compact", action="store_true", help="Compact mode (default: env LIFEWEEKS_COMPACT)")
    ap.add_argument("--width", type=float, default=None, help="Measured container width in pixels")
    ap.add_argument("--viewport-width", type=float, default=None, help="Viewport width in pixels (selects breakpoint)")
    ap.add_argument(
        "--palette",
        default=None,
        help=f"Comma-separated milestone colors (default: {len(DEFAULT_PALETTE)}-color built-in palette)",
    )
    ap.add_argument("--out", default=default_out, help="Output JSON path (default: ./build/lifeweeks.json)")

    args = ap.parse_args(argv)
    cfg = _resolve_config(args)

    if cfg.start_year > cfg.end_year:
        eprint(f"[lifeweeks] WARN: start year {cfg.start_year} is after end year {cfg.end_year}; grid will be empty")

    personal = _load_events(cfg.personal_events, "personal")
    world = _load_events(cfg.world_events, "world") if cfg.show_world_events else {}
    president = _load_events(cfg.president_events, "president") if cfg.show_presidents else {}

    payload = build_payload(
        cfg.birth_date,
        personal,
        world,
        president,
        start_year=cfg.start_year,
        end_year=cfg.end_year,
        palette=cfg.palette,
        compact=cfg.compact,
        measured_width=args.width,
        viewport_width=args.viewport_width,
        show_world_events=cfg.show_world_events,
        show_presidents=cfg.show_presidents,
        show_personal_event_dates=cfg.show_personal_event_dates,
    )

    errs = validate_payload(payload)
    if errs:
        eprint(f"[lifeweeks] ERROR: generated payload is invalid: {'; '.join(errs[:10])}")
        return 3

    try:
        out = write_payload(payload, Path(args.out))
    except PermissionError as e:
        if args.out != default_out:
            raise SystemExit(f"Cannot write output '{args.out}': {e}")
        out = write_payload(payload, Path.home() / ".lifeweeks" / "build" / "lifeweeks.json")
        eprint(f"[lifeweeks] WARN: default output directory is not writable; using {out}")
    except OSError as e:
        raise SystemExit(f"Cannot write output '{args.out}': {e}")

    meta = payload["meta"]
    eprint(f"[lifeweeks] INFO: {meta['box_count']} boxes in {meta['row_count']} rows")
    print(os.path.abspath(str(out)))
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from lifeweeks.jsonio import load_json_object
from lifeweeks.validate import validate_payload


def _die(msg: str, rc: int = 2) -> int:
    print(f"[lifeweeks-validate] ERROR: {msg}", file=sys.stderr)
    return rc


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="lifeweeks-validate",
        description="Validate a lifeweeks grid payload JSON.",
    )
    ap.add_argument("path", help="Payload JSON path")
    ap.add_argument("--max-errors", type=int, default=10, help="Maximum errors to print (default: 10)")
    ns = ap.parse_args(argv)

    p = Path(ns.path)
    if not p.exists():
        return _die(f"Missing input JSON: {p}")

    try:
        payload = load_json_object(p)
    except (OSError, ValueError) as e:
        return _die(f"Failed to load JSON: {p} ({e})")

    errs = validate_payload(payload)
    if errs:
        for e in errs[: max(1, int(ns.max_errors))]:
            print(f"[lifeweeks-validate] {e}", file=sys.stderr)
        return _die(f"Invalid payload: {len(errs)} error(s)", rc=3)

    meta = payload.get("meta") if isinstance(payload.get("meta"), dict) else {}
    print(f"[lifeweeks-validate] OK: {p} (boxes={meta.get('box_count')}, rows={meta.get('row_count')})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Payload validation helpers (library-facing)."""

from __future__ import annotations

from typing import Any, Dict, List

from lifeweeks.payload import SCHEMA_VERSION

_KINDS = {"birthday", "event", "week"}


class PayloadValidationError(ValueError):
    """Raised when a payload fails validation."""


def _require(cond: bool, msg: str, errs: List[str]) -> None:
    if not cond:
        errs.append(msg)


def validate_payload(payload: Dict[str, Any], *, label: str = "payload") -> List[str]:
    if not isinstance(payload, dict):
        return [f"{label}: payload must be a dict/object"]

    errs: List[str] = []
    sv = payload.get("schema_version")
    if isinstance(sv, int) and sv != SCHEMA_VERSION:
        return [f"Unsupported schema_version: {sv} (latest={SCHEMA_VERSION})"]
    _require(sv == SCHEMA_VERSION, f"{label}: schema_version must be an int", errs)

    cfg = payload.get("cfg")
    rows = payload.get("rows")
    colors = payload.get("colors")
    _require(isinstance(cfg, dict), f"{label}: cfg must be dict", errs)
    _require(isinstance(rows, list), f"{label}: rows must be list", errs)
    _require(isinstance(colors, dict), f"{label}: colors must be dict", errs)
    if errs:
        return errs

    prev_date = ""
    count = 0
    for r, row in enumerate(rows):
        if not isinstance(row, list) or not row:
            errs.append(f"{label}: rows[{r}] must be a non-empty list")
            continue
        for i, box in enumerate(row):
            where = f"{label}: rows[{r}][{i}]"
            if not isinstance(box, dict):
                errs.append(f"{where} must be dict")
                continue
            count += 1
            _require(box.get("kind") in _KINDS, f"{where}.kind must be one of {sorted(_KINDS)}", errs)
            d = box.get("date")
            if not (isinstance(d, str) and d):
                errs.append(f"{where}.date must be non-empty string")
                continue
            if d < prev_date:
                errs.append(f"{where}.date {d} is earlier than previous box date {prev_date}")
            prev_date = d
            if d not in colors:
                errs.append(f"{label}: colors missing box date {d}")

    meta = payload.get("meta")
    if isinstance(meta, dict) and isinstance(meta.get("box_count"), int):
        _require(meta["box_count"] == count, f"{label}: meta.box_count={meta['box_count']} but rows hold {count} boxes", errs)

    return errs


def assert_valid_payload(payload: Dict[str, Any]) -> None:
    errs = validate_payload(payload, label="payload")
    if errs:
        raise PayloadValidationError(errs[0])


__all__ = [
    "PayloadValidationError",
    "assert_valid_payload",
    "validate_payload",
]

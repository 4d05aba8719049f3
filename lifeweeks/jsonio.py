# lifeweeks/jsonio.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

try:
    import orjson  # type: ignore
except Exception:  # pragma: no cover
    orjson = None  # type: ignore


def dumps_payload(payload: Dict[str, Any]) -> str:
    """Serialize a payload with sorted keys and no whitespace.

    The output is stable across calls so repeated layouts diff cleanly.
    """
    if not isinstance(payload, dict):
        raise TypeError(f"payload must be dict, got {type(payload).__name__}")
    if orjson is not None:
        return orjson.dumps(payload, option=orjson.OPT_SORT_KEYS).decode("utf-8")
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def load_json_object(path: Path) -> Dict[str, Any]:
    obj = json.loads(path.read_text(encoding="utf-8", errors="replace"))
    if not isinstance(obj, dict):
        raise ValueError(f"expected a JSON object; got {type(obj).__name__}")
    return obj


def write_payload(payload: Dict[str, Any], out: Path) -> Path:
    out = out.expanduser()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(dumps_payload(payload), encoding="utf-8", newline="\n")
    return out

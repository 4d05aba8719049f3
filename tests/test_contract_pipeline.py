from __future__ import annotations

import datetime as dt
import json
import unittest
from pathlib import Path

from lifeweeks import (
    PaletteError,
    build_grid,
    build_payload,
    dumps_payload,
    load_event_mapping,
    resolve_constants,
    validate_payload,
)

FIXTURES = Path(__file__).resolve().parent / "fixtures"
BIRTH = dt.date(1990, 5, 20)  # a Sunday
PALETTE = ("#eeeeee", "#aaccff", "#ffcc99")


def _fixture_events():
    return (
        load_event_mapping(str(FIXTURES / "personal_events.json"), "personal"),
        load_event_mapping(str(FIXTURES / "world_events.json"), "world"),
        load_event_mapping(str(FIXTURES / "president_events.json"), "president"),
    )


class TestGridPipelineContract(unittest.TestCase):
    def setUp(self) -> None:
        self.personal, self.world, self.president = _fixture_events()

    def _grid(self, **kwargs):
        kwargs.setdefault("start_year", 1990)
        kwargs.setdefault("end_year", 2000)
        kwargs.setdefault("palette", PALETTE)
        return build_grid(BIRTH, self.personal, self.world, self.president, **kwargs)

    def test_rows_concatenate_to_box_sequence(self) -> None:
        for compact in (False, True):
            result = self._grid(compact=compact, measured_width=640, viewport_width=900)
            flat = [b for row in result.rows for b in row]
            self.assertEqual(flat, list(result.boxes))
            self.assertEqual(result.constants, resolve_constants(compact, 640, 900))

    def test_every_box_has_a_palette_or_override_color(self) -> None:
        result = self._grid()
        for b in result.boxes:
            self.assertIn(b.date, result.colors)
            self.assertIn(result.colors.get(b.date), PALETTE)

    def test_milestones_mark_box_dates(self) -> None:
        result = self._grid()
        # Birth day is itself a Sunday; school started on Tuesday 1995-09-05.
        self.assertIn("1990-05-20", result.milestone_dates)
        self.assertIn("1995-09-03", result.milestone_dates)
        self.assertEqual(result.colors.get("1990-05-20"), "#aaccff")
        self.assertEqual(result.colors.get("1995-08-27"), "#aaccff")
        self.assertEqual(result.colors.get("1995-09-03"), "#ffcc99")

    def test_shared_week_lists_all_sources(self) -> None:
        result = self._grid(show_personal_event_dates=False)
        box = [b for b in result.boxes if b.date == "1998-06-14"][0]
        self.assertEqual(box.kind, "event")
        self.assertEqual(box.label, "Moved to Boston")
        self.assertEqual(box.tooltip, "Jun 1998 – Moved to Boston\n🌍 Bulls win sixth title")

    def test_feature_flags_exclude_sources(self) -> None:
        result = self._grid(show_world_events=False, show_presidents=False)
        self.assertFalse([b for b in result.boxes if b.source in ("world", "president")])
        self.assertFalse([b for b in result.boxes if "🌍" in b.tooltip or "🇺🇸" in b.tooltip])

        box = [b for b in result.boxes if b.date == "1998-06-14"][0]
        self.assertEqual(box.tooltip, "Jun 14, 1998 – Moved to Boston")

    def test_empty_palette_fails_fast(self) -> None:
        with self.assertRaises(PaletteError):
            self._grid(palette=())


class TestGridPayloadContract(unittest.TestCase):
    def setUp(self) -> None:
        self.personal, self.world, self.president = _fixture_events()

    def _payload(self, **kwargs):
        kwargs.setdefault("start_year", 1990)
        kwargs.setdefault("end_year", 2000)
        return build_payload(BIRTH, self.personal, self.world, self.president, **kwargs)

    def test_payload_is_valid(self) -> None:
        payload = self._payload(measured_width=1000)
        self.assertEqual(validate_payload(payload), [])
        self.assertEqual(payload["schema_version"], 1)
        self.assertEqual(payload["cfg"]["constants"]["container_width"], 950)
        self.assertEqual(payload["meta"]["box_count"], sum(len(r) for r in payload["rows"]))
        self.assertEqual(payload["meta"]["row_count"], len(payload["rows"]))
        self.assertEqual([d["decade_id"] for d in payload["decades"]], ["decade-0", "decade-10"])

    def test_serialization_is_deterministic(self) -> None:
        a = dumps_payload(self._payload(compact=True, viewport_width=600))
        b = dumps_payload(self._payload(compact=True, viewport_width=600))
        self.assertEqual(a, b)

        parsed = json.loads(a)
        self.assertEqual(list(parsed), sorted(parsed))
        self.assertEqual(parsed["cfg"]["viewport_width"], 600)

    def test_unusable_widths_are_dropped_from_cfg(self) -> None:
        payload = self._payload(measured_width=float("nan"), viewport_width=-1)
        self.assertIsNone(payload["cfg"]["measured_width"])
        self.assertIsNone(payload["cfg"]["viewport_width"])
        dumps_payload(payload)

    def test_year_range_defaults_to_birth_year(self) -> None:
        result = build_grid(BIRTH, self.personal)
        self.assertEqual((result.start_year, result.end_year), (1990, 1990))

        payload = build_payload(BIRTH, self.personal, end_year=1992)
        self.assertEqual((payload["cfg"]["start_year"], payload["cfg"]["end_year"]), (1990, 1992))
        self.assertEqual([d["decade_id"] for d in payload["decades"]], ["decade-0"])

    def test_start_after_end_is_empty_and_valid(self) -> None:
        payload = self._payload(start_year=2005, end_year=2004)
        self.assertEqual(payload["rows"], [])
        self.assertEqual(payload["colors"], {})
        self.assertEqual(payload["meta"], {"box_count": 0, "row_count": 0})
        self.assertEqual(validate_payload(payload), [])

    def test_event_boxes_carry_source_fields(self) -> None:
        payload = self._payload()
        boxes = [b for row in payload["rows"] for b in row]
        events = [b for b in boxes if b["kind"] == "event"]
        self.assertTrue(events)
        for b in events:
            self.assertIn(b["source"], ("personal", "world", "president"))
            self.assertTrue(b["event_date"] >= b["date"])
        for b in boxes:
            if b["kind"] != "event":
                self.assertNotIn("source", b)


if __name__ == "__main__":
    unittest.main(verbosity=2)

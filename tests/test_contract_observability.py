from __future__ import annotations

import os
import unittest
from unittest.mock import patch

from lifeweeks.events import normalize_event_mapping
from lifeweeks.layout import GRID_CONSTANTS, resolve_constants


def _logged(ep) -> str:
    return "\n".join(str(c.args[0]) for c in ep.call_args_list if c.args)


class TestObservabilityContract(unittest.TestCase):
    def test_skipped_event_keys_log_when_obs_enabled(self) -> None:
        raw = {"bad-key": [{"headline": "x"}], "2000-01-01": [{"description": "no headline"}]}
        with patch.dict(os.environ, {"LIFEWEEKS_OBS_LOG": "1"}, clear=False), patch(
            "lifeweeks.util.console.eprint"
        ) as ep:
            out = normalize_event_mapping(raw, "personal")
        self.assertEqual(out, {})
        combined = _logged(ep)
        self.assertIn("[lifeweeks.events] WARN: skipping invalid date key", combined)
        self.assertIn("skipping event without headline", combined)

    def test_unusable_width_logs_and_falls_back(self) -> None:
        with patch.dict(os.environ, {"LIFEWEEKS_OBS_LOG": "yes"}, clear=False), patch(
            "lifeweeks.util.console.eprint"
        ) as ep:
            c = resolve_constants(False, float("inf"))
        self.assertEqual(c, GRID_CONSTANTS["normal"]["desktop"])
        self.assertIn("[lifeweeks.layout] WARN: ignoring unusable measured width", _logged(ep))

    def test_nothing_logged_when_obs_disabled(self) -> None:
        with patch.dict(os.environ, {}, clear=True), patch("lifeweeks.util.console.eprint") as ep:
            normalize_event_mapping({"bad-key": []}, "world")
            resolve_constants(True, -3)
        self.assertFalse(ep.called)


if __name__ == "__main__":
    unittest.main(verbosity=2)

from __future__ import annotations

import contextlib
import io
import json
import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from lifeweeks import cli

REPO_ROOT = Path(__file__).resolve().parents[1]
FIXTURES = REPO_ROOT / "tests" / "fixtures"


def _quiet_main(argv):
    out, err = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        rc = cli.main(argv)
    return rc, out.getvalue(), err.getvalue()


class TestCliContract(unittest.TestCase):
    def _run(self, cmd):
        env = dict(os.environ, PYTHONPATH=str(REPO_ROOT))
        return subprocess.run(cmd, cwd=str(REPO_ROOT), text=True, capture_output=True, env=env)

    def test_config_build_then_validate(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "grid.json"
            p = self._run([sys.executable, "-m", "lifeweeks.cli", "--config", str(FIXTURES / "grid_config.json"), "--out", str(out)])
            self.assertEqual(p.returncode, 0, f"stdout:\n{p.stdout}\nstderr:\n{p.stderr}")
            self.assertEqual(p.stdout.strip(), os.path.abspath(str(out)))

            payload = json.loads(out.read_text(encoding="utf-8"))
            self.assertEqual(payload["cfg"]["birth_date"], "1990-05-20")
            self.assertFalse(payload["cfg"]["show_personal_event_dates"])

            p2 = self._run([sys.executable, "-m", "lifeweeks.tools.validate_payload", str(out)])
            combined = (p2.stdout or "") + "\n" + (p2.stderr or "")
            self.assertEqual(p2.returncode, 0, combined)
            self.assertIn("[lifeweeks-validate] OK", combined)

    def test_missing_birth_date_reports_user_error(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main([])
        self.assertIn("--birth-date is required", str(ctx.exception))

    def test_invalid_birth_date_reports_user_error(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            cli.main(["--birth-date", "15/01/2000"])
        self.assertIn("Invalid --birth-date", str(ctx.exception))

    def test_flags_override_config(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "grid.json"
            rc, _, _ = _quiet_main(
                [
                    "--config",
                    str(FIXTURES / "grid_config.json"),
                    "--no-world-events",
                    "--compact",
                    "--end-year",
                    "1995",
                    "--palette",
                    "red, blue",
                    "--out",
                    str(out),
                ]
            )
            self.assertEqual(rc, 0)
            payload = json.loads(out.read_text(encoding="utf-8"))

        cfg = payload["cfg"]
        self.assertFalse(cfg["show_world_events"])
        self.assertTrue(cfg["compact"])
        self.assertEqual(cfg["end_year"], 1995)
        self.assertEqual(cfg["palette"], ["red", "blue"])
        self.assertEqual(set(payload["colors"].values()), {"blue"})

    def test_start_after_end_warns_and_writes_empty_grid(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "grid.json"
            rc, _, err = _quiet_main(
                ["--birth-date", "2000-01-15", "--start-year", "2005", "--end-year", "2004", "--out", str(out)]
            )
            self.assertEqual(rc, 0)
            self.assertIn("WARN", err)
            payload = json.loads(out.read_text(encoding="utf-8"))
        self.assertEqual(payload["meta"]["box_count"], 0)

    def test_default_out_is_build_relative_to_cwd(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td)
            old_cwd = Path.cwd()
            try:
                os.chdir(tmp)
                rc, _, _ = _quiet_main(["--birth-date", "2000-01-15", "--end-year", "2000"])
            finally:
                os.chdir(old_cwd)

            self.assertEqual(rc, 0)
            self.assertTrue((tmp / "build" / "lifeweeks.json").exists())

    def test_default_out_falls_back_when_unwritable(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            tmp = Path(td)
            home = tmp / "home"
            home.mkdir(parents=True, exist_ok=True)

            orig_mkdir = Path.mkdir

            def fake_mkdir(self, *args, **kwargs):  # type: ignore[no-untyped-def]
                if self == Path("build"):
                    raise PermissionError(13, "Permission denied", str(self))
                return orig_mkdir(self, *args, **kwargs)

            old_cwd = Path.cwd()
            try:
                os.chdir(tmp)
                with patch.dict(os.environ, {"HOME": str(home)}), patch("pathlib.Path.mkdir", new=fake_mkdir):
                    rc, _, err = _quiet_main(["--birth-date", "2000-01-15", "--end-year", "2000"])
            finally:
                os.chdir(old_cwd)

            self.assertEqual(rc, 0)
            self.assertIn("not writable", err)
            self.assertTrue((home / ".lifeweeks" / "build" / "lifeweeks.json").exists())


if __name__ == "__main__":
    unittest.main(verbosity=2)

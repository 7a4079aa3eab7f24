"""
Tests for CLI entry points.

Every test points MYREGISTRAR_DATA_DIR at a temporary directory
so real data is never touched.
"""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from myregistrar.cli import main
from myregistrar.storage import load_registrations, registered_course_ids, registrations_path


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name)
        self._env = mock.patch.dict(os.environ, {"MYREGISTRAR_DATA_DIR": str(self.data_dir)})
        self._env.start()

    def tearDown(self) -> None:
        self._env.stop()
        self._tmp.cleanup()

    def run_cli(self, *argv: str) -> tuple[int, str]:
        buf = io.StringIO()
        with redirect_stdout(buf):
            with self.assertRaises(SystemExit) as ctx:
                main(list(argv))
        return ctx.exception.code, buf.getvalue()

    def test_search_requires_text(self) -> None:
        code, _ = self.run_cli("search", "")
        self.assertNotEqual(code, 0)

    def test_init_demo_refuses_to_overwrite(self) -> None:
        self.assertEqual(self.run_cli("init-demo")[0], 0)
        self.assertEqual(self.run_cli("init-demo")[0], 1)
        self.assertEqual(self.run_cli("init-demo", "--force")[0], 0)

    def test_register_conflict_is_rejected(self) -> None:
        self.run_cli("init-demo")
        code, out = self.run_cli("register", "user-1", "ENG102")
        self.assertEqual(code, 1)
        self.assertIn("Nothing was registered", out)
        regs = load_registrations(registrations_path(self.data_dir))
        self.assertNotIn("course-4", registered_course_ids(regs, "user-1"))

    def test_register_and_drop(self) -> None:
        self.run_cli("init-demo")
        self.assertEqual(self.run_cli("register", "user-2", "ENG102")[0], 0)
        self.assertEqual(self.run_cli("drop", "user-2", "ENG102")[0], 0)
        self.assertEqual(self.run_cli("drop", "user-2", "ENG102")[0], 1)

    def test_check_exit_codes(self) -> None:
        self.run_cli("init-demo")
        self.assertEqual(self.run_cli("check", "user-2", "ENG102")[0], 0)
        self.assertEqual(self.run_cli("check", "user-1", "ENG102")[0], 1)

    def test_admin_conflicts_summary(self) -> None:
        self.run_cli("init-demo")
        code, out = self.run_cli("admin-conflicts")
        self.assertEqual(code, 0)
        # CS101/ENG102 time + room, CS201 and MATH245 near full
        self.assertIn("Critical: 2", out)
        self.assertIn("Warning: 2", out)

    def test_admin_fixes_change_conflict_summary(self) -> None:
        self.run_cli("init-demo")

        code, out = self.run_cli("move", "ENG102", "Humanities 110")
        self.assertEqual(code, 0)
        self.assertIn("ENG102 moved to Humanities 110", out)
        self.assertIn("Critical: 1", self.run_cli("admin-conflicts")[1])

        code, out = self.run_cli("reschedule", "ENG102", "--days", "TTh", "--start", "09:00", "--end", "10:15")
        self.assertEqual(code, 0)
        self.assertIn("TTh 9:00-10:15 AM", out)
        self.assertIn("Critical: 0", self.run_cli("admin-conflicts")[1])

        code, out = self.run_cli("set-capacity", "CS201", "10", "--add")
        self.assertEqual(code, 0)
        self.assertIn("28/40", out)
        self.assertIn("Warning: 1", self.run_cli("admin-conflicts")[1])

        self.assertEqual(self.run_cli("course-status", "MATH245", "archived")[0], 0)
        self.assertIn("Warning: 0", self.run_cli("admin-conflicts")[1])

    def test_admin_commands_report_bad_input(self) -> None:
        self.run_cli("init-demo")
        self.assertEqual(self.run_cli("reschedule", "ENG102", "--days", "MWF", "--start", "11:00", "--end", "13:00")[0], 1)
        self.assertEqual(self.run_cli("move", "NOPE999", "Room 1")[0], 1)
        with redirect_stderr(io.StringIO()):
            self.assertEqual(self.run_cli("course-status", "ENG102", "cancelled")[0], 2)

    def test_register_for_draft_course_fails(self) -> None:
        self.run_cli("init-demo")
        code, out = self.run_cli("register", "user-2", "CS350")
        self.assertEqual(code, 1)
        self.assertIn("not open for registration", out)

    def test_week_prints_totals(self) -> None:
        self.run_cli("init-demo")
        code, out = self.run_cli("week", "user-1")
        self.assertEqual(code, 0)
        self.assertIn("Total credits: 6", out)
        self.assertIn("Hours/week: 5.0", out)

    def test_export_writes_file(self) -> None:
        self.run_cli("init-demo")
        out_file = self.data_dir / "schedule.ics"
        code, _ = self.run_cli("export", "user-1", str(out_file), "--start", "2024-09-04", "--weeks", "2")
        self.assertEqual(code, 0)
        text = out_file.read_text(encoding="utf-8")
        self.assertIn("DTSTART:20240902T090000", text)
        self.assertIn("RRULE:FREQ=WEEKLY;COUNT=2", text)

    def test_fetch_without_url_fails(self) -> None:
        with mock.patch.dict(os.environ, {"MYREGISTRAR_CATALOG_URL": ""}):
            self.assertEqual(self.run_cli("fetch")[0], 1)


if __name__ == "__main__":
    unittest.main()

"""
Tests for course administration.

Uses the demo catalog, where ENG102 shares CS101's slot (MWF 9:00-9:50 AM)
and room (Computer Lab A), and CS201 sits at 28/30 seats.
"""

import tempfile
import unittest
from pathlib import Path

from myregistrar.admin import (
    CourseUpdateError,
    move,
    parse_clock,
    parse_day_codes,
    reschedule,
    set_capacity,
    set_status,
)
from myregistrar.classify import classify_all
from myregistrar.storage import courses_path, find_course, load_courses, seed_demo_data


class TestHelpers(unittest.TestCase):
    def test_parse_day_codes(self) -> None:
        self.assertEqual(parse_day_codes("MWF"), ["M", "W", "F"])
        self.assertEqual(parse_day_codes("TTh"), ["T", "R"])
        with self.assertRaises(CourseUpdateError):
            parse_day_codes("mwf")
        with self.assertRaises(CourseUpdateError):
            parse_day_codes("")

    def test_parse_clock(self) -> None:
        self.assertEqual(parse_clock("09:30"), 570)
        self.assertEqual(parse_clock("14:00"), 840)
        with self.assertRaises(CourseUpdateError):
            parse_clock("9am")


class TestCourseAdmin(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name)
        seed_demo_data(self.data_dir)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _courses(self):
        return load_courses(courses_path(self.data_dir))

    def _kinds(self):
        return [r.kind for r in classify_all(self._courses())]

    def test_demo_starts_with_clash(self) -> None:
        self.assertEqual(self._kinds(), ["time", "room", "capacity", "capacity"])

    def test_reschedule_clears_time_and_room(self) -> None:
        course = reschedule("ENG102", "MWF", "11:00", "11:50", self.data_dir)
        self.assertEqual(course.schedule, "MWF 11:00-11:50 AM")

        eng = find_course(self._courses(), "ENG102")
        assert eng is not None
        self.assertEqual(eng.schedule, "MWF 11:00-11:50 AM")
        self.assertEqual(self._kinds(), ["capacity", "capacity"])

    def test_reschedule_afternoon_and_tth(self) -> None:
        course = reschedule("ENG102", "TTh", "13:00", "14:15", self.data_dir)
        self.assertEqual(course.schedule, "TTh 1:00-2:15 PM")

    def test_reschedule_rejects_range_across_noon(self) -> None:
        before = courses_path(self.data_dir).read_text(encoding="utf-8")
        with self.assertRaises(CourseUpdateError):
            reschedule("ENG102", "MWF", "11:00", "13:00", self.data_dir)
        with self.assertRaises(CourseUpdateError):
            reschedule("ENG102", "MWF", "10:00", "09:00", self.data_dir)
        self.assertEqual(courses_path(self.data_dir).read_text(encoding="utf-8"), before)

    def test_move_leaves_only_time_conflict(self) -> None:
        move("ENG102", "Humanities 110", self.data_dir)
        self.assertEqual(self._kinds(), ["time", "capacity", "capacity"])

    def test_move_rejects_blank_room(self) -> None:
        with self.assertRaises(CourseUpdateError):
            move("ENG102", "   ", self.data_dir)

    def test_set_capacity_clears_near_full(self) -> None:
        course = set_capacity("CS201", 40, self.data_dir)
        self.assertEqual((course.enrolled, course.capacity), (28, 40))
        self.assertEqual(self._kinds(), ["time", "room", "capacity"])

    def test_set_capacity_add(self) -> None:
        course = set_capacity("MATH245", 5, self.data_dir, add=True)
        self.assertEqual(course.capacity, 50)
        with self.assertRaises(CourseUpdateError):
            set_capacity("MATH245", -60, self.data_dir, add=True)
        math = find_course(self._courses(), "MATH245")
        assert math is not None
        self.assertEqual(math.capacity, 50)

    def test_set_status(self) -> None:
        set_status("ENG102", "archived", self.data_dir)
        self.assertEqual(self._kinds(), ["capacity", "capacity"])

        cs350 = set_status("CS350", "active", self.data_dir)
        self.assertEqual(cs350.status, "active")

    def test_invalid_status_or_course(self) -> None:
        with self.assertRaises(CourseUpdateError):
            set_status("ENG102", "cancelled", self.data_dir)
        with self.assertRaises(CourseUpdateError):
            set_status("NOPE999", "active", self.data_dir)


if __name__ == "__main__":
    unittest.main()

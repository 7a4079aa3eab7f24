"""
Unit tests for the weekly grid projection.

Grid contract:
- Monday..Friday columns, 15 hourly rows starting 7:00
- a row at minute t is occupied iff start <= t < end
- conflicting_ids marks every interval overlapping another course
- totals: credits per selected course, hours per meeting day
"""

import unittest

from myregistrar.grid import ROW_STARTS, project_week
from myregistrar.model import Course


def course(cid: str, code: str, schedule: str, credits: int = 3) -> Course:
    return Course(id=cid, code=code, title=code, schedule=schedule, credits=credits, capacity=40)


class TestProjectWeek(unittest.TestCase):
    def test_grid_shape(self) -> None:
        self.assertEqual(len(ROW_STARTS), 15)
        self.assertEqual(ROW_STARTS[0], 7 * 60)
        self.assertEqual(ROW_STARTS[-1], 21 * 60)

    def test_fifty_minute_class_occupies_one_row(self) -> None:
        proj = project_week([course("c1", "CS101", "MWF 9:00-9:50 AM")], ["c1"])
        self.assertEqual(len(proj.cells), 3)
        self.assertEqual({c.row for c in proj.cells}, {2})
        self.assertEqual({c.day for c in proj.cells}, {"Monday", "Wednesday", "Friday"})

    def test_long_class_spans_rows(self) -> None:
        proj = project_week([course("c1", "CS201", "TTh 2:00-3:50 PM", credits=4)], ["c1"])
        tuesday = sorted(c.row_minute for c in proj.cells if c.day == "Tuesday")
        self.assertEqual(tuesday, [840, 900])

    def test_off_hour_start_uses_row_rule(self) -> None:
        # 9:30-10:20 covers the 10:00 row only
        proj = project_week([course("c1", "X1", "M 9:30-10:20 AM")], ["c1"])
        self.assertEqual([c.row_minute for c in proj.cells], [600])

    def test_weekend_counts_hours_but_no_cells(self) -> None:
        proj = project_week([course("c1", "LAB1", "S 9:00-11:00 AM", credits=1)], ["c1"])
        self.assertEqual(proj.cells, [])
        self.assertAlmostEqual(proj.total_hours, 2.0)
        self.assertEqual(proj.total_credits, 1)

    def test_totals(self) -> None:
        courses = [
            course("c1", "CS101", "MWF 9:00-9:50 AM", credits=3),
            course("c2", "CS201", "TTh 2:00-3:50 PM", credits=4),
        ]
        proj = project_week(courses, ["c1", "c2"])
        self.assertEqual(proj.total_credits, 7)
        # 3 x 50 min + 2 x 110 min = 370 min
        self.assertAlmostEqual(proj.total_hours, 370 / 60)
        self.assertEqual(proj.conflicting_ids, set())

    def test_conflicting_intervals_marked(self) -> None:
        courses = [
            course("c1", "CS101", "MWF 9:00-9:50 AM"),
            course("c2", "ENG102", "M 9:00-9:50 AM"),
        ]
        proj = project_week(courses, ["c1", "c2"])
        self.assertEqual(proj.conflicting_ids, {"c1-Monday", "c2-Monday"})

        monday_9 = proj.cell_at("Monday", 2)
        self.assertEqual({c.course_id for c in monday_9}, {"c1", "c2"})
        self.assertTrue(all(c.conflicting for c in monday_9))
        wednesday = [c for c in proj.cells if c.day == "Wednesday"]
        self.assertFalse(any(c.conflicting for c in wednesday))

    def test_unknown_and_duplicate_ids_ignored(self) -> None:
        c1 = course("c1", "CS101", "MWF 9:00-9:50 AM")
        proj = project_week([c1], ["c1", "c1", "nope"])
        self.assertEqual(len(proj.cells), 3)
        self.assertEqual(proj.total_credits, 3)

    def test_unselected_courses_not_projected(self) -> None:
        courses = [course("c1", "CS101", "MWF 9:00-9:50 AM"), course("c2", "ENG102", "M 9:00-9:50 AM")]
        proj = project_week(courses, ["c2"])
        self.assertEqual({c.course_id for c in proj.cells}, {"c2"})
        self.assertEqual(proj.conflicting_ids, set())

    def test_cell_ids_unique(self) -> None:
        proj = project_week([course("c1", "CS201", "TTh 2:00-3:50 PM")], ["c1"])
        ids = [c.cell_id for c in proj.cells]
        self.assertEqual(len(ids), len(set(ids)))


if __name__ == "__main__":
    unittest.main()

"""
Unit tests for interval overlap detection.

Definition used here:
- A conflict exists if two intervals overlap in time on the same weekday.
- Touching endpoints (end == start) is NOT a conflict.
"""

import unittest

from myregistrar.conflicts import any_overlap, find_interval_conflicts, overlaps
from myregistrar.model import MeetingInterval


class TestOverlaps(unittest.TestCase):
    def test_touching_is_not_overlap(self) -> None:
        a = MeetingInterval("Monday", 540, 590)
        b = MeetingInterval("Monday", 590, 640)
        self.assertFalse(overlaps(a, b))
        self.assertFalse(overlaps(b, a))

    def test_strict_overlap(self) -> None:
        a = MeetingInterval("Monday", 540, 600)
        b = MeetingInterval("Monday", 590, 650)
        self.assertTrue(overlaps(a, b))
        self.assertTrue(overlaps(b, a))

    def test_containment_overlaps(self) -> None:
        outer = MeetingInterval("Friday", 480, 720)
        inner = MeetingInterval("Friday", 540, 600)
        self.assertTrue(overlaps(outer, inner))

    def test_different_day_no_overlap(self) -> None:
        a = MeetingInterval("Monday", 540, 600)
        b = MeetingInterval("Tuesday", 540, 600)
        self.assertFalse(overlaps(a, b))


class TestAnyOverlap(unittest.TestCase):
    def test_pairs_reported_per_day(self) -> None:
        mwf = [MeetingInterval(d, 540, 590) for d in ("Monday", "Wednesday", "Friday")]
        mw = [MeetingInterval(d, 560, 620) for d in ("Monday", "Wednesday")]
        pairs = any_overlap(mwf, mw)
        self.assertEqual([a.day for a, _ in pairs], ["Monday", "Wednesday"])

    def test_empty_set_never_overlaps(self) -> None:
        self.assertEqual(any_overlap([], [MeetingInterval("Monday", 0, 100)]), [])
        self.assertEqual(any_overlap([MeetingInterval("Monday", 0, 100)], []), [])


class TestFindIntervalConflicts(unittest.TestCase):
    def test_same_tag_is_ignored(self) -> None:
        iv = MeetingInterval("Monday", 540, 600)
        self.assertEqual(find_interval_conflicts([("A", iv), ("A", iv)]), [])

    def test_each_pair_once(self) -> None:
        a = ("A", MeetingInterval("Monday", 540, 600))
        b = ("B", MeetingInterval("Monday", 570, 630))
        c = ("C", MeetingInterval("Monday", 600, 660))
        found = find_interval_conflicts([a, b, c])
        self.assertEqual(found, [(a, b), (b, c)])


if __name__ == "__main__":
    unittest.main()

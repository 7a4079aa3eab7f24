"""
Interval overlap detection.

Given meeting intervals of courses, detect overlaps on the same weekday.
Overlap rule (half-open intervals, touching endpoints do NOT overlap):
    same day AND start < other_end AND end > other_start
"""

from __future__ import annotations

from typing import Hashable, Iterable, Sequence

from myregistrar.model import MeetingInterval


def overlaps(a: MeetingInterval, b: MeetingInterval) -> bool:
    """
    True if both intervals fall on the same day and share at least one minute.
    """
    if a.day != b.day:
        return False
    return a.start_minute < b.end_minute and a.end_minute > b.start_minute


def any_overlap(
    set_a: Sequence[MeetingInterval], set_b: Sequence[MeetingInterval]
) -> list[tuple[MeetingInterval, MeetingInterval]]:
    """
    Cross-product check of two interval sets. Returns every overlapping (a, b) pair,
    in the order of set_a then set_b. An empty set never overlaps anything.
    """
    # O(|A|*|B|) is fine: a course meets at most 7 times a week
    pairs: list[tuple[MeetingInterval, MeetingInterval]] = []
    for a in set_a:
        for b in set_b:
            if overlaps(a, b):
                pairs.append((a, b))
    return pairs


def find_interval_conflicts(
    tagged: Iterable[tuple[Hashable, MeetingInterval]],
) -> list[tuple[tuple[Hashable, MeetingInterval], tuple[Hashable, MeetingInterval]]]:
    """
    Find overlapping pairs in a flat list of (tag, interval), each pair once (i<j).
    Intervals that share a tag (e.g. the same course) are never compared.
    """
    items = list(tagged)
    found = []
    for i in range(len(items)):
        tag1, iv1 = items[i]
        for j in range(i + 1, len(items)):
            tag2, iv2 = items[j]
            if tag1 == tag2:
                continue
            if overlaps(iv1, iv2):
                found.append((items[i], items[j]))
    return found

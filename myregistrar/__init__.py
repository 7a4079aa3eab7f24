"""
MyRegistrar: course registration with schedule-conflict detection.

Core engine (pure functions, no I/O):
- myregistrar.parse      schedule strings -> meeting intervals
- myregistrar.conflicts  interval overlap detection
- myregistrar.classify   typed conflict reports + registration gate check
- myregistrar.grid       weekly grid projection
"""

from myregistrar.classify import classify, classify_all, detect_all_conflicts, detect_conflicts
from myregistrar.conflicts import any_overlap, overlaps
from myregistrar.grid import project_week
from myregistrar.parse import parse_schedule

__all__ = [
    "any_overlap",
    "classify",
    "classify_all",
    "detect_all_conflicts",
    "detect_conflicts",
    "overlaps",
    "parse_schedule",
    "project_week",
]

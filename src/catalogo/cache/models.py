"""Data models for the cache coordinator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class CacheRegion(StrEnum):
    """Cache regions: one per entity family and query shape."""

    COURSE = "course"
    COURSE_BY_CODE = "course_code"
    COURSES = "courses"
    INSTRUCTOR = "instructor"
    INSTRUCTORS = "instructors"
    ENROLLMENT = "enrollment"
    ENROLLMENTS = "enrollments"
    ENROLLMENTS_BY_STUDENT = "enrollments_by_student"
    ENROLLMENTS_BY_COURSE = "enrollments_by_course"


# Key used by listing regions, which hold a single entry
ALL = "*"


@dataclass
class CacheStats:
    """Counters since the coordinator was created or last cleared.

    Attributes:
        hits: Reads served from the cache.
        misses: Reads that called the loader.
        evictions: Entries removed by invalidation.
        discarded_loads: Loads not stored because their key was invalidated mid-load.
        size: Entries currently held.
    """

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    discarded_loads: int = 0
    size: int = 0

"""Invalidation helpers shared by the components that mutate the catalog.

Each helper evicts exactly the entries that embed the given record.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from catalogo.cache.models import ALL, CacheRegion

if TYPE_CHECKING:
    from catalogo.cache.coordinator import CacheCoordinator
    from catalogo.store import CourseRecord, EnrollmentRecord, InstructorRecord


def evict_course(cache: CacheCoordinator, course: CourseRecord) -> None:
    """Evict a course's by-id and by-code entries.

    Listings are not touched; callers that changed listing content call
    evict_course_listing as well.
    """
    cache.invalidate(CacheRegion.COURSE, course.id)
    cache.invalidate(CacheRegion.COURSE_BY_CODE, course.code)


def evict_course_listing(cache: CacheCoordinator) -> None:
    cache.invalidate(CacheRegion.COURSES, ALL)


def evict_instructor(cache: CacheCoordinator, instructor: InstructorRecord) -> None:
    """Evict an instructor's by-id entry and the instructor listing."""
    cache.invalidate(CacheRegion.INSTRUCTOR, instructor.id)
    cache.invalidate(CacheRegion.INSTRUCTORS, ALL)


def evict_enrollment(cache: CacheCoordinator, *enrollments: EnrollmentRecord) -> None:
    """Evict enrollments by id plus every listing that contains them.

    Pass both the old and the new record of an update so the listings of a
    student or course the enrollment moved away from are evicted too.
    """
    for enrollment in enrollments:
        cache.invalidate(CacheRegion.ENROLLMENT, enrollment.id)
        cache.invalidate(CacheRegion.ENROLLMENTS_BY_STUDENT, enrollment.student_id)
        cache.invalidate(CacheRegion.ENROLLMENTS_BY_COURSE, enrollment.course_id)
    cache.invalidate(CacheRegion.ENROLLMENTS, ALL)

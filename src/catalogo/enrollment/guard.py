"""EnrollmentGuard - Enrollment writes with (student, course) uniqueness."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalogo.cache.invalidation import evict_enrollment
from catalogo.store import DuplicateEnrollmentError, EnrollmentStatus

if TYPE_CHECKING:
    from datetime import date

    from catalogo.cache import CacheCoordinator
    from catalogo.store import CatalogStore, EnrollmentRecord

logger = logging.getLogger(__name__)

# Expected lifecycle: activo -> cursando -> aprobado | reprobado
_LIFECYCLE: dict[EnrollmentStatus, frozenset[EnrollmentStatus]] = {
    EnrollmentStatus.ACTIVO: frozenset({EnrollmentStatus.CURSANDO}),
    EnrollmentStatus.CURSANDO: frozenset({EnrollmentStatus.APROBADO, EnrollmentStatus.REPROBADO}),
    EnrollmentStatus.APROBADO: frozenset(),
    EnrollmentStatus.REPROBADO: frozenset(),
}


def follows_lifecycle(current: EnrollmentStatus, new: EnrollmentStatus) -> bool:
    """Check whether moving from current to new follows the expected lifecycle.

    Staying in the same status counts as following it.
    """
    return current == new or new in _LIFECYCLE[current]


class EnrollmentGuard:
    """Creates, replaces and deletes enrollments.

    At most one enrollment exists per (student, course): the store checks and
    inserts in one transaction. Status transitions outside the lifecycle are
    logged but not refused.
    """

    def __init__(self, store: CatalogStore, cache: CacheCoordinator) -> None:
        self.store = store
        self.cache = cache

    def create_enrollment(
        self,
        student_id: int,
        course_id: int,
        enrollment_date: date,
        status: EnrollmentStatus = EnrollmentStatus.ACTIVO,
        grade: float | None = None,
    ) -> EnrollmentRecord:
        """Enroll a student in a course.

        Raises:
            StudentNotFoundError: If student doesn't exist.
            CourseNotFoundError: If course doesn't exist.
            DuplicateEnrollmentError: If the student is already enrolled in the course.
        """
        try:
            enrollment = self.store.create_enrollment(
                student_id=student_id,
                course_id=course_id,
                enrollment_date=enrollment_date,
                status=EnrollmentStatus(status).value,
                grade=grade,
            )
        except DuplicateEnrollmentError:
            logger.warning(
                "Rejected duplicate enrollment of student %s in course %s", student_id, course_id
            )
            raise
        logger.info(
            "Enrolled student %s in course %s (enrollment %s)",
            student_id,
            course_id,
            enrollment.id,
        )
        evict_enrollment(self.cache, enrollment)
        return enrollment

    def update_enrollment(
        self,
        enrollment_id: int,
        student_id: int,
        course_id: int,
        enrollment_date: date,
        status: EnrollmentStatus,
        grade: float | None = None,
    ) -> EnrollmentRecord:
        """Replace every field of an enrollment.

        Raises:
            EnrollmentNotFoundError: If enrollment doesn't exist.
            StudentNotFoundError: If student doesn't exist.
            CourseNotFoundError: If course doesn't exist.
            DuplicateEnrollmentError: If another enrollment already has the new pair.
        """
        new_status = EnrollmentStatus(status)
        change = self.store.update_enrollment(
            enrollment_id,
            student_id=student_id,
            course_id=course_id,
            enrollment_date=enrollment_date,
            status=new_status.value,
            grade=grade,
        )
        previous_status = EnrollmentStatus(change.previous.status)
        if not follows_lifecycle(previous_status, new_status):
            logger.warning(
                "Enrollment %s moved %s -> %s outside the expected lifecycle",
                enrollment_id,
                previous_status,
                new_status,
            )
        logger.info("Updated enrollment %s", enrollment_id)
        evict_enrollment(self.cache, change.previous, change.current)
        return change.current

    def delete_enrollment(self, enrollment_id: int) -> EnrollmentRecord:
        """Delete an enrollment.

        Raises:
            EnrollmentNotFoundError: If enrollment doesn't exist.
        """
        enrollment = self.store.delete_enrollment(enrollment_id)
        logger.info("Deleted enrollment %s", enrollment_id)
        evict_enrollment(self.cache, enrollment)
        return enrollment

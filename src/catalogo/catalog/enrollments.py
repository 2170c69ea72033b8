"""EnrollmentService - Enrollment reads through the cache, writes through the guard."""

from __future__ import annotations

from typing import TYPE_CHECKING

from catalogo.cache import ALL, CacheRegion

if TYPE_CHECKING:
    from catalogo.cache import CacheCoordinator
    from catalogo.catalog.models import EnrollmentData
    from catalogo.enrollment import EnrollmentGuard
    from catalogo.store import CatalogStore, EnrollmentRecord


class EnrollmentService:
    """Enrollment operations exposed to the API layer."""

    def __init__(
        self, store: CatalogStore, cache: CacheCoordinator, guard: EnrollmentGuard
    ) -> None:
        self.store = store
        self.cache = cache
        self.guard = guard

    def list(self) -> list[EnrollmentRecord]:
        enrollments = self.cache.get_or_load(
            CacheRegion.ENROLLMENTS, ALL, lambda: tuple(self.store.list_enrollments())
        )
        return list(enrollments)

    def get(self, enrollment_id: int) -> EnrollmentRecord | None:
        """Get an enrollment by ID, or None if it doesn't exist."""
        return self.cache.get_or_load(
            CacheRegion.ENROLLMENT,
            enrollment_id,
            lambda: self.store.find_enrollment(enrollment_id),
        )

    def list_by_student(self, student_id: int) -> list[EnrollmentRecord]:
        """List a student's enrollments. Unknown students have none."""
        enrollments = self.cache.get_or_load(
            CacheRegion.ENROLLMENTS_BY_STUDENT,
            student_id,
            lambda: tuple(self.store.list_enrollments(student_id=student_id)),
        )
        return list(enrollments)

    def list_by_course(self, course_id: int) -> list[EnrollmentRecord]:
        """List a course's enrollments. Unknown courses have none."""
        enrollments = self.cache.get_or_load(
            CacheRegion.ENROLLMENTS_BY_COURSE,
            course_id,
            lambda: tuple(self.store.list_enrollments(course_id=course_id)),
        )
        return list(enrollments)

    def create(self, data: EnrollmentData) -> EnrollmentRecord:
        """Enroll a student in a course.

        Raises:
            StudentNotFoundError: If student doesn't exist.
            CourseNotFoundError: If course doesn't exist.
            DuplicateEnrollmentError: If the student is already enrolled in the course.
        """
        return self.guard.create_enrollment(
            student_id=data.student_id,
            course_id=data.course_id,
            enrollment_date=data.enrollment_date,
            status=data.status,
            grade=data.grade,
        )

    def update(self, enrollment_id: int, data: EnrollmentData) -> EnrollmentRecord:
        """Replace every field of an enrollment.

        Raises:
            EnrollmentNotFoundError: If enrollment doesn't exist.
            DuplicateEnrollmentError: If another enrollment already has the new pair.
        """
        return self.guard.update_enrollment(
            enrollment_id,
            student_id=data.student_id,
            course_id=data.course_id,
            enrollment_date=data.enrollment_date,
            status=data.status,
            grade=data.grade,
        )

    def delete(self, enrollment_id: int) -> None:
        """Delete an enrollment.

        Raises:
            EnrollmentNotFoundError: If enrollment doesn't exist.
        """
        self.guard.delete_enrollment(enrollment_id)

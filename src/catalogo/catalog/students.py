"""StudentService - Student records and logical deactivation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalogo.store import StudentNotFoundError

if TYPE_CHECKING:
    from catalogo.catalog.models import StudentData
    from catalogo.store import CatalogStore, CourseRecord, StudentRecord

logger = logging.getLogger(__name__)


class StudentService:
    """Student operations. Students are read straight from the store."""

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def list(self) -> list[StudentRecord]:
        return self.store.list_students()

    def list_active(self) -> list[StudentRecord]:
        return self.store.list_students(active_only=True)

    def get(self, student_id: int) -> StudentRecord | None:
        return self.store.find_student(student_id)

    def get_by_enrollment_number(self, enrollment_number: str) -> StudentRecord | None:
        return self.store.find_student_by_enrollment_number(enrollment_number)

    def create(self, data: StudentData) -> StudentRecord:
        """Create an active student.

        Raises:
            DuplicateCodeError: If the enrollment number is taken.
        """
        student = self.store.create_student(**data.model_dump())
        logger.info("Created student %s (id=%s)", student.enrollment_number, student.id)
        return student

    def update(self, student_id: int, data: StudentData) -> StudentRecord:
        """Replace the personal fields of a student.

        Raises:
            StudentNotFoundError: If student doesn't exist.
            DuplicateCodeError: If the enrollment number belongs to another student.
        """
        student = self.store.update_student(student_id, **data.model_dump())
        logger.info("Updated student %s", student_id)
        return student

    def deactivate(self, student_id: int, reason: str) -> StudentRecord:
        """Mark a student inactive. Existing enrollments are kept.

        Raises:
            StudentNotFoundError: If student doesn't exist.
        """
        student = self.store.deactivate_student(student_id, reason)
        logger.info("Deactivated student %s: %s", student_id, reason)
        return student

    def list_courses(self, student_id: int) -> list[CourseRecord]:
        """List the courses a student is enrolled in.

        Raises:
            StudentNotFoundError: If student doesn't exist.
        """
        if self.store.find_student(student_id) is None:
            raise StudentNotFoundError(f"Student with id '{student_id}' not found")
        return self.store.list_student_courses(student_id)

"""InstructorService - Instructor reads through the cache."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalogo.cache import ALL, CacheRegion
from catalogo.cache.invalidation import evict_course, evict_course_listing, evict_instructor

if TYPE_CHECKING:
    from catalogo.cache import CacheCoordinator
    from catalogo.catalog.models import InstructorData
    from catalogo.store import CatalogStore, InstructorRecord

logger = logging.getLogger(__name__)


class InstructorService:
    """Instructor operations exposed to the API layer."""

    def __init__(self, store: CatalogStore, cache: CacheCoordinator) -> None:
        self.store = store
        self.cache = cache

    def list(self) -> list[InstructorRecord]:
        """List all instructors, ordered by last name then first name."""
        instructors = self.cache.get_or_load(
            CacheRegion.INSTRUCTORS, ALL, lambda: tuple(self.store.list_instructors())
        )
        return list(instructors)

    def get(self, instructor_id: int) -> InstructorRecord | None:
        """Get an instructor by ID, or None if it doesn't exist."""
        return self.cache.get_or_load(
            CacheRegion.INSTRUCTOR,
            instructor_id,
            lambda: self.store.find_instructor(instructor_id),
        )

    def create(self, data: InstructorData) -> InstructorRecord:
        """Create an instructor.

        Raises:
            DuplicateCodeError: If the employee number is taken.
        """
        instructor = self.store.create_instructor(**data.model_dump())
        logger.info("Created instructor %s (id=%s)", instructor.employee_number, instructor.id)
        evict_instructor(self.cache, instructor)
        return instructor

    def update(self, instructor_id: int, data: InstructorData) -> InstructorRecord:
        """Replace the fields of an instructor. Assignments are left untouched.

        Raises:
            InstructorNotFoundError: If instructor doesn't exist.
            DuplicateCodeError: If the employee number belongs to another instructor.
        """
        instructor = self.store.update_instructor(instructor_id, **data.model_dump())
        logger.info("Updated instructor %s", instructor_id)
        evict_instructor(self.cache, instructor)
        return instructor

    def delete(self, instructor_id: int) -> None:
        """Delete an instructor and unassign it from its courses.

        Raises:
            InstructorNotFoundError: If instructor doesn't exist.
        """
        deletion = self.store.delete_instructor(instructor_id)
        logger.info(
            "Deleted instructor %s, unassigned from %d course(s)",
            instructor_id,
            len(deletion.courses),
        )
        evict_instructor(self.cache, deletion.instructor)
        for course in deletion.courses:
            evict_course(self.cache, course)
        if deletion.courses:
            evict_course_listing(self.cache)

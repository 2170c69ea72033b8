"""CourseService - Course reads through the cache, writes with precise invalidation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalogo.cache import ALL, CacheRegion
from catalogo.cache.invalidation import evict_course, evict_course_listing, evict_instructor
from catalogo.store import CourseNotFoundError

if TYPE_CHECKING:
    from catalogo.cache import CacheCoordinator
    from catalogo.catalog.models import CourseData
    from catalogo.graph import GraphValidator, RelationshipManager
    from catalogo.store import CatalogStore, CourseRecord

logger = logging.getLogger(__name__)


class CourseService:
    """Course operations exposed to the API layer."""

    def __init__(
        self,
        store: CatalogStore,
        cache: CacheCoordinator,
        validator: GraphValidator,
        relationships: RelationshipManager,
    ) -> None:
        self.store = store
        self.cache = cache
        self.validator = validator
        self.relationships = relationships

    # --- Reads ---

    def list(self) -> list[CourseRecord]:
        """List all courses, ordered by code."""
        courses = self.cache.get_or_load(
            CacheRegion.COURSES, ALL, lambda: tuple(self.store.list_courses())
        )
        return list(courses)

    def get(self, course_id: int) -> CourseRecord | None:
        """Get a course by ID, or None if it doesn't exist."""
        return self.cache.get_or_load(
            CacheRegion.COURSE, course_id, lambda: self.store.find_course(course_id)
        )

    def get_by_code(self, code: str) -> CourseRecord | None:
        """Get a course by its unique code, or None if it doesn't exist."""
        return self.cache.get_or_load(
            CacheRegion.COURSE_BY_CODE, code, lambda: self.store.find_course_by_code(code)
        )

    def would_form_cycle(self, course_id: int, prerequisite_id: int) -> bool:
        """Check whether prerequisite_id as a prerequisite of course_id would form a cycle.

        Raises:
            CourseNotFoundError: If either course doesn't exist.
        """
        return self.validator.would_create_cycle(course_id, prerequisite_id)

    def study_order(self) -> list[CourseRecord]:
        """All courses ordered so that every prerequisite comes before its dependents."""
        by_id = {course.id: course for course in self.list()}
        return [by_id[course_id] for course_id in self.validator.topological_order() if course_id in by_id]

    # --- Writes ---

    def create(self, data: CourseData) -> CourseRecord:
        """Create a course.

        Raises:
            DuplicateCodeError: If the code is taken.
        """
        course = self.store.create_course(code=data.code, name=data.name, credits=data.credits)
        logger.info("Created course %s (id=%s)", course.code, course.id)
        evict_course(self.cache, course)
        evict_course_listing(self.cache)
        return course

    def update(
        self, course_id: int, data: CourseData, expected_version: int | None = None
    ) -> CourseRecord:
        """Replace name, code and credits of a course.

        Args:
            course_id: The course's ID.
            data: New scalar fields.
            expected_version: Version the caller last read. When omitted the
                version read here is used, so a concurrent write in between
                still fails.

        Raises:
            CourseNotFoundError: If course doesn't exist.
            VersionConflictError: If the course changed since expected_version.
            DuplicateCodeError: If the new code belongs to another course.
        """
        before = self.store.find_course(course_id)
        if before is None:
            raise CourseNotFoundError(f"Course with id '{course_id}' not found")

        course = self.store.update_course(
            course_id,
            code=data.code,
            name=data.name,
            credits=data.credits,
            expected_version=before.version if expected_version is None else expected_version,
        )
        logger.info("Updated course %s (version %s)", course.code, course.version)
        evict_course(self.cache, before)
        evict_course(self.cache, course)
        evict_course_listing(self.cache)
        return course

    def delete(self, course_id: int) -> None:
        """Delete a course.

        Raises:
            CourseNotFoundError: If course doesn't exist.
            CourseInUseError: If other courses depend on it or it has enrollments.
        """
        deletion = self.store.delete_course(course_id)
        logger.info("Deleted course %s (id=%s)", deletion.course.code, course_id)
        evict_course(self.cache, deletion.course)
        for prerequisite in deletion.prerequisites:
            evict_course(self.cache, prerequisite)
        for instructor in deletion.instructors:
            evict_instructor(self.cache, instructor)
        evict_course_listing(self.cache)

    def add_prerequisite(self, course_id: int, prerequisite_id: int) -> CourseRecord:
        """Make prerequisite_id a prerequisite of course_id and return the course."""
        return self.relationships.add_prerequisite(course_id, prerequisite_id).course

    def remove_prerequisite(self, course_id: int, prerequisite_id: int) -> CourseRecord:
        """Drop prerequisite_id from the prerequisites of course_id and return the course."""
        return self.relationships.remove_prerequisite(course_id, prerequisite_id).course

    def assign_instructor(self, course_id: int, instructor_id: int) -> CourseRecord:
        """Assign an instructor to a course and return the course."""
        return self.relationships.assign_instructor(course_id, instructor_id).course

    def unassign_instructor(self, course_id: int, instructor_id: int) -> CourseRecord:
        """Remove an instructor from a course and return the course."""
        return self.relationships.unassign_instructor(course_id, instructor_id).course

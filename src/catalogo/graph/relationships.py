"""RelationshipManager - Prerequisite edges and instructor assignments."""

from __future__ import annotations

import logging
import threading
from functools import partial
from typing import TYPE_CHECKING

from catalogo.cache.invalidation import evict_course, evict_course_listing, evict_instructor
from catalogo.graph.exceptions import InvalidGraphOperationError
from catalogo.graph.validator import creates_cycle
from catalogo.store import CourseNotFoundError

if TYPE_CHECKING:
    from catalogo.cache import CacheCoordinator
    from catalogo.graph.validator import GraphValidator
    from catalogo.store import (
        AssignmentChange,
        CatalogStore,
        CourseRecord,
        PrerequisiteChange,
    )

logger = logging.getLogger(__name__)


class RelationshipManager:
    """Mutates the course graph and keeps the cache coherent with it.

    Both views of an edge (prerequisites / dependents, course instructors /
    instructor courses) are written in one store transaction. Within this
    process, validate-then-write on prerequisite edges is serialized by a
    lock. Another process may still add an edge between validation and the
    write, so the cycle check runs a second time inside the store's write
    transaction, against the graph as committed at that point. The course
    version compare-and-swap rejects writers holding a stale endpoint.
    """

    def __init__(
        self,
        store: CatalogStore,
        validator: GraphValidator,
        cache: CacheCoordinator,
    ) -> None:
        """Initialize the manager.

        Args:
            store: CatalogStore that persists the edges.
            validator: GraphValidator consulted before adding prerequisites.
            cache: CacheCoordinator to invalidate after each mutation.
        """
        self.store = store
        self.validator = validator
        self.cache = cache
        self._graph_lock = threading.Lock()

    def add_prerequisite(self, course_id: int, prerequisite_id: int) -> PrerequisiteChange:
        """Make prerequisite_id a prerequisite of course_id.

        Args:
            course_id: Course that gains the prerequisite.
            prerequisite_id: Course that must be completed first.

        Returns:
            Both endpoints after the change.

        Raises:
            CourseNotFoundError: If either course doesn't exist.
            InvalidGraphOperationError: If the edge would create a cycle.
            VersionConflictError: If either course changed concurrently.
        """
        with self._graph_lock:
            course = self._require_course(course_id)
            prerequisite = self._require_course(prerequisite_id)

            if self.validator.would_create_cycle(course_id, prerequisite_id):
                logger.warning(
                    "Rejected prerequisite %s -> %s: would create a cycle",
                    course.code,
                    prerequisite.code,
                )
                raise InvalidGraphOperationError(course_id, prerequisite_id)

            change = self.store.add_prerequisite(
                course_id,
                prerequisite_id,
                course_version=course.version,
                prerequisite_version=prerequisite.version,
                check=partial(self._reject_cycle, course_id, prerequisite_id),
            )

        if change.changed:
            logger.info("Added prerequisite %s -> %s", course.code, prerequisite.code)
            self._evict_edge(change.course, change.prerequisite)
        return change

    def remove_prerequisite(self, course_id: int, prerequisite_id: int) -> PrerequisiteChange:
        """Remove prerequisite_id from the prerequisites of course_id.

        Removing an edge that doesn't exist is a no-op.

        Raises:
            CourseNotFoundError: If either course doesn't exist.
            VersionConflictError: If either course changed concurrently.
        """
        with self._graph_lock:
            change = self.store.remove_prerequisite(course_id, prerequisite_id)

        if change.changed:
            logger.info(
                "Removed prerequisite %s -> %s", change.course.code, change.prerequisite.code
            )
            self._evict_edge(change.course, change.prerequisite)
        return change

    def assign_instructor(self, course_id: int, instructor_id: int) -> AssignmentChange:
        """Assign an instructor to a course. Assigning twice is a no-op.

        Raises:
            CourseNotFoundError: If course doesn't exist.
            InstructorNotFoundError: If instructor doesn't exist.
            VersionConflictError: If the course changed concurrently.
        """
        course = self._require_course(course_id)
        change = self.store.assign_instructor(
            course_id, instructor_id, expected_version=course.version
        )
        if change.changed:
            logger.info("Assigned instructor %s to %s", instructor_id, change.course.code)
            self._evict_assignment(change)
        return change

    def unassign_instructor(self, course_id: int, instructor_id: int) -> AssignmentChange:
        """Remove an instructor from a course. Not assigned is a no-op.

        Raises:
            CourseNotFoundError: If course doesn't exist.
            InstructorNotFoundError: If instructor doesn't exist.
            VersionConflictError: If the course changed concurrently.
        """
        course = self._require_course(course_id)
        change = self.store.unassign_instructor(
            course_id, instructor_id, expected_version=course.version
        )
        if change.changed:
            logger.info("Unassigned instructor %s from %s", instructor_id, change.course.code)
            self._evict_assignment(change)
        return change

    def _reject_cycle(
        self, course_id: int, prerequisite_id: int, graph: dict[int, set[int]]
    ) -> None:
        if creates_cycle(graph, course_id, prerequisite_id):
            logger.warning(
                "Rejected prerequisite %s -> %s: another writer closed the cycle first",
                course_id,
                prerequisite_id,
            )
            raise InvalidGraphOperationError(course_id, prerequisite_id)

    def _require_course(self, course_id: int) -> CourseRecord:
        course = self.store.find_course(course_id)
        if course is None:
            raise CourseNotFoundError(f"Course with id '{course_id}' not found")
        return course

    def _evict_edge(self, course: CourseRecord, prerequisite: CourseRecord) -> None:
        evict_course(self.cache, course)
        evict_course(self.cache, prerequisite)
        evict_course_listing(self.cache)

    def _evict_assignment(self, change: AssignmentChange) -> None:
        evict_course(self.cache, change.course)
        evict_course_listing(self.cache)
        evict_instructor(self.cache, change.instructor)

"""Catalog - Wires the store, cache, graph and enrollment components into services."""

from __future__ import annotations

import logging

from catalogo.cache import CacheCoordinator
from catalogo.catalog.courses import CourseService
from catalogo.catalog.enrollments import EnrollmentService
from catalogo.catalog.instructors import InstructorService
from catalogo.catalog.students import StudentService
from catalogo.config import Settings
from catalogo.enrollment import EnrollmentGuard
from catalogo.graph import GraphValidator, RelationshipManager
from catalogo.store import CatalogStore

logger = logging.getLogger(__name__)


class Catalog:
    """One store, one cache and the services built on them.

    Example:
        catalog = Catalog(db_path=":memory:")
        course = catalog.courses.create(CourseData(code="MAT-101", name="Algebra", credits=6))
    """

    def __init__(self, settings: Settings | None = None, db_path: str | None = None) -> None:
        """Initialize the catalog.

        Args:
            settings: Runtime settings. Defaults to Settings().
            db_path: Overrides settings.db_path when given.
        """
        self.settings = settings or Settings()
        path = db_path if db_path is not None else self.settings.db_path

        self.store = CatalogStore(path, timeout=self.settings.store_timeout)
        self.cache = CacheCoordinator(enabled=self.settings.cache_enabled)

        validator = GraphValidator(self.store)
        relationships = RelationshipManager(self.store, validator, self.cache)
        guard = EnrollmentGuard(self.store, self.cache)

        self.courses = CourseService(self.store, self.cache, validator, relationships)
        self.instructors = InstructorService(self.store, self.cache)
        self.students = StudentService(self.store)
        self.enrollments = EnrollmentService(self.store, self.cache, guard)

        logger.info("Catalog opened (db=%s, cache=%s)", path, self.cache.enabled)

    def close(self) -> None:
        """Drop the cache and close the store."""
        self.cache.clear()
        self.store.close()
        logger.info("Catalog closed")

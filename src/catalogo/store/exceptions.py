"""Custom exceptions for the entity store."""


class CatalogStoreError(Exception):
    """Base exception for entity store errors."""


class NotFoundError(CatalogStoreError):
    """A referenced id or code does not resolve to an existing record."""


class CourseNotFoundError(NotFoundError):
    """Course with given ID or code does not exist."""


class InstructorNotFoundError(NotFoundError):
    """Instructor with given ID does not exist."""


class StudentNotFoundError(NotFoundError):
    """Student with given ID or enrollment number does not exist."""


class EnrollmentNotFoundError(NotFoundError):
    """Enrollment with given ID does not exist."""


class ConflictError(CatalogStoreError):
    """The write conflicts with the current state of the store."""


class VersionConflictError(ConflictError):
    """Course was modified since it was last read; reload and retry."""


class CourseInUseError(ConflictError):
    """Cannot delete a course that still has dependents or enrollments."""


class DuplicateCodeError(ConflictError):
    """A unique code (course code, employee or enrollment number) is already taken."""


class DuplicateEnrollmentError(CatalogStoreError):
    """Student is already enrolled in the course."""


class StoreFailureError(CatalogStoreError):
    """The storage layer failed (connectivity, timeout, unexpected constraint)."""

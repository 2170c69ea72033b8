"""Entity Store - Persistent storage for courses, instructors, students and enrollments."""

from catalogo.store.exceptions import (
    CatalogStoreError,
    ConflictError,
    CourseInUseError,
    CourseNotFoundError,
    DuplicateCodeError,
    DuplicateEnrollmentError,
    EnrollmentNotFoundError,
    InstructorNotFoundError,
    NotFoundError,
    StoreFailureError,
    StudentNotFoundError,
    VersionConflictError,
)
from catalogo.store.models import (
    AssignmentChange,
    CourseDeletion,
    CourseRecord,
    EnrollmentChange,
    EnrollmentRecord,
    EnrollmentStatus,
    InstructorDeletion,
    InstructorRecord,
    PrerequisiteChange,
    StudentRecord,
)
from catalogo.store.store import CatalogStore

__all__ = [
    "AssignmentChange",
    "CatalogStore",
    "CatalogStoreError",
    "ConflictError",
    "CourseInUseError",
    "CourseDeletion",
    "CourseNotFoundError",
    "CourseRecord",
    "DuplicateCodeError",
    "DuplicateEnrollmentError",
    "EnrollmentChange",
    "EnrollmentNotFoundError",
    "EnrollmentRecord",
    "EnrollmentStatus",
    "InstructorDeletion",
    "InstructorNotFoundError",
    "InstructorRecord",
    "NotFoundError",
    "PrerequisiteChange",
    "StoreFailureError",
    "StudentNotFoundError",
    "StudentRecord",
    "VersionConflictError",
]

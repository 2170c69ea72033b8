"""Catalog - Course, instructor, student and enrollment services."""

from catalogo.catalog.catalog import Catalog
from catalogo.catalog.courses import CourseService
from catalogo.catalog.enrollments import EnrollmentService
from catalogo.catalog.instructors import InstructorService
from catalogo.catalog.models import (
    CourseData,
    DeactivationData,
    EnrollmentData,
    InstructorData,
    StudentData,
)
from catalogo.catalog.students import StudentService

__all__ = [
    "Catalog",
    "CourseData",
    "CourseService",
    "DeactivationData",
    "EnrollmentData",
    "EnrollmentService",
    "InstructorData",
    "InstructorService",
    "StudentData",
    "StudentService",
]

"""Pydantic models for REST API."""

from datetime import date, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from catalogo.catalog.models import CourseData

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Course models


class CourseUpdate(CourseData):
    """Request model for replacing a course.

    version is the course version the client last read. When given, the
    update fails with 409 if the course changed since.
    """

    version: int | None = Field(default=None, ge=0)


class CourseResponse(BaseModel):
    """Response model for a course."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    credits: int
    version: int
    prerequisite_ids: list[int]
    dependent_ids: list[int]
    instructor_ids: list[int]


def course_to_response(course: Any) -> CourseResponse:
    """Convert a CourseRecord to CourseResponse."""
    return CourseResponse.model_validate(course)


class CycleCheckResponse(BaseModel):
    """Response model for a prerequisite cycle check."""

    course_id: int
    prerequisite_id: int
    would_form_cycle: bool


# Instructor models


class InstructorResponse(BaseModel):
    """Response model for an instructor."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_number: str
    first_name: str
    last_name: str
    email: str
    birth_date: date | None
    department: str
    course_ids: list[int]


def instructor_to_response(instructor: Any) -> InstructorResponse:
    """Convert an InstructorRecord to InstructorResponse."""
    return InstructorResponse.model_validate(instructor)


# Student models


class StudentResponse(BaseModel):
    """Response model for a student."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    enrollment_number: str
    first_name: str
    last_name: str
    email: str
    birth_date: date | None
    active: bool
    deactivation_reason: str | None
    deactivated_at: datetime | None


def student_to_response(student: Any) -> StudentResponse:
    """Convert a StudentRecord to StudentResponse."""
    return StudentResponse.model_validate(student)


# Enrollment models


class EnrollmentResponse(BaseModel):
    """Response model for an enrollment."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    course_id: int
    enrollment_date: date
    status: str
    grade: float | None


def enrollment_to_response(enrollment: Any) -> EnrollmentResponse:
    """Convert an EnrollmentRecord to EnrollmentResponse."""
    return EnrollmentResponse.model_validate(enrollment)

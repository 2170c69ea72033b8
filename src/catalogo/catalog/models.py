"""Validated input models for catalog operations.

Malformed input raises pydantic.ValidationError with one entry per field.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from catalogo.store import EnrollmentStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class _Input(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)


class CourseData(_Input):
    """Scalar fields of a course. Edges are changed through dedicated operations."""

    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=100)
    credits: int = Field(..., gt=0)


class PersonData(_Input):
    """Fields shared by instructors and students."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    birth_date: date | None = None

    @field_validator("birth_date")
    @classmethod
    def birth_date_in_past(cls, value: date | None) -> date | None:
        if value is not None and value >= date.today():
            raise ValueError("birth date must be in the past")
        return value


class InstructorData(PersonData):
    employee_number: str = Field(..., min_length=1, max_length=50)
    department: str = Field(..., min_length=1, max_length=100)


class StudentData(PersonData):
    enrollment_number: str = Field(..., min_length=1, max_length=50)


class DeactivationData(_Input):
    reason: str = Field(..., min_length=1, max_length=500)


class EnrollmentData(_Input):
    """Every field of an enrollment. Updates replace all of them."""

    student_id: int = Field(..., gt=0)
    course_id: int = Field(..., gt=0)
    enrollment_date: date = Field(default_factory=date.today)
    status: EnrollmentStatus = EnrollmentStatus.ACTIVO
    grade: float | None = Field(default=None, ge=0, le=100)

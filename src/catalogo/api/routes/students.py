"""Student endpoints, including logical deactivation."""

from fastapi import APIRouter, status

from catalogo.api.dependencies import CatalogDep
from catalogo.api.models import (
    APIResponse,
    CourseResponse,
    StudentResponse,
    course_to_response,
    student_to_response,
)
from catalogo.catalog import DeactivationData, StudentData
from catalogo.store import StudentNotFoundError

router = APIRouter(prefix="/students", tags=["students"])


@router.get("", response_model=APIResponse[list[StudentResponse]])
def list_students(catalog: CatalogDep) -> APIResponse[list[StudentResponse]]:
    """List all students."""
    students = catalog.students.list()
    return APIResponse(data=[student_to_response(s) for s in students])


@router.post(
    "",
    response_model=APIResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_student(student: StudentData, catalog: CatalogDep) -> APIResponse[StudentResponse]:
    """Create a new student."""
    created = catalog.students.create(student)
    return APIResponse(data=student_to_response(created))


@router.get("/active", response_model=APIResponse[list[StudentResponse]])
def list_active_students(catalog: CatalogDep) -> APIResponse[list[StudentResponse]]:
    """List students that have not been deactivated."""
    students = catalog.students.list_active()
    return APIResponse(data=[student_to_response(s) for s in students])


@router.get(
    "/enrollment-number/{enrollment_number}", response_model=APIResponse[StudentResponse]
)
def get_student_by_enrollment_number(
    enrollment_number: str, catalog: CatalogDep
) -> APIResponse[StudentResponse]:
    """Get a student by enrollment number."""
    student = catalog.students.get_by_enrollment_number(enrollment_number)
    if student is None:
        raise StudentNotFoundError(
            f"Student with enrollment number '{enrollment_number}' not found"
        )
    return APIResponse(data=student_to_response(student))


@router.get("/{student_id}", response_model=APIResponse[StudentResponse])
def get_student(student_id: int, catalog: CatalogDep) -> APIResponse[StudentResponse]:
    """Get a student by ID."""
    student = catalog.students.get(student_id)
    if student is None:
        raise StudentNotFoundError(f"Student with id '{student_id}' not found")
    return APIResponse(data=student_to_response(student))


@router.put("/{student_id}", response_model=APIResponse[StudentResponse])
def update_student(
    student_id: int, student: StudentData, catalog: CatalogDep
) -> APIResponse[StudentResponse]:
    """Replace a student's personal fields."""
    updated = catalog.students.update(student_id, student)
    return APIResponse(data=student_to_response(updated))


@router.put("/{student_id}/deactivate", response_model=APIResponse[StudentResponse])
def deactivate_student(
    student_id: int, deactivation: DeactivationData, catalog: CatalogDep
) -> APIResponse[StudentResponse]:
    """Deactivate a student with a reason."""
    student = catalog.students.deactivate(student_id, deactivation.reason)
    return APIResponse(data=student_to_response(student))


@router.get("/{student_id}/courses", response_model=APIResponse[list[CourseResponse]])
def list_student_courses(
    student_id: int, catalog: CatalogDep
) -> APIResponse[list[CourseResponse]]:
    """List the courses a student is enrolled in."""
    courses = catalog.students.list_courses(student_id)
    return APIResponse(data=[course_to_response(c) for c in courses])

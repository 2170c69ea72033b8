"""Enrollment CRUD endpoints."""

from fastapi import APIRouter, status

from catalogo.api.dependencies import CatalogDep
from catalogo.api.models import APIResponse, EnrollmentResponse, enrollment_to_response
from catalogo.catalog import EnrollmentData
from catalogo.store import EnrollmentNotFoundError

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.get("", response_model=APIResponse[list[EnrollmentResponse]])
def list_enrollments(catalog: CatalogDep) -> APIResponse[list[EnrollmentResponse]]:
    """List all enrollments."""
    enrollments = catalog.enrollments.list()
    return APIResponse(data=[enrollment_to_response(e) for e in enrollments])


@router.post(
    "",
    response_model=APIResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_enrollment(
    enrollment: EnrollmentData, catalog: CatalogDep
) -> APIResponse[EnrollmentResponse]:
    """Enroll a student in a course."""
    created = catalog.enrollments.create(enrollment)
    return APIResponse(data=enrollment_to_response(created))


@router.get("/student/{student_id}", response_model=APIResponse[list[EnrollmentResponse]])
def list_student_enrollments(
    student_id: int, catalog: CatalogDep
) -> APIResponse[list[EnrollmentResponse]]:
    """List a student's enrollments."""
    enrollments = catalog.enrollments.list_by_student(student_id)
    return APIResponse(data=[enrollment_to_response(e) for e in enrollments])


@router.get("/course/{course_id}", response_model=APIResponse[list[EnrollmentResponse]])
def list_course_enrollments(
    course_id: int, catalog: CatalogDep
) -> APIResponse[list[EnrollmentResponse]]:
    """List a course's enrollments."""
    enrollments = catalog.enrollments.list_by_course(course_id)
    return APIResponse(data=[enrollment_to_response(e) for e in enrollments])


@router.get("/{enrollment_id}", response_model=APIResponse[EnrollmentResponse])
def get_enrollment(enrollment_id: int, catalog: CatalogDep) -> APIResponse[EnrollmentResponse]:
    """Get an enrollment by ID."""
    enrollment = catalog.enrollments.get(enrollment_id)
    if enrollment is None:
        raise EnrollmentNotFoundError(f"Enrollment with id '{enrollment_id}' not found")
    return APIResponse(data=enrollment_to_response(enrollment))


@router.put("/{enrollment_id}", response_model=APIResponse[EnrollmentResponse])
def update_enrollment(
    enrollment_id: int, enrollment: EnrollmentData, catalog: CatalogDep
) -> APIResponse[EnrollmentResponse]:
    """Replace every field of an enrollment."""
    updated = catalog.enrollments.update(enrollment_id, enrollment)
    return APIResponse(data=enrollment_to_response(updated))


@router.delete("/{enrollment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_enrollment(enrollment_id: int, catalog: CatalogDep) -> None:
    """Delete an enrollment."""
    catalog.enrollments.delete(enrollment_id)

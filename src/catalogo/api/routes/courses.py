"""Course endpoints: CRUD, prerequisites and instructor assignments."""

from fastapi import APIRouter, status

from catalogo.api.dependencies import CatalogDep
from catalogo.api.models import (
    APIResponse,
    CourseResponse,
    CourseUpdate,
    CycleCheckResponse,
    course_to_response,
)
from catalogo.catalog import CourseData
from catalogo.store import CourseNotFoundError

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=APIResponse[list[CourseResponse]])
def list_courses(catalog: CatalogDep) -> APIResponse[list[CourseResponse]]:
    """List all courses."""
    courses = catalog.courses.list()
    return APIResponse(data=[course_to_response(c) for c in courses])


@router.post(
    "",
    response_model=APIResponse[CourseResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_course(course: CourseData, catalog: CatalogDep) -> APIResponse[CourseResponse]:
    """Create a new course."""
    created = catalog.courses.create(course)
    return APIResponse(data=course_to_response(created))


@router.get("/order", response_model=APIResponse[list[CourseResponse]])
def study_order(catalog: CatalogDep) -> APIResponse[list[CourseResponse]]:
    """List all courses with every prerequisite before its dependents."""
    courses = catalog.courses.study_order()
    return APIResponse(data=[course_to_response(c) for c in courses])


@router.get("/code/{code}", response_model=APIResponse[CourseResponse])
def get_course_by_code(code: str, catalog: CatalogDep) -> APIResponse[CourseResponse]:
    """Get a course by its code."""
    course = catalog.courses.get_by_code(code)
    if course is None:
        raise CourseNotFoundError(f"Course with code '{code}' not found")
    return APIResponse(data=course_to_response(course))


@router.get("/{course_id}", response_model=APIResponse[CourseResponse])
def get_course(course_id: int, catalog: CatalogDep) -> APIResponse[CourseResponse]:
    """Get a course by ID."""
    course = catalog.courses.get(course_id)
    if course is None:
        raise CourseNotFoundError(f"Course with id '{course_id}' not found")
    return APIResponse(data=course_to_response(course))


@router.put("/{course_id}", response_model=APIResponse[CourseResponse])
def update_course(
    course_id: int, course: CourseUpdate, catalog: CatalogDep
) -> APIResponse[CourseResponse]:
    """Replace a course's code, name and credits."""
    updated = catalog.courses.update(course_id, course, expected_version=course.version)
    return APIResponse(data=course_to_response(updated))


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_course(course_id: int, catalog: CatalogDep) -> None:
    """Delete a course."""
    catalog.courses.delete(course_id)


@router.get(
    "/{course_id}/cycle-check/{prerequisite_id}",
    response_model=APIResponse[CycleCheckResponse],
)
def check_cycle(
    course_id: int, prerequisite_id: int, catalog: CatalogDep
) -> APIResponse[CycleCheckResponse]:
    """Check whether adding the prerequisite would form a cycle."""
    result = catalog.courses.would_form_cycle(course_id, prerequisite_id)
    return APIResponse(
        data=CycleCheckResponse(
            course_id=course_id, prerequisite_id=prerequisite_id, would_form_cycle=result
        )
    )


@router.post(
    "/{course_id}/prerequisites/{prerequisite_id}",
    response_model=APIResponse[CourseResponse],
)
def add_prerequisite(
    course_id: int, prerequisite_id: int, catalog: CatalogDep
) -> APIResponse[CourseResponse]:
    """Add a prerequisite to a course."""
    course = catalog.courses.add_prerequisite(course_id, prerequisite_id)
    return APIResponse(data=course_to_response(course))


@router.delete(
    "/{course_id}/prerequisites/{prerequisite_id}",
    response_model=APIResponse[CourseResponse],
)
def remove_prerequisite(
    course_id: int, prerequisite_id: int, catalog: CatalogDep
) -> APIResponse[CourseResponse]:
    """Remove a prerequisite from a course."""
    course = catalog.courses.remove_prerequisite(course_id, prerequisite_id)
    return APIResponse(data=course_to_response(course))


@router.post(
    "/{course_id}/instructors/{instructor_id}",
    response_model=APIResponse[CourseResponse],
)
def assign_instructor(
    course_id: int, instructor_id: int, catalog: CatalogDep
) -> APIResponse[CourseResponse]:
    """Assign an instructor to a course."""
    course = catalog.courses.assign_instructor(course_id, instructor_id)
    return APIResponse(data=course_to_response(course))


@router.delete(
    "/{course_id}/instructors/{instructor_id}",
    response_model=APIResponse[CourseResponse],
)
def unassign_instructor(
    course_id: int, instructor_id: int, catalog: CatalogDep
) -> APIResponse[CourseResponse]:
    """Remove an instructor from a course."""
    course = catalog.courses.unassign_instructor(course_id, instructor_id)
    return APIResponse(data=course_to_response(course))

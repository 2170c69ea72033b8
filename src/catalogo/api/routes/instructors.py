"""Instructor CRUD endpoints."""

from fastapi import APIRouter, status

from catalogo.api.dependencies import CatalogDep
from catalogo.api.models import APIResponse, InstructorResponse, instructor_to_response
from catalogo.catalog import InstructorData
from catalogo.store import InstructorNotFoundError

router = APIRouter(prefix="/instructors", tags=["instructors"])


@router.get("", response_model=APIResponse[list[InstructorResponse]])
def list_instructors(catalog: CatalogDep) -> APIResponse[list[InstructorResponse]]:
    """List all instructors."""
    instructors = catalog.instructors.list()
    return APIResponse(data=[instructor_to_response(i) for i in instructors])


@router.post(
    "",
    response_model=APIResponse[InstructorResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_instructor(
    instructor: InstructorData, catalog: CatalogDep
) -> APIResponse[InstructorResponse]:
    """Create a new instructor."""
    created = catalog.instructors.create(instructor)
    return APIResponse(data=instructor_to_response(created))


@router.get("/{instructor_id}", response_model=APIResponse[InstructorResponse])
def get_instructor(instructor_id: int, catalog: CatalogDep) -> APIResponse[InstructorResponse]:
    """Get an instructor by ID."""
    instructor = catalog.instructors.get(instructor_id)
    if instructor is None:
        raise InstructorNotFoundError(f"Instructor with id '{instructor_id}' not found")
    return APIResponse(data=instructor_to_response(instructor))


@router.put("/{instructor_id}", response_model=APIResponse[InstructorResponse])
def update_instructor(
    instructor_id: int, instructor: InstructorData, catalog: CatalogDep
) -> APIResponse[InstructorResponse]:
    """Replace an instructor's fields."""
    updated = catalog.instructors.update(instructor_id, instructor)
    return APIResponse(data=instructor_to_response(updated))


@router.delete("/{instructor_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_instructor(instructor_id: int, catalog: CatalogDep) -> None:
    """Delete an instructor."""
    catalog.instructors.delete(instructor_id)

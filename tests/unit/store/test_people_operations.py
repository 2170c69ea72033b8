"""Unit tests for CatalogStore instructor and student operations."""

from datetime import date

import pytest

from catalogo.store import (
    CatalogStore,
    DuplicateCodeError,
    InstructorNotFoundError,
    StudentNotFoundError,
)


@pytest.fixture
def store() -> CatalogStore:
    """Create an in-memory CatalogStore for testing."""
    s = CatalogStore(":memory:")
    yield s
    s.close()


def _instructor_fields(employee_number: str, last_name: str = "Perez") -> dict:
    return {
        "employee_number": employee_number,
        "first_name": "Ana",
        "last_name": last_name,
        "email": f"{employee_number}@uni.edu",
        "birth_date": date(1980, 5, 17),
        "department": "Matematicas",
    }


def _student_fields(enrollment_number: str) -> dict:
    return {
        "enrollment_number": enrollment_number,
        "first_name": "Luis",
        "last_name": "Gomez",
        "email": f"{enrollment_number}@alumnos.uni.edu",
        "birth_date": None,
    }


@pytest.mark.unit
class TestInstructorOperations:
    """Tests for instructor CRUD."""

    def test_create_instructor(self, store: CatalogStore) -> None:
        instructor = store.create_instructor(**_instructor_fields("D1"))

        assert instructor.id is not None
        assert instructor.employee_number == "D1"
        assert instructor.birth_date == date(1980, 5, 17)
        assert instructor.course_ids == ()

    def test_create_instructor_duplicate_employee_number_raises(
        self, store: CatalogStore
    ) -> None:
        store.create_instructor(**_instructor_fields("D1"))

        with pytest.raises(DuplicateCodeError) as exc_info:
            store.create_instructor(**_instructor_fields("D1", last_name="Otro"))

        assert "D1" in str(exc_info.value)

    def test_list_instructors_ordered_by_name(self, store: CatalogStore) -> None:
        store.create_instructor(**_instructor_fields("D1", last_name="Zapata"))
        store.create_instructor(**_instructor_fields("D2", last_name="Alvarez"))

        names = [i.last_name for i in store.list_instructors()]

        assert names == ["Alvarez", "Zapata"]

    def test_update_instructor(self, store: CatalogStore) -> None:
        created = store.create_instructor(**_instructor_fields("D1"))
        fields = _instructor_fields("D1") | {"department": "Fisica"}

        updated = store.update_instructor(created.id, **fields)

        assert updated.department == "Fisica"
        assert store.find_instructor(created.id).department == "Fisica"

    def test_update_instructor_missing_raises(self, store: CatalogStore) -> None:
        with pytest.raises(InstructorNotFoundError):
            store.update_instructor(999, **_instructor_fields("D1"))

    def test_find_instructor_missing_returns_none(self, store: CatalogStore) -> None:
        assert store.find_instructor(999) is None

    def test_delete_instructor_missing_raises(self, store: CatalogStore) -> None:
        with pytest.raises(InstructorNotFoundError):
            store.delete_instructor(999)


@pytest.mark.unit
class TestStudentOperations:
    """Tests for student CRUD and deactivation."""

    def test_create_student_is_active(self, store: CatalogStore) -> None:
        student = store.create_student(**_student_fields("S1"))

        assert student.active is True
        assert student.deactivation_reason is None
        assert student.deactivated_at is None

    def test_create_student_duplicate_enrollment_number_raises(
        self, store: CatalogStore
    ) -> None:
        store.create_student(**_student_fields("S1"))

        with pytest.raises(DuplicateCodeError):
            store.create_student(**_student_fields("S1"))

    def test_find_student_by_enrollment_number(self, store: CatalogStore) -> None:
        created = store.create_student(**_student_fields("S1"))

        assert store.find_student_by_enrollment_number("S1") == created
        assert store.find_student_by_enrollment_number("S9") is None

    def test_update_student_keeps_status(self, store: CatalogStore) -> None:
        created = store.create_student(**_student_fields("S1"))
        store.deactivate_student(created.id, "Graduado")
        fields = _student_fields("S1") | {"first_name": "Lucia"}

        updated = store.update_student(created.id, **fields)

        assert updated.first_name == "Lucia"
        assert updated.active is False
        assert updated.deactivation_reason == "Graduado"

    def test_deactivate_student(self, store: CatalogStore) -> None:
        """Deactivation keeps the row and records reason and timestamp."""
        created = store.create_student(**_student_fields("S1"))

        student = store.deactivate_student(created.id, "Abandono")

        assert student.active is False
        assert student.deactivation_reason == "Abandono"
        assert student.deactivated_at is not None
        assert store.find_student(created.id) is not None

    def test_deactivate_missing_student_raises(self, store: CatalogStore) -> None:
        with pytest.raises(StudentNotFoundError):
            store.deactivate_student(999, "Abandono")

    def test_list_students_active_only(self, store: CatalogStore) -> None:
        first = store.create_student(**_student_fields("S1"))
        store.create_student(**_student_fields("S2"))
        store.deactivate_student(first.id, "Abandono")

        all_numbers = [s.enrollment_number for s in store.list_students()]
        active_numbers = [s.enrollment_number for s in store.list_students(active_only=True)]

        assert all_numbers == ["S1", "S2"]
        assert active_numbers == ["S2"]

    def test_list_student_courses(self, store: CatalogStore) -> None:
        student = store.create_student(**_student_fields("S1"))
        algebra = store.create_course(code="MAT-101", name="Algebra", credits=6)
        physics = store.create_course(code="FIS-100", name="Fisica", credits=8)
        store.create_course(code="QUI-100", name="Quimica", credits=6)
        for course in (algebra, physics):
            store.create_enrollment(
                student_id=student.id,
                course_id=course.id,
                enrollment_date=date(2024, 3, 1),
                status="activo",
            )

        codes = [c.code for c in store.list_student_courses(student.id)]

        assert codes == ["FIS-100", "MAT-101"]

"""Unit tests for InstructorService, StudentService and EnrollmentService."""

from datetime import date

import pytest

from catalogo.catalog import Catalog, EnrollmentData
from catalogo.store import (
    DuplicateCodeError,
    EnrollmentStatus,
    InstructorNotFoundError,
    StudentNotFoundError,
)


@pytest.mark.unit
class TestInstructorService:
    """Tests for InstructorService."""

    def test_create_and_get(self, catalog: Catalog, instructor_data) -> None:
        created = catalog.instructors.create(instructor_data("D1"))

        assert catalog.instructors.get(created.id) == created
        assert catalog.instructors.get(999) is None

    def test_listing_reflects_writes(self, catalog: Catalog, instructor_data) -> None:
        catalog.instructors.create(instructor_data("D1", last_name="Zapata"))
        assert len(catalog.instructors.list()) == 1

        catalog.instructors.create(instructor_data("D2", last_name="Alvarez"))

        assert [i.last_name for i in catalog.instructors.list()] == ["Alvarez", "Zapata"]

    def test_update_refreshes_cached_instructor(self, catalog: Catalog, instructor_data) -> None:
        created = catalog.instructors.create(instructor_data("D1"))
        catalog.instructors.get(created.id)

        catalog.instructors.update(created.id, instructor_data("D1", last_name="Rojas"))

        assert catalog.instructors.get(created.id).last_name == "Rojas"

    def test_update_missing_raises(self, catalog: Catalog, instructor_data) -> None:
        with pytest.raises(InstructorNotFoundError):
            catalog.instructors.update(999, instructor_data("D1"))

    def test_duplicate_employee_number_raises(self, catalog: Catalog, instructor_data) -> None:
        catalog.instructors.create(instructor_data("D1"))

        with pytest.raises(DuplicateCodeError):
            catalog.instructors.create(instructor_data("D1"))

    def test_delete(self, catalog: Catalog, instructor_data) -> None:
        created = catalog.instructors.create(instructor_data("D1"))
        catalog.instructors.get(created.id)

        catalog.instructors.delete(created.id)

        assert catalog.instructors.get(created.id) is None
        assert catalog.instructors.list() == []

    def test_assignment_visible_on_instructor(
        self, catalog: Catalog, instructor_data, course_data
    ) -> None:
        instructor = catalog.instructors.create(instructor_data("D1"))
        course = catalog.courses.create(course_data("MAT-101"))
        catalog.instructors.get(instructor.id)

        catalog.courses.assign_instructor(course.id, instructor.id)

        assert catalog.instructors.get(instructor.id).course_ids == (course.id,)


@pytest.mark.unit
class TestStudentService:
    """Tests for StudentService."""

    def test_create_and_lookup(self, catalog: Catalog, student_data) -> None:
        created = catalog.students.create(student_data("S1"))

        assert catalog.students.get(created.id) == created
        assert catalog.students.get_by_enrollment_number("S1") == created
        assert catalog.students.get_by_enrollment_number("S9") is None

    def test_deactivate(self, catalog: Catalog, student_data) -> None:
        first = catalog.students.create(student_data("S1"))
        catalog.students.create(student_data("S2"))

        deactivated = catalog.students.deactivate(first.id, "Traslado")

        assert deactivated.active is False
        assert deactivated.deactivation_reason == "Traslado"
        assert [s.enrollment_number for s in catalog.students.list_active()] == ["S2"]
        assert len(catalog.students.list()) == 2

    def test_update(self, catalog: Catalog, student_data) -> None:
        created = catalog.students.create(student_data("S1"))

        updated = catalog.students.update(created.id, student_data("S1", first_name="Marta"))

        assert updated.first_name == "Marta"

    def test_list_courses(self, catalog: Catalog, student_data, course_data) -> None:
        student = catalog.students.create(student_data("S1"))
        course = catalog.courses.create(course_data("MAT-101"))
        catalog.enrollments.create(EnrollmentData(student_id=student.id, course_id=course.id))

        assert [c.code for c in catalog.students.list_courses(student.id)] == ["MAT-101"]

    def test_list_courses_missing_student_raises(self, catalog: Catalog) -> None:
        with pytest.raises(StudentNotFoundError):
            catalog.students.list_courses(999)


@pytest.mark.unit
class TestEnrollmentService:
    """Tests for EnrollmentService."""

    @pytest.fixture
    def ids(self, catalog: Catalog, student_data, course_data) -> tuple[int, int]:
        student = catalog.students.create(student_data("S1"))
        course = catalog.courses.create(course_data("MAT-101"))
        return student.id, course.id

    def test_listings_reflect_create(self, catalog: Catalog, ids: tuple[int, int]) -> None:
        student_id, course_id = ids
        assert catalog.enrollments.list_by_student(student_id) == []
        assert catalog.enrollments.list_by_course(course_id) == []
        assert catalog.enrollments.list() == []

        created = catalog.enrollments.create(
            EnrollmentData(student_id=student_id, course_id=course_id)
        )

        assert catalog.enrollments.list_by_student(student_id) == [created]
        assert catalog.enrollments.list_by_course(course_id) == [created]
        assert catalog.enrollments.list() == [created]
        assert created.enrollment_date == date.today()

    def test_update_refreshes_cached_reads(self, catalog: Catalog, ids: tuple[int, int]) -> None:
        student_id, course_id = ids
        created = catalog.enrollments.create(
            EnrollmentData(student_id=student_id, course_id=course_id)
        )
        catalog.enrollments.get(created.id)
        catalog.enrollments.list_by_course(course_id)

        catalog.enrollments.update(
            created.id,
            EnrollmentData(
                student_id=student_id,
                course_id=course_id,
                enrollment_date=created.enrollment_date,
                status=EnrollmentStatus.CURSANDO,
            ),
        )

        assert catalog.enrollments.get(created.id).status == "cursando"
        assert catalog.enrollments.list_by_course(course_id)[0].status == "cursando"

    def test_moving_enrollment_updates_both_courses(
        self, catalog: Catalog, ids: tuple[int, int], course_data
    ) -> None:
        student_id, course_id = ids
        other = catalog.courses.create(course_data("FIS-100"))
        created = catalog.enrollments.create(
            EnrollmentData(student_id=student_id, course_id=course_id)
        )
        catalog.enrollments.list_by_course(course_id)
        catalog.enrollments.list_by_course(other.id)

        catalog.enrollments.update(
            created.id, EnrollmentData(student_id=student_id, course_id=other.id)
        )

        assert catalog.enrollments.list_by_course(course_id) == []
        assert len(catalog.enrollments.list_by_course(other.id)) == 1

    def test_delete(self, catalog: Catalog, ids: tuple[int, int]) -> None:
        student_id, course_id = ids
        created = catalog.enrollments.create(
            EnrollmentData(student_id=student_id, course_id=course_id)
        )
        catalog.enrollments.get(created.id)

        catalog.enrollments.delete(created.id)

        assert catalog.enrollments.get(created.id) is None
        assert catalog.enrollments.list_by_student(student_id) == []

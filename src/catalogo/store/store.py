"""CatalogStore - Persistence API for courses, instructors, students and enrollments."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy import exists, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.attributes import set_committed_value

from catalogo.store.database import Database
from catalogo.store.exceptions import (
    CatalogStoreError,
    CourseInUseError,
    CourseNotFoundError,
    DuplicateCodeError,
    DuplicateEnrollmentError,
    EnrollmentNotFoundError,
    InstructorNotFoundError,
    StoreFailureError,
    StudentNotFoundError,
    VersionConflictError,
)
from catalogo.store.models import (
    AssignmentChange,
    Course,
    CourseDeletion,
    CourseRecord,
    Enrollment,
    EnrollmentChange,
    EnrollmentRecord,
    Instructor,
    InstructorDeletion,
    InstructorRecord,
    PrerequisiteChange,
    Student,
    StudentRecord,
    course_prerequisites,
)

logger = logging.getLogger(__name__)

_COURSE_EDGES = (
    selectinload(Course.prerequisites),
    selectinload(Course.dependents),
    selectinload(Course.instructors),
)


def _is_unique_violation(error: IntegrityError) -> bool:
    return "UNIQUE constraint failed" in str(error)


class CatalogStore:
    """Persistence API for the catalog.

    Every method runs in its own session and returns immutable records.
    SQLAlchemy failures that are not mapped to a domain error surface as
    StoreFailureError.
    """

    def __init__(self, db_path: str = "catalogo.db", timeout: float = 5.0) -> None:
        """Initialize the store with a SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
            timeout: Seconds a call may wait on a locked database
        """
        self._db = Database(db_path, timeout=timeout)
        self._db.create_tables()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._db.get_session()
        try:
            yield session
        except CatalogStoreError:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Store failure: %s", e)
            raise StoreFailureError(str(e)) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _claim_version(self, session: Session, course: Course, expected_version: int) -> None:
        """Compare-and-swap the course version inside the current transaction."""
        result = session.execute(
            update(Course)
            .where(Course.id == course.id, Course.version == expected_version)
            .values(version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise VersionConflictError(
                f"Course '{course.id}' was modified concurrently "
                f"(expected version {expected_version})"
            )
        set_committed_value(course, "version", expected_version + 1)

    # --- Course Operations ---

    def list_courses(self) -> list[CourseRecord]:
        """List all courses.

        Returns:
            List of all courses, ordered by code
        """
        with self._session() as session:
            stmt = select(Course).options(*_COURSE_EDGES).order_by(Course.code)
            return [CourseRecord.from_model(c) for c in session.execute(stmt).scalars()]

    def find_course(self, course_id: int | None) -> CourseRecord | None:
        """Get course by ID, or None if it doesn't exist."""
        if course_id is None:
            return None
        with self._session() as session:
            course = session.get(Course, course_id)
            return CourseRecord.from_model(course) if course is not None else None

    def find_course_by_code(self, code: str) -> CourseRecord | None:
        """Get course by its unique code, or None if it doesn't exist."""
        with self._session() as session:
            stmt = select(Course).where(Course.code == code)
            course = session.execute(stmt).scalar_one_or_none()
            return CourseRecord.from_model(course) if course is not None else None

    def create_course(self, code: str, name: str, credits: int) -> CourseRecord:
        """Create a new course.

        Args:
            code: Unique human-readable code, e.g. "MAT-101"
            name: Course name
            credits: Credit count

        Returns:
            Created course with generated ID and version 0

        Raises:
            DuplicateCodeError: If a course with the same code exists
        """
        with self._session() as session:
            course = Course(code=code, name=name, credits=credits)
            session.add(course)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if _is_unique_violation(e):
                    raise DuplicateCodeError(f"Course with code '{code}' already exists") from e
                raise
            return CourseRecord.from_model(course)

    def update_course(
        self,
        course_id: int,
        code: str,
        name: str,
        credits: int,
        expected_version: int | None = None,
    ) -> CourseRecord:
        """Replace the scalar fields of a course. Edges are left untouched.

        Args:
            course_id: The course's ID
            code: New unique code
            name: New name
            credits: New credit count
            expected_version: Version the caller last read. None means the
                version read inside this call.

        Returns:
            The updated course with its version incremented

        Raises:
            CourseNotFoundError: If course doesn't exist
            VersionConflictError: If the version moved past expected_version
            DuplicateCodeError: If the new code belongs to another course
        """
        with self._session() as session:
            course = self._get_course(session, course_id)
            read_version = course.version if expected_version is None else expected_version
            self._claim_version(session, course, read_version)

            course.code = code
            course.name = name
            course.credits = credits
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if _is_unique_violation(e):
                    raise DuplicateCodeError(f"Course with code '{code}' already exists") from e
                raise
            return CourseRecord.from_model(course)

    def delete_course(self, course_id: int) -> CourseDeletion:
        """Delete a course with its outgoing edges and instructor assignments.

        Fails if other courses depend on it or students are enrolled in it.
        The former prerequisites lose a dependent, so their versions are bumped.

        Args:
            course_id: The course's ID

        Returns:
            The course as it was just before deletion, plus its former
            prerequisites and instructors as they are afterwards

        Raises:
            CourseNotFoundError: If course doesn't exist
            CourseInUseError: If the course has dependents or enrollments
            VersionConflictError: If a former prerequisite changed concurrently
        """
        with self._session() as session:
            course = self._get_course(session, course_id)
            if course.dependents:
                raise CourseInUseError(
                    f"Course '{course_id}' is a prerequisite of "
                    f"{sorted(c.id for c in course.dependents)}"
                )
            enrolled = session.execute(
                select(exists().where(Enrollment.course_id == course_id))
            ).scalar()
            if enrolled:
                raise CourseInUseError(f"Course '{course_id}' has enrollments")

            snapshot = CourseRecord.from_model(course)
            prerequisites = list(course.prerequisites)
            instructors = list(course.instructors)
            for prerequisite in prerequisites:
                self._claim_version(session, prerequisite, prerequisite.version)
            course.prerequisites.clear()
            course.instructors.clear()
            session.delete(course)
            session.commit()
            return CourseDeletion(
                course=snapshot,
                prerequisites=tuple(CourseRecord.from_model(c) for c in prerequisites),
                instructors=tuple(InstructorRecord.from_model(i) for i in instructors),
            )

    def prerequisite_map(self) -> dict[int, set[int]]:
        """Load the whole prerequisite graph.

        Returns:
            Mapping of course ID to the IDs of its direct prerequisites. Every
            course appears as a key, with an empty set if it has none.
        """
        with self._session() as session:
            return self._prerequisite_map(session)

    def _prerequisite_map(self, session: Session) -> dict[int, set[int]]:
        graph: dict[int, set[int]] = {
            course_id: set() for course_id in session.execute(select(Course.id)).scalars()
        }
        edges = session.execute(
            select(course_prerequisites.c.course_id, course_prerequisites.c.prerequisite_id)
        )
        for course_id, prerequisite_id in edges:
            graph.setdefault(course_id, set()).add(prerequisite_id)
        return graph

    def add_prerequisite(
        self,
        course_id: int,
        prerequisite_id: int,
        course_version: int | None = None,
        prerequisite_version: int | None = None,
        check: Callable[[dict[int, set[int]]], None] | None = None,
    ) -> PrerequisiteChange:
        """Add the edge course -> prerequisite, updating both views.

        Bumps the version of both endpoints. Adding an existing edge is a no-op.
        The store itself does not look for cycles: callers pass ``check``,
        which receives the prerequisite graph read after both versions are
        claimed. The first claim holds SQLite's write lock until commit, so
        that graph already includes every edge committed by other
        connections. Raising from ``check`` rolls the write back.

        Raises:
            CourseNotFoundError: If either course doesn't exist
            VersionConflictError: If either endpoint moved past the given version
        """
        with self._session() as session:
            course = self._get_course(session, course_id)
            prerequisite = self._get_course(session, prerequisite_id)

            changed = prerequisite not in course.prerequisites
            if changed:
                self._claim_version(
                    session, course, course.version if course_version is None else course_version
                )
                self._claim_version(
                    session,
                    prerequisite,
                    prerequisite.version if prerequisite_version is None else prerequisite_version,
                )
                if check is not None:
                    check(self._prerequisite_map(session))
                # back_populates adds course to prerequisite.dependents
                course.prerequisites.add(prerequisite)
                session.commit()
            return PrerequisiteChange(
                course=CourseRecord.from_model(course),
                prerequisite=CourseRecord.from_model(prerequisite),
                changed=changed,
            )

    def remove_prerequisite(
        self,
        course_id: int,
        prerequisite_id: int,
        course_version: int | None = None,
        prerequisite_version: int | None = None,
    ) -> PrerequisiteChange:
        """Remove the edge course -> prerequisite from both views. Missing edges are a no-op.

        Raises:
            CourseNotFoundError: If either course doesn't exist
            VersionConflictError: If either endpoint moved past the given version
        """
        with self._session() as session:
            course = self._get_course(session, course_id)
            prerequisite = self._get_course(session, prerequisite_id)

            changed = prerequisite in course.prerequisites
            if changed:
                self._claim_version(
                    session, course, course.version if course_version is None else course_version
                )
                self._claim_version(
                    session,
                    prerequisite,
                    prerequisite.version if prerequisite_version is None else prerequisite_version,
                )
                course.prerequisites.discard(prerequisite)
                session.commit()
            return PrerequisiteChange(
                course=CourseRecord.from_model(course),
                prerequisite=CourseRecord.from_model(prerequisite),
                changed=changed,
            )

    # --- Instructor Operations ---

    def list_instructors(self) -> list[InstructorRecord]:
        """List all instructors, ordered by last name then first name."""
        with self._session() as session:
            stmt = (
                select(Instructor)
                .options(selectinload(Instructor.courses))
                .order_by(Instructor.last_name, Instructor.first_name)
            )
            return [InstructorRecord.from_model(i) for i in session.execute(stmt).scalars()]

    def find_instructor(self, instructor_id: int) -> InstructorRecord | None:
        """Get instructor by ID, or None if it doesn't exist."""
        with self._session() as session:
            instructor = session.get(Instructor, instructor_id)
            return InstructorRecord.from_model(instructor) if instructor is not None else None

    def create_instructor(self, **fields: Any) -> InstructorRecord:
        """Create a new instructor.

        Args:
            **fields: employee_number, first_name, last_name, email,
                birth_date, department

        Raises:
            DuplicateCodeError: If the employee number is taken
        """
        with self._session() as session:
            instructor = Instructor(**fields)
            session.add(instructor)
            self._commit_unique(session, f"Employee number '{fields['employee_number']}'")
            return InstructorRecord.from_model(instructor)

    def update_instructor(self, instructor_id: int, **fields: Any) -> InstructorRecord:
        """Replace all scalar fields of an instructor.

        Raises:
            InstructorNotFoundError: If instructor doesn't exist
            DuplicateCodeError: If the employee number belongs to another instructor
        """
        with self._session() as session:
            instructor = self._get_instructor(session, instructor_id)
            for name, value in fields.items():
                setattr(instructor, name, value)
            self._commit_unique(session, f"Employee number '{fields.get('employee_number')}'")
            return InstructorRecord.from_model(instructor)

    def delete_instructor(self, instructor_id: int) -> InstructorDeletion:
        """Delete an instructor, unassigning it from all its courses.

        Each course it taught loses an instructor, so its version is bumped.

        Returns:
            The instructor as it was just before deletion, plus the courses
            it was unassigned from as they are afterwards

        Raises:
            InstructorNotFoundError: If instructor doesn't exist
            VersionConflictError: If one of its courses changed concurrently
        """
        with self._session() as session:
            instructor = self._get_instructor(session, instructor_id)
            snapshot = InstructorRecord.from_model(instructor)
            courses = list(instructor.courses)
            for course in courses:
                self._claim_version(session, course, course.version)
            instructor.courses.clear()
            session.delete(instructor)
            session.commit()
            return InstructorDeletion(
                instructor=snapshot,
                courses=tuple(CourseRecord.from_model(c) for c in courses),
            )

    def assign_instructor(
        self, course_id: int, instructor_id: int, expected_version: int | None = None
    ) -> AssignmentChange:
        """Assign an instructor to a course. Already assigned is a no-op.

        Raises:
            CourseNotFoundError: If course doesn't exist
            InstructorNotFoundError: If instructor doesn't exist
            VersionConflictError: If the course moved past expected_version
        """
        with self._session() as session:
            course = self._get_course(session, course_id)
            instructor = self._get_instructor(session, instructor_id)

            changed = instructor not in course.instructors
            if changed:
                self._claim_version(
                    session, course, course.version if expected_version is None else expected_version
                )
                course.instructors.add(instructor)
                session.commit()
            return AssignmentChange(
                course=CourseRecord.from_model(course),
                instructor=InstructorRecord.from_model(instructor),
                changed=changed,
            )

    def unassign_instructor(
        self, course_id: int, instructor_id: int, expected_version: int | None = None
    ) -> AssignmentChange:
        """Remove an instructor from a course. Not assigned is a no-op.

        Raises:
            CourseNotFoundError: If course doesn't exist
            InstructorNotFoundError: If instructor doesn't exist
            VersionConflictError: If the course moved past expected_version
        """
        with self._session() as session:
            course = self._get_course(session, course_id)
            instructor = self._get_instructor(session, instructor_id)

            changed = instructor in course.instructors
            if changed:
                self._claim_version(
                    session, course, course.version if expected_version is None else expected_version
                )
                course.instructors.discard(instructor)
                session.commit()
            return AssignmentChange(
                course=CourseRecord.from_model(course),
                instructor=InstructorRecord.from_model(instructor),
                changed=changed,
            )

    # --- Student Operations ---

    def list_students(self, active_only: bool = False) -> list[StudentRecord]:
        """List students, ordered by enrollment number.

        Args:
            active_only: Only return students that have not been deactivated
        """
        with self._session() as session:
            stmt = select(Student)
            if active_only:
                stmt = stmt.where(Student.active.is_(True))
            stmt = stmt.order_by(Student.enrollment_number)
            return [StudentRecord.from_model(s) for s in session.execute(stmt).scalars()]

    def find_student(self, student_id: int) -> StudentRecord | None:
        """Get student by ID, or None if it doesn't exist."""
        with self._session() as session:
            student = session.get(Student, student_id)
            return StudentRecord.from_model(student) if student is not None else None

    def find_student_by_enrollment_number(self, enrollment_number: str) -> StudentRecord | None:
        """Get student by enrollment number, or None if it doesn't exist."""
        with self._session() as session:
            stmt = select(Student).where(Student.enrollment_number == enrollment_number)
            student = session.execute(stmt).scalar_one_or_none()
            return StudentRecord.from_model(student) if student is not None else None

    def create_student(self, **fields: Any) -> StudentRecord:
        """Create a new, active student.

        Raises:
            DuplicateCodeError: If the enrollment number is taken
        """
        with self._session() as session:
            student = Student(**fields)
            session.add(student)
            self._commit_unique(session, f"Enrollment number '{fields['enrollment_number']}'")
            return StudentRecord.from_model(student)

    def update_student(self, student_id: int, **fields: Any) -> StudentRecord:
        """Replace the personal fields of a student. Status is left untouched.

        Raises:
            StudentNotFoundError: If student doesn't exist
            DuplicateCodeError: If the enrollment number belongs to another student
        """
        with self._session() as session:
            student = self._get_student(session, student_id)
            for name, value in fields.items():
                setattr(student, name, value)
            self._commit_unique(session, f"Enrollment number '{fields.get('enrollment_number')}'")
            return StudentRecord.from_model(student)

    def deactivate_student(self, student_id: int, reason: str) -> StudentRecord:
        """Mark a student inactive with a reason. The row is kept.

        Raises:
            StudentNotFoundError: If student doesn't exist
        """
        with self._session() as session:
            student = self._get_student(session, student_id)
            student.active = False
            student.deactivation_reason = reason
            student.deactivated_at = datetime.now(UTC).replace(tzinfo=None)
            session.commit()
            return StudentRecord.from_model(student)

    def list_student_courses(self, student_id: int) -> list[CourseRecord]:
        """List the courses a student is enrolled in, ordered by code."""
        with self._session() as session:
            stmt = (
                select(Course)
                .join(Enrollment, Enrollment.course_id == Course.id)
                .where(Enrollment.student_id == student_id)
                .options(*_COURSE_EDGES)
                .order_by(Course.code)
            )
            return [CourseRecord.from_model(c) for c in session.execute(stmt).scalars()]

    # --- Enrollment Operations ---

    def list_enrollments(
        self,
        student_id: int | None = None,
        course_id: int | None = None,
    ) -> list[EnrollmentRecord]:
        """List enrollments with optional filters.

        Args:
            student_id: Filter by student (optional)
            course_id: Filter by course (optional)

        Returns:
            List of enrollments, ordered by ID
        """
        with self._session() as session:
            stmt = select(Enrollment)
            if student_id is not None:
                stmt = stmt.where(Enrollment.student_id == student_id)
            if course_id is not None:
                stmt = stmt.where(Enrollment.course_id == course_id)
            stmt = stmt.order_by(Enrollment.id)
            return [EnrollmentRecord.from_model(e) for e in session.execute(stmt).scalars()]

    def find_enrollment(self, enrollment_id: int) -> EnrollmentRecord | None:
        """Get enrollment by ID, or None if it doesn't exist."""
        with self._session() as session:
            enrollment = session.get(Enrollment, enrollment_id)
            return EnrollmentRecord.from_model(enrollment) if enrollment is not None else None

    def enrollment_exists(self, student_id: int, course_id: int) -> bool:
        """Check whether the student is already enrolled in the course."""
        with self._session() as session:
            return bool(session.execute(select(self._pair_exists(student_id, course_id))).scalar())

    def create_enrollment(
        self,
        student_id: int,
        course_id: int,
        enrollment_date: date,
        status: str,
        grade: float | None = None,
    ) -> EnrollmentRecord:
        """Enroll a student in a course.

        The existence check and the insert run in one transaction; the
        unique constraint on (student_id, course_id) catches concurrent inserts.

        Raises:
            StudentNotFoundError: If student doesn't exist
            CourseNotFoundError: If course doesn't exist
            DuplicateEnrollmentError: If the student is already enrolled in the course
        """
        with self._session() as session:
            self._get_student(session, student_id)
            self._get_course(session, course_id)
            if session.execute(select(self._pair_exists(student_id, course_id))).scalar():
                raise self._duplicate(student_id, course_id)

            enrollment = Enrollment(
                student_id=student_id,
                course_id=course_id,
                enrollment_date=enrollment_date,
                status=status,
                grade=grade,
            )
            session.add(enrollment)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if _is_unique_violation(e):
                    raise self._duplicate(student_id, course_id) from e
                raise
            return EnrollmentRecord.from_model(enrollment)

    def update_enrollment(
        self,
        enrollment_id: int,
        student_id: int,
        course_id: int,
        enrollment_date: date,
        status: str,
        grade: float | None = None,
    ) -> EnrollmentChange:
        """Replace every field of an enrollment.

        Raises:
            EnrollmentNotFoundError: If enrollment doesn't exist
            StudentNotFoundError: If student doesn't exist
            CourseNotFoundError: If course doesn't exist
            DuplicateEnrollmentError: If another enrollment already has the new pair
        """
        with self._session() as session:
            enrollment = session.get(Enrollment, enrollment_id)
            if enrollment is None:
                raise EnrollmentNotFoundError(f"Enrollment with id '{enrollment_id}' not found")
            self._get_student(session, student_id)
            self._get_course(session, course_id)

            previous = EnrollmentRecord.from_model(enrollment)
            if (student_id, course_id) != (previous.student_id, previous.course_id):
                taken = session.execute(
                    select(self._pair_exists(student_id, course_id))
                ).scalar()
                if taken:
                    raise self._duplicate(student_id, course_id)

            enrollment.student_id = student_id
            enrollment.course_id = course_id
            enrollment.enrollment_date = enrollment_date
            enrollment.status = status
            enrollment.grade = grade
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if _is_unique_violation(e):
                    raise self._duplicate(student_id, course_id) from e
                raise
            return EnrollmentChange(previous=previous, current=EnrollmentRecord.from_model(enrollment))

    def delete_enrollment(self, enrollment_id: int) -> EnrollmentRecord:
        """Delete an enrollment.

        Returns:
            The enrollment as it was just before deletion

        Raises:
            EnrollmentNotFoundError: If enrollment doesn't exist
        """
        with self._session() as session:
            enrollment = session.get(Enrollment, enrollment_id)
            if enrollment is None:
                raise EnrollmentNotFoundError(f"Enrollment with id '{enrollment_id}' not found")
            snapshot = EnrollmentRecord.from_model(enrollment)
            session.delete(enrollment)
            session.commit()
            return snapshot

    # --- Helpers ---

    @staticmethod
    def _get_course(session: Session, course_id: int | None) -> Course:
        course = session.get(Course, course_id) if course_id is not None else None
        if course is None:
            raise CourseNotFoundError(f"Course with id '{course_id}' not found")
        return course

    @staticmethod
    def _get_instructor(session: Session, instructor_id: int) -> Instructor:
        instructor = session.get(Instructor, instructor_id)
        if instructor is None:
            raise InstructorNotFoundError(f"Instructor with id '{instructor_id}' not found")
        return instructor

    @staticmethod
    def _get_student(session: Session, student_id: int) -> Student:
        student = session.get(Student, student_id)
        if student is None:
            raise StudentNotFoundError(f"Student with id '{student_id}' not found")
        return student

    @staticmethod
    def _pair_exists(student_id: int, course_id: int) -> Any:
        return exists().where(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
        )

    @staticmethod
    def _duplicate(student_id: int, course_id: int) -> DuplicateEnrollmentError:
        return DuplicateEnrollmentError(
            f"Student '{student_id}' is already enrolled in course '{course_id}'"
        )

    @staticmethod
    def _commit_unique(session: Session, label: str) -> None:
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            if _is_unique_violation(e):
                raise DuplicateCodeError(f"{label} already exists") from e
            raise

"""SQLAlchemy models and immutable records for the entity store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from enum import StrEnum
from typing import Any

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


class EnrollmentStatus(StrEnum):
    """Enrollment status enum."""

    ACTIVO = "activo"
    CURSANDO = "cursando"
    APROBADO = "aprobado"
    REPROBADO = "reprobado"


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


# Edge (course_id -> prerequisite_id): prerequisite_id must be completed before course_id
course_prerequisites = Table(
    "course_prerequisites",
    Base.metadata,
    Column("course_id", ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("prerequisite_id", ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
)

course_instructors = Table(
    "course_instructors",
    Base.metadata,
    Column("course_id", ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("instructor_id", ForeignKey("instructors.id", ondelete="CASCADE"), primary_key=True),
)


class Course(Base):
    """Course model - a node of the prerequisite graph."""

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    credits: Mapped[int] = mapped_column(Integer, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    prerequisites: Mapped[set[Course]] = relationship(
        "Course",
        secondary=course_prerequisites,
        primaryjoin=id == course_prerequisites.c.course_id,
        secondaryjoin=id == course_prerequisites.c.prerequisite_id,
        back_populates="dependents",
    )
    dependents: Mapped[set[Course]] = relationship(
        "Course",
        secondary=course_prerequisites,
        primaryjoin=id == course_prerequisites.c.prerequisite_id,
        secondaryjoin=id == course_prerequisites.c.course_id,
        back_populates="prerequisites",
    )
    instructors: Mapped[set[Instructor]] = relationship(
        "Instructor", secondary=course_instructors, back_populates="courses"
    )

    def __init__(
        self,
        code: str,
        name: str,
        credits: int,
        version: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.code = code
        self.name = name
        self.credits = credits
        self.version = version

    def __repr__(self) -> str:
        return f"<Course(id={self.id!r}, code={self.code!r}, version={self.version!r})>"


class Instructor(Base):
    """Instructor model - may be assigned to many courses."""

    __tablename__ = "instructors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    department: Mapped[str] = mapped_column(String(100), nullable=False)

    courses: Mapped[set[Course]] = relationship(
        "Course", secondary=course_instructors, back_populates="instructors"
    )

    def __repr__(self) -> str:
        return f"<Instructor(id={self.id!r}, employee_number={self.employee_number!r})>"


class Student(Base):
    """Student model - deactivated logically, never deleted."""

    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    enrollment_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False)
    deactivation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    deactivated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    def __init__(self, active: bool = True, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.active = active

    def __repr__(self) -> str:
        return (
            f"<Student(id={self.id!r}, enrollment_number={self.enrollment_number!r}, "
            f"active={self.active!r})>"
        )


class Enrollment(Base):
    """Enrollment model - links one student to one course."""

    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_enrollments_student_course"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(Integer, ForeignKey("students.id"), nullable=False)
    course_id: Mapped[int] = mapped_column(Integer, ForeignKey("courses.id"), nullable=False)
    enrollment_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    grade: Mapped[float | None] = mapped_column(Float, nullable=True)

    def __init__(
        self,
        student_id: int,
        course_id: int,
        enrollment_date: date,
        status: str | None = None,
        grade: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.student_id = student_id
        self.course_id = course_id
        self.enrollment_date = enrollment_date
        self.status = status if status is not None else EnrollmentStatus.ACTIVO.value
        self.grade = grade

    @property
    def enrollment_status(self) -> EnrollmentStatus:
        """Get status as EnrollmentStatus enum."""
        return EnrollmentStatus(self.status)

    def __repr__(self) -> str:
        return (
            f"<Enrollment(id={self.id!r}, student_id={self.student_id!r}, "
            f"course_id={self.course_id!r}, status={self.status!r})>"
        )


# Records handed out by the store. Immutable, so a cached record is always whole.


def _ids(items: set[Any]) -> tuple[int, ...]:
    return tuple(sorted(item.id for item in items))


@dataclass(frozen=True)
class CourseRecord:
    """Course with its three edge sets as sorted id tuples."""

    id: int
    code: str
    name: str
    credits: int
    version: int
    prerequisite_ids: tuple[int, ...] = ()
    dependent_ids: tuple[int, ...] = ()
    instructor_ids: tuple[int, ...] = ()

    @classmethod
    def from_model(cls, course: Course) -> CourseRecord:
        """Snapshot a Course. Must be called while its session is open."""
        return cls(
            id=course.id,
            code=course.code,
            name=course.name,
            credits=course.credits,
            version=course.version,
            prerequisite_ids=_ids(course.prerequisites),
            dependent_ids=_ids(course.dependents),
            instructor_ids=_ids(course.instructors),
        )


@dataclass(frozen=True)
class InstructorRecord:
    """Instructor with the ids of the courses it is assigned to."""

    id: int
    employee_number: str
    first_name: str
    last_name: str
    email: str
    birth_date: date | None
    department: str
    course_ids: tuple[int, ...] = ()

    @classmethod
    def from_model(cls, instructor: Instructor) -> InstructorRecord:
        """Snapshot an Instructor. Must be called while its session is open."""
        return cls(
            id=instructor.id,
            employee_number=instructor.employee_number,
            first_name=instructor.first_name,
            last_name=instructor.last_name,
            email=instructor.email,
            birth_date=instructor.birth_date,
            department=instructor.department,
            course_ids=_ids(instructor.courses),
        )


@dataclass(frozen=True)
class StudentRecord:
    """Student snapshot."""

    id: int
    enrollment_number: str
    first_name: str
    last_name: str
    email: str
    birth_date: date | None
    active: bool
    deactivation_reason: str | None = None
    deactivated_at: datetime | None = None

    @classmethod
    def from_model(cls, student: Student) -> StudentRecord:
        return cls(
            id=student.id,
            enrollment_number=student.enrollment_number,
            first_name=student.first_name,
            last_name=student.last_name,
            email=student.email,
            birth_date=student.birth_date,
            active=student.active,
            deactivation_reason=student.deactivation_reason,
            deactivated_at=student.deactivated_at,
        )


@dataclass(frozen=True)
class EnrollmentRecord:
    """Enrollment snapshot."""

    id: int
    student_id: int
    course_id: int
    enrollment_date: date
    status: str
    grade: float | None = None

    @classmethod
    def from_model(cls, enrollment: Enrollment) -> EnrollmentRecord:
        return cls(
            id=enrollment.id,
            student_id=enrollment.student_id,
            course_id=enrollment.course_id,
            enrollment_date=enrollment.enrollment_date,
            status=enrollment.status,
            grade=enrollment.grade,
        )


@dataclass(frozen=True)
class PrerequisiteChange:
    """Both endpoints of a prerequisite edge after an add or remove."""

    course: CourseRecord
    prerequisite: CourseRecord
    changed: bool


@dataclass(frozen=True)
class AssignmentChange:
    """Both endpoints of a course/instructor assignment after an assign or unassign."""

    course: CourseRecord
    instructor: InstructorRecord
    changed: bool


@dataclass(frozen=True)
class EnrollmentChange:
    """An enrollment before and after a full replace."""

    previous: EnrollmentRecord
    current: EnrollmentRecord


@dataclass(frozen=True)
class CourseDeletion:
    """A deleted course plus the neighbours whose edge views it changed."""

    course: CourseRecord
    prerequisites: tuple[CourseRecord, ...] = ()
    instructors: tuple[InstructorRecord, ...] = ()


@dataclass(frozen=True)
class InstructorDeletion:
    """A deleted instructor plus the courses it was unassigned from."""

    instructor: InstructorRecord
    courses: tuple[CourseRecord, ...] = ()

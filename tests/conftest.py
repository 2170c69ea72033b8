"""Shared pytest fixtures and configuration."""

import pytest

from catalogo.catalog import Catalog, CourseData, InstructorData, StudentData
from catalogo.config import Settings


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def catalog() -> Catalog:
    """Create a Catalog over an in-memory store."""
    c = Catalog(Settings(db_path=":memory:"))
    yield c
    c.close()


@pytest.fixture
def course_data():
    """Build CourseData with sensible defaults."""

    def _make(code: str, name: str | None = None, credits: int = 6) -> CourseData:
        return CourseData(code=code, name=name or f"Course {code}", credits=credits)

    return _make


@pytest.fixture
def instructor_data():
    """Build InstructorData with sensible defaults."""

    def _make(employee_number: str, last_name: str = "Perez") -> InstructorData:
        return InstructorData(
            employee_number=employee_number,
            first_name="Ana",
            last_name=last_name,
            email=f"{employee_number.lower()}@uni.edu",
            department="Matematicas",
        )

    return _make


@pytest.fixture
def student_data():
    """Build StudentData with sensible defaults."""

    def _make(enrollment_number: str, first_name: str = "Luis") -> StudentData:
        return StudentData(
            enrollment_number=enrollment_number,
            first_name=first_name,
            last_name="Gomez",
            email=f"{enrollment_number.lower()}@alumnos.uni.edu",
        )

    return _make

"""Unit tests for course routes."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from catalogo.api.app import register_exception_handlers
from catalogo.api.dependencies import get_catalog
from catalogo.api.routes import courses, instructors
from catalogo.catalog import Catalog


@pytest.fixture
def app(catalog: Catalog):
    """Create a test FastAPI app backed by an in-memory catalog."""
    app = FastAPI()

    def override_get_catalog():
        yield catalog

    app.dependency_overrides[get_catalog] = override_get_catalog
    register_exception_handlers(app)
    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(instructors.router, prefix="/api/v1")
    return app


@pytest.fixture
def client(app: FastAPI):
    """Create a test client."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


def _create(client: TestClient, code: str, credits: int = 6) -> dict:
    response = client.post(
        "/api/v1/courses", json={"code": code, "name": f"Course {code}", "credits": credits}
    )
    assert response.status_code == 201
    return response.json()["data"]


@pytest.mark.unit
class TestCourseCrud:
    """Tests for /courses CRUD."""

    def test_list_courses_empty(self, client: TestClient) -> None:
        response = client.get("/api/v1/courses")

        assert response.status_code == 200
        assert response.json() == {"data": [], "error": None}

    def test_create_course(self, client: TestClient) -> None:
        data = _create(client, "MAT-101")

        assert data["code"] == "MAT-101"
        assert data["version"] == 0
        assert data["prerequisite_ids"] == []

    def test_create_course_invalid_returns_422(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/courses", json={"code": "MAT-101", "name": "X", "credits": 0}
        )

        assert response.status_code == 422

    def test_create_duplicate_code_returns_409(self, client: TestClient) -> None:
        _create(client, "MAT-101")

        response = client.post(
            "/api/v1/courses", json={"code": "MAT-101", "name": "Otra", "credits": 4}
        )

        assert response.status_code == 409
        assert "MAT-101" in response.json()["error"]

    def test_get_course(self, client: TestClient) -> None:
        created = _create(client, "MAT-101")

        response = client.get(f"/api/v1/courses/{created['id']}")

        assert response.status_code == 200
        assert response.json()["data"] == created

    def test_get_course_not_found(self, client: TestClient) -> None:
        response = client.get("/api/v1/courses/999")

        assert response.status_code == 404
        assert response.json()["data"] is None
        assert "999" in response.json()["error"]

    def test_get_course_by_code(self, client: TestClient) -> None:
        created = _create(client, "MAT-101")

        response = client.get("/api/v1/courses/code/MAT-101")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == created["id"]
        assert client.get("/api/v1/courses/code/NOPE").status_code == 404

    def test_update_course(self, client: TestClient) -> None:
        created = _create(client, "MAT-101")

        response = client.put(
            f"/api/v1/courses/{created['id']}",
            json={"code": "MAT-101", "name": "Calculo", "credits": 8, "version": 0},
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Calculo"
        assert response.json()["data"]["version"] == 1

    def test_update_stale_version_returns_409(self, client: TestClient) -> None:
        created = _create(client, "MAT-101")
        body = {"code": "MAT-101", "name": "Calculo", "credits": 8, "version": 0}
        client.put(f"/api/v1/courses/{created['id']}", json=body)

        response = client.put(f"/api/v1/courses/{created['id']}", json=body)

        assert response.status_code == 409

    def test_update_missing_returns_404(self, client: TestClient) -> None:
        response = client.put(
            "/api/v1/courses/999", json={"code": "MAT-101", "name": "X", "credits": 1}
        )

        assert response.status_code == 404

    def test_delete_course(self, client: TestClient) -> None:
        created = _create(client, "MAT-101")

        response = client.delete(f"/api/v1/courses/{created['id']}")

        assert response.status_code == 204
        assert client.get(f"/api/v1/courses/{created['id']}").status_code == 404


@pytest.mark.unit
class TestPrerequisiteRoutes:
    """Tests for prerequisite and cycle-check routes."""

    def test_add_and_remove_prerequisite(self, client: TestClient) -> None:
        base = _create(client, "MAT-101")
        advanced = _create(client, "MAT-201")

        added = client.post(f"/api/v1/courses/{advanced['id']}/prerequisites/{base['id']}")
        removed = client.delete(f"/api/v1/courses/{advanced['id']}/prerequisites/{base['id']}")

        assert added.status_code == 200
        assert added.json()["data"]["prerequisite_ids"] == [base["id"]]
        assert removed.status_code == 200
        assert removed.json()["data"]["prerequisite_ids"] == []

    def test_cycle_returns_400(self, client: TestClient) -> None:
        base = _create(client, "MAT-101")
        advanced = _create(client, "MAT-201")
        client.post(f"/api/v1/courses/{advanced['id']}/prerequisites/{base['id']}")

        response = client.post(f"/api/v1/courses/{base['id']}/prerequisites/{advanced['id']}")

        assert response.status_code == 400
        assert "cycle" in response.json()["error"]

    def test_cycle_check(self, client: TestClient) -> None:
        base = _create(client, "MAT-101")
        advanced = _create(client, "MAT-201")
        client.post(f"/api/v1/courses/{advanced['id']}/prerequisites/{base['id']}")

        response = client.get(f"/api/v1/courses/{base['id']}/cycle-check/{advanced['id']}")

        assert response.status_code == 200
        assert response.json()["data"] == {
            "course_id": base["id"],
            "prerequisite_id": advanced["id"],
            "would_form_cycle": True,
        }

    def test_cycle_check_unknown_course_returns_404(self, client: TestClient) -> None:
        base = _create(client, "MAT-101")

        response = client.get(f"/api/v1/courses/{base['id']}/cycle-check/999")

        assert response.status_code == 404

    def test_delete_course_in_use_returns_409(self, client: TestClient) -> None:
        base = _create(client, "MAT-101")
        advanced = _create(client, "MAT-201")
        client.post(f"/api/v1/courses/{advanced['id']}/prerequisites/{base['id']}")

        response = client.delete(f"/api/v1/courses/{base['id']}")

        assert response.status_code == 409

    def test_study_order(self, client: TestClient) -> None:
        advanced = _create(client, "MAT-201")
        base = _create(client, "MAT-101")
        client.post(f"/api/v1/courses/{advanced['id']}/prerequisites/{base['id']}")

        response = client.get("/api/v1/courses/order")

        assert response.status_code == 200
        assert [c["code"] for c in response.json()["data"]] == ["MAT-101", "MAT-201"]


@pytest.mark.unit
class TestInstructorAssignmentRoutes:
    """Tests for assigning instructors through course routes."""

    def _instructor(self, client: TestClient) -> dict:
        response = client.post(
            "/api/v1/instructors",
            json={
                "employee_number": "D1",
                "first_name": "Ana",
                "last_name": "Perez",
                "email": "d1@uni.edu",
                "department": "Matematicas",
            },
        )
        assert response.status_code == 201
        return response.json()["data"]

    def test_assign_twice(self, client: TestClient) -> None:
        course = _create(client, "MAT-101")
        instructor = self._instructor(client)
        url = f"/api/v1/courses/{course['id']}/instructors/{instructor['id']}"

        client.post(url)
        response = client.post(url)

        assert response.status_code == 200
        assert response.json()["data"]["instructor_ids"] == [instructor["id"]]
        fetched = client.get(f"/api/v1/instructors/{instructor['id']}").json()["data"]
        assert fetched["course_ids"] == [course["id"]]

    def test_unassign(self, client: TestClient) -> None:
        course = _create(client, "MAT-101")
        instructor = self._instructor(client)
        url = f"/api/v1/courses/{course['id']}/instructors/{instructor['id']}"
        client.post(url)

        response = client.delete(url)

        assert response.status_code == 200
        assert response.json()["data"]["instructor_ids"] == []

    def test_assign_unknown_instructor_returns_404(self, client: TestClient) -> None:
        course = _create(client, "MAT-101")

        response = client.post(f"/api/v1/courses/{course['id']}/instructors/999")

        assert response.status_code == 404

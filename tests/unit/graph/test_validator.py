"""Unit tests for cycle detection and study ordering."""

import pytest

from catalogo.graph import (
    GraphValidator,
    InvalidGraphOperationError,
    creates_cycle,
    topological_order,
)
from catalogo.store import CatalogStore, CourseNotFoundError


@pytest.mark.unit
class TestCreatesCycle:
    """Tests for creates_cycle on plain adjacency maps."""

    def test_self_reference_is_a_cycle(self) -> None:
        assert creates_cycle({1: set()}, 1, 1) is True

    def test_direct_back_edge(self) -> None:
        """2 requires 1, so 1 requiring 2 closes a cycle."""
        graph = {1: set(), 2: {1}}

        assert creates_cycle(graph, 1, 2) is True

    def test_transitive_back_edge(self) -> None:
        graph = {1: set(), 2: {1}, 3: {2}, 4: {3}}

        assert creates_cycle(graph, 1, 4) is True

    def test_forward_edge_is_fine(self) -> None:
        graph = {1: set(), 2: {1}, 3: {2}}

        assert creates_cycle(graph, 3, 1) is False

    def test_unrelated_courses(self) -> None:
        graph = {1: set(), 2: set(), 3: {1}}

        assert creates_cycle(graph, 2, 3) is False

    def test_diamond_without_cycle(self) -> None:
        """Shared ancestors are visited once and do not count as cycles."""
        graph = {1: set(), 2: {1}, 3: {1}, 4: {2, 3}, 5: set()}

        assert creates_cycle(graph, 5, 4) is False

    def test_existing_cycle_elsewhere_terminates(self) -> None:
        """A cycle not involving the course does not make the walk loop forever."""
        graph = {1: {2}, 2: {1}, 3: set()}

        assert creates_cycle(graph, 3, 1) is False

    def test_long_chain(self) -> None:
        graph = {i: {i - 1} for i in range(1, 2000)}
        graph[0] = set()

        assert creates_cycle(graph, 0, 1999) is True

    @pytest.mark.parametrize(("course_id", "candidate_id"), [(None, 1), (9, 1), (1, None), (1, 9)])
    def test_unknown_ids_raise(self, course_id: int | None, candidate_id: int | None) -> None:
        with pytest.raises(CourseNotFoundError):
            creates_cycle({1: set()}, course_id, candidate_id)


@pytest.mark.unit
class TestTopologicalOrder:
    """Tests for topological_order."""

    def test_prerequisites_come_first(self) -> None:
        graph = {1: set(), 2: {1}, 3: {1, 2}, 4: set()}

        order = topological_order(graph)

        assert order.index(1) < order.index(2) < order.index(3)
        assert sorted(order) == [1, 2, 3, 4]

    def test_ties_broken_by_id(self) -> None:
        assert topological_order({3: set(), 1: set(), 2: set()}) == [1, 2, 3]

    def test_empty_graph(self) -> None:
        assert topological_order({}) == []

    def test_cycle_raises(self) -> None:
        with pytest.raises(InvalidGraphOperationError):
            topological_order({1: {2}, 2: {1}})


@pytest.mark.unit
class TestGraphValidator:
    """Tests for GraphValidator against a live store."""

    @pytest.fixture
    def store(self) -> CatalogStore:
        s = CatalogStore(":memory:")
        yield s
        s.close()

    def test_reads_current_edges(self, store: CatalogStore) -> None:
        validator = GraphValidator(store)
        mat101 = store.create_course(code="MAT-101", name="Calculo I", credits=6)
        mat201 = store.create_course(code="MAT-201", name="Calculo II", credits=6)

        assert validator.would_create_cycle(mat101.id, mat201.id) is False

        store.add_prerequisite(mat201.id, mat101.id)

        assert validator.would_create_cycle(mat101.id, mat201.id) is True
        assert validator.topological_order() == [mat101.id, mat201.id]

    def test_unknown_course_raises(self, store: CatalogStore) -> None:
        validator = GraphValidator(store)
        course = store.create_course(code="MAT-101", name="Calculo I", credits=6)

        with pytest.raises(CourseNotFoundError):
            validator.would_create_cycle(course.id, 999)

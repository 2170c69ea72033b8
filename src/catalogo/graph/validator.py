"""GraphValidator - Cycle detection and ordering over the prerequisite graph."""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping, Set
from typing import TYPE_CHECKING

from catalogo.graph.exceptions import InvalidGraphOperationError
from catalogo.store import CourseNotFoundError

if TYPE_CHECKING:
    from catalogo.store import CatalogStore

# course id -> ids of its direct prerequisites
PrerequisiteGraph = Mapping[int, Set[int]]


def creates_cycle(
    graph: PrerequisiteGraph, course_id: int | None, candidate_id: int | None
) -> bool:
    """Check whether the edge course_id -> candidate_id would close a cycle.

    Walks depth-first from the candidate along prerequisite edges. Reaching
    course_id means the course would (transitively) depend on itself. Each
    node is visited at most once.

    Args:
        graph: Every course id mapped to its direct prerequisite ids.
        course_id: Course that would gain the prerequisite.
        candidate_id: Course proposed as the new prerequisite.

    Returns:
        True if the edge would create a cycle.

    Raises:
        CourseNotFoundError: If either id is unset or not in the graph.
    """
    if course_id is None or course_id not in graph:
        raise CourseNotFoundError(f"Course with id '{course_id}' not found")
    if course_id == candidate_id:
        return True
    if candidate_id is None or candidate_id not in graph:
        raise CourseNotFoundError(f"Course with id '{candidate_id}' not found")

    visited: set[int] = set()
    stack = [candidate_id]
    while stack:
        node = stack.pop()
        if node == course_id:
            return True
        if node in visited:
            continue
        visited.add(node)
        stack.extend(p for p in graph.get(node, ()) if p not in visited)
    return False


def topological_order(graph: PrerequisiteGraph) -> list[int]:
    """Order courses so every prerequisite comes before its dependents.

    Ties are broken by ascending id so the order is stable.

    Raises:
        InvalidGraphOperationError: If the graph contains a cycle.
    """
    indegree: dict[int, int] = {}
    dependents: dict[int, list[int]] = {}
    for course_id, prerequisites in graph.items():
        indegree[course_id] = indegree.get(course_id, 0) + len(prerequisites)
        for prerequisite_id in prerequisites:
            indegree.setdefault(prerequisite_id, 0)
            dependents.setdefault(prerequisite_id, []).append(course_id)

    queue = deque(sorted(n for n, d in indegree.items() if d == 0))
    order: list[int] = []

    while queue:
        node = queue.popleft()
        order.append(node)
        for nxt in sorted(dependents.get(node, ())):
            indegree[nxt] -= 1
            if indegree[nxt] == 0:
                queue.append(nxt)

    if len(order) != len(indegree):
        stuck = min(n for n, d in indegree.items() if d > 0)
        raise InvalidGraphOperationError(
            stuck, stuck, f"Cycle detected in prerequisites involving course '{stuck}'"
        )

    return order


class GraphValidator:
    """Read-only queries over the prerequisite graph as currently stored.

    Always reads a fresh snapshot from the store, never the cache.
    """

    def __init__(self, store: CatalogStore) -> None:
        """Initialize the validator.

        Args:
            store: CatalogStore to load the edge table from.
        """
        self.store = store

    def would_create_cycle(self, course_id: int | None, candidate_prerequisite_id: int | None) -> bool:
        """Check whether making the candidate a prerequisite of the course would form a cycle.

        Raises:
            CourseNotFoundError: If either id does not resolve to a course.
        """
        return creates_cycle(self.store.prerequisite_map(), course_id, candidate_prerequisite_id)

    def topological_order(self) -> list[int]:
        """Course ids ordered so prerequisites come first."""
        return topological_order(self.store.prerequisite_map())

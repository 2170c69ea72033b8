"""Exceptions for the prerequisite graph."""


class GraphError(Exception):
    """Base exception for prerequisite graph errors."""


class InvalidGraphOperationError(GraphError):
    """The requested prerequisite edge would create a cycle."""

    def __init__(self, course_id: int, prerequisite_id: int, message: str | None = None) -> None:
        self.course_id = course_id
        self.prerequisite_id = prerequisite_id
        super().__init__(
            message
            or f"Adding course '{prerequisite_id}' as prerequisite of course '{course_id}' "
            "would create a cycle"
        )

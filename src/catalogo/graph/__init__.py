"""Graph - Prerequisite graph validation and relationship maintenance."""

from catalogo.graph.exceptions import GraphError, InvalidGraphOperationError
from catalogo.graph.relationships import RelationshipManager
from catalogo.graph.validator import GraphValidator, creates_cycle, topological_order

__all__ = [
    "GraphError",
    "GraphValidator",
    "InvalidGraphOperationError",
    "RelationshipManager",
    "creates_cycle",
    "topological_order",
]

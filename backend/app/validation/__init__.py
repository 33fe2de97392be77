"""
Validation module for graph query results.
"""

from app.validation.graph_validator import (
    GraphValidationResult,
    GraphValidator,
    ValidationIssue,
    ValidationSeverity,
    validate_graph,
)

__all__ = [
    "GraphValidationResult",
    "GraphValidator",
    "ValidationIssue",
    "ValidationSeverity",
    "validate_graph",
]

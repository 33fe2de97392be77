"""
Relationship classification: entity type resolution plus the ordered
relationship whitelist.
"""

from app.classification.resolver import (
    EntityTypeResolver,
    PREFIX_TYPES,
    resolve_entity_type,
)
from app.classification.rules import (
    RELATIONSHIP_RULES,
    RelationshipRule,
    first_matching_rule,
    infer_mode,
    infer_rw,
    is_allowed_pair,
)
from app.classification.classifier import (
    ClassificationReport,
    RejectedRelationship,
    RelationshipClassifier,
)

__all__ = [
    "EntityTypeResolver",
    "PREFIX_TYPES",
    "resolve_entity_type",
    "RELATIONSHIP_RULES",
    "RelationshipRule",
    "first_matching_rule",
    "infer_mode",
    "infer_rw",
    "is_allowed_pair",
    "ClassificationReport",
    "RejectedRelationship",
    "RelationshipClassifier",
]

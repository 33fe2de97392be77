"""
Relationship classification.

Turns loosely-typed ``{from, to, type, description}`` tuples into
canonical, directional relationships. Closed world: a tuple no rule
accepts is rejected, never defaulted to a generic type.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from app.classification.resolver import EntityTypeResolver
from app.classification.rules import (
    RELATIONSHIP_RULES,
    RelationshipRule,
    first_matching_rule,
    infer_mode,
    infer_rw,
    is_allowed_pair,
)
from app.ir.entity_ir import EntityType
from app.ir.errors import Rejection
from app.ir.relationship_ir import (
    ClassifiedRelationship,
    RawRelationship,
    RelationshipProperties,
)
from app.ir.validation import ClassificationResult

logger = logging.getLogger(__name__)

REJECT_UNKNOWN_ENTITY = "unknown_entity"
REJECT_PAIR_NOT_ALLOWED = "pair_not_allowed"
REJECT_NO_KEYWORD = "no_keyword_match"


@dataclass
class RejectedRelationship:
    relationship: RawRelationship
    rejection: Rejection

    def to_dict(self) -> dict:
        return {
            "from": self.relationship.from_id,
            "to": self.relationship.to_id,
            "type": self.relationship.type,
            "reason": self.rejection.reason,
            "message": self.rejection.message,
        }


@dataclass
class ClassificationReport:
    classified: List[ClassifiedRelationship] = field(default_factory=list)
    rejected: List[RejectedRelationship] = field(default_factory=list)

    @property
    def stats(self) -> Dict[str, object]:
        by_type: Dict[str, int] = {}
        for rel in self.classified:
            by_type[rel.canonical_type.value] = by_type.get(rel.canonical_type.value, 0) + 1
        by_reason: Dict[str, int] = {}
        for rej in self.rejected:
            by_reason[rej.rejection.reason] = by_reason.get(rej.rejection.reason, 0) + 1
        return {
            "total": len(self.classified) + len(self.rejected),
            "classified": len(self.classified),
            "rejected": len(self.rejected),
            "by_type": by_type,
            "by_reason": by_reason,
        }

    def to_dict(self) -> dict:
        return {
            "classified": [r.to_dict() for r in self.classified],
            "rejected": [r.to_dict() for r in self.rejected],
            "stats": self.stats,
        }


class RelationshipClassifier:
    """
    Usage:
        classifier = RelationshipClassifier()
        result = classifier.classify(raw, EntityType.APPLICATION, EntityType.API)
        if result.is_classified:
            store.upsert_relationship(result.relationship)
    """

    def __init__(
        self,
        resolver: Optional[EntityTypeResolver] = None,
        rules: Tuple[RelationshipRule, ...] = RELATIONSHIP_RULES,
    ):
        self.resolver = resolver or EntityTypeResolver()
        self.rules = rules

    def classify(
        self,
        rel: RawRelationship,
        from_type: EntityType,
        to_type: EntityType,
    ) -> ClassificationResult:
        """Pure and deterministic; never raises for an unknown pattern."""
        hint = (rel.type or "").lower()

        if EntityType.UNKNOWN in (from_type, to_type):
            return ClassificationResult.rejected(Rejection(
                reason=REJECT_UNKNOWN_ENTITY,
                message=f"unresolved entity type ({from_type.value} -> {to_type.value})",
                object_id=f"{rel.from_id}->{rel.to_id}",
            ))

        rule = first_matching_rule(from_type, to_type, hint, self.rules)
        if rule is None:
            reason = (
                REJECT_NO_KEYWORD
                if is_allowed_pair(from_type, to_type, self.rules)
                else REJECT_PAIR_NOT_ALLOWED
            )
            return ClassificationResult.rejected(Rejection(
                reason=reason,
                message=f"{from_type.value} -> {to_type.value} with hint '{rel.type}' is not allowed",
                object_id=f"{rel.from_id}->{rel.to_id}",
            ))

        properties = RelationshipProperties(
            description=rel.description or "",
            mode=infer_mode(hint) if rule.with_mode else None,
            rw=infer_rw(hint) if rule.with_rw else None,
        )
        return ClassificationResult.success(ClassifiedRelationship(
            from_id=rel.from_id,
            to_id=rel.to_id,
            canonical_type=rule.relation_type,
            properties=properties,
        ))

    def classify_raw(self, rel: RawRelationship) -> ClassificationResult:
        """Classify with endpoint types taken from the resolver."""
        return self.classify(
            rel,
            self.resolver.resolve(rel.from_id),
            self.resolver.resolve(rel.to_id),
        )

    def classify_all(self, relationships: Iterable[RawRelationship]) -> ClassificationReport:
        """Classify in input order; rejections are logged and counted."""
        report = ClassificationReport()

        for rel in relationships:
            result = self.classify_raw(rel)
            if result.is_classified:
                report.classified.append(result.relationship)
                logger.debug(
                    "[Classifier] %s -[%s]-> %s",
                    rel.from_id, result.relationship.canonical_type.value, rel.to_id,
                )
            else:
                report.rejected.append(RejectedRelationship(rel, result.rejection))
                logger.warning(
                    "[Classifier] Rejected %s -[%s]-> %s: %s",
                    rel.from_id, rel.type, rel.to_id, result.rejection.reason,
                )

        stats = report.stats
        logger.info(
            "[Classifier] %d relationships: %d classified, %d rejected",
            stats["total"], stats["classified"], stats["rejected"],
        )
        return report

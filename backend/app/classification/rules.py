"""
Relationship whitelist: ordered (source, target, keyword) rules.

Rules are evaluated top to bottom and the FIRST match wins. Order is
significant because keyword predicates overlap; the Component→Component
CONTAINS rule must stay ahead of its unconditional RELATES fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from app.ir.entity_ir import EntityType
from app.ir.relationship_ir import Mode, ReadWrite, RelationType


# ------------------------------------------------------------------ #
# Property inference
# ------------------------------------------------------------------ #

_PUSH_KEYWORDS = ("push", "send", "publish")
_PULL_KEYWORDS = ("pull", "fetch", "subscribe")


def _mentions(hint: str, keywords: Tuple[str, ...]) -> bool:
    return any(kw in hint for kw in keywords)


def infer_mode(hint: str) -> Mode:
    """pushes / pulls from the hint; call-type relations default to pulls."""
    text = (hint or "").lower()
    if _mentions(text, _PUSH_KEYWORDS):
        return Mode.PUSHES
    if _mentions(text, _PULL_KEYWORDS):
        return Mode.PULLS
    return Mode.PULLS


def infer_rw(hint: str) -> ReadWrite:
    text = (hint or "").lower()
    reads = "read" in text
    writes = "write" in text
    if reads and not writes:
        return ReadWrite.READS
    if writes and not reads:
        return ReadWrite.WRITES
    return ReadWrite.READ_N_WRITES


# ------------------------------------------------------------------ #
# Rule table
# ------------------------------------------------------------------ #

@dataclass(frozen=True)
class RelationshipRule:
    name: str
    source_types: FrozenSet[EntityType]
    target_types: FrozenSet[EntityType]
    relation_type: RelationType
    keywords: Optional[Tuple[str, ...]] = None  # None = unconditional
    with_mode: bool = False
    with_rw: bool = False

    def covers(self, source: EntityType, target: EntityType) -> bool:
        return source in self.source_types and target in self.target_types

    def matches(self, source: EntityType, target: EntityType, hint: str) -> bool:
        """*hint* must already be lower-cased."""
        if not self.covers(source, target):
            return False
        if self.keywords is None:
            return True
        return _mentions(hint, self.keywords)


def _types(*types: EntityType) -> FrozenSet[EntityType]:
    return frozenset(types)


_APP = _types(EntityType.APPLICATION)
_API = _types(EntityType.API)
_BF = _types(EntityType.BUSINESS_FUNCTION)
_COMP = _types(EntityType.COMPONENT)
_DATA = _types(EntityType.DATA_OBJECT)
_SRV = _types(EntityType.SERVER)

_CALL_KEYWORDS = ("call", "use", "consume")


RELATIONSHIP_RULES: Tuple[RelationshipRule, ...] = (
    RelationshipRule(
        "application-relates-application", _APP, _APP, RelationType.RELATES,
        keywords=("integrate", "connect", "link"),
    ),
    RelationshipRule(
        "application-calls-api", _APP, _API, RelationType.CALLS,
        keywords=_CALL_KEYWORDS, with_mode=True, with_rw=True,
    ),
    RelationshipRule(
        "application-owns-business-function", _APP, _BF, RelationType.OWNS,
        keywords=("own", "support", "provide"),
    ),
    RelationshipRule(
        "application-owns-component", _APP, _COMP, RelationType.OWNS,
        keywords=("own", "contain", "include"),
    ),
    RelationshipRule(
        "api-exposes-component", _API, _COMP, RelationType.EXPOSES,
        keywords=("expose", "provide", "serve"),
    ),
    RelationshipRule(
        "api-works-on-data", _API, _DATA, RelationType.WORKS_ON,
        keywords=("work", "operate", "manipulate", "use", "read", "write"),
        with_rw=True,
    ),
    RelationshipRule(
        "component-calls-api", _COMP, _API, RelationType.CALLS,
        keywords=_CALL_KEYWORDS, with_mode=True, with_rw=True,
    ),
    RelationshipRule(
        "component-implements-business-function", _COMP, _BF, RelationType.IMPLEMENTS,
        keywords=("implement", "realize", "execute"),
    ),
    RelationshipRule(
        "business-function-includes-api", _BF, _API, RelationType.INCLUDES,
        keywords=("include", "use", "leverage"),
    ),
    RelationshipRule(
        "app-change-changes",
        _types(EntityType.APP_CHANGE),
        _types(EntityType.COMPONENT, EntityType.BUSINESS_FUNCTION, EntityType.DATA_OBJECT),
        RelationType.CHANGES,
    ),
    RelationshipRule(
        "table-materializes-data", _types(EntityType.TABLE), _DATA, RelationType.MATERIALIZES,
        keywords=("materialize", "store", "persist"),
    ),
    RelationshipRule(
        "component-installed-on-server", _COMP, _SRV, RelationType.INSTALLED_ON,
        keywords=("install", "deploy", "host", "run"),
    ),
    RelationshipRule(
        "infra-change-changes-server", _types(EntityType.INFRA_CHANGE), _SRV, RelationType.CHANGES,
    ),
    RelationshipRule(
        "component-contains-component", _COMP, _COMP, RelationType.CONTAINS,
        keywords=("contain", "include"),
    ),
    RelationshipRule(
        "component-relates-component", _COMP, _COMP, RelationType.RELATES,
    ),
    RelationshipRule(
        "works-on-data",
        _types(EntityType.COMPONENT, EntityType.BUSINESS_FUNCTION),
        _DATA,
        RelationType.WORKS_ON,
        keywords=("use", "read", "write", "modify", "inquire", "access", "work"),
        with_rw=True,
    ),
    RelationshipRule(
        "business-function-relates-business-function", _BF, _BF, RelationType.RELATES,
        with_mode=True,
    ),
)


def first_matching_rule(
    source: EntityType,
    target: EntityType,
    hint: str,
    rules: Tuple[RelationshipRule, ...] = RELATIONSHIP_RULES,
) -> Optional[RelationshipRule]:
    text = (hint or "").lower()
    for rule in rules:
        if rule.matches(source, target, text):
            return rule
    return None


def is_allowed_pair(
    source: EntityType,
    target: EntityType,
    rules: Tuple[RelationshipRule, ...] = RELATIONSHIP_RULES,
) -> bool:
    """True when some rule covers the pair, regardless of keywords."""
    return any(rule.covers(source, target) for rule in rules)

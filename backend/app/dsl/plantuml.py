"""
C4 PlantUML reader.

Pulls ``Rel(...)`` statements and ``System / Container / Component``
definitions out of context diagrams (optionally embedded in markdown) and
turns relationships into RawRelationship records for the classifier.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from app.ir.relationship_ir import RawRelationship

BLOCK_RE = re.compile(r"@startuml(.*?)@enduml", re.DOTALL)

REL_RE = re.compile(
    r'Rel(?:_[UDLR])?\s*\(\s*([^,\s]+)\s*,\s*([^,\s]+)\s*,\s*"([^"]+)"(?:\s*,\s*"([^"]+)")?\s*\)'
)

SYSTEM_RE = re.compile(
    r'(System(?:_Ext)?(?:_Boundary)?)\s*\(\s*([^,\s]+)\s*,\s*"([^"]+)"(?:\s*,\s*"([^"]+)")?\s*\)'
)

CONTAINER_RE = re.compile(
    r'(ContainerDb|Container|Component)\s*\(\s*([^,\s]+)\s*,\s*"([^"]+)"'
    r'(?:\s*,\s*"([^"]+)")?(?:\s*,\s*"([^"]+)")?\s*\)'
)

# Description -> classifier hint. Ordered, first match wins.
DESCRIPTION_HINTS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"call|invoke|request|api|rest|rpc", re.I), "call"),
    (re.compile(r"expose|serve|provide", re.I), "expose"),
    (re.compile(r"read and write|read & write|update data|modify data", re.I), "read and write"),
    (re.compile(r"write|send|publish|push|post|emit|insert|create", re.I), "use write push"),
    (re.compile(r"read|fetch|retrieve|get|pull|query|select", re.I), "use read pull"),
    (re.compile(r"subscribe|listen|watch", re.I), "subscribe"),
    (re.compile(r"contain|include|has", re.I), "contain"),
    (re.compile(r"implement|realize|execute", re.I), "implement"),
]

DEFAULT_HINT = "relates"


@dataclass
class DiagramElement:
    alias: str
    kind: str           # System, System_Ext, Container, ContainerDb, Component, ...
    label: str
    technology: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "alias": self.alias,
            "kind": self.kind,
            "label": self.label,
            "technology": self.technology,
            "description": self.description,
        }


@dataclass
class ParsedDiagram:
    elements: List[DiagramElement] = field(default_factory=list)
    relationships: List[RawRelationship] = field(default_factory=list)


def infer_hint(description: str) -> str:
    """Free-text type hint for a relationship description."""
    text = description or ""
    for pattern, hint in DESCRIPTION_HINTS:
        if pattern.search(text):
            return hint
    return DEFAULT_HINT


def extract_plantuml_blocks(text: str) -> List[str]:
    """Bodies of every ``@startuml ... @enduml`` block, in order.

    Text without any block markers is treated as a single bare block.
    """
    blocks = [b.strip() for b in BLOCK_RE.findall(text or "")]
    if blocks:
        return blocks
    stripped = (text or "").strip()
    return [stripped] if stripped else []


def parse_relationships(plantuml: str) -> List[RawRelationship]:
    relationships = []
    for match in REL_RE.finditer(plantuml or ""):
        source, target, description, technology = match.groups()
        relationships.append(RawRelationship(
            from_id=source,
            to_id=target,
            type=infer_hint(description),
            description=f"{description} ({technology})" if technology else description,
        ))
    return relationships


def parse_elements(plantuml: str) -> List[DiagramElement]:
    text = plantuml or ""
    elements: Dict[str, DiagramElement] = {}

    for match in SYSTEM_RE.finditer(text):
        kind, alias, label, description = match.groups()
        elements.setdefault(alias, DiagramElement(alias, kind, label, description=description))

    for match in CONTAINER_RE.finditer(text):
        kind, alias, label, technology, description = match.groups()
        elements.setdefault(alias, DiagramElement(alias, kind, label, technology, description))

    return list(elements.values())


def parse_diagram(text: str) -> ParsedDiagram:
    """Parse every PlantUML block in *text* (markdown or bare source)."""
    parsed = ParsedDiagram()
    for block in extract_plantuml_blocks(text):
        parsed.elements.extend(parse_elements(block))
        parsed.relationships.extend(parse_relationships(block))
    return parsed

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class RelationType(str, Enum):
    RELATES = "RELATES"
    CALLS = "CALLS"
    OWNS = "OWNS"
    EXPOSES = "EXPOSES"
    WORKS_ON = "WORKS_ON"
    IMPLEMENTS = "IMPLEMENTS"
    INCLUDES = "INCLUDES"
    CHANGES = "CHANGES"
    MATERIALIZES = "MATERIALIZES"
    INSTALLED_ON = "INSTALLED_ON"
    CONTAINS = "CONTAINS"


class Mode(str, Enum):
    PUSHES = "pushes"
    PULLS = "pulls"
    BIDIRECTIONAL = "bidirectional"


class ReadWrite(str, Enum):
    READS = "reads"
    WRITES = "writes"
    READ_N_WRITES = "read-n-writes"


@dataclass
class RawRelationship:
    """Uninterpreted relationship as delivered by a scraper or diagram.

    ``type`` is a free-text hint, never a canonical type.
    """
    from_id: str
    to_id: str
    type: str = ""
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawRelationship":
        return cls(
            from_id=str(data.get("from", data.get("from_id", ""))),
            to_id=str(data.get("to", data.get("to_id", ""))),
            type=data.get("type") or "",
            description=data.get("description"),
        )


@dataclass
class RelationshipProperties:
    description: str = ""
    mode: Optional[Mode] = None
    rw: Optional[ReadWrite] = None

    def to_dict(self) -> Dict[str, str]:
        props = {"description": self.description}
        if self.mode is not None:
            props["mode"] = self.mode.value
        if self.rw is not None:
            props["rw"] = self.rw.value
        return props


@dataclass
class ClassifiedRelationship:
    from_id: str
    to_id: str
    canonical_type: RelationType
    properties: RelationshipProperties = field(default_factory=RelationshipProperties)

    @property
    def key(self) -> Tuple[str, str, str]:
        """Idempotent merge key used by the relationship store."""
        return (self.from_id, self.to_id, self.canonical_type.value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.from_id,
            "to": self.to_id,
            "canonical_type": self.canonical_type.value,
            "properties": self.properties.to_dict(),
        }

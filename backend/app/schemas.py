from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, List, Union

from app.ir.entity_ir import Entity, EntityType
from app.ir.graph_ir import GraphEdge, GraphNode
from app.ir.relationship_ir import RawRelationship


class RawRelationshipIn(BaseModel):
    """Uninterpreted relationship tuple: {from, to, type, description}"""
    model_config = ConfigDict(populate_by_name=True)

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    type: str = ""  # free-text hint, not a canonical type
    description: Optional[str] = None

    def to_ir(self) -> RawRelationship:
        return RawRelationship(
            from_id=self.from_id,
            to_id=self.to_id,
            type=self.type,
            description=self.description,
        )


class EntityIn(BaseModel):
    id: str
    type: str = "Unknown"
    name: str = ""

    def to_ir(self) -> Entity:
        return Entity(id=self.id, type=EntityType.parse(self.type), name=self.name)


class ClassifyRequest(BaseModel):
    relationships: List[RawRelationshipIn]
    entity_types: Dict[str, str] = {}  # {"portal": "Application"} wins over id prefix


class ParseDiagramRequest(BaseModel):
    """C4 PlantUML source, bare or embedded in markdown"""
    source: str
    entity_types: Dict[str, str] = {}


class SyncRequest(BaseModel):
    relationships: List[RawRelationshipIn]
    entities: List[EntityIn] = []


class GraphNodeIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str = ""
    node_type: str = Field(default="Unknown", alias="nodeType")
    properties: Union[Dict[str, Any], str, None] = None  # map or JSON string

    def to_ir(self) -> GraphNode:
        return GraphNode.from_dict({
            "id": self.id,
            "label": self.label,
            "node_type": self.node_type,
            "properties": self.properties,
        })


class GraphEdgeIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    source: str
    target: str
    label: str = ""
    relationship_type: str = Field(default="", alias="relationshipType")

    def to_ir(self) -> GraphEdge:
        return GraphEdge.from_dict({
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "label": self.label,
            "relationship_type": self.relationship_type,
        })


class LayoutRequest(BaseModel):
    """Arbitrary graph query result to lay out"""
    nodes: List[GraphNodeIn]
    edges: List[GraphEdgeIn] = []
    column_width: Optional[float] = None
    row_height: Optional[float] = None


class ToggleRequest(BaseModel):
    """A previously returned layout plus the node to collapse / expand"""
    node_id: str
    nodes: List[Dict[str, Any]]
    edges: List[Dict[str, Any]] = []
    roots: List[str] = []

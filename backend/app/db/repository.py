"""
Relationship store backed by SQLAlchemy.

Relationships are merged on ``(from_id, to_id, rel_type)``; writing the
same classified relationship twice updates it in place. Methods never
commit, the caller owns the transaction.
"""

import logging
from collections import deque
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.classification.resolver import resolve_entity_type
from app.db.models import EntityRecord, RelationshipRecord
from app.ir.entity_ir import Entity, EntityType
from app.ir.errors import StoreError, UnknownNodeError
from app.ir.graph_ir import GraphEdge, GraphNode, GraphSnapshot
from app.ir.relationship_ir import ClassifiedRelationship

logger = logging.getLogger(__name__)


class RelationshipStore:

    def __init__(self, session: Session):
        self.session = session

    # ---------- writes ----------

    def upsert_entity(self, entity: Entity) -> EntityRecord:
        record = self.session.get(EntityRecord, entity.id)
        if record is None:
            record = EntityRecord(id=entity.id)
            self.session.add(record)
        entity_type = entity.type
        if entity_type is EntityType.UNKNOWN:
            entity_type = resolve_entity_type(entity.id)
        if entity_type is not EntityType.UNKNOWN or record.entity_type is None:
            record.entity_type = entity_type.value
        if entity.name:
            record.name = entity.name
        return record

    def upsert_relationship(self, rel: ClassifiedRelationship) -> bool:
        """Insert or update; returns True when a new row was created."""
        from_id, to_id, rel_type = rel.key
        record = self.session.scalars(
            select(RelationshipRecord).where(
                RelationshipRecord.from_id == from_id,
                RelationshipRecord.to_id == to_id,
                RelationshipRecord.rel_type == rel_type,
            )
        ).first()

        created = record is None
        if created:
            record = RelationshipRecord(from_id=from_id, to_id=to_id, rel_type=rel_type)
            self.session.add(record)
            # Visible to the next lookup in the same batch
            self.session.flush()

        props = rel.properties
        record.mode = props.mode.value if props.mode is not None else None
        record.rw = props.rw.value if props.rw is not None else None
        record.description = props.description
        return created

    # ---------- reads ----------

    def entity_types(self, ids: Iterable[str]) -> Dict[str, EntityType]:
        wanted = list(set(ids))
        if not wanted:
            return {}
        rows = self.session.scalars(select(EntityRecord).where(EntityRecord.id.in_(wanted)))
        types = {row.id: EntityType.parse(row.entity_type) for row in rows}
        return {k: v for k, v in types.items() if v is not EntityType.UNKNOWN}

    def fetch_graph(self, root_id: Optional[str] = None, depth: int = 3) -> GraphSnapshot:
        """Everything within *depth* outgoing hops of *root_id*, or the whole store."""
        try:
            if root_id is None:
                records = list(self.session.scalars(
                    select(RelationshipRecord).order_by(RelationshipRecord.id)
                ))
                node_ids = self._endpoints(records)
                node_ids.update(self.session.scalars(select(EntityRecord.id)))
            else:
                if not self._exists(root_id):
                    raise UnknownNodeError(root_id)
                records, node_ids = self._walk(root_id, depth)
            entities = {
                row.id: row
                for row in self.session.scalars(
                    select(EntityRecord).where(EntityRecord.id.in_(list(node_ids)))
                )
            }
        except SQLAlchemyError as e:
            logger.error("[Store] Graph query failed: %s", e)
            raise StoreError(f"graph query failed: {e}") from e

        nodes = [self._to_node(node_id, entities.get(node_id)) for node_id in sorted(node_ids)]
        edges = [
            GraphEdge(
                id=f"{r.from_id}-{r.rel_type}->{r.to_id}",
                source=r.from_id,
                target=r.to_id,
                label=r.rel_type,
                relationship_type=r.rel_type,
            )
            for r in records
        ]
        logger.debug("[Store] Fetched %d nodes, %d edges (root=%s)", len(nodes), len(edges), root_id)
        return GraphSnapshot(nodes=nodes, edges=edges)

    def _exists(self, entity_id: str) -> bool:
        if self.session.get(EntityRecord, entity_id) is not None:
            return True
        touching = self.session.scalars(
            select(RelationshipRecord.id).where(
                or_(RelationshipRecord.from_id == entity_id, RelationshipRecord.to_id == entity_id)
            ).limit(1)
        ).first()
        return touching is not None

    def _walk(self, root_id: str, depth: int):
        records: List[RelationshipRecord] = []
        seen_edges: Set[int] = set()
        node_ids: Set[str] = {root_id}
        frontier = deque([(root_id, 0)])

        while frontier:
            current, hops = frontier.popleft()
            if hops >= depth:
                continue
            outgoing = self.session.scalars(
                select(RelationshipRecord)
                .where(RelationshipRecord.from_id == current)
                .order_by(RelationshipRecord.id)
            )
            for record in outgoing:
                if record.id in seen_edges:
                    continue
                seen_edges.add(record.id)
                records.append(record)
                if record.to_id not in node_ids:
                    node_ids.add(record.to_id)
                    frontier.append((record.to_id, hops + 1))

        return records, node_ids

    @staticmethod
    def _endpoints(records: List[RelationshipRecord]) -> Set[str]:
        ids: Set[str] = set()
        for record in records:
            ids.add(record.from_id)
            ids.add(record.to_id)
        return ids

    @staticmethod
    def _to_node(node_id: str, record: Optional[EntityRecord]) -> GraphNode:
        if record is not None:
            node_type = EntityType.parse(record.entity_type)
            label = record.name or node_id
        else:
            node_type = resolve_entity_type(node_id)
            label = node_id
        return GraphNode(id=node_id, label=label, node_type=node_type.value)


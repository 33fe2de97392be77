import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.schemas import (
    ClassifyRequest,
    LayoutRequest,
    ParseDiagramRequest,
    SyncRequest,
    ToggleRequest,
)
from app.api.serializers import serialize_ir
from app.classification.classifier import RelationshipClassifier
from app.classification.resolver import EntityTypeResolver
from app.db.repository import RelationshipStore
from app.db.session import get_session
from app.dsl.plantuml import parse_diagram
from app.ir.errors import StoreError, UnknownNodeError
from app.layout.collapse import CollapseStateManager
from app.layout.composer import LayoutComposer
from app.layout.types import LayoutResult
from app.pipeline.sync import RelationshipSync

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health(session: Session = Depends(get_session)):
    try:
        session.execute(text("SELECT 1"))
        database = "up"
    except SQLAlchemyError as e:
        logger.warning("[Health] Database check failed: %s", e)
        database = "down"
    return {"status": "ok", "database": database}


# ============================================================
# CLASSIFICATION
# ============================================================

@router.post("/classify")
def classify_relationships(request: ClassifyRequest):
    """
    Classify raw {from, to, type, description} tuples.

    Rejected tuples are reported next to the accepted ones; a rejection
    never fails the request.
    """
    classifier = RelationshipClassifier(resolver=EntityTypeResolver(request.entity_types))
    report = classifier.classify_all(r.to_ir() for r in request.relationships)
    return {"status": "success", **report.to_dict()}


@router.post("/diagrams/parse")
def parse_context_diagram(request: ParseDiagramRequest):
    """Extract relationships from C4 PlantUML and classify them."""
    parsed = parse_diagram(request.source)
    classifier = RelationshipClassifier(resolver=EntityTypeResolver(request.entity_types))
    report = classifier.classify_all(parsed.relationships)

    return {
        "status": "success",
        "elements": [e.to_dict() for e in parsed.elements],
        "relationships": [
            {"from": r.from_id, "to": r.to_id, "type": r.type, "description": r.description}
            for r in parsed.relationships
        ],
        "classification": report.to_dict(),
    }


# ============================================================
# SYNC - classify + upsert into the relationship store
# ============================================================

@router.post("/sync")
def sync_relationships(request: SyncRequest, session: Session = Depends(get_session)):
    try:
        summary = RelationshipSync(session).run(
            [r.to_ir() for r in request.relationships],
            [e.to_ir() for e in request.entities],
        )
    except StoreError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return summary.to_dict()


@router.get("/sync/jobs")
def list_sync_jobs(limit: int = Query(10, ge=1, le=100), session: Session = Depends(get_session)):
    try:
        jobs = RelationshipSync(session).recent_jobs(limit)
    except SQLAlchemyError as e:
        raise HTTPException(status_code=503, detail=f"sync jobs unavailable: {e}")
    return {"jobs": serialize_ir(jobs)}


# ============================================================
# LAYOUT
# ============================================================

@router.get("/graph")
def get_graph_layout(
    root_id: Optional[str] = Query(None),
    depth: int = Query(3, ge=1, le=10),
    session: Session = Depends(get_session),
):
    """Query the relationship store and return it as a leveled layout."""
    try:
        snapshot = RelationshipStore(session).fetch_graph(root_id=root_id, depth=depth)
    except UnknownNodeError:
        raise HTTPException(status_code=404, detail=f"Entity '{root_id}' not found")
    except StoreError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return LayoutComposer().compose_snapshot(snapshot).to_dict()


@router.post("/layout")
def layout_graph(request: LayoutRequest):
    """Lay out an arbitrary {nodes, edges} query result."""
    composer = LayoutComposer(column_width=request.column_width, row_height=request.row_height)
    result = composer.compose(
        [n.to_ir() for n in request.nodes],
        [e.to_ir() for e in request.edges],
    )
    return result.to_dict()


@router.post("/layout/toggle")
def toggle_layout_node(request: ToggleRequest):
    """
    Collapse / expand one node of a layout returned earlier.

    Stateless: the caller sends the current layout back with the request.
    Unknown or leaf nodes leave the layout unchanged.
    """
    layout = LayoutResult.from_dict({
        "nodes": request.nodes,
        "edges": request.edges,
        "roots": request.roots,
    })
    toggled = CollapseStateManager(layout.nodes, layout.edges).toggle(request.node_id)

    return {"toggled": toggled, "node_id": request.node_id, **layout.to_dict()}

"""
Shared fixtures: in-memory SQLite store and a FastAPI test client bound to it.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.models import Base
from app.db.session import get_session
from app.ir.graph_ir import GraphEdge, GraphNode


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """Create test client backed by the in-memory store."""
    def override_get_session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_graph(edges, types=None):
    """Nodes in first-mention order from ``[("A", "B"), ...]`` pairs."""
    types = types or {}
    ids = []
    for source, target in edges:
        for node_id in (source, target):
            if node_id not in ids:
                ids.append(node_id)
    nodes = [GraphNode(id=i, label=i, node_type=types.get(i, "Unknown")) for i in ids]
    graph_edges = [GraphEdge(id=f"{s}->{t}", source=s, target=t) for s, t in edges]
    return nodes, graph_edges


@pytest.fixture
def graph():
    return make_graph

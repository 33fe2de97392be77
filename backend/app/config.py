import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ea_graph.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

# Layout geometry (pixels)
LAYOUT_COLUMN_WIDTH = int(os.getenv("LAYOUT_COLUMN_WIDTH", "350"))
LAYOUT_ROW_HEIGHT = int(os.getenv("LAYOUT_ROW_HEIGHT", "120"))

# Roots picked by outdegree when the graph has no indegree-zero node
FALLBACK_ROOT_COUNT = int(os.getenv("FALLBACK_ROOT_COUNT", "3"))

# Node types that relate back into an existing hierarchy
REVERSE_NODE_TYPES = frozenset(
    t.strip()
    for t in os.getenv("REVERSE_NODE_TYPES", "BusinessFunction,BusinessCapability").split(",")
    if t.strip()
)

from dataclasses import dataclass


@dataclass
class Rejection:
    reason: str      # unknown_entity | pair_not_allowed | no_keyword_match
    message: str
    object_id: str


class GraphError(Exception):
    """Base for errors surfaced at the service boundary."""


class UnknownNodeError(GraphError):
    """A node id that is not part of the current layout."""


class StoreError(GraphError):
    """The relationship store could not be read or written."""

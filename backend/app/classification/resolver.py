"""
Entity type resolution by structural id convention.

Ids look like ``APP-123``, ``COMP-004`` or ``SRV_web01``: a short letter
code before the first ``-`` or ``_`` names the entity type.
"""

import re
from typing import Dict, Mapping, Optional

from app.ir.entity_ir import EntityType


PREFIX_TYPES: Dict[str, EntityType] = {
    "APP": EntityType.APPLICATION,
    "API": EntityType.API,
    "CAP": EntityType.BUSINESS_FUNCTION,
    "BF": EntityType.BUSINESS_FUNCTION,
    "BFN": EntityType.BUSINESS_FUNCTION,
    "COMP": EntityType.COMPONENT,
    "CMP": EntityType.COMPONENT,
    "DATA": EntityType.DATA_OBJECT,
    "DO": EntityType.DATA_OBJECT,
    "TBL": EntityType.TABLE,
    "TAB": EntityType.TABLE,
    "SRV": EntityType.SERVER,
    "SVR": EntityType.SERVER,
    "ACH": EntityType.APP_CHANGE,
    "ICH": EntityType.INFRA_CHANGE,
}

_PREFIX_RE = re.compile(r"^([A-Za-z]{2,4})[-_]")


class EntityTypeResolver:
    """
    Maps an entity id to its EntityType.

    Total over all strings: unrecognized ids resolve to UNKNOWN.
    Explicit overrides (e.g. types already known to a graph store)
    take precedence over the prefix convention.
    """

    def __init__(self, overrides: Optional[Mapping[str, EntityType]] = None):
        self.overrides: Dict[str, EntityType] = {
            key: EntityType.parse(value) for key, value in (overrides or {}).items()
        }

    def resolve(self, entity_id: str) -> EntityType:
        if entity_id in self.overrides:
            return self.overrides[entity_id]
        return resolve_entity_type(entity_id)


def resolve_entity_type(entity_id: str) -> EntityType:
    if not isinstance(entity_id, str):
        return EntityType.UNKNOWN
    match = _PREFIX_RE.match(entity_id.strip())
    if not match:
        return EntityType.UNKNOWN
    return PREFIX_TYPES.get(match.group(1).upper(), EntityType.UNKNOWN)

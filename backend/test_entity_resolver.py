"""Entity id -> type resolution"""

import pytest

from app.classification.resolver import EntityTypeResolver, resolve_entity_type
from app.ir.entity_ir import EntityType


@pytest.mark.parametrize("entity_id, expected", [
    ("APP-1", EntityType.APPLICATION),
    ("app-42", EntityType.APPLICATION),
    ("API-2", EntityType.API),
    ("api_7", EntityType.API),
    ("CAP-001", EntityType.BUSINESS_FUNCTION),
    ("BF-3", EntityType.BUSINESS_FUNCTION),
    ("COMP-004", EntityType.COMPONENT),
    ("DATA-9", EntityType.DATA_OBJECT),
    ("TBL_orders", EntityType.TABLE),
    ("SRV-web01", EntityType.SERVER),
    ("ACH-12", EntityType.APP_CHANGE),
    ("ICH-5", EntityType.INFRA_CHANGE),
])
def test_known_prefixes(entity_id, expected):
    assert resolve_entity_type(entity_id) == expected


@pytest.mark.parametrize("entity_id", ["XYZ-1", "APP1", "", "-APP", "REQ-1", "ABCDE-1", None, 42])
def test_unrecognized_ids_resolve_to_unknown(entity_id):
    assert resolve_entity_type(entity_id) == EntityType.UNKNOWN


def test_overrides_win_over_prefix():
    resolver = EntityTypeResolver({"APP-1": EntityType.SERVER, "portal": "Application"})

    assert resolver.resolve("APP-1") == EntityType.SERVER
    assert resolver.resolve("portal") == EntityType.APPLICATION
    assert resolver.resolve("API-2") == EntityType.API


def test_override_with_unknown_label_is_unknown():
    resolver = EntityTypeResolver({"portal": "Spaceship"})
    assert resolver.resolve("portal") == EntityType.UNKNOWN


def test_entity_type_parse_accepts_names_and_values():
    assert EntityType.parse("DataObject") == EntityType.DATA_OBJECT
    assert EntityType.parse("DATA_OBJECT") == EntityType.DATA_OBJECT
    assert EntityType.parse(EntityType.API) == EntityType.API
    assert EntityType.parse(None) == EntityType.UNKNOWN

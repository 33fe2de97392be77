from dataclasses import dataclass
from enum import Enum


class EntityType(str, Enum):
    """Coarse type tag of an enterprise-architecture entity."""

    APPLICATION = "Application"
    API = "API"
    BUSINESS_FUNCTION = "BusinessFunction"
    COMPONENT = "Component"
    DATA_OBJECT = "DataObject"
    TABLE = "Table"
    SERVER = "Server"
    APP_CHANGE = "AppChange"
    INFRA_CHANGE = "InfraChange"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value) -> "EntityType":
        """Lenient lookup by value or member name; anything else is UNKNOWN."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.UNKNOWN
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        return cls.UNKNOWN


@dataclass
class Entity:
    id: str
    type: EntityType = EntityType.UNKNOWN
    name: str = ""

    @property
    def label(self) -> str:
        return self.name or self.id

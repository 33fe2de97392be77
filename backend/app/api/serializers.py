from datetime import datetime
from enum import Enum
from typing import Any


PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def serialize_ir(obj: Any):
    """
    Serialize IR / ORM objects into JSON-compatible structures.
    Deterministic. Tolerant to primitives.
    """

    # Enums first: str-based enums are also str instances
    if isinstance(obj, Enum):
        return obj.value

    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    if isinstance(obj, datetime):
        return obj.isoformat()

    if isinstance(obj, (list, tuple)):
        return [serialize_ir(item) for item in obj]

    if isinstance(obj, (set, frozenset)):
        return sorted((serialize_ir(item) for item in obj), key=str)

    if isinstance(obj, dict):
        return {k: serialize_ir(v) for k, v in obj.items()}

    # IR objects that know their wire shape
    if hasattr(obj, "to_dict"):
        return serialize_ir(obj.to_dict())

    # Dataclass-like / ORM objects
    if hasattr(obj, "__dict__"):
        return {
            key: serialize_ir(value)
            for key, value in obj.__dict__.items()
            if not key.startswith("_")
        }

    return str(obj)

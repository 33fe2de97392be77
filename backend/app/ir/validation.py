from dataclasses import dataclass
from typing import Optional

from .errors import Rejection
from .relationship_ir import ClassifiedRelationship


@dataclass
class ClassificationResult:
    is_classified: bool
    relationship: Optional[ClassifiedRelationship] = None
    rejection: Optional[Rejection] = None

    @classmethod
    def success(cls, relationship: ClassifiedRelationship):
        return cls(is_classified=True, relationship=relationship)

    @classmethod
    def rejected(cls, rejection: Rejection):
        return cls(is_classified=False, rejection=rejection)

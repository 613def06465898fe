"""
Presentation view derived from a contract record
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class ClassificationState(str, Enum):
    """Classifier states: no record yet, one per known contract type, or unrecognized"""
    UNCLASSIFIED = "UNCLASSIFIED"
    SERVICE_AGREEMENT = "SERVICE_AGREEMENT"
    NDA = "NDA"
    EMPLOYMENT_CONTRACT = "EMPLOYMENT_CONTRACT"
    LICENSE_AGREEMENT = "LICENSE_AGREEMENT"
    PURCHASE_ORDER = "PURCHASE_ORDER"
    UNRECOGNIZED = "UNRECOGNIZED"


class Highlight(BaseModel):
    """A (label, value) pair shown in the contract-type summary"""
    label: str
    value: str


class ClassificationView(BaseModel):
    """Recomputed for every render; never cached across records"""
    state: ClassificationState
    title: str
    description: str
    badge: str = Field("", description="Classification label with underscores replaced by spaces")
    highlights: List[Highlight] = Field(default_factory=list)
    needs_manual_review: bool = False
    has_high_risks: bool = False

    def highlight_map(self) -> dict:
        return {h.label: h.value for h in self.highlights}

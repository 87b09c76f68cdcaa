"""
Classification models: department contact bundles and classifier output.
"""

from pydantic import BaseModel, Field
from typing import List
from enum import Enum


class PriorityTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DepartmentDetails(BaseModel):
    """Contact bundle for the department a report is routed to."""
    head: str
    contact: str
    email: str
    working_hours: str
    response_time: str


class ClassificationResult(BaseModel):
    """
    Classifier output for one submission.
    Not persisted on its own; folded into the Report at creation.
    """
    category: str
    department: str
    department_details: DepartmentDetails
    deadline: float = Field(..., description="Resolution deadline in days")
    priority: PriorityTier
    description: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    detected_objects: List[str] = Field(default_factory=list)


class LabelPrediction(BaseModel):
    """One prediction from the external image-labeling collaborator."""
    label: str
    confidence: float = Field(0.0, ge=0.0, le=1.0)

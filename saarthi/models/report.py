"""
Pydantic models for citizen reports.
These models handle validation for report submission, storage and responses.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from enum import Enum

from saarthi.models.classification import ClassificationResult, DepartmentDetails


class ReportStatus(str, Enum):
    """
    Report lifecycle.

    PENDING / IN_PROGRESS are set at submission, OVERDUE only by the
    overdue sweep, RESOLVED only by an administrative update.
    """
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    OVERDUE = "overdue"


class ReportCreate(BaseModel):
    """
    Fields a caller may supply when creating a report.
    Anything left as None falls back to the store defaults.
    """
    title: str = Field(..., min_length=1, max_length=300)
    description: Optional[str] = Field(None, max_length=2000)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    direction: Optional[str] = None
    address: Optional[str] = Field(None, max_length=500)
    tags: List[str] = Field(default_factory=list)
    votes: Optional[int] = Field(None, ge=0)
    priority: Optional[int] = None
    department: Optional[str] = None
    department_details: Optional[DepartmentDetails] = None
    deadline_days: Optional[float] = Field(None, ge=0)
    assigned_at: Optional[datetime] = None
    due_by: Optional[datetime] = None
    status: Optional[ReportStatus] = None

    class Config:
        extra = "ignore"


class Report(BaseModel):
    """
    A stored citizen report.
    `created_at` is set once by the store and never rewritten.
    """
    id: str
    title: str
    description: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    direction: Optional[str] = None
    address: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    votes: int = Field(default=0, ge=0)
    priority: int = 0
    department: Optional[str] = None
    department_details: Optional[DepartmentDetails] = None
    deadline_days: Optional[float] = None
    assigned_at: Optional[datetime] = None
    due_by: Optional[datetime] = None
    status: ReportStatus = ReportStatus.PENDING
    created_at: datetime

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None


class ReportSubmission(BaseModel):
    """
    Inbound submission from the complaint form.
    `image_ref` points at an already uploaded image (upload transport is
    handled outside the engine).
    """
    title: Optional[str] = Field(None, max_length=300, description="Free-text complaint")
    description: Optional[str] = Field(None, max_length=2000)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=500)
    image_ref: Optional[str] = Field(None, description="Reference to an uploaded image")
    observer_lat: Optional[float] = Field(None, ge=-90, le=90, description="Reporter's own position")
    observer_lng: Optional[float] = Field(None, ge=-180, le=180)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "There is a large pothole on the main road",
                "lat": 28.4744,
                "lng": 77.5040,
                "address": "Knowledge Park II, Greater Noida",
                "observer_lat": 28.4700,
                "observer_lng": 77.5000,
            }
        }
        extra = "ignore"


class SubmissionResult(BaseModel):
    """Created report plus the classification summary shown to the citizen."""
    report: Report
    classification: ClassificationResult


class RankedReport(BaseModel):
    """Report annotated with its distance from the observer (if any)."""
    report: Report
    distance_km: Optional[float] = None


class VoteOutcome(BaseModel):
    """Result of a vote attempt; `reason` is an ErrorKind value on rejection."""
    accepted: bool
    reason: Optional[str] = None
    report: Optional[Report] = None

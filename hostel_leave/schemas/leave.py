from pydantic import BaseModel, ConfigDict, field_validator
from datetime import date, datetime
from typing import Any, List, Optional
from hostel_leave.models.leave_request import LeaveStatus

class GeoPoint(BaseModel):
    """
    GeoJSON point; coordinates are [longitude, latitude].
    Shape is checked by geofence.parse_location so that a malformed point
    gets the same 400 response as any other bad location.
    """
    type: Any = "Point"
    coordinates: Any = None

class LeaveCreate(BaseModel):
    start_date: date
    end_date: date
    reason: str
    leave_type: str = "regular"
    contact_number: str = ""
    parent_contact: str = ""
    address: str = ""
    leave_location: Optional[GeoPoint] = None

class ParentReviewRequest(BaseModel):
    action: str
    remarks: str = ""
    current_location: Optional[GeoPoint] = None

class StaffReviewRequest(BaseModel):
    action: str
    remarks: str = ""

class AdminDecisionRequest(BaseModel):
    action: str

class LeaveReviewResponse(BaseModel):
    status: LeaveStatus
    remarks: str = ""
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class LeaveResponse(BaseModel):
    id: int
    student_id: int
    start_date: date
    end_date: date
    reason: str
    leave_type: str
    contact_number: Optional[str] = ""
    parent_contact: Optional[str] = ""
    address: Optional[str] = ""
    status: LeaveStatus
    parent_review: LeaveReviewResponse
    staff_review: LeaveReviewResponse
    leave_location: Optional[GeoPoint] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("leave_location", mode="before")
    @classmethod
    def _point_from_pair(cls, value):
        if isinstance(value, tuple):
            return {"type": "Point", "coordinates": list(value)}
        return value

class ChildLeavesResponse(BaseModel):
    leaves: List[LeaveResponse]
    count: int

class ChildLeaveStats(BaseModel):
    student_id: int
    full_name: str
    room_number: Optional[str] = None
    total: int
    pending: int
    approved: int
    rejected: int

from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from hostel_leave.models.user import UserRole

class UserSummary(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole
    room_number: Optional[str] = None
    parent_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

class ParentSummary(UserSummary):
    child_ids: List[int] = []

class AssignParentRequest(BaseModel):
    student_id: Optional[int] = None
    parent_id: Optional[int] = None

class ParentLinkResponse(BaseModel):
    student: UserSummary
    parent: ParentSummary

class StudentParentInfo(BaseModel):
    student: UserSummary
    parent: Optional[UserSummary] = None

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple
from sqlalchemy import Column, Integer, String, Date, Float, ForeignKey, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from hostel_leave.database import Base
import enum

class LeaveStatus(str, enum.Enum):
    """Shared by the overall status and each reviewer's sub-record."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not LeaveStatus.PENDING

class ReviewerRole(str, enum.Enum):
    PARENT = "parent"
    STAFF = "staff"


@dataclass(frozen=True)
class LeaveReview:
    status: LeaveStatus
    remarks: str = ""
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(String, nullable=False)
    leave_type = Column(String, default="regular", nullable=False)
    contact_number = Column(String, default="")
    parent_contact = Column(String, default="")
    address = Column(String, default="")
    status = Column(String, default=LeaveStatus.PENDING.value, nullable=False, index=True)

    # Embedded parent review
    parent_review_status = Column(String, default=LeaveStatus.PENDING.value, nullable=False)
    parent_review_remarks = Column(String, default="")
    parent_reviewed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    parent_reviewed_at = Column(DateTime(timezone=True), nullable=True)

    # Embedded staff review
    staff_review_status = Column(String, default=LeaveStatus.PENDING.value, nullable=False)
    staff_review_remarks = Column(String, default="")
    staff_reviewed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    staff_reviewed_at = Column(DateTime(timezone=True), nullable=True)

    # Destination point, [longitude, latitude]; cleared once the leave is decided
    leave_longitude = Column(Float, nullable=True)
    leave_latitude = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Optimistic lock: every UPDATE is conditional on the version that was read
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    student = relationship("User", foreign_keys=[student_id], back_populates="leave_requests")

    @property
    def leave_location(self) -> Optional[Tuple[float, float]]:
        if self.leave_longitude is None or self.leave_latitude is None:
            return None
        return (self.leave_longitude, self.leave_latitude)

    @leave_location.setter
    def leave_location(self, value: Optional[Tuple[float, float]]) -> None:
        if value is None:
            self.leave_longitude = None
            self.leave_latitude = None
        else:
            self.leave_longitude, self.leave_latitude = value

    def get_review(self, role: ReviewerRole) -> LeaveReview:
        prefix = role.value
        return LeaveReview(
            status=LeaveStatus(getattr(self, f"{prefix}_review_status") or LeaveStatus.PENDING.value),
            remarks=getattr(self, f"{prefix}_review_remarks") or "",
            reviewed_by=getattr(self, f"{prefix}_reviewed_by"),
            reviewed_at=getattr(self, f"{prefix}_reviewed_at"),
        )

    def set_review(self, role: ReviewerRole, review: LeaveReview) -> None:
        prefix = role.value
        setattr(self, f"{prefix}_review_status", review.status.value)
        setattr(self, f"{prefix}_review_remarks", review.remarks)
        setattr(self, f"{prefix}_reviewed_by", review.reviewed_by)
        setattr(self, f"{prefix}_reviewed_at", review.reviewed_at)

    @property
    def parent_review(self) -> LeaveReview:
        return self.get_review(ReviewerRole.PARENT)

    @property
    def staff_review(self) -> LeaveReview:
        return self.get_review(ReviewerRole.STAFF)

    @property
    def reviews(self):
        return {role: self.get_review(role) for role in ReviewerRole}

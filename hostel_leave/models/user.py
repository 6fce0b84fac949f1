"""
User Model.
A single table holds every actor; the role decides which of the
parent/child linkage fields may be populated.
"""
from sqlalchemy import Column, Integer, String, Enum, DateTime, ForeignKey, Table
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from hostel_leave.database import Base


class UserRole(str, enum.Enum):
    """
    Closed set of actor roles.

    - ADMIN: overrides leave decisions and manages parent/student links
    - STAFF: hostel staff reviewer
    - PARENT: guardian reviewer, linked to one or more students
    - STUDENT: submits leave requests and complaints
    """
    ADMIN = "admin"
    STAFF = "staff"
    PARENT = "parent"
    STUDENT = "student"


# Parent side of the linkage. A student appears in at most one parent's children.
parent_children = Table(
    "parent_children",
    Base.metadata,
    Column("parent_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, unique=True),
)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.STUDENT, nullable=False)
    room_number = Column(String, nullable=True)

    # Student side of the linkage
    parent_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    parent = relationship("User", remote_side=[id], foreign_keys=[parent_id])
    children = relationship(
        "User",
        secondary=parent_children,
        primaryjoin=id == parent_children.c.parent_id,
        secondaryjoin=id == parent_children.c.student_id,
        order_by=id,
    )

    leave_requests = relationship(
        "LeaveRequest",
        foreign_keys="[LeaveRequest.student_id]",
        back_populates="student",
        cascade="all, delete-orphan",
    )
    complaints = relationship("Complaint", back_populates="student", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def child_ids(self):
        return [child.id for child in self.children]

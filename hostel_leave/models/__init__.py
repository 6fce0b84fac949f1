# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import user, leave_request, complaint

# Explicit class exports for cleaner imports
from .user import User, UserRole, parent_children
from .leave_request import LeaveRequest, LeaveReview, LeaveStatus, ReviewerRole
from .complaint import Complaint

__all__ = [
    "User",
    "UserRole",
    "parent_children",
    "LeaveRequest",
    "LeaveReview",
    "LeaveStatus",
    "ReviewerRole",
    "Complaint",
]

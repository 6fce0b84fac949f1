from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from hostel_leave.core.schemas import ApiResponse
from hostel_leave.database import get_db
from hostel_leave.models.user import User
from hostel_leave.routers.auth_deps import require_staff
from hostel_leave.schemas.leave import LeaveResponse, StaffReviewRequest
from hostel_leave.services.leave_service import LeaveReviewService
from hostel_leave.services.review_consensus import parse_action

router = APIRouter(prefix="/staff", tags=["staff"])


@router.post("/leaves/{leave_id}/review", response_model=ApiResponse[LeaveResponse])
def review_leave(
    leave_id: int,
    review: StaffReviewRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    leave = LeaveReviewService(db).review_as_staff(leave_id, current_user.id, review.action, review.remarks)
    return ApiResponse[LeaveResponse].ok(
        LeaveResponse.model_validate(leave),
        message=f"Leave {parse_action(review.action).decision.value} by staff",
    )

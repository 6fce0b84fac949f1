"""
Geofence check for parent approvals.

A parent standing near the leave destination cannot confirm the leave
impartially, so approval is only accepted from at least
RESTRICTED_RADIUS_KM away. Rejections are never gated.
"""
import logging
import math
from numbers import Real
from typing import Any, Optional, Sequence, Tuple

from hostel_leave.core.exceptions import PolicyViolationError, ValidationError
from hostel_leave.schemas.leave import GeoPoint
from hostel_leave.services.geo import distance_km
from hostel_leave.services.review_consensus import ReviewAction

logger = logging.getLogger(__name__)

RESTRICTED_RADIUS_KM = 5.0


def parse_location(value: Any, label: str = "Real-time parent location") -> Tuple[float, float]:
    """Validate a [longitude, latitude] pair, bare or wrapped in a GeoJSON point."""
    if isinstance(value, GeoPoint):
        if value.type != "Point":
            raise ValidationError(f"{label} must be a GeoJSON Point")
        value = value.coordinates
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence) or len(value) != 2:
        raise ValidationError(f"{label} data is missing or invalid")
    for coord in value:
        # bool is an int subclass but never a coordinate
        if isinstance(coord, bool) or not isinstance(coord, Real) or not math.isfinite(coord):
            raise ValidationError(f"{label} coordinates must be two finite numbers [longitude, latitude]")
    return (float(value[0]), float(value[1]))


def check_parent_review(
    action: ReviewAction,
    current_location: Any,
    leave_location: Optional[Tuple[float, float]],
) -> float:
    """
    Validate both points and enforce the restricted radius.
    Returns the computed distance in kilometers.
    """
    caller_point = parse_location(current_location)
    if leave_location is None:
        raise ValidationError("Leave location data is missing or invalid")
    leave_point = parse_location(leave_location, label="Leave location")

    distance = distance_km(caller_point, leave_point)
    if action is ReviewAction.APPROVE and distance < RESTRICTED_RADIUS_KM:
        logger.warning(
            "Parent approval refused inside restricted radius",
            extra={"distance_km": round(distance, 3), "radius_km": RESTRICTED_RADIUS_KM},
        )
        raise PolicyViolationError(
            "Approval not allowed. Parent is within the restricted radius of the leave location.",
            details={"distance_km": round(distance, 3), "radius_km": RESTRICTED_RADIUS_KM},
        )
    return distance

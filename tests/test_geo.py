import math
import pytest
from hostel_leave.core.exceptions import PolicyViolationError, ValidationError
from hostel_leave.schemas.leave import GeoPoint
from hostel_leave.services.geo import distance_km
from hostel_leave.services.geofence import RESTRICTED_RADIUS_KM, check_parent_review, parse_location
from hostel_leave.services.review_consensus import ReviewAction

def test_distance_is_symmetric():
    a = [77.5946, 12.9716]
    b = [72.8777, 19.0760]
    assert distance_km(a, b) == pytest.approx(distance_km(b, a))

def test_distance_to_self_is_zero():
    assert distance_km([151.2093, -33.8688], [151.2093, -33.8688]) == 0

def test_five_km_boundary_along_meridian():
    assert distance_km([0, 0], [0, 0.0449]) == pytest.approx(5.0, abs=0.01)

def test_known_city_pair():
    # Bengaluru -> Mumbai, roughly 845 km great-circle
    assert distance_km([77.5946, 12.9716], [72.8777, 19.0760]) == pytest.approx(845, rel=0.01)

def test_longitude_comes_first():
    # One degree of longitude at 60°N is half a degree of latitude's length
    along_parallel = distance_km([0, 60], [1, 60])
    along_meridian = distance_km([0, 60], [0, 61])
    assert along_parallel == pytest.approx(along_meridian / 2, rel=0.01)

def test_out_of_range_input_still_numeric():
    result = distance_km([400, 120], [-400, -95])
    assert math.isfinite(result)

def test_antipodal_points_do_not_raise():
    assert distance_km([0, 0], [180, 0]) == pytest.approx(math.pi * 6371, rel=1e-9)

@pytest.mark.parametrize("value", [
    None,
    [],
    [1.0],
    [1.0, 2.0, 3.0],
    "77.5,12.9",
    [True, 12.9],
    ["77.5", 12.9],
    [float("nan"), 12.9],
    {"coordinates": [77.5, 12.9]},
])
def test_parse_location_rejects_malformed(value):
    with pytest.raises(ValidationError):
        parse_location(value)

def test_parse_location_accepts_ints_and_tuples():
    assert parse_location((77, 12)) == (77.0, 12.0)

def test_geofence_refuses_approval_inside_radius():
    with pytest.raises(PolicyViolationError) as exc_info:
        check_parent_review(ReviewAction.APPROVE, [0, 0.0449], (0.0, 0.0))
    assert exc_info.value.details["radius_km"] == RESTRICTED_RADIUS_KM

def test_geofence_allows_approval_outside_radius():
    distance = check_parent_review(ReviewAction.APPROVE, [0, 0.05], (0.0, 0.0))
    assert distance >= RESTRICTED_RADIUS_KM

def test_geofence_never_gates_rejection():
    assert check_parent_review(ReviewAction.REJECT, [0, 0], (0.0, 0.0)) == 0

def test_geofence_requires_leave_location():
    with pytest.raises(ValidationError):
        check_parent_review(ReviewAction.REJECT, [0, 0], None)

def test_parse_location_unwraps_geojson_point():
    assert parse_location(GeoPoint(coordinates=[77.5, 12.9])) == (77.5, 12.9)

@pytest.mark.parametrize("point", [
    GeoPoint(type="LineString", coordinates=[77.5, 12.9]),
    GeoPoint(coordinates=None),
    GeoPoint(coordinates=["x", 1]),
])
def test_parse_location_rejects_malformed_geojson_point(point):
    with pytest.raises(ValidationError):
        parse_location(point)

# [longitude, latitude]
HOSTEL_POINT = [77.5946, 12.9716]
NEAR_POINT = [77.5950, 12.9720]      # ~60 m from the leave location
FAR_POINT = [77.5946, 13.0216]       # ~5.56 km north

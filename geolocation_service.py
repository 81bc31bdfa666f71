from math import atan2, cos, radians, sin, sqrt


EARTH_RADIUS_KM = 6371.0
DISTANCE_DECAY_KM = 500.0


def has_coordinates(lat, lon):
    return lat is not None and lon is not None


def haversine_distance_km(lat1, lon1, lat2, lon2):
    d_lat = radians(lat2 - lat1)
    d_lon = radians(lon2 - lon1)

    a = (
        sin(d_lat / 2) ** 2
        + cos(radians(lat1)) * cos(radians(lat2)) * sin(d_lon / 2) ** 2
    )
    # atan2 keeps c finite when rounding pushes a slightly past 1.0
    c = 2 * atan2(sqrt(a), sqrt(max(0.0, 1 - a)))
    return EARTH_RADIUS_KM * c


def distance_score_from_km(distance_km):
    """Linear decay from 1.0 at the patient's location to 0.0 at 500 km."""
    return max(0.0, 1.0 - distance_km / DISTANCE_DECAY_KM)

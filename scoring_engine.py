from geolocation_service import distance_score_from_km, has_coordinates, haversine_distance_km
from models import ScoredHospital


RATING_WEIGHT = 0.5
SPECIALISATION_WEIGHT = 0.3
DISTANCE_WEIGHT = 0.2

NEUTRAL_DISTANCE_SCORE = 0.5
MAX_RATING = 5.0


def _calculate_distance_km(hospital, user_lat, user_lon):
    if not has_coordinates(user_lat, user_lon):
        return None
    if not has_coordinates(hospital.latitude, hospital.longitude):
        return None
    return haversine_distance_km(user_lat, user_lon, hospital.latitude, hospital.longitude)


def _calculate_distance_score(distance_km):
    if distance_km is None:
        return NEUTRAL_DISTANCE_SCORE
    return distance_score_from_km(distance_km)


def _calculate_specialisation_match_score(condition, specialisation_tags):
    # Either side may be the abbreviated form, so match in both directions.
    normalized_condition = str(condition or "").lower()
    for tag in specialisation_tags:
        if tag in normalized_condition or normalized_condition in tag:
            return 1.0
    return 0.0


def _calculate_rating_score(hospital_rating):
    return min(1.0, max(0.0, float(hospital_rating or 0.0) / MAX_RATING))


def calculate_hospital_score(hospital, condition, user_lat=None, user_lon=None):
    """
    Composite hospital score based on:
    - rating (0.5)
    - specialisation match (0.3)
    - distance from the patient (0.2)

    The distance is kept on the result so callers can display it.
    """
    distance_km = _calculate_distance_km(hospital, user_lat, user_lon)
    distance_score = _calculate_distance_score(distance_km)
    specialisation_score = _calculate_specialisation_match_score(condition, hospital.specialisation_tags)
    rating_score = _calculate_rating_score(hospital.rating)

    final_score = (
        RATING_WEIGHT * rating_score
        + SPECIALISATION_WEIGHT * specialisation_score
        + DISTANCE_WEIGHT * distance_score
    )

    return ScoredHospital(
        hospital=hospital,
        score=final_score,
        distance_km=distance_km,
        components={
            "rating": round(rating_score, 4),
            "specialisation_match": round(specialisation_score, 4),
            "distance": round(distance_score, 4),
        },
    )


def rank_hospitals(catalog, condition, user_lat=None, user_lon=None, top_n=5):
    """Score every catalog entry and return the best ``top_n``, highest score first.

    The sort is stable, so equal scores keep their catalog order.
    """
    ranked = [
        calculate_hospital_score(hospital, condition, user_lat=user_lat, user_lon=user_lon)
        for hospital in catalog
    ]
    ranked.sort(key=lambda item: item.score, reverse=True)
    return ranked[: max(0, int(top_n))]

import logging
import math
import re
from datetime import datetime, timezone

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS

from config import (
    LOG_LEVEL,
    NEARBY_DEFAULT_RADIUS_KM,
    NEARBY_TOP_N,
    PORT,
    REFERRAL_NEARBY_RADIUS_KM,
    TOP_N_HOSPITALS,
)
from database import ReferralStore, load_hospital_catalog
from eligibility_engine import eligible_schemes
from explanation_engine import GeminiExplainer, fallback_explanation
from hospital_service import OverpassNearbyLookup
from models import PatientProfile
from priority_engine import classify_priority
from scoring_engine import rank_hospitals

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*[+-]?\d+")

app = Flask(__name__)
CORS(app)


@app.before_request
def setup_services_once():
    config = current_app.config
    if config.get("HOSPITAL_CATALOG") is None:
        config["HOSPITAL_CATALOG"] = load_hospital_catalog()
    if config.get("REFERRAL_STORE") is None:
        config["REFERRAL_STORE"] = ReferralStore()
    if config.get("TEXT_EXPLAINER") is None:
        config["TEXT_EXPLAINER"] = GeminiExplainer()
    if config.get("NEARBY_LOOKUP") is None:
        config["NEARBY_LOOKUP"] = OverpassNearbyLookup()


def _to_float_or_none(value):
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _parse_int_prefix(value):
    """Leading integer of a query value: '12.5' -> 12, 'abc' -> None."""
    match = _LEADING_INT.match(value or "")
    return int(match.group()) if match else None


def _is_blank(value):
    return not isinstance(value, str) or not value.strip()


def _is_whole_number(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def validate_referral_payload(payload):
    errors = []
    age = payload.get("age")

    if _is_blank(payload.get("name")):
        errors.append("name is required")
    if not _is_whole_number(age) or age <= 0 or age > 120:
        errors.append("age must be a whole number between 1 and 120")
    if not payload.get("gender"):
        errors.append("gender is required")
    if _is_blank(payload.get("hospital")):
        errors.append("hospital is required")
    if not payload.get("disease"):
        errors.append("disease/condition is required")
    if payload.get("disease") == "other" and _is_blank(payload.get("otherDisease")):
        errors.append("otherDisease is required when disease is 'other'")
    if not payload.get("bplStatus"):
        errors.append("bplStatus is required")
    if not payload.get("disabled"):
        errors.append("disabled status is required")

    return errors


def format_disease(disease, other_disease=None):
    """'cardiology' -> 'Cardiology'; 'other' uses the free-text disease."""
    if disease == "other":
        return other_disease or "Other"
    disease = str(disease)
    return disease[:1].upper() + disease[1:]


def _extract_location(payload):
    location = payload.get("location")
    if not isinstance(location, dict):
        return None, None
    lat = _to_float_or_none(location.get("lat"))
    lon = _to_float_or_none(location.get("lng"))
    if lat is None or lon is None:
        return None, None
    return lat, lon


def _utc_timestamp():
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_referral_record(payload, patient, ranked, nearby, explanation, priority, schemes):
    has_location = patient.latitude is not None and patient.longitude is not None
    return {
        "patient_name": payload.get("name"),
        "age": patient.age,
        "gender": payload.get("gender"),
        "current_hospital": payload.get("hospital"),
        "disease_label": patient.condition,
        "priority": priority,
        "bpl_status": patient.bpl_status,
        "disabled": patient.disabled,
        "location": {"lat": patient.latitude, "lon": patient.longitude} if has_location else None,
        "address": payload.get("address") or None,
        "received_at": payload.get("timestamp") or _utc_timestamp(),
        "recommended_hospitals": [scored.to_dict() for scored in ranked],
        "nearby_osm_hospitals": nearby,
        "ai_explanation": explanation or fallback_explanation(ranked, patient.condition),
        "schemes_eligible": schemes,
    }


@app.route("/")
def index():
    return jsonify(
        message="Welcome to Jeevan-Setu API",
        status="active",
        documentation="/health",
    )


@app.route("/health")
def health():
    return jsonify(status="ok", hospitals_loaded=len(current_app.config["HOSPITAL_CATALOG"]))


@app.route("/api/referral", methods=["POST"])
def create_referral():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}

    errors = validate_referral_payload(payload)
    if errors:
        return jsonify(detail=errors), 422

    lat, lon = _extract_location(payload)
    patient = PatientProfile(
        condition=format_disease(payload["disease"], payload.get("otherDisease")),
        bpl_status=payload["bplStatus"],
        disabled=payload["disabled"],
        age=int(payload["age"]),
        latitude=lat,
        longitude=lon,
    )

    config = current_app.config
    ranked = rank_hospitals(
        config["HOSPITAL_CATALOG"],
        patient.condition,
        user_lat=patient.latitude,
        user_lon=patient.longitude,
        top_n=TOP_N_HOSPITALS,
    )

    nearby = []
    if lat is not None and lon is not None:
        nearby = config["NEARBY_LOOKUP"].find_nearby(lat, lon, REFERRAL_NEARBY_RADIUS_KM)

    patient_context = {
        "name": payload.get("name"),
        "age": patient.age,
        "gender": payload.get("gender"),
        "hospital": payload.get("hospital"),
        "diseaseLabel": patient.condition,
        "bplStatus": patient.bpl_status,
        "disabled": patient.disabled,
        "lat": lat,
        "lon": lon,
    }
    explanation = config["TEXT_EXPLAINER"].explain(patient_context, ranked)

    priority = classify_priority(patient.condition)
    schemes = eligible_schemes(ranked, patient.below_poverty_line, patient.is_disabled, patient.age)

    record = build_referral_record(payload, patient, ranked, nearby, explanation, priority, schemes)
    record = config["REFERRAL_STORE"].create(record)
    logger.info("Created referral %s (priority %s)", record["referral_id"], priority)
    return jsonify(record), 200


@app.route("/api/referral/<referral_id>")
def get_referral(referral_id):
    record = current_app.config["REFERRAL_STORE"].get(referral_id)
    if not record:
        return jsonify(detail="Referral not found"), 404
    return jsonify(record)


@app.route("/api/hospitals/nearby")
def nearby_hospitals():
    lat = _to_float_or_none(request.args.get("lat"))
    lon = _to_float_or_none(request.args.get("lon"))
    condition = request.args.get("condition", "")
    radius = _parse_int_prefix(request.args.get("radius")) or NEARBY_DEFAULT_RADIUS_KM

    if lat is None or lon is None:
        return jsonify(detail="lat and lon are required query params"), 400

    config = current_app.config
    ranked = rank_hospitals(config["HOSPITAL_CATALOG"], condition, user_lat=lat, user_lon=lon, top_n=NEARBY_TOP_N)

    database_hospitals = []
    for scored in ranked:
        row = {"source": "database", **scored.to_dict()}
        row.pop("score", None)
        row.pop("reviews", None)
        row.pop("district", None)
        database_hospitals.append(row)

    osm_hospitals = [
        {"source": "openstreetmap", **hospital}
        for hospital in config["NEARBY_LOOKUP"].find_nearby(lat, lon, radius)
    ]

    return jsonify(
        query={"lat": lat, "lon": lon, "condition": condition, "radius_km": radius},
        database_hospitals=database_hospitals,
        osm_hospitals=osm_hospitals,
        total=len(database_hospitals) + len(osm_hospitals),
    )


@app.errorhandler(404)
def route_not_found(error):
    return jsonify(detail="Route not found"), 404


@app.errorhandler(500)
def internal_error(error):
    original = getattr(error, "original_exception", None) or error
    logger.error(
        "Unhandled: %s",
        original,
        exc_info=(type(original), original, original.__traceback__),
    )
    return jsonify(detail="Internal server error"), 500


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.config["HOSPITAL_CATALOG"] = load_hospital_catalog()
    logger.info("Jeevan-Setu API running on port %s", PORT)
    app.run(host="0.0.0.0", port=PORT)

import logging

import requests

from config import OVERPASS_TIMEOUT_SECONDS, OVERPASS_URL
from geolocation_service import haversine_distance_km

logger = logging.getLogger(__name__)


def build_overpass_query(lat, lon, radius_km):
    radius_m = int(radius_km * 1000)
    return f"""
    [out:json][timeout:10];
    (
      node["amenity"="hospital"](around:{radius_m},{lat},{lon});
      way["amenity"="hospital"](around:{radius_m},{lat},{lon});
    );
    out center 10;
    """


def _element_coordinates(element):
    lat = element.get("lat")
    lon = element.get("lon")
    if lat is None or lon is None:
        center = element.get("center") or {}
        lat = center.get("lat")
        lon = center.get("lon")
    return lat, lon


def parse_overpass_elements(payload, user_lat, user_lon):
    hospitals = []
    for element in payload.get("elements") or []:
        tags = element.get("tags") or {}
        lat, lon = _element_coordinates(element)

        distance_km = None
        if lat is not None and lon is not None:
            distance_km = round(haversine_distance_km(user_lat, user_lon, float(lat), float(lon)), 2)

        address = ", ".join(
            part
            for part in [tags.get("addr:street"), tags.get("addr:city"), tags.get("addr:state")]
            if part
        )

        hospitals.append(
            {
                "osm_id": element.get("id"),
                "name": tags.get("name") or "Unnamed Hospital",
                "lat": lat,
                "lon": lon,
                "distance_km": distance_km,
                "address": address,
                "phone": tags.get("phone") or tags.get("contact:phone"),
                "website": tags.get("website"),
                "emergency": tags.get("emergency"),
            }
        )
    return hospitals


class OverpassNearbyLookup:
    """Real-world hospitals around a coordinate, from OpenStreetMap."""

    def __init__(self, url=None, timeout_seconds=None, session=None):
        self.url = url or OVERPASS_URL
        self.timeout_seconds = timeout_seconds or OVERPASS_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    def find_nearby(self, lat, lon, radius_km):
        query = build_overpass_query(lat, lon, radius_km)
        try:
            response = self.session.post(
                self.url,
                data={"data": query},
                headers={"User-Agent": "JeevanSetu/1.0"},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("OSM fetch failed: %s", exc)
            return []

        if not isinstance(payload, dict):
            return []
        return parse_overpass_elements(payload, lat, lon)

from dataclasses import dataclass, field
from typing import Optional


def _to_float_or_none(value):
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int_or_default(value, default=0):
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_text(value):
    return "" if value is None else str(value)


def split_csv(value):
    """Split a comma-separated catalog field into trimmed entries.

    Blank entries are kept: a missing field yields ``[""]``, and an empty
    specialisation tag is a substring of every condition.
    """
    return [part.strip() for part in _to_text(value).split(",")]


@dataclass(frozen=True)
class HospitalRecord:
    id: str
    city: str = ""
    state: str = ""
    district: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: float = 0.0
    specialisation: str = ""
    beds: int = 0
    insurance_schemes: str = ""
    reviews: int = 0

    @classmethod
    def from_dict(cls, raw):
        """Build a record from one raw catalog entry, defaulting missing or malformed fields."""
        rating = _to_float_or_none(raw.get("Rating"))
        return cls(
            id=_to_text(raw.get("id")),
            city=_to_text(raw.get("City")),
            state=_to_text(raw.get("State")),
            district=_to_text(raw.get("District")),
            latitude=_to_float_or_none(raw.get("Latitude")),
            longitude=_to_float_or_none(raw.get("Longitude")),
            rating=rating if rating is not None else 0.0,
            specialisation=_to_text(raw.get("Specialisation")),
            beds=_to_int_or_default(raw.get("No of Beds")),
            insurance_schemes=_to_text(raw.get("Insurance Schemes")),
            reviews=_to_int_or_default(raw.get("Number of Reviews")),
        )

    @property
    def specialisation_tags(self):
        return [tag.lower() for tag in split_csv(self.specialisation)]

    @property
    def scheme_names(self):
        return split_csv(self.insurance_schemes)

    def to_dict(self):
        return {
            "id": self.id,
            "city": self.city,
            "state": self.state,
            "district": self.district,
            "rating": self.rating,
            "reviews": self.reviews,
            "specialisation": self.specialisation,
            "beds": self.beds,
            "schemes": self.insurance_schemes,
            "coordinates": {"lat": self.latitude, "lon": self.longitude},
        }


@dataclass(frozen=True)
class ScoredHospital:
    hospital: HospitalRecord
    score: float
    distance_km: Optional[float] = None
    components: dict = field(default_factory=dict)

    @property
    def scheme_names(self):
        return self.hospital.scheme_names

    def to_dict(self):
        payload = self.hospital.to_dict()
        payload["distance_km"] = round(self.distance_km, 2) if self.distance_km is not None else None
        payload["score"] = round(self.score, 3)
        return payload


@dataclass(frozen=True)
class PatientProfile:
    condition: str
    bpl_status: str = ""
    disabled: str = ""
    age: int = 0
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def below_poverty_line(self):
        return self.bpl_status == "below"

    @property
    def is_disabled(self):
        return self.disabled == "yes"

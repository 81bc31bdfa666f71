"""
Pytest fixtures for the referral service tests.
"""
import pytest

from database import ReferralStore
from models import HospitalRecord


def make_hospital(hospital_id="Test Hospital", **overrides):
    fields = {
        "id": hospital_id,
        "city": "Anantapur",
        "state": "Andhra Pradesh",
        "district": "Ananthapuramu",
        "latitude": 14.6819,
        "longitude": 77.6006,
        "rating": 4.0,
        "specialisation": "Cardiology",
        "beds": 200,
        "insurance_schemes": "AB-PMJAY, CGHS",
        "reviews": 100,
    }
    fields.update(overrides)
    return HospitalRecord(**fields)


@pytest.fixture
def hospital_factory():
    return make_hospital


@pytest.fixture
def sample_catalog():
    """Small catalog spanning a few cities and specialisations"""
    return (
        make_hospital(
            "Anantapur General",
            rating=3.9,
            specialisation="General Medicine, Orthopedics",
            insurance_schemes="AB-PMJAY, NHM, OPD",
        ),
        make_hospital(
            "Kurnool Heart Centre",
            city="Kurnool",
            latitude=15.8281,
            longitude=78.0373,
            rating=4.1,
            specialisation="Cardiology, Neurology",
            insurance_schemes="AB-PMJAY, NRHM, CGHS",
        ),
        make_hospital(
            "Bengaluru Cardiac Institute",
            city="Bengaluru",
            state="Karnataka",
            latitude=12.9177,
            longitude=77.5990,
            rating=4.7,
            specialisation="Cardiology",
            insurance_schemes="CGHS, Yeshasvini",
        ),
        make_hospital(
            "Hyderabad Oncology",
            city="Hyderabad",
            state="Telangana",
            latitude=17.3953,
            longitude=78.4569,
            rating=4.2,
            specialisation="Oncology",
            insurance_schemes="AB-PMJAY, NHA, AIIMS",
        ),
    )


class FakeExplainer:
    def __init__(self, text="These hospitals match the patient's needs."):
        self.text = text
        self.calls = []

    def explain(self, patient, ranked):
        self.calls.append((patient, ranked))
        return self.text


class FakeNearbyLookup:
    def __init__(self, hospitals=None):
        self.hospitals = hospitals if hospitals is not None else []
        self.calls = []

    def find_nearby(self, lat, lon, radius_km):
        self.calls.append((lat, lon, radius_km))
        return list(self.hospitals)


@pytest.fixture
def fake_explainer():
    return FakeExplainer()


@pytest.fixture
def fake_nearby():
    return FakeNearbyLookup(
        [
            {
                "osm_id": 101,
                "name": "City Care Hospital",
                "lat": 14.69,
                "lon": 77.61,
                "distance_km": 1.42,
                "address": "Main Road, Anantapur",
                "phone": None,
                "website": None,
                "emergency": "yes",
            }
        ]
    )


@pytest.fixture
def client(sample_catalog, fake_explainer, fake_nearby):
    """Flask test client with in-process collaborators"""
    from app import app

    keys = ("HOSPITAL_CATALOG", "REFERRAL_STORE", "TEXT_EXPLAINER", "NEARBY_LOOKUP")
    previous = {key: app.config.get(key) for key in keys}

    app.config.update(
        TESTING=True,
        HOSPITAL_CATALOG=sample_catalog,
        REFERRAL_STORE=ReferralStore(),
        TEXT_EXPLAINER=fake_explainer,
        NEARBY_LOOKUP=fake_nearby,
    )
    with app.test_client() as test_client:
        yield test_client

    app.config.update(previous)

"""
Tests for catalog loading, record defaults and the referral store.
"""
import json
import re

import pytest

from config import HOSPITAL_DATA_PATH
from database import CatalogLoadError, ReferralStore, load_hospital_catalog
from models import HospitalRecord


def _write_catalog(tmp_path, entries):
    path = tmp_path / "hospital.json"
    path.write_text(json.dumps(entries), encoding="utf-8")
    return path


def test_record_from_full_entry():
    record = HospitalRecord.from_dict(
        {
            "id": "NIMHANS",
            "City": "Bengaluru",
            "State": "Karnataka",
            "District": "Bengaluru Urban",
            "Latitude": 12.9431,
            "Longitude": "77.5968",
            "Rating": 4.6,
            "Specialisation": "Neurology, Psychiatry",
            "No of Beds": 900,
            "Insurance Schemes": "CGHS, AB-PMJAY",
            "Number of Reviews": 4410,
        }
    )

    assert record.longitude == pytest.approx(77.5968)
    assert record.specialisation_tags == ["neurology", "psychiatry"]
    assert record.scheme_names == ["CGHS", "AB-PMJAY"]
    assert record.beds == 900


def test_record_defaults_for_missing_fields():
    record = HospitalRecord.from_dict({"id": "Bare Clinic", "Rating": None, "No of Beds": "many"})

    assert record.rating == 0.0
    assert record.specialisation == ""
    assert record.insurance_schemes == ""
    assert record.latitude is None
    assert record.beds == 0
    assert record.specialisation_tags == [""]
    assert record.scheme_names == [""]


def test_record_is_immutable():
    record = HospitalRecord.from_dict({"id": "Frozen"})

    with pytest.raises(AttributeError):
        record.rating = 5.0


def test_load_catalog_preserves_file_order(tmp_path):
    path = _write_catalog(tmp_path, [{"id": "B", "Rating": 3}, {"id": "A", "Rating": 4}, "junk"])

    catalog = load_hospital_catalog(path)

    assert isinstance(catalog, tuple)
    assert [h.id for h in catalog] == ["B", "A"]
    assert catalog[0].rating == 3.0


def test_load_empty_catalog(tmp_path):
    assert load_hospital_catalog(_write_catalog(tmp_path, [])) == ()


def test_load_missing_catalog(tmp_path):
    with pytest.raises(CatalogLoadError):
        load_hospital_catalog(tmp_path / "missing.json")


def test_load_invalid_json(tmp_path):
    path = tmp_path / "hospital.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(CatalogLoadError):
        load_hospital_catalog(path)


def test_load_non_list_catalog(tmp_path):
    with pytest.raises(CatalogLoadError):
        load_hospital_catalog(_write_catalog(tmp_path, {"id": "Only"}))


def test_bundled_catalog_loads():
    catalog = load_hospital_catalog(HOSPITAL_DATA_PATH)

    assert len(catalog) > 0
    assert all(0.0 <= h.rating <= 5.0 for h in catalog)


def test_referral_store_create_and_get():
    store = ReferralStore()

    record = store.create({"patient_name": "Asha", "priority": "HIGH"})

    assert re.fullmatch(r"REF-[0-9A-F]{8}", record["referral_id"])
    assert store.get(record["referral_id"]) == record
    assert len(store) == 1


def test_referral_store_unknown_id():
    assert ReferralStore().get("REF-00000000") is None


def test_referral_ids_are_unique():
    store = ReferralStore()

    ids = {store.create({"n": index})["referral_id"] for index in range(50)}

    assert len(ids) == 50
    assert len(store) == 50

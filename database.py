import json
import logging
import threading
import uuid
from pathlib import Path

from config import HOSPITAL_DATA_PATH
from models import HospitalRecord

logger = logging.getLogger(__name__)


class CatalogLoadError(RuntimeError):
    """Raised when the hospital catalog file cannot be read or parsed."""


def load_hospital_catalog(path=None):
    """
    Read the hospital catalog JSON array once and return it as an immutable
    tuple of HospitalRecord, in file order.
    """
    data_file = Path(path or HOSPITAL_DATA_PATH)
    try:
        raw = json.loads(data_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.error("Could not load hospital catalog from %s: %s", data_file, exc)
        raise CatalogLoadError(f"Could not load {data_file}: {exc}") from exc

    if not isinstance(raw, list):
        raise CatalogLoadError(f"{data_file} must contain a JSON array of hospitals")

    catalog = tuple(HospitalRecord.from_dict(entry) for entry in raw if isinstance(entry, dict))
    logger.info("Loaded %d hospitals from %s", len(catalog), data_file)
    return catalog


def new_referral_id():
    return "REF-" + uuid.uuid4().hex[:8].upper()


class ReferralStore:
    """
    Process-lifetime referral records keyed by referral id.

    Records are never evicted, so memory grows with every referral.
    """

    def __init__(self):
        self._records = {}
        self._lock = threading.Lock()

    def create(self, record):
        referral_id = new_referral_id()
        stored = {"referral_id": referral_id, **record}
        with self._lock:
            self._records[referral_id] = stored
        return stored

    def get(self, referral_id):
        with self._lock:
            return self._records.get(referral_id)

    def __len__(self):
        with self._lock:
            return len(self._records)

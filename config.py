import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

load_dotenv(BASE_DIR / ".env")

GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.0-flash")

HOSPITAL_DATA_PATH = os.environ.get("HOSPITAL_DATA_PATH", str(BASE_DIR / "data" / "hospital.json"))
TOP_N_HOSPITALS = int(os.environ.get("TOP_N_HOSPITALS", 5))
NEARBY_TOP_N = int(os.environ.get("NEARBY_TOP_N", 10))

OVERPASS_URL = os.environ.get("OVERPASS_URL", "https://overpass-api.de/api/interpreter")
OVERPASS_TIMEOUT_SECONDS = float(os.environ.get("OVERPASS_TIMEOUT_SECONDS", 8))
REFERRAL_NEARBY_RADIUS_KM = int(os.environ.get("REFERRAL_NEARBY_RADIUS_KM", 30))
NEARBY_DEFAULT_RADIUS_KM = int(os.environ.get("NEARBY_DEFAULT_RADIUS_KM", 50))

PORT = int(os.environ.get("PORT", 8000))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

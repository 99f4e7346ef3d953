"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    return float(os.environ.get(name, str(default)))


def _env_bool(name: str, default: bool = False) -> bool:
    return os.environ.get(name, str(default)).lower() == "true"


# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("SR_DB_PATH", PROJECT_ROOT / "data" / "db" / "service-reports.db"))
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# SOURCE DOCUMENT LAYOUT
# =============================================================================

SPREADSHEET_SHEET = "EFSR"
SPREADSHEET_TRAVEL_ROWS = range(32, 34)
SPREADSHEET_TIME_ROWS = range(41, 48)

VARIANT_SPREADSHEET = "spreadsheet"
VARIANT_TEXT_A = "text-variant-A"
VARIANT_TEXT_B = "text-variant-B"
VARIANTS = (VARIANT_SPREADSHEET, VARIANT_TEXT_A, VARIANT_TEXT_B)

# =============================================================================
# HOME BASE & NAME FILTERS
# =============================================================================

HOME_BASE_LOCATION = os.environ.get("HOME_BASE_LOCATION", "Gilbert, AZ")
# Departure locations containing any of these (case-insensitive) are home base
HOME_BASE_KEYWORDS = tuple(
    k.strip().lower()
    for k in os.environ.get("HOME_BASE_KEYWORDS", HOME_BASE_LOCATION).split(",")
    if k.strip()
)
OFFICE_EMAIL = os.environ.get("OFFICE_EMAIL", "Josh@JTIAZ.com")

# Signatory names printed on reports; never a customer location or narrative
SIGNATORY_NAMES = ("Todd Beckerdite", "Dan Snider")
EXCLUDED_LOCATION_TOKENS = ("Gilbert", "GILBERT", "Josh", "Lemmons", "Todd")
NARRATIVE_TERMINATORS = ("Accepted By", "TRAVEL ITINERARY") + SIGNATORY_NAMES

DEFAULT_ONSITE_START = "7:00"
DEFAULT_ONSITE_END = "17:00"

# =============================================================================
# RATES
# =============================================================================

STRAIGHT_RATE = _env_float("STRAIGHT_RATE", 120)
OVERTIME_RATE = _env_float("OVERTIME_RATE", 180)
DOUBLE_RATE = _env_float("DOUBLE_RATE", 240)
WEEKDAY_TRAVEL_RATE = _env_float("WEEKDAY_TRAVEL_RATE", 80)
SATURDAY_TRAVEL_RATE = _env_float("SATURDAY_TRAVEL_RATE", 120)
SUNDAY_TRAVEL_RATE = _env_float("SUNDAY_TRAVEL_RATE", 160)
STRAIGHT_HOURS_PER_DAY = _env_float("STRAIGHT_HOURS_PER_DAY", 8)

PER_DIEM_OVERNIGHT = _env_float("PER_DIEM_OVERNIGHT", 220)
PER_DIEM_LOCAL = _env_float("PER_DIEM_LOCAL", 65)
MILEAGE_RATE = _env_float("MILEAGE_RATE", 0.63)

HOLIDAY_TRAVEL_AS_SUNDAY = _env_bool("HOLIDAY_TRAVEL_AS_SUNDAY")

# =============================================================================
# PARSING
# =============================================================================

STRICT_PARSING = _env_bool("STRICT_PARSING")

# =============================================================================
# API CONFIGURATION
# =============================================================================

SR_API_KEY = os.environ.get("SR_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
MAX_UPLOAD_SIZE_MB = int(os.environ.get("MAX_UPLOAD_SIZE_MB", "50"))
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024
API_VERSION = "1.0.0"

SPREADSHEET_EXTENSIONS = (".xlsx", ".xlsm")
PDF_EXTENSIONS = (".pdf",)

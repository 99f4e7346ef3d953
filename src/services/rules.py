"""
Field extraction rules for service report text.

Each field is a FieldRule: an ordered list of candidate patterns and the
capture group holding the value. The first pattern that yields an acceptable
match wins. Variant rule tables are dicts so a later template can override
individual fields of an earlier one.

Patterns may reference values found earlier with <<name>> placeholders
(e.g. the contact name printed just before the title). A pattern whose
placeholder has no value is skipped.
"""

import re
from dataclasses import dataclass
from typing import Callable

from core.config import (
    EXCLUDED_LOCATION_TOKENS,
    NARRATIVE_TERMINATORS,
    OFFICE_EMAIL,
    VARIANT_TEXT_A,
    VARIANT_TEXT_B,
)
from core.errors import FieldNotFound
from core.timeutils import DAY_ABBREVIATIONS, DAY_NAMES

PLACEHOLDER_RE = re.compile(r"<<(\w+)>>")


def strip_commas(value: str) -> str:
    return value.replace(",", "")


def normalize_location(value: str) -> str:
    """'Portland,  OR' -> 'Portland, OR'."""
    city, _, state = value.partition(",")
    return f"{city.strip()}, {state.strip()}"


@dataclass(frozen=True)
class FieldRule:
    """Ordered candidate patterns for one field, first match wins."""

    name: str
    patterns: tuple[str, ...]
    group: int = 1
    flags: int = 0
    exclude: tuple[str, ...] = ()  # reject matches containing any of these
    postprocess: Callable[[str], str] | None = None

    def find(self, text: str, **context: str) -> str:
        """
        Return the first acceptable match.

        Raises:
            FieldNotFound: No pattern matched
        """
        for pattern in self.patterns:
            pattern = self._fill(pattern, context)
            if pattern is None:
                continue
            for match in re.finditer(pattern, text, self.flags):
                value = (match.group(self.group) or "").strip()
                if not value:
                    continue
                if any(token in value for token in self.exclude):
                    continue
                return self.postprocess(value) if self.postprocess else value
        raise FieldNotFound(f"No match for field '{self.name}'")

    @staticmethod
    def _fill(pattern: str, context: dict[str, str]) -> str | None:
        names = PLACEHOLDER_RE.findall(pattern)
        for name in names:
            value = context.get(name)
            if not value:
                return None
            pattern = pattern.replace(f"<<{name}>>", re.escape(value))
        return pattern


def read_field(rule: FieldRule, text: str, default: str = "", **context: str) -> str:
    """Apply a rule, returning default when nothing matches."""
    try:
        return rule.find(text, **context)
    except FieldNotFound:
        return default


# =============================================================================
# SHARED STRUCTURAL PATTERNS
# =============================================================================

DAY_NAMES_ALT = "|".join(DAY_NAMES)
DAY_ABBREVIATIONS_ALT = "|".join(DAY_ABBREVIATIONS)

TIME_ROW_DATE = r"\d{2}/\d{2}/\d{2}"
PUNCH = r"(?:\s+(\d{1,2}:\d{2})(?![\d:]))?"
TOTAL = r"(?:\s+(\d+(?:\.\d+)?|\.\d+)(?![\d/:.]))?"


def time_row_pattern(day: str) -> re.Pattern:
    """Weekday time row: 'Mon 09/16/24 7:00 12:00 12:30 16:00 0 8.5 8.5 8 0.5'."""
    return re.compile(
        rf"\b{day}\.?\s+({TIME_ROW_DATE})" + PUNCH * 4 + TOTAL * 5,
        re.IGNORECASE,
    )


TIME_ROW_PATTERNS = {day: time_row_pattern(day) for day in DAY_ABBREVIATIONS}

_TERMINATORS_ALT = "|".join(re.escape(t) for t in NARRATIVE_TERMINATORS)

# 'Monday 9/16- Replaced bearing ...' up to the next day block or a terminator
SERVICE_NOTE_RE = re.compile(
    rf"\b(?:{DAY_NAMES_ALT})\s+(\d{{1,2}}/\d{{1,2}})-\s*(.*?)"
    rf"(?=\b(?:{DAY_NAMES_ALT})\s+\d{{1,2}}/\d{{1,2}}"
    rf"|\b(?:{DAY_ABBREVIATIONS_ALT})\.?\s+{TIME_ROW_DATE}"
    rf"|{_TERMINATORS_ALT}|$)",
    re.IGNORECASE | re.DOTALL,
)

_LOCATION_WORDS = r"[A-Za-z][\w\s,]*?"

# 'Monday 6/20/2022 5:00 MST Gilbert, AZ 13:30 PST Portland, OR'
ITINERARY_RE = re.compile(
    rf"\b(?:{DAY_NAMES_ALT})\s+(\d{{1,2}}/\d{{1,2}}/\d{{4}})"
    rf"\s+(\d{{1,2}}:\d{{2}})\s+([A-Za-z]+)\s+({_LOCATION_WORDS})"
    rf"\s+(\d{{1,2}}:\d{{2}})\s+([A-Za-z]+)\s+({_LOCATION_WORDS})"
    rf"(?=\s*(?:\b(?:{DAY_NAMES_ALT})\b|\b(?:{DAY_ABBREVIATIONS_ALT})\.?\s+{TIME_ROW_DATE}"
    rf"|\bTRAVEL\b|\bTIME\b|$))",
    re.IGNORECASE,
)

# =============================================================================
# FIELD PATTERNS
# =============================================================================

STREET_SUFFIXES = (
    "Road|Street|Avenue|Drive|Lane|Way|Boulevard|Court|Place|Rd|St|Ave|Dr|Ln|Blvd"
)
COMPANY_BEFORE_STREET = (
    rf"([A-Z][A-Za-z\s&.']+?)\s+\d{{2,5}}\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\s+(?:{STREET_SUFFIXES})\b"
)
STREET_ADDRESS = rf"(\d+\s+[A-Za-z]+(?:\s+[A-Za-z]+)*?\s+(?:{STREET_SUFFIXES}))\b"
CITY_STATE = r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?,\s*[A-Z]{2}\b"
KNOWN_TITLES = (
    r"Maintenance Manager|Plant Manager|Facilities Manager|Operations Manager"
    r"|Production Manager|Engineering Manager"
)
PURPOSE_KEYWORDS = r"Audit|Repair|Install|Service|Maintenance|Training"
PURPOSE_LABEL = (
    rf"Purpose of Service Call\s+(.+?)(?=\s+SERVICE PERFORMED|\s+(?:{DAY_NAMES_ALT})\b|$)"
)
SIGNATURE = (
    r"([A-Z][a-z]+\s+[A-Z][a-z]+)\s+((?:[A-Z][a-z]+\s*)+)\s+\$[\d,]+\.\d+\s+\$[\d,]+\.\d+"
)
SR_NUMBER_PATTERNS = (r"SR#\s*(\d{7})", r"SR#(\d{7})", r"\b(\d{7})\b")

VARIANT_A_RULES: dict[str, FieldRule] = {
    "sr_number": FieldRule("sr_number", SR_NUMBER_PATTERNS),
    "company": FieldRule(
        "company",
        (
            rf"{re.escape(OFFICE_EMAIL)}\s+([A-Za-z0-9\s&.'-]+?)\s+\d{{1,2}}/\d{{1,2}}/\d{{4}}",
            COMPANY_BEFORE_STREET,
        ),
    ),
    "address": FieldRule("address", (STREET_ADDRESS,), flags=re.IGNORECASE),
    "contact": FieldRule("contact", (SIGNATURE,)),
    "title": FieldRule("title", (SIGNATURE,), group=2),
    "location": FieldRule(
        "location",
        (CITY_STATE,),
        group=0,
        exclude=EXCLUDED_LOCATION_TOKENS,
        postprocess=normalize_location,
    ),
    "purpose": FieldRule(
        "purpose",
        (
            rf"<<location>>\s+((?:{PURPOSE_KEYWORDS}).*?)(?=\s*(?:{CITY_STATE}|SERVICE|Date\b|$))",
            PURPOSE_LABEL,
        ),
        flags=re.IGNORECASE,
    ),
    "equipment": FieldRule("equipment", (r"([A-Z]{2,}[-/\w\s]+\d{6,})\s+Equipment Model",)),
    "straight_hours": FieldRule(
        "straight_hours", (r"Straight Time\s+([\d.]+)\s+Hours",), flags=re.IGNORECASE
    ),
    "overtime_hours": FieldRule(
        "overtime_hours", (r"Saturday/Overtime\s+([\d.]+)\s+Hours",), flags=re.IGNORECASE
    ),
    "weekday_travel_hours": FieldRule(
        "weekday_travel_hours", (r"Weekday Travel\s+([\d.]+)\s+Hours",), flags=re.IGNORECASE
    ),
    "per_diem_days": FieldRule(
        "per_diem_days", (r"Per Diem Days\s+(\d+)\s+x\s+\$(\d+)\s+/Day",)
    ),
    "per_diem_rate": FieldRule(
        "per_diem_rate", (r"Per Diem Days\s+(\d+)\s+x\s+\$(\d+)\s+/Day",), group=2
    ),
    "auto_rental": FieldRule(
        "auto_rental",
        (
            r"Auto Rental.*?Fuel(?:\s+Cost)?\s+\$([\d,]+\.\d+)",
            r"\$(\d{3}\.\d{2})\s+\$\d{1,3},?\d{3}\.\d{2}",
        ),
        postprocess=strip_commas,
    ),
    "air_transport": FieldRule(
        "air_transport",
        (r"Air Transportation\s+\$([\d,]+\.\d+)",),
        flags=re.IGNORECASE,
        postprocess=strip_commas,
    ),
}

# Newer template: values sit in a right-hand column, printed before their labels
VARIANT_B_RULES: dict[str, FieldRule] = {
    **VARIANT_A_RULES,
    "sr_number": FieldRule(
        "sr_number", (r"(\d{7})\s+SERVICE REPORT #",) + SR_NUMBER_PATTERNS
    ),
    "company": FieldRule("company", (COMPANY_BEFORE_STREET,)),
    "title": FieldRule("title", (KNOWN_TITLES,), group=0, flags=re.IGNORECASE),
    "contact": FieldRule("contact", (r"([A-Z][a-z]+\s+[A-Z][a-z]+)\s+<<title>>",)),
    "purpose": FieldRule("purpose", (PURPOSE_LABEL,), flags=re.IGNORECASE | re.DOTALL),
    "auto_rental": FieldRule(
        "auto_rental",
        (r"Auto Rental.*?Fuel Cost\s+\$([\d,]+\.\d+)",),
        flags=re.IGNORECASE,
        postprocess=strip_commas,
    ),
}

VARIANT_RULES = {
    VARIANT_TEXT_A: VARIANT_A_RULES,
    VARIANT_TEXT_B: VARIANT_B_RULES,
}

"""
Field extraction for OCR'd PAN cards.

Each field has an ordered list of independent rules. A rule is a regex run
over the upper-cased text; the first candidate that survives the field's
converter wins. Fields never depend on each other, and a field that no rule
matches is reported as NOT_FOUND.
"""
import logging
import re
from datetime import date, datetime
from typing import Callable, Iterable, List, NamedTuple, Optional
from schemas.ocr_schema import ExtractedPanData, NOT_FOUND

logger = logging.getLogger(__name__)

PAN_REGEX = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")
ISO_DATE_REGEX = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
MIN_BIRTH_DATE = date(1900, 1, 1)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 50
NAME_NOISE_WORDS = (
    "PAN", "DATE", "INCOME", "TAX", "DEPARTMENT",
    "GOVT", "INDIA", "PERMANENT", "ACCOUNT", "NUMBER", "SIGNATURE", "FATHER",
    "NAME", "BIRTH", "CARD",
)

# OCR look-alikes, by the character class the PAN position requires
_TO_LETTER = str.maketrans({"0": "O", "1": "I", "2": "Z", "5": "S", "6": "G", "8": "B"})
_TO_DIGIT = str.maketrans({"O": "0", "D": "0", "I": "1", "L": "1", "Z": "2", "S": "5", "G": "6", "B": "8"})


class ExtractionRule(NamedTuple):
    label: str
    pattern: re.Pattern


_NAME_VALUE = r"[ \t]*[:\-]?[ \t]*\n?[ \t]*([A-Z][A-Z .]{2,})"
_DATE_VALUE = r"[:\s]*(\d{2}[/-]\d{2}[/-]\d{4})"

PAN_RULES = [
    ExtractionRule("pan-format", re.compile(r"[A-Z]{5}[0-9]{4}[A-Z]")),
    ExtractionRule("pan-label", re.compile(r"\bPAN[:\s]*([A-Z0-9]{10})\b")),
    ExtractionRule("pan-long-label", re.compile(r"PERMANENT[:\s]*ACCOUNT[:\s]*NUMBER[:\s]*([A-Z0-9]{10})\b")),
]

NAME_RULES = [
    ExtractionRule("card-holder-name", re.compile(r"CARD\s*HOLDER\s*NAME" + _NAME_VALUE)),
    ExtractionRule("holder-name", re.compile(r"HOLDER\s*NAME" + _NAME_VALUE)),
    ExtractionRule("name", re.compile(r"(?<!FATHER'S )(?<!FATHERS )(?<!FATHER )\bNAME" + _NAME_VALUE)),
]

DOB_RULES = [
    ExtractionRule("date-of-birth", re.compile(r"DATE\s*OF\s*BIRTH" + _DATE_VALUE)),
    ExtractionRule("dob", re.compile(r"DOB" + _DATE_VALUE)),
    ExtractionRule("birth-date", re.compile(r"BIRTH\s*DATE" + _DATE_VALUE)),
    ExtractionRule("dd-mm-yyyy", re.compile(r"(?<!\d)(\d{2}[/-]\d{2}[/-]\d{4})(?!\d)")),
    ExtractionRule("yyyy-mm-dd", re.compile(r"(?<!\d)(\d{4}[/-]\d{2}[/-]\d{2})(?!\d)")),
]


def is_valid_pan(value: str) -> bool:
    return bool(value) and PAN_REGEX.match(value) is not None


def parse_iso_date(value: str) -> Optional[date]:
    """Strict YYYY-MM-DD only; None for anything else."""
    if not isinstance(value, str) or not ISO_DATE_REGEX.fullmatch(value.strip()):
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def repair_pan(candidate: str) -> Optional[str]:
    """Fix digit/letter look-alikes by position; None if it still isn't a PAN."""
    candidate = candidate.strip().upper()
    if len(candidate) != 10:
        return None
    repaired = (
        candidate[:5].translate(_TO_LETTER)
        + candidate[5:9].translate(_TO_DIGIT)
        + candidate[9].translate(_TO_LETTER)
    )
    return repaired if is_valid_pan(repaired) else None


def normalize_date(value: str, today: Optional[date] = None) -> Optional[str]:
    """DD/MM/YYYY or YYYY/MM/DD (either separator) to YYYY-MM-DD, or None if not a plausible birth date."""
    parts = re.split(r"[/-]", value.strip())
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None

    if len(parts[0]) == 4:
        year, month, day = parts
    else:
        day, month, year = parts

    try:
        parsed = date(int(year), int(month), int(day))
    except ValueError:
        return None

    today = today or date.today()
    if parsed < MIN_BIRTH_DATE or parsed > today:
        return None
    return parsed.isoformat()


def clean_name(value: str) -> Optional[str]:
    cleaned = " ".join(re.sub(r"[^A-Z\s]", " ", value.upper()).split())
    if not NAME_MIN_LENGTH <= len(cleaned) <= NAME_MAX_LENGTH:
        return None
    if any(word in NAME_NOISE_WORDS for word in cleaned.split()):
        return None
    return cleaned


def apply_rules(
    rules: Iterable[ExtractionRule],
    text: str,
    convert: Callable[[str], Optional[str]],
) -> Optional[str]:
    for rule in rules:
        for match in rule.pattern.finditer(text):
            raw = match.group(1) if match.groups() else match.group(0)
            value = convert(raw)
            if value:
                logger.debug(f"Rule '{rule.label}' matched")
                return value
    return None


def name_from_lines(lines: Iterable[str]) -> Optional[str]:
    """Longest letters-only line that isn't card boilerplate; first one wins a tie."""
    candidates = [
        c for c in (clean_name(line) for line in lines if not re.search(r"\d", line)) if c
    ]
    if not candidates:
        return None
    return max(candidates, key=len)


def extract_pan_data(
    text: str,
    lines: Optional[List[str]] = None,
    confidence: Optional[float] = None,
    today: Optional[date] = None,
) -> ExtractedPanData:
    text = (text or "").upper()
    lines = [line.upper() for line in lines] if lines is not None else text.splitlines()

    pan_number = apply_rules(PAN_RULES, text, repair_pan)
    name = apply_rules(NAME_RULES, text, clean_name) or name_from_lines(lines)
    date_of_birth = apply_rules(DOB_RULES, text, lambda v: normalize_date(v, today))

    return ExtractedPanData(
        pan_number=pan_number or NOT_FOUND,
        name=name or NOT_FOUND,
        date_of_birth=date_of_birth or NOT_FOUND,
        confidence=confidence,
    )

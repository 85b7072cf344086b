from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

STREET_SUFFIXES = {
    "STREET": "ST",
    "ST": "ST",
    "AVENUE": "AVE",
    "AVE": "AVE",
    "DRIVE": "DR",
    "DR": "DR",
    "ROAD": "RD",
    "RD": "RD",
    "BOULEVARD": "BLVD",
    "BLVD": "BLVD",
    "LANE": "LN",
    "LN": "LN",
    "PIKE": "PIKE",
    "PK": "PIKE",
    "COURT": "CT",
    "CT": "CT",
    "CIRCLE": "CIR",
    "CIR": "CIR",
}

# city names as they trail a typed address, per metro
CITY_GAZETTEER = {
    "nashville": [
        "NASHVILLE", "CLARKSVILLE", "FRANKLIN", "MURFREESBORO", "GALLATIN",
        "SMYRNA", "COLUMBIA", "LEBANON", r"MT\.?\s*JULIET", "HENDERSONVILLE",
        "BRENTWOOD", r"SPRING\s*HILL", r"LA\s*VERGNE",
    ],
    "dfw": [
        "DALLAS", r"FORT\s*WORTH", "ARLINGTON", "IRVING", "PLANO", "GARLAND",
        "MESQUITE", "CARROLLTON", "RICHARDSON", r"GRAND\s*PRAIRIE", "DENTON",
        "MCKINNEY", "FRISCO", "ALLEN", "LEWISVILLE", r"FLOWER\s*MOUND",
        "EULESS", "BEDFORD", "HURST",
    ],
}

STATE_ABBRS = ("TN", "TX")

_HOUSE_NUMBER_RE = re.compile(r"^(\d+)\s+(.+)$", re.DOTALL)

_SUFFIX_RE = re.compile(
    r"\b(" + "|".join(sorted(STREET_SUFFIXES, key=len, reverse=True)) + r")\b\.?$"
)

_CITIES = "|".join(c for cities in CITY_GAZETTEER.values() for c in cities)

# ", CITY ..." drops the city and whatever follows it (ZIP, spelled-out state,
# country); a bare " CITY" only counts as the last token
_CITY_RE = re.compile(r"(?:,\s*(?:" + _CITIES + r")\b.*|\s+(?:" + _CITIES + r"))$")

_STATE_ZIP_RE = re.compile(
    r",?\s*\b(?:" + "|".join(STATE_ABBRS) + r")\b\.?\s*(?:\d{5}(?:-\d{4})?)?$"
)


@dataclass(frozen=True)
class StructuredAddress:
    house_number: Optional[str]
    street_name: str
    text: str  # uppercased, trimmed input

    @property
    def has_number(self) -> bool:
        return bool(self.house_number)


def _strip_locality(s: str) -> str:
    s = _STATE_ZIP_RE.sub("", s).strip()
    s = _CITY_RE.sub("", s).strip()
    return s.rstrip(",").strip()


def _canonical_suffix(s: str) -> str:
    return _SUFFIX_RE.sub(lambda m: STREET_SUFFIXES[m.group(1)], s)


def normalize_address(raw: str | None) -> StructuredAddress:
    """
    Reduce a typed address to house number + street core.

    Upstream address fields are matched with LIKE '%...%', so the goal is
    substring recall, not a mailing-grade address:

      "1200 Main Street, Nashville, TN 37203" -> ("1200", "MAIN ST")
      "4th Ave North"                         -> (None, "4TH AVE NORTH")
    """
    clean = (raw or "").strip().upper()
    m = _HOUSE_NUMBER_RE.match(clean)
    if not m:
        return StructuredAddress(house_number=None, street_name=clean, text=clean)

    street = _canonical_suffix(_strip_locality(m.group(2).strip()))
    return StructuredAddress(house_number=m.group(1), street_name=street.strip(), text=clean)


def sanitize(value: str | None) -> str:
    """
    Escape a token for a single-quoted filter literal: ' -> '' and drop ; and -.

    Only adequate for the LIKE / substringof literals used by the ArcGIS,
    OData and SoQL resources configured here. Re-check quoting rules before
    pointing it at another backend.
    """
    s = (value or "").replace("'", "''")
    s = re.sub(r"[;\-]", "", s)
    return s.strip()


def search_term(parsed: StructuredAddress) -> str:
    """Keyword used for free-text resources inside a brief: street core, else full input."""
    return parsed.street_name or parsed.text

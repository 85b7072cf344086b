"""
Signal scoring: a bounded 1-10 heat score for one site brief.

Pure functions over the brief's source outcomes. Each jurisdiction profile is
an ordered list of checks; a triggered check adds its weight and a factor
line. Failed or missing sources trigger nothing.

All weights, thresholds and ladders below are policy constants. Changing any
of them changes every score.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .models import Label, SignalScore, SourceOutcome

SourceMap = Mapping[str, SourceOutcome]
Check = Callable[[SourceMap], Optional[str]]

# ---- Policy constants ----

BASE_SCORE = 1
MIN_SCORE = 1
MAX_SCORE = 10

# value >= threshold -> label, first match wins
LABEL_LADDER: Tuple[Tuple[int, Label], ...] = (
    (8, Label.HOT),
    (6, Label.WARM),
    (4, Label.MODERATE),
)
DEFAULT_LABEL = Label.COOL

HIGH_VALUE_PERMIT_COST = 500_000

COMMERCIAL_ZONE_PREFIXES: Tuple[str, ...] = (
    "CS", "CL", "CF", "CC", "SCR", "MUL", "MUN", "MUG", "OR", "OL", "OG", "IWD", "IG", "IR",
)
RESIDENTIAL_ZONE_PREFIX = "R"

ACTIVE_MATTER_TERMS: Tuple[str, ...] = ("hearing", "committee", "filed")

METRO_WEIGHTS: Dict[str, int] = {
    "property_found": 1,
    "commercial_zoning": 1,
    "recorded_sale": 1,
    "permits": 1,
    "high_value_permits": 1,
    "pending_applications": 1,
    "planning_cases": 1,
    "legislative_matters": 1,
    "active_matters": 1,
}

COUNTY_WEIGHTS: Dict[str, int] = {
    "property_found": 2,
    "non_residential_zoning": 2,
    "recorded_sale": 1,
}

DFW_WEIGHTS: Dict[str, int] = {
    "property_found": 1,
    "permits": 1,
    "high_value_permits": 1,
    "legislative_matters": 1,
    "active_matters": 1,
}

COUNTY_NOTE = "Limited to parcel data. Legislation monitoring available for Davidson County."


# ---- Body readers ----


def _body(sources: SourceMap, name: str) -> Any:
    outcome = sources.get(name)
    if outcome is None or not outcome.ok:
        return None
    return outcome.data


def _attributes(sources: SourceMap, name: str) -> List[Dict[str, Any]]:
    """ArcGIS-style {"features": [{"attributes": {...}}]} -> list of attribute dicts."""
    body = _body(sources, name)
    feats = body.get("features") if isinstance(body, dict) else None
    if not isinstance(feats, list):
        return []
    out = []
    for f in feats:
        attrs = f.get("attributes") if isinstance(f, dict) else None
        out.append(attrs if isinstance(attrs, dict) else {})
    return out


def _rows(sources: SourceMap, name: str) -> List[Dict[str, Any]]:
    """Plain JSON array bodies (Legistar matters)."""
    body = _body(sources, name)
    if not isinstance(body, list):
        return []
    return [r if isinstance(r, dict) else {} for r in body]


def _number(value: Any) -> float:
    if isinstance(value, bool):
        return 0
    try:
        return float(str(value).replace(",", "").replace("$", "").strip())
    except (TypeError, ValueError):
        return 0


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


# ---- Check factories ----


def record_found(source: str, factor: str) -> Check:
    def check(sources: SourceMap) -> Optional[str]:
        return factor if _attributes(sources, source) else None
    return check


def zoning_prefix(source: str, field: str, prefixes: Tuple[str, ...]) -> Check:
    def check(sources: SourceMap) -> Optional[str]:
        feats = _attributes(sources, source)
        zone = _text(feats[0].get(field)).upper() if feats else ""
        if zone and zone.startswith(prefixes):
            return f"Commercial zoning: {zone}"
        return None
    return check


def zoning_not_prefix(source: str, field: str, prefix: str) -> Check:
    def check(sources: SourceMap) -> Optional[str]:
        feats = _attributes(sources, source)
        zone = _text(feats[0].get(field)) if feats else ""
        if zone and not zone.upper().startswith(prefix):
            return f"Commercial zoning: {zone}"
        return None
    return check


def recorded_sale(source: str, field: str, label: str) -> Check:
    def check(sources: SourceMap) -> Optional[str]:
        feats = _attributes(sources, source)
        price = _number(feats[0].get(field)) if feats else 0
        if price > 0:
            return f"{label}: ${price:,.0f}"
        return None
    return check


def feature_count(source: str, template: str) -> Check:
    def check(sources: SourceMap) -> Optional[str]:
        n = len(_attributes(sources, source))
        return template.format(n=n) if n else None
    return check


def high_value(source: str, field: str, threshold: float = HIGH_VALUE_PERMIT_COST) -> Check:
    def check(sources: SourceMap) -> Optional[str]:
        n = sum(1 for a in _attributes(sources, source) if _number(a.get(field)) > threshold)
        if n:
            return f"{n} high-value permit(s) >${threshold / 1000:,.0f}K"
        return None
    return check


def matter_count(source: str) -> Check:
    def check(sources: SourceMap) -> Optional[str]:
        n = len(_rows(sources, source))
        return f"{n} legislative matter(s)" if n else None
    return check


def active_matters(source: str, field: str = "MatterStatusName",
                   terms: Tuple[str, ...] = ACTIVE_MATTER_TERMS) -> Check:
    def check(sources: SourceMap) -> Optional[str]:
        n = 0
        for m in _rows(sources, source):
            status = _text(m.get(field)).lower()
            if any(t in status for t in terms):
                n += 1
        return f"{n} ACTIVE zoning matter(s)" if n else None
    return check


# ---- Profiles ----


@dataclass(frozen=True)
class ScoringProfile:
    name: str
    weights: Mapping[str, int]
    checks: Tuple[Tuple[str, Check], ...]  # (weight key, check), evaluated in order
    note: Optional[str] = None


METRO_PROFILE = ScoringProfile(
    name="metro",
    weights=METRO_WEIGHTS,
    checks=(
        ("property_found", record_found("parcels", "Property identified in database")),
        ("commercial_zoning", zoning_prefix("parcels", "ZoneCode", COMMERCIAL_ZONE_PREFIXES)),
        ("recorded_sale", recorded_sale("parcels", "SalePrice", "Recent sale")),
        ("permits", feature_count("permits", "{n} permit(s) found")),
        ("high_value_permits", high_value("permits", "CONST_COST")),
        ("pending_applications", feature_count("permit-apps", "{n} pending permit application(s)")),
        ("planning_cases", feature_count("planning", "{n} planning case(s)")),
        ("legislative_matters", matter_count("legistar")),
        ("active_matters", active_matters("legistar")),
    ),
)

COUNTY_PROFILE = ScoringProfile(
    name="county",
    weights=COUNTY_WEIGHTS,
    checks=(
        ("property_found", record_found("parcels", "Property identified")),
        ("non_residential_zoning", zoning_not_prefix("parcels", "Zoning", RESIDENTIAL_ZONE_PREFIX)),
        ("recorded_sale", recorded_sale("parcels", "SalesPrice", "Sale recorded")),
    ),
    note=COUNTY_NOTE,
)

DFW_PROFILE = ScoringProfile(
    name="dfw",
    weights=DFW_WEIGHTS,
    checks=(
        ("property_found", record_found("parcels", "Property identified in database")),
        ("permits", feature_count("permits", "{n} permit(s) found")),
        ("high_value_permits", high_value("permits", "Const_Cost")),
        ("legislative_matters", matter_count("legistar")),
        ("active_matters", active_matters("legistar")),
    ),
)

PROFILES: Dict[str, ScoringProfile] = {
    p.name: p for p in (METRO_PROFILE, COUNTY_PROFILE, DFW_PROFILE)
}


# ---- Engine ----


def label_for(value: int) -> Label:
    for threshold, label in LABEL_LADDER:
        if value >= threshold:
            return label
    return DEFAULT_LABEL


def score(sources: SourceMap, profile: Union[str, ScoringProfile] = METRO_PROFILE) -> SignalScore:
    """Score a brief's sources; same inputs always give the same SignalScore."""
    if isinstance(profile, str):
        try:
            profile = PROFILES[profile]
        except KeyError:
            raise ValueError(f"Unknown scoring profile: {profile}") from None

    total = BASE_SCORE
    factors: List[str] = []
    for key, check in profile.checks:
        factor = check(sources)
        if factor is None:
            continue
        total += profile.weights[key]
        factors.append(factor)

    value = max(MIN_SCORE, min(total, MAX_SCORE))
    return SignalScore(
        value=value,
        max_value=MAX_SCORE,
        label=label_for(value),
        factors=factors,
        note=profile.note,
    )

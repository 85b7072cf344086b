from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..jurisdictions import SOQL, Resource
from ..normalize import StructuredAddress, sanitize
from .base import QueryDescriptor, like_pattern


def address_where(resource: Resource, parsed: StructuredAddress) -> str:
    return f"upper({resource.address_field}) LIKE '{like_pattern(parsed).upper()}'"


def keyword_where(resource: Resource, keyword: str) -> str:
    kw = sanitize(keyword).upper()
    return " OR ".join(f"upper({f}) LIKE '%{kw}%'" for f in resource.search_fields)


def _descriptor(resource: Resource, where: str) -> QueryDescriptor:
    return QueryDescriptor(
        endpoint=resource.endpoint,
        filter_expression=where,
        out_fields=resource.out_fields,
        result_limit=resource.result_limit,
        order_by=resource.order_by,
        dialect=SOQL,
    )


def build_address_query(resource: Resource, parsed: StructuredAddress) -> QueryDescriptor:
    return _descriptor(resource, address_where(resource, parsed))


def build_keyword_query(resource: Resource, keyword: str) -> QueryDescriptor:
    return _descriptor(resource, keyword_where(resource, keyword))


# ---- Socrata rows -> ArcGIS-style features ----

def _iso_to_arcgis_ms(value: Any) -> Optional[int]:
    # Socrata floating timestamps look like 2024-01-15T00:00:00.000
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def _to_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def rows_to_features(resource: Resource, rows: Any) -> Dict[str, List[Dict[str, Any]]]:
    """
    Reshape a Socrata row list into {"features": [{"attributes": {...}}]} so
    scoring reads every permit source the same way. Non-list bodies become an
    empty feature list.
    """
    features = []
    for row in rows if isinstance(rows, list) else []:
        if not isinstance(row, dict):
            continue
        attrs: Dict[str, Any] = {}
        for target, column, kind, default in resource.feature_map or ():
            raw = row.get(column)
            if kind == "date":
                attrs[target] = _iso_to_arcgis_ms(raw)
            elif kind == "number":
                attrs[target] = _to_number(raw) if raw not in (None, "") else default
            else:
                attrs[target] = raw or default
        features.append({"attributes": attrs})
    return {"features": features}

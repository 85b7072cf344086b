from __future__ import annotations

from typing import Any, Optional, Tuple

from ..adapters import QueryDescriptor, build_query
from ..adapters.soql import rows_to_features
from ..connectors import SourceClient, get_client
from ..errors import InvalidInput
from ..jurisdictions import KEYWORD, POINT, SOQL, Resource, get_by_id
from ..normalize import normalize_address, sanitize, search_term


def shape_response(resource: Resource, body: Any) -> Any:
    """Bring a raw body into the shape scoring reads (Socrata rows -> features)."""
    if resource.dialect == SOQL and resource.feature_map:
        return rows_to_features(resource, body)
    return body


def fetch(client: SourceClient, resource: Resource, descriptor: QueryDescriptor) -> Any:
    return shape_response(resource, client.fetch_parsed(descriptor))


def _coordinate(name: str, raw: Any) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must be a number", {name: raw}) from None


def resolve_target(
    resource: Resource,
    address: Optional[str] = None,
    keyword: Optional[str] = None,
    lat: Any = None,
    lng: Any = None,
):
    """
    Check the request carries what this resource needs and return the adapter
    target. Raises InvalidInput before any query is built.
    """
    if resource.kind == POINT:
        if lat in (None, "") or lng in (None, ""):
            raise InvalidInput("lat and lng parameters required")
        return (_coordinate("lat", lat), _coordinate("lng", lng))

    if resource.kind == KEYWORD:
        if keyword and keyword.strip():
            if not sanitize(keyword):
                raise InvalidInput("keyword has no searchable characters", {"keyword": keyword})
            return keyword.strip()
        if address and address.strip():
            return search_term(normalize_address(address))
        raise InvalidInput("keyword or address parameter required")

    if not address or not address.strip():
        raise InvalidInput("address parameter required")
    return normalize_address(address)


def lookup(
    jurisdiction_id: str,
    resource_name: str,
    address: Optional[str] = None,
    keyword: Optional[str] = None,
    lat: Any = None,
    lng: Any = None,
    client: Optional[SourceClient] = None,
) -> Tuple[Resource, QueryDescriptor, Any]:
    """
    Query a single resource. Returns (resource, descriptor, body).

    Unlike a brief, an upstream failure propagates as SourceFailure.
    """
    resource = get_by_id(jurisdiction_id).resource(resource_name)
    target = resolve_target(resource, address=address, keyword=keyword, lat=lat, lng=lng)
    descriptor = build_query(resource, target)
    body = fetch(client or get_client(), resource, descriptor)
    return resource, descriptor, body

from __future__ import annotations

from typing import Tuple, Union

from ..jurisdictions import ADDRESS, ARCGIS, KEYWORD, ODATA, POINT, SOQL, Resource
from ..normalize import StructuredAddress, normalize_address, search_term
from . import arcgis, odata, soql
from .base import QueryDescriptor, like_pattern

Target = Union[StructuredAddress, str, Tuple[float, float]]

_ADDRESS_BUILDERS = {
    ARCGIS: arcgis.build_address_query,
    SOQL: soql.build_address_query,
}

_KEYWORD_BUILDERS = {
    ARCGIS: arcgis.build_keyword_query,
    ODATA: odata.build_keyword_query,
    SOQL: soql.build_keyword_query,
}


def build_query(resource: Resource, target: Target) -> QueryDescriptor:
    """
    Turn a normalized address, a keyword or a (lat, lng) point into the
    resource's query dialect. Never raises for a configured resource; missing
    input is rejected by the caller before this point.

    Keyword resources given an address search on its street core.
    """
    if resource.kind == POINT:
        lat, lng = target  # type: ignore[misc]
        return arcgis.build_point_query(resource, lat, lng)

    if resource.kind == KEYWORD:
        keyword = search_term(target) if isinstance(target, StructuredAddress) else str(target)
        return _KEYWORD_BUILDERS[resource.dialect](resource, keyword)

    if resource.kind == ADDRESS:
        parsed = target if isinstance(target, StructuredAddress) else normalize_address(str(target))
        return _ADDRESS_BUILDERS[resource.dialect](resource, parsed)

    raise ValueError(f"Unsupported resource kind: {resource.kind}")


__all__ = ["QueryDescriptor", "build_query", "like_pattern"]

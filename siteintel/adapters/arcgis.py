from __future__ import annotations

from ..jurisdictions import ARCGIS, Resource
from ..normalize import StructuredAddress, sanitize
from .base import QueryDescriptor, like_pattern


def address_where(resource: Resource, parsed: StructuredAddress) -> str:
    return f"{resource.address_field} LIKE '{like_pattern(parsed)}'"


def keyword_where(resource: Resource, keyword: str) -> str:
    kw = sanitize(keyword)
    return " OR ".join(f"{f} LIKE '%{kw}%'" for f in resource.search_fields)


def _descriptor(resource: Resource, where: str, extra=()) -> QueryDescriptor:
    return QueryDescriptor(
        endpoint=resource.endpoint,
        filter_expression=where,
        out_fields=resource.out_fields,
        result_limit=resource.result_limit,
        order_by=resource.order_by,
        dialect=ARCGIS,
        extra_params=tuple(extra),
    )


def build_address_query(resource: Resource, parsed: StructuredAddress) -> QueryDescriptor:
    return _descriptor(resource, address_where(resource, parsed), [("returnGeometry", "false")])


def build_keyword_query(resource: Resource, keyword: str) -> QueryDescriptor:
    return _descriptor(resource, keyword_where(resource, keyword), [("returnGeometry", "false")])


def build_point_query(resource: Resource, lat: float, lng: float) -> QueryDescriptor:
    """Intersect query for the feature under a point (ArcGIS wants x,y = lng,lat)."""
    return _descriptor(
        resource,
        "",
        [
            ("geometry", f"{lng},{lat}"),
            ("geometryType", "esriGeometryPoint"),
            ("spatialRel", "esriSpatialRelIntersects"),
        ],
    )

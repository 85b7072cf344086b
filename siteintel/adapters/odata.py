from __future__ import annotations

from ..jurisdictions import ODATA, Resource
from ..normalize import sanitize
from .base import QueryDescriptor


def keyword_filter(resource: Resource, keyword: str) -> str:
    kw = sanitize(keyword)
    return " or ".join(f"substringof('{kw}',{f})" for f in resource.search_fields)


def build_keyword_query(resource: Resource, keyword: str) -> QueryDescriptor:
    return QueryDescriptor(
        endpoint=resource.endpoint,
        filter_expression=keyword_filter(resource, keyword),
        out_fields=resource.out_fields,
        result_limit=resource.result_limit,
        order_by=resource.order_by,
        dialect=ODATA,
    )

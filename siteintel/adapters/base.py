from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import requests

from ..jurisdictions import ARCGIS, ODATA, SOQL
from ..normalize import StructuredAddress, sanitize


@dataclass(frozen=True)
class QueryDescriptor:
    """
    One backend query, ready for a source client:

      endpoint            query URL without parameters
      filter_expression   where / $filter / $where text ("" for a pure geometry query)
      out_fields          fields to return (empty = backend default)
      result_limit        max rows, None = backend default
      order_by            order clause in the dialect's syntax
      dialect             ARCGIS | ODATA | SOQL
      extra_params        dialect extras (geometry, returnGeometry, ...)
    """
    endpoint: str
    filter_expression: str
    out_fields: Tuple[str, ...]
    result_limit: Optional[int]
    order_by: Optional[str]
    dialect: str
    extra_params: Tuple[Tuple[str, str], ...] = ()

    def params(self) -> Dict[str, str]:
        p: Dict[str, str] = {}
        if self.dialect == ARCGIS:
            if self.filter_expression:
                p["where"] = self.filter_expression
            p["outFields"] = ",".join(self.out_fields) or "*"
            if self.result_limit:
                p["resultRecordCount"] = str(self.result_limit)
            if self.order_by:
                p["orderByFields"] = self.order_by
            p.update(self.extra_params)
            p["f"] = "json"
        elif self.dialect == ODATA:
            p["$filter"] = self.filter_expression
            if self.out_fields:
                p["$select"] = ",".join(self.out_fields)
            if self.result_limit:
                p["$top"] = str(self.result_limit)
            if self.order_by:
                p["$orderby"] = self.order_by
            p.update(self.extra_params)
        elif self.dialect == SOQL:
            p["$where"] = self.filter_expression
            if self.out_fields:
                p["$select"] = ",".join(self.out_fields)
            if self.order_by:
                p["$order"] = self.order_by
            if self.result_limit:
                p["$limit"] = str(self.result_limit)
            p.update(self.extra_params)
        else:
            raise ValueError(f"Unsupported dialect: {self.dialect}")
        return p

    def url(self) -> str:
        req = requests.PreparedRequest()
        req.prepare_url(self.endpoint, self.params())
        return req.url or self.endpoint


def like_pattern(parsed: StructuredAddress) -> str:
    """
    Body of a LIKE literal for an address: '%NUM%STREET%' when a house number
    and street core exist, else '%FULL INPUT%'. Every token is sanitized.
    """
    if parsed.has_number and parsed.street_name:
        return f"%{sanitize(parsed.house_number)}%{sanitize(parsed.street_name)}%"
    return f"%{sanitize(parsed.text)}%"

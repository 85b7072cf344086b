"""Query adapters: one normalized address -> each backend's filter dialect."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from siteintel.adapters import build_query
from siteintel.adapters.soql import rows_to_features
from siteintel.jurisdictions import APIS, ARCGIS, JURISDICTIONS, KEYWORD, ODATA, SOQL, Resource, get_by_id
from siteintel.errors import UnknownJurisdiction, UnknownResource
from siteintel.normalize import normalize_address

DAVIDSON = JURISDICTIONS["davidson"]
MONTGOMERY = JURISDICTIONS["montgomery"]
DALLAS = JURISDICTIONS["dallas"]

NASHVILLE_ADDR = normalize_address("1200 Main Street, Nashville, TN 37203")


class TestArcGIS:
    def test_parcels_with_house_number(self) -> None:
        d = build_query(DAVIDSON.resource("parcels"), NASHVILLE_ADDR)
        assert d.dialect == ARCGIS
        assert d.filter_expression == "PropAddr LIKE '%1200%MAIN ST%'"
        params = d.params()
        assert params["where"] == d.filter_expression
        assert params["outFields"].startswith("PropAddr,PropStreet,PropZip,Owner")
        assert params["resultRecordCount"] == "10"
        assert params["returnGeometry"] == "false"
        assert params["f"] == "json"
        assert "orderByFields" not in params

    def test_without_house_number_degrades_to_full_input(self) -> None:
        d = build_query(DAVIDSON.resource("parcels"), normalize_address("Broadway"))
        assert d.filter_expression == "PropAddr LIKE '%BROADWAY%'"

    def test_quotes_are_escaped(self) -> None:
        d = build_query(DAVIDSON.resource("permits"), normalize_address("O'Neal Lane"))
        assert d.filter_expression == "ADDRESS LIKE '%O''NEAL LANE%'"

    def test_street_core_is_sanitized(self) -> None:
        d = build_query(DAVIDSON.resource("permits"), normalize_address("12 I-40 Ramp; DROP"))
        assert ";" not in d.filter_expression
        assert d.filter_expression == "ADDRESS LIKE '%12%I40 RAMP DROP%'"

    def test_permits_order_and_limit(self) -> None:
        params = build_query(DAVIDSON.resource("permits"), NASHVILLE_ADDR).params()
        assert params["orderByFields"] == "DATE_ISSUED DESC"
        assert params["resultRecordCount"] == "20"
        assert params["outFields"] == "*"

    def test_planning_keyword_is_or_combined(self) -> None:
        d = build_query(DAVIDSON.resource("planning"), "Main St")
        assert d.filter_expression == (
            "Case_Address LIKE '%Main St%' OR Case_Description LIKE '%Main St%'"
        )

    def test_planning_from_address_uses_street_core(self) -> None:
        d = build_query(DAVIDSON.resource("planning"), NASHVILLE_ADDR)
        assert "%MAIN ST%" in d.filter_expression
        assert "1200" not in d.filter_expression

    def test_point_query(self) -> None:
        d = build_query(MONTGOMERY.resource("zoning"), (36.53, -87.36))
        params = d.params()
        assert "where" not in params
        assert params["geometry"] == "-87.36,36.53"
        assert params["geometryType"] == "esriGeometryPoint"
        assert params["spatialRel"] == "esriSpatialRelIntersects"
        assert params["outFields"] == "*"

    def test_montgomery_parcels_have_no_record_limit(self) -> None:
        params = build_query(MONTGOMERY.resource("parcels"), NASHVILLE_ADDR).params()
        assert params["where"] == "PropertyAddress LIKE '%1200%MAIN ST%'"
        assert "resultRecordCount" not in params

    def test_url_is_encoded(self) -> None:
        d = build_query(DAVIDSON.resource("parcels"), NASHVILLE_ADDR)
        url = d.url()
        assert url.startswith(APIS["davidson_parcels"] + "?")
        assert "f=json" in url
        assert "'" not in url


class TestOData:
    def test_legistar_filter(self) -> None:
        d = build_query(DAVIDSON.resource("legistar"), NASHVILLE_ADDR)
        assert d.dialect == ODATA
        assert d.filter_expression == "substringof('MAIN ST',MatterTitle)"
        assert d.params() == {
            "$filter": "substringof('MAIN ST',MatterTitle)",
            "$top": "20",
            "$orderby": "MatterIntroDate desc",
        }

    def test_keyword_quotes(self) -> None:
        d = build_query(DALLAS.resource("legistar"), "Dealey's Plaza")
        assert d.filter_expression == "substringof('Dealey''s Plaza',MatterTitle)"
        assert d.endpoint == APIS["dallas_legistar"]


class TestSoQL:
    def test_dallas_permits(self) -> None:
        d = build_query(DALLAS.resource("permits"), normalize_address("1500 Marilla St, Dallas, TX"))
        assert d.dialect == SOQL
        assert d.filter_expression == "upper(street_address) LIKE '%1500%MARILLA ST%'"
        params = d.params()
        assert params["$where"] == d.filter_expression
        assert params["$order"] == "issued_date DESC"
        assert params["$limit"] == "20"
        assert "$select" not in params

    def test_rows_to_features(self) -> None:
        rows = [
            {
                "permit_number": "BLD-1",
                "permit_type": "Commercial Remodel",
                "issued_date": "2024-01-15T00:00:00.000",
                "value": "600000",
                "work_description": "Tenant finish out",
            },
            "not a row",
        ]
        out = rows_to_features(DALLAS.resource("permits"), rows)
        assert len(out["features"]) == 1
        attrs = out["features"][0]["attributes"]
        assert attrs["Permit__"] == "BLD-1"
        assert attrs["Const_Cost"] == 600000.0
        assert attrs["Date_Issued"] == int(datetime(2024, 1, 15, tzinfo=timezone.utc).timestamp() * 1000)
        assert attrs["Status"] == "Issued"

    def test_rows_to_features_defaults(self) -> None:
        attrs = rows_to_features(DALLAS.resource("permits"), [{}])["features"][0]["attributes"]
        assert attrs["Permit__"] == "\u2014"
        assert attrs["Const_Cost"] == 0
        assert attrs["Date_Issued"] is None
        assert attrs["Purpose"] == ""

    def test_non_list_body(self) -> None:
        assert rows_to_features(DALLAS.resource("permits"), {"error": True}) == {"features": []}

    def test_keyword_resource(self) -> None:
        cases = Resource(
            name="code-cases",
            dialect=SOQL,
            kind=KEYWORD,
            endpoint="https://www.dallasopendata.com/resource/x9pz-kdq9.json",
            search_fields=("description", "address"),
            out_fields=(),
        )
        d = build_query(cases, "Main St; --")
        assert d.filter_expression == (
            "upper(description) LIKE '%MAIN ST%' OR upper(address) LIKE '%MAIN ST%'"
        )
        assert d.params() == {"$where": d.filter_expression, "$limit": "20"}

    def test_keyword_from_address_uses_street_core(self) -> None:
        cases = Resource(name="code-cases", dialect=SOQL, kind=KEYWORD, endpoint="https://example.org/r.json",
                         search_fields=("address",))
        d = build_query(cases, normalize_address("1500 Marilla Street, Dallas, TX"))
        assert d.filter_expression == "upper(address) LIKE '%MARILLA ST%'"


def test_same_input_same_filter() -> None:
    for j in JURISDICTIONS.values():
        for name in j.brief_resources:
            r = j.resource(name)
            a = build_query(r, normalize_address("1200 Main Street, Nashville, TN 37203"))
            b = build_query(r, normalize_address("1200 Main Street, Nashville, TN 37203"))
            assert a.filter_expression == b.filter_expression
            assert a == b


def test_brief_limit_only_applies_inside_a_brief() -> None:
    assert DAVIDSON.resource("parcels").result_limit == 10
    assert DAVIDSON.brief_resource("parcels").result_limit == 5
    assert DAVIDSON.brief_resource("permits") is DAVIDSON.resource("permits")
    assert DAVIDSON.brief_resource("permits-pending").name == "permit-apps"


def test_resource_aliases() -> None:
    assert DAVIDSON.resource("permits-pending").name == "permit-apps"
    assert DAVIDSON.resource("PERMIT-APPS").name == "permit-apps"


def test_unknown_resource() -> None:
    with pytest.raises(UnknownResource):
        DAVIDSON.resource("zoning")


def test_unknown_jurisdiction() -> None:
    with pytest.raises(UnknownJurisdiction):
        get_by_id("atlantis")
    assert get_by_id(" Davidson ").id == "davidson"

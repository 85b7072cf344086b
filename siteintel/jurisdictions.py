from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from .errors import UnknownJurisdiction, UnknownResource

# Filter dialects spoken by the upstream APIs
ARCGIS = "arcgis"  # ArcGIS REST query: where=
ODATA = "odata"    # Legistar Web API: $filter=
SOQL = "soql"      # Socrata: $where=

# Resource kinds: how the user input is turned into a filter
ADDRESS = "address"  # house number + street core against one address field
KEYWORD = "keyword"  # free text OR-ed across text fields
POINT = "point"      # lat/lng passed through as an intersect geometry


# ---- Endpoints (loaded once, read-only) ----

_NASHVILLE_GIS = "https://services2.arcgis.com/HdTo6HJqh92wn4D8/ArcGIS/rest/services"
_MCGTN_GIS = "https://gis.mcgtn.org/arcgis/rest/services"

APIS = {
    # Davidson County (Nashville)
    "davidson_parcels": f"{_NASHVILLE_GIS}/Parcels_with_Zoning_view/FeatureServer/0/query",
    "davidson_permits": f"{_NASHVILLE_GIS}/Building_Permits_Issued_2/FeatureServer/0/query",
    "davidson_permit_apps": f"{_NASHVILLE_GIS}/Building_Permit_Applications_Feature_Layer_view/FeatureServer/0/query",
    "davidson_planning": f"{_NASHVILLE_GIS}/PlanningDepartmentDevelopmentApplications_view/FeatureServer/0/query",
    "legistar": "https://webapi.legistar.com/v1/nashville/matters",

    # Montgomery County (Clarksville)
    "montgomery_parcels": f"{_MCGTN_GIS}/Parcels/MapServer/0/query",
    "montgomery_zoning": f"{_MCGTN_GIS}/Zoning/MapServer/0/query",

    # Dallas County (DFW)
    "dcad_parcels": "https://maps.dcad.org/prdwa/rest/services/Property/ParcelQuery/MapServer/4/query",
    "dallas_permits": "https://www.dallasopendata.com/resource/e7gq-4sah.json",
    "dallas_legistar": "https://webapi.legistar.com/v1/cityofdallas/matters",
}

# seconds a response may be cached by the caller
CACHE_TTL = {
    "parcels": 3600,
    "permits": 300,
    "legistar": 1800,
    "zoning": 86400,
    "montgomery": 3600,
}


@dataclass(frozen=True)
class Resource:
    name: str
    dialect: str           # ARCGIS | ODATA | SOQL
    kind: str              # ADDRESS | KEYWORD | POINT
    endpoint: str
    address_field: str = ""
    search_fields: Tuple[str, ...] = ()
    out_fields: Tuple[str, ...] = ("*",)
    result_limit: Optional[int] = 20
    brief_limit: Optional[int] = None  # result_limit inside a brief, None = same
    order_by: Optional[str] = None
    cache_ttl: int = 300
    # Socrata rows -> ArcGIS-style attributes: (target, source column, text|date|number, default)
    feature_map: Optional[Tuple[Tuple[str, str, str, Any], ...]] = None


@dataclass(frozen=True)
class Jurisdiction:
    id: str
    name: str
    state: str
    profile: str                       # scoring profile name
    resources: Dict[str, Resource]
    brief_resources: Tuple[str, ...]   # fanned out by build_brief, in this order
    aliases: Dict[str, str] = field(default_factory=dict)

    def brief_resource(self, name: str) -> Resource:
        r = self.resource(name)
        if r.brief_limit is None:
            return r
        return replace(r, result_limit=r.brief_limit)

    def resource(self, name: str) -> Resource:
        key = (name or "").lower().strip()
        key = self.aliases.get(key, key)
        try:
            return self.resources[key]
        except KeyError:
            raise UnknownResource(self.id, name) from None


_DAVIDSON_PARCEL_FIELDS = (
    "PropAddr", "PropStreet", "PropZip", "Owner", "OwnDate", "SalePrice", "ZoneCode",
    "LUDesc", "TotlAppr", "LandAppr", "ImprAppr", "Acres", "Council", "APN", "LegalDesc",
)

_MONTGOMERY_PARCEL_FIELDS = (
    "Owner1", "Owner2", "PropertyAddress", "PropertyCity", "Zoning", "ZoningDesc",
    "LandUseDesc", "PropertyTypeDesc", "CalcAcreage", "DeedAcreage", "MktAppraisedValue",
    "AppraisedValue", "AssessedValue", "MktLandValue", "BuildingValue", "SalesDate",
    "SalesPrice", "Grantor", "Grantee", "YearBuilt", "LivingArea", "TotalAdjArea",
    "Neighborhood",
)

_DCAD_PARCEL_FIELDS = (
    "SITEADDRESS", "OWNERNME1", "USEDSCRP", "BLDGAREA", "LNDVALUE", "IMPVALUE", "CNTASSDVAL",
)

_DALLAS_PERMIT_FEATURES = (
    ("Permit__", "permit_number", "text", "\u2014"),
    ("Permit_Type_Description", "permit_type", "text", "\u2014"),
    ("Date_Issued", "issued_date", "date", None),
    ("Const_Cost", "value", "number", 0),
    ("Purpose", "work_description", "text", ""),
    ("Status", "status", "text", "Issued"),
)


def _legistar(endpoint: str) -> Resource:
    return Resource(
        name="legistar",
        dialect=ODATA,
        kind=KEYWORD,
        endpoint=endpoint,
        search_fields=("MatterTitle",),
        out_fields=(),
        result_limit=20,
        order_by="MatterIntroDate desc",
        cache_ttl=CACHE_TTL["legistar"],
    )


JURISDICTIONS: Dict[str, Jurisdiction] = {
    "davidson": Jurisdiction(
        id="davidson",
        name="Davidson County (Nashville)",
        state="TN",
        profile="metro",
        resources={
            "parcels": Resource(
                name="parcels",
                dialect=ARCGIS,
                kind=ADDRESS,
                endpoint=APIS["davidson_parcels"],
                address_field="PropAddr",
                out_fields=_DAVIDSON_PARCEL_FIELDS,
                result_limit=10,
                brief_limit=5,
                cache_ttl=CACHE_TTL["parcels"],
            ),
            "permits": Resource(
                name="permits",
                dialect=ARCGIS,
                kind=ADDRESS,
                endpoint=APIS["davidson_permits"],
                address_field="ADDRESS",
                order_by="DATE_ISSUED DESC",
                cache_ttl=CACHE_TTL["permits"],
            ),
            "permit-apps": Resource(
                name="permit-apps",
                dialect=ARCGIS,
                kind=ADDRESS,
                endpoint=APIS["davidson_permit_apps"],
                address_field="ADDRESS",
                cache_ttl=CACHE_TTL["permits"],
            ),
            "planning": Resource(
                name="planning",
                dialect=ARCGIS,
                kind=KEYWORD,
                endpoint=APIS["davidson_planning"],
                search_fields=("Case_Address", "Case_Description"),
                cache_ttl=CACHE_TTL["permits"],
            ),
            "legistar": _legistar(APIS["legistar"]),
        },
        brief_resources=("parcels", "permits", "permit-apps", "planning", "legistar"),
        aliases={"permits-pending": "permit-apps", "permit_apps": "permit-apps"},
    ),
    "montgomery": Jurisdiction(
        id="montgomery",
        name="Montgomery County (Clarksville)",
        state="TN",
        profile="county",
        resources={
            "parcels": Resource(
                name="parcels",
                dialect=ARCGIS,
                kind=ADDRESS,
                endpoint=APIS["montgomery_parcels"],
                address_field="PropertyAddress",
                out_fields=_MONTGOMERY_PARCEL_FIELDS,
                result_limit=None,
                cache_ttl=CACHE_TTL["montgomery"],
            ),
            "zoning": Resource(
                name="zoning",
                dialect=ARCGIS,
                kind=POINT,
                endpoint=APIS["montgomery_zoning"],
                result_limit=None,
                cache_ttl=CACHE_TTL["zoning"],
            ),
        },
        brief_resources=("parcels",),
    ),
    "dallas": Jurisdiction(
        id="dallas",
        name="Dallas County (DFW)",
        state="TX",
        profile="dfw",
        resources={
            "parcels": Resource(
                name="parcels",
                dialect=ARCGIS,
                kind=ADDRESS,
                endpoint=APIS["dcad_parcels"],
                address_field="SITEADDRESS",
                out_fields=_DCAD_PARCEL_FIELDS,
                result_limit=10,
                cache_ttl=CACHE_TTL["parcels"],
            ),
            "permits": Resource(
                name="permits",
                dialect=SOQL,
                kind=ADDRESS,
                endpoint=APIS["dallas_permits"],
                address_field="street_address",
                out_fields=(),
                order_by="issued_date DESC",
                cache_ttl=CACHE_TTL["permits"],
                feature_map=_DALLAS_PERMIT_FEATURES,
            ),
            "legistar": _legistar(APIS["dallas_legistar"]),
        },
        brief_resources=("parcels", "permits", "legistar"),
    ),
}


def list_active() -> list[str]:
    return list(JURISDICTIONS)


def get_by_id(jurisdiction_id: str | None) -> Jurisdiction:
    key = (jurisdiction_id or "").lower().strip()
    try:
        return JURISDICTIONS[key]
    except KeyError:
        raise UnknownJurisdiction(jurisdiction_id or "") from None

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .connectors import SourceClient, get_client
from .errors import InvalidInput, SiteIntelError, SourceFailure, UnknownJurisdiction, UnknownResource
from .jurisdictions import JURISDICTIONS, list_active
from .logging_config import configure_logging
from .schemas import ErrorOut, HealthOut
from .services import build_brief, lookup
from .settings import settings


def get_source_client():
    # one client (and requests.Session) per request, shared only by that request's workers
    client = get_client()
    try:
        yield client
    finally:
        client.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    yield


app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
    max_age=86400,
)

_STATUS = {
    InvalidInput: 400,
    UnknownJurisdiction: 404,
    UnknownResource: 404,
    SourceFailure: 502,
}


@app.exception_handler(SiteIntelError)
async def site_intel_error(request: Request, exc: SiteIntelError):
    body = ErrorOut(error=exc.message, code=exc.code, url=exc.details.get("url"))
    return JSONResponse(body.model_dump(exclude_none=True), status_code=_STATUS.get(type(exc), 500))


def _endpoints() -> list[str]:
    out = []
    for jid, j in JURISDICTIONS.items():
        for name, r in j.resources.items():
            param = {"address": "address=...", "keyword": "keyword=...", "point": "lat=...&lng=..."}[r.kind]
            out.append(f"/api/{jid}/{name}?{param}")
    out.append("/api/site-brief?address=...&county=davidson")
    return out


@app.get("/")
@app.get("/health")
def health() -> HealthOut:
    return HealthOut(
        status="ok",
        service=settings.app_name,
        version=settings.version,
        counties=list_active(),
        endpoints=_endpoints(),
    )


@app.get("/api/site-brief")
def site_brief(
    address: str = Query(default=""),
    county: str = Query(default=settings.default_jurisdiction),
    client: SourceClient = Depends(get_source_client),
):
    brief = build_brief(address, county, client=client)
    return JSONResponse(brief.payload())


def _resource_response(client: SourceClient, jurisdiction: str, resource: str, address, keyword, lat, lng):
    r, _, body = lookup(
        jurisdiction, resource,
        address=address, keyword=keyword, lat=lat, lng=lng,
        client=client,
    )
    # the service caches nothing; callers and CDNs may
    return JSONResponse(body, headers={"Cache-Control": f"public, max-age={r.cache_ttl}"})


@app.get("/api/legistar")
def legistar(
    keyword: str | None = None,
    address: str | None = None,
    client: SourceClient = Depends(get_source_client),
):
    return _resource_response(client, settings.default_jurisdiction, "legistar", address, keyword, None, None)


@app.get("/api/{county}/{resource}")
def resource_lookup(
    county: str,
    resource: str,
    address: str | None = None,
    keyword: str | None = None,
    lat: str | None = None,
    lng: str | None = None,
    client: SourceClient = Depends(get_source_client),
):
    return _resource_response(client, county, resource, address, keyword, lat, lng)

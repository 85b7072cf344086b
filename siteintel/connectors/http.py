from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..adapters.base import QueryDescriptor
from ..errors import SourceFailure
from ..jurisdictions import ARCGIS
from ..settings import settings
from .base import SourceClient

logger = logging.getLogger(__name__)


class HttpSourceClient(SourceClient):
    """
    GETs a descriptor's endpoint with its dialect params and returns the JSON.

    One requests.Session per client; the aggregator shares a client across
    its worker threads for a single brief.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.s = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.request_timeout

    def close(self) -> None:
        self.s.close()

    def fetch_parsed(self, descriptor: QueryDescriptor) -> Any:
        url = descriptor.url()
        logger.debug("GET %s", url)
        try:
            r = self.s.get(
                descriptor.endpoint,
                params=descriptor.params(),
                timeout=self.timeout,
                headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
            )
        except requests.Timeout:
            raise SourceFailure(f"Timed out after {self.timeout:g}s", url=url) from None
        except requests.RequestException as e:
            raise SourceFailure(f"{type(e).__name__}: {e}", url=url) from None

        if not r.ok:
            raise SourceFailure(f"HTTP {r.status_code}: {r.reason}", url=url)

        try:
            data = r.json()
        except ValueError:
            raise SourceFailure("Response was not valid JSON", url=url) from None

        # ArcGIS reports query errors inside a 200 response
        if descriptor.dialect == ARCGIS and isinstance(data, dict) and isinstance(data.get("error"), dict):
            err = data["error"]
            raise SourceFailure(f"ArcGIS error {err.get('code', '')}: {err.get('message', 'unknown')}".strip(), url=url)

        return data

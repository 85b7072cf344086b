from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Dict, Optional

from ..adapters import build_query
from ..connectors import SourceClient, get_client
from ..errors import InvalidInput, SourceFailure
from ..jurisdictions import get_by_id
from ..models import Brief, SourceOutcome
from ..normalize import normalize_address
from ..scoring import score
from ..settings import settings
from .lookup import fetch

logger = logging.getLogger(__name__)


def build_brief(
    address: str,
    jurisdiction_id: str,
    client: Optional[SourceClient] = None,
    max_workers: Optional[int] = None,
) -> Brief:
    """
    Fan out every brief resource of a jurisdiction for one address and score
    the combined result.

    Input errors (empty address, missing or unknown jurisdiction) raise before any query
    is built. After that the brief always comes back: a failed source is
    recorded as {"error": reason} and contributes nothing to the score.
    """
    if not address or not address.strip():
        raise InvalidInput("address parameter required")
    if not jurisdiction_id or not jurisdiction_id.strip():
        raise InvalidInput("county parameter required")
    j = get_by_id(jurisdiction_id)

    client = client or get_client()
    parsed = normalize_address(address)
    resources = [j.brief_resource(name) for name in j.brief_resources]
    descriptors = {r.name: build_query(r, parsed) for r in resources}

    logger.info("Brief %s: %r -> %d source(s)", j.id, parsed.text, len(resources))

    futures: Dict[str, Future] = {}
    workers = max(1, min(max_workers or settings.max_workers, len(resources)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for r in resources:
            futures[r.name] = pool.submit(fetch, client, r, descriptors[r.name])

        # join: every source settles, keyed by name not arrival order
        sources: Dict[str, SourceOutcome] = {}
        for name, fut in futures.items():
            try:
                sources[name] = SourceOutcome.success(fut.result())
            except SourceFailure as e:
                logger.warning("Brief %s: %s failed: %s", j.id, name, e.reason)
                sources[name] = SourceOutcome.failure(e.reason)
            except Exception as e:
                logger.warning("Brief %s: %s raised %s: %s", j.id, name, type(e).__name__, e)
                sources[name] = SourceOutcome.failure(str(e) or type(e).__name__)

    signal = score(sources, j.profile)
    logger.info("Brief %s: score %d (%s)", j.id, signal.value, signal.label.value)

    return Brief(
        address=address,
        jurisdiction=j.id,
        timestamp=datetime.now(timezone.utc),
        sources=sources,
        score=signal,
    )

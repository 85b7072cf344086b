from __future__ import annotations

from typing import Any

from ..adapters.base import QueryDescriptor


class SourceClient:
    """
    Base interface for source clients.

    fetch_parsed(descriptor) returns the parsed JSON body for one query, or
    raises errors.SourceFailure with a readable reason (non-2xx status,
    transport error, bad body). Timeouts belong to the client.
    """

    def fetch_parsed(self, descriptor: QueryDescriptor) -> Any:
        raise NotImplementedError

    def close(self) -> None:
        pass

"""Shared fixtures: an in-memory source client so no test touches the network."""

from __future__ import annotations

import threading
from typing import Any, Dict

import pytest

from siteintel.adapters.base import QueryDescriptor
from siteintel.connectors.base import SourceClient
from siteintel.errors import SourceFailure
from siteintel.jurisdictions import APIS


class FakeSourceClient(SourceClient):
    """Answers by endpoint. A value that is an Exception instance is raised."""

    def __init__(self, responses: Dict[str, Any]):
        self.responses = responses
        self.calls: list[QueryDescriptor] = []
        self._lock = threading.Lock()

    def fetch_parsed(self, descriptor: QueryDescriptor) -> Any:
        with self._lock:
            self.calls.append(descriptor)
        if descriptor.endpoint not in self.responses:
            raise SourceFailure("HTTP 404: Not Found", url=descriptor.endpoint)
        value = self.responses[descriptor.endpoint]
        if isinstance(value, Exception):
            raise value
        return value


def features(*attrs: Dict[str, Any]) -> Dict[str, Any]:
    return {"features": [{"attributes": a} for a in attrs]}


@pytest.fixture
def davidson_hot_responses() -> Dict[str, Any]:
    return {
        APIS["davidson_parcels"]: features(
            {"PropAddr": "1200 MAIN ST", "ZoneCode": "CS", "SalePrice": 1_250_000}
        ),
        APIS["davidson_permits"]: features(
            {"ADDRESS": "1200 MAIN ST", "CONST_COST": 750_000},
            {"ADDRESS": "1200 MAIN ST", "CONST_COST": 12_000},
        ),
        APIS["davidson_permit_apps"]: features({"ADDRESS": "1200 MAIN ST"}),
        APIS["davidson_planning"]: features({"Case_Address": "1200 MAIN ST"}),
        APIS["legistar"]: [
            {"MatterTitle": "Rezoning MAIN ST", "MatterStatusName": "Public Hearing"},
            {"MatterTitle": "MAIN ST sidewalks", "MatterStatusName": "Adopted"},
        ],
    }


@pytest.fixture
def fake_client():
    return FakeSourceClient


@pytest.fixture
def feats():
    return features

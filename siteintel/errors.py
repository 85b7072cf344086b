"""
Exception hierarchy for site intelligence lookups.

InvalidInput, UnknownJurisdiction and UnknownResource are raised at the entry
boundary before any query is built. SourceFailure is raised by a source client
for one upstream call; inside a brief it is converted into a failed outcome.
"""

from __future__ import annotations


class SiteIntelError(Exception):
    """Base exception for all site intelligence failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidInput(SiteIntelError):
    """A required address, keyword or coordinate is missing or malformed."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("INVALID_INPUT", message, details)


class UnknownJurisdiction(SiteIntelError):
    """The requested jurisdiction has no configured resource set."""

    def __init__(self, jurisdiction: str):
        super().__init__(
            "UNKNOWN_JURISDICTION",
            f"Unknown jurisdiction: {jurisdiction!r}",
            {"jurisdiction": jurisdiction},
        )


class UnknownResource(SiteIntelError):
    """The jurisdiction exists but does not publish the requested resource."""

    def __init__(self, jurisdiction: str, resource: str):
        super().__init__(
            "UNKNOWN_RESOURCE",
            f"Resource {resource!r} is not available for {jurisdiction!r}",
            {"jurisdiction": jurisdiction, "resource": resource},
        )


class SourceFailure(SiteIntelError):
    """One upstream retrieval failed (HTTP status, transport or body error)."""

    def __init__(self, reason: str, url: str | None = None):
        super().__init__("SOURCE_FAILURE", reason, {"url": url} if url else None)
        self.reason = reason
        self.url = url

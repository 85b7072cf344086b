from .base import SourceClient
from .http import HttpSourceClient

def get_client() -> SourceClient:
    return HttpSourceClient()

__all__ = ["SourceClient", "HttpSourceClient", "get_client"]

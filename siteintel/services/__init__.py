from .brief import build_brief
from .lookup import lookup

__all__ = ["build_brief", "lookup"]

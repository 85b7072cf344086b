from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Label(str, Enum):
    HOT = "HOT"
    WARM = "WARM"
    MODERATE = "MODERATE"
    COOL = "COOL"


class SourceOutcome(BaseModel):
    """Result of one upstream retrieval: ok + parsed body, or not ok + reason."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, data: Any) -> "SourceOutcome":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, reason: str) -> "SourceOutcome":
        return cls(ok=False, error=reason)

    def body(self) -> Any:
        # failed sources stay visible so "no data" and "unreachable" differ
        return self.data if self.ok else {"error": self.error}


class SignalScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: int = Field(ge=1, le=10)
    max_value: int = 10
    label: Label
    factors: List[str] = Field(default_factory=list)
    note: Optional[str] = None

    def payload(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "score": self.value,
            "maxScore": self.max_value,
            "label": self.label.value,
            "factors": list(self.factors),
        }
        if self.note:
            out["note"] = self.note
        return out


class Brief(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    jurisdiction: str
    timestamp: datetime
    sources: Dict[str, SourceOutcome]
    score: SignalScore

    def payload(self) -> Dict[str, Any]:
        """JSON body for the site-brief endpoint."""
        return {
            "address": self.address,
            "county": self.jurisdiction,
            "timestamp": self.timestamp.isoformat(),
            "data": {name: outcome.body() for name, outcome in self.sources.items()},
            "signalScore": self.score.payload(),
        }

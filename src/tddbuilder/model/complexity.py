"""Complexity model: ordered tiers, risk factors and analysis results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering


@total_ordering
class ComplexityLevel(Enum):
    """Graduated document depth, ordered from ``BASE`` to ``ENTERPRISE``."""

    BASE = "base"
    MINIMAL = "minimal"
    STANDARD = "standard"
    COMPREHENSIVE = "comprehensive"
    ENTERPRISE = "enterprise"

    @property
    def rank(self) -> int:
        return _ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ComplexityLevel):
            return NotImplemented
        return self.rank < other.rank


_ORDER = list(ComplexityLevel)


@dataclass(frozen=True)
class RiskFactors:
    """Risk indicators derived from an answer map. Never stored."""

    handles_pii: bool = False
    handles_phi: bool = False
    requires_compliance: bool = False
    multi_region: bool = False
    handles_payments: bool = False
    high_availability: bool = False
    large_scale: bool = False
    multi_tenant: bool = False
    regulated_industry: bool = False
    external_integrations: int = 0

    def active(self) -> list[str]:
        """Names of the boolean indicators that are present."""
        return [
            name
            for name, value in self.__dict__.items()
            if isinstance(value, bool) and value
        ]


@dataclass(frozen=True)
class ComplexityAnalysis:
    """Full result of scoring an answer map."""

    level: ComplexityLevel
    score: int
    risk_factors: RiskFactors
    min_fields: int
    sections: tuple[str, ...]
    description: str

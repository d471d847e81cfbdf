"""Validation result returned for every proposed answer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationResult:
    """Outcome of validating one answer.

    ``value`` holds the coerced answer to store when ``valid`` is true;
    ``None`` means an optional question was left blank.
    """

    valid: bool
    errors: list[str] = field(default_factory=list)
    examples: list[str] | None = None
    learn_more: str | None = None
    value: Any = None

    @classmethod
    def ok(cls, value: Any) -> ValidationResult:
        return cls(valid=True, value=value)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"valid": self.valid, "errors": list(self.errors)}
        if self.examples is not None:
            data["examples"] = list(self.examples)
        if self.learn_more is not None:
            data["learn_more"] = self.learn_more
        return data

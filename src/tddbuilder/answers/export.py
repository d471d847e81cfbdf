"""Answer export: persist an answer map with the complexity level it used."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from tddbuilder.model.complexity import ComplexityLevel

LEVEL_KEY = "_complexity_level"
EXPORTED_AT_KEY = "_exported_at"
RESERVED_KEYS = frozenset({LEVEL_KEY, EXPORTED_AT_KEY})


@dataclass
class AnswerExport:
    """Flat answer map plus the two reserved metadata keys."""

    answers: dict[str, Any] = field(default_factory=dict)
    level: ComplexityLevel | None = None
    exported_at: str | None = None

    # --- serialisation --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        data = {k: v for k, v in self.answers.items() if k not in RESERVED_KEYS}
        if self.level is not None:
            data[LEVEL_KEY] = self.level.value
        data[EXPORTED_AT_KEY] = self.exported_at or datetime.now(timezone.utc).isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnswerExport:
        level = data.get(LEVEL_KEY)
        return cls(
            answers={k: v for k, v in data.items() if k not in RESERVED_KEYS},
            level=ComplexityLevel(level) if level else None,
            exported_at=data.get(EXPORTED_AT_KEY),
        )

    # --- persistence ----------------------------------------------------------

    def save(self, path: Path) -> None:
        """Serialise to JSON and write to *path*."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2, default=str), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> AnswerExport:
        """Read an exported answer file.

        Raises ``ValueError`` when the file is not a JSON object or records an
        unknown complexity level.
        """
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path}: answer file must contain a JSON object")
        return cls.from_dict(data)


def export_answers(
    answers: dict[str, Any], level: ComplexityLevel | str | None, path: Path | str
) -> AnswerExport:
    """Write *answers* to *path*, stamped with *level* and the current UTC time."""
    export = AnswerExport(
        answers=dict(answers),
        level=ComplexityLevel(level) if level is not None else None,
        exported_at=datetime.now(timezone.utc).isoformat(),
    )
    export.save(Path(path))
    return export


def import_answers(path: Path | str) -> tuple[dict[str, Any], ComplexityLevel | None]:
    """Read an exported file back into an answer map and its recorded level."""
    export = AnswerExport.load(Path(path))
    return export.answers, export.level

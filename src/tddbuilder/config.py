from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

ENV_PREFIX = "TDDBUILDER_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def _split_tags(value: str) -> tuple[str, ...]:
    return tuple(t.strip() for t in value.split(",") if t.strip())


@dataclass(frozen=True)
class InterviewConfig:
    questionnaire_path: str | None = None  # None: bundled catalog
    tags_path: str | None = None
    output_dir: str = "docs"
    tags: tuple[str, ...] = ()
    level: str | None = None  # overrides the recommended tier
    telemetry: bool = False
    telemetry_dir: str = ".tddbuilder/telemetry"
    weighted_scoring: bool = False
    max_attempts: int = 3

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> InterviewConfig:
        """Build a config from ``TDDBUILDER_*`` variables, then apply *overrides*.

        Overrides whose value is ``None`` are ignored so CLI options that were
        not given fall through to the environment or the defaults.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            value = env.get(ENV_PREFIX + name)
            return value if value else None

        values: dict = {}
        if (value := get("QUESTIONNAIRE")) is not None:
            values["questionnaire_path"] = value
        if (value := get("TAG_SCHEMA")) is not None:
            values["tags_path"] = value
        if (value := get("OUTPUT_DIR")) is not None:
            values["output_dir"] = value
        if (value := get("TAGS")) is not None:
            values["tags"] = _split_tags(value)
        if (value := get("LEVEL")) is not None:
            values["level"] = value
        if (value := get("TELEMETRY")) is not None:
            values["telemetry"] = value.lower() in _TRUE_VALUES
        if (value := get("TELEMETRY_DIR")) is not None:
            values["telemetry_dir"] = value
        if (value := get("WEIGHTED_SCORING")) is not None:
            values["weighted_scoring"] = value.lower() in _TRUE_VALUES
        if (value := get("MAX_ATTEMPTS")) is not None:
            values["max_attempts"] = int(value)

        values.update({k: v for k, v in overrides.items() if v is not None})
        if isinstance(values.get("tags"), str):
            values["tags"] = _split_tags(values["tags"])
        return cls(**values)

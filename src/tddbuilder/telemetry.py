"""Opt-in, anonymous interview telemetry.

A :class:`TelemetrySession` listens on the event bus and keeps counts and
timings only: question ids, tags, stage durations and complexity tiers. It
never sees answer values.
"""

from __future__ import annotations

import json
import logging
import platform
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from tddbuilder import __version__
from tddbuilder.events import types as events
from tddbuilder.events.bus import EventBus

logger = logging.getLogger(__name__)


def format_duration(seconds: float) -> str:
    """Render a duration like ``2m 05s`` or ``42s``."""
    total = int(round(seconds))
    minutes, secs = divmod(total, 60)
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"


class TelemetrySession:
    def __init__(self, event_bus: EventBus | None = None) -> None:
        self.session_id = uuid.uuid4().hex
        self.started_at = datetime.now(timezone.utc).isoformat()
        self._start = time.monotonic()
        self.stage_durations: dict[str, float] = {}
        self.total_asked = 0
        self.answered_by_tag: dict[str, int] = {}
        self.skipped_by_tag: dict[str, int] = {}
        self.rejections = 0
        self.follow_ups = 0
        self.complexity_recommended: str | None = None
        self.complexity_selected: str | None = None
        self._asked: set[str] = set()
        if event_bus is not None:
            self.attach(event_bus)

    def attach(self, event_bus: EventBus) -> None:
        event_bus.subscribe(events.QuestionAsked, self._on_asked)
        event_bus.subscribe(events.AnswerAccepted, self._on_accepted)
        event_bus.subscribe(events.AnswerRejected, self._on_rejected)
        event_bus.subscribe(events.QuestionSkipped, self._on_skipped)
        event_bus.subscribe(events.FollowUpsTriggered, self._on_follow_ups)
        event_bus.subscribe(events.StageCompleted, self._on_stage_completed)
        event_bus.subscribe(events.ComplexityAssessed, self._on_assessed)
        event_bus.subscribe(events.InterviewCompleted, self._on_completed)

    # --- listeners ------------------------------------------------------------

    def _on_asked(self, event: events.QuestionAsked) -> None:
        if event.question_id in self._asked:
            return
        self._asked.add(event.question_id)
        self.total_asked += 1
        for tag in event.tags:
            self.answered_by_tag.setdefault(tag, 0)
            self.skipped_by_tag.setdefault(tag, 0)

    def _on_accepted(self, event: events.AnswerAccepted) -> None:
        for tag in event.tags:
            self.answered_by_tag[tag] = self.answered_by_tag.get(tag, 0) + 1

    def _on_rejected(self, event: events.AnswerRejected) -> None:
        self.rejections += 1

    def _on_skipped(self, event: events.QuestionSkipped) -> None:
        for tag in event.tags:
            self.skipped_by_tag[tag] = self.skipped_by_tag.get(tag, 0) + 1

    def _on_follow_ups(self, event: events.FollowUpsTriggered) -> None:
        self.follow_ups += len(event.follow_up_ids)

    def _on_stage_completed(self, event: events.StageCompleted) -> None:
        self.stage_durations[event.stage] = event.duration

    def _on_assessed(self, event: events.ComplexityAssessed) -> None:
        self.complexity_recommended = event.recommended
        self.complexity_selected = event.selected or event.recommended

    def _on_completed(self, event: events.InterviewCompleted) -> None:
        self.complexity_selected = event.level

    # --- reporting ------------------------------------------------------------

    @property
    def total_answered(self) -> int:
        return sum(self.answered_by_tag.values())

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped_by_tag.values())

    def skip_percentages(self) -> dict[str, int]:
        """Rounded share of skipped questions per tag, for tags with activity."""
        percentages: dict[str, int] = {}
        for tag, skipped in sorted(self.skipped_by_tag.items()):
            total = skipped + self.answered_by_tag.get(tag, 0)
            if total:
                percentages[tag] = round(skipped / total * 100)
        return percentages

    def report(self) -> dict[str, Any]:
        duration = time.monotonic() - self._start
        return {
            "session_id": self.session_id,
            "metadata": {
                "version": __version__,
                "timestamp": self.started_at,
                "python_version": platform.python_version(),
                "platform": platform.system().lower(),
            },
            "total_duration_s": round(duration, 3),
            "total_duration_formatted": format_duration(duration),
            "stages": {
                stage: {"duration_s": round(seconds, 3), "duration_formatted": format_duration(seconds)}
                for stage, seconds in self.stage_durations.items()
            },
            "questions": {
                "asked": self.total_asked,
                "rejected_answers": self.rejections,
                "follow_ups_revealed": self.follow_ups,
                "answered_by_tag": dict(sorted(self.answered_by_tag.items())),
                "skipped_by_tag": dict(sorted(self.skipped_by_tag.items())),
                "skip_percentages_by_tag": self.skip_percentages(),
            },
            "complexity": {
                "recommended": self.complexity_recommended,
                "selected": self.complexity_selected,
                "override_used": (
                    self.complexity_selected is not None
                    and self.complexity_selected != self.complexity_recommended
                ),
            },
        }

    def save(self, directory: Path | str) -> Path:
        """Write the report to ``session-<id>.json`` under *directory*."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"session-{self.session_id}.json"
        path.write_text(json.dumps(self.report(), indent=2), encoding="utf-8")
        logger.info("Telemetry written to %s", path)
        return path

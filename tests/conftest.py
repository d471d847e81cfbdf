"""Shared fixtures: the test catalog, its tag metadata and a question factory."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from tddbuilder.model.catalog import Schema
from tddbuilder.model.question import Constraints, Help, Question, QuestionType, Stage
from tddbuilder.model.tags import TagMetadata
from tddbuilder.schema import load_questionnaire, load_tag_metadata

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture()
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture()
def catalog_document() -> dict[str, Any]:
    """A fresh, mutable copy of the test catalog JSON."""
    return json.loads((FIXTURES / "catalog.json").read_text(encoding="utf-8"))


@pytest.fixture()
def schema() -> Schema:
    return load_questionnaire(FIXTURES / "catalog.json")


@pytest.fixture()
def tag_metadata(schema: Schema) -> TagMetadata:
    return load_tag_metadata(FIXTURES / "tags.json", schema=schema)


@pytest.fixture()
def make_question() -> Callable[..., Question]:
    """Build a Question with sensible defaults; keyword arguments override."""

    def _make(
        qid: str = "q.one",
        qtype: QuestionType | str = QuestionType.TEXT,
        *,
        stage: Stage | str = Stage.CORE,
        tags: tuple[str, ...] = ("general",),
        options: tuple[str, ...] = (),
        help: Help | None = None,
        **constraints: Any,
    ) -> Question:
        return Question(
            id=qid,
            stage=Stage(stage),
            type=QuestionType(qtype),
            prompt=f"Question {qid}?",
            tags=tags,
            options=options,
            validation=Constraints(**constraints),
            help=help,
        )

    return _make

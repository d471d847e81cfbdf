"""Tag metadata model: topic labels and per-field routing/scoring metadata."""

from __future__ import annotations

from dataclasses import dataclass, field

from tddbuilder.model.question import Question


@dataclass(frozen=True)
class TagInfo:
    """Display information for a single topic tag."""

    label: str
    description: str = ""


@dataclass(frozen=True)
class FieldMetadata:
    """Routing and scoring metadata attached to one question id."""

    tags: tuple[str, ...] = ()
    related_fields: tuple[str, ...] = ()
    complexity_levels: tuple[str, ...] = ()
    weight: int = 1


@dataclass(frozen=True)
class TagMetadata:
    """Catalog of tag labels plus field metadata keyed by question id."""

    version: str
    tags: dict[str, TagInfo] = field(default_factory=dict)
    field_metadata: dict[str, FieldMetadata] = field(default_factory=dict)

    def field(self, field_id: str) -> FieldMetadata | None:
        return self.field_metadata.get(field_id)

    def tag_info(self, tag: str) -> TagInfo | None:
        return self.tags.get(tag)

    def available_tags(self) -> list[str]:
        return list(self.tags)

    def tags_for(self, question: Question) -> tuple[str, ...]:
        """The question's own tags extended by any metadata tags, in order."""
        meta = self.field(question.id)
        if meta is None:
            return question.tags
        extra = tuple(t for t in meta.tags if t not in question.tags)
        return question.tags + extra

    def related_fields(self, field_id: str) -> tuple[str, ...]:
        meta = self.field(field_id)
        return meta.related_fields if meta else ()

    def complexity_levels(self, field_id: str) -> tuple[str, ...]:
        meta = self.field(field_id)
        return meta.complexity_levels if meta else ()

    def weight(self, field_id: str) -> int:
        """Scoring weight for a field; fields without metadata weigh 1."""
        meta = self.field(field_id)
        return meta.weight if meta else 1

"""Document layout, review preview and Markdown rendering."""

from tddbuilder.document.markdown import NOT_PROVIDED, render_markdown, write_document
from tddbuilder.document.sections import (
    SECTIONS,
    Section,
    SectionPreview,
    group_answers,
    preview,
    section_for,
)

__all__ = [
    "NOT_PROVIDED",
    "SECTIONS",
    "Section",
    "SectionPreview",
    "group_answers",
    "preview",
    "render_markdown",
    "section_for",
    "write_document",
]

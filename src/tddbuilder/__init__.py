"""TDD Builder: adaptive questionnaire engine for technical design documents."""

__version__ = "2.0.0"

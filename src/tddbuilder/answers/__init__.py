"""Answer validation and answer-file persistence."""

from tddbuilder.answers.dates import check_iso_date, is_iso_date
from tddbuilder.answers.export import (
    EXPORTED_AT_KEY,
    LEVEL_KEY,
    AnswerExport,
    export_answers,
    import_answers,
)
from tddbuilder.answers.validator import all_errors, all_valid, validate, validate_answers

__all__ = [
    "EXPORTED_AT_KEY",
    "LEVEL_KEY",
    "AnswerExport",
    "all_errors",
    "all_valid",
    "check_iso_date",
    "export_answers",
    "import_answers",
    "is_iso_date",
    "validate",
    "validate_answers",
]

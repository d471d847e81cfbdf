"""ConsoleInterviewer: prompts the user at the terminal via input()."""

from __future__ import annotations

from typing import Any

from tddbuilder.model.question import Question, QuestionType
from tddbuilder.model.result import ValidationResult

HELP_COMMAND = "?"


class ConsoleInterviewer:
    """Interviewer that uses stdin/stdout for interactive prompts.

    Choice questions show numbered options and accept either the number or
    the option text; multi-select accepts a comma-separated list of either.
    Typing ``?`` shows the question's help and asks again. An empty reply or
    end of input counts as no answer.
    """

    def ask(self, question: Question, attempt: int = 1) -> Any:
        if attempt == 1:
            self._print_header(question)

        while True:
            raw = self._get_input(self._prompt(question))
            if raw is None:
                return None
            raw = raw.strip()
            if raw == HELP_COMMAND:
                self._print_help(question)
                continue
            if not raw:
                return None
            if question.type is QuestionType.SELECT:
                return self._resolve_option(question, raw)
            if question.type is QuestionType.MULTI_SELECT:
                return [self._resolve_option(question, part.strip()) for part in raw.split(",") if part.strip()]
            return raw

    def reject(self, question: Question, result: ValidationResult) -> None:
        for error in result.errors:
            print(f"  ! {error}")
        if result.examples:
            print("  Examples:")
            for example in result.examples:
                print(f"    - {example}")
        if result.learn_more:
            print(f"  Learn more: {result.learn_more}")

    # --- display --------------------------------------------------------------

    def _print_header(self, question: Question) -> None:
        marker = " *" if question.required else ""
        print(f"\n{'=' * 60}")
        print(f"  {question.prompt}{marker}")
        if question.hint:
            print(f"  ({question.hint})")
        print(f"{'=' * 60}")
        for index, option in enumerate(question.options, start=1):
            print(f"  [{index}] {option}")
        if question.help is not None:
            print(f"  Type '{HELP_COMMAND}' for help.")

    @staticmethod
    def _print_help(question: Question) -> None:
        if question.help is None:
            print("  No help available for this question.")
            return
        if question.help.why:
            print(f"  Why: {question.help.why}")
        for example in question.help.examples:
            print(f"  e.g. {example}")
        if question.help.learn_more:
            print(f"  Learn more: {question.help.learn_more}")

    @staticmethod
    def _prompt(question: Question) -> str:
        if question.type is QuestionType.BOOLEAN:
            return "  [Y]es / [N]o: "
        if question.type is QuestionType.MULTI_SELECT:
            return "  Choices (comma separated): "
        if question.type is QuestionType.SELECT:
            return "  Choice: "
        if question.type is QuestionType.DATE:
            return "  Date (YYYY-MM-DD): "
        return "  > "

    # --- parsing --------------------------------------------------------------

    @staticmethod
    def _resolve_option(question: Question, raw: str) -> str:
        """Map an option number or case-insensitive label to the option text."""
        if raw.isdigit():
            index = int(raw)
            if 1 <= index <= len(question.options):
                return question.options[index - 1]
        for option in question.options:
            if option.lower() == raw.lower():
                return option
        return raw

    @staticmethod
    def _get_input(prompt: str) -> str | None:
        try:
            return input(prompt)
        except EOFError:
            return None

"""Exceptions raised by the judging model and the submission pipeline."""

from __future__ import annotations

from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from judging.validation import FieldError


class JudgingError(Exception):
    """Base class for judging errors."""


class EvaluationValidationError(JudgingError):
    """An evaluation failed validation. Carries one error per offending field."""

    def __init__(self, errors: List["FieldError"]):
        self.errors = list(errors)
        fields = ", ".join(e.field for e in self.errors) or "evaluation"
        super().__init__(f"Invalid evaluation: {fields}")

    def to_dict(self) -> dict:
        return {"ok": False, "errors": [e.to_dict() for e in self.errors]}


class SubmissionError(JudgingError):
    """The submission sink rejected or failed to store an evaluation."""


class SubmissionInProgressError(JudgingError):
    """A submission for the same evaluation is already in flight."""


class CohortMismatchError(JudgingError):
    """Scoring was asked for a cohort other than the one the submission selected."""


class UnknownCohortError(JudgingError, LookupError):
    pass


class UnknownCriterionError(JudgingError, KeyError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown criterion {self.name!r}"


class EvaluationStateError(JudgingError):
    """Operation not allowed in the evaluation's current state."""

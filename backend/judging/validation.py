"""Validation of a judge's evaluation against a prize cohort's criteria.

``schema_for`` builds one validator per distinct criteria list and caches it,
so live validation on every field change does not rebuild anything. The
validator never trusts the submitted mapping: missing criteria, unknown
criteria and out-of-range scores are all reported as field errors.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

from config.judging_config import JUDGING_CONFIG
from judging.cohorts import Criterion, PrizeCohort
from judging.errors import EvaluationValidationError
from judging.evaluation import CriterionEvaluation, EvaluationSubmission
from utils.text import clean_text


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str
    code: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message, "code": self.code}


@dataclass(frozen=True)
class ValidationResult:
    errors: Tuple[FieldError, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.valid

    def errors_for(self, field: str) -> List[FieldError]:
        return [e for e in self.errors if e.field == field]

    def raise_for_errors(self) -> None:
        if self.errors:
            raise EvaluationValidationError(list(self.errors))

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": [e.to_dict() for e in self.errors]}


def _criterion_field(name: str, part: Optional[str] = None) -> str:
    return f"criteria_evaluations.{name}" + (f".{part}" if part else "")


class EvaluationValidator:
    def __init__(self, criteria: Tuple[Criterion, ...]):
        self.criteria = criteria
        self.names = frozenset(c.name for c in criteria)
        self.feedback_max = int(JUDGING_CONFIG["criterion_feedback_max"])
        self.overall_min = int(JUDGING_CONFIG["overall_feedback_min"])
        self.overall_max = int(JUDGING_CONFIG["overall_feedback_max"])

    def validate(self, submission: EvaluationSubmission, cohort_id: str) -> ValidationResult:
        errors: List[FieldError] = []

        selected = submission.selected_prize_cohort_id
        if not selected:
            errors.append(FieldError("selected_prize_cohort_id", "Please select a prize cohort", "cohort_required"))
        elif selected != cohort_id:
            errors.append(
                FieldError(
                    "selected_prize_cohort_id",
                    "Selected prize cohort does not match the cohort being judged",
                    "cohort_mismatch",
                )
            )

        evaluations = submission.criteria_evaluations
        for criterion in self.criteria:
            evaluation = evaluations.get(criterion.name)
            if evaluation is None:
                errors.append(
                    FieldError(_criterion_field(criterion.name), f"{criterion.name} must be evaluated", "criterion_missing")
                )
                continue
            errors.extend(self._check_criterion(criterion, evaluation))

        for name in evaluations:
            if name not in self.names:
                errors.append(FieldError(_criterion_field(name), f"Unknown criterion {name}", "criterion_unknown"))

        overall = clean_text(submission.overall_feedback)
        if len(overall) < self.overall_min:
            errors.append(
                FieldError(
                    "overall_feedback",
                    f"Overall feedback must be at least {self.overall_min} characters",
                    "overall_feedback_too_short",
                )
            )
        elif len(overall) > self.overall_max:
            errors.append(FieldError("overall_feedback", "Overall feedback is too long", "overall_feedback_too_long"))

        return ValidationResult(tuple(errors))

    def _check_criterion(self, criterion: Criterion, evaluation: CriterionEvaluation) -> List[FieldError]:
        out: List[FieldError] = []
        score_field = _criterion_field(criterion.name, "score")
        score = evaluation.score
        if not math.isfinite(score):
            out.append(FieldError(score_field, "Score must be a number", "score_invalid"))
        elif score < 0:
            out.append(FieldError(score_field, "Score cannot be negative", "score_negative"))
        elif score > criterion.points:
            out.append(FieldError(score_field, f"Score cannot exceed {criterion.points} points", "score_too_high"))

        feedback_field = _criterion_field(criterion.name, "feedback")
        feedback = clean_text(evaluation.feedback)
        if not feedback:
            out.append(FieldError(feedback_field, "Feedback is required for each criterion", "feedback_required"))
        elif len(feedback) > self.feedback_max:
            out.append(FieldError(feedback_field, "Feedback is too long", "feedback_too_long"))
        return out


@lru_cache(maxsize=256)
def schema_for(criteria: Tuple[Criterion, ...]) -> EvaluationValidator:
    """Validator for a cohort's criteria; cached on the criteria's content."""
    return EvaluationValidator(criteria)


def validate(submission: EvaluationSubmission, cohort: PrizeCohort) -> ValidationResult:
    return schema_for(tuple(cohort.evaluation_criteria)).validate(submission, cohort.id)

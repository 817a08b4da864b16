"""Lifecycle of a single judge's evaluation of one project.

EDITING -> VALIDATING -> VALID | INVALID -> SUBMITTING -> SUBMITTED | FAILED

Edits re-run validation immediately. Submitting is only possible from VALID
and at most one submission can be in flight. A failed submission keeps every
entered value; the next edit (or ``acknowledge_failure``) returns to EDITING
and calling ``submit`` again is the retry. A cancelled submit also ends in
FAILED.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Protocol, Sequence

from judging.cohorts import PrizeCohort, find_cohort
from judging.errors import (
    EvaluationStateError,
    SubmissionError,
    SubmissionInProgressError,
    UnknownCohortError,
    UnknownCriterionError,
)
from judging.evaluation import CriteriaEvaluations, CriterionEvaluation, EvaluationSubmission
from judging.scoring import EvaluationPayload, ScoreSummary, aggregate, build_payload
from judging.validation import FieldError, ValidationResult, validate

logger = logging.getLogger(__name__)


class SubmissionSink(Protocol):
    async def submit(self, payload: EvaluationPayload) -> None: ...


class EvaluationState(str, Enum):
    EDITING = "editing"
    VALIDATING = "validating"
    VALID = "valid"
    INVALID = "invalid"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    FAILED = "failed"


class EvaluationSession:
    def __init__(
        self,
        *,
        hackathon_id: str,
        project_id: str,
        judge_identity: str,
        cohorts: Sequence[PrizeCohort],
        sink: SubmissionSink,
        cohort_id: Optional[str] = None,
    ):
        self.hackathon_id = hackathon_id
        self.project_id = project_id
        self.judge_identity = judge_identity
        self.cohorts = list(cohorts)
        self.sink = sink
        self.state = EvaluationState.EDITING
        self.last_error: Optional[str] = None
        self.last_result = ValidationResult()
        self.payload: Optional[EvaluationPayload] = None
        self.cohort: Optional[PrizeCohort] = None
        self.criteria_evaluations = CriteriaEvaluations(())
        self.overall_feedback = ""

        start = cohort_id if cohort_id is not None else (self.cohorts[0].id if self.cohorts else None)
        if start is not None:
            self.select_cohort(start)

    @property
    def is_submitting(self) -> bool:
        return self.state == EvaluationState.SUBMITTING

    def submission(self) -> EvaluationSubmission:
        return EvaluationSubmission(
            selected_prize_cohort_id=self.cohort.id if self.cohort else "",
            criteria_evaluations=self.criteria_evaluations.to_dict(),
            overall_feedback=self.overall_feedback,
        )

    def _begin_edit(self) -> None:
        if self.state == EvaluationState.SUBMITTED:
            raise EvaluationStateError("Evaluation was already submitted")
        if self.state == EvaluationState.SUBMITTING:
            raise SubmissionInProgressError("Evaluation is being submitted")
        self.state = EvaluationState.EDITING

    def select_cohort(self, cohort_id: str) -> None:
        """Switch cohorts; scores entered for the previous cohort are dropped."""
        cohort = find_cohort(self.cohorts, cohort_id)
        if cohort is None:
            raise UnknownCohortError(f"Unknown prize cohort {cohort_id!r}")
        self._begin_edit()
        self.cohort = cohort
        self.criteria_evaluations = CriteriaEvaluations.fresh(cohort)
        self.validate()

    def _update_criterion(self, criterion: str, **fields) -> ValidationResult:
        if criterion not in self.criteria_evaluations.allowed_names:
            raise UnknownCriterionError(criterion)
        self._begin_edit()
        current = self.criteria_evaluations.get(criterion) or CriterionEvaluation()
        self.criteria_evaluations[criterion] = CriterionEvaluation.model_validate({**current.model_dump(), **fields})
        return self.validate()

    def set_score(self, criterion: str, score: float) -> ValidationResult:
        return self._update_criterion(criterion, score=score)

    def set_feedback(self, criterion: str, feedback: str) -> ValidationResult:
        return self._update_criterion(criterion, feedback=feedback)

    def set_overall_feedback(self, text: str) -> ValidationResult:
        self._begin_edit()
        self.overall_feedback = text
        return self.validate()

    def acknowledge_failure(self) -> ValidationResult:
        if self.state != EvaluationState.FAILED:
            raise EvaluationStateError(f"No failed submission to acknowledge (state is {self.state.value})")
        self.state = EvaluationState.EDITING
        return self.validate()

    def validate(self) -> ValidationResult:
        """Re-run validation. Does not change state once a submission has started."""
        if self.state in (EvaluationState.SUBMITTING, EvaluationState.SUBMITTED):
            return self._check()
        self.state = EvaluationState.VALIDATING
        result = self._check()
        self.last_result = result
        self.state = EvaluationState.VALID if result.valid else EvaluationState.INVALID
        return result

    def _check(self) -> ValidationResult:
        if self.cohort is None:
            return ValidationResult(
                (FieldError("selected_prize_cohort_id", "Please select a prize cohort", "cohort_required"),)
            )
        return validate(self.submission(), self.cohort)

    def score(self) -> Optional[ScoreSummary]:
        if self.cohort is None:
            return None
        return aggregate(self.submission(), self.cohort)

    async def submit(self) -> EvaluationPayload:
        if self.state == EvaluationState.SUBMITTING:
            raise SubmissionInProgressError("Evaluation is already being submitted")
        if self.state == EvaluationState.SUBMITTED:
            raise EvaluationStateError("Evaluation was already submitted")

        self.validate().raise_for_errors()
        if self.cohort is None:
            raise EvaluationStateError("No prize cohort selected")
        payload = build_payload(
            self.submission(),
            self.cohort,
            project_id=self.project_id,
            hackathon_id=self.hackathon_id,
            judge_identity=self.judge_identity,
        )

        # Flipped before the first await so a concurrent caller sees it.
        self.state = EvaluationState.SUBMITTING
        self.last_error = None
        try:
            await self.sink.submit(payload)
        except Exception as e:
            self.state = EvaluationState.FAILED
            self.last_error = str(e) or e.__class__.__name__
            logger.error(f"Evaluation submit failed for project {self.project_id} in cohort {payload.prize_cohort_id}: {e}")
            raise SubmissionError("Failed to submit evaluation. Please try again.") from e
        except BaseException:
            # Cancelled or interrupted mid-submit: the outcome is unknown, leave it retryable.
            self.state = EvaluationState.FAILED
            self.last_error = "Submission was interrupted"
            logger.warning(f"Evaluation submit interrupted for project {self.project_id} in cohort {payload.prize_cohort_id}")
            raise

        self.state = EvaluationState.SUBMITTED
        self.payload = payload
        logger.info(
            f"Evaluation submitted for project {self.project_id} in cohort {payload.prize_cohort_id}: "
            f"{payload.total_score}/{payload.max_possible_score}"
        )
        return payload

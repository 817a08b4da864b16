"""Aggregation of criterion scores and assembly of the submission payload."""

from __future__ import annotations

from typing import Dict

from pydantic import BaseModel

from judging.cohorts import PrizeCohort
from judging.errors import CohortMismatchError
from judging.evaluation import EvaluationSubmission
from judging.validation import validate


class ScoreSummary(BaseModel):
    total_score: float
    max_possible_score: float


class EvaluationPayload(BaseModel):
    """What the submission sink receives for one accepted evaluation."""

    project_id: str
    hackathon_id: str
    prize_cohort_id: str
    judge_identity: str
    scores: Dict[str, float]
    feedback: Dict[str, str]
    overall_feedback: str
    total_score: float
    max_possible_score: float


def max_possible_score(cohort: PrizeCohort) -> float:
    return float(sum(c.points for c in cohort.evaluation_criteria))


def aggregate(submission: EvaluationSubmission, cohort: PrizeCohort) -> ScoreSummary:
    """Sum the scores of the cohort's criteria.

    Criteria absent from the submission count as 0 and keys outside the cohort
    are ignored, so a partially filled draft can still be previewed. Every
    criterion counts regardless of its point value.
    """
    if submission.selected_prize_cohort_id != cohort.id:
        raise CohortMismatchError(
            f"Submission is for cohort {submission.selected_prize_cohort_id!r}, not {cohort.id!r}"
        )
    evaluations = submission.criteria_evaluations
    total = 0.0
    for criterion in cohort.evaluation_criteria:
        evaluation = evaluations.get(criterion.name)
        if evaluation is not None:
            total += evaluation.score
    return ScoreSummary(total_score=total, max_possible_score=max_possible_score(cohort))


def build_payload(
    submission: EvaluationSubmission,
    cohort: PrizeCohort,
    *,
    project_id: str,
    hackathon_id: str,
    judge_identity: str,
) -> EvaluationPayload:
    """Validate, aggregate and shape an evaluation for the submission sink.

    Raises:
        EvaluationValidationError: the submission does not satisfy the cohort.
    """
    validate(submission, cohort).raise_for_errors()
    summary = aggregate(submission, cohort)
    evaluations = submission.criteria_evaluations
    names = cohort.criterion_names()
    return EvaluationPayload(
        project_id=project_id,
        hackathon_id=hackathon_id,
        prize_cohort_id=cohort.id,
        judge_identity=judge_identity,
        scores={name: evaluations[name].score for name in names},
        feedback={name: evaluations[name].feedback.strip() for name in names},
        overall_feedback=submission.overall_feedback.strip(),
        total_score=summary.total_score,
        max_possible_score=summary.max_possible_score,
    )

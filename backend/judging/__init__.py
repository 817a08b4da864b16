"""Judge evaluation model: cohorts, criteria, validation and scoring."""

from .cohorts import (  # noqa: F401
    Criterion,
    JudgingMode,
    PrizeCohort,
    VotingMode,
    calculate_total_prize_amount,
    find_cohort,
)
from .errors import (  # noqa: F401
    CohortMismatchError,
    EvaluationStateError,
    EvaluationValidationError,
    JudgingError,
    SubmissionError,
    SubmissionInProgressError,
    UnknownCohortError,
    UnknownCriterionError,
)
from .evaluation import CriteriaEvaluations, CriterionEvaluation, EvaluationSubmission  # noqa: F401
from .judges import Judge, JudgeStatus  # noqa: F401
from .scoring import EvaluationPayload, ScoreSummary, aggregate, build_payload  # noqa: F401
from .session import EvaluationSession, EvaluationState, SubmissionSink  # noqa: F401
from .validation import FieldError, ValidationResult, schema_for, validate  # noqa: F401

__all__ = [
    "Criterion",
    "JudgingMode",
    "PrizeCohort",
    "VotingMode",
    "calculate_total_prize_amount",
    "find_cohort",
    "CohortMismatchError",
    "EvaluationStateError",
    "EvaluationValidationError",
    "JudgingError",
    "SubmissionError",
    "SubmissionInProgressError",
    "UnknownCohortError",
    "UnknownCriterionError",
    "CriteriaEvaluations",
    "CriterionEvaluation",
    "EvaluationSubmission",
    "Judge",
    "JudgeStatus",
    "EvaluationPayload",
    "ScoreSummary",
    "aggregate",
    "build_payload",
    "EvaluationSession",
    "EvaluationState",
    "SubmissionSink",
    "FieldError",
    "ValidationResult",
    "schema_for",
    "validate",
]

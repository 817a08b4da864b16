from __future__ import annotations

import pytest

from judging.cohorts import Criterion, JudgingMode, PrizeCohort, calculate_total_prize_amount, parse_prize_amount
from judging.errors import CohortMismatchError, EvaluationValidationError
from judging.evaluation import CriterionEvaluation, EvaluationSubmission
from judging.scoring import ScoreSummary, aggregate, build_payload


def cohort() -> PrizeCohort:
    return PrizeCohort(
        id="main",
        name="Main Track",
        evaluation_criteria=[Criterion(name="Tech", points=10), Criterion(name="UX", points=5)],
    )


def submission(scores: dict, cohort_id: str = "main") -> EvaluationSubmission:
    return EvaluationSubmission(
        selected_prize_cohort_id=cohort_id,
        criteria_evaluations={n: CriterionEvaluation(score=s, feedback="fine") for n, s in scores.items()},
        overall_feedback="Well executed idea",
    )


def test_aggregate_sums_scores_and_points():
    summary = aggregate(submission({"Tech": 8, "UX": 5}), cohort())
    assert summary.total_score == 13
    assert summary.max_possible_score == 15


def test_max_possible_score_does_not_depend_on_submission():
    for scores in ({}, {"Tech": 1}, {"Tech": 10, "UX": 5}, {"Other": 50}):
        assert aggregate(submission(scores), cohort()).max_possible_score == 15


def test_missing_criteria_count_as_zero_and_unknown_keys_are_ignored():
    summary = aggregate(submission({"Tech": 7, "Design": 40}), cohort())
    assert summary.total_score == 7


def test_aggregate_is_pure():
    s, c = submission({"Tech": 3, "UX": 2}), cohort()
    assert aggregate(s, c) == aggregate(s, c)
    assert s.criteria_evaluations["Tech"].score == 3


def test_valid_totals_stay_within_bounds():
    for tech in range(0, 11):
        for ux in range(0, 6):
            summary = aggregate(submission({"Tech": tech, "UX": ux}), cohort())
            assert 0 <= summary.total_score <= summary.max_possible_score


def test_aggregate_refuses_a_different_cohort():
    with pytest.raises(CohortMismatchError):
        aggregate(submission({"Tech": 3, "UX": 2}, cohort_id="other"), cohort())


def test_build_payload_shapes_sink_contract():
    s = submission({"UX": 4, "Tech": 9})
    s.criteria_evaluations["UX"].feedback = "  clean flows  "
    payload = build_payload(s, cohort(), project_id="p1", hackathon_id="h1", judge_identity="0xJudge")
    assert payload.model_dump() == {
        "project_id": "p1",
        "hackathon_id": "h1",
        "prize_cohort_id": "main",
        "judge_identity": "0xJudge",
        "scores": {"Tech": 9, "UX": 4},
        "feedback": {"Tech": "fine", "UX": "clean flows"},
        "overall_feedback": "Well executed idea",
        "total_score": 13,
        "max_possible_score": 15,
    }
    assert list(payload.scores) == ["Tech", "UX"]


def test_build_payload_validates_first():
    with pytest.raises(EvaluationValidationError):
        build_payload(submission({"Tech": 12, "UX": 5}), cohort(), project_id="p", hackathon_id="h", judge_identity="j")


def test_total_prize_amount_parses_loosely():
    cohorts = [
        PrizeCohort(name="A", prize_amount="$5,000", evaluation_criteria=[Criterion(name="x", points=1)]),
        PrizeCohort(name="B", prize_amount="2500 USDC", evaluation_criteria=[Criterion(name="x", points=1)]),
        PrizeCohort(name="C", prize_amount="swag", evaluation_criteria=[Criterion(name="x", points=1)]),
    ]
    assert calculate_total_prize_amount(cohorts) == "$7,500"
    assert calculate_total_prize_amount([]) == "$0"
    assert parse_prize_amount("") == 0
    assert parse_prize_amount("$1,250.50") == 1250.5


def test_cohort_without_criteria_scores_zero_of_zero():
    automated = PrizeCohort(id="auto", name="Community Vote", judging_mode=JudgingMode.AUTOMATED)
    s = EvaluationSubmission(selected_prize_cohort_id="auto", overall_feedback="Great community traction")
    assert aggregate(s, automated) == ScoreSummary(total_score=0, max_possible_score=0)

    payload = build_payload(s, automated, project_id="p1", hackathon_id="h1", judge_identity="0xJudge")
    assert payload.scores == {}
    assert payload.feedback == {}
    assert payload.total_score == 0 and payload.max_possible_score == 0

from __future__ import annotations

import asyncio

import pytest

from judging.cohorts import Criterion, PrizeCohort
from judging.errors import (
    EvaluationStateError,
    EvaluationValidationError,
    SubmissionError,
    SubmissionInProgressError,
    UnknownCohortError,
    UnknownCriterionError,
)
from judging.session import EvaluationSession, EvaluationState
from judging.validation import ValidationResult


COHORTS = [
    PrizeCohort(id="c1", name="One", evaluation_criteria=[Criterion(name="A", points=10), Criterion(name="B", points=5)]),
    PrizeCohort(id="c2", name="Two", evaluation_criteria=[Criterion(name="X", points=3), Criterion(name="Y", points=7)]),
]


class RecordingSink:
    def __init__(self):
        self.payloads = []

    async def submit(self, payload):
        self.payloads.append(payload)


class BlockingSink(RecordingSink):
    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()

    async def submit(self, payload):
        await self.release.wait()
        self.payloads.append(payload)


class FailingSink:
    def __init__(self):
        self.calls = 0

    async def submit(self, payload):
        self.calls += 1
        raise ConnectionError("chain unavailable")


def new_session(sink, cohort_id=None) -> EvaluationSession:
    return EvaluationSession(
        hackathon_id="h1",
        project_id="p1",
        judge_identity="0xJudge",
        cohorts=COHORTS,
        sink=sink,
        cohort_id=cohort_id,
    )


def fill(session: EvaluationSession) -> None:
    session.set_score("A", 8)
    session.set_feedback("A", "Solid architecture")
    session.set_score("B", 4)
    session.set_feedback("B", "Nice polish")
    session.set_overall_feedback("Strong submission overall")


def test_starts_on_first_cohort_with_fresh_scores():
    session = new_session(RecordingSink())
    assert session.cohort.id == "c1"
    assert session.state == EvaluationState.INVALID
    assert set(session.criteria_evaluations) == {"A", "B"}


def test_live_validation_tracks_edits():
    session = new_session(RecordingSink())
    fill(session)
    assert session.state == EvaluationState.VALID
    result = session.set_score("A", 11)
    assert session.state == EvaluationState.INVALID
    assert result.errors_for("criteria_evaluations.A.score")
    session.set_score("A", 10)
    assert session.state == EvaluationState.VALID
    assert session.score().total_score == 14


def test_switching_cohort_drops_stale_scores():
    session = new_session(RecordingSink())
    fill(session)
    session.select_cohort("c2")
    assert session.submission().model_dump()["criteria_evaluations"] == {
        "X": {"score": 0, "feedback": ""},
        "Y": {"score": 0, "feedback": ""},
    }
    with pytest.raises(UnknownCriterionError):
        session.set_score("A", 1)
    with pytest.raises(UnknownCohortError):
        session.select_cohort("missing")


def test_submit_hands_payload_to_sink():
    sink = RecordingSink()
    session = new_session(sink)
    fill(session)
    payload = asyncio.run(session.submit())
    assert session.state == EvaluationState.SUBMITTED
    assert sink.payloads == [payload]
    assert payload.total_score == 12 and payload.max_possible_score == 15
    assert payload.scores == {"A": 8, "B": 4}
    with pytest.raises(EvaluationStateError):
        session.set_score("A", 1)
    with pytest.raises(EvaluationStateError):
        asyncio.run(session.submit())


def test_invalid_evaluation_is_not_submitted():
    sink = RecordingSink()
    session = new_session(sink)
    session.set_overall_feedback("too short")
    with pytest.raises(EvaluationValidationError):
        asyncio.run(session.submit())
    assert sink.payloads == []
    assert session.state == EvaluationState.INVALID


def test_only_one_submission_in_flight():
    async def scenario():
        sink = BlockingSink()
        session = new_session(sink)
        fill(session)
        first = asyncio.create_task(session.submit())
        await asyncio.sleep(0)
        assert session.is_submitting
        with pytest.raises(SubmissionInProgressError):
            await session.submit()
        with pytest.raises(SubmissionInProgressError):
            session.set_overall_feedback("Changed my mind about this")
        assert session.validate().valid
        assert session.state == EvaluationState.SUBMITTING
        sink.release.set()
        await first
        return session, sink

    session, sink = asyncio.run(scenario())
    assert session.state == EvaluationState.SUBMITTED
    assert len(sink.payloads) == 1


def test_failed_submission_keeps_data_and_waits_for_retry():
    sink = FailingSink()
    session = new_session(sink)
    fill(session)
    with pytest.raises(SubmissionError):
        asyncio.run(session.submit())
    assert session.state == EvaluationState.FAILED
    assert sink.calls == 1
    assert session.last_error == "chain unavailable"
    assert session.criteria_evaluations["A"].score == 8
    assert session.overall_feedback == "Strong submission overall"

    result = session.acknowledge_failure()
    assert result.valid and session.state == EvaluationState.VALID

    working = RecordingSink()
    session.sink = working
    asyncio.run(session.submit())
    assert session.state == EvaluationState.SUBMITTED
    assert sink.calls == 1
    assert len(working.payloads) == 1


def test_editing_after_failure_returns_to_validation():
    session = new_session(FailingSink())
    fill(session)
    with pytest.raises(SubmissionError):
        asyncio.run(session.submit())
    session.set_feedback("B", "Reworded feedback")
    assert session.state == EvaluationState.VALID
    with pytest.raises(EvaluationStateError):
        session.acknowledge_failure()


def test_session_without_cohorts_cannot_submit():
    session = EvaluationSession(
        hackathon_id="h1", project_id="p1", judge_identity="j", cohorts=[], sink=RecordingSink()
    )
    assert session.cohort is None
    assert session.score() is None
    result = session.validate()
    assert result.errors_for("selected_prize_cohort_id")
    with pytest.raises(EvaluationValidationError):
        asyncio.run(session.submit())


class HangingSink(RecordingSink):
    async def submit(self, payload):
        await asyncio.sleep(3600)


def test_cancelled_submission_can_be_retried():
    session = new_session(HangingSink())
    fill(session)

    async def timed_submit():
        await asyncio.wait_for(session.submit(), timeout=0.05)

    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(timed_submit())
    assert session.state == EvaluationState.FAILED
    assert session.last_error == "Submission was interrupted"
    assert session.criteria_evaluations["B"].feedback == "Nice polish"

    session.set_overall_feedback("Strong submission, resubmitting")
    assert session.state == EvaluationState.VALID
    working = RecordingSink()
    session.sink = working
    asyncio.run(session.submit())
    assert session.state == EvaluationState.SUBMITTED
    assert len(working.payloads) == 1


def test_submit_without_cohort_raises_even_if_validation_is_bypassed():
    session = EvaluationSession(
        hackathon_id="h1", project_id="p1", judge_identity="j", cohorts=[], sink=RecordingSink()
    )
    session.validate = lambda: ValidationResult()
    with pytest.raises(EvaluationStateError):
        asyncio.run(session.submit())

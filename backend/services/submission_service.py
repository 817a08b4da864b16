"""Hands accepted evaluations to the submission sink."""

import asyncio
import threading
import logging
from typing import Optional, Set, Tuple

from judging.cohorts import PrizeCohort
from judging.errors import SubmissionError, SubmissionInProgressError
from judging.evaluation import EvaluationSubmission
from judging.scoring import EvaluationPayload, build_payload
from judging.session import SubmissionSink
from models.db import upsert_judge_evaluation

logger = logging.getLogger(__name__)


class DatabaseSubmissionSink:
    """Stores evaluations in the local judge_evaluations table."""

    async def submit(self, payload: EvaluationPayload) -> None:
        await asyncio.to_thread(upsert_judge_evaluation, payload.model_dump())


class SubmissionService:
    """Validates, scores and submits evaluations.

    Only one submission per (judge, project, cohort) may be in flight; a
    duplicate raises SubmissionInProgressError instead of queueing. Sink
    failures surface once as SubmissionError and are not retried.
    """

    def __init__(self, sink: Optional[SubmissionSink] = None):
        self.sink: SubmissionSink = sink or DatabaseSubmissionSink()
        self._in_flight: Set[Tuple[str, str, str]] = set()
        self._lock = threading.RLock()

    def is_in_flight(self, judge_identity: str, project_id: str, prize_cohort_id: str) -> bool:
        with self._lock:
            return (judge_identity, project_id, prize_cohort_id) in self._in_flight

    async def submit_evaluation(
        self,
        submission: EvaluationSubmission,
        cohort: PrizeCohort,
        *,
        project_id: str,
        hackathon_id: str,
        judge_identity: str,
    ) -> EvaluationPayload:
        payload = build_payload(
            submission,
            cohort,
            project_id=project_id,
            hackathon_id=hackathon_id,
            judge_identity=judge_identity,
        )

        key = (judge_identity, project_id, cohort.id)
        with self._lock:
            if key in self._in_flight:
                raise SubmissionInProgressError("An evaluation for this project and cohort is already being submitted")
            self._in_flight.add(key)

        try:
            await self.sink.submit(payload)
        except Exception as e:
            logger.error(f"Submitting evaluation for project {project_id} in cohort {cohort.id} failed: {e}")
            raise SubmissionError("Failed to submit evaluation. Please try again.") from e
        finally:
            with self._lock:
                self._in_flight.discard(key)

        logger.info(
            f"Stored evaluation for project {project_id} in cohort {cohort.id}: "
            f"{payload.total_score}/{payload.max_possible_score}"
        )
        return payload


# Global service instance
_submission_service: Optional[SubmissionService] = None


def get_submission_service() -> SubmissionService:
    """Get the global submission service instance."""
    global _submission_service
    if _submission_service is None:
        _submission_service = SubmissionService()
    return _submission_service

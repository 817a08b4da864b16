"""Judge roster and the evaluations each judge has recorded."""

from __future__ import annotations

import logging
from typing import List, Optional

from judging.judges import JudgeStatus
from models.db import get_judge_row, list_judge_evaluations_by_judge, list_judge_rows, update_judge_status
from models.schemas import JudgeEvaluationRecord, JudgeRecord

logger = logging.getLogger(__name__)


def get_judges(hackathon_id: str) -> List[JudgeRecord]:
    return [JudgeRecord.from_row(row) for row in list_judge_rows(hackathon_id)]


def get_judge(hackathon_id: str, judge_identity: str) -> Optional[JudgeRecord]:
    row = get_judge_row(hackathon_id, judge_identity)
    if row is None:
        return None
    return JudgeRecord.from_row(row)


def set_judge_status(hackathon_id: str, judge_identity: str, status: JudgeStatus) -> Optional[JudgeRecord]:
    """Record a judge accepting or declining an invitation. Returns None if the judge is not on the roster."""
    if not update_judge_status(hackathon_id, judge_identity, status.value):
        return None
    logger.info(f"Judge {judge_identity} of hackathon {hackathon_id} is now {status.value}")
    return get_judge(hackathon_id, judge_identity)


def get_judge_evaluations(
    hackathon_id: str, judge_identity: str, prize_cohort_id: Optional[str] = None
) -> List[JudgeEvaluationRecord]:
    rows = list_judge_evaluations_by_judge(hackathon_id, judge_identity, prize_cohort_id=prize_cohort_id)
    return [JudgeEvaluationRecord.from_row(row) for row in rows]

"""Judge roster endpoints and per-judge evaluation listing."""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from api.common import error_response, hackathon_not_found
from judging.judges import JudgeStatus
from services.cohort_service import get_prize_cohort
from services.judge_service import get_judge, get_judge_evaluations, get_judges, set_judge_status

logger = logging.getLogger(__name__)
router = APIRouter()


class JudgeStatusUpdate(BaseModel):
    status: JudgeStatus


@router.get("/hackathons/{hackathon_id}/judges")
def get_hackathon_judges(hackathon_id: str):
    missing = hackathon_not_found(hackathon_id)
    if missing:
        return missing
    return {"judges": [j.model_dump(mode="json") for j in get_judges(hackathon_id)]}


@router.post("/hackathons/{hackathon_id}/judges/{judge_identity}/status")
def post_judge_status(hackathon_id: str, judge_identity: str, body: JudgeStatusUpdate):
    missing = hackathon_not_found(hackathon_id)
    if missing:
        return missing
    judge = set_judge_status(hackathon_id, judge_identity, body.status)
    if judge is None:
        return error_response(404, "Judge not found")
    return {"ok": True, "judge": judge.model_dump(mode="json")}


@router.get("/hackathons/{hackathon_id}/judges/{judge_identity}/evaluations")
def get_evaluations_by_judge(hackathon_id: str, judge_identity: str, prize_cohort_id: Optional[str] = Query(None)):
    missing = hackathon_not_found(hackathon_id)
    if missing:
        return missing
    if get_judge(hackathon_id, judge_identity) is None:
        return error_response(404, "Judge not found")
    if prize_cohort_id is not None and get_prize_cohort(hackathon_id, prize_cohort_id) is None:
        return error_response(404, "Prize cohort not found")
    evaluations = get_judge_evaluations(hackathon_id, judge_identity, prize_cohort_id=prize_cohort_id)
    return {"evaluations": [e.model_dump() for e in evaluations]}

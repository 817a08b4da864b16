import logging
import sqlite3
from typing import List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field, field_validator

from api.common import cohort_to_dict, error_response, hackathon_not_found
from judging.cohorts import PrizeCohort, calculate_total_prize_amount, find_cohort
from judging.evaluation import EvaluationSubmission
from judging.judges import Judge
from models.db import create_hackathon, get_hackathon, list_hackathons
from models.schemas import Hackathon
from services.cohort_service import get_prize_cohorts
from services.judge_service import get_judges

logger = logging.getLogger(__name__)
router = APIRouter()


class HackathonCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    prize_cohorts: List[PrizeCohort] = Field(default_factory=list)
    judges: List[Judge] = Field(min_length=1)

    @field_validator("prize_cohorts")
    @classmethod
    def _unique_cohort_ids(cls, cohorts: List[PrizeCohort]) -> List[PrizeCohort]:
        ids = [c.id for c in cohorts]
        if len(ids) != len(set(ids)):
            raise ValueError("Prize cohort ids must be unique")
        return cohorts

    @field_validator("judges")
    @classmethod
    def _unique_judges(cls, judges: List[Judge]) -> List[Judge]:
        identities = [j.judge_identity for j in judges]
        if len(identities) != len(set(identities)):
            raise ValueError("Judge identities must be unique")
        return judges


def _hackathon_detail(hackathon_id: str) -> dict:
    cohorts = get_prize_cohorts(hackathon_id)
    return {
        "hackathon": Hackathon.from_row(get_hackathon(hackathon_id)).model_dump(),
        "prize_cohorts": [cohort_to_dict(c) for c in cohorts],
        "total_prize_amount": calculate_total_prize_amount(cohorts),
        "judges": [j.model_dump(mode="json") for j in get_judges(hackathon_id)],
    }


@router.post("/hackathons")
def post_hackathon(body: HackathonCreate):
    try:
        hackathon_id = create_hackathon(body.name, body.description, body.prize_cohorts, body.judges)
    except sqlite3.IntegrityError as e:
        logger.error(f"Failed to create hackathon {body.name!r}: {e}")
        return error_response(409, "A prize cohort with that id already exists")
    logger.info(f"Created hackathon {hackathon_id} with {len(body.prize_cohorts)} prize cohorts and {len(body.judges)} judges")
    return {"ok": True, **_hackathon_detail(hackathon_id)}


@router.get("/hackathons")
def get_hackathons(limit: int = Query(50, ge=1, le=200)):
    return {"hackathons": [Hackathon.from_row(row).model_dump() for row in list_hackathons(limit=limit)]}


@router.get("/hackathons/{hackathon_id}")
def get_hackathon_detail(hackathon_id: str):
    missing = hackathon_not_found(hackathon_id)
    if missing:
        return missing
    return _hackathon_detail(hackathon_id)


@router.get("/hackathons/{hackathon_id}/cohorts")
def get_hackathon_cohorts(hackathon_id: str):
    missing = hackathon_not_found(hackathon_id)
    if missing:
        return missing
    return {"prize_cohorts": [cohort_to_dict(c) for c in get_prize_cohorts(hackathon_id)]}


@router.get("/hackathons/{hackathon_id}/cohorts/{cohort_id}/evaluation-template")
def get_evaluation_template(hackathon_id: str, cohort_id: str):
    """Blank evaluation for a cohort. Clients reload this whenever the judge switches cohorts."""
    missing = hackathon_not_found(hackathon_id)
    if missing:
        return missing
    cohort = find_cohort(get_prize_cohorts(hackathon_id), cohort_id)
    if cohort is None:
        return error_response(404, "Prize cohort not found")
    return {"evaluation": EvaluationSubmission.fresh(cohort).model_dump()}

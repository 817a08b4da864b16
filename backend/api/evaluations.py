"""Judge evaluation endpoints: live validation, submission and read-back."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from api.common import field_errors_response, hackathon_not_found, resolve_selected_cohort
from judging.errors import EvaluationValidationError, SubmissionError, SubmissionInProgressError
from judging.evaluation import EvaluationSubmission
from judging.scoring import aggregate
from judging.validation import validate
from models.db import list_judge_evaluations
from models.schemas import JudgeEvaluationRecord
from services.submission_service import get_submission_service

logger = logging.getLogger(__name__)
router = APIRouter()


class EvaluationRequest(BaseModel):
    judge_identity: str = Field(min_length=1)
    evaluation: EvaluationSubmission


@router.post("/hackathons/{hackathon_id}/evaluations/validate")
def validate_evaluation(hackathon_id: str, submission: EvaluationSubmission):
    missing = hackathon_not_found(hackathon_id)
    if missing:
        return missing
    cohort, errors = resolve_selected_cohort(hackathon_id, submission)
    if cohort is None:
        return {"valid": False, "errors": [e.to_dict() for e in errors], "score": None}
    result = validate(submission, cohort)
    return {**result.to_dict(), "score": aggregate(submission, cohort).model_dump()}


@router.post("/hackathons/{hackathon_id}/projects/{project_id}/evaluations")
async def submit_evaluation(hackathon_id: str, project_id: str, body: EvaluationRequest):
    missing = hackathon_not_found(hackathon_id)
    if missing:
        return missing
    cohort, errors = resolve_selected_cohort(hackathon_id, body.evaluation)
    if cohort is None:
        return field_errors_response(errors)

    try:
        payload = await get_submission_service().submit_evaluation(
            body.evaluation,
            cohort,
            project_id=project_id,
            hackathon_id=hackathon_id,
            judge_identity=body.judge_identity,
        )
    except EvaluationValidationError as e:
        logger.warning(f"Rejected evaluation for project {project_id}: {e}")
        return field_errors_response(e.errors)
    except SubmissionInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SubmissionError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {"ok": True, "evaluation": payload.model_dump()}


@router.get("/hackathons/{hackathon_id}/projects/{project_id}/evaluations")
def get_project_evaluations(hackathon_id: str, project_id: str, prize_cohort_id: Optional[str] = Query(None)):
    missing = hackathon_not_found(hackathon_id)
    if missing:
        return missing
    rows = list_judge_evaluations(hackathon_id, project_id, prize_cohort_id=prize_cohort_id)
    return {"evaluations": [JudgeEvaluationRecord.from_row(row).model_dump() for row in rows]}

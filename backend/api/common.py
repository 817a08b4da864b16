from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from fastapi.responses import JSONResponse

from judging.cohorts import PrizeCohort
from judging.evaluation import EvaluationSubmission
from judging.validation import FieldError
from models.db import get_hackathon
from services.cohort_service import get_prize_cohort


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def field_errors_response(errors: List[FieldError], status_code: int = 422) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "errors": [e.to_dict() for e in errors]})


def hackathon_not_found(hackathon_id: str) -> Optional[JSONResponse]:
    if get_hackathon(hackathon_id) is None:
        return error_response(404, "Hackathon not found")
    return None


def resolve_selected_cohort(
    hackathon_id: str, submission: EvaluationSubmission
) -> Tuple[Optional[PrizeCohort], List[FieldError]]:
    """Look up the cohort a submission selected, as a field error when it is missing or unknown."""
    cohort_id = submission.selected_prize_cohort_id
    if not cohort_id:
        return None, [FieldError("selected_prize_cohort_id", "Please select a prize cohort", "cohort_required")]
    cohort = get_prize_cohort(hackathon_id, cohort_id)
    if cohort is None:
        return None, [
            FieldError("selected_prize_cohort_id", f"Unknown prize cohort {cohort_id}", "cohort_unknown")
        ]
    return cohort, []


def cohort_to_dict(cohort: PrizeCohort) -> Dict[str, Any]:
    return cohort.model_dump(mode="json")

from __future__ import annotations

from typing import Optional, Dict
from pydantic import BaseModel, Field
import json

from judging.cohorts import Criterion, PrizeCohort
from judging.judges import Judge


def _created_at(row) -> Optional[str]:
    return row.get("created_at") if hasattr(row, "get") else row["created_at"]


def _json_field(raw, default):
    if not raw:
        return default
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return default


class Hackathon(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Hackathon":
        return cls(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            created_at=_created_at(row),
        )


class StoredPrizeCohort(PrizeCohort):
    hackathon_id: str
    position: int = 0

    @classmethod
    def from_row(cls, row) -> "StoredPrizeCohort":
        criteria = [Criterion.model_validate(c) for c in _json_field(row["evaluation_criteria"], [])]
        return cls(
            id=row["id"],
            hackathon_id=row["hackathon_id"],
            position=row["position"],
            name=row["name"],
            description=row["description"] or "",
            number_of_winners=row["number_of_winners"],
            prize_amount=row["prize_amount"] or "",
            judging_mode=row["judging_mode"],
            voting_mode=row["voting_mode"],
            max_votes_per_judge=row["max_votes_per_judge"],
            evaluation_criteria=criteria,
        )

    def to_cohort(self) -> PrizeCohort:
        return PrizeCohort.model_validate(self.model_dump(exclude={"hackathon_id", "position"}))


class JudgeRecord(Judge):
    hackathon_id: str
    position: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "JudgeRecord":
        return cls(
            hackathon_id=row["hackathon_id"],
            position=row["position"],
            judge_identity=row["judge_identity"],
            email=row["email"],
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


class JudgeEvaluationRecord(BaseModel):
    id: int | None = Field(default=None)
    project_id: str
    hackathon_id: str
    prize_cohort_id: str
    judge_identity: str
    scores: Dict[str, float] = Field(default_factory=dict)
    feedback: Dict[str, str] = Field(default_factory=dict)
    overall_feedback: str
    total_score: float
    max_possible_score: float
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "JudgeEvaluationRecord":
        return cls(
            id=row["id"],
            project_id=row["project_id"],
            hackathon_id=row["hackathon_id"],
            prize_cohort_id=row["prize_cohort_id"],
            judge_identity=row["judge_identity"],
            scores=_json_field(row["scores"], {}),
            feedback=_json_field(row["feedback"], {}),
            overall_feedback=row["overall_feedback"],
            total_score=row["total_score"],
            max_possible_score=row["max_possible_score"],
            created_at=_created_at(row),
            updated_at=row.get("updated_at") if hasattr(row, "get") else row["updated_at"],
        )

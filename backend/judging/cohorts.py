"""Prize cohorts and their evaluation criteria."""

from __future__ import annotations

import re
import uuid
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class JudgingMode(str, Enum):
    MANUAL = "manual"
    AUTOMATED = "automated"
    HYBRID = "hybrid"


class VotingMode(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    JUDGES_ONLY = "judges_only"


def new_cohort_id() -> str:
    return uuid.uuid4().hex


class Criterion(BaseModel):
    """One named, point-capped scoring dimension of a cohort.

    Frozen so criteria tuples can key the validator cache.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    points: int = Field(ge=1)
    description: str = ""


class PrizeCohort(BaseModel):
    id: str = Field(default_factory=new_cohort_id, min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    number_of_winners: int = Field(default=1, ge=1)
    prize_amount: str = ""
    judging_mode: JudgingMode = JudgingMode.MANUAL
    voting_mode: VotingMode = VotingMode.PUBLIC
    max_votes_per_judge: int = Field(default=1, ge=1)
    evaluation_criteria: List[Criterion] = Field(default_factory=list)

    @field_validator("evaluation_criteria")
    @classmethod
    def _unique_criterion_names(cls, criteria: List[Criterion]) -> List[Criterion]:
        seen = set()
        for criterion in criteria:
            if criterion.name in seen:
                raise ValueError(f"Duplicate evaluation criterion name: {criterion.name}")
            seen.add(criterion.name)
        return criteria

    @model_validator(mode="after")
    def _manual_judging_needs_criteria(self) -> "PrizeCohort":
        if self.judging_mode == JudgingMode.MANUAL and not self.evaluation_criteria:
            raise ValueError("At least one evaluation criteria is required for manual judging")
        return self

    def criterion_names(self) -> List[str]:
        return [c.name for c in self.evaluation_criteria]

    def get_criterion(self, name: str) -> Optional[Criterion]:
        for criterion in self.evaluation_criteria:
            if criterion.name == name:
                return criterion
        return None


def find_cohort(cohorts: Iterable[PrizeCohort], cohort_id: str) -> Optional[PrizeCohort]:
    for cohort in cohorts:
        if cohort.id == cohort_id:
            return cohort
    return None


# Prize amounts are free text ("$5,000", "2500 USDC"); only the leading number counts.
_AMOUNT_NOISE = re.compile(r"[^0-9.\-]+")
_LEADING_NUMBER = re.compile(r"-?(\d+\.?\d*|\.\d+)")


def parse_prize_amount(amount: Optional[str]) -> float:
    cleaned = _AMOUNT_NOISE.sub("", amount or "")
    m = _LEADING_NUMBER.match(cleaned)
    if not m:
        return 0.0
    return float(m.group(0))


def calculate_total_prize_amount(cohorts: Iterable[PrizeCohort]) -> str:
    """Sum the cohorts' prize amounts and format as whole US dollars."""
    total = sum(parse_prize_amount(c.prize_amount) for c in cohorts)
    sign = "-" if total < 0 else ""
    return f"{sign}${abs(total):,.0f}"

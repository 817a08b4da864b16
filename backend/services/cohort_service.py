"""Read side for hackathon configuration: the cohorts judges evaluate against."""

from __future__ import annotations

from typing import List, Optional

from judging.cohorts import PrizeCohort
from models.db import get_prize_cohort_row, list_prize_cohort_rows
from models.schemas import StoredPrizeCohort


def get_prize_cohorts(hackathon_id: str) -> List[PrizeCohort]:
    return [StoredPrizeCohort.from_row(row).to_cohort() for row in list_prize_cohort_rows(hackathon_id)]


def get_prize_cohort(hackathon_id: str, cohort_id: str) -> Optional[PrizeCohort]:
    row = get_prize_cohort_row(hackathon_id, cohort_id)
    if row is None:
        return None
    return StoredPrizeCohort.from_row(row).to_cohort()

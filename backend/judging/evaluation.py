"""A judge's evaluation of one project within one prize cohort."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt

from judging.cohorts import PrizeCohort
from judging.errors import UnknownCriterionError


class CriterionEvaluation(BaseModel):
    # JSON numbers only; bounds are enforced by validate(), so drafts may hold out-of-range values.
    score: Union[StrictInt, StrictFloat] = 0
    feedback: str = ""


class EvaluationSubmission(BaseModel):
    selected_prize_cohort_id: str = ""
    criteria_evaluations: Dict[str, CriterionEvaluation] = Field(default_factory=dict)
    overall_feedback: str = ""

    @classmethod
    def fresh(cls, cohort: Optional[PrizeCohort]) -> "EvaluationSubmission":
        """Blank evaluation with one zero-score entry per criterion of ``cohort``."""
        if cohort is None:
            return cls()
        return cls(
            selected_prize_cohort_id=cohort.id,
            criteria_evaluations=CriteriaEvaluations.fresh(cohort).to_dict(),
        )


EvaluationInput = Union[CriterionEvaluation, Mapping[str, Any]]


class CriteriaEvaluations(MutableMapping):
    """Criterion name -> CriterionEvaluation, bound to one cohort's criterion names.

    Every read and write checks the key against the cohort, so entries keyed by
    another cohort's criteria can never be stored or looked up.
    """

    def __init__(self, names: Iterable[str], entries: Optional[Mapping[str, EvaluationInput]] = None):
        self._names: List[str] = list(names)
        self._allowed = frozenset(self._names)
        self._entries: Dict[str, CriterionEvaluation] = {}
        for name, value in (entries or {}).items():
            self[name] = value

    @classmethod
    def fresh(cls, cohort: PrizeCohort) -> "CriteriaEvaluations":
        names = cohort.criterion_names()
        return cls(names, {name: CriterionEvaluation() for name in names})

    @property
    def allowed_names(self) -> frozenset:
        return self._allowed

    def _check(self, name: str) -> None:
        if name not in self._allowed:
            raise UnknownCriterionError(name)

    def __getitem__(self, name: str) -> CriterionEvaluation:
        self._check(name)
        return self._entries[name]

    def __setitem__(self, name: str, value: EvaluationInput) -> None:
        self._check(name)
        if not isinstance(value, CriterionEvaluation):
            value = CriterionEvaluation.model_validate(value)
        self._entries[name] = value

    def __delitem__(self, name: str) -> None:
        self._check(name)
        del self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return (name for name in self._names if name in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CriteriaEvaluations({self.to_dict()!r})"

    def to_dict(self) -> Dict[str, CriterionEvaluation]:
        return {name: self._entries[name].model_copy() for name in self}

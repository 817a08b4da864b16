"""Judge roster entries for a hackathon."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class JudgeStatus(str, Enum):
    INVITED = "invited"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class Judge(BaseModel):
    # Opaque: a wallet address, an email or any other stable handle.
    judge_identity: str = Field(min_length=1)
    email: Optional[str] = None
    status: JudgeStatus = JudgeStatus.INVITED

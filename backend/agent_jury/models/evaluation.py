from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from agent_jury.core.config import MAX_CASE_TEXT_LENGTH


class Verdict(str, Enum):
    """Final 3-way classification of a weighted score"""
    SHIP_MVP = "Ship MVP"
    ITERATE_FIRST = "Iterate First"
    REJECT = "Reject - Major Issues"


class AgentResult(BaseModel):
    """Score and reasoning returned by a single agent"""
    score: int = Field(..., ge=0, le=100)
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    questions: List[str] = Field(default_factory=list)


class AgentResults(BaseModel):
    feasibility: AgentResult
    innovation: AgentResult
    risk: AgentResult


class EvaluateRequest(BaseModel):
    """Request model for POST /api/evaluate"""
    model_config = ConfigDict(populate_by_name=True)

    case_text: str = Field(..., alias="caseText")

    @field_validator("case_text")
    @classmethod
    def validate_case_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        if len(v) > MAX_CASE_TEXT_LENGTH:
            raise ValueError(f"must be at most {MAX_CASE_TEXT_LENGTH} characters")
        return v


class EvaluateResponse(BaseModel):
    """Response model for POST /api/evaluate"""
    model_config = ConfigDict(populate_by_name=True)

    agents: AgentResults
    final_score: int = Field(..., alias="finalScore")
    verdict: Verdict


class DeliberationRequest(BaseModel):
    agents: AgentResults


class DeliberationMessage(BaseModel):
    id: int
    agent: str
    text: str
    tag: Optional[str] = None


class DeliberationResponse(BaseModel):
    messages: List[DeliberationMessage]

import math
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from agent_jury.core.config import MAX_CASE_TEXT_LENGTH
from agent_jury.services.scoring_service import round_half_up


class VerdictRecord(BaseModel):
    """A verdict as stored by the AgentJury contract"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    case_hash: str = Field(..., alias="caseHash")
    feasibility: int
    innovation: int
    risk: int
    final_score: int = Field(..., alias="finalScore")
    short_verdict: str = Field(..., alias="shortVerdict")
    submitter: str
    timestamp: int
    formatted_time: str = Field(..., alias="formattedTime")
    explorer_url: str = Field(..., alias="explorerUrl")


def _round_fractional(value):
    # Scores go on-chain as uint8, fractional values are rounded half up first
    if isinstance(value, float) and math.isfinite(value):
        return round_half_up(value)
    return value


class AgentScore(BaseModel):
    """Score of one agent as recorded on-chain; other result fields are ignored"""
    score: int = Field(..., ge=0, le=100)

    @field_validator("score", mode="before")
    @classmethod
    def round_score(cls, v):
        return _round_fractional(v)


class AgentScores(BaseModel):
    feasibility: AgentScore
    innovation: AgentScore
    risk: AgentScore


class SaveVerdictRequest(BaseModel):
    """Request model for preparing or submitting a saveVerdict call"""
    model_config = ConfigDict(populate_by_name=True)

    case_text: str = Field(..., alias="caseText", max_length=MAX_CASE_TEXT_LENGTH)
    agents: AgentScores
    final_score: int = Field(..., alias="finalScore", ge=0, le=100)
    short_verdict: str = Field(..., alias="shortVerdict", min_length=1, max_length=64)

    @field_validator("final_score", mode="before")
    @classmethod
    def round_final_score(cls, v):
        return _round_fractional(v)

    @field_validator("case_text")
    @classmethod
    def validate_case_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class PreparedTransaction(BaseModel):
    """Unsigned saveVerdict call for the browser wallet to sign"""
    model_config = ConfigDict(populate_by_name=True)

    to: str
    data: str
    chain_id: int = Field(..., alias="chainId")
    case_hash: str = Field(..., alias="caseHash")
    args: Dict[str, Any]


class SaveVerdictResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tx_hash: str = Field(..., alias="txHash")
    verdict_id: int = Field(..., alias="verdictId")
    explorer_url: str = Field(..., alias="explorerUrl")


class VerdictHistoryResponse(BaseModel):
    verdicts: List[VerdictRecord]

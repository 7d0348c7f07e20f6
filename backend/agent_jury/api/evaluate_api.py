import asyncio
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from agent_jury.models.evaluation import (
    EvaluateRequest,
    EvaluateResponse,
    DeliberationRequest,
    DeliberationResponse
)
from agent_jury.services.agent_service import is_rate_limit_error
from agent_jury.services.deliberation_service import build_deliberation
from agent_jury.services.jury_service import JuryService

router = APIRouter()

# Created on first use so a missing API key surfaces as a request error
_jury_service = None


def get_jury_service() -> JuryService:
    global _jury_service
    if _jury_service is None:
        _jury_service = JuryService()
    return _jury_service


@router.post("", response_model=EvaluateResponse)
async def evaluate_case(data: EvaluateRequest):
    """
    Score a case with the feasibility, innovation and risk agents.

    Returns:
        Agent results, weighted final score and verdict, or {"error": ...}
        with 429 when the provider keeps rate limiting and 500 otherwise
    """
    loop = asyncio.get_event_loop()
    try:
        service = get_jury_service()
        result = await loop.run_in_executor(None, service.evaluate, data.case_text)
    except Exception as e:
        print(f"[/api/evaluate] Error: {type(e).__name__}: {str(e)}")
        if is_rate_limit_error(e):
            return JSONResponse(
                {"error": "LLM provider rate limit exceeded. Please wait a moment and try again."},
                status_code=429
            )
        return JSONResponse({"error": str(e) or "An unexpected error occurred."}, status_code=500)

    return result


@router.post("/deliberation", response_model=DeliberationResponse)
async def deliberation(data: DeliberationRequest):
    """Build the jury conversation for an already computed result."""
    return DeliberationResponse(messages=build_deliberation(data.agents))

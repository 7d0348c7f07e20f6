import asyncio
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from agent_jury.core.config import HISTORY_LIMIT
from agent_jury.models.verdict import (
    PreparedTransaction,
    SaveVerdictRequest,
    SaveVerdictResponse,
    VerdictHistoryResponse,
    VerdictRecord
)
from agent_jury.repository.verdict_repository import (
    ChainUnavailableError,
    VerdictNotFoundError,
    VerdictRepository
)
from agent_jury.services.chain_service import (
    ChainNotConfiguredError,
    ChainService,
    ChainTransactionError
)

router = APIRouter()

verdict_repository = VerdictRepository()
chain_service = ChainService()


@router.get("", response_model=VerdictHistoryResponse)
async def list_verdicts(limit: int = Query(HISTORY_LIMIT, ge=1, le=50)):
    """
    Most recent on-chain verdicts, newest first.
    """
    loop = asyncio.get_event_loop()
    try:
        verdicts = await loop.run_in_executor(None, verdict_repository.get_history, limit)
    except ChainUnavailableError as e:
        return JSONResponse({"error": str(e)}, status_code=502)
    return VerdictHistoryResponse(verdicts=verdicts)


@router.get("/{verdict_id}", response_model=VerdictRecord)
async def get_verdict(verdict_id: int):
    loop = asyncio.get_event_loop()
    try:
        return await loop.run_in_executor(None, verdict_repository.get_verdict, verdict_id)
    except VerdictNotFoundError as e:
        return JSONResponse({"error": str(e)}, status_code=404)
    except ChainUnavailableError as e:
        return JSONResponse({"error": str(e)}, status_code=502)


@router.post("/prepare", response_model=PreparedTransaction)
async def prepare_verdict(data: SaveVerdictRequest):
    """
    Encode the saveVerdict call so the browser wallet can sign and send it.
    """
    return chain_service.prepare_save_verdict(data)


@router.post("", response_model=SaveVerdictResponse)
async def save_verdict(data: SaveVerdictRequest):
    """
    Sign and submit saveVerdict with the server key.

    Returns {"error": ...} with 503 when no key
    is configured and 500 when the transaction fails.
    """
    loop = asyncio.get_event_loop()
    try:
        return await loop.run_in_executor(None, chain_service.submit_save_verdict, data)
    except ChainNotConfiguredError as e:
        return JSONResponse({"error": str(e)}, status_code=503)
    except ChainTransactionError as e:
        return JSONResponse({"error": str(e)}, status_code=500)

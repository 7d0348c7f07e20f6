from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from agent_jury.api.evaluate_api import router as evaluate_router
from agent_jury.api.verdict_api import router as verdict_router
from agent_jury.core.chain import chain_params
from agent_jury.core.config import FRONTEND_URL, BACKEND_HOST, BACKEND_PORT

app = FastAPI(title="Agent Jury")

# Configure CORS - Allow both local development and the configured frontend
allowed_origins = [
    FRONTEND_URL,  # From .env file
    "http://localhost:3000",  # Local development
    "http://localhost:3001",
]

# Remove duplicates and None values
allowed_origins = list(filter(None, set(allowed_origins)))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _validation_message(errors: list) -> str:
    for error in errors:
        if error.get("type") == "json_invalid":
            return "Invalid JSON body."

    first = errors[0] if errors else {}
    # Drop the "body" / "query" / "path" prefix from the location
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = first.get("msg", "Invalid request.").removeprefix("Value error, ")
    return f"{field}: {message}" if field else message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report invalid requests as 400 {"error": ...} like every other API error."""
    return JSONResponse({"error": _validation_message(exc.errors())}, status_code=400)


app.include_router(evaluate_router, prefix="/api/evaluate", tags=["Evaluation"])
app.include_router(verdict_router, prefix="/api/verdicts", tags=["On-chain Verdicts"])


@app.get("/api/chain", tags=["On-chain Verdicts"])
async def chain():
    """Chain parameters for wallet_addEthereumChain and the contract address."""
    return chain_params()


@app.get("/")
async def root():
    return {"message": "Agent Jury API is running. Use the /api/evaluate endpoint."}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=BACKEND_HOST, port=BACKEND_PORT)

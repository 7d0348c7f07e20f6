import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# LLM provider selection: "openrouter", "gemini" or empty for auto-detection
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "").strip().lower()

# OpenRouter API Configuration (OpenAI-compatible)
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "openai/gpt-4o-mini")
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")

# Google Gemini API Configuration
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_TIMEOUT_SECONDS = int(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

# Agent execution: "parallel" runs the three agents together, "sequential" one by one
AGENT_EXECUTION_MODE = os.getenv("AGENT_EXECUTION_MODE", "parallel").strip().lower()
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "2"))
RETRY_BASE_DELAY_SECONDS = float(os.getenv("RETRY_BASE_DELAY_SECONDS", "10"))

# Case input limits
MAX_CASE_TEXT_LENGTH = int(os.getenv("MAX_CASE_TEXT_LENGTH", "2000"))

# On-chain configuration
MONAD_RPC_URLS = os.getenv("MONAD_RPC_URLS", "")
CHAIN_PRIVATE_KEY = os.getenv("CHAIN_PRIVATE_KEY")
CHAIN_RPC_TIMEOUT_SECONDS = int(os.getenv("CHAIN_RPC_TIMEOUT_SECONDS", "10"))
CHAIN_RECEIPT_TIMEOUT_SECONDS = int(os.getenv("CHAIN_RECEIPT_TIMEOUT_SECONDS", "120"))
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "10"))

# Server Configuration
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
BACKEND_PORT = int(os.getenv("BACKEND_PORT", "8000"))
BACKEND_HOST = os.getenv("BACKEND_HOST", "0.0.0.0")

from agent_jury.core.config import (
    LLM_PROVIDER,
    OPENROUTER_API_KEY,
    OPENROUTER_MODEL,
    OPENROUTER_BASE_URL,
    GEMINI_API_KEY,
    GEMINI_MODEL,
    LLM_TEMPERATURE,
    LLM_TIMEOUT_SECONDS,
)
from google import genai
from google.genai import types
import requests


class LLMProviderError(Exception):
    """Raised when an LLM backend answers with an error."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class MissingAPIKeyError(Exception):
    """Raised when the API key of the selected provider is not configured."""


class OpenRouterClient:
    """
    Chat completions through OpenRouter.

    OpenRouter is OpenAI-compatible and forwards the request to the
    underlying provider of the configured model.
    """

    name = "OpenRouter"

    def __init__(self, api_key: str = None, model: str = None):
        self.api_key = api_key or OPENROUTER_API_KEY
        if not self.api_key:
            raise MissingAPIKeyError("OPENROUTER_API_KEY environment variable is not set")

        self.base_url = f"{OPENROUTER_BASE_URL.rstrip('/')}/chat/completions"
        self.model = model or OPENROUTER_MODEL

    def complete(self, system_prompt: str, user_text: str) -> str:
        """
        Send one system + user exchange and return the assistant's text.

        Args:
            system_prompt (str): Agent instructions
            user_text (str): The case text being evaluated

        Returns:
            str: Message content, empty if the model returned nothing
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "http://localhost:3001",
            "X-Title": "Agent Jury",
        }

        payload = {
            "model": self.model,
            "temperature": LLM_TEMPERATURE,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
        }

        try:
            response = requests.post(
                self.base_url,
                headers=headers,
                json=payload,
                timeout=LLM_TIMEOUT_SECONDS
            )
        except requests.exceptions.Timeout as e:
            raise LLMProviderError(f"OpenRouter request timed out after {LLM_TIMEOUT_SECONDS}s") from e
        except requests.exceptions.RequestException as e:
            raise LLMProviderError(f"OpenRouter request failed: {str(e)}") from e

        if response.status_code != 200:
            print(f"[OpenRouter] API error: {response.status_code} - {response.text[:300]}")
            raise LLMProviderError(
                f"OpenRouter API error: {response.status_code} - {response.text[:300]}",
                status_code=response.status_code
            )

        result = response.json()

        # Upstream provider failures can arrive as 200 with an error object
        if result.get("error"):
            error = result["error"]
            code = error.get("code", "unknown")
            message = error.get("message", "")
            print(f"[OpenRouter] Upstream error: {code} - {message}")
            raise LLMProviderError(f"OpenRouter API error: {code} - {message}", status_code=code if isinstance(code, int) else None)

        choices = result.get("choices") or []
        if not choices:
            return ""
        message = choices[0].get("message") or {}
        return message.get("content") or ""


class GeminiClient:
    """
    Chat completions through Google Gemini.
    """

    name = "Gemini"

    def __init__(self, api_key: str = None, model: str = None):
        api_key = api_key or GEMINI_API_KEY
        if not api_key:
            raise MissingAPIKeyError("GEMINI_API_KEY environment variable is not set")
        self.client = genai.Client(api_key=api_key)
        self.model = model or GEMINI_MODEL

    def complete(self, system_prompt: str, user_text: str) -> str:
        chat = self.client.chats.create(
            model=self.model,
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=LLM_TEMPERATURE,
            ),
        )
        response = chat.send_message(user_text)
        return response.text or ""


def create_llm_client(provider: str = None):
    """
    Build the LLM client for the configured provider.

    Without an explicit provider, OpenRouter is used when its key is set and
    Gemini otherwise.

    Args:
        provider (str): "openrouter", "gemini" or None for auto-detection

    Returns:
        OpenRouterClient | GeminiClient
    """
    provider = (provider or LLM_PROVIDER or "").lower()
    if not provider:
        provider = "openrouter" if OPENROUTER_API_KEY or not GEMINI_API_KEY else "gemini"

    if provider == "openrouter":
        return OpenRouterClient()
    if provider == "gemini":
        return GeminiClient()
    raise ValueError(f"Unknown LLM_PROVIDER '{provider}'. Use 'openrouter' or 'gemini'.")

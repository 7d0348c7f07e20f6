from agent_jury.core.config import MAX_RETRIES, RETRY_BASE_DELAY_SECONDS
from agent_jury.models.evaluation import AgentResult
from agent_jury.services.scoring_service import clamp_score
import json
import re
import time

AGENT_KEYS = ("feasibility", "innovation", "risk")

_JSON_CONTRACT = 'Return ONLY valid JSON: {"score": number, "pros": string[], "cons": string[], "questions": string[]}'

AGENT_PROMPTS = {
    "feasibility": (
        "You are a feasibility analyst for hackathon projects. "
        "Rate 0-100 how achievable this is in 6 hours. " + _JSON_CONTRACT
    ),
    "innovation": (
        "You are an innovation judge. Rate 0-100 how novel this idea is. "
        'Hackathon classics like "voting dApp" score low. ' + _JSON_CONTRACT
    ),
    "risk": (
        "You are a risk analyst. Rate 0-100 the risks (higher = riskier). " + _JSON_CONTRACT
    ),
}

RATE_LIMIT_MARKERS = ("429", "quota", "rate limit", "too many requests")

_LEADING_FENCE = re.compile(r'^```(?:json)?\s*', re.IGNORECASE)
_TRAILING_FENCE = re.compile(r'\s*```$')


class EmptyAgentResponseError(Exception):
    """Raised when an agent's model returns no content."""


class MalformedAgentResponseError(Exception):
    """Raised when an agent's model returns text that is not a JSON object."""


def is_rate_limit_error(err: Exception) -> bool:
    """Detect provider rate-limit / quota failures from the error text."""
    message = str(err).lower()
    return any(marker in message for marker in RATE_LIMIT_MARKERS)


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding ```json ... ``` markdown fence, if any."""
    stripped = _LEADING_FENCE.sub('', raw.strip())
    stripped = _TRAILING_FENCE.sub('', stripped)
    return stripped.strip()


def _string_list(value) -> list:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]


def parse_agent_json(raw: str) -> AgentResult:
    """
    Parse an agent's reply into an AgentResult.

    Args:
        raw (str): Model output, optionally wrapped in a markdown code fence

    Returns:
        AgentResult: Clamped score with pros, cons and questions

    Raises:
        MalformedAgentResponseError: If the text is not a JSON object
    """
    try:
        parsed = json.loads(strip_code_fences(raw))
    except ValueError as e:
        # JSONDecodeError, or an integer literal beyond the interpreter digit limit
        raise MalformedAgentResponseError(str(e)) from e

    if not isinstance(parsed, dict):
        raise MalformedAgentResponseError(f"expected a JSON object, got {type(parsed).__name__}")

    return AgentResult(
        score=clamp_score(parsed.get("score")),
        pros=_string_list(parsed.get("pros")),
        cons=_string_list(parsed.get("cons")),
        questions=_string_list(parsed.get("questions")),
    )


class AgentService:
    """
    Runs a single jury agent against the configured LLM client.
    """

    def __init__(self, llm_client, max_retries: int = MAX_RETRIES, retry_base_delay: float = RETRY_BASE_DELAY_SECONDS):
        self.llm = llm_client
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay

    def run_agent(self, agent_key: str, case_text: str) -> AgentResult:
        """
        Ask one agent to score the case, retrying on rate limits.

        Rate-limited calls are retried up to max_retries times with a linear
        backoff (retry_base_delay * attempt seconds). Other errors propagate.

        Args:
            agent_key (str): "feasibility", "innovation" or "risk"
            case_text (str): The idea being evaluated

        Returns:
            AgentResult: Parsed and clamped agent result
        """
        if agent_key not in AGENT_PROMPTS:
            raise ValueError(f"Unknown agent '{agent_key}'")

        attempt = 1
        while True:
            try:
                content = self.llm.complete(AGENT_PROMPTS[agent_key], case_text)
                if not content or not content.strip():
                    raise EmptyAgentResponseError(f"{agent_key} agent returned empty content")

                try:
                    return parse_agent_json(content)
                except MalformedAgentResponseError as e:
                    print(f"[Agent Jury] {agent_key}: could not parse reply ({str(e)}): {content[:200]}")
                    raise MalformedAgentResponseError(f"{agent_key} agent returned malformed JSON.") from e

            except Exception as e:
                if is_rate_limit_error(e) and attempt <= self.max_retries:
                    delay = self.retry_base_delay * attempt
                    print(f"[Agent Jury] {agent_key}: rate-limit on attempt {attempt}/{self.max_retries}. Retrying in {delay:g}s...")
                    time.sleep(delay)
                    attempt += 1
                    continue
                raise

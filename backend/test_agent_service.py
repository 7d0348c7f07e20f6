"""
Agent reply parsing and the rate-limit retry loop.
"""
import sys

import pytest

from agent_jury.services import agent_service
from agent_jury.services.agent_service import (
    AgentService,
    EmptyAgentResponseError,
    MalformedAgentResponseError,
    is_rate_limit_error,
    parse_agent_json,
    strip_code_fences,
)
from agent_jury.services.llm_service import LLMProviderError
from conftest import FakeLLM, agent_reply


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []
    monkeypatch.setattr(agent_service.time, "sleep", recorded.append)
    return recorded


def test_fenced_and_plain_json_parse_identically():
    plain = agent_reply(78, pros=["Quick to build"], cons=["Limited features"])
    fenced = f"```json\n{plain}\n```"
    bare_fence = f"```\n{plain}\n```"
    upper_fence = f"  ```JSON {plain} ```  "

    expected = parse_agent_json(plain)
    assert parse_agent_json(fenced) == expected
    assert parse_agent_json(bare_fence) == expected
    assert parse_agent_json(upper_fence) == expected
    assert expected.score == 78
    assert expected.pros == ["Quick to build"]


def test_strip_code_fences_leaves_plain_text_alone():
    assert strip_code_fences('  {"score": 1}  ') == '{"score": 1}'


def test_parse_clamps_and_defaults():
    result = parse_agent_json('{"score": 140, "pros": "not a list", "cons": [1, 2]}')
    assert result.score == 100
    assert result.pros == []
    assert result.cons == ["1", "2"]
    assert result.questions == []


def test_parse_non_numeric_score_is_zero():
    assert parse_agent_json('{"score": "very high"}').score == 0
    assert parse_agent_json('{"pros": []}').score == 0


def test_parse_rejects_non_json():
    with pytest.raises(MalformedAgentResponseError):
        parse_agent_json("Sure! Here is my evaluation: great idea.")


def test_parse_rejects_non_object_json():
    with pytest.raises(MalformedAgentResponseError):
        parse_agent_json("[1, 2, 3]")


@pytest.mark.parametrize("message, expected", [
    ("OpenRouter API error: 429 - slow down", True),
    ("You exceeded your current QUOTA", True),
    ("Rate limit reached for requests", True),
    ("Too Many Requests", True),
    ("OpenRouter API error: 500 - internal", False),
    ("feasibility agent returned malformed JSON.", False),
])
def test_is_rate_limit_error(message, expected):
    assert is_rate_limit_error(Exception(message)) is expected


def test_run_agent_returns_parsed_result(sleeps):
    llm = FakeLLM({"innovation": agent_reply(65, fenced=True)})
    result = AgentService(llm).run_agent("innovation", "A voting dApp")

    assert result.score == 65
    assert llm.calls == [("innovation", "A voting dApp")]
    assert sleeps == []


def test_run_agent_retries_rate_limits_with_linear_backoff(sleeps):
    rate_limited = LLMProviderError("OpenRouter API error: 429 - Too Many Requests", status_code=429)
    llm = FakeLLM({"risk": [rate_limited, rate_limited, agent_reply(25)]})

    result = AgentService(llm, max_retries=2, retry_base_delay=10).run_agent("risk", "idea")

    assert result.score == 25
    assert sleeps == [10, 20]
    assert len(llm.calls) == 3


def test_run_agent_gives_up_after_max_retries(sleeps):
    rate_limited = LLMProviderError("OpenRouter API error: 429 - Too Many Requests", status_code=429)
    llm = FakeLLM({"risk": [rate_limited, rate_limited, rate_limited, agent_reply(25)]})

    with pytest.raises(LLMProviderError):
        AgentService(llm, max_retries=2, retry_base_delay=10).run_agent("risk", "idea")

    assert sleeps == [10, 20]
    assert len(llm.calls) == 3


def test_run_agent_does_not_retry_other_errors(sleeps):
    llm = FakeLLM({"feasibility": [LLMProviderError("OpenRouter API error: 500 - boom"), agent_reply(50)]})

    with pytest.raises(LLMProviderError, match="500"):
        AgentService(llm).run_agent("feasibility", "idea")

    assert sleeps == []


def test_run_agent_reports_malformed_json():
    llm = FakeLLM({"feasibility": "definitely not json"})

    with pytest.raises(MalformedAgentResponseError, match="feasibility agent returned malformed JSON."):
        AgentService(llm).run_agent("feasibility", "idea")


def test_run_agent_reports_empty_content():
    llm = FakeLLM({"innovation": "   "})

    with pytest.raises(EmptyAgentResponseError, match="innovation agent returned empty content"):
        AgentService(llm).run_agent("innovation", "idea")


def test_run_agent_rejects_unknown_agent():
    with pytest.raises(ValueError):
        AgentService(FakeLLM({})).run_agent("marketing", "idea")


def test_parse_clamps_huge_integer_score():
    assert parse_agent_json('{"score": ' + "9" * 400 + '}').score == 100
    assert parse_agent_json('{"score": -' + "9" * 400 + '}').score == 0


@pytest.mark.skipif(getattr(sys, "get_int_max_str_digits", lambda: 0)() == 0, reason="no integer digit limit on this interpreter")
def test_parse_rejects_integer_beyond_digit_limit():
    digits = sys.get_int_max_str_digits()
    with pytest.raises(MalformedAgentResponseError):
        parse_agent_json('{"score": ' + "9" * (digits + 1) + '}')

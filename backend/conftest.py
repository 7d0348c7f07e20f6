"""
Pytest configuration and shared fakes.

No test talks to an LLM provider or an RPC node: the LLM client and the
AgentJury contract are replaced with in-memory fakes.
"""
import json

import pytest
from fastapi.testclient import TestClient

from agent_jury.services.agent_service import AGENT_PROMPTS


def agent_reply(score, pros=None, cons=None, questions=None, fenced=False) -> str:
    body = json.dumps({
        "score": score,
        "pros": pros if pros is not None else ["Clear MVP scope"],
        "cons": cons if cons is not None else ["Limited features"],
        "questions": questions if questions is not None else ["Who is the first user?"],
    })
    return f"```json\n{body}\n```" if fenced else body


class FakeLLM:
    """Answers each agent prompt with a canned reply (or raises it if it is an exception)."""

    def __init__(self, replies: dict):
        self.replies = replies
        self.calls = []

    def complete(self, system_prompt: str, user_text: str) -> str:
        agent_key = next(key for key, prompt in AGENT_PROMPTS.items() if prompt == system_prompt)
        self.calls.append((agent_key, user_text))
        reply = self.replies[agent_key]
        if isinstance(reply, list):
            reply = reply.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeCall:
    def __init__(self, load):
        self.load = load

    def call(self):
        return self.load()


class FakeContractFunctions:
    def __init__(self, records: list, failing_ids=()):
        self.records = records
        self.failing_ids = set(failing_ids)

    def getVerdictCount(self):
        return FakeCall(lambda: len(self.records))

    def getVerdict(self, verdict_id):
        def load():
            if verdict_id in self.failing_ids:
                raise ValueError("execution reverted")
            return self.records[verdict_id]
        return FakeCall(load)


class FakeContract:
    def __init__(self, records: list, failing_ids=()):
        self.functions = FakeContractFunctions(records, failing_ids)


def verdict_tuple(verdict_id: int, final_score: int = 73, short_verdict: str = "Ship MVP") -> tuple:
    return (
        verdict_id,
        bytes([verdict_id]) * 32,
        78,
        65,
        25,
        final_score,
        short_verdict,
        "0x000000000000000000000000000000000000dEaD",
        1735689600 + verdict_id,
    )


@pytest.fixture
def client():
    from main import app
    with TestClient(app) as test_client:
        yield test_client

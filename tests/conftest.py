"""Shared fixtures for FinCoach tests."""

from types import SimpleNamespace
from typing import Any

import pytest

from fincoach.core.config import Settings


class ChatStub:
    """Minimal stand-in for ``openai.OpenAI`` exposing ``chat.completions.create``.

    Replies with ``reply`` as the message content, or raises ``error``.
    Every call's kwargs are recorded in ``calls``.
    """

    def __init__(self, reply: str | None = None, error: Exception | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self._reply = reply
        self._error = error
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        message = SimpleNamespace(content=self._reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    def prompt(self, call: int = 0) -> str:
        """User message content of a recorded call."""
        return self.calls[call]["messages"][1]["content"]


@pytest.fixture(autouse=True)
def _no_llm_env(monkeypatch) -> None:
    """Keep real credentials out of tests."""
    monkeypatch.delenv("HF_TOKEN", raising=False)
    monkeypatch.delenv("HF_MODEL_ID", raising=False)


@pytest.fixture
def llm_settings() -> Settings:
    """Settings with the collaborator configured."""
    return Settings(_env_file=None, hf_token="test-token", hf_model_id="test-model")


@pytest.fixture
def unconfigured_settings() -> Settings:
    """Settings without collaborator credentials."""
    return Settings(_env_file=None, hf_token=None, hf_model_id=None)

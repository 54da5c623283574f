"""Thin wrapper over an OpenAI-compatible chat completions endpoint.

The default endpoint is the Hugging Face router. Every failure (missing
configuration, transport error, unparsable reply) surfaces as
:class:`InsightUnavailableError` so callers have one thing to catch.
"""

from __future__ import annotations

import json
from typing import Any

from openai import OpenAI, OpenAIError

from fincoach.core.config import Settings
from fincoach.core.exceptions import InsightUnavailableError
from fincoach.logging_setup import get_logger

_logger = get_logger("fincoach.insights.llm")


def create_client(settings: Settings) -> OpenAI:
    """Build a client for the configured endpoint."""
    if not settings.llm_configured:
        raise InsightUnavailableError("HF_MODEL_ID or HF_TOKEN not set")
    return OpenAI(
        api_key=settings.hf_token,
        base_url=settings.llm_base_url,
        timeout=settings.llm_timeout_seconds,
    )


def resolve_model(settings: Settings) -> str:
    if not settings.hf_model_id:
        raise InsightUnavailableError("HF_MODEL_ID not set")
    return settings.hf_model_id


def extract_json_block(text: str, opener: str, closer: str) -> str:
    """Slice the outermost ``opener``..``closer`` span out of a reply.

    Models often wrap JSON in prose or code fences. When no span is found
    the text is returned unchanged.
    """
    first = text.find(opener)
    last = text.rfind(closer)
    if first != -1 and last != -1 and last > first:
        return text[first : last + 1]
    return text


def _message_text(resp: Any) -> str:
    choices = getattr(resp, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    return content.strip() if isinstance(content, str) else ""


def request_json(
    client: OpenAI,
    *,
    model: str,
    system: str,
    prompt: str,
    max_tokens: int,
    temperature: float,
    expect: type[dict] | type[list],
) -> Any:
    """Send one chat request and decode the JSON object or array in the reply.

    Raises:
        InsightUnavailableError: On transport errors, empty replies, invalid
            JSON, or JSON of the wrong top-level type.
    """
    try:
        resp = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            max_tokens=max_tokens,
            temperature=temperature,
        )
    except OpenAIError as e:
        raise InsightUnavailableError(f"Chat completion request failed: {e}") from e

    raw = _message_text(resp)
    if not raw:
        raise InsightUnavailableError("Chat completion returned no content")

    opener, closer = ("[", "]") if expect is list else ("{", "}")
    try:
        parsed = json.loads(extract_json_block(raw, opener, closer))
    except json.JSONDecodeError as e:
        _logger.debug("Unparsable reply: %s", raw)
        raise InsightUnavailableError("Could not parse JSON from reply") from e

    if not isinstance(parsed, expect):
        raise InsightUnavailableError(
            f"Expected a JSON {expect.__name__}, got {type(parsed).__name__}"
        )
    return parsed

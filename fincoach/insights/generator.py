"""Natural-language insights from the text-generation collaborator.

The generator never raises: when the collaborator is not configured,
unreachable, or replies with something unusable, the outcome carries
fixed default sentences and ``used_fallback=True``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from openai import OpenAI

from fincoach.core.config import Settings, get_settings
from fincoach.core.exceptions import InsightUnavailableError
from fincoach.core.models import InsightOutcome, InsightRequest, Insights
from fincoach.insights.llm import create_client, request_json, resolve_model
from fincoach.logging_setup import get_logger

_logger = get_logger("fincoach.insights.generator")

DEFAULT_MAIN_INSIGHT = "Here's an overview of how your money is being used this month."
DEFAULT_GOAL_INSIGHT = (
    "Based on your current savings pattern, we can help you understand "
    "if your goals are on track once more data is available."
)
DEFAULT_SAVING_SUGGESTION = (
    "Pick one category to reduce slightly and move the difference into savings automatically."
)

_SYSTEM_PROMPT = (
    "You are a concise, friendly personal financial coach. Always respond with valid JSON only."
)

_PROMPT_TEMPLATE = """\
You are a friendly personal financial coach. You will receive JSON with a user's spending summary.

Respond ONLY with a valid JSON object, no extra text, in this exact format:

{{
  "mainInsight": "one short paragraph about their current spending, in plain language",
  "goalInsight": "one short paragraph about whether they are on track to reach their financial goals, based on deadlines and required monthly savings",
  "savingSuggestion": "one practical, non-judgmental suggestion for how they could save a bit more next month",
  "coachFeed": [
    "short bullet-style tip 1",
    "short bullet-style tip 2",
    "short bullet-style tip 3"
  ]
}}

Rules:
- Keep the tone supportive, not shaming.
- Use dollar amounts when helpful.
- Do not mention that you are an AI or language model.
- Do not include any markdown or bullet characters, just plain sentences.

Here is the JSON summary of their data:

{summary}
"""


def default_insights() -> Insights:
    """The fixed insights used when the collaborator cannot be used."""
    return Insights(
        main_insight=DEFAULT_MAIN_INSIGHT,
        goal_insight=DEFAULT_GOAL_INSIGHT,
        saving_suggestion=DEFAULT_SAVING_SUGGESTION,
        coach_feed=[],
    )


def _text_or(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def parse_insights(payload: Mapping[str, Any]) -> Insights:
    """Build Insights from a decoded reply, defaulting field by field.

    Missing or empty text fields get their default sentence; a coachFeed
    that is not a list becomes empty and non-string entries are dropped.
    """
    feed = payload.get("coachFeed")
    coach_feed = (
        [item.strip() for item in feed if isinstance(item, str) and item.strip()]
        if isinstance(feed, list)
        else []
    )
    return Insights(
        main_insight=_text_or(payload.get("mainInsight"), DEFAULT_MAIN_INSIGHT),
        goal_insight=_text_or(payload.get("goalInsight"), DEFAULT_GOAL_INSIGHT),
        saving_suggestion=_text_or(payload.get("savingSuggestion"), DEFAULT_SAVING_SUGGESTION),
        coach_feed=coach_feed,
    )


def build_prompt(request: InsightRequest) -> str:
    return _PROMPT_TEMPLATE.format(summary=request.model_dump_json(indent=2))


class InsightGenerator:
    """Asks the text-generation collaborator for coaching insights.

    Args:
        settings: Settings to use; defaults to the process-wide settings.
        client: Pre-built OpenAI-compatible client. Built lazily from the
            settings when omitted.
    """

    def __init__(self, settings: Settings | None = None, client: OpenAI | None = None) -> None:
        self.settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = create_client(self.settings)
        return self._client

    def _request(self, request: InsightRequest) -> Insights:
        payload = request_json(
            self._get_client(),
            model=resolve_model(self.settings),
            system=_SYSTEM_PROMPT,
            prompt=build_prompt(request),
            max_tokens=self.settings.insight_max_tokens,
            temperature=self.settings.insight_temperature,
            expect=dict,
        )
        return parse_insights(payload)

    def generate(self, request: InsightRequest) -> InsightOutcome:
        """Generate insights, falling back to the defaults on any failure."""
        try:
            insights = self._request(request)
        except InsightUnavailableError as e:
            _logger.warning("Insight generation unavailable, using defaults: %s", e)
            return InsightOutcome(insights=default_insights(), used_fallback=True, error=str(e))

        _logger.info("Generated insights (%d coach tips)", len(insights.coach_feed))
        return InsightOutcome(insights=insights)

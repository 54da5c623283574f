"""Auto-categorization of uncategorized transactions.

A pure transform: the input list and its transactions are never modified.
The result is a new list where the collaborator's categories have been
applied to copies of the affected transactions.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from openai import OpenAI

from fincoach.core.config import Settings, get_settings
from fincoach.core.exceptions import InsightUnavailableError
from fincoach.core.models import DEFAULT_CATEGORY, Transaction
from fincoach.insights.llm import create_client, request_json, resolve_model
from fincoach.logging_setup import get_logger

_logger = get_logger("fincoach.insights.categorize")

ALLOWED_CATEGORIES: tuple[str, ...] = (
    "Bills",
    "Groceries",
    "Eating Out",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Health & Fitness",
    "Travel",
    "Subscriptions",
    "Income",
    "Transfer",
    "Other",
)

_SYSTEM_PROMPT = (
    "You are a precise transaction categorization engine. Always respond with valid JSON only."
)

_PROMPT_TEMPLATE = """\
You are a personal finance assistant that categorizes transactions.

You will receive a list of transactions with fields: index, description, merchant, amount.
Your task is to assign a spending category to each transaction.

Allowed categories (choose the closest one):
{categories}

Important:
- Always return one of the allowed categories.
- Use "Subscriptions" for recurring digital services (Netflix, Spotify, phone plans, etc.).
- Use "Income" only when the amount is positive and looks like salary, paycheck, or refund.
- Use "Transfer" when it looks like money moved between accounts, ATM, or generic transfer.
- If unsure, use "Other".

Respond ONLY with a valid JSON array, no extra text, in this exact format:

[
  {{ "index": 0, "category": "Groceries" }},
  {{ "index": 3, "category": "Eating Out" }}
]

Here are the transactions to categorize:

{items}
"""


def needs_category(tx: Transaction) -> bool:
    return tx.category.strip().lower() == DEFAULT_CATEGORY.lower()


def build_prompt(items: list[dict[str, object]]) -> str:
    categories = "\n".join(f'- "{name}"' for name in ALLOWED_CATEGORIES)
    return _PROMPT_TEMPLATE.format(categories=categories, items=json.dumps(items, indent=2))


def categorize_transactions(
    transactions: Sequence[Transaction],
    client: OpenAI | None = None,
    settings: Settings | None = None,
) -> list[Transaction]:
    """Fill in categories for uncategorized transactions.

    At most ``settings.categorize_max_items`` transactions are sent per call.
    Indices in the reply refer to positions in ``transactions``; entries for
    transactions that were not sent are ignored.

    Returns:
        A new list. On any collaborator failure, the transactions unchanged.
    """
    settings = settings or get_settings()
    result = list(transactions)

    pending = [idx for idx, tx in enumerate(result) if needs_category(tx)]
    if not pending:
        return result

    batch = pending[: settings.categorize_max_items]
    items = [
        {
            "index": idx,
            "description": result[idx].description,
            "merchant": result[idx].merchant or "",
            "amount": float(result[idx].amount),
        }
        for idx in batch
    ]

    try:
        decisions = request_json(
            client or create_client(settings),
            model=resolve_model(settings),
            system=_SYSTEM_PROMPT,
            prompt=build_prompt(items),
            max_tokens=settings.categorize_max_tokens,
            temperature=settings.categorize_temperature,
            expect=list,
        )
    except InsightUnavailableError as e:
        _logger.warning("Auto-categorization failed, keeping original categories: %s", e)
        return result

    sent = set(batch)
    applied = 0
    for item in decisions:
        if not isinstance(item, dict):
            continue
        idx = item.get("index")
        category = item.get("category")
        if not isinstance(idx, int) or isinstance(idx, bool) or idx not in sent:
            continue
        if not isinstance(category, str) or not category.strip():
            continue
        result[idx] = result[idx].model_copy(update={"category": category.strip()})
        applied += 1

    _logger.info("Auto-categorized %d of %d pending transactions", applied, len(pending))
    return result

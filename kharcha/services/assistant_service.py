"""Ledger context for the chat assistant and a thin chat-completion client."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx

from kharcha.config import settings
from kharcha.schemas.records import FriendDirection
from kharcha.schemas.snapshot import SnapshotState
from kharcha.utils.errors import AssistantUnavailableError
from kharcha.utils.money import format_money
from kharcha.utils.time import utc_today

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I couldn't connect to the server."


def _day(value) -> str:
    return value.date().isoformat() if value else "undated"


def build_context(state: SnapshotState, today: date | None = None) -> str:
    """Serialize totals and recent records into the assistant's context text."""
    label = settings.currency_label
    snapshot = state.snapshot
    collections = state.collections
    current = today or utc_today()

    lines = [
        f"CURRENT DATE: {current:%a %b %d %Y}",
        "",
        "FINANCIAL SNAPSHOT:",
        f"- Total added: {format_money(snapshot.total_available, label)}",
        f"- Of which from friends: {format_money(snapshot.friend_contribution, label)}",
        f"- Total spent: {format_money(snapshot.total_spent, label)}",
        f"- Remaining: {format_money(snapshot.remaining, label)}",
        f"- Market (detailed + quick): {format_money(snapshot.market_total, label)}",
        f"- Food (meals + quick): {format_money(snapshot.food_total, label)}",
        f"- Misc: {format_money(snapshot.misc_expense_subtotal, label)}",
        f"- Friend dues: {format_money(snapshot.friend_dues, label)}",
        f"- Cost per person: {format_money(state.per_person.cost_per_person, label)} "
        f"across {state.per_person.friend_count} people",
    ]
    if state.stale:
        lines.append("- Note: totals may be out of date")

    lines += ["", "RECENT EXPENSES:"]
    for e in collections.generic_expenses[: settings.assistant_expense_limit]:
        lines.append(
            f"- {_day(e.occurred_at)}: {e.title} ({e.category.value}) - "
            f"{format_money(e.amount, label)}"
        )

    lines += ["", "MEAL HISTORY:"]
    for m in collections.meal_records[: settings.assistant_meal_limit]:
        dish = f" ({m.dish_name})" if m.dish_name else ""
        lines.append(
            f"- {_day(m.occurred_at)}: {m.meal_type.value}{dish} cooked by {m.cooked_by}, "
            f"Cost: {format_money(m.cost, label)} for {m.people_count}"
        )

    lines += ["", "FRIEND TRANSACTIONS:"]
    for f in collections.friend_transactions:
        verb = "Owes us" if f.direction is FriendDirection.BORROWED else "Paid/Deposited"
        lines.append(
            f"- {f.name}: {verb} {format_money(f.amount, label)} "
            f"({f.status.value}, {f.category.value})"
        )

    lines += ["", "BUDGETS:"]
    for b in state.budgets:
        lines.append(
            f"- {b.name}: Limit {format_money(b.amount, label)}, "
            f"spent {format_money(b.spent, label)} ({b.percent:.0f}%)"
        )

    return "\n".join(lines)


class AssistantClient:
    """Send a conversation plus ledger context to a chat-completion endpoint."""

    def __init__(self, http: httpx.Client | None = None) -> None:
        self.http = http or httpx.Client(timeout=httpx.Timeout(settings.assistant_timeout_seconds))

    def close(self) -> None:
        self.http.close()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {settings.assistant_api_key}",
            "Content-Type": "application/json",
            "X-Title": settings.assistant_site_name,
        }
        if settings.assistant_site_url:
            headers["HTTP-Referer"] = settings.assistant_site_url
        return headers

    def reply(self, context: str, history: list[dict[str, str]], message: str) -> str:
        """Return the assistant's answer to ``message``."""
        if not settings.assistant_api_key:
            raise AssistantUnavailableError("Assistant API key is not configured")

        system_prompt = f"{settings.assistant_system_prompt}\n\nDATABASE CONTEXT:\n{context}"
        payload: dict[str, Any] = {
            "model": settings.assistant_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                *[m for m in history if m.get("role") != "system"],
                {"role": "user", "content": message},
            ],
        }
        try:
            response = self.http.post(
                settings.assistant_api_url, json=payload, headers=self._headers()
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Assistant request failed: %s", exc)
            raise AssistantUnavailableError("Assistant request failed") from exc

        choices = data.get("choices") or []
        if not choices:
            return FALLBACK_REPLY
        return str(choices[0].get("message", {}).get("content") or FALLBACK_REPLY)

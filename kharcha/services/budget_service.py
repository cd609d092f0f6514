"""Budget progress by free-text name matching."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from kharcha.schemas.records import Budget, GenericExpense, MarketPurchase
from kharcha.schemas.snapshot import BudgetProgress, BudgetSeverity
from kharcha.utils.money import money_sum

CRITICAL_PERCENT = 90.0
WARNING_PERCENT = 75.0


def _contains(needle: str, *haystacks: str | None) -> bool:
    return any(needle in (text or "").lower() for text in haystacks)


def severity_for(percent: float) -> BudgetSeverity:
    """Map a progress percentage to a display severity."""
    if percent >= CRITICAL_PERCENT:
        return BudgetSeverity.CRITICAL
    if percent > WARNING_PERCENT:
        return BudgetSeverity.WARNING
    return BudgetSeverity.NORMAL


def budget_spent(
    budget: Budget,
    generic_expenses: Sequence[GenericExpense],
    market_purchases: Sequence[MarketPurchase],
) -> Decimal:
    """Sum every expense and purchase whose text contains the budget name.

    Matching is a case-insensitive substring test, so one record can count
    toward several budgets with overlapping names.
    """
    needle = budget.name.lower()
    expenses = money_sum(
        e.amount for e in generic_expenses if _contains(needle, e.title, e.details)
    )
    purchases = money_sum(
        p.cost for p in market_purchases if _contains(needle, p.item_name, p.note)
    )
    return expenses + purchases


def match_budget_progress(
    budgets: Sequence[Budget],
    generic_expenses: Sequence[GenericExpense],
    market_purchases: Sequence[MarketPurchase],
) -> list[BudgetProgress]:
    """Return spend progress for each budget, in input order."""
    progress: list[BudgetProgress] = []
    for budget in budgets:
        spent = budget_spent(budget, generic_expenses, market_purchases)
        if budget.amount > 0:
            percent = float(min(Decimal(100), spent / budget.amount * 100))
        else:
            percent = 100.0 if spent > 0 else 0.0
        progress.append(
            BudgetProgress(
                budget_id=budget.id,
                name=budget.name,
                amount=budget.amount,
                spent=spent,
                percent=round(percent, 2),
                over_budget=spent > budget.amount,
                severity=severity_for(percent),
            )
        )
    return progress

"""Ledger aggregation into a single financial snapshot.

Quick-add expenses and detailed market/meal records are independent paths and
are never deduplicated against each other; both are summed. Itemized market
purchases are shown in ``market_total`` but left out of ``total_spent`` because
they are settled outside the weekly cash pool. Quick-add ``Market`` expenses
are not excluded.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from kharcha.schemas.records import (
    CashInflow,
    ExpenseCategory,
    FriendCategory,
    FriendDirection,
    FriendStatus,
    FriendTransaction,
    GenericExpense,
    MarketPurchase,
    MealRecord,
)
from kharcha.schemas.snapshot import (
    CategorySlice,
    FinancialSnapshot,
    LedgerCollections,
    SnapshotState,
)
from kharcha.services.allocation_service import allocate_per_person
from kharcha.services.budget_service import match_budget_progress
from kharcha.utils.money import ZERO, money_sum


def _category_total(expenses: Sequence[GenericExpense], category: ExpenseCategory) -> Decimal:
    return money_sum(e.amount for e in expenses if e.category is category)


def friend_dues(friend_transactions: Sequence[FriendTransaction]) -> Decimal:
    """Net pending balance with friends, excluding week contributions.

    Borrowed records add to what friends owe the pool, paid records subtract.
    """
    total = ZERO
    for txn in friend_transactions:
        if txn.status is not FriendStatus.PENDING or txn.category is FriendCategory.WEEK_AMOUNT:
            continue
        if txn.direction is FriendDirection.BORROWED:
            total += txn.amount
        else:
            total -= txn.amount
    return total


def compute_snapshot(
    cash_inflows: Sequence[CashInflow],
    generic_expenses: Sequence[GenericExpense],
    market_purchases: Sequence[MarketPurchase],
    meal_records: Sequence[MealRecord],
    friend_transactions: Sequence[FriendTransaction],
) -> FinancialSnapshot:
    """Reduce the five transaction collections to one ``FinancialSnapshot``."""
    direct_cash_total = money_sum(c.amount for c in cash_inflows)
    friend_contribution = money_sum(
        t.amount for t in friend_transactions if t.is_week_contribution
    )
    total_available = direct_cash_total + friend_contribution

    market_expense_subtotal = _category_total(generic_expenses, ExpenseCategory.MARKET)
    meal_expense_subtotal = _category_total(generic_expenses, ExpenseCategory.MEAL)
    misc_expense_subtotal = money_sum(
        e.amount
        for e in generic_expenses
        if e.category not in (ExpenseCategory.MARKET, ExpenseCategory.MEAL)
    )
    all_generic_expense_total = money_sum(e.amount for e in generic_expenses)

    detailed_market_total = money_sum(p.cost for p in market_purchases)
    detailed_meal_total = money_sum(m.cost for m in meal_records)

    market_total = detailed_market_total + market_expense_subtotal
    food_total = detailed_meal_total + meal_expense_subtotal
    total_spent = all_generic_expense_total + detailed_meal_total

    distribution = [
        CategorySlice(name=name, value=value)
        for name, value in (
            ("Market", market_total),
            ("Food", food_total),
            ("Misc", misc_expense_subtotal),
        )
        if value > 0
    ]

    return FinancialSnapshot(
        direct_cash_total=direct_cash_total,
        friend_contribution=friend_contribution,
        total_available=total_available,
        market_expense_subtotal=market_expense_subtotal,
        meal_expense_subtotal=meal_expense_subtotal,
        misc_expense_subtotal=misc_expense_subtotal,
        all_generic_expense_total=all_generic_expense_total,
        detailed_market_total=detailed_market_total,
        detailed_meal_total=detailed_meal_total,
        market_total=market_total,
        food_total=food_total,
        total_spent=total_spent,
        remaining=total_available - total_spent,
        friend_dues=friend_dues(friend_transactions),
        category_distribution=distribution,
    )


def build_state(
    collections: LedgerCollections,
    generation: int = 0,
    refreshed_at: datetime | None = None,
) -> SnapshotState:
    """Run the aggregation, budget matching and per-person split together."""
    snapshot = compute_snapshot(
        collections.cash_inflows,
        collections.generic_expenses,
        collections.market_purchases,
        collections.meal_records,
        collections.friend_transactions,
    )
    return SnapshotState(
        snapshot=snapshot,
        budgets=match_budget_progress(
            collections.budgets,
            collections.generic_expenses,
            collections.market_purchases,
        ),
        per_person=allocate_per_person(snapshot.total_spent, collections.friend_transactions),
        stale=False,
        error=None,
        generation=generation,
        refreshed_at=refreshed_at,
        collections=collections,
    )

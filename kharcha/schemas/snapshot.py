"""Financial snapshot schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from kharcha.schemas.records import (
    Budget,
    CashInflow,
    FriendTransaction,
    GenericExpense,
    MarketPurchase,
    MealRecord,
    MenuPlanEntry,
    Money,
    SignedMoney,
)

ZERO = Decimal("0")


class LedgerCollections(BaseModel):
    """Every collection as read from the store at one point in time."""

    model_config = ConfigDict(frozen=True)

    cash_inflows: list[CashInflow] = Field(default_factory=list)
    generic_expenses: list[GenericExpense] = Field(default_factory=list)
    market_purchases: list[MarketPurchase] = Field(default_factory=list)
    meal_records: list[MealRecord] = Field(default_factory=list)
    friend_transactions: list[FriendTransaction] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    menu_plan: list[MenuPlanEntry] = Field(default_factory=list)


class CategorySlice(BaseModel):
    """One slice of the spending distribution chart."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: Money


class FinancialSnapshot(BaseModel):
    """Aggregated totals for the whole ledger."""

    model_config = ConfigDict(frozen=True)

    direct_cash_total: Money = ZERO
    friend_contribution: Money = ZERO
    total_available: Money = ZERO
    market_expense_subtotal: Money = ZERO
    meal_expense_subtotal: Money = ZERO
    misc_expense_subtotal: Money = ZERO
    all_generic_expense_total: Money = ZERO
    detailed_market_total: Money = ZERO
    detailed_meal_total: Money = ZERO
    market_total: Money = ZERO
    food_total: Money = ZERO
    total_spent: Money = ZERO
    # Signed: negative means the pool is overspent.
    remaining: SignedMoney = ZERO
    # Signed: positive means friends owe the pool.
    friend_dues: SignedMoney = ZERO
    category_distribution: list[CategorySlice] = Field(default_factory=list)


class BudgetSeverity(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class BudgetProgress(BaseModel):
    """Spend matched against one budget."""

    model_config = ConfigDict(frozen=True)

    budget_id: str
    name: str
    amount: Money
    spent: Money
    percent: float
    over_budget: bool
    severity: BudgetSeverity


class PerPersonShare(BaseModel):
    """Rough per-head share of total spend."""

    model_config = ConfigDict(frozen=True)

    cost_per_person: Money = ZERO
    friend_count: int = 0


class SnapshotState(BaseModel):
    """The value published by the snapshot cache."""

    model_config = ConfigDict(frozen=True)

    snapshot: FinancialSnapshot = Field(default_factory=FinancialSnapshot)
    budgets: list[BudgetProgress] = Field(default_factory=list)
    per_person: PerPersonShare = Field(default_factory=PerPersonShare)
    stale: bool = True
    error: str | None = None
    generation: int = 0
    refreshed_at: datetime | None = None
    collections: LedgerCollections = Field(default_factory=LedgerCollections, exclude=True)

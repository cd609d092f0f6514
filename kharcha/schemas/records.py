"""Ledger record schemas.

Read models are lenient: they are built from whatever the store returns, so
currency values are coerced instead of rejected. Request models (``*Create``)
validate strictly before anything is written.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    computed_field,
    field_validator,
)

from kharcha.utils.money import coerce_money, round_money
from kharcha.utils.time import parse_timestamp

logger = logging.getLogger(__name__)


def _money_json(value: Decimal) -> float:
    return float(round_money(value))


Money = Annotated[
    Decimal,
    BeforeValidator(coerce_money),
    PlainSerializer(_money_json, return_type=float, when_used="json"),
]
SignedMoney = Annotated[
    Decimal,
    PlainSerializer(_money_json, return_type=float, when_used="json"),
]
MoneyInput = Annotated[
    Decimal,
    Field(ge=0, max_digits=14, decimal_places=2),
    PlainSerializer(_money_json, return_type=float, when_used="json"),
]


class ExpenseCategory(str, Enum):
    MEAL = "Meal"
    FRIEND = "Friend"
    MARKET = "Market"
    MISC = "Misc"


class MealType(str, Enum):
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"


class FriendDirection(str, Enum):
    BORROWED = "borrowed"
    PAID = "paid"


class FriendCategory(str, Enum):
    GENERAL = "General"
    WEEK_AMOUNT = "Week Amount"


class FriendStatus(str, Enum):
    PENDING = "Pending"
    SETTLED = "Settled"


def _lenient_enum(enum_cls: type[Enum], default: Enum):
    def _parse(value: Any) -> Enum:
        if isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            logger.warning("Unknown %s %r, using %s", enum_cls.__name__, value, default.value)
            return default

    return BeforeValidator(_parse)


def _lenient_timestamp(value: Any) -> datetime | None:
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed timestamp %r", value)
        return None


Timestamp = Annotated[datetime | None, BeforeValidator(_lenient_timestamp)]


class LedgerRecord(BaseModel):
    """Fields shared by every stored ledger row."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str = ""
    created_at: Timestamp = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("*", mode="before")
    @classmethod
    def _none_text(cls, value: Any, info) -> Any:
        # PostgREST returns null for empty optional text columns.
        if value is None and cls.model_fields[info.field_name].annotation is str:
            return ""
        return value


class CashInflow(LedgerRecord):
    """Money added straight to the communal pool."""

    amount: Money = Decimal("0")
    occurred_at: Timestamp = Field(default=None, alias="week_start")
    note: str | None = Field(default=None, alias="notes")


class GenericExpense(LedgerRecord):
    """A quick-add expense; its category picks the aggregate bucket."""

    title: str = ""
    amount: Money = Decimal("0")
    category: Annotated[ExpenseCategory, _lenient_enum(ExpenseCategory, ExpenseCategory.MISC)] = (
        ExpenseCategory.MISC
    )
    occurred_at: Timestamp = Field(default=None, alias="date")
    details: str | None = None


class MarketPurchase(LedgerRecord):
    """An itemized market purchase."""

    item_name: str = ""
    quantity: str = ""
    buyer: str = ""
    cost: Money = Decimal("0")
    occurred_at: Timestamp = Field(default=None, alias="date")
    budget_limit: Money | None = Field(default=None, alias="budget_per_item")
    note: str | None = None

    @property
    def over_item_budget(self) -> bool:
        """True when a positive per-item ceiling is exceeded."""
        return bool(self.budget_limit) and self.cost > self.budget_limit


def _people_count(value: Any) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 1
    return count if count >= 1 else 1


class MealRecord(LedgerRecord):
    """A cooked meal and how many people shared it."""

    meal_type: Annotated[MealType, _lenient_enum(MealType, MealType.DINNER)] = MealType.DINNER
    dish_name: str | None = None
    cooked_by: str = Field(default="", alias="cooked")
    eaten_by: str = Field(default="", alias="eaten")
    cost: Money = Decimal("0")
    people_count: Annotated[int, BeforeValidator(_people_count)] = Field(default=1, alias="people")
    occurred_at: Timestamp = Field(default=None, alias="date")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cost_per_person(self) -> Money:
        return self.cost / self.people_count


class FriendTransaction(LedgerRecord):
    """A loan to, or deposit from, a housemate."""

    name: str = ""
    amount: Money = Decimal("0")
    direction: Annotated[
        FriendDirection, _lenient_enum(FriendDirection, FriendDirection.BORROWED)
    ] = Field(default=FriendDirection.BORROWED, alias="type")
    category: Annotated[
        FriendCategory, _lenient_enum(FriendCategory, FriendCategory.GENERAL)
    ] = FriendCategory.GENERAL
    status: Annotated[FriendStatus, _lenient_enum(FriendStatus, FriendStatus.PENDING)] = (
        FriendStatus.PENDING
    )
    occurred_at: Timestamp = Field(default=None, alias="date")
    reason: str | None = None

    @property
    def is_week_contribution(self) -> bool:
        """Only a paid Week Amount record counts as pool income."""
        return (
            self.category is FriendCategory.WEEK_AMOUNT
            and self.direction is FriendDirection.PAID
        )


class Budget(LedgerRecord):
    """A named spending ceiling, matched to records by name."""

    name: str = ""
    amount: Money = Decimal("0")
    details: str | None = None
    occurred_at: Timestamp = Field(default=None, alias="date")


class MenuPlanEntry(LedgerRecord):
    """Planned dishes for one weekday."""

    day: str = ""
    breakfast: str = ""
    lunch: str = ""
    dinner: str = ""


class RequestModel(BaseModel):
    """Base for API request bodies; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")


class CashInflowCreate(RequestModel):
    """Request body for adding money to the pool."""

    amount: MoneyInput
    note: str | None = None


class ExpenseCreate(RequestModel):
    """Request body for a quick-add expense."""

    title: str = Field(..., min_length=1)
    amount: MoneyInput
    category: ExpenseCategory = ExpenseCategory.MISC
    details: str | None = None


class MarketPurchaseCreate(RequestModel):
    """Request body for an itemized purchase."""

    item_name: str = Field(..., min_length=1)
    quantity: str = ""
    buyer: str = ""
    cost: MoneyInput
    budget_limit: MoneyInput | None = None
    note: str | None = None


class MealCreate(RequestModel):
    """Request body for a meal record."""

    meal_type: MealType = MealType.DINNER
    dish_name: str | None = None
    cooked_by: str = ""
    eaten_by: str = ""
    eaten_by_names: list[str] = Field(default_factory=list)
    cost: MoneyInput
    people_count: int | None = Field(default=None, ge=1)


class FriendTransactionCreate(RequestModel):
    """Request body for a friend loan or deposit."""

    name: str = Field(..., min_length=1)
    amount: MoneyInput
    direction: FriendDirection = FriendDirection.PAID
    category: FriendCategory = FriendCategory.WEEK_AMOUNT
    status: FriendStatus = FriendStatus.PENDING
    reason: str | None = None


class BudgetCreate(RequestModel):
    """Request body for a budget ceiling."""

    name: str = Field(..., min_length=1)
    amount: MoneyInput
    details: str | None = None


class MenuDayUpdate(RequestModel):
    """Request body for editing one weekday of the menu."""

    breakfast: str = ""
    lunch: str = ""
    dinner: str = ""


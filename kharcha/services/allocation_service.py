"""Per-person cost estimate."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from kharcha.schemas.records import FriendTransaction
from kharcha.schemas.snapshot import PerPersonShare
from kharcha.utils.money import ZERO


def normalize_name(name: str) -> str:
    """Case- and whitespace-insensitive key for a friend name."""
    return name.strip().lower()


def friend_roster(friend_transactions: Iterable[FriendTransaction]) -> set[str]:
    """Distinct normalized friend names; blank names are ignored."""
    return {normalize_name(t.name) for t in friend_transactions if t.name.strip()}


def allocate_per_person(
    total_spent: Decimal,
    friend_transactions: Sequence[FriendTransaction],
) -> PerPersonShare:
    """Split total spend evenly over everyone who appears in the friend roster.

    This is an approximation for the dashboard only. It ignores who actually
    ate; per-meal splits live on ``MealRecord.cost_per_person``.
    """
    friend_count = len(friend_roster(friend_transactions))
    if friend_count == 0:
        return PerPersonShare(cost_per_person=ZERO, friend_count=0)
    return PerPersonShare(cost_per_person=total_spent / friend_count, friend_count=friend_count)

"""Per-person allocation tests."""

from __future__ import annotations

from decimal import Decimal

from kharcha.schemas.records import FriendTransaction
from kharcha.services.allocation_service import allocate_per_person, friend_roster


def test_no_friends_means_zero_share() -> None:
    """An empty roster yields a zero share instead of dividing by zero."""
    share = allocate_per_person(Decimal("900"), [])
    assert share.friend_count == 0
    assert share.cost_per_person == 0


def test_names_are_deduplicated_case_and_space_insensitively() -> None:
    """'Ali', ' ali ' and 'ALI' are one person."""
    records = [FriendTransaction(name=n, amount=1) for n in ("Ali", " ali ", "ALI")]
    share = allocate_per_person(Decimal("300"), records)
    assert share.friend_count == 1
    assert share.cost_per_person == 300


def test_share_is_split_across_distinct_names() -> None:
    """Total spend divides evenly across the roster."""
    records = [FriendTransaction(name=n, amount=1) for n in ("Ali", "Sara", "Omar", "sara")]
    share = allocate_per_person(Decimal("600"), records)
    assert share.friend_count == 3
    assert share.cost_per_person == 200


def test_blank_names_are_not_people() -> None:
    """Empty names do not inflate the headcount."""
    assert friend_roster([FriendTransaction(name="  "), FriendTransaction(name="Zee")]) == {"zee"}

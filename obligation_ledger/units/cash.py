"""
cash.py - Fungible Cash State

Cash is produced and consumed by a separate asset subsystem. The IOU
contract only reads the owner and amount of cash outputs to check that a
settlement actually pays the lender, so this module carries just enough
of that subsystem: the state, its commands and the summation helpers.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable

from ..core import Amount, Party, Token


class CashCommands(Enum):
    """Commands of the cash contract. They never drive IOU verification."""
    ISSUE = "issue"
    MOVE = "move"


@dataclass(frozen=True, slots=True)
class CashState:
    """
    A quantity of issued cash owned by one party.

    Attributes:
        amount: Quantity held, normally with an Issued token.
        owner: Current owner of the cash.
    """
    amount: Amount
    owner: Party

    def with_new_owner(self, new_owner: Party) -> CashState:
        return replace(self, owner=new_owner)

    def __repr__(self) -> str:
        return f"CashState({self.amount!r}, owner={self.owner.name})"


def sum_cash(states: Iterable[CashState]) -> Amount:
    """
    Sum the amounts of cash states.

    Raises:
        ValueError: If there are no states to sum.
        CurrencyMismatch: If the states hold different tokens.
    """
    amounts = [s.amount for s in states]
    if not amounts:
        raise ValueError("Cannot sum an empty collection of cash states")
    total = amounts[0]
    for amount in amounts[1:]:
        total = total + amount
    return total


def sum_cash_or_zero(states: Iterable[CashState], token: Token) -> Amount:
    """Sum the amounts of cash states, returning zero of `token` if there are none."""
    states = list(states)
    if not states:
        return Amount.zero(token)
    return sum_cash(states)

"""
iou.py - Obligation (IOU) State

=== IOU MODEL ===

An IOUState records that a borrower owes a lender an amount:
    - amount: the face value of the debt
    - paid: cumulative amount already settled, 0 <= paid <= amount
    - lender / borrower: the two distinct counterparties
    - linear_id: shared by every version of the same IOU

Lifecycle of one linear_id:
    Issue    -> first version created, nothing consumed
    Transfer -> new version, only the lender differs
    Settle   -> partial: new version with paid increased
                full: no successor version

States are immutable. with_new_lender() and pay() return new versions
and never touch the original. Construction does not validate business
rules (positive amount, distinct parties): an invalid record must be
representable so that IOUContract can reject it with a reason.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Optional, Tuple

from ..core import Amount, Party, PublicKey, UniqueIdentifier


@dataclass(frozen=True, slots=True)
class IOUState:
    """
    A debt of `amount` owed by `borrower` to `lender`.

    Attributes:
        amount: Face value of the obligation.
        lender: Party owed the money.
        borrower: Party owing the money.
        paid: Amount settled so far (defaults to zero of the amount's token).
        linear_id: Lineage identifier shared across versions.
    """
    amount: Amount
    lender: Party
    borrower: Party
    paid: Optional[Amount] = None
    linear_id: UniqueIdentifier = field(default_factory=UniqueIdentifier)

    def __post_init__(self):
        if self.paid is None:
            object.__setattr__(self, 'paid', Amount.zero(self.amount.token))

    @property
    def participants(self) -> Tuple[Party, Party]:
        return (self.lender, self.borrower)

    def participant_keys(self) -> FrozenSet[PublicKey]:
        return frozenset(p.owning_key for p in self.participants)

    @property
    def outstanding(self) -> Amount:
        """Amount still owed: amount - paid."""
        return self.amount - self.paid

    def with_new_lender(self, new_lender: Party) -> IOUState:
        return replace(self, lender=new_lender)

    def pay(self, amount_to_pay: Amount) -> IOUState:
        """Return the next version with `amount_to_pay` added to paid."""
        return replace(self, paid=self.paid + amount_to_pay)

    def __repr__(self) -> str:
        return (
            f"IOUState({self.amount!r}, paid={self.paid!r}, "
            f"{self.borrower.name}->{self.lender.name}, id={self.linear_id})"
        )

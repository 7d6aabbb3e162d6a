"""
helpers.py - Test Builders for IOU Transactions

Provides well-known parties and small builders so tests can describe a
transaction in one line. The surrounding platform builds transactions in
production; these helpers only exist for tests.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Iterable, Optional

from obligation_ledger import (
    Amount, CashCommands, CashState, Command, IOUCommands, IOUState, Issued,
    LedgerTransaction, Party, UniqueIdentifier,
)


ALICE = Party.from_name("O=Alice,L=London,C=GB")
BOB = Party.from_name("O=Bob,L=New York,C=US")
CHARLIE = Party.from_name("O=Charlie,L=Paris,C=FR")
MINICORP = Party.from_name("O=MiniCorp,L=Madrid,C=ES")
BANK = Party.from_name("O=Bank,L=Zurich,C=CH")


def usd(quantity) -> Amount:
    return Amount(Decimal(str(quantity)), "USD")


def gbp(quantity) -> Amount:
    return Amount(Decimal(str(quantity)), "GBP")


def issued(amount: Amount, issuer: Party = BANK, reference: str = "01") -> Amount:
    """Qualify a plain amount with an issuer."""
    return Amount(amount.quantity, Issued(issuer, reference, amount.token))


def keys(*parties: Party) -> frozenset:
    return frozenset(p.owning_key for p in parties)


def make_iou(
    amount=100,
    lender: Party = ALICE,
    borrower: Party = BOB,
    paid=0,
    linear_id: Optional[UniqueIdentifier] = None,
) -> IOUState:
    return IOUState(
        amount=usd(amount),
        lender=lender,
        borrower=borrower,
        paid=usd(paid),
        linear_id=linear_id or UniqueIdentifier(),
    )


def make_cash(quantity, owner: Party, currency: str = "USD") -> CashState:
    return CashState(
        amount=issued(Amount(Decimal(str(quantity)), currency)),
        owner=owner,
    )


def issue_tx(iou: IOUState, signers: Optional[Iterable[str]] = None) -> LedgerTransaction:
    if signers is None:
        signers = iou.participant_keys()
    return LedgerTransaction(
        outputs=(iou,),
        commands=(Command(IOUCommands.ISSUE, signers),),
    )


def transfer_tx(
    input_iou: IOUState,
    output_iou: IOUState,
    signers: Optional[Iterable[str]] = None,
) -> LedgerTransaction:
    if signers is None:
        signers = input_iou.participant_keys() | output_iou.participant_keys()
    return LedgerTransaction(
        inputs=(input_iou,),
        outputs=(output_iou,),
        commands=(Command(IOUCommands.TRANSFER, signers),),
    )


def settle_tx(
    input_iou: IOUState,
    outputs: Iterable,
    signers: Optional[Iterable[str]] = None,
    cash_inputs: Iterable = (),
) -> LedgerTransaction:
    """
    Build a settlement: the IOU input plus cash inputs, the given outputs,
    the IOU settle command and the borrower's cash move command.
    """
    if signers is None:
        signers = input_iou.participant_keys()
    return LedgerTransaction(
        inputs=(input_iou, *cash_inputs),
        outputs=tuple(outputs),
        commands=(
            Command(IOUCommands.SETTLE, signers),
            Command(CashCommands.MOVE, keys(input_iou.borrower)),
        ),
    )

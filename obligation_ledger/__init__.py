"""
obligation_ledger - IOU Contract Verification

A pure transaction-validation engine for IOUs (obligations) exchanged on a
shared ledger. The surrounding platform assembles a LedgerTransaction and
asks the contract for a verdict; nothing is stored or mutated here.

Usage:
    from decimal import Decimal
    from obligation_ledger import (
        Amount, Command, IOUCommands, IOUState, LedgerTransaction, Party, verify,
    )

    alice = Party.from_name("Alice")
    bob = Party.from_name("Bob")

    iou = IOUState(Amount(Decimal("100"), "USD"), lender=alice, borrower=bob)
    tx = LedgerTransaction(
        outputs=(iou,),
        commands=(Command(IOUCommands.ISSUE, {alice.owning_key, bob.owning_key}),),
    )
    result = verify(tx)
    assert result.ok
"""

# Core types
from .core import (
    Party,
    UniqueIdentifier,
    Issued,
    Amount,
    Command,
    StateGroup,
    LedgerTransaction,
    ContractError,
    StructuralError,
    CurrencyMismatch,
    ContractViolation,
    IOU_CONTRACT_ID,
)

# States
from .units.iou import IOUState
from .units.cash import (
    CashCommands,
    CashState,
    sum_cash,
    sum_cash_or_zero,
)

# Contract
from .contract import (
    IOUCommands,
    IOUContract,
    Violation,
    VerificationResult,
    verify,
    require_valid,
)

__all__ = [
    # Core
    'Party',
    'UniqueIdentifier',
    'Issued',
    'Amount',
    'Command',
    'StateGroup',
    'LedgerTransaction',
    'ContractError',
    'StructuralError',
    'CurrencyMismatch',
    'ContractViolation',
    'IOU_CONTRACT_ID',
    # States
    'IOUState',
    'CashCommands',
    'CashState',
    'sum_cash',
    'sum_cash_or_zero',
    # Contract
    'IOUCommands',
    'IOUContract',
    'Violation',
    'VerificationResult',
    'verify',
    'require_valid',
]

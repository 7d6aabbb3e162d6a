"""
Units module - States handled by the obligation ledger.

- IOU states (the obligation record verified by IOUContract)
- Cash states (the fungible asset used to settle IOUs)

All state types and related helpers are re-exported here for convenience.
"""

# IOU states
from .iou import IOUState

# Cash states
from .cash import (
    CashCommands,
    CashState,
    sum_cash,
    sum_cash_or_zero,
)

__all__ = [
    'IOUState',
    'CashCommands',
    'CashState',
    'sum_cash',
    'sum_cash_or_zero',
]

"""
contract.py - IOU Contract Verification

=== VERIFICATION MODEL ===

IOUContract.verify(tx) is a pure predicate over a LedgerTransaction. It
never mutates anything and returns a VerificationResult:

    ok          -> no violations
    violations  -> every rule broken, in evaluation order

Exactly one IOUCommands command must be present. Commands belonging to
other contracts (e.g. CashCommands.MOVE in a settlement) are ignored.

=== TWO ERROR TIERS ===

Rule violations are expected outcomes and are collected as data.

Structural errors mean the transaction could not be interpreted at all
(wrong command arity, a non-IOU record where an IOU was required, cash in
mixed currencies). They are raised internally as StructuralError or
CurrencyMismatch, caught in verify(), and reported as a single violation
flagged `structural=True` after any rule violations already collected.

=== RULES ===

Issue:
    no inputs, one output, positive amount, lender != borrower,
    signers == {lender, borrower}

Transfer:
    one input, one output, only the lender changes, the lender changes,
    signers == participants(input) | participants(output)

Settle:
    one IOU lineage with one input, cash outputs exist, some cash is paid
    to the lender, no overpayment, then either no IOU output (full) or
    one IOU output with amount/borrower/lender unchanged (partial),
    signers == participants(input)

The partial branch does not re-derive `paid` from the cash sum.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Tuple

from .core import (
    ContractError, ContractViolation, LedgerTransaction, StructuralError,
    IOU_CONTRACT_ID,
)
from .units.cash import CashState, sum_cash
from .units.iou import IOUState


# =============================================================================
# COMMANDS AND RESULTS
# =============================================================================

class IOUCommands(Enum):
    """Commands understood by IOUContract."""
    ISSUE = "issue"
    TRANSFER = "transfer"
    SETTLE = "settle"


@dataclass(frozen=True, slots=True)
class Violation:
    """
    One broken rule.

    Attributes:
        rule: Stable rule code, e.g. "issue.positive_amount".
        message: Human-readable statement of the rule.
        structural: True if the transaction could not be interpreted.
    """
    rule: str
    message: str
    structural: bool = False

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Verdict of IOUContract.verify()."""
    violations: Tuple[Violation, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def is_structural(self) -> bool:
        return any(v.structural for v in self.violations)

    @property
    def messages(self) -> List[str]:
        return [v.message for v in self.violations]

    @property
    def rules(self) -> List[str]:
        return [v.rule for v in self.violations]

    def raise_for_violations(self) -> None:
        """Raise ContractViolation if the transaction was rejected."""
        if self.violations:
            raise ContractViolation(self.violations)

    def __bool__(self) -> bool:
        return self.ok


class _Requirements:
    """Accumulates rule checks for one transaction."""

    def __init__(self):
        self.violations: List[Violation] = []

    def using(self, rule: str, message: str, condition: bool) -> bool:
        if not condition:
            self.violations.append(Violation(rule, message))
        return condition


# =============================================================================
# CONTRACT
# =============================================================================

class IOUContract:
    """
    Verifier for IOU issue, transfer and settlement transactions.

    Instances hold configuration only, so a single instance may verify any
    number of transactions concurrently.

    Args:
        verbose: Print a one-line verdict per verified transaction.
    """

    contract_id = IOU_CONTRACT_ID

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self._handlers: Dict[IOUCommands, Callable[[LedgerTransaction, frozenset, _Requirements], None]] = {
            IOUCommands.ISSUE: self._verify_issue,
            IOUCommands.TRANSFER: self._verify_transfer,
            IOUCommands.SETTLE: self._verify_settle,
        }

    def verify(self, tx: LedgerTransaction) -> VerificationResult:
        """
        Verify a transaction against the IOU rules.

        Args:
            tx: Fully resolved transaction.

        Returns:
            VerificationResult; empty violations means the transaction is valid.
        """
        req = _Requirements()
        try:
            command = self._require_single_command(tx)
            self._handlers[command.value](tx, command.signers, req)
        except ContractError as e:
            req.violations.append(Violation("structural", str(e), structural=True))

        result = VerificationResult(tuple(req.violations))
        if self.verbose:
            self._report(tx, result)
        return result

    def _require_single_command(self, tx: LedgerTransaction):
        commands = tx.commands_of_type(IOUCommands)
        if not commands:
            raise StructuralError("Required IOUCommands command is missing.")
        if len(commands) > 1:
            raise StructuralError(
                f"Exactly one IOUCommands command is required, found {len(commands)}."
            )
        return commands[0]

    def _report(self, tx: LedgerTransaction, result: VerificationResult) -> None:
        if result.ok:
            print(f"✓ VERIFIED: {tx.tx_id}")
            return
        for violation in result.violations:
            print(f"✗ REJECTED: {tx.tx_id}: [{violation.rule}] {violation.message}")

    # -------------------------------------------------------------------------
    # Issue
    # -------------------------------------------------------------------------

    def _verify_issue(self, tx: LedgerTransaction, signers: frozenset, req: _Requirements) -> None:
        req.using(
            "issue.no_inputs",
            "No inputs should be consumed when issuing an IOU.",
            len(tx.inputs) == 0,
        )
        if not req.using(
            "issue.one_output",
            "Only one output state should be created when issuing an IOU.",
            len(tx.outputs) == 1,
        ):
            return

        state = _as_iou(tx.outputs[0], "issued output")
        req.using(
            "issue.positive_amount",
            "A newly issued IOU must have a positive amount.",
            state.amount.quantity > 0,
        )
        req.using(
            "issue.distinct_parties",
            "The lender and borrower cannot have the same identity.",
            state.borrower != state.lender,
        )
        req.using(
            "issue.signers",
            "Both lender and borrower together only may sign IOU issue transaction.",
            signers == state.participant_keys(),
        )

    # -------------------------------------------------------------------------
    # Transfer
    # -------------------------------------------------------------------------

    def _verify_transfer(self, tx: LedgerTransaction, signers: frozenset, req: _Requirements) -> None:
        one_input = req.using(
            "transfer.one_input",
            "An IOU transfer transaction should only consume one input state.",
            len(tx.inputs) == 1,
        )
        one_output = req.using(
            "transfer.one_output",
            "An IOU transfer transaction should only create one output state.",
            len(tx.outputs) == 1,
        )
        if not (one_input and one_output):
            return

        input_iou = _as_iou(tx.inputs[0], "transfer input")
        output_iou = _as_iou(tx.outputs[0], "transfer output")
        req.using(
            "transfer.only_lender_changes",
            "Only the lender property may change.",
            input_iou == output_iou.with_new_lender(input_iou.lender),
        )
        req.using(
            "transfer.lender_changes",
            "The lender property must change in a transfer.",
            input_iou.lender != output_iou.lender,
        )
        req.using(
            "transfer.signers",
            "The borrower, old lender and new lender only must sign an IOU transfer transaction",
            signers == input_iou.participant_keys() | output_iou.participant_keys(),
        )

    # -------------------------------------------------------------------------
    # Settle
    # -------------------------------------------------------------------------

    def _verify_settle(self, tx: LedgerTransaction, signers: frozenset, req: _Requirements) -> None:
        groups = tx.group_states(IOUState, lambda iou: iou.linear_id)
        if not req.using(
            "settle.one_lineage",
            "A settle transaction must involve exactly one IOU.",
            len(groups) == 1,
        ):
            return
        ious = groups[0]
        if not req.using(
            "settle.one_input",
            "There must be one input IOU.",
            len(ious.inputs) == 1,
        ):
            return
        input_iou = ious.inputs[0]

        cash = tx.outputs_of_type(CashState)
        if not req.using("settle.cash_output", "There must be output cash.", len(cash) > 0):
            return
        acceptable_cash = [c for c in cash if c.owner == input_iou.lender]
        if not req.using(
            "settle.cash_to_lender",
            "There must be output cash paid to the recipient.",
            len(acceptable_cash) > 0,
        ):
            return

        # CurrencyMismatch from either line is a structural failure
        sum_acceptable_cash = sum_cash(acceptable_cash).without_issuer()
        amount_outstanding = input_iou.outstanding

        if req.using(
            "settle.no_overpayment",
            "The amount settled cannot be more than the amount outstanding.",
            amount_outstanding >= sum_acceptable_cash,
        ):
            if amount_outstanding == sum_acceptable_cash:
                req.using(
                    "settle.no_output_when_full",
                    "There must be no output IOU as it has been fully settled.",
                    len(ious.outputs) == 0,
                )
            elif req.using(
                "settle.one_output_when_partial",
                "There must be one output IOU.",
                len(ious.outputs) == 1,
            ):
                output_iou = ious.outputs[0]
                req.using(
                    "settle.amount_frozen",
                    "The amount may not change when settling.",
                    input_iou.amount == output_iou.amount,
                )
                req.using(
                    "settle.borrower_frozen",
                    "The borrower may not change when settling.",
                    input_iou.borrower == output_iou.borrower,
                )
                req.using(
                    "settle.lender_frozen",
                    "The lender may not change when settling.",
                    input_iou.lender == output_iou.lender,
                )

        req.using(
            "settle.signers",
            "Both lender and borrower together only must sign IOU settle transaction.",
            signers == input_iou.participant_keys(),
        )


def _as_iou(state, role: str) -> IOUState:
    if not isinstance(state, IOUState):
        raise StructuralError(f"Expected an IOUState as the {role}, got {type(state).__name__}.")
    return state


# =============================================================================
# MODULE-LEVEL API
# =============================================================================

_DEFAULT_CONTRACT = IOUContract()


def verify(tx: LedgerTransaction) -> VerificationResult:
    """Verify `tx` with a default, silent IOUContract."""
    return _DEFAULT_CONTRACT.verify(tx)


def require_valid(tx: LedgerTransaction) -> None:
    """
    Verify `tx` and raise if it is rejected.

    Raises:
        ContractViolation: Carrying every violation found.
    """
    verify(tx).raise_for_violations()

#!/usr/bin/env python3
"""
demo.py - Interactive Tutorial: One IOU From Issue To Settlement

Walks a single IOU through its whole lifecycle and shows what the
contract accepts and rejects at each step. Press Enter to advance.

WHAT YOU'LL LEARN:
  1:   Issue           - Creating an IOU, and what makes an issue invalid
  2:   Transfer        - Selling the IOU to a new lender
  3:   Partial settle  - Paying part of the debt in cash
  4:   Full settle     - Discharging the remainder
  5:   Rejections      - Overpayment, wrong payee, structural errors

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass, replace
from decimal import Decimal
import sys

from obligation_ledger import (
    Amount, CashCommands, CashState, Command, IOUCommands, IOUContract,
    IOUState, Issued, LedgerTransaction, Party,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the tutorial. Modify these to experiment."""
    currency: str = "USD"
    face_value: Decimal = Decimal("1000")
    first_payment: Decimal = Decimal("400")


CONFIG = DemoConfig()

QUICK_MODE = "--quick" in sys.argv

ALICE = Party.from_name("O=Alice,L=London,C=GB")
BOB = Party.from_name("O=Bob,L=New York,C=US")
CHARLIE = Party.from_name("O=Charlie,L=Paris,C=FR")
BANK = Party.from_name("O=Bank,L=Zurich,C=CH")


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    """Print a step header with learning objective."""
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def section_header(text: str):
    """Print a section header within a step."""
    print(f"\n--- {text} ---\n")


def money(quantity: Decimal) -> Amount:
    return Amount(quantity, CONFIG.currency)


def cash_to(owner: Party, quantity: Decimal) -> CashState:
    return CashState(Amount(quantity, Issued(BANK, "01", CONFIG.currency)), owner)


def signed_by(*parties: Party) -> frozenset:
    return frozenset(p.owning_key for p in parties)


# ============================================================================
# STEPS
# ============================================================================

def step_01_issue(contract: IOUContract) -> IOUState:
    """Issue an IOU from Bob to Alice."""
    step_header(1, "Issue",
        "An issue creates one IOU, consumes nothing, and is signed by both parties.")

    iou = IOUState(amount=money(CONFIG.face_value), lender=ALICE, borrower=BOB)
    print(f">>> {iou!r}")

    section_header("Signed by Alice only")
    contract.verify(LedgerTransaction(
        outputs=(iou,),
        commands=(Command(IOUCommands.ISSUE, signed_by(ALICE)),),
    ))

    section_header("Signed by Alice and Bob")
    contract.verify(LedgerTransaction(
        outputs=(iou,),
        commands=(Command(IOUCommands.ISSUE, signed_by(ALICE, BOB)),),
    ))
    return iou


def step_02_transfer(contract: IOUContract, iou: IOUState) -> IOUState:
    """Alice sells the IOU to Charlie."""
    step_header(2, "Transfer",
        "Only the lender may change, and old lender, new lender and borrower all sign.")

    transferred = iou.with_new_lender(CHARLIE)

    section_header("Sneaking in a lower amount")
    contract.verify(LedgerTransaction(
        inputs=(iou,),
        outputs=(replace(transferred, amount=money(CONFIG.face_value / 2)),),
        commands=(Command(IOUCommands.TRANSFER, signed_by(ALICE, BOB, CHARLIE)),),
    ))

    section_header("Honest transfer")
    contract.verify(LedgerTransaction(
        inputs=(iou,),
        outputs=(transferred,),
        commands=(Command(IOUCommands.TRANSFER, signed_by(ALICE, BOB, CHARLIE)),),
    ))
    return transferred


def _settle(contract: IOUContract, iou: IOUState, outputs, signers=None):
    signers = signers or signed_by(iou.lender, iou.borrower)
    return contract.verify(LedgerTransaction(
        inputs=(iou,),
        outputs=tuple(outputs),
        commands=(
            Command(IOUCommands.SETTLE, signers),
            Command(CashCommands.MOVE, signed_by(iou.borrower)),
        ),
    ))


def step_03_partial_settle(contract: IOUContract, iou: IOUState) -> IOUState:
    """Bob pays part of what he owes."""
    step_header(3, "Partial Settlement",
        "Paying less than outstanding needs one successor IOU with amount and parties unchanged.")

    payment = CONFIG.first_payment
    successor = iou.pay(money(payment))

    section_header("Cash paid, no successor IOU")
    _settle(contract, iou, [cash_to(CHARLIE, payment)])

    section_header("Cash paid, successor IOU")
    _settle(contract, iou, [cash_to(CHARLIE, payment), successor])
    print(f"\nOutstanding now: {successor.outstanding!r}")
    return successor


def step_04_full_settle(contract: IOUContract, iou: IOUState):
    """Bob pays the remainder."""
    step_header(4, "Full Settlement",
        "Paying exactly the outstanding amount ends the lineage: no IOU output.")
    _settle(contract, iou, [cash_to(CHARLIE, iou.outstanding.quantity)])


def step_05_rejections(contract: IOUContract, iou: IOUState):
    """Common mistakes the contract catches."""
    step_header(5, "Rejections",
        "Every broken rule is reported by name; structural errors are flagged.")

    section_header("Overpayment")
    _settle(contract, iou, [cash_to(CHARLIE, iou.outstanding.quantity + 1)])

    section_header("Paying the wrong party")
    _settle(contract, iou, [cash_to(ALICE, iou.outstanding.quantity)])

    section_header("No IOU command")
    contract.verify(LedgerTransaction(inputs=(iou,)))


def main():
    """Run the complete tutorial."""
    print("=" * 70)
    print("       IOU CONTRACT - INTERACTIVE TUTORIAL")
    print("=" * 70)

    if QUICK_MODE:
        print("Running in QUICK mode (no pauses)")
    else:
        print("Running in INTERACTIVE mode (press Enter to advance)")

    contract = IOUContract(verbose=True)
    wait_for_enter()

    iou = step_01_issue(contract)
    wait_for_enter()
    iou = step_02_transfer(contract, iou)
    wait_for_enter()
    iou = step_03_partial_settle(contract, iou)
    wait_for_enter()
    step_04_full_settle(contract, iou)
    wait_for_enter()
    step_05_rejections(contract, iou)

    print("""
    Next steps:
      - See obligation_ledger/contract.py for the rule set
      - Run tests: pytest tests/
    """)


if __name__ == "__main__":
    main()

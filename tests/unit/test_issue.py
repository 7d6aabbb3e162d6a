"""
test_issue.py - Tests for IOU issuance

Tests:
- A well-formed issue verifies
- Each issue rule in isolation
- Violations accumulate in a fixed order
- Structural failures (command arity, wrong output type)
"""

import pytest
from dataclasses import replace

from obligation_ledger import (
    CashCommands, Command, ContractViolation, IOUCommands, IOU_CONTRACT_ID,
    LedgerTransaction, Party, require_valid, verify,
)

from tests.helpers import (
    ALICE, BOB, CHARLIE, keys, make_cash, make_iou, issue_tx, usd,
)


class TestIssueHappyPath:
    """Tests for a valid issue transaction."""

    def test_valid_issue(self, contract, iou):
        """Lender and borrower both sign a single positive IOU."""
        result = contract.verify(issue_tx(iou))
        assert result.ok
        assert result.violations == ()
        assert result.messages == []

    def test_signer_order_and_duplicates_ignored(self, contract, iou):
        """Signers are compared as a set."""
        signers = [BOB.owning_key, ALICE.owning_key, BOB.owning_key]
        tx = LedgerTransaction(outputs=(iou,), commands=(Command(IOUCommands.ISSUE, signers),))
        assert contract.verify(tx).ok

    def test_module_level_verify(self, iou):
        """Module-level verify uses a default contract."""
        assert verify(issue_tx(iou)).ok

    def test_contract_id(self, contract):
        assert contract.contract_id == IOU_CONTRACT_ID

    def test_require_valid_passes(self, iou):
        """require_valid returns None for a valid transaction."""
        assert require_valid(issue_tx(iou)) is None


class TestIssueRules:
    """Tests for each issue rule."""

    def test_inputs_rejected(self, contract, iou):
        """An issue must not consume anything."""
        tx = LedgerTransaction(
            inputs=(make_iou(),),
            outputs=(iou,),
            commands=(Command(IOUCommands.ISSUE, iou.participant_keys()),),
        )
        result = contract.verify(tx)
        assert result.rules == ["issue.no_inputs"]
        assert result.messages == ["No inputs should be consumed when issuing an IOU."]

    def test_two_outputs_rejected(self, contract, iou):
        """Field checks are skipped when the output count is wrong."""
        tx = LedgerTransaction(
            outputs=(iou, make_iou()),
            commands=(Command(IOUCommands.ISSUE, iou.participant_keys()),),
        )
        result = contract.verify(tx)
        assert result.rules == ["issue.one_output"]
        assert not result.is_structural

    def test_no_outputs_rejected(self, contract, iou):
        """An issue must create exactly one output."""
        tx = LedgerTransaction(commands=(Command(IOUCommands.ISSUE, iou.participant_keys()),))
        assert contract.verify(tx).rules == ["issue.one_output"]

    @pytest.mark.parametrize("amount", [0, -1, "-0.01"])
    def test_non_positive_amount_rejected(self, contract, amount):
        """Zero and negative amounts cannot be issued."""
        result = contract.verify(issue_tx(make_iou(amount=amount)))
        assert result.rules == ["issue.positive_amount"]
        assert result.messages == ["A newly issued IOU must have a positive amount."]

    def test_same_lender_and_borrower_rejected(self, contract):
        """Lender and borrower must be different parties."""
        iou = make_iou(lender=ALICE, borrower=ALICE)
        result = contract.verify(issue_tx(iou))
        assert result.rules == ["issue.distinct_parties"]

    def test_same_key_under_two_names_rejected(self, contract):
        """Identity is the signing key, so an alias of the lender is the lender."""
        alias = Party("O=Alice Anonymous,L=Nowhere,C=XX", ALICE.owning_key)
        iou = make_iou(lender=ALICE, borrower=alias)
        result = contract.verify(issue_tx(iou, signers=keys(ALICE)))
        assert result.rules == ["issue.distinct_parties"]

    @pytest.mark.parametrize("signers", [
        keys(ALICE),
        keys(BOB),
        keys(ALICE, BOB, CHARLIE),
        keys(CHARLIE),
        frozenset(),
    ])
    def test_wrong_signers_rejected(self, contract, iou, signers):
        """Exactly lender and borrower must sign."""
        result = contract.verify(issue_tx(iou, signers=signers))
        assert result.rules == ["issue.signers"]

    def test_violations_accumulate_in_order(self, contract):
        """Every broken rule is reported, in evaluation order."""
        iou = make_iou(amount=0, lender=ALICE, borrower=ALICE)
        tx = LedgerTransaction(
            inputs=(make_iou(),),
            outputs=(iou,),
            commands=(Command(IOUCommands.ISSUE, keys(CHARLIE)),),
        )
        result = contract.verify(tx)
        assert result.rules == [
            "issue.no_inputs",
            "issue.positive_amount",
            "issue.distinct_parties",
            "issue.signers",
        ]

    def test_paid_is_not_checked_on_issue(self, contract, iou):
        """Issue does not constrain the paid field."""
        result = contract.verify(issue_tx(replace(iou, paid=usd(10))))
        assert result.ok


class TestIssueStructuralErrors:
    """Tests for transactions the contract cannot interpret."""

    def test_missing_command(self, contract, iou):
        """No IOU command at all."""
        result = contract.verify(LedgerTransaction(outputs=(iou,)))
        assert result.is_structural
        assert result.rules == ["structural"]

    def test_only_foreign_command(self, contract, iou):
        """Commands of other contracts do not count."""
        tx = LedgerTransaction(
            outputs=(iou,),
            commands=(Command(CashCommands.ISSUE, iou.participant_keys()),),
        )
        assert contract.verify(tx).is_structural

    def test_two_iou_commands(self, contract, iou):
        """More than one IOU command is ambiguous."""
        tx = LedgerTransaction(
            outputs=(iou,),
            commands=(
                Command(IOUCommands.ISSUE, iou.participant_keys()),
                Command(IOUCommands.TRANSFER, iou.participant_keys()),
            ),
        )
        result = contract.verify(tx)
        assert result.is_structural
        assert "found 2" in result.messages[0]

    def test_non_iou_output(self, contract):
        """The single output must be an IOUState."""
        tx = LedgerTransaction(
            outputs=(make_cash(100, ALICE),),
            commands=(Command(IOUCommands.ISSUE, keys(ALICE, BOB)),),
        )
        result = contract.verify(tx)
        assert result.is_structural
        assert "CashState" in result.messages[0]

    def test_require_valid_raises(self, iou):
        """require_valid raises with every violation attached."""
        with pytest.raises(ContractViolation) as exc_info:
            require_valid(issue_tx(iou, signers=keys(ALICE)))
        assert [v.rule for v in exc_info.value.violations] == ["issue.signers"]
        assert "Both lender and borrower" in str(exc_info.value)


class TestVerboseOutput:
    """Tests for the verbose verdict printing."""

    def test_verified_printed(self, verbose_contract, iou, capsys):
        tx = issue_tx(iou)
        verbose_contract.verify(tx)
        out = capsys.readouterr().out
        assert "VERIFIED" in out
        assert tx.tx_id in out

    def test_rejections_printed(self, verbose_contract, iou, capsys):
        verbose_contract.verify(issue_tx(iou, signers=keys(ALICE)))
        out = capsys.readouterr().out
        assert "REJECTED" in out
        assert "[issue.signers]" in out

    def test_silent_by_default(self, contract, iou, capsys):
        contract.verify(issue_tx(iou))
        assert capsys.readouterr().out == ""

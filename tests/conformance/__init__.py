"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of IOU verification.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. issuance.py - Positive amounts, distinct parties, exact signers
2. transfer.py - Only the lender changes, signer union
3. settlement.py - Cash accounting against the outstanding amount
4. determinism.py - Pure, repeatable verdicts and content ids

These tests use hypothesis for property-based testing.
"""

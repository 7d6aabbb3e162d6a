"""
conftest.py - Shared pytest fixtures for obligation ledger tests

Provides common fixtures used across unit tests:
- A silent contract and a verbose one
- A standard issued IOU (100 USD, Bob owes Alice)
"""

import pytest

from obligation_ledger import IOUContract

from tests.helpers import make_iou


# =============================================================================
# CONTRACT FIXTURES
# =============================================================================

@pytest.fixture
def contract():
    """Silent IOU contract."""
    return IOUContract()


@pytest.fixture
def verbose_contract():
    """IOU contract that prints its verdicts."""
    return IOUContract(verbose=True)


# =============================================================================
# STATE FIXTURES
# =============================================================================

@pytest.fixture
def iou():
    """100 USD owed by Bob to Alice, nothing paid."""
    return make_iou(amount=100)

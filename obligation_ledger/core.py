"""
Core types and pure functions for the obligation ledger.

This module provides the foundational data structures the contract verifies:
1. Identities and quantities: Party, Amount, Issued, UniqueIdentifier
2. Transaction shapes: Command, LedgerTransaction, StateGroup
3. Exceptions: ContractError and its structural/rule subtypes
4. Canonical hashing: content-addressed transaction ids

All functions in this module are pure. Nothing here reads or writes
storage; a LedgerTransaction is an already-assembled value handed over
by the surrounding platform.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal, ROUND_HALF_EVEN, getcontext
from enum import Enum
import hashlib
import uuid
from typing import (
    Any, Callable, Dict, FrozenSet, Hashable, Iterable, List, Optional,
    Tuple, Type, TypeVar, Union,
)


# ============================================================================
# DECIMAL CONTEXT CONFIGURATION
# ============================================================================
#
# Amount arithmetic must be deterministic across processes.
#
# PRECONDITION: No other code should modify the global Decimal context.
# If thread-local contexts are needed, use decimal.localcontext().
#
_LEDGER_DECIMAL_CONTEXT = getcontext()
_LEDGER_DECIMAL_CONTEXT.prec = 50
_LEDGER_DECIMAL_CONTEXT.rounding = ROUND_HALF_EVEN


# ============================================================================
# CONSTANTS
# ============================================================================

# Identifier of the IOU contract.
IOU_CONTRACT_ID = "obligation_ledger.contract.IOUContract"

# Length of the hex digest used for transaction ids.
TX_ID_LENGTH = 32


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Canonical signing key of a party.
PublicKey = str

# Any ledger state (IOUState, CashState, ...).
ContractState = Any

S = TypeVar("S")


# ============================================================================
# EXCEPTIONS
# ============================================================================

class ContractError(Exception):
    """Base exception for all contract-related errors."""
    pass


class StructuralError(ContractError):
    """Raised when a transaction cannot even be interpreted by a contract."""
    pass


class CurrencyMismatch(ContractError):
    """Raised when amounts of different tokens are combined or compared."""
    pass


class ContractViolation(ContractError):
    """
    Raised by require_valid() when a transaction fails verification.

    Attributes:
        violations: Every Violation reported for the transaction, in order.
    """

    def __init__(self, violations):
        self.violations = tuple(violations)
        super().__init__("; ".join(v.message for v in self.violations))


# ============================================================================
# IDENTITIES
# ============================================================================

@dataclass(frozen=True, slots=True)
class Party:
    """
    A well-known identity on the ledger.

    Attributes:
        name: Human-readable name (e.g., "O=Alice,L=London,C=GB").
        owning_key: Canonical signing key. Signer sets contain these keys.

    Equality and hashing use `owning_key` only; `name` is a label.
    """
    name: str = field(compare=False)
    owning_key: PublicKey

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Party name cannot be empty")
        if not self.owning_key or not self.owning_key.strip():
            raise ValueError("Party owning_key cannot be empty")

    @classmethod
    def from_name(cls, name: str) -> Party:
        """Create a party whose key is derived deterministically from its name."""
        return cls(name=name, owning_key=hashlib.sha256(name.encode()).hexdigest())

    def __repr__(self) -> str:
        return f"Party({self.name})"


@dataclass(frozen=True, slots=True)
class UniqueIdentifier:
    """
    Identifier shared by every version of the same linear state.

    Equality and hashing use `id` only; `external_id` is a label.
    """
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    external_id: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        if self.external_id:
            return f"{self.external_id}_{self.id}"
        return str(self.id)


# ============================================================================
# AMOUNTS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Issued:
    """
    A product (usually a currency code) qualified by who issued it.

    Attributes:
        issuer: Party that issued the asset.
        reference: Issuer-side reference for the issuance.
        product: The underlying token, e.g. "USD".
    """
    issuer: Party
    reference: str
    product: str

    def __repr__(self) -> str:
        return f"{self.product} issued by {self.issuer.name}"


Token = Union[str, Issued]


@dataclass(frozen=True, slots=True)
class Amount:
    """
    A quantity of a token.

    Quantities may be zero or negative so that invalid records stay
    representable; the contract is what rejects them. Combining two amounts
    of different tokens raises CurrencyMismatch.
    """
    quantity: Decimal
    token: Token

    def __post_init__(self):
        if isinstance(self.quantity, bool):
            raise ValueError("Amount quantity must be Decimal, got bool")
        if isinstance(self.quantity, int):
            object.__setattr__(self, 'quantity', Decimal(self.quantity))
        if not isinstance(self.quantity, Decimal):
            raise ValueError(f"Amount quantity must be Decimal, got {type(self.quantity)}")
        if self.quantity.is_infinite() or self.quantity.is_nan():
            raise ValueError(f"Amount quantity must be finite, got {self.quantity}")
        if not self.token:
            raise ValueError("Amount token cannot be empty")

    @classmethod
    def zero(cls, token: Token) -> Amount:
        return cls(Decimal("0"), token)

    def without_issuer(self) -> Amount:
        """Strip the issuer qualifier, keeping only the underlying product."""
        if isinstance(self.token, Issued):
            return Amount(self.quantity, self.token.product)
        return self

    def _check_token(self, other: Amount) -> None:
        if not isinstance(other, Amount):
            raise TypeError(f"Cannot combine Amount with {type(other).__name__}")
        if self.token != other.token:
            raise CurrencyMismatch(f"Token mismatch: {self.token!r} vs {other.token!r}")

    def __add__(self, other: Amount) -> Amount:
        self._check_token(other)
        return Amount(self.quantity + other.quantity, self.token)

    def __sub__(self, other: Amount) -> Amount:
        self._check_token(other)
        return Amount(self.quantity - other.quantity, self.token)

    def __lt__(self, other: Amount) -> bool:
        self._check_token(other)
        return self.quantity < other.quantity

    def __le__(self, other: Amount) -> bool:
        self._check_token(other)
        return self.quantity <= other.quantity

    def __gt__(self, other: Amount) -> bool:
        self._check_token(other)
        return self.quantity > other.quantity

    def __ge__(self, other: Amount) -> bool:
        self._check_token(other)
        return self.quantity >= other.quantity

    def __repr__(self) -> str:
        return f"{_normalize_decimal(self.quantity)} {self.token!r}"


# ============================================================================
# TRANSACTIONS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Command:
    """
    A declared intent together with the keys that signed it.

    Signers are normalised to a frozenset, so neither order nor duplicates
    affect equality or verification.
    """
    value: Hashable
    signers: FrozenSet[PublicKey] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, 'signers', frozenset(self.signers))

    def __repr__(self) -> str:
        return f"Command({self.value}, {len(self.signers)} signers)"


@dataclass(frozen=True, slots=True)
class StateGroup:
    """Inputs and outputs of one state type that share a grouping key."""
    inputs: Tuple[Any, ...]
    outputs: Tuple[Any, ...]
    grouping_key: Hashable


@dataclass(frozen=True, slots=True)
class LedgerTransaction:
    """
    A fully resolved transaction, as handed to contracts for verification.

    Attributes:
        inputs: States consumed by the transaction (mixed types allowed).
        outputs: States created by the transaction (mixed types allowed).
        commands: Commands of every contract involved, with their signers.
    """
    inputs: Tuple[ContractState, ...] = ()
    outputs: Tuple[ContractState, ...] = ()
    commands: Tuple[Command, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'inputs', tuple(self.inputs))
        object.__setattr__(self, 'outputs', tuple(self.outputs))
        object.__setattr__(self, 'commands', tuple(self.commands))

    def inputs_of_type(self, state_type: Type[S]) -> List[S]:
        return [s for s in self.inputs if isinstance(s, state_type)]

    def outputs_of_type(self, state_type: Type[S]) -> List[S]:
        return [s for s in self.outputs if isinstance(s, state_type)]

    def commands_of_type(self, value_type: type) -> List[Command]:
        return [c for c in self.commands if isinstance(c.value, value_type)]

    def group_states(
        self,
        state_type: Type[S],
        key: Callable[[S], Hashable],
    ) -> List[StateGroup]:
        """
        Partition the inputs and outputs of one state type by a key.

        Groups are returned in the order their key is first seen, scanning
        inputs before outputs, so the result is deterministic.

        Args:
            state_type: Only states of this type are grouped.
            key: Function extracting the grouping key, e.g. the linear id.

        Returns:
            One StateGroup per distinct key.
        """
        inputs: Dict[Hashable, List[S]] = {}
        outputs: Dict[Hashable, List[S]] = {}
        order: List[Hashable] = []

        for bucket, states in ((inputs, self.inputs), (outputs, self.outputs)):
            for state in states:
                if not isinstance(state, state_type):
                    continue
                k = key(state)
                if k not in inputs and k not in outputs:
                    order.append(k)
                bucket.setdefault(k, []).append(state)

        return [
            StateGroup(
                inputs=tuple(inputs.get(k, ())),
                outputs=tuple(outputs.get(k, ())),
                grouping_key=k,
            )
            for k in order
        ]

    @property
    def tx_id(self) -> str:
        """Content hash of inputs, outputs and commands."""
        return _compute_tx_id(self.inputs, self.outputs, self.commands)

    def __repr__(self) -> str:
        return (
            f"LedgerTransaction({len(self.inputs)} inputs, "
            f"{len(self.outputs)} outputs, {list(self.commands)})"
        )


# ============================================================================
# CANONICAL HASHING
# ============================================================================

def _normalize_decimal(d: Decimal) -> str:
    """
    Normalize a Decimal to a canonical string representation.

    Decimal("1.0") and Decimal("1.00") both become "1".
    """
    normalized = d.normalize()
    if normalized == normalized.to_integral_value():
        return str(int(normalized))
    return format(normalized, 'f')


def _canonicalize(value: Any) -> str:
    """
    Produce a canonical string representation of a value for hashing.

    Dataclass states are serialised by their compared fields under their
    type name (labels such as Party.name are left out, so equal values hash
    alike),
    sets are sorted, and Decimals are normalised.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return f"E:{type(value).__name__}.{value.name}"
    if isinstance(value, Decimal):
        return f"D:{_normalize_decimal(value)}"
    if isinstance(value, (int, float)):
        return f"N:{value}"
    if isinstance(value, str):
        return f"S:{value}"
    if isinstance(value, uuid.UUID):
        return f"U:{value}"
    if isinstance(value, datetime):
        return f"T:{value.isoformat()}"
    if hasattr(value, '__dataclass_fields__'):
        items = ",".join(
            f"{f.name}={_canonicalize(getattr(value, f.name))}"
            for f in fields(value) if f.compare
        )
        return f"{type(value).__name__}({items})"
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        serialized = ",".join(f"{_canonicalize(k)}:{_canonicalize(v)}" for k, v in items)
        return f"{{{serialized}}}"
    if isinstance(value, (list, tuple)):
        serialized = ",".join(_canonicalize(item) for item in value)
        return f"[{serialized}]"
    if isinstance(value, (set, frozenset)):
        serialized = ",".join(sorted(_canonicalize(item) for item in value))
        return f"<{serialized}>"
    return f"R:{repr(value)}"


def _compute_tx_id(
    inputs: Iterable[ContractState],
    outputs: Iterable[ContractState],
    commands: Iterable[Command],
) -> str:
    """
    Compute a deterministic content hash for a transaction.

    Input and output order is significant (it is part of the transaction),
    command order is not.
    """
    content_parts = [f"in:{_canonicalize(s)}" for s in inputs]
    content_parts.extend(f"out:{_canonicalize(s)}" for s in outputs)
    content_parts.extend(sorted(
        f"cmd:{_canonicalize(c.value)}|{_canonicalize(c.signers)}" for c in commands
    ))
    content = "|".join(content_parts)
    return hashlib.sha256(content.encode()).hexdigest()[:TX_ID_LENGTH]

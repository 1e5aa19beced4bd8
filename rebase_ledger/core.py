"""
Core types for the interest-bearing rebase ledger.

This module provides the foundational data structures shared by every layer:
1. Constants: fixed-point scale, starting rate, unsigned amount bound
2. Type aliases: Amount, Rate, Timestamp, HolderId
3. Immutable records: HolderAccount and the observable events
4. Protocols: Authorizer, Clock and TokenView
5. Exceptions: LedgerError and the domain-specific error types

Nothing in this module mutates state.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, Union, runtime_checkable


# ============================================================================
# CONSTANTS
# ============================================================================

# Precision denominator for rates and interest factors (1.0 == SCALE).
SCALE = 10 ** 18

# Global rate at initialization: 5e10 per second at 1e18 scale.
INITIAL_INTEREST_RATE = 5 * 10 ** 10

# Amounts live in the unsigned 256-bit range. Anything larger fails closed.
MAX_AMOUNT = 2 ** 256 - 1


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Token units (raw or accrued), always a non-negative int.
Amount = int

# Interest per second, fixed-point at SCALE.
Rate = int

# Seconds on the externally supplied monotonic clock.
Timestamp = int

# Holder identity (wallet address, account name, ...).
HolderId = str


class _AllSentinel:
    """Marker meaning "the holder's entire balance"."""

    _instance: Optional['_AllSentinel'] = None

    def __new__(cls) -> '_AllSentinel':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ALL"


# Transfers and vault redemptions accept ALL instead of a literal amount.
ALL = _AllSentinel()

AmountOrAll = Union[int, _AllSentinel]


# ============================================================================
# ENUMS
# ============================================================================

class Capability(Enum):
    """
    Capabilities checked by the token before a privileged mutation.

    MINT_AND_BURN: May call mint() and burn() (normally granted to the vault).
    SET_RATE: May lower the global interest rate.
    """
    MINT_AND_BURN = "mint_and_burn"
    SET_RATE = "set_rate"


# ============================================================================
# HOLDER ACCOUNT
# ============================================================================

@dataclass(frozen=True, slots=True)
class HolderAccount:
    """
    Immutable snapshot of one holder's accrual state.

    Each change produces a NEW instance (value semantics), so a caller
    holding an old snapshot never observes later mutations.

    Attributes:
        holder: Holder identity
        raw_balance: Stored token units, excluding unrealized interest
        snapshot_rate: Rate captured for this holder (fixed-point at SCALE)
        last_accrual_timestamp: When interest was last realized
    """
    holder: HolderId
    raw_balance: Amount = 0
    snapshot_rate: Rate = 0
    last_accrual_timestamp: Timestamp = 0

    def __post_init__(self):
        if not self.holder or not self.holder.strip():
            raise ValueError("HolderAccount holder cannot be empty")
        for name in ('raw_balance', 'snapshot_rate', 'last_accrual_timestamp'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"HolderAccount {name} must be int, got {type(value)}")
            if value < 0:
                raise ValueError(f"HolderAccount {name} cannot be negative, got {value}")

    def __repr__(self) -> str:
        return (f"HolderAccount({self.holder}: raw={self.raw_balance}, "
                f"rate={self.snapshot_rate}, t={self.last_accrual_timestamp})")


# ============================================================================
# EVENTS
# ============================================================================

@dataclass(frozen=True, slots=True)
class RateChanged:
    """The global interest rate was lowered."""
    new_rate: Rate
    timestamp: Optional[Timestamp] = None


@dataclass(frozen=True, slots=True)
class RawBalanceChanged:
    """
    A holder's stored balance changed.

    Attributes:
        holder: Holder whose raw balance changed
        amount: Signed change (+ for mint/interest/transfer_in, - for burn/transfer_out)
        raw_balance: Raw balance after the change
        reason: One of "mint", "burn", "interest", "transfer_in", "transfer_out"
        timestamp: Operation time
    """
    holder: HolderId
    amount: int
    raw_balance: Amount
    reason: str
    timestamp: Timestamp


@dataclass(frozen=True, slots=True)
class Deposited:
    """The vault accepted a deposit and minted shares 1:1."""
    holder: HolderId
    amount: Amount
    timestamp: Timestamp


@dataclass(frozen=True, slots=True)
class Redeemed:
    """The vault burned shares and paid out the same amount of asset."""
    holder: HolderId
    amount: Amount
    timestamp: Timestamp


LedgerEvent = Union[RateChanged, RawBalanceChanged, Deposited, Redeemed]

EventListener = Callable[[LedgerEvent], None]


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class Authorizer(Protocol):
    """
    Capability check supplied by the embedding system.

    The token only asks whether a caller holds a capability. It never
    stores or manages roles itself.
    """

    def has_capability(self, caller: str, capability: Capability) -> bool:
        ...


@runtime_checkable
class Clock(Protocol):
    """Monotonic time source. The ledger never reads a wall clock."""

    @property
    def current_time(self) -> Timestamp:
        ...


@runtime_checkable
class TokenView(Protocol):
    """
    Read-only interface used by collaborators (e.g. the vault) for quoting.
    """

    @property
    def current_time(self) -> Timestamp:
        ...

    def balance_of(self, holder: HolderId) -> Amount:
        ...

    def principal_balance_of(self, holder: HolderId) -> Amount:
        ...

    def get_interest_rate(self) -> Rate:
        ...

    def get_user_interest_rate(self, holder: HolderId) -> Rate:
        ...


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class RateIncreaseRejected(LedgerError):
    """Raised when a rate update would not strictly lower the global rate."""

    def __init__(self, current_rate: Rate, new_rate: Rate):
        self.current_rate = current_rate
        self.new_rate = new_rate
        super().__init__(
            f"Interest rate can only decrease: {new_rate} >= current {current_rate}"
        )


class Unauthorized(LedgerError):
    """Raised when the caller lacks the capability an operation requires."""

    def __init__(self, caller: str, capability: Capability):
        self.caller = caller
        self.capability = capability
        super().__init__(f"{caller} lacks capability {capability.value}")


class InsufficientBalance(LedgerError):
    """Raised when a burn or transfer exceeds the raw balance after realization."""
    pass


class InsufficientAllowance(LedgerError):
    """Raised when transfer_from exceeds the spender's allowance."""
    pass


class ArithmeticOverflow(LedgerError):
    """Raised when fixed-point arithmetic leaves the unsigned amount range."""
    pass


class ClockRegression(LedgerError):
    """Raised when the supplied time is earlier than a holder's last accrual."""
    pass


class RedeemFailed(LedgerError):
    """Raised when the vault reserve cannot pay out a redemption."""
    pass


# ============================================================================
# VALIDATION HELPERS
# ============================================================================

def _require_amount(value: int, name: str = "amount") -> int:
    """Reject non-int, bool, negative or out-of-range amounts."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got {value}")
    if value > MAX_AMOUNT:
        raise ArithmeticOverflow(f"{name} {value} exceeds MAX_AMOUNT")
    return value


def _require_holder(holder: HolderId, name: str = "holder") -> HolderId:
    if not isinstance(holder, str) or not holder.strip():
        raise ValueError(f"{name} cannot be empty")
    return holder

"""
rebase_ledger - Interest-Bearing Rebase Token Ledger

A ledger whose balances grow linearly over time from a per-holder rate,
plus a vault that mints shares 1:1 against deposits.

Usage:
    from rebase_ledger import (
        RebaseToken, Vault, AuthorizationService, LogicalClock, ALL,
    )

    auth = AuthorizationService(owner="admin")
    clock = LogicalClock(0)
    token = RebaseToken(auth, clock)
    vault = Vault(token, vault_id="vault")
    auth.grant_mint_and_burn_role("admin", "vault")

    vault.deposit("alice", 100_000)
    clock.advance_by(3600)
    token.balance_of("alice")          # accrued, > 100_000
    token.principal_balance_of("alice")  # stored, == 100_000

    vault.add_rewards(1_000)
    vault.redeem("alice", ALL)
"""

# Core types
from .core import (
    Amount,
    Rate,
    Timestamp,
    HolderId,
    HolderAccount,
    Capability,
    Authorizer,
    Clock,
    TokenView,
    RateChanged,
    RawBalanceChanged,
    Deposited,
    Redeemed,
    LedgerEvent,
    LedgerError,
    RateIncreaseRejected,
    Unauthorized,
    InsufficientBalance,
    InsufficientAllowance,
    ArithmeticOverflow,
    ClockRegression,
    RedeemFailed,
    ALL,
    SCALE,
    INITIAL_INTEREST_RATE,
    MAX_AMOUNT,
)

# Accrual engine
from .accrual import (
    calculate_elapsed,
    calculate_interest_factor,
    compute_accrued_balance,
    calculate_pending_interest,
    realize_interest,
)

from .rate_policy import GlobalRatePolicy
from .primitive import AccountLedgerPrimitive
from .authorization import AuthorizationService
from .clock import LogicalClock
from .token import RebaseToken
from .vault import Vault

__all__ = [
    # Core
    'Amount', 'Rate', 'Timestamp', 'HolderId', 'HolderAccount',
    'Capability', 'Authorizer', 'Clock', 'TokenView',
    'RateChanged', 'RawBalanceChanged', 'Deposited', 'Redeemed', 'LedgerEvent',
    'LedgerError', 'RateIncreaseRejected', 'Unauthorized', 'InsufficientBalance',
    'InsufficientAllowance', 'ArithmeticOverflow', 'ClockRegression', 'RedeemFailed',
    'ALL', 'SCALE', 'INITIAL_INTEREST_RATE', 'MAX_AMOUNT',
    # Accrual
    'calculate_elapsed', 'calculate_interest_factor', 'compute_accrued_balance',
    'calculate_pending_interest', 'realize_interest',
    # Components
    'GlobalRatePolicy', 'AccountLedgerPrimitive', 'AuthorizationService',
    'LogicalClock', 'RebaseToken', 'Vault',
]

__version__ = '1.0.0'

"""
accrual.py - Accrual Engine for Linearly Accruing Balances

Pure functions over HolderAccount snapshots. Nothing here touches stored
balances: the token facade applies the results through the account primitive.

Key Formulas:
    elapsed         = now - last_accrual_timestamp          (never negative)
    interest_factor = SCALE + snapshot_rate * elapsed        (linear, not compounding)
    accrued_balance = raw_balance * interest_factor // SCALE (truncating)
    pending         = accrued_balance - raw_balance

Rounding loss from the truncating division is dust and stays unminted.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Tuple

from .arithmetic import checked_add, checked_mul, mul_div
from .core import (
    Amount, HolderAccount, Rate, Timestamp,
    SCALE,
    ClockRegression,
)


def calculate_elapsed(account: HolderAccount, now: Timestamp) -> int:
    """
    Seconds since the holder's interest was last realized.

    Raises:
        ClockRegression: If now is earlier than last_accrual_timestamp
    """
    if now < account.last_accrual_timestamp:
        raise ClockRegression(
            f"{account.holder}: time {now} is before last accrual "
            f"{account.last_accrual_timestamp}"
        )
    return now - account.last_accrual_timestamp


def calculate_interest_factor(snapshot_rate: Rate, elapsed: int) -> int:
    """
    Linear growth factor at SCALE precision.

    PURE FUNCTION - All inputs explicit.

    Args:
        snapshot_rate: Per-second rate at SCALE
        elapsed: Non-negative seconds

    Returns:
        SCALE + snapshot_rate * elapsed
    """
    if elapsed < 0:
        raise ValueError(f"elapsed cannot be negative, got {elapsed}")
    return checked_add(SCALE, checked_mul(snapshot_rate, elapsed))


def compute_accrued_balance(account: HolderAccount, now: Timestamp) -> Amount:
    """
    Interest-adjusted balance of a holder at time now.

    PURE FUNCTION - read-only view, callable at any time without first
    mutating anything.

    Args:
        account: Holder snapshot
        now: Current time (must not precede account.last_accrual_timestamp)

    Returns:
        raw_balance * (SCALE + snapshot_rate * elapsed) // SCALE

    Raises:
        ClockRegression: If now precedes the last accrual
        ArithmeticOverflow: If the fixed-point product leaves the amount range
    """
    elapsed = calculate_elapsed(account, now)
    if account.raw_balance == 0 or elapsed == 0 or account.snapshot_rate == 0:
        return account.raw_balance
    factor = calculate_interest_factor(account.snapshot_rate, elapsed)
    return mul_div(account.raw_balance, factor, SCALE)


def calculate_pending_interest(account: HolderAccount, now: Timestamp) -> Amount:
    """Interest earned since the last realization that is not yet stored."""
    return compute_accrued_balance(account, now) - account.raw_balance


def realize_interest(account: HolderAccount, now: Timestamp) -> Tuple[HolderAccount, Amount]:
    """
    Convert pending interest into raw balance.

    Returns a NEW account with raw_balance increased by the pending amount and
    last_accrual_timestamp moved to now, together with the pending amount. The
    caller is responsible for minting the pending amount through the account
    primitive so that total supply grows with it.

    A zero pending amount is a valid no-op that still advances the timestamp,
    so realizing twice at the same instant yields zero the second time.

    Returns:
        Tuple of (updated_account, pending_interest)
    """
    pending = calculate_pending_interest(account, now)
    updated = replace(
        account,
        raw_balance=checked_add(account.raw_balance, pending),
        last_accrual_timestamp=now,
    )
    return updated, pending

"""
vault.py - Deposit/Redeem Vault for the Rebase Token

Exchanges an external asset for token shares 1:1. Deposits mint at the
current global rate; redemptions burn shares and pay the same amount of
asset out of the reserve. Interest paid on redemption is funded by
add_rewards().

The vault must hold Capability.MINT_AND_BURN on the token. Vault state is
guarded by the token's lock.
"""

from __future__ import annotations
from typing import Dict, List, Optional

from .core import (
    Amount, AmountOrAll, HolderId, Timestamp,
    ALL,
    Deposited, Redeemed, LedgerEvent,
    LedgerError, RedeemFailed,
    _require_amount, _require_holder,
)
from .token import RebaseToken


class Vault:
    """
    Asset reserve backing the rebase token.

    Example:
        vault = Vault(token, vault_id="vault", verbose=False)
        auth.grant_mint_and_burn_role("admin", "vault")
        vault.deposit("alice", 100_000)
        vault.redeem("alice", ALL)
    """

    def __init__(self, token: RebaseToken, vault_id: str = "vault", verbose: bool = True):
        self.token = token
        self.vault_id = vault_id
        self.verbose = verbose
        self.reserve: Amount = 0
        # Asset paid out to each holder over the vault's lifetime
        self.paid_out: Dict[HolderId, Amount] = {}
        self.event_log: List[LedgerEvent] = []

    def _now(self, now: Optional[Timestamp]) -> Timestamp:
        return self.token.current_time if now is None else now

    def add_rewards(self, amount: Amount) -> None:
        """Fund the reserve without minting shares."""
        _require_amount(amount)
        with self.token.lock:
            self.reserve += amount

    def deposit(self, holder: HolderId, amount: Amount, now: Optional[Timestamp] = None) -> None:
        """
        Accept amount of asset from holder and mint the same number of shares.

        The holder's rate is set to the current global rate, read under the
        same token lock as the mint.
        """
        _require_holder(holder)
        _require_amount(amount)
        with self.token.lock:
            now = self._now(now)
            self.token.mint(self.vault_id, holder, amount, self.token.get_interest_rate(), now=now)
            self.reserve += amount
            self.event_log.append(Deposited(holder, amount, now))
        if self.verbose:
            print(f"✓ VAULT DEPOSIT {amount} from {holder}")

    def redeem(self, holder: HolderId, amount: AmountOrAll, now: Optional[Timestamp] = None) -> Amount:
        """
        Burn shares and pay out the same amount of asset.

        ALL is resolved to the holder's accrued balance before burning.

        Returns:
            The amount redeemed

        Raises:
            RedeemFailed: If the reserve cannot cover the payout (nothing is burned)
            InsufficientBalance: If amount exceeds the holder's balance
        """
        _require_holder(holder)
        with self.token.lock:
            now = self._now(now)
            if amount is ALL:
                amount = self.token.balance_of(holder, now=now)
            _require_amount(amount)
            if amount > self.reserve:
                error = RedeemFailed(f"reserve {self.reserve} cannot pay {amount} to {holder}")
                if self.verbose:
                    print(f"✗ REJECTED VAULT REDEEM: {error}")
                raise error
            try:
                self.token.burn(self.vault_id, holder, amount, now=now)
            except LedgerError:
                if self.verbose:
                    print(f"✗ REJECTED VAULT REDEEM {amount} for {holder}")
                raise
            self.reserve -= amount
            self.paid_out[holder] = self.paid_out.get(holder, 0) + amount
            self.event_log.append(Redeemed(holder, amount, now))
        if self.verbose:
            print(f"✓ VAULT REDEEM {amount} to {holder}")
        return amount

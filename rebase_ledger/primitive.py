"""
primitive.py - Account Ledger Primitive

Stores raw (non-accrued) balances per holder plus total supply and
allowances. It knows nothing about interest: the token facade realizes
accrual first and then calls into this layer exactly once per logical
mutation.

Conservation invariant:
    total_supply == sum(raw_balance(h) for h in holders)
"""

from __future__ import annotations
from collections import defaultdict
from typing import Any, Dict, List, Set, Tuple

from .arithmetic import checked_add, checked_sub
from .core import (
    Amount, HolderId,
    MAX_AMOUNT,
    InsufficientBalance, InsufficientAllowance,
)


class AccountLedgerPrimitive:
    """
    Fungible raw-balance bookkeeping.

    Thread Safety:
        Not thread-safe on its own. The token facade serializes access.
    """

    def __init__(self):
        self.balances: Dict[HolderId, Amount] = defaultdict(int)
        self.allowances: Dict[Tuple[HolderId, HolderId], Amount] = {}
        self._total_supply: Amount = 0

    # ========================================================================
    # READS
    # ========================================================================

    def raw_balance_of(self, holder: HolderId) -> Amount:
        """Stored balance of a holder (0 if never seen)."""
        return self.balances.get(holder, 0)

    def total_supply(self) -> Amount:
        return self._total_supply

    def allowance(self, owner: HolderId, spender: HolderId) -> Amount:
        return self.allowances.get((owner, spender), 0)

    def list_holders(self) -> Set[HolderId]:
        """All holders that have ever had a raw balance entry."""
        return set(self.balances.keys())

    def verify_supply(self) -> Dict[str, Any]:
        """
        Verify that total supply equals the sum of raw balances.

        Holders are summed in sorted order so the check is deterministic.

        Returns:
            Dict with keys:
            - 'valid': bool - True if the conservation law holds
            - 'total_supply': Amount - tracked total supply
            - 'sum_of_balances': Amount - recomputed sum
        """
        summed = sum(self.balances[h] for h in sorted(self.balances))
        return {
            'valid': summed == self._total_supply,
            'total_supply': self._total_supply,
            'sum_of_balances': summed,
        }

    # ========================================================================
    # MUTATIONS
    # ========================================================================

    def mint_raw(self, holder: HolderId, amount: Amount) -> Amount:
        """
        Create amount new units for holder.

        Returns:
            The holder's raw balance after minting
        """
        new_supply = checked_add(self._total_supply, amount)
        new_balance = checked_add(self.raw_balance_of(holder), amount)
        self._total_supply = new_supply
        self.balances[holder] = new_balance
        return new_balance

    def burn_raw(self, holder: HolderId, amount: Amount) -> Amount:
        """
        Destroy amount units held by holder.

        Returns:
            The holder's raw balance after burning

        Raises:
            InsufficientBalance: If holder holds less than amount
        """
        current = self.raw_balance_of(holder)
        if amount > current:
            raise InsufficientBalance(f"{holder}: burn {amount} > balance {current}")
        self.balances[holder] = current - amount
        self._total_supply = checked_sub(self._total_supply, amount)
        return current - amount

    def transfer_raw(self, source: HolderId, dest: HolderId, amount: Amount) -> Tuple[Amount, Amount]:
        """
        Move amount raw units from source to dest.

        Returns:
            Tuple of (source_balance_after, dest_balance_after)

        Raises:
            InsufficientBalance: If source holds less than amount
        """
        src_balance = self.raw_balance_of(source)
        if amount > src_balance:
            raise InsufficientBalance(f"{source}: transfer {amount} > balance {src_balance}")
        if source == dest:
            return src_balance, src_balance
        new_dst = checked_add(self.raw_balance_of(dest), amount)
        self.balances[source] = src_balance - amount
        self.balances[dest] = new_dst
        return src_balance - amount, new_dst

    def approve(self, owner: HolderId, spender: HolderId, amount: Amount) -> None:
        self.allowances[(owner, spender)] = amount

    def check_allowance(self, owner: HolderId, spender: HolderId, amount: Amount) -> None:
        """
        Raises:
            InsufficientAllowance: If spender may not move amount on owner's behalf
        """
        current = self.allowance(owner, spender)
        if amount > current:
            raise InsufficientAllowance(
                f"{spender} allowance from {owner}: {current} < {amount}"
            )

    def spend_allowance(self, owner: HolderId, spender: HolderId, amount: Amount) -> None:
        """Consume allowance. An allowance of MAX_AMOUNT is unlimited."""
        self.check_allowance(owner, spender, amount)
        current = self.allowance(owner, spender)
        if current != MAX_AMOUNT:
            self.allowances[(owner, spender)] = current - amount

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data copy of all balances, for persistence or comparison."""
        return {
            'balances': dict(self.balances),
            'allowances': dict(self.allowances),
            'total_supply': self._total_supply,
        }

    def holders_with_balance(self) -> List[HolderId]:
        """Sorted holders with a non-zero raw balance."""
        return sorted(h for h, b in self.balances.items() if b > 0)

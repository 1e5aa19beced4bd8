"""
token.py - Interest-Bearing Rebase Token (Ledger Facade)

RebaseToken is the only entry point that mutates holder state. Every
mutation follows the same sequence, held under one lock:

    1. Validate: capability, inputs, clock, balances, allowances, overflow
    2. Realize:  mint pending interest for every affected holder
    3. Mutate:   delegate the requested raw-balance change to the primitive
    4. Record:   store the new HolderAccount snapshots
    5. Publish:  append the collected events to event_log and notify subscribers

Step 1 computes the complete outcome from pure accrual functions before
anything is written, so a rejected operation leaves no trace. Events are
collected during steps 2-4 and only published once every write is done, so
subscribers never observe a half-applied operation.

Reads (balance_of) are computed on the fly and never realize interest.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Dict, List, Optional
import threading

from .accrual import compute_accrued_balance, realize_interest
from .arithmetic import checked_add
from .core import (
    # Types
    Amount, AmountOrAll, HolderAccount, HolderId, Rate, Timestamp,
    Capability, Authorizer, Clock,
    LedgerEvent, EventListener, RawBalanceChanged,
    # Constants
    ALL, INITIAL_INTEREST_RATE,
    # Exceptions
    LedgerError, InsufficientBalance, Unauthorized,
    # Helpers
    _require_amount, _require_holder,
)
from .primitive import AccountLedgerPrimitive
from .rate_policy import GlobalRatePolicy


class RebaseToken:
    """
    Ledger whose balances grow linearly from a per-holder snapshot rate.

    Each holder's rate is captured when tokens are minted to them (or, for
    an empty recipient, inherited from the sender on transfer). The global
    rate only bounds what new deposits receive and can only be lowered.

    Thread Safety:
        Mutations and reads are serialized by a re-entrant lock.

    Example:
        auth = AuthorizationService(owner="admin")
        clock = LogicalClock(0)
        token = RebaseToken(auth, clock, verbose=False)
        auth.grant_mint_and_burn_role("admin", "vault")

        token.mint("vault", "alice", 100_000, token.get_interest_rate())
        clock.advance_by(3600)
        token.balance_of("alice")   # > 100_000
    """

    def __init__(
        self,
        authorizer: Authorizer,
        clock: Optional[Clock] = None,
        name: str = "Rebase Token",
        symbol: str = "RBT",
        initial_rate: Rate = INITIAL_INTEREST_RATE,
        verbose: bool = True,
    ):
        """
        Create a token.

        Args:
            authorizer: Capability checker consulted before privileged mutations
            clock: Time source; operations may instead pass now= explicitly
            name: Human-readable token name
            symbol: Short token symbol
            initial_rate: Starting global rate (fixed-point at SCALE)
            verbose: Print one-line summaries of applied and rejected operations
        """
        self.name = name
        self.symbol = symbol
        self.verbose = verbose
        self._authorizer = authorizer
        self._clock = clock
        self._lock = threading.RLock()
        self.primitive = AccountLedgerPrimitive()
        self.rate_policy = GlobalRatePolicy(initial_rate)
        # Rate and accrual timestamp per holder; raw balances live in the primitive
        self._accounts: Dict[HolderId, HolderAccount] = {}
        self.event_log: List[LedgerEvent] = []
        self._listeners: List[EventListener] = []

    # ========================================================================
    # TIME
    # ========================================================================

    @property
    def current_time(self) -> Timestamp:
        if self._clock is None:
            raise LedgerError(f"{self.symbol} has no clock; pass now= explicitly")
        return self._clock.current_time

    def _resolve_now(self, now: Optional[Timestamp]) -> Timestamp:
        if now is None:
            return self.current_time
        if not isinstance(now, int) or isinstance(now, bool) or now < 0:
            raise ValueError(f"now must be a non-negative int, got {now!r}")
        return now

    # ========================================================================
    # EVENTS
    # ========================================================================

    @property
    def lock(self) -> threading.RLock:
        """Re-entrant lock serializing every read and mutation of this token."""
        return self._lock

    def subscribe(self, listener: EventListener) -> None:
        """
        Register a callback invoked with every emitted event.

        Callbacks run after the operation has fully committed. An exception
        raised by a callback propagates to the caller but cannot undo or
        split the operation that produced the event.
        """
        self._listeners.append(listener)

    def _publish(self, events: List[LedgerEvent]) -> None:
        self.event_log.extend(events)
        for event in events:
            for listener in self._listeners:
                listener(event)

    def _log(self, message: str) -> None:
        if self.verbose:
            print(f"✓ {self.symbol} {message}")

    def _reject(self, operation: str, error: Exception) -> None:
        if self.verbose:
            print(f"✗ REJECTED {self.symbol} {operation}: {error}")

    # ========================================================================
    # READS (no mutation)
    # ========================================================================

    def _load(self, holder: HolderId) -> HolderAccount:
        """Current stored snapshot of holder, merged with the primitive's raw balance."""
        stored = self._accounts.get(holder)
        raw = self.primitive.raw_balance_of(holder)
        if stored is None:
            return HolderAccount(holder=holder, raw_balance=raw)
        return replace(stored, raw_balance=raw)

    def get_account(self, holder: HolderId) -> HolderAccount:
        """Return the holder's account snapshot (suitable for persistence)."""
        with self._lock:
            return self._load(holder)

    def holders(self) -> List[HolderId]:
        """Sorted identities of every holder the token has an account for."""
        with self._lock:
            return sorted(set(self._accounts) | self.primitive.list_holders())

    def balance_of(self, holder: HolderId, now: Optional[Timestamp] = None) -> Amount:
        """
        Interest-adjusted balance at now (default: clock time).

        Pure read: never realizes interest and never moves the timestamp.

        Raises:
            ClockRegression: If now precedes the holder's last accrual
        """
        with self._lock:
            return compute_accrued_balance(self._load(holder), self._resolve_now(now))

    def principal_balance_of(self, holder: HolderId) -> Amount:
        """Raw stored balance, excluding unrealized interest."""
        with self._lock:
            return self.primitive.raw_balance_of(holder)

    def get_user_interest_rate(self, holder: HolderId) -> Rate:
        with self._lock:
            account = self._accounts.get(holder)
            return account.snapshot_rate if account is not None else 0

    def get_interest_rate(self) -> Rate:
        """The global rate new deposits should snapshot."""
        return self.rate_policy.get_rate()

    def total_supply(self) -> Amount:
        """Sum of raw balances. Accrued balances are never summed."""
        return self.primitive.total_supply()

    def allowance(self, owner: HolderId, spender: HolderId) -> Amount:
        return self.primitive.allowance(owner, spender)

    def verify_supply(self) -> dict:
        return self.primitive.verify_supply()

    # ========================================================================
    # PRIVILEGED MUTATIONS
    # ========================================================================

    def _require(self, caller: str, capability: Capability) -> None:
        if not self._authorizer.has_capability(caller, capability):
            raise Unauthorized(caller, capability)

    def set_interest_rate(self, caller: str, new_rate: Rate, now: Optional[Timestamp] = None) -> None:
        """
        Lower the global rate. Existing holders keep their snapshot rates.

        Raises:
            Unauthorized: If caller lacks SET_RATE
            RateIncreaseRejected: If new_rate >= current rate
        """
        with self._lock:
            try:
                self._require(caller, Capability.SET_RATE)
                timestamp = now if now is not None or self._clock is None else self.current_time
                event = self.rate_policy.set_rate(new_rate, timestamp=timestamp)
            except (LedgerError, ValueError) as e:
                self._reject("SET_RATE", e)
                raise
            self._log(f"SET_RATE {new_rate}")
            self._publish([event])

    def mint(
        self,
        caller: str,
        to: HolderId,
        amount: Amount,
        rate_for_new_deposit: Rate,
        now: Optional[Timestamp] = None,
    ) -> None:
        """
        Realize pending interest for to, re-snapshot its rate, then mint amount.

        The rate is overwritten on every mint with the caller-supplied value
        (the vault passes the current global rate), so a top-up re-rates the
        whole balance from this point on.

        Raises:
            Unauthorized: If caller lacks MINT_AND_BURN
            ClockRegression: If now precedes to's last accrual
            ArithmeticOverflow: If the new balance or supply leaves the amount range
        """
        with self._lock:
            try:
                self._require(caller, Capability.MINT_AND_BURN)
                _require_holder(to, "to")
                _require_amount(amount)
                _require_amount(rate_for_new_deposit, "rate_for_new_deposit")
                now = self._resolve_now(now)
                realized, pending = realize_interest(self._load(to), now)
                checked_add(realized.raw_balance, amount)
                checked_add(checked_add(self.total_supply(), pending), amount)
            except (LedgerError, ValueError) as e:
                self._reject(f"MINT {amount} → {to}", e)
                raise

            events = self._commit_interest(realized, pending, now)
            raw_after = self.primitive.mint_raw(to, amount)
            self._accounts[to] = replace(
                realized, raw_balance=raw_after, snapshot_rate=rate_for_new_deposit
            )
            events.append(RawBalanceChanged(to, amount, raw_after, "mint", now))
            self._log(f"MINT {amount} → {to} (rate={rate_for_new_deposit}, interest={pending})")
            self._publish(events)

    def burn(
        self,
        caller: str,
        from_: HolderId,
        amount: Amount,
        now: Optional[Timestamp] = None,
    ) -> None:
        """
        Realize pending interest for from_, then burn amount.

        amount must be a literal value. Callers wanting to burn everything
        resolve balance_of() first.

        Raises:
            Unauthorized: If caller lacks MINT_AND_BURN
            InsufficientBalance: If amount exceeds the realized balance
        """
        with self._lock:
            try:
                self._require(caller, Capability.MINT_AND_BURN)
                _require_holder(from_, "from_")
                if amount is ALL:
                    raise ValueError("burn requires a resolved amount, not ALL")
                _require_amount(amount)
                now = self._resolve_now(now)
                realized, pending = realize_interest(self._load(from_), now)
                if amount > realized.raw_balance:
                    raise InsufficientBalance(
                        f"{from_}: burn {amount} > balance {realized.raw_balance}"
                    )
                checked_add(self.total_supply(), pending)
            except (LedgerError, ValueError) as e:
                self._reject(f"BURN {amount} ← {from_}", e)
                raise

            events = self._commit_interest(realized, pending, now)
            raw_after = self.primitive.burn_raw(from_, amount)
            self._accounts[from_] = replace(realized, raw_balance=raw_after)
            events.append(RawBalanceChanged(from_, -amount, raw_after, "burn", now))
            self._log(f"BURN {amount} ← {from_} (interest={pending})")
            self._publish(events)

    # ========================================================================
    # TRANSFERS
    # ========================================================================

    def approve(self, owner: HolderId, spender: HolderId, amount: Amount) -> None:
        """Allow spender to transfer up to amount of owner's balance."""
        with self._lock:
            _require_holder(owner, "owner")
            _require_holder(spender, "spender")
            _require_amount(amount)
            self.primitive.approve(owner, spender, amount)

    def transfer(
        self,
        sender: HolderId,
        recipient: HolderId,
        amount: AmountOrAll,
        now: Optional[Timestamp] = None,
    ) -> Amount:
        """
        Move amount (or ALL) from sender to recipient.

        Returns:
            The amount actually transferred (ALL resolved)

        Raises:
            InsufficientBalance: If amount exceeds sender's realized balance
        """
        return self._transfer(None, sender, recipient, amount, now)

    def transfer_from(
        self,
        spender: str,
        sender: HolderId,
        recipient: HolderId,
        amount: AmountOrAll,
        now: Optional[Timestamp] = None,
    ) -> Amount:
        """
        Like transfer(), spending spender's allowance from sender.

        Raises:
            InsufficientAllowance: If the allowance does not cover amount
        """
        return self._transfer(spender, sender, recipient, amount, now)

    def _transfer(
        self,
        spender: Optional[str],
        sender: HolderId,
        recipient: HolderId,
        amount: AmountOrAll,
        now: Optional[Timestamp],
    ) -> Amount:
        with self._lock:
            try:
                _require_holder(sender, "sender")
                _require_holder(recipient, "recipient")
                if spender is not None:
                    _require_holder(spender, "spender")
                now = self._resolve_now(now)

                src, src_pending = realize_interest(self._load(sender), now)
                if recipient == sender:
                    dst, dst_pending = src, 0
                else:
                    dst, dst_pending = realize_interest(self._load(recipient), now)

                if amount is ALL:
                    amount = src.raw_balance
                _require_amount(amount)
                if amount > src.raw_balance:
                    raise InsufficientBalance(
                        f"{sender}: transfer {amount} > balance {src.raw_balance}"
                    )
                if spender is not None:
                    self.primitive.check_allowance(sender, spender, amount)
                checked_add(dst.raw_balance, amount)
                checked_add(checked_add(self.total_supply(), src_pending), dst_pending)
            except (LedgerError, ValueError) as e:
                self._reject(f"TRANSFER {amount} {sender} → {recipient}", e)
                raise

            # An empty recipient adopts the sender's rate instead of a stale one
            if dst.raw_balance == 0:
                dst = replace(dst, snapshot_rate=src.snapshot_rate)

            events = self._commit_interest(src, src_pending, now)
            if recipient != sender:
                events += self._commit_interest(dst, dst_pending, now)
            if spender is not None:
                self.primitive.spend_allowance(sender, spender, amount)
            src_after, dst_after = self.primitive.transfer_raw(sender, recipient, amount)
            self._accounts[sender] = replace(src, raw_balance=src_after)
            if recipient != sender:
                self._accounts[recipient] = replace(dst, raw_balance=dst_after)
            # A self-transfer still reports both legs; they net to zero
            events.append(RawBalanceChanged(
                sender, -amount, dst_after - amount if recipient == sender else src_after,
                "transfer_out", now,
            ))
            events.append(RawBalanceChanged(recipient, amount, dst_after, "transfer_in", now))
            self._log(f"TRANSFER {amount} {sender} → {recipient}")
            self._publish(events)
            return amount

    def _commit_interest(
        self, realized: HolderAccount, pending: Amount, now: Timestamp
    ) -> List[LedgerEvent]:
        """Mint realized interest through the primitive and store the new timestamp."""
        events: List[LedgerEvent] = []
        if pending > 0:
            raw_after = self.primitive.mint_raw(realized.holder, pending)
            events.append(RawBalanceChanged(realized.holder, pending, raw_after, "interest", now))
        self._accounts[realized.holder] = realized
        return events

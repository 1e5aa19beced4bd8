"""
test_vault.py - Unit tests for the deposit/redeem vault

Tests:
- Deposits mint 1:1 at the current global rate
- Redemptions burn and pay out, resolving ALL first
- Reserve shortfalls reject the redemption without burning
- Vault authorization
- Deposits read the global rate under the token lock
"""

import threading

import pytest
from rebase_ledger import (
    Vault, Deposited, Redeemed, Capability, ALL, INITIAL_INTEREST_RATE,
    InsufficientBalance, RedeemFailed, Unauthorized,
)

from tests.helpers import OWNER, VAULT, snapshot_state


class TestDeposit:
    """Tests for Vault.deposit."""

    def test_deposit_mints_one_to_one(self, system):
        _, _, token, vault = system
        vault.deposit("alice", 100_000)
        assert token.balance_of("alice") == 100_000
        assert vault.reserve == 100_000

    def test_deposit_uses_current_global_rate(self, system):
        _, _, token, vault = system
        token.set_interest_rate(OWNER, 3 * 10**10)
        vault.deposit("alice", 1_000)
        assert token.get_user_interest_rate("alice") == 3 * 10**10

    def test_deposit_records_event(self, system):
        _, clock, _, vault = system
        clock.advance_time(42)
        vault.deposit("alice", 7)
        assert vault.event_log == [Deposited("alice", 7, 42)]

    def test_deposit_without_role_rejected(self, system):
        auth, _, token, vault = system
        auth.revoke(OWNER, VAULT, Capability.MINT_AND_BURN)
        with pytest.raises(Unauthorized):
            vault.deposit("alice", 100)
        assert vault.reserve == 0
        assert token.total_supply() == 0

    def test_negative_deposit_rejected(self, system):
        _, _, _, vault = system
        with pytest.raises(ValueError):
            vault.deposit("alice", -5)


class TestRedeem:
    """Tests for Vault.redeem."""

    def test_redeem_partial(self, funded):
        _, _, token, vault = funded
        assert vault.redeem("alice", 40_000) == 40_000
        assert token.balance_of("alice") == 60_000
        assert vault.reserve == 60_000
        assert vault.paid_out == {"alice": 40_000}

    def test_redeem_all_immediately(self, funded):
        _, _, token, vault = funded
        assert vault.redeem("alice", ALL) == 100_000
        assert token.balance_of("alice") == 0
        assert vault.event_log[-1] == Redeemed("alice", 100_000, 0)

    def test_redeem_all_after_accrual_needs_rewards(self, funded):
        _, clock, token, vault = funded
        clock.advance_by(3600)
        before = snapshot_state(token)
        with pytest.raises(RedeemFailed):
            vault.redeem("alice", ALL)
        assert snapshot_state(token) == before
        assert vault.reserve == 100_000

        vault.add_rewards(18)
        assert vault.redeem("alice", ALL) == 100_018
        assert token.balance_of("alice") == 0
        assert vault.reserve == 0

    def test_redeem_more_than_balance_rejected(self, funded):
        _, _, token, vault = funded
        vault.add_rewards(1_000)
        with pytest.raises(InsufficientBalance):
            vault.redeem("alice", 100_001)
        assert vault.reserve == 101_000
        assert token.principal_balance_of("alice") == 100_000

    def test_redeem_verbose_output(self, funded, capsys):
        _, _, _, vault = funded
        vault.verbose = True
        vault.redeem("alice", 1)
        assert "✓ VAULT REDEEM 1 to alice" in capsys.readouterr().out

    def test_add_rewards_rejects_negative(self, system):
        _, _, _, vault = system
        with pytest.raises(ValueError):
            vault.add_rewards(-1)


class TestVaultWiring:
    """The vault only works through the token's authorization."""

    def test_custom_vault_id(self, system):
        auth, _, token, _ = system
        other = Vault(token, vault_id="vault2", verbose=False)
        with pytest.raises(Unauthorized):
            other.deposit("alice", 1)
        auth.grant_mint_and_burn_role(OWNER, "vault2")
        other.deposit("alice", 1)
        assert token.get_user_interest_rate("alice") == INITIAL_INTEREST_RATE


class TestVaultLocking:
    """Vault steps run under the token's lock."""

    @staticmethod
    def _lock_free_elsewhere(token):
        """True when another thread could take the token lock right now."""
        result = []

        def attempt():
            acquired = token.lock.acquire(blocking=False)
            if acquired:
                token.lock.release()
            result.append(acquired)

        worker = threading.Thread(target=attempt)
        worker.start()
        worker.join()
        return result[0]

    def test_deposit_reads_rate_under_token_lock(self, system, monkeypatch):
        _, _, token, vault = system
        read_rate = token.get_interest_rate
        observed = []

        def guarded_rate():
            observed.append(self._lock_free_elsewhere(token))
            return read_rate()

        monkeypatch.setattr(token, "get_interest_rate", guarded_rate)
        vault.deposit("alice", 100)
        assert observed == [False]
        assert token.get_user_interest_rate("alice") == INITIAL_INTEREST_RATE

    def test_lock_released_after_deposit(self, system):
        _, _, token, vault = system
        vault.deposit("alice", 100)
        assert self._lock_free_elsewhere(token)

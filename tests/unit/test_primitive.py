"""
test_primitive.py - Unit tests for the account ledger primitive

Tests:
- Minting and burning raw balances
- Raw transfers
- Allowances
- Supply conservation check
"""

import pytest
from rebase_ledger import (
    AccountLedgerPrimitive, MAX_AMOUNT,
    InsufficientBalance, InsufficientAllowance, ArithmeticOverflow,
)


@pytest.fixture
def primitive():
    p = AccountLedgerPrimitive()
    p.mint_raw("alice", 1_000)
    return p


class TestMintBurn:
    """Tests for mint_raw and burn_raw."""

    def test_unknown_holder_has_zero(self):
        assert AccountLedgerPrimitive().raw_balance_of("nobody") == 0

    def test_mint_increases_balance_and_supply(self, primitive):
        assert primitive.mint_raw("alice", 500) == 1_500
        assert primitive.total_supply() == 1_500

    def test_burn_decreases_balance_and_supply(self, primitive):
        assert primitive.burn_raw("alice", 400) == 600
        assert primitive.total_supply() == 600

    def test_burn_more_than_balance_rejected(self, primitive):
        with pytest.raises(InsufficientBalance):
            primitive.burn_raw("alice", 1_001)
        assert primitive.raw_balance_of("alice") == 1_000
        assert primitive.total_supply() == 1_000

    def test_mint_overflow_fails_closed(self, primitive):
        with pytest.raises(ArithmeticOverflow):
            primitive.mint_raw("bob", MAX_AMOUNT)
        assert primitive.raw_balance_of("bob") == 0
        assert primitive.total_supply() == 1_000


class TestTransferRaw:
    """Tests for transfer_raw."""

    def test_transfer_moves_balance(self, primitive):
        assert primitive.transfer_raw("alice", "bob", 300) == (700, 300)
        assert primitive.total_supply() == 1_000

    def test_transfer_insufficient(self, primitive):
        with pytest.raises(InsufficientBalance):
            primitive.transfer_raw("alice", "bob", 2_000)
        assert primitive.raw_balance_of("bob") == 0

    def test_self_transfer_is_noop(self, primitive):
        assert primitive.transfer_raw("alice", "alice", 300) == (1_000, 1_000)


class TestAllowances:
    """Tests for approve and spend_allowance."""

    def test_default_allowance_zero(self, primitive):
        assert primitive.allowance("alice", "carol") == 0

    def test_spend_decrements(self, primitive):
        primitive.approve("alice", "carol", 500)
        primitive.spend_allowance("alice", "carol", 200)
        assert primitive.allowance("alice", "carol") == 300

    def test_spend_beyond_allowance_rejected(self, primitive):
        primitive.approve("alice", "carol", 100)
        with pytest.raises(InsufficientAllowance):
            primitive.spend_allowance("alice", "carol", 101)
        assert primitive.allowance("alice", "carol") == 100

    def test_unlimited_allowance_not_decremented(self, primitive):
        primitive.approve("alice", "carol", MAX_AMOUNT)
        primitive.spend_allowance("alice", "carol", 999)
        assert primitive.allowance("alice", "carol") == MAX_AMOUNT


class TestVerifySupply:
    """Tests for the conservation check."""

    def test_valid_after_operations(self, primitive):
        primitive.mint_raw("bob", 10)
        primitive.transfer_raw("alice", "bob", 5)
        primitive.burn_raw("bob", 3)
        result = primitive.verify_supply()
        assert result['valid']
        assert result['total_supply'] == 1_007

    def test_detects_tampering(self, primitive):
        primitive.balances["alice"] += 1
        assert not primitive.verify_supply()['valid']

    def test_holders_with_balance(self, primitive):
        primitive.mint_raw("bob", 5)
        primitive.burn_raw("bob", 5)
        assert primitive.holders_with_balance() == ["alice"]
        assert primitive.list_holders() == {"alice", "bob"}

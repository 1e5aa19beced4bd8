#!/usr/bin/env python3
"""
demo.py - Walkthrough: Deposits That Grow While You Wait

Each step builds on the previous one. Press Enter to advance.

WHAT YOU'LL LEARN:
  1-2: Setup          - Owner, vault role, logical clock
  3-4: Accrual        - Balance grows linearly; principal stays put until realized
  5-6: Rate policy    - Rates only go down; existing holders keep theirs
  7-8: Transfers      - Interest realized on both sides; empty recipients inherit
  9:   Redemption     - Rewards fund interest; redeem ALL

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass
import sys

from rebase_ledger import (
    AuthorizationService, LogicalClock, RebaseToken, Vault,
    ALL, RateIncreaseRejected,
)


@dataclass
class DemoConfig:
    """Configuration for the walkthrough. Modify these to experiment."""
    deposit: int = 100_000
    hour: int = 3600
    lowered_rate: int = 4 * 10**10


CONFIG = DemoConfig()
QUICK = "--quick" in sys.argv


def step(n: int, title: str) -> None:
    print(f"\n{'=' * 70}\nSTEP {n}: {title}\n{'=' * 70}")
    if not QUICK:
        input("(press Enter) ")


def main() -> None:
    step(1, "Owner and vault")
    auth = AuthorizationService(owner="owner")
    clock = LogicalClock(0)
    token = RebaseToken(auth, clock, verbose=True)
    vault = Vault(token, vault_id="vault", verbose=True)
    auth.grant_mint_and_burn_role("owner", "vault")
    print(f"Global rate: {token.get_interest_rate()}")

    step(2, "Alice deposits")
    vault.deposit("alice", CONFIG.deposit)
    print(f"alice balance={token.balance_of('alice')} principal={token.principal_balance_of('alice')}")

    step(3, "One hour passes")
    clock.advance_by(CONFIG.hour)
    print(f"alice balance={token.balance_of('alice')} principal={token.principal_balance_of('alice')}")

    step(4, "Another hour: same growth again (linear)")
    clock.advance_by(CONFIG.hour)
    print(f"alice balance={token.balance_of('alice')}")

    step(5, "Raising the rate is rejected")
    try:
        token.set_interest_rate("owner", token.get_interest_rate() + 1)
    except RateIncreaseRejected as e:
        print(f"Rejected as expected: {e}")

    step(6, "Lowering the rate only affects new deposits")
    token.set_interest_rate("owner", CONFIG.lowered_rate)
    print(f"global={token.get_interest_rate()} alice={token.get_user_interest_rate('alice')}")

    step(7, "Alice sends half to Bob (new holder)")
    token.transfer("alice", "bob", CONFIG.deposit // 2)
    print(f"bob rate={token.get_user_interest_rate('bob')} (inherited from alice)")

    step(8, "Supply conservation")
    print(token.verify_supply())

    step(9, "Everyone redeems")
    clock.advance_by(CONFIG.hour)
    owed = sum(token.balance_of(h) for h in token.holders()) - vault.reserve
    vault.add_rewards(owed)
    for holder in token.holders():
        if token.balance_of(holder):
            vault.redeem(holder, ALL)
    print(f"total supply={token.total_supply()} reserve={vault.reserve}")


if __name__ == "__main__":
    main()

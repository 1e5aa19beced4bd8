"""
helpers.py - Builders shared by fixtures and property-based tests

Hypothesis tests cannot use function-scoped fixtures, so they build fresh
systems through these helpers instead.
"""

from rebase_ledger import (
    AuthorizationService, LogicalClock, RebaseToken, Vault,
    INITIAL_INTEREST_RATE,
)


OWNER = "owner"
VAULT = "vault"


def make_system(initial_time: int = 0, initial_rate: int = INITIAL_INTEREST_RATE):
    """Build (auth, clock, token, vault) with the vault authorized to mint and burn."""
    auth = AuthorizationService(owner=OWNER)
    clock = LogicalClock(initial_time)
    token = RebaseToken(auth, clock, initial_rate=initial_rate, verbose=False)
    vault = Vault(token, vault_id=VAULT, verbose=False)
    auth.grant_mint_and_burn_role(OWNER, VAULT)
    return auth, clock, token, vault


def snapshot_state(token: RebaseToken) -> dict:
    """Everything a rejected operation must leave untouched."""
    return {
        'primitive': token.primitive.snapshot(),
        'accounts': {h: token.get_account(h) for h in token.holders()},
        'events': len(token.event_log),
        'rate': token.get_interest_rate(),
    }

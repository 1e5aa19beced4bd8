"""
authorization.py - In-Memory Capability Service

The token only asks has_capability(). Role storage lives here, outside the
ledger, so embedding systems can substitute their own Authorizer.

The owner implicitly holds every capability and is the only principal that
may grant or revoke.
"""

from __future__ import annotations
from collections import defaultdict
from typing import Dict, Set

from .core import Capability, Unauthorized


class AuthorizationService:
    """
    Owner-administered capability table.

    Example:
        auth = AuthorizationService(owner="admin")
        auth.grant_mint_and_burn_role("admin", "vault")
        auth.has_capability("vault", Capability.MINT_AND_BURN)  # True
    """

    def __init__(self, owner: str):
        if not owner or not owner.strip():
            raise ValueError("owner cannot be empty")
        self.owner = owner
        self._grants: Dict[str, Set[Capability]] = defaultdict(set)

    def has_capability(self, caller: str, capability: Capability) -> bool:
        if caller == self.owner:
            return True
        return capability in self._grants.get(caller, set())

    def _require_owner(self, caller: str, capability: Capability) -> None:
        if caller != self.owner:
            raise Unauthorized(caller, capability)

    def grant(self, caller: str, account: str, capability: Capability) -> None:
        """
        Grant capability to account.

        Raises:
            Unauthorized: If caller is not the owner
        """
        self._require_owner(caller, capability)
        self._grants[account].add(capability)

    def revoke(self, caller: str, account: str, capability: Capability) -> None:
        """
        Revoke capability from account. Revoking an absent grant is a no-op.

        Raises:
            Unauthorized: If caller is not the owner
        """
        self._require_owner(caller, capability)
        self._grants[account].discard(capability)

    def grant_mint_and_burn_role(self, caller: str, account: str) -> None:
        self.grant(caller, account, Capability.MINT_AND_BURN)

"""
conftest.py - Shared pytest fixtures for rebase ledger tests

Provides common fixtures used across unit, conformance and functional tests:
- Authorization service and logical clock
- Token and vault wired together (vault holds MINT_AND_BURN)
- A system where alice already holds a deposit
"""

import pytest

from rebase_ledger import AuthorizationService, LogicalClock

from tests.helpers import OWNER, make_system


@pytest.fixture
def auth():
    return AuthorizationService(owner=OWNER)


@pytest.fixture
def clock():
    return LogicalClock(0)


@pytest.fixture
def system():
    """(auth, clock, token, vault) at t=0 with the initial global rate."""
    return make_system()


@pytest.fixture
def token(system):
    return system[2]


@pytest.fixture
def funded(system):
    """System where alice deposited 100_000 at t=0 at the initial rate."""
    auth, clock, token, vault = system
    vault.deposit("alice", 100_000)
    return system

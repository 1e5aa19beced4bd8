"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the rebase ledger.

The tests are organized by invariant:
1. test_rate_monotonicity.py - The global rate never increases
2. test_linear_accrual.py - Growth is linear in elapsed time, never negative
3. test_accrue_before_mutate.py - Interest is realized before every mutation
4. test_idempotency.py - Realizing twice at one instant mints nothing extra
5. test_atomicity.py - Rejected operations leave no partial state
6. test_conservation.py - Total supply equals the sum of raw balances

These tests use hypothesis for property-based testing.
"""

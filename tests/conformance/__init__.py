"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the token ledger.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation.py - sum(balances) == current_supply <= total_supply
2. atomicity.py - Rejected messages leave no trace on balances, allowances or supply
3. idempotency.py - Replayed tx ids are rejected within the retention window
4. determinism.py - Same message sequence, same final state
5. authorization.py - Admin gating and the self-removal guard

These tests use hypothesis for property-based testing.
"""

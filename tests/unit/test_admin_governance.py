"""
test_admin_governance.py - Unit tests for admin set management

Tests:
- add_admin: admin gate, duplicates, ordering
- delete_admin: admin gate, self-removal guard, removal of non-admins
- Privileges follow admin set membership
"""

import pytest

from token_ledger import (
    Invocation, AdminAdded, AdminRemoved,
    NotAdmin, AdminAlreadyExists, SelfRemovalForbidden,
)


ADMIN = "admin"


def _inv(caller: str) -> Invocation:
    return Invocation(caller, 0)


class TestAddAdmin:

    def test_add_admin(self, ledger):
        assert ledger.add_admin(_inv(ADMIN), "alice") == AdminAdded(admin_id="alice")
        assert ledger.admins() == [ADMIN, "alice"]
        assert ledger.is_admin("alice")

    def test_admins_keep_insertion_order(self, ledger):
        for name in ["zoe", "bob", "mia"]:
            ledger.add_admin(_inv(ADMIN), name)
        assert ledger.admins() == [ADMIN, "zoe", "bob", "mia"]

    def test_non_admin_cannot_add(self, ledger):
        with pytest.raises(NotAdmin):
            ledger.add_admin(_inv("alice"), "alice")
        assert ledger.admins() == [ADMIN]

    def test_duplicate_rejected(self, ledger):
        ledger.add_admin(_inv(ADMIN), "alice")
        with pytest.raises(AdminAlreadyExists):
            ledger.add_admin(_inv("alice"), ADMIN)
        assert ledger.admins() == [ADMIN, "alice"]

    def test_new_admin_gains_privileges(self, ledger):
        ledger.add_admin(_inv(ADMIN), "alice")
        ledger.mint(_inv("alice"), "alice", 10)
        assert ledger.balance_of("alice") == 10

    def test_admins_returns_copy(self, ledger):
        admins = ledger.admins()
        admins.append("intruder")
        assert not ledger.is_admin("intruder")


class TestDeleteAdmin:

    def test_delete_admin(self, ledger):
        ledger.add_admin(_inv(ADMIN), "alice")
        assert ledger.delete_admin(_inv(ADMIN), "alice") == AdminRemoved(admin_id="alice")
        assert ledger.admins() == [ADMIN]

    def test_removed_admin_loses_privileges(self, ledger):
        ledger.add_admin(_inv(ADMIN), "alice")
        ledger.delete_admin(_inv(ADMIN), "alice")
        with pytest.raises(NotAdmin):
            ledger.mint(_inv("alice"), "alice", 1)

    def test_self_removal_forbidden_when_sole_admin(self, ledger):
        with pytest.raises(SelfRemovalForbidden):
            ledger.delete_admin(_inv(ADMIN), ADMIN)
        assert ledger.admins() == [ADMIN]

    def test_self_removal_forbidden_with_other_admins(self, ledger):
        """The guard does not depend on how many admins remain."""
        ledger.add_admin(_inv(ADMIN), "alice")
        ledger.add_admin(_inv(ADMIN), "bob")
        with pytest.raises(SelfRemovalForbidden):
            ledger.delete_admin(_inv("alice"), "alice")
        assert ledger.admins() == [ADMIN, "alice", "bob"]

    def test_admins_can_remove_each_other(self, ledger):
        ledger.add_admin(_inv(ADMIN), "alice")
        ledger.delete_admin(_inv("alice"), ADMIN)
        assert ledger.admins() == ["alice"]

    def test_non_admin_cannot_delete(self, ledger):
        with pytest.raises(NotAdmin):
            ledger.delete_admin(_inv("alice"), ADMIN)

    def test_non_admin_rejected_before_self_check(self, ledger):
        with pytest.raises(NotAdmin):
            ledger.delete_admin(_inv("alice"), "alice")

    def test_deleting_unknown_account_is_noop(self, ledger):
        assert ledger.delete_admin(_inv(ADMIN), "stranger") == AdminRemoved("stranger")
        assert ledger.admins() == [ADMIN]

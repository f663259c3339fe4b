"""Unit tests for the access decisions."""
import pytest

from dayzone.errors import Forbidden
from dayzone.models import Role
from dayzone.policy import (
    can_delete_user,
    can_mutate_operative,
    can_mutate_user,
    can_mutate_wanted,
    can_view_operatives,
    ensure,
    is_admin,
)

FACTIONS = [role for role in Role if role is not Role.ADMIN]


@pytest.mark.parametrize("target", list(Role))
def test_admin_can_view_and_mutate_every_role(target: Role) -> None:
    assert can_view_operatives(Role.ADMIN, target)
    assert can_mutate_operative(Role.ADMIN, target)


@pytest.mark.parametrize("caller", FACTIONS)
def test_faction_is_limited_to_its_own_role(caller: Role) -> None:
    for target in FACTIONS:
        expected = caller is target
        assert can_view_operatives(caller, target) is expected
        assert can_mutate_operative(caller, target) is expected


def test_only_admin_manages_wanted_and_users() -> None:
    assert is_admin(Role.ADMIN)
    assert can_mutate_wanted(Role.ADMIN)
    assert can_mutate_user(Role.ADMIN)
    for role in FACTIONS:
        assert not can_mutate_wanted(role)
        assert not can_mutate_user(role)


def test_admin_cannot_delete_own_account() -> None:
    assert can_delete_user(Role.ADMIN, 1, 2)
    assert not can_delete_user(Role.ADMIN, 1, 1)
    assert not can_delete_user(Role.DUTY, 1, 2)


def test_plain_strings_are_rejected() -> None:
    with pytest.raises(TypeError):
        can_view_operatives("Duty", Role.DUTY)
    with pytest.raises(TypeError):
        is_admin("Admin")


def test_ensure_raises_forbidden_on_denial() -> None:
    ensure(True)
    with pytest.raises(Forbidden) as excinfo:
        ensure(False, "nope")
    assert excinfo.value.detail == "nope"
    assert excinfo.value.status_code == 403

# This project was developed with assistance from AI tools.
"""Unit tests for scope calculation (services.access.compute_scope).

Supervisory callers are unrestricted; everyone else sees their home unit,
and the oversight unit additionally sees the specialized unit.
"""

import pytest
from db.enums import UserRole

from src.core.errors import Forbidden
from src.services.access import compute_scope

from factories import OVERSIGHT_UNIT_ID, SPECIALIZED_UNIT_ID, make_policy, make_subject


def test_supervisory_scope_unrestricted(policy):
    """Supervisory role is unrestricted even without a unit."""
    scope = compute_scope(make_subject(UserRole.SUPERVISORY, home_unit_id=None), policy)
    assert scope.is_unrestricted is True
    assert scope.allowed_unit_ids == frozenset()


@pytest.mark.parametrize(
    "role",
    [UserRole.OVERSIGHT, UserRole.TERRITORIAL_UNIT, UserRole.SPECIALIZED_UNIT, UserRole.OTHER],
)
def test_missing_unit_is_forbidden(role, policy):
    """Every non-supervisory role without a unit fails closed."""
    with pytest.raises(Forbidden, match="unit assignment missing") as exc_info:
        compute_scope(make_subject(role, home_unit_id=None, id=77), policy)
    assert exc_info.value.subject_id == 77


def test_territorial_scope_own_unit_only(policy):
    scope = compute_scope(make_subject(UserRole.TERRITORIAL_UNIT, home_unit_id=3), policy)
    assert scope.is_unrestricted is False
    assert scope.allowed_unit_ids == frozenset({3})


def test_specialized_unit_sees_only_itself(policy):
    scope = compute_scope(
        make_subject(UserRole.SPECIALIZED_UNIT, home_unit_id=SPECIALIZED_UNIT_ID), policy
    )
    assert scope.allowed_unit_ids == frozenset({SPECIALIZED_UNIT_ID})


def test_oversight_unit_also_sees_specialized_unit(policy):
    scope = compute_scope(make_subject(UserRole.OVERSIGHT, home_unit_id=OVERSIGHT_UNIT_ID), policy)
    assert scope.allowed_unit_ids == frozenset({OVERSIGHT_UNIT_ID, SPECIALIZED_UNIT_ID})


def test_exception_follows_unit_not_role(policy):
    """Any role homed in the oversight unit gets the exception."""
    scope = compute_scope(
        make_subject(UserRole.OTHER, home_unit_id=OVERSIGHT_UNIT_ID), policy
    )
    assert scope.allowed_unit_ids == frozenset({OVERSIGHT_UNIT_ID, SPECIALIZED_UNIT_ID})


def test_oversight_role_outside_oversight_unit_gets_no_exception(policy):
    scope = compute_scope(make_subject(UserRole.OVERSIGHT, home_unit_id=5), policy)
    assert scope.allowed_unit_ids == frozenset({5})


def test_equal_distinguished_ids_leave_scope_unaffected():
    """Degenerate configuration: the exception is a no-op, not an error."""
    policy = make_policy(specialized_unit_id=4, oversight_unit_id=4)
    scope = compute_scope(make_subject(UserRole.OVERSIGHT, home_unit_id=4), policy)
    assert scope.allowed_unit_ids == frozenset({4})


def test_unknown_role_most_restrictive(policy):
    scope = compute_scope(make_subject(UserRole.OTHER, home_unit_id=9), policy)
    assert scope.is_unrestricted is False
    assert scope.allowed_unit_ids == frozenset({9})


def test_null_unit_flag_carried_into_scope():
    scope = compute_scope(make_subject(home_unit_id=3), make_policy(null_unit_is_visible=True))
    assert scope.include_unassigned is True


def test_reassignment_takes_effect_immediately(policy):
    """Scopes are computed from the subject each time; nothing is cached."""
    before = compute_scope(make_subject(home_unit_id=3), policy)
    after = compute_scope(make_subject(home_unit_id=7), policy)
    assert before.allowed_unit_ids == frozenset({3})
    assert after.allowed_unit_ids == frozenset({7})

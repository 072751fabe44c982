from uuid import uuid4

import pytest

from fitcoach.models.user import User
from fitcoach.services.access import (
    AccessLevel,
    Scope,
    WorkoutGrants,
    access_level,
    can_complete,
    can_modify,
    can_read,
    visible_scope,
)
from fitcoach.services.identity import set_roles


def _user(*roles, is_active=True) -> User:
    user = User(email=f"{uuid4().hex}@example.com", is_active=is_active)
    set_roles(user, roles or ["customer"])
    return user


@pytest.fixture
def owner():
    return _user("customer")


@pytest.fixture
def grants(owner):
    return WorkoutGrants(owner_id=owner.id, created_by=owner.id)


def test_owner(owner, grants):
    level = access_level(owner, grants, frozenset())
    assert level == AccessLevel.OWNER
    assert can_modify(level, owner, grants)
    assert can_complete(level, owner, grants)


def test_assigned_customer_is_read_only(owner):
    other = _user("customer")
    grants = WorkoutGrants(
        owner_id=owner.id, created_by=owner.id, customer_ids=frozenset({other.id})
    )
    level = access_level(other, grants, frozenset())
    assert level == AccessLevel.ASSIGNED_CUSTOMER
    assert can_read(level)
    assert not can_modify(level, other, grants)
    assert can_complete(level, other, grants)


def test_assigned_coach_requires_coach_role(owner):
    coach = _user("coach")
    not_a_coach = _user("customer")
    grants = WorkoutGrants(
        owner_id=owner.id,
        created_by=owner.id,
        coach_ids=frozenset({coach.id, not_a_coach.id}),
    )
    assert access_level(coach, grants, frozenset()) == AccessLevel.ASSIGNED_COACH
    assert access_level(not_a_coach, grants, frozenset()) == AccessLevel.DENIED


def test_coach_of_owner(owner, grants):
    coach = _user("coach")
    level = access_level(coach, grants, frozenset({owner.id}))
    assert level == AccessLevel.COACH_OF_OWNER
    assert can_modify(level, coach, grants)


def test_coaching_without_coach_role_is_ignored(owner, grants):
    demoted = _user("customer")
    assert access_level(demoted, grants, frozenset({owner.id})) == AccessLevel.DENIED


def test_admin_comes_after_relationship_checks(owner):
    admin_coach = _user("admin", "coach")
    grants = WorkoutGrants(
        owner_id=owner.id, created_by=owner.id, coach_ids=frozenset({admin_coach.id})
    )
    assert access_level(admin_coach, grants, frozenset()) == AccessLevel.ASSIGNED_COACH
    assert access_level(_user("admin"), grants, frozenset()) == AccessLevel.ADMIN


def test_stranger_denied(grants):
    level = access_level(_user("customer"), grants, frozenset())
    assert level == AccessLevel.DENIED
    assert not can_read(level)


def test_inactive_user_always_denied(grants):
    inactive_owner = _user("admin", is_active=False)
    grants = WorkoutGrants(owner_id=inactive_owner.id, created_by=inactive_owner.id)
    assert access_level(inactive_owner, grants, frozenset()) == AccessLevel.DENIED


def test_owner_cannot_modify_coach_created_workout(owner):
    coach = _user("coach")
    grants = WorkoutGrants(owner_id=owner.id, created_by=coach.id, is_coach_created=True)
    level = access_level(owner, grants, frozenset())
    assert level == AccessLevel.OWNER
    assert not can_modify(level, owner, grants)
    assert can_complete(level, owner, grants)


def test_owner_with_coach_role_can_modify_coach_created_workout():
    owner = _user("coach")
    grants = WorkoutGrants(owner_id=owner.id, created_by=uuid4(), is_coach_created=True)
    assert can_modify(AccessLevel.OWNER, owner, grants)


def test_visible_scope():
    assert visible_scope(_user("admin", "coach")) == Scope.ALL
    assert visible_scope(_user("coach", "customer")) == Scope.COACH
    assert visible_scope(_user("customer")) == Scope.CUSTOMER

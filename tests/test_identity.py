from fitcoach.models.user import User, UserRole
from fitcoach.services.identity import (
    add_role,
    normalize_roles,
    primary_role,
    resolve_identity,
    set_roles,
    user_roles,
)


def test_normalize_roles_orders_by_priority_and_dedupes():
    assert normalize_roles(["customer", "admin", "customer", "coach"]) == [
        UserRole.ADMIN,
        UserRole.COACH,
        UserRole.CUSTOMER,
    ]


def test_normalize_roles_drops_unknown_values():
    assert normalize_roles(["trainer", "coach"]) == [UserRole.COACH]


def test_normalize_roles_falls_back_to_legacy_role_then_customer():
    assert normalize_roles([], "coach") == [UserRole.COACH]
    assert normalize_roles(None, "bogus") == [UserRole.CUSTOMER]
    assert normalize_roles(None) == [UserRole.CUSTOMER]


def test_primary_role():
    assert primary_role(["customer", "coach"]) == UserRole.COACH


def test_set_roles_keeps_role_in_sync():
    user = User(email="a@example.com")
    set_roles(user, ["customer", "admin"])
    assert user.roles == ["admin", "customer"]
    assert user.role == UserRole.ADMIN


def test_add_role_assigns_new_list():
    user = User(email="a@example.com")
    set_roles(user, ["customer"])
    before = user.roles
    add_role(user, UserRole.COACH)
    assert user.roles is not before
    assert user_roles(user) == [UserRole.COACH, UserRole.CUSTOMER]


def test_user_roles_reads_legacy_record():
    user = User(email="a@example.com", role=UserRole.COACH, roles=[])
    assert user_roles(user) == [UserRole.COACH]


async def test_resolve_by_primary_key(session, make_user):
    user = await make_user("pk@example.com")
    found = await resolve_identity(session, str(user.id))
    assert found.id == user.id


async def test_resolve_by_email_is_case_insensitive(session, make_user):
    user = await make_user("mixed@example.com")
    found = await resolve_identity(session, "MIXED@Example.com")
    assert found.id == user.id


async def test_resolve_by_sub_then_google_id(session, make_user):
    by_sub = await make_user("sub@example.com", sub="oauth-sub-1")
    by_legacy = await make_user("legacy@example.com", google_id="google-42")

    assert (await resolve_identity(session, "oauth-sub-1")).id == by_sub.id
    assert (await resolve_identity(session, "google-42")).id == by_legacy.id


async def test_resolve_unknown_or_empty_subject(session, make_user):
    await make_user("someone@example.com")
    assert await resolve_identity(session, "") is None
    assert await resolve_identity(session, None) is None
    assert await resolve_identity(session, "nobody@example.com") is None
    assert await resolve_identity(session, "7c0f0000-0000-0000-0000-000000000000") is None

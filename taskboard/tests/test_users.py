import pytest

from exceptions import NotFoundError, UnauthorizedError
from routers.deps import CallerContext
from schemas.user import UserCreate, UserRoleUpdate
from services.user import UserService


def test_create_or_get_user_is_idempotent_by_identity(db_session):
    service = UserService(db_session)
    first = service.create_or_get_user(UserCreate(identity="abc", email="a@example.com", name="A"))
    again = service.create_or_get_user(UserCreate(identity="abc", email="other@example.com", name="B"))

    assert again.id == first.id
    assert again.email == "a@example.com"
    assert first.role is None
    assert first.team_id is None


def test_update_role_admin_with_team_name_creates_team(db_session):
    service = UserService(db_session)
    service.create_or_get_user(UserCreate(identity="abc", email="a@example.com"))

    user = service.update_user_role(UserRoleUpdate(identity="abc", role="admin", team_name="Rockets"))

    assert user.role == "admin"
    team = service.team_repo.get_team_by_id(user.team_id)
    assert team.name == "Rockets"
    assert team.admin_id == user.id


def test_update_role_without_team_name_keeps_existing_team(db_session, admin):
    service = UserService(db_session)
    user = service.update_user_role(UserRoleUpdate(identity="admin-1", role="employee"))

    assert user.role == "employee"
    assert user.team_id == admin.team_id


def test_update_role_for_unknown_identity_fails(db_session):
    with pytest.raises(NotFoundError):
        UserService(db_session).update_user_role(UserRoleUpdate(identity="ghost", role="employee"))


def test_get_current_user_tolerates_missing_identity(db_session, admin):
    service = UserService(db_session)
    assert service.get_current_user(None) is None
    assert service.get_current_user("unknown") is None
    assert service.get_current_user("admin-1").id == admin.id


def test_resolve_caller_rejects_anonymous_and_unknown(db_session):
    service = UserService(db_session)
    with pytest.raises(UnauthorizedError) as anonymous:
        service.resolve_caller(CallerContext())
    assert anonymous.value.status_code == 401

    with pytest.raises(UnauthorizedError) as unknown:
        service.resolve_caller(CallerContext(identity="nobody"))
    assert unknown.value.status_code == 403

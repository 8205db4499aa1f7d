from datetime import datetime

import pytest

from models import db
from models.user import User
from services.errors import NotFoundError, ValidationError
from services.users import UserService


@pytest.fixture
def users(store):
    return UserService(store)


def test_upsert_creates_once(users):
    user, created = users.upsert("New@Example.com", name="New Player")
    assert created is True
    assert user.email == "new@example.com"
    assert user.role == "user"
    assert user.member_since is None

    again, created = users.upsert("new@example.com", name="Renamed")
    assert created is False
    assert again.id == user.id
    assert User.query.count() == 1


@pytest.mark.parametrize("email", [None, "", "not-an-email"])
def test_upsert_validates_email(users, email):
    with pytest.raises(ValidationError):
        users.upsert(email)


def test_role_of(users, admin):
    assert users.role_of(admin.email) == "admin"
    with pytest.raises(NotFoundError):
        users.role_of("missing@example.com")


def test_list_members_sorted_by_member_since(users, make_user):
    early = make_user("early@example.com", role="member", name="Early Bird")
    late = make_user("late@example.com", role="member", name="Late Comer")
    make_user("plain@example.com")
    early.member_since = datetime(2025, 1, 1)
    late.member_since = datetime(2026, 1, 1)
    db.session.commit()

    assert [u.email for u in users.list_members()] == ["late@example.com", "early@example.com"]
    assert [u.email for u in users.list_members(search="bird")] == ["early@example.com"]


def test_post_users_is_idempotent(client):
    resp = client.post("/users", json={"email": "fresh@example.com", "name": "Fresh", "role": "admin"})
    assert resp.status_code == 201
    assert resp.get_json()["role"] == "user"

    resp = client.post("/users", json={"email": "fresh@example.com"})
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "User already exists"


def test_post_users_requires_email(client):
    resp = client.post("/users", json={})
    assert resp.status_code == 400
    assert resp.get_json()["field"] == "email"


def test_member_admin_routes(client, admin, player, auth_headers):
    resp = client.get("/members", headers=auth_headers(player))
    assert resp.status_code == 403

    resp = client.delete(f"/members/{player.id}", headers=auth_headers(admin))
    assert resp.status_code == 200
    assert db.session.get(User, player.id) is None


def test_admin_stats(client, admin, court, auth_headers):
    resp = client.get("/admin-stats", headers=auth_headers(admin))
    assert resp.get_json() == {"totalCourts": 1, "totalUsers": 1, "totalMembers": 0}

import pytest

from app.models.user import UserRole
from app.services.auth import create_access_token

from conftest import make_settings

ADMIN_ENDPOINTS = [
    ("get", "/admin/users"),
    ("get", "/locations/dropoff-locations"),
]
PRIME_ADMIN_ENDPOINTS = [
    ("get", "/admin/admins"),
    ("put", "/admin/users/12345678/role"),
]


def test_missing_header_is_401(client):
    r = client.get("/users/profile")
    assert r.status_code == 401
    assert r.json()["code"] == "not_authenticated"


def test_non_bearer_header_is_401(client):
    r = client.get("/users/profile", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert r.status_code == 401


def test_invalid_token_is_401(client):
    r = client.get("/users/profile", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["code"] == "invalid_token"
    assert r.json()["detail"] == "Invalid or expired token"


def test_expired_token_is_401(client, student):
    token = create_access_token(make_settings(jwt_access_token_expire_minutes=-5), student.id, student.email, student.role)
    r = client.get("/users/profile", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid or expired token"


def test_token_for_deleted_account_is_401(client, settings):
    token = create_access_token(settings, 12345678, "gone@bennett.edu.in", UserRole.user)
    r = client.get("/users/profile", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_unverified_account_is_403(client, make_user, auth_headers):
    user = make_user(verified=False)
    r = client.get("/users/profile", headers=auth_headers(user))
    assert r.status_code == 403
    assert r.json()["code"] == "email_not_verified"


@pytest.mark.parametrize("method,path", ADMIN_ENDPOINTS + PRIME_ADMIN_ENDPOINTS)
def test_standard_user_is_forbidden_from_admin_endpoints(client, student, auth_headers, method, path):
    r = client.request(method, path, headers=auth_headers(student), json={"role": "user"})
    assert r.status_code == 403
    assert r.json()["code"] == "forbidden"


@pytest.mark.parametrize("method,path", PRIME_ADMIN_ENDPOINTS)
def test_admin_is_forbidden_from_prime_admin_endpoints(client, admin, auth_headers, method, path):
    r = client.request(method, path, headers=auth_headers(admin), json={"role": "user"})
    assert r.status_code == 403
    assert r.json()["code"] == "forbidden"


@pytest.mark.parametrize("method,path", ADMIN_ENDPOINTS)
def test_prime_admin_satisfies_admin_tier(client, prime_admin, auth_headers, method, path):
    r = client.request(method, path, headers=auth_headers(prime_admin))
    assert r.status_code == 200


def test_demoted_admin_token_stops_working(client, admin, prime_admin, auth_headers):
    old_headers = auth_headers(admin)
    assert client.get("/admin/users", headers=old_headers).status_code == 200
    r = client.put(f"/admin/users/{admin.id}/role", json={"role": "user"}, headers=auth_headers(prime_admin))
    assert r.status_code == 200
    assert client.get("/admin/users", headers=old_headers).status_code == 403


def test_token_role_claim_cannot_exceed_stored_role(client, student, auth_headers):
    r = client.get("/admin/users", headers=auth_headers(student, role=UserRole.admin))
    assert r.status_code == 403


def test_token_issued_for_lower_role_is_forbidden(client, admin, auth_headers):
    r = client.get("/admin/users", headers=auth_headers(admin, role=UserRole.user))
    assert r.status_code == 403
    assert client.get("/admin/users", headers=auth_headers(admin)).status_code == 200

from datetime import timedelta

from core.security import TokenService, get_token_service
from models.user import User
from schemas.auth_schema import IdentityClaim


def _register_payload(**overrides):
    payload = {"name": "Jo Site", "email": "jo@example.com", "password": "s3cret-pass"}
    payload.update(overrides)
    return payload


def test_register_user(client):
    """Registration returns the user without any password material"""
    response = client.post("/api/register", json=_register_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "jo@example.com"
    assert data["name"] == "Jo Site"
    assert isinstance(data["id"], int)
    assert data["created_at"]
    assert "password" not in data
    assert "password_hash" not in data


def test_register_stores_hash_not_password(client, db_session):
    client.post("/api/register", json=_register_payload())

    user = db_session.query(User).filter(User.email == "jo@example.com").one()
    assert user.password_hash != "s3cret-pass"
    assert user.password_hash.startswith("$2")


def test_register_missing_fields(client):
    for missing in ("name", "email", "password"):
        payload = _register_payload()
        del payload[missing]

        response = client.post("/api/register", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "All fields are required"
        assert response.json()["code"] == "VALIDATION_ERROR"


def test_register_blank_field(client):
    response = client.post("/api/register", json=_register_payload(name="   "))

    assert response.status_code == 400


def test_register_duplicate_email(client, db_session):
    """Second registration with the same email is a conflict and adds no row"""
    first = client.post("/api/register", json=_register_payload())
    second = client.post("/api/register", json=_register_payload(name="Someone Else"))

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json() == {"error": "Email already in use.", "code": "CONFLICT", "details": {}}
    assert db_session.query(User).filter(User.email == "jo@example.com").count() == 1


def test_email_is_case_sensitive_as_stored(client):
    client.post("/api/register", json=_register_payload())

    response = client.post("/api/register", json=_register_payload(email="JO@example.com"))

    assert response.status_code == 201


def test_login_success(client, test_user):
    response = client.post("/api/login", json={"email": test_user.email, "password": "testpassword123"})

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == test_user.id
    assert data["user"]["email"] == test_user.email
    assert "password_hash" not in data["user"]

    claim = get_token_service().verify(data["token"])
    assert claim == IdentityClaim(id=test_user.id, name=test_user.name, email=test_user.email)


def test_login_failures_are_indistinguishable(client, test_user):
    """Wrong password and unknown email give the same status and body"""
    wrong_password = client.post("/api/login", json={"email": test_user.email, "password": "nope"})
    unknown_email = client.post("/api/login", json={"email": "ghost@example.com", "password": "nope"})

    assert wrong_password.status_code == unknown_email.status_code == 400
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["error"] == "Invalid credentials"


def test_login_missing_fields(client):
    response = client.post("/api/login", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid credentials"


def test_me_returns_identity(client, test_user, auth_headers):
    response = client.get("/api/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"id": test_user.id, "name": test_user.name, "email": test_user.email}


def test_missing_authorization_header(client):
    response = client.get("/api/projects")

    assert response.status_code == 401
    assert response.json()["code"] == "NOT_AUTHENTICATED"


def test_non_bearer_scheme_is_unauthenticated(client):
    response = client.get("/api/projects", headers={"Authorization": "Basic dXNlcjpwYXNz"})

    assert response.status_code == 401


def test_garbage_token_is_unauthorized(client):
    response = client.get("/api/projects", headers={"Authorization": "Bearer not.a.token"})

    assert response.status_code == 403
    assert response.json()["code"] == "INVALID_TOKEN"


def test_expired_token_is_unauthorized(client, test_user):
    claim = IdentityClaim(id=test_user.id, name=test_user.name, email=test_user.email)
    token = get_token_service().issue(claim, expires_delta=timedelta(seconds=-5))

    response = client.get("/api/projects", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403
    assert response.json()["code"] == "TOKEN_EXPIRED"


def test_token_signed_with_other_key_is_unauthorized(client, test_user):
    claim = IdentityClaim(id=test_user.id, name=test_user.name, email=test_user.email)
    token = TokenService(secret_key="not-the-server-key").issue(claim)

    response = client.get("/api/projects", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403


def test_token_outlives_deleted_user(client, db_session, test_user, auth_headers):
    """Verification is stateless: the token works until it expires"""
    db_session.delete(test_user)
    db_session.commit()

    response = client.get("/api/me", headers=auth_headers)

    assert response.status_code == 200


def test_register_and_login_need_no_token(client):
    assert client.post("/api/register", json=_register_payload()).status_code == 201
    response = client.post("/api/login", json={"email": "jo@example.com", "password": "s3cret-pass"})
    assert response.status_code == 200


def test_token_service_can_be_substituted(client, test_user):
    """Routes take the token service as a dependency"""
    alt = TokenService(secret_key="alternate-key")
    client.app.dependency_overrides[get_token_service] = lambda: alt
    claim = IdentityClaim(id=test_user.id, name=test_user.name, email=test_user.email)

    response = client.get("/api/me", headers={"Authorization": f"Bearer {alt.issue(claim)}"})

    assert response.status_code == 200


def test_register_overlong_name_is_validation_error(client, db_session):
    response = client.post("/api/register", json=_register_payload(name="n" * 101))

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert response.json()["details"] == {"field": "name"}
    assert db_session.query(User).count() == 0

import pytest
from datetime import timedelta
from app.services import auth as auth_service
from app.models.user import User, UserRole

def test_password_hashing():
    """Test that password hashing and verification works correctly."""
    password = "MySecurePassword123!"
    hashed = auth_service.get_password_hash(password)
    assert hashed != password
    assert auth_service.verify_password(password, hashed)
    assert not auth_service.verify_password("WrongPassword", hashed)

def test_create_user(db_session):
    """Test creating a new user directly through the model."""
    email = "newuser@example.com"
    password = "Password123!"

    user = User(
        email=email,
        hashed_password=auth_service.get_password_hash(password),
        first_name="New",
        last_name="User",
        role=UserRole.EMPLOYEE,
        is_active=True
    )
    db_session.add(user)
    db_session.commit()

    saved_user = db_session.query(User).filter(User.email == email).first()
    assert saved_user is not None
    assert len(saved_user.id) == 36
    assert auth_service.verify_password(password, saved_user.hashed_password)

def test_access_token_roundtrip():
    token = auth_service.create_access_token({"sub": "someone@example.com", "role": "EMPLOYEE"})
    payload = auth_service.decode_access_token(token)
    assert payload["sub"] == "someone@example.com"
    assert payload["type"] == "access"

def test_expired_token_is_reported():
    token = auth_service.create_access_token({"sub": "someone@example.com"}, expires_delta=timedelta(seconds=-5))
    assert auth_service.decode_access_token(token) == {"error": "TOKEN_EXPIRED"}

def test_garbage_token_is_rejected():
    assert auth_service.decode_access_token("not-a-jwt") is None


# --- API ---

def test_login_success(client, admin_user):
    response = client.post("/api/auth/login", json={"email": admin_user.email, "password": "AdminPassword123!"})
    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"
    assert data["user"]["firstName"] == "Admin"

def test_login_invalid_credentials(client):
    response = client.post("/api/auth/login", json={"email": "nonexistent@example.com", "password": "wrong"})
    assert response.status_code == 401
    assert response.json()["success"] is False
    assert response.json()["errors"][0]["code"] == "AUTH_FAILED"

def test_me_requires_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401

def test_me_returns_current_user(client, admin_user, auth_headers):
    response = client.get("/api/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == admin_user.email
    assert response.json()["role"] == "HR_ADMIN"

def test_employee_cannot_manage_directory(client, make_user, get_token):
    employee = make_user("eve")
    response = client.post(
        "/api/admin/users",
        headers={"Authorization": f"Bearer {get_token(employee)}"},
        json={"email": "x@example.com", "firstName": "X", "lastName": "Y", "password": "Password123!"},
    )
    assert response.status_code == 403
    assert response.json()["errors"][0]["code"] == "PERMISSION_DENIED"

"""
Integration tests for authentication and profile endpoints

Author: DP Team
Date: 2025-06-10
"""
from unittest.mock import AsyncMock, patch

from app.core.config import settings
from app.models import User

TEST_PASSWORD = "password123"


class TestRegisterAndLogin:
    """Test account creation and sign-in"""

    def test_register_creates_customer(self, client, db):
        response = client.post("/api/v1/auth/register", json={
            "email": "Ayesha@Example.com",
            "password": "longenough",
            "name": "Ayesha",
        })

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["email"] == "ayesha@example.com"
        assert data["role"] == "USER"
        assert "password_hash" not in data

    def test_register_rejects_short_password(self, client):
        response = client.post("/api/v1/auth/register", json={"email": "a@example.com", "password": "short"})

        assert response.status_code == 400
        assert "at least 8" in response.json()["detail"]

    def test_register_rejects_duplicate_email(self, client, customer):
        response = client.post("/api/v1/auth/register", json={"email": customer.email, "password": "longenough"})

        assert response.status_code == 400

    def test_register_rejects_invalid_email(self, client):
        response = client.post("/api/v1/auth/register", json={"email": "not-an-email", "password": "longenough"})

        assert response.status_code == 422

    def test_login_sets_cookie_and_returns_token(self, client, customer):
        response = client.post("/api/v1/auth/login", json={"email": customer.email, "password": TEST_PASSWORD})

        assert response.status_code == 200
        body = response.json()["data"]
        assert body["token"]
        assert body["user"]["id"] == customer.id
        assert "session_token" in response.cookies

    def test_login_wrong_password(self, client, customer):
        response = client.post("/api/v1/auth/login", json={"email": customer.email, "password": "wrong-password"})

        assert response.status_code == 401

    def test_login_deactivated_account(self, client, make_user):
        user = make_user(is_active=False)

        response = client.post("/api/v1/auth/login", json={"email": user.email, "password": TEST_PASSWORD})

        assert response.status_code == 403

    def test_me_requires_session(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_me_with_cookie(self, client, customer):
        login = client.post("/api/v1/auth/login", json={"email": customer.email, "password": TEST_PASSWORD})
        token = login.json()["data"]["token"]

        client.cookies.set("session_token", token)
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json()["data"]["email"] == customer.email

    def test_invalid_token_rejected(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401


class TestPasswordReset:
    """Test the forgot / verify / reset flow"""

    @patch("app.api.auth.send_password_reset", new_callable=AsyncMock)
    def test_forgot_password_same_answer_for_unknown_email(self, mock_send, client, customer):
        known = client.post("/api/v1/auth/forgot-password", json={"email": customer.email})
        unknown = client.post("/api/v1/auth/forgot-password", json={"email": "nobody@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json()["message"] == unknown.json()["message"]
        mock_send.assert_called_once()

    @patch("app.api.auth.send_password_reset", new_callable=AsyncMock)
    def test_full_reset_flow(self, mock_send, client, db, customer):
        # Arrange: request a reset and read the code that was issued
        client.post("/api/v1/auth/forgot-password", json={"email": customer.email})
        db.refresh(customer)
        code = customer.reset_token
        assert code and len(code) == 64

        # Act
        verify = client.post("/api/v1/auth/verify-reset-token", json={"email": customer.email, "code": code})
        reset = client.post("/api/v1/auth/reset-password", json={
            "email": customer.email,
            "code": code,
            "password": "brand-new-pass",
        })

        # Assert
        assert verify.json()["data"]["valid"] is True
        assert reset.status_code == 200
        login = client.post("/api/v1/auth/login", json={"email": customer.email, "password": "brand-new-pass"})
        assert login.status_code == 200

        db.refresh(customer)
        assert customer.reset_token is None

    def test_reset_with_bad_code(self, client, customer):
        response = client.post("/api/v1/auth/reset-password", json={
            "email": customer.email,
            "code": "bad",
            "password": "brand-new-pass",
        })

        assert response.status_code == 400


class TestProfile:
    """Test profile completion"""

    def test_profile_becomes_complete(self, client, db, make_user, headers_for):
        user = make_user(complete_profile=False)
        headers = headers_for(user)

        partial = client.put("/api/v1/profile", json={"phone": "0300"}, headers=headers)
        assert partial.json()["data"]["is_profile_complete"] is False

        response = client.put("/api/v1/profile", json={
            "address": "12 Clinic Road",
            "city": "Lahore",
            "postal_code": "54000",
            "country": "Pakistan",
            "profession": "Nurse",
        }, headers=headers)

        assert response.status_code == 200
        assert response.json()["data"]["is_profile_complete"] is True
        assert db.get(User, user.id).is_profile_complete is True


class TestRateLimit:
    def test_auth_endpoints_are_rate_limited(self, client):
        with patch.object(settings, "RATE_LIMIT_AUTH_ENDPOINTS", 2):
            codes = [
                client.post("/api/v1/auth/login", json={"email": "x@example.com", "password": "whatever1"}).status_code
                for _ in range(3)
            ]

        assert codes == [401, 401, 429]

"""Tests for sign up, sign in and token refresh."""

from app.core.security import create_refresh_token
from app.models.tenant import Tenant
from app.models.user import User
from tests.conftest import API, TEST_PASSWORD, create_test_token

REGISTER_URL = f"{API}/auth/register"
LOGIN_URL = f"{API}/auth/login"
REFRESH_URL = f"{API}/auth/refresh"


def registration(**overrides) -> dict:
    payload = {
        "tenantName": "Sparkle Laundry",
        "firstName": "Zeynep",
        "lastName": "Kaya",
        "email": "zeynep@sparkle.example.com",
        "password": "secret123",
        "city": "Istanbul",
    }
    payload.update(overrides)
    return payload


class TestRegister:
    def test_register_creates_tenant_and_user(self, client, db_session):
        """Default app is laundry; the first user gets role USER"""
        response = client.post(REGISTER_URL, json=registration())

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "zeynep@sparkle.example.com"
        assert data["user"]["role"] == "USER"
        assert data["tenant"]["name"] == "Sparkle Laundry"
        assert data["tenant"]["businessType"] == "LAUNDRY_SERVICE"
        assert data["app"]["slug"] == "laundry"
        assert data["tokens"]["tokenType"] == "bearer"

        tenant = db_session.query(Tenant).filter(Tenant.id == data["tenant"]["id"]).one()
        assert tenant.settings["currency"] == "TRY"
        assert tenant.settings["appSlug"] == "laundry"
        assert tenant.settings["registrationInfo"]["city"] == "Istanbul"

    def test_register_with_app_and_business_types(self, client, carpet_business_type, db_session):
        response = client.post(
            REGISTER_URL,
            json=registration(appSlug="hotel", businessTypeIds=[carpet_business_type.id]),
        )

        assert response.status_code == 201
        assert response.json()["tenant"]["businessType"] == "HOTEL"
        tenant = db_session.query(Tenant).filter(Tenant.id == response.json()["tenant"]["id"]).one()
        assert tenant.settings["registrationInfo"]["businessTypes"] == [
            {"id": carpet_business_type.id, "name": "Carpet Cleaning"}
        ]

    def test_issued_token_works(self, client):
        tokens = client.post(REGISTER_URL, json=registration()).json()["tokens"]
        response = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {tokens['accessToken']}"})
        assert response.status_code == 200

    def test_duplicate_email(self, client, admin_a):
        response = client.post(REGISTER_URL, json=registration(email=admin_a.email))
        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    def test_inactive_business_type_rejected(self, client, carpet_business_type, db_session):
        """Nothing is created when a business type is invalid"""
        carpet_business_type.is_active = False
        db_session.commit()

        response = client.post(REGISTER_URL, json=registration(businessTypeIds=[carpet_business_type.id]))

        assert response.status_code == 400
        assert db_session.query(User).count() == 0

    def test_unknown_app_rejected(self, client):
        response = client.post(REGISTER_URL, json=registration(appSlug="garage"))
        assert response.status_code == 400

    def test_short_password_rejected(self, client):
        response = client.post(REGISTER_URL, json=registration(password="123"))
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestLogin:
    def test_login_returns_tokens(self, client, admin_a, db_session):
        response = client.post(LOGIN_URL, json={"email": admin_a.email, "password": TEST_PASSWORD})

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == admin_a.id
        assert data["tenant"]["id"] == admin_a.tenant_id
        assert data["tokens"]["accessToken"]
        db_session.refresh(admin_a)
        assert admin_a.last_login_at is not None

    def test_email_is_case_insensitive(self, client, admin_a):
        response = client.post(LOGIN_URL, json={"email": admin_a.email.upper(), "password": TEST_PASSWORD})
        assert response.status_code == 200

    def test_wrong_password(self, client, admin_a):
        response = client.post(LOGIN_URL, json={"email": admin_a.email, "password": "wrong-password"})
        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_CREDENTIALS"

    def test_tenant_id_narrows_lookup(self, client, admin_a):
        response = client.post(
            LOGIN_URL, json={"email": admin_a.email, "password": TEST_PASSWORD, "tenantId": "tenant-b"}
        )
        assert response.status_code == 401

    def test_inactive_tenant(self, client, admin_a, tenant_a, db_session):
        tenant_a.is_active = False
        db_session.commit()

        response = client.post(LOGIN_URL, json={"email": admin_a.email, "password": TEST_PASSWORD})
        assert response.status_code == 403
        assert response.json()["code"] == "TENANT_INACTIVE"


class TestRefresh:
    def test_refresh_issues_new_pair(self, client, admin_a):
        response = client.post(REFRESH_URL, json={"refreshToken": create_refresh_token(admin_a)})
        assert response.status_code == 200
        assert response.json()["accessToken"]
        assert response.json()["refreshToken"]

    def test_access_token_is_not_a_refresh_token(self, client, admin_a):
        """Refresh tokens are signed with their own key and type"""
        token = create_test_token(user_id=admin_a.id)
        response = client.post(REFRESH_URL, json={"refreshToken": token})
        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"

    def test_refresh_for_deactivated_user(self, client, admin_a, db_session):
        token = create_refresh_token(admin_a)
        admin_a.is_active = False
        db_session.commit()

        response = client.post(REFRESH_URL, json={"refreshToken": token})
        assert response.status_code == 401

from app.models.tenant import SYSTEM_TENANT_ID
from app.models.user import User
from app.models.role import UserRole
from tests.conftest import API, TEST_PASSWORD, auth_headers_for, make_user

TENANTS_URL = f"{API}/tenants"
PROFILE_URL = f"{TENANTS_URL}/profile"


class TestTenantProfile:
    """Tests for GET/PUT /tenants/profile"""

    def test_get_profile(self, client, tenant_a, employee_a_headers):
        """Any user of the tenant can read its profile"""
        response = client.get(PROFILE_URL, headers=employee_a_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == tenant_a.id
        assert data["name"] == "Clean Carpets A"
        assert data["domain"] == "carpets-a.example.com"
        assert data["isActive"] is True

    def test_admin_updates_profile(self, client, admin_a_headers):
        response = client.put(
            PROFILE_URL,
            headers=admin_a_headers,
            json={
                "name": "Clean Carpets Istanbul",
                "settings": {"currency": "EUR", "language": "en", "features": {"homePickup": True}},
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Clean Carpets Istanbul"
        assert data["settings"]["currency"] == "EUR"
        assert data["settings"]["features"] == {"homePickup": True}

    def test_business_owner_can_update(self, client, db_session, tenant_a):
        owner = make_user(db_session, tenant_a, UserRole.BUSINESS_OWNER, "owner@carpets-a.example.com")
        response = client.put(PROFILE_URL, headers=auth_headers_for(owner), json={"name": "Owned"})
        assert response.status_code == 200

    def test_employee_cannot_update(self, client, employee_a_headers):
        response = client.put(PROFILE_URL, headers=employee_a_headers, json={"name": "Hijacked"})
        assert response.status_code == 403
        assert response.json()["code"] == "INSUFFICIENT_PERMISSIONS"

    def test_unknown_settings_key_rejected(self, client, admin_a_headers):
        response = client.put(
            PROFILE_URL, headers=admin_a_headers, json={"settings": {"theme": "dark"}}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_domain_conflict(self, client, admin_b_headers, tenant_a):
        response = client.put(
            PROFILE_URL, headers=admin_b_headers, json={"domain": "carpets-a.example.com"}
        )
        assert response.status_code == 409

    def test_profile_is_own_tenant_only(self, client, admin_b_headers, tenant_a):
        """Tenant header pointing elsewhere does not change the profile returned"""
        response = client.get(PROFILE_URL, headers={**admin_b_headers, "X-Tenant-ID": tenant_a.id})
        assert response.status_code == 200
        assert response.json()["id"] == "tenant-b"


class TestTenantAdministration:
    """SUPER_ADMIN endpoints for managing customer tenants"""

    def test_list_excludes_system_tenant(self, client, super_admin_headers, tenant_a, tenant_b):
        response = client.get(TENANTS_URL, headers=super_admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert {t["id"] for t in data["tenants"]} == {"tenant-a", "tenant-b"}
        assert SYSTEM_TENANT_ID not in {t["id"] for t in data["tenants"]}

    def test_list_includes_owner_and_stats(self, client, super_admin_headers, admin_a, customer_a):
        response = client.get(TENANTS_URL, headers=super_admin_headers)

        tenant = response.json()["tenants"][0]
        assert tenant["status"] == "ACTIVE"
        assert tenant["owner"]["email"] == admin_a.email
        assert tenant["stats"] == {"usersCount": 1, "customersCount": 1, "ordersCount": 0}

    def test_list_filters(self, client, db_session, super_admin_headers, tenant_a, tenant_b):
        tenant_b.is_active = False
        db_session.commit()

        inactive = client.get(TENANTS_URL, headers=super_admin_headers, params={"status": "INACTIVE"})
        assert [t["id"] for t in inactive.json()["tenants"]] == ["tenant-b"]
        assert inactive.json()["tenants"][0]["status"] == "INACTIVE"

        searched = client.get(TENANTS_URL, headers=super_admin_headers, params={"search": "carpets"})
        assert [t["id"] for t in searched.json()["tenants"]] == ["tenant-a"]

    def test_list_requires_super_admin(self, client, admin_a_headers):
        response = client.get(TENANTS_URL, headers=admin_a_headers)
        assert response.status_code == 403

    def test_create_tenant_with_admin(self, client, db_session, super_admin_headers):
        response = client.post(
            TENANTS_URL,
            headers=super_admin_headers,
            json={
                "name": "Bright Hotel",
                "businessType": "HOTEL",
                "owner": {
                    "firstName": "Can",
                    "lastName": "Aydin",
                    "email": "can@bright.example.com",
                    "password": TEST_PASSWORD,
                },
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["tenant"]["name"] == "Bright Hotel"
        assert data["tenant"]["settings"]["contactInfo"] == {"email": "can@bright.example.com"}
        assert data["adminUser"]["role"] == "ADMIN"

        user = db_session.query(User).filter(User.id == data["adminUser"]["id"]).one()
        assert user.tenant_id == data["tenant"]["id"]

    def test_created_admin_can_login(self, client, super_admin_headers):
        client.post(
            TENANTS_URL,
            headers=super_admin_headers,
            json={
                "name": "Bright Hotel",
                "businessType": "HOTEL",
                "owner": {"firstName": "Can", "lastName": "Aydin", "email": "can@bright.example.com", "password": TEST_PASSWORD},
            },
        )
        response = client.post(
            f"{API}/auth/login", json={"email": "can@bright.example.com", "password": TEST_PASSWORD}
        )
        assert response.status_code == 200

    def test_create_tenant_duplicate_email(self, client, super_admin_headers, admin_a):
        response = client.post(
            TENANTS_URL,
            headers=super_admin_headers,
            json={
                "name": "Copycat",
                "businessType": "HOTEL",
                "owner": {"firstName": "A", "lastName": "B", "email": admin_a.email, "password": TEST_PASSWORD},
            },
        )
        assert response.status_code == 409

    def test_deactivate_tenant(self, client, super_admin_headers, tenant_a, admin_a, admin_a_headers):
        response = client.put(
            f"{TENANTS_URL}/{tenant_a.id}/status", headers=super_admin_headers, json={"isActive": False}
        )

        assert response.status_code == 200
        assert response.json()["isActive"] is False

        blocked = client.get(PROFILE_URL, headers=admin_a_headers)
        assert blocked.status_code == 403
        assert blocked.json()["code"] == "TENANT_INACTIVE"

    def test_system_tenant_status_locked(self, client, super_admin_headers):
        response = client.put(
            f"{TENANTS_URL}/{SYSTEM_TENANT_ID}/status", headers=super_admin_headers, json={"isActive": False}
        )
        assert response.status_code == 400

    def test_unknown_tenant_status(self, client, super_admin_headers):
        response = client.put(
            f"{TENANTS_URL}/missing/status", headers=super_admin_headers, json={"isActive": False}
        )
        assert response.status_code == 404

    def test_status_requires_super_admin(self, client, admin_a_headers, tenant_b):
        response = client.put(
            f"{TENANTS_URL}/{tenant_b.id}/status", headers=admin_a_headers, json={"isActive": False}
        )
        assert response.status_code == 403

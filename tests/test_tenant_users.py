from app.models.user import User
from tests.conftest import TEST_PASSWORD, headers_for


class TestProfile:
    """Tests for /api/user-tenant/profile"""

    def test_get_profile(self, client, member, member_headers):
        response = client.get("/api/user-tenant/profile", headers=member_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == member.id
        assert data["tenant"]["slug"] == "acme"

    def test_update_profile(self, client, member_headers):
        response = client.patch(
            "/api/user-tenant/profile",
            headers=member_headers,
            json={"name": "Bob Builder", "email": "builder@acme.io"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Bob Builder"
        assert data["email"] == "builder@acme.io"

    def test_profile_update_ignores_privileged_fields(self, client, member_headers):
        response = client.patch(
            "/api/user-tenant/profile",
            headers=member_headers,
            json={"is_tenant_admin": True, "tenant_id": 99},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_tenant_admin"] is False
        assert data["tenant"]["slug"] == "acme"

    def test_profile_email_conflict(self, client, member_headers, other_member):
        response = client.patch(
            "/api/user-tenant/profile", headers=member_headers, json={"email": "hank@globex.io"}
        )

        assert response.status_code == 409
        assert response.json()["kind"] == "conflict_email"

    def test_change_own_password(self, client, member_headers):
        response = client.patch(
            "/api/user-tenant/profile/password",
            headers=member_headers,
            json={
                "current_password": TEST_PASSWORD,
                "new_password": "fresh-password",
                "new_password_confirm": "fresh-password",
            },
        )
        assert response.status_code == 200

        old = client.post("/api/auth/login", json={"email": "bob@acme.io", "password": TEST_PASSWORD})
        new = client.post("/api/auth/login", json={"email": "bob@acme.io", "password": "fresh-password"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_wrong_current_password(self, client, member_headers):
        response = client.patch(
            "/api/user-tenant/profile/password",
            headers=member_headers,
            json={
                "current_password": "not-my-password",
                "new_password": "fresh-password",
                "new_password_confirm": "fresh-password",
            },
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "wrong_current_password"

    def test_confirmation_mismatch_checked_first(self, client, member_headers):
        response = client.patch(
            "/api/user-tenant/profile/password",
            headers=member_headers,
            json={
                "current_password": "not-my-password",
                "new_password": "fresh-password",
                "new_password_confirm": "other-password",
            },
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "password_mismatch"


class TestCreateTenantUser:
    """Tests for POST /api/user-tenant/users"""

    def test_create_inherits_tenant(self, client, tenant_a, tenant_admin_headers, role_a):
        response = client.post(
            "/api/user-tenant/users",
            headers=tenant_admin_headers,
            json={
                "email": "new@acme.io",
                "name": "Newbie",
                "password": "newbie-pass",
                "role_ids": [role_a.id],
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["tenant_id"] == tenant_a.id
        assert data["is_tenant_admin"] is False
        assert data["is_super_admin"] is False
        assert [r["name"] for r in data["roles"]] == ["Editors"]

    def test_foreign_role_rejected(self, client, db_session, tenant_admin_headers, role_b):
        response = client.post(
            "/api/user-tenant/users",
            headers=tenant_admin_headers,
            json={"email": "new@acme.io", "password": "newbie-pass", "role_ids": [role_b.id]},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "foreign_role"
        assert db_session.query(User).filter(User.email == "new@acme.io").count() == 0

    def test_duplicate_email(self, client, tenant_admin_headers, other_member):
        response = client.post(
            "/api/user-tenant/users",
            headers=tenant_admin_headers,
            json={"email": "hank@globex.io", "password": "whatever-pass"},
        )
        assert response.status_code == 409

    def test_member_cannot_create(self, client, member_headers):
        response = client.post(
            "/api/user-tenant/users",
            headers=member_headers,
            json={"email": "new@acme.io", "password": "newbie-pass"},
        )

        assert response.status_code == 403
        assert response.json()["kind"] == "tenant_admin_only"


class TestTenantUserIsolation:
    def test_list_only_own_tenant(self, client, tenant_admin_headers, member, other_member):
        response = client.get("/api/user-tenant/users", headers=tenant_admin_headers)

        assert response.status_code == 200
        emails = {u["email"] for u in response.json()["items"]}
        assert emails == {"admin@acme.io", "bob@acme.io"}

    def test_get_own_tenant_user(self, client, tenant_admin_headers, member):
        response = client.get(f"/api/user-tenant/users/{member.id}", headers=tenant_admin_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "bob@acme.io"

    def test_foreign_user_looks_like_missing_user(self, client, tenant_admin_headers, other_member):
        foreign = client.get(f"/api/user-tenant/users/{other_member.id}", headers=tenant_admin_headers)
        missing = client.get("/api/user-tenant/users/99999", headers=tenant_admin_headers)

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()
        assert foreign.json() == {"detail": "User not found", "kind": "resource_not_found"}

    def test_cannot_update_foreign_user(self, client, db_session, tenant_admin_headers, other_member):
        response = client.patch(
            f"/api/user-tenant/users/{other_member.id}",
            headers=tenant_admin_headers,
            json={"name": "Hijacked"},
        )

        assert response.status_code == 404
        user = db_session.query(User).filter(User.id == other_member.id).first()
        assert user.name == "Hank"

    def test_cannot_toggle_foreign_user(self, client, db_session, tenant_admin_headers, other_member):
        response = client.patch(
            f"/api/user-tenant/users/{other_member.id}/toggle-active", headers=tenant_admin_headers
        )

        assert response.status_code == 404
        user = db_session.query(User).filter(User.id == other_member.id).first()
        assert user.is_active is True


class TestManageTenantUser:
    def test_update_member(self, client, tenant_admin_headers, member):
        response = client.patch(
            f"/api/user-tenant/users/{member.id}",
            headers=tenant_admin_headers,
            json={"name": "Robert", "is_active": False},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Robert"
        assert data["is_active"] is False

    def test_toggle_member_blocks_next_request(self, client, tenant_admin_headers, member):
        response = client.patch(
            f"/api/user-tenant/users/{member.id}/toggle-active", headers=tenant_admin_headers
        )

        assert response.status_code == 200
        assert response.json()["is_active"] is False
        me = client.get("/api/auth/me", headers=headers_for(member))
        assert me.status_code == 403

    def test_disabled_admin_is_blocked(self, client, db_session, tenant_admin, tenant_admin_headers):
        tenant_admin.is_active = False
        db_session.commit()

        response = client.get("/api/user-tenant/users", headers=tenant_admin_headers)

        assert response.status_code == 403
        assert response.json()["kind"] == "account_disabled"


class TestOversizedIds:
    def test_huge_user_id_looks_like_missing_user(self, client, tenant_admin_headers):
        huge = client.get(f"/api/user-tenant/users/{10**20}", headers=tenant_admin_headers)
        missing = client.get("/api/user-tenant/users/99999", headers=tenant_admin_headers)

        assert huge.status_code == 404
        assert huge.json() == missing.json()

    def test_huge_role_id_on_create(self, client, tenant_admin_headers):
        response = client.post(
            "/api/user-tenant/users",
            headers=tenant_admin_headers,
            json={"email": "new@acme.io", "password": "newbie-pass", "role_ids": [10**20]},
        )
        assert response.status_code == 422

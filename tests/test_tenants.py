from app.models.permission import Permission, UserPermission
from app.models.role import Role, UserRole, RolePermission
from app.models.tenant import Tenant
from app.models.user import User


class TestCreateTenant:
    """Tests for POST /api/tenants"""

    def test_create_tenant(self, client, super_admin_headers):
        response = client.post(
            "/api/tenants",
            headers=super_admin_headers,
            json={"name": "Initech", "slug": "initech", "document": "33.333.333/0001-33"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Initech"
        assert data["slug"] == "initech"
        assert data["is_active"] is True
        assert "created_at" in data
        assert "updated_at" in data

    def test_duplicate_slug(self, client, super_admin_headers, tenant_a):
        response = client.post(
            "/api/tenants", headers=super_admin_headers, json={"name": "Other", "slug": "acme"}
        )

        assert response.status_code == 409
        assert response.json()["kind"] == "conflict_slug"

    def test_duplicate_document(self, client, super_admin_headers, tenant_a):
        response = client.post(
            "/api/tenants",
            headers=super_admin_headers,
            json={"name": "Other", "slug": "other", "document": tenant_a.document},
        )

        assert response.status_code == 409
        assert response.json()["kind"] == "conflict_document"

    def test_invalid_slug(self, client, super_admin_headers):
        response = client.post(
            "/api/tenants", headers=super_admin_headers, json={"name": "Bad", "slug": "Not A Slug"}
        )
        assert response.status_code == 422

    def test_requires_super_admin(self, client, tenant_admin_headers):
        response = client.post(
            "/api/tenants", headers=tenant_admin_headers, json={"name": "X", "slug": "x"}
        )
        assert response.status_code == 403

    def test_requires_auth(self, client):
        response = client.post("/api/tenants", json={"name": "X", "slug": "x"})
        assert response.status_code == 401


class TestListTenants:
    def test_list_newest_first(self, client, super_admin_headers, tenant_a, tenant_b):
        response = client.get("/api/tenants", headers=super_admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert [t["slug"] for t in data["items"]] == ["globex", "acme"]
        assert data["meta"]["totalItems"] == 2

    def test_active_only(self, client, db_session, super_admin_headers, tenant_a, tenant_b):
        tenant_b.is_active = False
        db_session.commit()

        data = client.get("/api/tenants/active", headers=super_admin_headers).json()

        assert [t["slug"] for t in data["items"]] == ["acme"]
        assert data["meta"]["totalItems"] == 1


class TestGetTenant:
    def test_get_tenant(self, client, super_admin_headers, tenant_a):
        response = client.get(f"/api/tenants/{tenant_a.id}", headers=super_admin_headers)

        assert response.status_code == 200
        assert response.json()["slug"] == "acme"

    def test_get_missing_tenant(self, client, super_admin_headers):
        response = client.get("/api/tenants/99999", headers=super_admin_headers)

        assert response.status_code == 404
        assert response.json()["kind"] == "resource_not_found"


class TestUpdateTenant:
    def test_update_name(self, client, super_admin_headers, tenant_a):
        response = client.patch(
            f"/api/tenants/{tenant_a.id}", headers=super_admin_headers, json={"name": "Acme Inc"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Acme Inc"
        assert data["slug"] == "acme"

    def test_keep_own_slug_and_document(self, client, super_admin_headers, tenant_a):
        response = client.patch(
            f"/api/tenants/{tenant_a.id}",
            headers=super_admin_headers,
            json={"slug": "acme", "document": tenant_a.document},
        )
        assert response.status_code == 200

    def test_take_other_tenants_slug(self, client, super_admin_headers, tenant_a, tenant_b):
        response = client.patch(
            f"/api/tenants/{tenant_a.id}", headers=super_admin_headers, json={"slug": "globex"}
        )

        assert response.status_code == 409
        assert response.json()["kind"] == "conflict_slug"

    def test_take_other_tenants_document(self, client, super_admin_headers, tenant_a, tenant_b):
        response = client.patch(
            f"/api/tenants/{tenant_a.id}",
            headers=super_admin_headers,
            json={"document": tenant_b.document},
        )

        assert response.status_code == 409
        assert response.json()["kind"] == "conflict_document"


class TestToggleTenant:
    def test_toggle_twice(self, client, super_admin_headers, tenant_a):
        url = f"/api/tenants/{tenant_a.id}/toggle-active"

        first = client.patch(url, headers=super_admin_headers)
        second = client.patch(url, headers=super_admin_headers)

        assert first.json()["is_active"] is False
        assert second.json()["is_active"] is True

    def test_members_keep_their_flag(self, client, db_session, super_admin_headers, tenant_a, member):
        client.patch(f"/api/tenants/{tenant_a.id}/toggle-active", headers=super_admin_headers)

        user = db_session.query(User).filter(User.id == member.id).first()
        assert user.is_active is True


class TestDeleteTenant:
    def test_delete_cascades(
        self, client, db_session, super_admin_headers, tenant_a, tenant_b,
        tenant_admin, member, other_member, role_a, role_b, permissions,
    ):
        member.user_roles.append(UserRole(role=role_a))
        member.user_permissions.append(UserPermission(permission=permissions["delete_user"]))
        db_session.commit()
        tenant_a_id = tenant_a.id
        role_a_id = role_a.id

        response = client.delete(f"/api/tenants/{tenant_a_id}", headers=super_admin_headers)

        assert response.status_code == 204
        assert db_session.query(Tenant).filter(Tenant.id == tenant_a_id).count() == 0
        assert db_session.query(User).filter(User.tenant_id == tenant_a_id).count() == 0
        assert db_session.query(Role).filter(Role.tenant_id == tenant_a_id).count() == 0
        assert db_session.query(UserPermission).count() == 0
        assert db_session.query(RolePermission).filter(RolePermission.role_id == role_a_id).count() == 0
        assert db_session.query(UserRole).count() == 0

        # Other tenant and the global catalog are untouched
        assert db_session.query(User).filter(User.id == other_member.id).count() == 1
        assert db_session.query(Role).filter(Role.id == role_b.id).count() == 1
        assert db_session.query(Permission).count() == len(permissions)

    def test_delete_missing_tenant(self, client, super_admin_headers):
        response = client.delete("/api/tenants/99999", headers=super_admin_headers)
        assert response.status_code == 404


class TestClearDocument:
    def test_explicit_null_clears_document(self, client, super_admin_headers, tenant_a):
        response = client.patch(
            f"/api/tenants/{tenant_a.id}", headers=super_admin_headers, json={"document": None}
        )

        assert response.status_code == 200
        assert response.json()["document"] is None

    def test_omitted_document_is_kept(self, client, super_admin_headers, tenant_a):
        response = client.patch(
            f"/api/tenants/{tenant_a.id}", headers=super_admin_headers, json={"name": "Acme 2"}
        )

        assert response.json()["document"] == "11.111.111/0001-11"

    def test_null_name_is_ignored(self, client, super_admin_headers, tenant_a):
        response = client.patch(
            f"/api/tenants/{tenant_a.id}", headers=super_admin_headers, json={"name": None}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Acme Corp"

    def test_cleared_document_can_be_reused(self, client, super_admin_headers, tenant_a, tenant_b):
        document = tenant_a.document
        client.patch(f"/api/tenants/{tenant_a.id}", headers=super_admin_headers, json={"document": None})

        response = client.patch(
            f"/api/tenants/{tenant_b.id}", headers=super_admin_headers, json={"document": document}
        )

        assert response.status_code == 200
        assert response.json()["document"] == document

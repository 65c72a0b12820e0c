from app.models.role import Role, UserRole


class TestCreateRole:
    """Tests for POST /api/tenant-roles"""

    def test_create_role(self, client, tenant_a, tenant_admin_headers, permissions):
        response = client.post(
            "/api/tenant-roles",
            headers=tenant_admin_headers,
            json={
                "name": "Auditors",
                "description": "Read-only access",
                "permission_ids": [permissions["view_user"].id],
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["tenant_id"] == tenant_a.id
        assert [p["codename"] for p in data["permissions"]] == ["view_user"]

    def test_duplicate_name_in_tenant(self, client, tenant_admin_headers, role_a):
        response = client.post(
            "/api/tenant-roles", headers=tenant_admin_headers, json={"name": "Editors"}
        )

        assert response.status_code == 409
        assert response.json()["kind"] == "conflict_role_name"

    def test_same_name_in_other_tenant(self, client, tenant_admin_headers, role_b):
        response = client.post(
            "/api/tenant-roles", headers=tenant_admin_headers, json={"name": role_b.name}
        )
        assert response.status_code == 201

    def test_unknown_permission(self, client, db_session, tenant_admin_headers, permissions):
        response = client.post(
            "/api/tenant-roles",
            headers=tenant_admin_headers,
            json={"name": "Broken", "permission_ids": [99999]},
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "unknown_permission"
        assert db_session.query(Role).filter(Role.name == "Broken").count() == 0

    def test_member_cannot_create(self, client, member_headers):
        response = client.post("/api/tenant-roles", headers=member_headers, json={"name": "X"})
        assert response.status_code == 403


class TestRoleIsolation:
    def test_list_only_own_roles(self, client, tenant_admin_headers, role_a, role_b):
        data = client.get("/api/tenant-roles", headers=tenant_admin_headers).json()

        assert [r["name"] for r in data["items"]] == ["Editors"]
        assert data["meta"]["totalItems"] == 1

    def test_foreign_role_looks_missing(self, client, tenant_admin_headers, role_b):
        foreign = client.get(f"/api/tenant-roles/{role_b.id}", headers=tenant_admin_headers)
        missing = client.get("/api/tenant-roles/99999", headers=tenant_admin_headers)

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json() == {
            "detail": "Role not found",
            "kind": "resource_not_found",
        }

    def test_cannot_delete_foreign_role(self, client, db_session, tenant_admin_headers, role_b):
        response = client.delete(f"/api/tenant-roles/{role_b.id}", headers=tenant_admin_headers)

        assert response.status_code == 404
        assert db_session.query(Role).filter(Role.id == role_b.id).count() == 1


class TestManageRole:
    def test_get_role(self, client, tenant_admin_headers, role_a):
        response = client.get(f"/api/tenant-roles/{role_a.id}", headers=tenant_admin_headers)

        assert response.status_code == 200
        assert {p["codename"] for p in response.json()["permissions"]} == {"add_user", "view_user"}

    def test_rename_role(self, client, tenant_admin_headers, role_a):
        response = client.patch(
            f"/api/tenant-roles/{role_a.id}", headers=tenant_admin_headers, json={"name": "Writers"}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Writers"

    def test_rename_to_existing_name(self, client, db_session, tenant_a, tenant_admin_headers, role_a):
        db_session.add(Role(name="Readers", tenant_id=tenant_a.id))
        db_session.commit()

        response = client.patch(
            f"/api/tenant-roles/{role_a.id}", headers=tenant_admin_headers, json={"name": "Readers"}
        )
        assert response.status_code == 409

    def test_replace_permissions(self, client, tenant_admin_headers, role_a, permissions):
        response = client.put(
            f"/api/tenant-roles/{role_a.id}/permissions",
            headers=tenant_admin_headers,
            json={"permission_ids": [permissions["view_user"].id, permissions["delete_user"].id]},
        )

        assert response.status_code == 200
        assert {p["codename"] for p in response.json()["permissions"]} == {"view_user", "delete_user"}

    def test_clear_permissions(self, client, tenant_admin_headers, role_a):
        response = client.put(
            f"/api/tenant-roles/{role_a.id}/permissions",
            headers=tenant_admin_headers,
            json={"permission_ids": []},
        )

        assert response.status_code == 200
        assert response.json()["permissions"] == []

    def test_delete_role_detaches_users(
        self, client, db_session, tenant_admin_headers, member, role_a
    ):
        member.user_roles.append(UserRole(role=role_a))
        db_session.commit()
        role_id = role_a.id

        response = client.delete(f"/api/tenant-roles/{role_id}", headers=tenant_admin_headers)

        assert response.status_code == 204
        assert db_session.query(Role).filter(Role.id == role_id).count() == 0
        assert db_session.query(UserRole).filter(UserRole.role_id == role_id).count() == 0


class TestOversizedRoleIds:
    def test_huge_role_id_is_not_found(self, client, tenant_admin_headers):
        response = client.get(f"/api/tenant-roles/{10**20}", headers=tenant_admin_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Role not found"

    def test_huge_permission_id_in_body(self, client, tenant_admin_headers):
        response = client.post(
            "/api/tenant-roles",
            headers=tenant_admin_headers,
            json={"name": "Huge", "permission_ids": [10**20]},
        )
        assert response.status_code == 422

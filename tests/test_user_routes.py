from tests.conftest import OTHER_TENANT_ID, add_user


class TestUserPermissions:
    """Tests for GET /api/users/{id}/permissions"""

    def test_owner_views_user(self, client, owner_headers, regular_user):
        response = client.get(f"/api/users/{regular_user.id}/permissions", headers=owner_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["userRole"] == "user"
        assert "fleet_edit" in data["userPermissions"]
        assert data["hasCustomPermissions"] is False

    def test_admin_views_user(self, client, admin_headers, regular_user):
        response = client.get(f"/api/users/{regular_user.id}/permissions", headers=admin_headers)
        assert response.status_code == 200

    def test_manager_cannot_view_owner(self, client, manager_headers, owner_user):
        response = client.get(f"/api/users/{owner_user.id}/permissions", headers=manager_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Cannot view permissions for user with this role"

    def test_admin_cannot_view_admin(self, client, admin_headers, db_session):
        other_admin = add_user(db_session, "other-admin", "admin")

        response = client.get(f"/api/users/{other_admin.id}/permissions", headers=admin_headers)

        assert response.status_code == 403

    def test_requires_users_view(self, client, viewer_headers, regular_user):
        response = client.get(f"/api/users/{regular_user.id}/permissions", headers=viewer_headers)
        assert response.status_code == 403

    def test_missing_user(self, client, owner_headers):
        response = client.get("/api/users/9999/permissions", headers=owner_headers)
        assert response.status_code == 404

    def test_other_tenant_forbidden(self, client, owner_headers, db_session, other_tenant):
        stranger = add_user(db_session, "stranger", "user", tenant_id=OTHER_TENANT_ID)

        response = client.get(f"/api/users/{stranger.id}/permissions", headers=owner_headers)

        assert response.status_code == 403


class TestAssignRole:
    """Tests for PATCH /api/users/{id}/role"""

    def test_owner_promotes_user_to_admin(self, client, owner_headers, regular_user):
        response = client.patch(
            f"/api/users/{regular_user.id}/role", headers=owner_headers, json={"role": "admin"}
        )

        assert response.status_code == 200
        assert response.json()["organizationRole"] == "admin"

    def test_admin_cannot_assign_admin(self, client, admin_headers, viewer_user):
        response = client.patch(
            f"/api/users/{viewer_user.id}/role", headers=admin_headers, json={"role": "admin"}
        )
        assert response.status_code == 403

    def test_admin_assigns_user(self, client, admin_headers, viewer_user):
        response = client.patch(
            f"/api/users/{viewer_user.id}/role", headers=admin_headers, json={"role": "user"}
        )
        assert response.status_code == 200

    def test_owner_is_never_assignable(self, client, owner_headers, regular_user):
        response = client.patch(
            f"/api/users/{regular_user.id}/role", headers=owner_headers, json={"role": "owner"}
        )
        assert response.status_code == 403

    def test_owner_role_cannot_be_changed(self, client, admin_headers, owner_user):
        response = client.patch(
            f"/api/users/{owner_user.id}/role", headers=admin_headers, json={"role": "user"}
        )
        assert response.status_code == 403

    def test_cannot_change_own_role(self, client, admin_headers, admin_user):
        response = client.patch(
            f"/api/users/{admin_user.id}/role", headers=admin_headers, json={"role": "user"}
        )
        assert response.status_code == 403
        assert "your own role" in response.json()["detail"]

    def test_unknown_role(self, client, owner_headers, regular_user):
        response = client.patch(
            f"/api/users/{regular_user.id}/role", headers=owner_headers, json={"role": "ghost"}
        )
        assert response.status_code == 404

    def test_requires_users_edit(self, client, user_headers, viewer_user):
        response = client.patch(
            f"/api/users/{viewer_user.id}/role", headers=user_headers, json={"role": "user"}
        )
        assert response.status_code == 403


class TestUserPermissionOverride:
    """Tests for PUT/DELETE /api/users/{id}/permissions"""

    def test_personal_set_replaces_role_permissions(self, client, owner_headers, regular_user):
        response = client.put(
            f"/api/users/{regular_user.id}/permissions",
            headers=owner_headers,
            json={"blockPermissions": ["analytics_view"], "granularPermissions": ["geocoding_view"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["userPermissions"] == ["analytics_view", "geocoding_view", "reports_view"]
        assert data["userRole"] == "user"
        assert data["hasCustomPermissions"] is True

    def test_personal_set_applies_to_the_user(self, client, owner_headers, regular_user, user_headers):
        client.put(
            f"/api/users/{regular_user.id}/permissions",
            headers=owner_headers,
            json={"blockPermissions": ["fleet_view"], "granularPermissions": []},
        )

        data = client.get("/api/permissions/me", headers=user_headers).json()

        assert "fleet_view" in data["userPermissions"]
        assert "fleet_edit" not in data["userPermissions"]
        assert data["hasCustomPermissions"] is True

    def test_admin_block_expands_to_siblings(self, client, owner_headers, regular_user):
        response = client.put(
            f"/api/users/{regular_user.id}/permissions",
            headers=owner_headers,
            json={"blockPermissions": ["fleet_admin"]},
        )

        permissions = response.json()["userPermissions"]
        assert {"fleet_view", "fleet_delete", "trailers_history"} <= set(permissions)

    def test_reset_restores_role_permissions(self, client, owner_headers, regular_user):
        client.put(
            f"/api/users/{regular_user.id}/permissions",
            headers=owner_headers,
            json={"blockPermissions": []},
        )

        response = client.delete(f"/api/users/{regular_user.id}/permissions", headers=owner_headers)

        assert response.status_code == 200
        data = response.json()
        assert "fleet_edit" in data["userPermissions"]
        assert data["hasCustomPermissions"] is False

    def test_granular_in_block_list_rejected(self, client, owner_headers, regular_user):
        response = client.put(
            f"/api/users/{regular_user.id}/permissions",
            headers=owner_headers,
            json={"blockPermissions": ["trailers_view"]},
        )

        assert response.status_code == 400
        assert "trailers_view" in response.json()["detail"]

    def test_unknown_permission_rejected(self, client, owner_headers, regular_user):
        response = client.put(
            f"/api/users/{regular_user.id}/permissions",
            headers=owner_headers,
            json={"granularPermissions": ["trailers_fly"]},
        )
        assert response.status_code == 400

    def test_requires_users_edit(self, client, user_headers, viewer_user):
        response = client.put(
            f"/api/users/{viewer_user.id}/permissions",
            headers=user_headers,
            json={"blockPermissions": ["fleet_view"]},
        )
        assert response.status_code == 403

    def test_outside_hierarchy_forbidden(self, client, admin_headers, owner_user):
        response = client.put(
            f"/api/users/{owner_user.id}/permissions",
            headers=admin_headers,
            json={"blockPermissions": []},
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Cannot modify permissions for user with this role"

    def test_other_tenant_forbidden(self, client, owner_headers, db_session, other_tenant):
        stranger = add_user(db_session, "stranger", "user", tenant_id=OTHER_TENANT_ID)

        response = client.put(
            f"/api/users/{stranger.id}/permissions",
            headers=owner_headers,
            json={"blockPermissions": []},
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Cannot modify user from different tenant"

    def test_missing_user(self, client, owner_headers):
        response = client.delete("/api/users/9999/permissions", headers=owner_headers)
        assert response.status_code == 404

class TestPermissionStructure:
    """Tests for GET /api/permissions/structure"""

    def test_structure_shape(self, client, manager_headers):
        response = client.get("/api/permissions/structure", headers=manager_headers)

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {
            "permissionStructure",
            "roleTemplates",
            "blockPermissions",
            "granularPermissions",
        }
        fleet = data["permissionStructure"]["fleet"]
        assert fleet["name"] == "Fleet Management"
        assert fleet["blocks"][0] == "fleet_view"
        assert fleet["granular"]["trailers"]["name"] == "Trailers"
        assert data["permissionStructure"]["utilities"]["blocks"] == []
        assert data["roleTemplates"]["viewer"]["blockPermissions"] == ["fleet_view", "analytics_view"]
        assert data["blockPermissions"]["ORG_ADMIN"] == "org_admin"
        assert data["granularPermissions"]["TRAILERS_VIEW"] == "trailers_view"

    def test_requires_users_view(self, client, viewer_headers):
        response = client.get("/api/permissions/structure", headers=viewer_headers)
        assert response.status_code == 403


class TestMyPermissions:
    """Tests for GET /api/permissions/me"""

    def test_admin_permissions(self, client, admin_headers):
        response = client.get("/api/permissions/me", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["userRole"] == "admin"
        assert data["assignableRoles"] == ["user"]
        assert "fleet_admin" in data["userPermissions"]

    def test_owner_assignable_roles(self, client, owner_headers):
        data = client.get("/api/permissions/me", headers=owner_headers).json()
        assert data["assignableRoles"] == ["admin", "user"]

    def test_viewer_has_no_assignable_roles(self, client, viewer_headers):
        data = client.get("/api/permissions/me", headers=viewer_headers).json()
        assert data["assignableRoles"] == []
        assert "fleet_edit" not in data["userPermissions"]


class TestTogglePreview:
    """Tests for POST /api/permissions/toggle"""

    def test_enable_fleet_view(self, client, owner_headers):
        response = client.post(
            "/api/permissions/toggle",
            headers=owner_headers,
            json={"permission": "fleet_view", "current": []},
        )

        assert response.status_code == 200
        assert response.json()["permissions"] == [
            "fleet_view",
            "locations_view",
            "maintenance_view",
            "notes_view",
            "trailers_view",
        ]

    def test_disable_fleet_view(self, client, owner_headers):
        current = ["fleet_view", "trailers_view", "locations_view", "maintenance_view", "notes_view"]
        response = client.post(
            "/api/permissions/toggle",
            headers=owner_headers,
            json={"permission": "fleet_view", "current": current},
        )
        assert response.json()["permissions"] == []

    def test_unknown_permission(self, client, owner_headers):
        response = client.post(
            "/api/permissions/toggle",
            headers=owner_headers,
            json={"permission": "fleet_fly", "current": []},
        )
        assert response.status_code == 400

    def test_unknown_permission_in_current_set(self, client, owner_headers):
        response = client.post(
            "/api/permissions/toggle",
            headers=owner_headers,
            json={"permission": "fleet_view", "current": ["bogus"]},
        )
        assert response.status_code == 400

    def test_requires_role_management(self, client, user_headers):
        response = client.post(
            "/api/permissions/toggle",
            headers=user_headers,
            json={"permission": "fleet_view", "current": []},
        )
        assert response.status_code == 403

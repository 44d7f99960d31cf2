import pytest
from fleet_rbac.core.cascade import apply_toggles, toggle
from fleet_rbac.core.exceptions import InvalidPermissionException
from fleet_rbac.core.permission_catalog import DEFAULT_CATALOG
from fleet_rbac.core.role_templates import DEFAULT_TEMPLATE_STORE

FLEET_VIEW_SET = {"fleet_view", "trailers_view", "locations_view", "maintenance_view", "notes_view"}


class TestEnable:
    def test_enabling_fleet_view_on_empty_set(self):
        assert toggle("fleet_view", set()) == FLEET_VIEW_SET

    def test_enabling_keeps_existing_permissions(self):
        result = toggle("fleet_view", {"reports_view"})
        assert result == FLEET_VIEW_SET | {"reports_view"}

    def test_enabling_granular_adds_only_itself(self):
        assert toggle("trailers_view", set()) == {"trailers_view"}

    def test_enabling_admin_adds_all_category_granulars(self):
        result = toggle("analytics_admin", set())
        assert result == {"analytics_admin", "reports_view", "reports_export", "reports_advanced"}

    def test_input_is_not_mutated(self):
        current = {"reports_view"}
        toggle("fleet_view", current)
        assert current == {"reports_view"}


class TestDisable:
    def test_disabling_fleet_view_restores_empty_set(self):
        assert toggle("fleet_view", FLEET_VIEW_SET) == frozenset()

    def test_disabling_fleet_admin_clears_all_fleet_granulars(self):
        enabled = toggle("fleet_admin", set())
        assert toggle("fleet_admin", enabled) == frozenset()

    def test_disabling_view_keeps_granulars_still_implied_by_admin(self):
        current = apply_toggles(["fleet_admin", "fleet_view"])
        result = toggle("fleet_view", current)
        assert "fleet_view" not in result
        assert {"trailers_view", "locations_view", "notes_view"} <= result

    def test_disabling_export_keeps_reports_view_for_analytics_view(self):
        current = apply_toggles(["analytics_view", "analytics_export"])
        result = toggle("analytics_export", current)
        assert result == {"analytics_view", "reports_view"}

    def test_disabling_granular_removes_only_itself(self):
        assert toggle("trailers_view", FLEET_VIEW_SET) == FLEET_VIEW_SET - {"trailers_view"}

    def test_disabling_block_leaves_other_categories_alone(self):
        current = FLEET_VIEW_SET | {"analytics_view", "reports_view"}
        assert toggle("fleet_view", current) == {"analytics_view", "reports_view"}


class TestRoundTrip:
    @pytest.mark.parametrize("role_name", [t.name for t in DEFAULT_TEMPLATE_STORE.list()])
    @pytest.mark.parametrize("block", [p.id for p in DEFAULT_CATALOG.block_permissions()])
    def test_double_toggle_restores_template_set(self, role_name, block):
        permissions = DEFAULT_TEMPLATE_STORE.permissions_for(role_name)
        assert toggle(block, toggle(block, permissions)) == permissions

    def test_double_toggle_on_set_built_by_toggles(self):
        permissions = apply_toggles(["org_view", "org_edit", "geocoding_view"])
        assert toggle("org_admin", toggle("org_admin", permissions)) == permissions


class TestInvalidPermission:
    def test_unknown_identifier_is_rejected(self):
        current = frozenset({"fleet_view"})
        with pytest.raises(InvalidPermissionException) as exc_info:
            toggle("fleet_teleport", current)
        assert exc_info.value.identifiers == ["fleet_teleport"]
        assert current == {"fleet_view"}

    def test_apply_toggles_stops_on_unknown(self):
        with pytest.raises(InvalidPermissionException):
            apply_toggles(["fleet_view", "bogus"])

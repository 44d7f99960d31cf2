from fleet_rbac.models.role_permission_override import RolePermissionOverride
from fleet_rbac.repositories.role_override_repository import RoleOverrideRepository
from tests.conftest import TENANT_ID


class TestRoleOverrideUpsert:
    def test_creates_then_replaces(self, db_session, tenant):
        repo = RoleOverrideRepository(db_session)

        repo.upsert("viewer", TENANT_ID, ["fleet_view"])
        override = repo.upsert("viewer", TENANT_ID, ["analytics_view"])

        assert override.permissions == ["analytics_view"]
        assert db_session.query(RolePermissionOverride).count() == 1

    def test_lost_insert_race_overwrites_winner(self, db_session, tenant, monkeypatch):
        """A writer whose lookup ran before another writer's commit still lands its update"""
        RoleOverrideRepository(db_session).upsert("viewer", TENANT_ID, ["fleet_view"])

        real_get = RoleOverrideRepository.get
        calls = []

        def get_missing_first_time(self, role_name, tenant_id):
            calls.append(role_name)
            if len(calls) == 1:
                return None
            return real_get(self, role_name, tenant_id)

        monkeypatch.setattr(RoleOverrideRepository, "get", get_missing_first_time)

        override = RoleOverrideRepository(db_session).upsert(
            "viewer", TENANT_ID, ["analytics_view", "reports_view"]
        )

        assert len(calls) == 2
        assert override.permissions == ["analytics_view", "reports_view"]
        assert db_session.query(RolePermissionOverride).count() == 1

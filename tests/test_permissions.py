"""Role permission table lookups."""

from stockroom.core.permissions import get_user_permissions, has_permission, role_name
from stockroom.models.user import User


class TestRolePermissions:
    def test_staff_can_sell_but_not_adjust(self, staff_user):
        assert role_name(staff_user) == "Staff"
        assert has_permission(staff_user, "sales", "create") is True
        assert has_permission(staff_user, "stock", "adjust") is False

    def test_user_without_role_has_no_permissions(self):
        user = User(email="orphan@test.com", is_active=True)

        assert role_name(user) == ""
        assert has_permission(user, "sales", "view") is False
        assert get_user_permissions(user) == {}

    def test_inactive_user_has_no_permissions(self, db, admin_user):
        admin_user.is_active = False
        db.commit()

        assert has_permission(admin_user, "catalog", "view") is False
        assert get_user_permissions(admin_user) == {}

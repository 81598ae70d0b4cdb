"""
Tests for engine.permissions.Permissions.
"""
import pytest

from engine.building_scope import BuildingOption
from engine.permissions import Permissions
from models.entities import BuildingRole, User


def test_admin_is_board_everywhere(admin_user):
    perms = Permissions(admin_user)
    assert perms.is_super_admin
    assert perms.is_board_in_building("B1")
    assert perms.is_board_in_building("any-other-building")
    assert perms.can_manage_users("B9")
    assert perms.board_buildings() == []


@pytest.mark.parametrize("role", ["SuperAdmin", "ADMIN", "superadmin"])
def test_admin_role_case_insensitive(role):
    perms = Permissions(User(id="u", email="x@y.com", role=role))
    assert perms.is_super_admin
    assert perms.can_manage_buildings


def test_board_member_scoped_to_membership(board_user):
    perms = Permissions(board_user, "B1", [BuildingOption("B1", "Torre Norte")])
    assert perms.is_board_member
    assert perms.is_board_in_building("B1")
    assert not perms.is_board_in_building("B2")
    assert not perms.is_board_in_building("B3")
    assert perms.can_approve_payments()
    assert not perms.can_approve_payments("B2")


def test_board_check_uses_selected_building(board_user):
    assert Permissions(board_user, "B1").is_board_in_building()
    assert not Permissions(board_user, "B2").is_board_in_building()


def test_no_building_falls_back_to_role(board_user, resident_user):
    assert Permissions(board_user).is_board_in_building()
    assert not Permissions(resident_user).is_board_in_building()


def test_building_roles_take_precedence(board_user):
    board_user.building_roles = [BuildingRole(building_id="B2", role="BOARD")]
    perms = Permissions(board_user)
    assert perms.is_board_in_building("B2")
    assert not perms.is_board_in_building("B1")


def test_legacy_single_building():
    user = User(id="u", email="x@y.com", role="board", building_id="B7", building_name="Legacy Tower")
    perms = Permissions(user)
    assert perms.is_board_in_building("B7")
    assert not perms.is_board_in_building("B8")
    assert perms.building_id == "B7"
    assert perms.building_name == "Legacy Tower"


def test_resident_has_no_management_rights(resident_user):
    perms = Permissions(resident_user, "B1")
    assert perms.is_resident
    assert not perms.can_manage_building("B1")
    assert not perms.can_manage_building_users


def test_board_buildings_lists_available(board_user):
    perms = Permissions(board_user, "B1", [BuildingOption("B1", "Torre Norte")])
    assert perms.board_buildings() == ["B1"]


def test_building_name_from_available(board_user):
    perms = Permissions(board_user, "B1", [BuildingOption("B1", "Torre Norte")])
    assert perms.building_name == "Torre Norte"


def test_display_name_fallbacks(resident_user):
    assert Permissions(resident_user).display_name == "carla"
    assert Permissions(None).display_name == "User"
    assert Permissions(User(id="u", email="x@y.com", name="Xavier")).display_name == "Xavier"

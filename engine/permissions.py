"""
Capability flags derived from the user's role and building scope.
Advisory only: the backend enforces the real authorization.
"""
from typing import List, Optional

from config import settings
from engine.building_scope import BuildingOption, is_admin_role
from models.entities import User
from utils.helpers import display_name


class Permissions:

    def __init__(
        self,
        user: Optional[User],
        selected_building_id: Optional[str] = None,
        available_buildings: Optional[List[BuildingOption]] = None,
    ):
        self.user = user
        self.selected_building_id = selected_building_id
        self.available_buildings = available_buildings or []

    @classmethod
    def from_scope(cls, user: Optional[User], scope) -> "Permissions":
        return cls(user, scope.selected_building_id, scope.available_buildings)

    @property
    def role(self) -> str:
        return (self.user.role if self.user else "").lower()

    @property
    def is_super_admin(self) -> bool:
        return is_admin_role(self.role)

    @property
    def is_board_member(self) -> bool:
        return self.role == settings.BOARD_ROLE

    @property
    def is_resident(self) -> bool:
        return self.role == "resident"

    def board_buildings(self) -> List[str]:
        """Admins need no filtering, so they get an empty list"""
        if self.is_super_admin:
            return []
        return [b.id for b in self.available_buildings]

    def is_board_in_building(self, building_id: Optional[str] = None) -> bool:
        if self.is_super_admin:
            return True

        check_id = building_id or self.selected_building_id
        if not check_id:
            return self.is_board_member

        if self.user and self.user.building_roles:
            return any(
                br.building_id == check_id and (br.role or "").lower() == settings.BOARD_ROLE
                for br in self.user.building_roles
            )

        if self.user and self.user.units:
            return any(u.building_id == check_id and u.is_board for u in self.user.units)

        # Legacy: a single global building on the user record
        legacy_building_id = self.user.building_id if self.user else None
        return self.is_board_member and legacy_building_id == check_id

    def can_manage_building(self, building_id: Optional[str] = None) -> bool:
        return self.is_super_admin or self.is_board_in_building(building_id)

    def can_manage_users(self, building_id: Optional[str] = None) -> bool:
        return self.is_super_admin or self.is_board_in_building(building_id)

    def can_approve_payments(self, building_id: Optional[str] = None) -> bool:
        return self.is_super_admin or self.is_board_in_building(building_id)

    # Global flags kept for pages that are not building-aware

    @property
    def can_manage_buildings(self) -> bool:
        return self.is_super_admin

    @property
    def can_manage_all_users(self) -> bool:
        return self.is_super_admin

    @property
    def can_manage_building_users(self) -> bool:
        return self.is_super_admin or self.is_board_member

    @property
    def can_view_all_payments(self) -> bool:
        return self.is_super_admin

    @property
    def building_id(self) -> Optional[str]:
        if self.selected_building_id:
            return self.selected_building_id
        if self.is_super_admin or not self.user:
            return None
        return self.user.building_id

    @property
    def building_name(self) -> Optional[str]:
        building_id = self.building_id
        selected = next((b for b in self.available_buildings if b.id == building_id), None)
        if selected and selected.name:
            return selected.name
        if not self.is_super_admin and self.user:
            return self.user.building_name
        return None

    @property
    def display_name(self) -> str:
        if not self.user:
            return "User"
        return display_name(self.user.name, self.user.email)

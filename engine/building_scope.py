"""
Building scope: which buildings the signed-in user may switch between
"""
from dataclasses import dataclass
from typing import List, Optional

from config import settings
from models.entities import User
from services.buildings_service import BuildingsService
from services.errors import ApiError
from utils.concurrency import run_parallel
from utils.logging_config import logger


@dataclass
class BuildingOption:
    id: str
    name: Optional[str] = None


def is_admin_role(role: Optional[str]) -> bool:
    return (role or "").lower() in settings.ADMIN_ROLES


class BuildingScope:
    """
    Computes the available buildings for a user and tracks the selection.

    Admins get every building. Other users get the unique buildings where one
    of their unit memberships carries the "board" role.
    """

    def __init__(self, buildings_service: BuildingsService):
        self.buildings_service = buildings_service
        self.user: Optional[User] = None
        self.available_buildings: List[BuildingOption] = []
        self.selected_building_id: Optional[str] = None

    def load(self, user: Optional[User]) -> List[BuildingOption]:
        """Refetch available buildings for the user; never raises"""
        self.user = user
        try:
            buildings = self._fetch(user)
        except ApiError as e:
            logger.error(f"Failed to fetch buildings for context: {e}")
            buildings = []
        self.set_available(buildings)
        return self.available_buildings

    def _fetch(self, user: Optional[User]) -> List[BuildingOption]:
        if user is None:
            return []

        if is_admin_role(user.role):
            return [BuildingOption(id=b.id, name=b.name) for b in self.buildings_service.get_buildings()]

        board_buildings = {}
        for unit in user.units:
            if unit.is_board and unit.building_id and unit.building_id not in board_buildings:
                board_buildings[unit.building_id] = BuildingOption(id=unit.building_id, name=unit.building_name)

        options = list(board_buildings.values())
        return run_parallel(*[lambda b=b: self._enrich(b) for b in options])

    def _enrich(self, option: BuildingOption) -> BuildingOption:
        if option.name and option.name != settings.UNKNOWN_BUILDING_NAME:
            return option
        try:
            details = self.buildings_service.get_building_by_id(option.id)
            return BuildingOption(id=option.id, name=details.name)
        except ApiError as e:
            logger.warning(f"Could not load name for building {option.id}: {e}")
            return BuildingOption(id=option.id, name=option.name or settings.UNKNOWN_BUILDING_NAME)

    def set_available(self, buildings: List[BuildingOption]):
        self.available_buildings = list(buildings)
        self._reconcile_selection()

    def _reconcile_selection(self):
        ids = [b.id for b in self.available_buildings]
        if not ids:
            self.selected_building_id = None
            return

        if self.selected_building_id is None:
            primary = self.user.primary_unit if self.user else None
            primary_id = primary.building_id if primary else None
            self.selected_building_id = primary_id if primary_id in ids else ids[0]
        elif self.selected_building_id not in ids:
            # Stale selection falls back to the first available building
            self.selected_building_id = ids[0]

    def select(self, building_id: str) -> bool:
        """Select a building; ids outside the available set are ignored"""
        if not self.has_access(building_id):
            return False
        self.selected_building_id = building_id
        return True

    def has_access(self, building_id: str) -> bool:
        return any(b.id == building_id for b in self.available_buildings)

    @property
    def selected_building(self) -> Optional[BuildingOption]:
        return next((b for b in self.available_buildings if b.id == self.selected_building_id), None)

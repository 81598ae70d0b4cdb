"""
Users service
"""
from typing import List, Optional, Tuple

from models.entities import User, UserUnit
from services.api_client import ApiClient
from services.errors import ApiError, SessionExpiredError
from utils.logging_config import logger


def unit_assignment_payload(existing: List[UserUnit], unit_id: str, building_role: str = "resident") -> dict:
    """
    Body for assigning a new unit to a user.
    The first unit a user gets becomes the primary one.
    Raises ValueError when the unit is already assigned.
    """
    if any(u.unit_id == unit_id for u in existing):
        raise ValueError("This unit is already assigned to the user")
    return {
        "unit_id": unit_id,
        "building_role": building_role,
        "is_primary": not existing,
    }


class UsersService:

    def __init__(self, client: ApiClient):
        self.client = client

    def get_users(
        self,
        building_id: Optional[str] = None,
        unit_id: Optional[str] = None,
        role: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[User]:
        params = {"building_id": building_id, "unit_id": unit_id, "role": role, "status": status}
        return [User.from_dict(u) for u in self.client.get("/users", params=params) or []]

    def get_user_by_id(self, user_id: str) -> User:
        return User.from_dict(self.client.get(f"/users/{user_id}") or {})

    def create_user(self, payload: dict) -> User:
        return User.from_dict(self.client.post("/users", json=payload) or {})

    def create_user_with_unit(self, payload: dict, unit_id: Optional[str]) -> Tuple[User, Optional[ApiError]]:
        """
        Create a user, then assign its first unit.
        Creation errors propagate; an assignment error is returned with the
        created user so the caller can report it on its own.
        """
        user = self.create_user(payload)
        if not unit_id:
            return user, None
        try:
            self.assign_or_update_unit(user.id, unit_assignment_payload([], unit_id))
        except SessionExpiredError:
            raise
        except ApiError as e:
            logger.error(f"User {user.id} created but unit {unit_id} was not assigned: {e}")
            return user, e
        return user, None

    def update_user(self, user_id: str, updates: dict) -> User:
        return User.from_dict(self.client.patch(f"/users/{user_id}", json=updates) or {})

    def approve_user(self, user_id: str) -> User:
        return self.update_user(user_id, {"status": "active"})

    def reject_user(self, user_id: str) -> User:
        return self.update_user(user_id, {"status": "rejected"})

    def delete_user(self, user_id: str):
        self.client.delete(f"/users/{user_id}")

    # Unit memberships

    def get_user_units(self, user_id: str) -> List[UserUnit]:
        return [UserUnit.from_dict(u) for u in self.client.get(f"/users/{user_id}/units") or []]

    def assign_or_update_unit(self, user_id: str, payload: dict) -> dict:
        """Creates the assignment, or updates building_role when it already exists"""
        return self.client.post(f"/users/{user_id}/units", json=payload) or {}

    def remove_unit(self, user_id: str, unit_id: str):
        self.client.delete(f"/users/{user_id}/units/{unit_id}")

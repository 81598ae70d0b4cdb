"""
Units service
"""
from typing import List

from models.entities import Unit
from services.api_client import ApiClient


class UnitsService:

    def __init__(self, client: ApiClient):
        self.client = client

    def get_units(self, building_id: str) -> List[Unit]:
        return [Unit.from_dict(u) for u in self.client.get(f"/buildings/{building_id}/units") or []]

    def get_unit_by_id(self, unit_id: str) -> Unit:
        return Unit.from_dict(self.client.get(f"/units/{unit_id}") or {})

    def create_unit(self, building_id: str, payload: dict) -> Unit:
        return Unit.from_dict(self.client.post(f"/buildings/{building_id}/units", json=payload) or {})

    def batch_create_units(self, building_id: str, payload: dict) -> List[Unit]:
        """Backend combines floors x labels into unit names"""
        created = self.client.post(f"/buildings/{building_id}/units/batch", json=payload)
        if not isinstance(created, list):
            return []
        return [Unit.from_dict(u) for u in created]

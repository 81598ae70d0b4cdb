"""
Buildings service
"""
from typing import List

from models.entities import Building
from services.api_client import ApiClient


class BuildingsService:

    def __init__(self, client: ApiClient):
        self.client = client

    def get_buildings(self) -> List[Building]:
        return [Building.from_dict(b) for b in self.client.get("/buildings") or []]

    def get_building_by_id(self, building_id: str) -> Building:
        return Building.from_dict(self.client.get(f"/buildings/{building_id}") or {})

    def create_building(self, payload: dict) -> Building:
        return Building.from_dict(self.client.post("/buildings", json=payload) or {})

    def update_building(self, building_id: str, updates: dict) -> Building:
        return Building.from_dict(self.client.put(f"/buildings/{building_id}", json=updates) or {})

    def delete_building(self, building_id: str):
        self.client.delete(f"/buildings/{building_id}")

"""
Pytest fixtures for the condominium admin panel test suite.
"""
import pytest
from unittest.mock import MagicMock

from models.entities import Building, User, UserUnit
from storage.token_store import TokenStore


@pytest.fixture
def token_store(tmp_path):
    """Token store writing to a temporary session file."""
    return TokenStore(str(tmp_path / "session.json"))


@pytest.fixture
def admin_user():
    return User(id="u-admin", email="admin@example.com", name="Ana Admin", role="admin", status="active")


@pytest.fixture
def board_user():
    """Board member of building B1 (primary) and plain resident of B2."""
    return User(
        id="u-board",
        email="board@example.com",
        name="Bruno Board",
        role="board",
        status="active",
        units=[
            UserUnit(unit_id="unit-1", building_id="B1", building_name="Torre Norte",
                     building_role="board", is_primary=True),
            UserUnit(unit_id="unit-2", building_id="B2", building_name="Torre Sur",
                     building_role="resident"),
        ],
    )


@pytest.fixture
def resident_user():
    return User(id="u-res", email="carla@example.com", name="", role="resident", status="active")


@pytest.fixture
def buildings_service():
    """Fake buildings service with three buildings."""
    service = MagicMock()
    buildings = {
        "B1": Building(id="B1", name="Torre Norte"),
        "B2": Building(id="B2", name="Torre Sur"),
        "B3": Building(id="B3", name="Residencias Este"),
    }
    service.get_buildings.return_value = list(buildings.values())
    service.get_building_by_id.side_effect = lambda building_id: buildings[building_id]
    return service


@pytest.fixture
def make_response():
    """Factory for minimal requests.Response stand-ins."""
    def _make(status_code=200, body=None, content=b"{}"):
        response = MagicMock()
        response.status_code = status_code
        response.content = content
        if isinstance(body, Exception):
            response.json.side_effect = body
        else:
            response.json.return_value = body
        return response
    return _make


@pytest.fixture
def http_session():
    """Mocked requests.Session; set .request.return_value per test."""
    session = MagicMock()
    session.headers = {}
    return session

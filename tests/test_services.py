"""
Tests for the service wrappers; the API client is mocked.
"""
import pytest
from unittest.mock import MagicMock

from models.entities import UserUnit
from services.errors import ApiError, SessionExpiredError
from services.billing_service import BillingService
from services.buildings_service import BuildingsService
from services.payments_service import ADMIN_PAYMENTS, PaymentsService
from services.units_service import UnitsService
from services.users_service import UsersService, unit_assignment_payload


@pytest.fixture
def client():
    return MagicMock()


class TestBuildingsService:
    def test_get_buildings(self, client):
        client.get.return_value = [{"id": "B1", "name": "Torre Norte", "monthly_fee": "45.00"}]
        buildings = BuildingsService(client).get_buildings()
        assert buildings[0].name == "Torre Norte"
        assert buildings[0].monthly_fee == 45
        client.get.assert_called_once_with("/buildings")

    def test_update_uses_put(self, client):
        client.put.return_value = {"id": "B1", "name": "Renamed"}
        BuildingsService(client).update_building("B1", {"name": "Renamed"})
        client.put.assert_called_once_with("/buildings/B1", json={"name": "Renamed"})


class TestUnitsService:
    def test_batch_create(self, client):
        client.post.return_value = [{"id": "u1", "name": "1-A", "floor": "1"}]
        payload = {"floors": ["1"], "unitsPerFloor": ["A"], "aliquot": 0}
        units = UnitsService(client).batch_create_units("B1", payload)
        assert [u.name for u in units] == ["1-A"]
        client.post.assert_called_once_with("/buildings/B1/units/batch", json=payload)

    def test_batch_create_non_list_body(self, client):
        client.post.return_value = {"count": 4}
        assert UnitsService(client).batch_create_units("B1", {}) == []


class TestUsersService:
    def test_get_users_filters(self, client):
        client.get.return_value = []
        UsersService(client).get_users(building_id="B1", status="pending")
        client.get.assert_called_once_with(
            "/users", params={"building_id": "B1", "unit_id": None, "role": None, "status": "pending"}
        )

    def test_approve_and_reject(self, client):
        client.patch.return_value = {"id": "1", "email": "a@b.com"}
        service = UsersService(client)
        service.approve_user("1")
        service.reject_user("1")
        assert client.patch.call_args_list[0].kwargs["json"] == {"status": "active"}
        assert client.patch.call_args_list[1].kwargs["json"] == {"status": "rejected"}

    def test_create_with_unit_reports_assignment_failure(self, client):
        client.post.side_effect = [{"id": "7", "email": "maria@example.com"}, ApiError("Unit not found", status_code=404)]
        user, assign_error = UsersService(client).create_user_with_unit({"email": "maria@example.com"}, "u1")
        assert user.id == "7"
        assert assign_error.status_code == 404
        assert client.post.call_args_list[1].args == ("/users/7/units",)
        assert client.post.call_args_list[1].kwargs["json"]["is_primary"] is True

    def test_create_without_unit_skips_assignment(self, client):
        client.post.return_value = {"id": "7", "email": "maria@example.com"}
        user, assign_error = UsersService(client).create_user_with_unit({"email": "maria@example.com"}, None)
        assert assign_error is None
        client.post.assert_called_once()

    def test_create_failure_propagates(self, client):
        client.post.side_effect = ApiError("Email already registered", status_code=409)
        with pytest.raises(ApiError):
            UsersService(client).create_user_with_unit({"email": "maria@example.com"}, "u1")

    def test_assignment_session_expiry_propagates(self, client):
        client.post.side_effect = [{"id": "7"}, SessionExpiredError("Session expired", status_code=401)]
        with pytest.raises(SessionExpiredError):
            UsersService(client).create_user_with_unit({"email": "maria@example.com"}, "u1")

    def test_remove_unit(self, client):
        UsersService(client).remove_unit("1", "u9")
        client.delete.assert_called_once_with("/users/1/units/u9")

    def test_first_unit_is_primary(self):
        assert unit_assignment_payload([], "u1", "board") == {
            "unit_id": "u1", "building_role": "board", "is_primary": True,
        }

    def test_next_unit_not_primary(self):
        payload = unit_assignment_payload([UserUnit(unit_id="u1", is_primary=True)], "u2")
        assert payload["is_primary"] is False

    def test_already_assigned_rejected(self):
        with pytest.raises(ValueError):
            unit_assignment_payload([UserUnit(unit_id="u1")], "u1")


class TestBillingService:
    def test_unit_balance_fills_unit_id(self, client):
        client.get.return_value = {"totalDebt": 20}
        balance = BillingService(client).get_unit_balance("u1")
        assert balance.unit_id == "u1"
        assert balance.total_debt == 20

    def test_get_invoices_params(self, client):
        client.get.return_value = [{"id": "i1", "amount": 10, "status": "PENDING"}]
        invoices = BillingService(client).get_invoices(building_id="B1", year=2026, month=2)
        assert invoices[0].id == "i1"
        _, kwargs = client.get.call_args
        assert kwargs["params"]["year"] == 2026
        assert kwargs["params"]["month"] == 2


class TestPaymentsService:
    def test_create_payment_multipart(self, client):
        client.post.return_value = {"id": "p1", "amount": 10}
        proof = ("proof.png", b"bytes", "image/png")
        PaymentsService(client).create_payment({"amount": 10.0, "reference": None, "unit_id": "u1"}, proof)
        client.post.assert_called_once_with(
            ADMIN_PAYMENTS, data={"amount": "10.0", "unit_id": "u1"}, files={"file": proof}
        )

    def test_create_payment_without_proof(self, client):
        client.post.return_value = {"id": "p1"}
        PaymentsService(client).create_payment({"amount": 10})
        assert client.post.call_args.kwargs["files"] == {}

    def test_approve_subset_of_periods(self, client):
        client.patch.return_value = {"id": "p1", "status": "APPROVED"}
        PaymentsService(client).approve_payment("p1", approved_periods=["2026-01"])
        client.patch.assert_called_once_with(
            f"{ADMIN_PAYMENTS}/p1", json={"status": "APPROVED", "approved_periods": ["2026-01"]}
        )

    def test_approve_all_sends_no_periods(self, client):
        client.patch.return_value = {"id": "p1", "status": "APPROVED"}
        PaymentsService(client).approve_payment("p1", notes="ok")
        client.patch.assert_called_once_with(f"{ADMIN_PAYMENTS}/p1", json={"status": "APPROVED", "notes": "ok"})

    def test_reject(self, client):
        client.patch.return_value = {"id": "p1", "status": "REJECTED"}
        payment = PaymentsService(client).reject_payment("p1", "Unreadable proof")
        assert payment.status == "REJECTED"

"""
Tests for utils.helpers and models.entities parsing.
"""
from datetime import date

from models.entities import AuthResponse, Invoice, Payment, PaymentAllocation, UnitBalance, User
from utils.helpers import (
    build_period,
    display_name,
    format_building_role,
    format_currency,
    format_date,
    format_payment_method,
    format_percentage,
    format_period,
    is_overdue,
    to_float,
)


class TestFormatting:
    def test_currency(self):
        assert format_currency(1234.5) == "$1,234.50"
        assert format_currency(-20) == "-$20.00"

    def test_percentage(self):
        assert format_percentage(25) == "25.0%"

    def test_date(self):
        assert format_date("2026-02-15T10:30:00.000Z") == "Feb 15, 2026"
        assert format_date(None) == "--"
        assert format_date("not a date") == "Invalid date"

    def test_period(self):
        assert format_period("2026-02") == "February 2026"
        assert format_period("Q1") == "Q1"
        assert format_period(None) == "--"

    def test_labels(self):
        assert format_payment_method("PAGO_MOVIL") == "Pago Móvil"
        assert format_payment_method("CRYPTO") == "CRYPTO"
        assert "Admin Local" in format_building_role("admin-local")
        assert "Board" in format_building_role("BOARD")
        assert format_building_role("unknown") == format_building_role("resident")
        assert format_building_role(None) == format_building_role("resident")

    def test_display_name(self):
        assert display_name("Maria", "m@example.com") == "Maria"
        assert display_name("", "jose@example.com") == "jose"
        assert display_name(None, None) == "User"


class TestValues:
    def test_to_float(self):
        assert to_float("12.50") == 12.5
        assert to_float(None) == 0.0
        assert to_float("abc") == 0.0

    def test_build_period(self):
        assert build_period("2026-03") == "2026-03"
        assert build_period(None, 2026, 3) == "2026-03"
        assert build_period(None, None, None) is None

    def test_overdue(self):
        today = date(2026, 3, 1)
        assert is_overdue("2026-02-15", False, today)
        assert not is_overdue("2026-02-15", True, today)
        assert not is_overdue("2026-03-15", False, today)
        assert not is_overdue(None, False, today)


class TestEntities:
    def test_invoice_from_dict(self):
        invoice = Invoice.from_dict({
            "id": "inv-1", "amount": "100.00", "paid_amount": None, "status": "pending",
            "year": 2026, "month": 1, "unit": {"id": "u1", "name": "1-A"},
            "user": {"id": "usr", "name": "Maria"},
        })
        assert invoice.amount == 100
        assert invoice.paid_amount == 0
        assert invoice.status == "PENDING"
        assert invoice.period == "2026-01"
        assert invoice.unit_name == "1-A"
        assert invoice.outstanding == 100

    def test_user_building_roles_aliases(self):
        camel = User.from_dict({"id": "1", "email": "a@b.com", "buildingRoles": [{"building_id": "B1", "role": "board"}]})
        snake = User.from_dict({"id": "1", "email": "a@b.com", "building_roles": [{"building_id": "B1", "role": "board"}]})
        assert camel.building_roles == snake.building_roles

    def test_user_units_and_legacy_building(self):
        user = User.from_dict({
            "id": "1", "email": "a@b.com", "role": "board",
            "building": {"id": "B7", "name": "Legacy"},
            "units": [{"unit_id": "u1", "building_id": "B1", "building_role": "board", "is_primary": True}],
        })
        assert user.building_id == "B7"
        assert user.primary_unit.unit_id == "u1"
        assert user.units[0].is_board

    def test_allocation_from_invoice_row(self):
        allocation = PaymentAllocation.from_dict({"id": "inv-9", "amount": "30", "period": "2026-01"})
        assert allocation.invoice_id == "inv-9"
        assert allocation.allocated_amount == 30

    def test_payment_embedded_allocations(self):
        payment = Payment.from_dict({
            "id": "p1", "amount": "150",
            "allocations": [
                {"invoice_id": "i1", "allocated_amount": "100", "period": "2026-01"},
                {"invoice_id": "i2", "allocated_amount": "50", "period": "2026-02"},
            ],
        })
        assert [a.invoice_id for a in payment.allocations] == ["i1", "i2"]
        assert sum(a.allocated_amount for a in payment.allocations) == 150
        assert Payment.from_dict({"id": "p2"}).allocations == []

    def test_unit_balance_camel_case(self):
        assert UnitBalance.from_dict({"totalDebt": "75.5", "unitId": "u1"}).total_debt == 75.5

    def test_auth_response(self):
        response = AuthResponse.from_dict({
            "user": {"id": "1", "email": "a@b.com", "role": "admin"},
            "token": {"access_token": "tok", "refresh_token": "ref"},
        })
        assert response.access_token == "tok"
        assert response.refresh_token == "ref"
        assert response.user.role == "admin"

"""
Tests for models.schemas through utils.validations.validate_form.
"""
from datetime import date

from models.schemas import (
    AssignUnitForm,
    BatchUnitForm,
    BuildingForm,
    InvoiceForm,
    LoginForm,
    PaymentForm,
    UnitForm,
    UserCreateForm,
    UserEditForm,
)
from utils.validations import validate_form, validate_period, validate_year


class TestLoginForm:
    def test_valid(self):
        form, errors = validate_form(LoginForm, {"email": "admin@example.com", "password": "secret1"})
        assert errors == {}
        assert form.email == "admin@example.com"

    def test_invalid_email_and_short_password(self):
        form, errors = validate_form(LoginForm, {"email": "not-an-email", "password": "123"})
        assert form is None
        assert errors == {
            "email": "Invalid email address",
            "password": "Password must be at least 6 characters",
        }


class TestBuildingForm:
    def test_blank_optionals_become_none(self):
        form, errors = validate_form(BuildingForm, {
            "name": " Torre Norte ", "address": "Av. Principal", "rif": "", "total_units": None,
        })
        assert errors == {}
        assert form.name == "Torre Norte"
        assert form.rif is None

    def test_required_name(self):
        _, errors = validate_form(BuildingForm, {"name": "   ", "address": "Av. Principal"})
        assert errors["name"] == "Name is required"

    def test_non_positive_units_rejected(self):
        _, errors = validate_form(BuildingForm, {"name": "Torre", "address": "Av", "total_units": 0})
        assert errors["total_units"] == "Total units must be a positive whole number"


class TestUserForms:
    def test_create_requires_building(self):
        _, errors = validate_form(UserCreateForm, {
            "name": "Maria", "email": "maria@example.com", "password": "secret1", "building_id": "",
        })
        assert errors["building_id"] == "Building is required"

    def test_create_defaults(self):
        form, errors = validate_form(UserCreateForm, {
            "name": "Maria", "email": "maria@example.com", "password": "secret1",
            "building_id": "B1", "unit_id": "", "phone": "",
        })
        assert errors == {}
        assert form.role == "resident"
        assert form.status == "active"
        assert form.unit_id is None

    def test_create_rejects_unknown_role(self):
        _, errors = validate_form(UserCreateForm, {
            "name": "Maria", "email": "maria@example.com", "password": "secret1",
            "building_id": "B1", "role": "owner",
        })
        assert errors["role"] == "Select a valid role"

    def test_create_messages(self):
        _, errors = validate_form(UserCreateForm, {
            "name": "M", "email": "maria@", "password": "123", "building_id": "B1",
        })
        assert errors == {
            "name": "Name must be at least 2 characters",
            "email": "Invalid email address",
            "password": "Password must be at least 6 characters",
        }

    def test_edit_short_password(self):
        _, errors = validate_form(UserEditForm, {"name": "Maria", "email": "maria@example.com", "password": "abc"})
        assert errors["password"] == "Password must be at least 6 characters"

    def test_edit_password_optional(self):
        form, errors = validate_form(UserEditForm, {
            "name": "Maria", "email": "maria@example.com", "password": "", "role": "board", "status": "active",
        })
        assert errors == {}
        assert form.model_dump(exclude_none=True).get("password") is None


class TestUnitForms:
    def test_unit_requires_floor(self):
        _, errors = validate_form(UnitForm, {"name": "1-A", "floor": ""})
        assert errors["floor"] == "Floor is required"

    def test_negative_aliquot(self):
        _, errors = validate_form(UnitForm, {"name": "1-A", "floor": "1", "aliquot": -1})
        assert errors["aliquot"] == "Aliquot cannot be negative"

    def test_batch_preview(self):
        form, errors = validate_form(BatchUnitForm, {"floors_count": 3, "unit_labels": "A, B,,C ", "aliquot": 1.5})
        assert errors == {}
        assert form.preview_count == 9
        assert form.payload() == {"floors": ["1", "2", "3"], "unitsPerFloor": ["A", "B", "C"], "aliquot": 1.5}

    def test_batch_requires_labels(self):
        _, errors = validate_form(BatchUnitForm, {"floors_count": 2, "unit_labels": " , "})
        assert errors["unit_labels"] == "Enter at least one unit label"

    def test_batch_requires_floor(self):
        _, errors = validate_form(BatchUnitForm, {"floors_count": 0, "unit_labels": "A"})
        assert errors["floors_count"] == "At least one floor is required"


class TestBillingForms:
    def test_invoice_period_format(self):
        _, errors = validate_form(InvoiceForm, {
            "unit_id": "u1", "amount": 50, "period": "2026/01", "description": "Monthly fee",
        })
        assert errors["period"] == "Period must be in YYYY-MM format"

    def test_invoice_messages(self):
        _, errors = validate_form(InvoiceForm, {"unit_id": "", "amount": -5, "period": "", "description": "ab"})
        assert errors == {
            "unit_id": "Unit is required",
            "amount": "Amount must be positive",
            "period": "Period must be in YYYY-MM format",
            "description": "Description must be at least 3 characters",
        }

    def test_invoice_valid(self):
        form, errors = validate_form(InvoiceForm, {
            "unit_id": "u1", "amount": 50, "period": "2026-01", "description": "Monthly fee",
            "due_date": date(2026, 1, 31),
        })
        assert errors == {}
        assert form.model_dump(mode="json")["due_date"] == "2026-01-31"

    def test_payment_requires_positive_amount(self):
        _, errors = validate_form(PaymentForm, {
            "building_id": "B1", "unit_id": "u1", "amount": 0, "payment_date": date(2026, 1, 5),
        })
        assert errors["amount"] == "Amount must be positive"

    def test_payment_unknown_method(self):
        _, errors = validate_form(PaymentForm, {
            "building_id": "B1", "unit_id": "u1", "amount": 10, "payment_date": date(2026, 1, 5),
            "method": "CHEQUE",
        })
        assert errors["method"] == "Select a valid payment method"

    def test_assign_unit_roles(self):
        form, errors = validate_form(AssignUnitForm, {"unit_id": "u1", "building_role": "admin-local"})
        assert errors == {}
        _, errors = validate_form(AssignUnitForm, {"unit_id": "u1", "building_role": "janitor"})
        assert errors["building_role"] == "Select a valid building role"


def test_validate_period():
    assert validate_period("2026-02")
    assert not validate_period("2026-13")
    assert not validate_period("")


def test_validate_year():
    assert validate_year("2026")
    assert not validate_year("26")

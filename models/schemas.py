"""
Form validation schemas for the panel dialogs

Constraint failures are reported with the message in each schema's
`error_messages`; messages raised by custom validators are kept as written.
"""
from datetime import date
from typing import ClassVar, Dict, Optional, List, Literal

from pydantic import BaseModel, EmailStr, Field, field_validator


UserRole = Literal["resident", "board", "admin"]
UserStatus = Literal["active", "pending", "inactive", "rejected"]
BuildingRoleName = Literal["resident", "board", "owner", "auditor", "admin-local"]
PaymentMethod = Literal["PAGO_MOVIL", "TRANSFER", "CASH"]

INVALID_EMAIL = "Invalid email address"


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class FormSchema(BaseModel):
    """Base for dialog forms; maps field names to user-facing messages"""
    error_messages: ClassVar[Dict[str, str]] = {}


class LoginForm(FormSchema):
    """Login credentials."""
    email: EmailStr
    password: str = Field(..., min_length=6)

    error_messages: ClassVar[Dict[str, str]] = {
        "email": INVALID_EMAIL,
        "password": "Password must be at least 6 characters",
    }


class BuildingForm(FormSchema):
    """Create or edit a building."""
    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    rif: Optional[str] = None
    total_units: Optional[int] = Field(None, gt=0)
    monthly_fee: Optional[float] = Field(None, gt=0)

    error_messages: ClassVar[Dict[str, str]] = {
        "name": "Name is required",
        "address": "Address is required",
        "total_units": "Total units must be a positive whole number",
        "monthly_fee": "Monthly fee must be positive",
    }

    @field_validator("name", "address")
    @classmethod
    def strip_required(cls, v, info):
        v = v.strip()
        if not v:
            raise ValueError(cls.error_messages[info.field_name])
        return v

    @field_validator("rif", "total_units", "monthly_fee", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)


class UserCreateForm(FormSchema):
    """Create a user and optionally assign a unit."""
    name: str = Field(..., min_length=2)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: Optional[str] = None
    building_id: str = Field(..., min_length=1)
    unit_id: Optional[str] = None
    role: UserRole = "resident"
    status: UserStatus = "active"

    error_messages: ClassVar[Dict[str, str]] = {
        "name": "Name must be at least 2 characters",
        "email": INVALID_EMAIL,
        "password": "Password must be at least 6 characters",
        "building_id": "Building is required",
        "role": "Select a valid role",
        "status": "Select a valid status",
    }

    @field_validator("phone", "unit_id", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)


class UserEditForm(FormSchema):
    """Edit an existing user; password only changes when given."""
    name: str = Field(..., min_length=2)
    email: EmailStr
    password: Optional[str] = Field(None, min_length=6)
    phone: Optional[str] = None
    role: UserRole = "resident"
    status: UserStatus = "active"

    error_messages: ClassVar[Dict[str, str]] = UserCreateForm.error_messages

    @field_validator("password", "phone", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)


class UnitForm(FormSchema):
    """Create a single unit."""
    name: str = Field(..., min_length=1)
    floor: str = Field(..., min_length=1)
    aliquot: Optional[float] = Field(None, ge=0)

    error_messages: ClassVar[Dict[str, str]] = {
        "name": "Unit name is required",
        "floor": "Floor is required",
        "aliquot": "Aliquot cannot be negative",
    }

    @field_validator("aliquot", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)


class BatchUnitForm(FormSchema):
    """Generate floors x labels units in one call."""
    floors_count: int = Field(..., ge=1)
    unit_labels: str = Field(..., min_length=1)  # e.g. "A, B, C"
    aliquot: float = Field(0, ge=0)

    error_messages: ClassVar[Dict[str, str]] = {
        "floors_count": "At least one floor is required",
        "unit_labels": "Enter at least one unit label",
        "aliquot": "Aliquot cannot be negative",
    }

    @property
    def floors(self) -> List[str]:
        return [str(i + 1) for i in range(self.floors_count)]

    @property
    def units_per_floor(self) -> List[str]:
        return [s.strip() for s in self.unit_labels.split(",") if s.strip()]

    @property
    def preview_count(self) -> int:
        return len(self.floors) * len(self.units_per_floor)

    @field_validator("unit_labels")
    @classmethod
    def at_least_one_label(cls, v):
        if not [s for s in v.split(",") if s.strip()]:
            raise ValueError(cls.error_messages["unit_labels"])
        return v

    def payload(self) -> dict:
        return {
            "floors": self.floors,
            "unitsPerFloor": self.units_per_floor,
            "aliquot": self.aliquot,
        }


class InvoiceForm(FormSchema):
    """Load a debt (invoice) to a unit."""
    unit_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    period: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    description: str = Field(..., min_length=3)
    due_date: Optional[date] = None

    error_messages: ClassVar[Dict[str, str]] = {
        "unit_id": "Unit is required",
        "amount": "Amount must be positive",
        "period": "Period must be in YYYY-MM format",
        "description": "Description must be at least 3 characters",
        "due_date": "Invalid due date",
    }

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)


class PaymentForm(FormSchema):
    """Register a payment on behalf of a unit."""
    building_id: str = Field(..., min_length=1)
    unit_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    payment_date: date
    method: PaymentMethod = "TRANSFER"
    reference: Optional[str] = None
    notes: Optional[str] = None

    error_messages: ClassVar[Dict[str, str]] = {
        "building_id": "Building is required",
        "unit_id": "Unit is required",
        "amount": "Amount must be positive",
        "payment_date": "Payment date is required",
        "method": "Select a valid payment method",
    }

    @field_validator("reference", "notes", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)


class PaymentReviewForm(FormSchema):
    """Approve or reject a pending payment."""
    status: Literal["APPROVED", "REJECTED"]
    notes: Optional[str] = None
    approved_periods: Optional[List[str]] = None

    error_messages: ClassVar[Dict[str, str]] = {
        "status": "Status must be APPROVED or REJECTED",
    }


class AssignUnitForm(FormSchema):
    """Assign a unit to a user with a per-building role."""
    unit_id: str = Field(..., min_length=1)
    building_role: BuildingRoleName = "resident"
    is_primary: bool = False

    error_messages: ClassVar[Dict[str, str]] = {
        "unit_id": "Unit is required",
        "building_role": "Select a valid building role",
    }

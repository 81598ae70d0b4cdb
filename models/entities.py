"""
Data models mirrored from the backend API
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from utils.helpers import to_float, build_period


def _str_or_none(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class BuildingRole:
    """Explicit per-building role granted to a user"""
    building_id: str
    role: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildingRole":
        return cls(
            building_id=str(data.get("building_id", "")),
            role=str(data.get("role") or data.get("building_role") or ""),
        )


@dataclass
class UserUnit:
    """A user's membership in a unit (UserUnit join record)"""
    unit_id: str
    building_id: Optional[str] = None
    unit_name: Optional[str] = None
    building_name: Optional[str] = None
    building_role: str = "resident"
    is_primary: bool = False

    @property
    def is_board(self) -> bool:
        return (self.building_role or "").lower() == "board"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserUnit":
        unit = data.get("unit") or {}
        return cls(
            unit_id=str(data.get("unit_id") or unit.get("id") or data.get("id") or ""),
            building_id=_str_or_none(data.get("building_id") or unit.get("building_id")),
            unit_name=_str_or_none(data.get("unit_name") or unit.get("name")),
            building_name=_str_or_none(data.get("building_name")),
            building_role=str(data.get("building_role") or "resident"),
            is_primary=bool(data.get("is_primary", False)),
        )


@dataclass
class User:
    """Represents a panel or resident user"""
    id: str
    email: str
    name: str = ""
    role: str = "resident"  # resident, board, admin
    status: Optional[str] = None  # pending, active, inactive, rejected
    phone: Optional[str] = None
    unit: Optional[str] = None
    building_id: Optional[str] = None  # legacy single building
    building_name: Optional[str] = None
    units: List[UserUnit] = field(default_factory=list)
    building_roles: List[BuildingRole] = field(default_factory=list)
    created_at: Optional[str] = None

    @property
    def primary_unit(self) -> Optional[UserUnit]:
        return next((u for u in self.units if u.is_primary), None)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        building = data.get("building") or {}
        roles = data.get("buildingRoles") or data.get("building_roles") or []
        return cls(
            id=str(data.get("id", "")),
            email=str(data.get("email") or ""),
            name=str(data.get("name") or ""),
            role=str(data.get("role") or "resident"),
            status=_str_or_none(data.get("status")),
            phone=_str_or_none(data.get("phone")),
            unit=_str_or_none(data.get("unit")),
            building_id=_str_or_none(data.get("building_id") or building.get("id")),
            building_name=_str_or_none(data.get("building_name") or building.get("name")),
            units=[UserUnit.from_dict(u) for u in data.get("units") or []],
            building_roles=[BuildingRole.from_dict(r) for r in roles],
            created_at=_str_or_none(data.get("created_at")),
        )


@dataclass
class Building:
    """Represents a condominium building"""
    id: str
    name: str
    address: str = ""
    rif: Optional[str] = None  # tax id
    total_units: Optional[int] = None
    monthly_fee: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Building":
        total_units = data.get("total_units")
        monthly_fee = data.get("monthly_fee")
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or ""),
            address=str(data.get("address") or ""),
            rif=_str_or_none(data.get("rif")),
            total_units=int(total_units) if total_units is not None else None,
            monthly_fee=to_float(monthly_fee) if monthly_fee is not None else None,
        )


@dataclass
class Unit:
    """Represents an apartment/unit inside a building"""
    id: str
    name: str
    floor: str = ""
    aliquot: float = 0.0  # ownership share percentage
    building_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Unit":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or ""),
            floor=str(data.get("floor") or ""),
            aliquot=to_float(data.get("aliquot")),
            building_id=_str_or_none(data.get("building_id")),
        )


@dataclass
class Invoice:
    """Represents an invoice (debt) charged to a unit"""
    id: str
    amount: float = 0.0
    paid_amount: float = 0.0
    status: str = "PENDING"  # PENDING, PAID, CANCELLED
    number: Optional[str] = None
    receipt_number: Optional[str] = None
    period: Optional[str] = None  # YYYY-MM
    description: Optional[str] = None
    due_date: Optional[str] = None
    issue_date: Optional[str] = None
    unit_id: Optional[str] = None
    unit_name: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    building_id: Optional[str] = None

    @property
    def outstanding(self) -> float:
        return self.amount - self.paid_amount

    @property
    def is_paid(self) -> bool:
        return self.status == "PAID"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Invoice":
        unit = data.get("unit") or {}
        user = data.get("user") or {}
        return cls(
            id=str(data.get("id", "")),
            amount=to_float(data.get("amount")),
            paid_amount=to_float(data.get("paid_amount")),
            status=str(data.get("status") or "PENDING").upper(),
            number=_str_or_none(data.get("number")),
            receipt_number=_str_or_none(data.get("receipt_number") or data.get("receiptNumber")),
            period=build_period(data.get("period"), data.get("year"), data.get("month")),
            description=_str_or_none(data.get("description")),
            due_date=_str_or_none(data.get("due_date")),
            issue_date=_str_or_none(data.get("issue_date") or data.get("created_at")),
            unit_id=_str_or_none(data.get("unit_id") or unit.get("id")),
            unit_name=_str_or_none(unit.get("name") or data.get("unit_name")),
            user_id=_str_or_none(data.get("user_id") or user.get("id")),
            user_name=_str_or_none(user.get("name") or data.get("user_name")),
            building_id=_str_or_none(data.get("building_id") or unit.get("building_id") or user.get("building_id")),
        )


@dataclass
class PaymentAllocation:
    """Links part of a payment to the invoice it pays down"""
    invoice_id: str
    allocated_amount: float = 0.0
    number: Optional[str] = None
    receipt_number: Optional[str] = None
    period: Optional[str] = None
    is_current: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaymentAllocation":
        # The allocation endpoint returns invoice rows; older rows carry invoice_id
        allocated = data.get("allocated_amount")
        return cls(
            invoice_id=str(data.get("invoice_id") or data.get("id") or ""),
            allocated_amount=to_float(allocated if allocated is not None else data.get("amount")),
            number=_str_or_none(data.get("number")),
            receipt_number=_str_or_none(data.get("receipt_number")),
            period=build_period(data.get("period"), data.get("year"), data.get("month")),
        )


@dataclass
class Payment:
    """Represents a payment reported by a resident"""
    id: str
    amount: float = 0.0
    status: str = "PENDING"  # PENDING, APPROVED, REJECTED
    method: str = "TRANSFER"  # PAGO_MOVIL, TRANSFER, CASH
    payment_date: Optional[str] = None
    reference: Optional[str] = None
    bank: Optional[str] = None
    periods: List[str] = field(default_factory=list)
    notes: Optional[str] = None
    proof_url: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    unit_id: Optional[str] = None
    allocations: List[PaymentAllocation] = field(default_factory=list)  # only when the payload embeds them

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Payment":
        user = data.get("user") or {}
        periods = data.get("periods")
        if not periods and data.get("period"):
            # Legacy single-period payments
            periods = [data["period"]]
        return cls(
            id=str(data.get("id", "")),
            amount=to_float(data.get("amount")),
            status=str(data.get("status") or "PENDING").upper(),
            method=str(data.get("method") or "TRANSFER"),
            payment_date=_str_or_none(data.get("payment_date")),
            reference=_str_or_none(data.get("reference")),
            bank=_str_or_none(data.get("bank")),
            periods=[str(p) for p in periods or []],
            notes=_str_or_none(data.get("notes")),
            proof_url=_str_or_none(data.get("proof_url")),
            user_id=_str_or_none(data.get("user_id") or user.get("id")),
            user_name=_str_or_none(user.get("name") or data.get("user_name")),
            unit_id=_str_or_none(data.get("unit_id")),
            allocations=[PaymentAllocation.from_dict(a) for a in data.get("allocations") or []],
        )


@dataclass
class InvoicePayment:
    """A payment pre-joined with its allocation to one invoice"""
    id: str
    amount: float = 0.0  # payment grand total
    allocated_amount: float = 0.0  # contribution to this invoice
    method: str = "TRANSFER"
    status: Optional[str] = None
    payment_date: Optional[str] = None
    allocated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvoicePayment":
        return cls(
            id=str(data.get("id") or data.get("payment_id") or ""),
            amount=to_float(data.get("amount")),
            allocated_amount=to_float(data.get("allocated_amount")),
            method=str(data.get("method") or "TRANSFER"),
            status=_str_or_none(data.get("status")),
            payment_date=_str_or_none(data.get("payment_date")),
            allocated_at=_str_or_none(data.get("allocated_at")),
        )


@dataclass
class UnitBalance:
    """Authoritative balance of a unit computed by the backend"""
    unit_id: str
    total_debt: float = 0.0
    pending_invoices: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UnitBalance":
        debt = data.get("totalDebt", data.get("total_debt"))
        return cls(
            unit_id=str(data.get("unit_id") or data.get("unitId") or ""),
            total_debt=to_float(debt),
            pending_invoices=int(data.get("pendingInvoices", data.get("pending_invoices", 0)) or 0),
        )


@dataclass
class AuthResponse:
    """Result of a successful login"""
    access_token: str
    user: User
    refresh_token: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthResponse":
        token = data.get("token") or {}
        refresh = token.get("refresh_token")
        return cls(
            access_token=str(token.get("access_token") or ""),
            user=User.from_dict(data.get("user") or {}),
            refresh_token=refresh if isinstance(refresh, str) else None,
        )

"""
Dashboard aggregations over fetched records
"""
from dataclasses import dataclass, field
from typing import List, Dict, Optional

import pandas as pd

from models.entities import Building, Invoice, Payment, Unit, UnitBalance, User
from services.errors import ApiError, SessionExpiredError
from utils.concurrency import run_parallel, run_parallel_settled
from utils.helpers import format_period


def pending_payments(payments: List[Payment]) -> List[Payment]:
    return [p for p in payments if p.status == "PENDING"]


def approved_revenue(payments: List[Payment]) -> float:
    return sum(p.amount for p in payments if p.status == "APPROVED")


def total_debt(invoices: List[Invoice]) -> float:
    """Outstanding balance over PENDING invoices"""
    return sum(i.amount - i.paid_amount for i in invoices if i.status == "PENDING")


def unit_pending_debt(balance: Optional[UnitBalance], invoices: List[Invoice]) -> float:
    """The backend balance is authoritative; invoices are the fallback"""
    if balance is not None:
        return balance.total_debt
    return total_debt(invoices)


def debt_by_unit(invoices: List[Invoice]) -> Dict[str, float]:
    debts: Dict[str, float] = {}
    for invoice in invoices:
        if invoice.status != "PENDING" or not invoice.unit_id:
            continue
        debts[invoice.unit_id] = debts.get(invoice.unit_id, 0.0) + invoice.outstanding
    return debts


def solvency_rate(units: List[Unit], invoices: List[Invoice]) -> float:
    """Percentage of units with nothing left to pay"""
    if not units:
        return 0.0
    debts = debt_by_unit(invoices)
    solvent = sum(1 for u in units if debts.get(u.id, 0.0) <= 0.005)
    return solvent / len(units) * 100


@dataclass
class DashboardStats:
    total_buildings: int = 0
    total_users: int = 0
    pending_payments: int = 0
    approved_payments: int = 0
    total_revenue: float = 0.0
    total_debt: float = 0.0
    pending_invoices: int = 0


def compute_dashboard_stats(
    buildings: List[Building],
    users: List[User],
    payments: List[Payment],
    invoices: List[Invoice],
) -> DashboardStats:
    return DashboardStats(
        total_buildings=len(buildings),
        total_users=len(users),
        pending_payments=len(pending_payments(payments)),
        approved_payments=len([p for p in payments if p.status == "APPROVED"]),
        total_revenue=approved_revenue(payments),
        total_debt=total_debt(invoices),
        pending_invoices=len([i for i in invoices if i.status == "PENDING"]),
    )


@dataclass
class DashboardData:
    buildings: List[Building] = field(default_factory=list)
    users: List[User] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)
    invoices: List[Invoice] = field(default_factory=list)

    @property
    def stats(self) -> DashboardStats:
        return compute_dashboard_stats(self.buildings, self.users, self.payments, self.invoices)


def load_dashboard_data(backend, building_id: Optional[str], is_super_admin: bool) -> DashboardData:
    """
    Fetch everything the dashboard needs in one concurrent batch.
    The building list is only requested for admins.
    """
    buildings, users, payments, invoices = run_parallel(
        (lambda: backend.buildings.get_buildings()) if is_super_admin else (lambda: []),
        lambda: backend.users.get_users(building_id=building_id),
        lambda: backend.payments.get_payments(building_id=building_id),
        lambda: backend.billing.get_invoices(building_id=building_id),
    )
    return DashboardData(buildings=buildings, users=users, payments=payments, invoices=invoices)


@dataclass
class BuildingSummary:
    building: Optional[Building] = None
    total_debt: float = 0.0
    pending_payments: int = 0


def load_building_summary(backend, building_id: str) -> BuildingSummary:
    building, invoices, pending = run_parallel(
        lambda: backend.buildings.get_building_by_id(building_id),
        lambda: backend.billing.get_invoices(building_id=building_id, status="PENDING"),
        lambda: backend.payments.get_payments(building_id=building_id, status="PENDING"),
    )
    return BuildingSummary(building=building, total_debt=total_debt(invoices), pending_payments=len(pending))


@dataclass
class UnitDetail:
    unit: Unit
    residents: List[User] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)
    invoices: List[Invoice] = field(default_factory=list)
    balance: Optional[UnitBalance] = None

    @property
    def pending_debt(self) -> float:
        return unit_pending_debt(self.balance, self.invoices)


def load_unit_detail(backend, building_id: str, unit_id: str) -> UnitDetail:
    """
    The unit itself must load; failures there propagate.
    Residents, payments, invoices and balance each fall back to empty
    (balance to None) so one failing section does not hide the rest.
    """
    unit = backend.units.get_unit_by_id(unit_id)
    residents, payments, invoices, balance = run_parallel_settled(
        (lambda: backend.users.get_users(building_id=building_id, unit_id=unit_id), []),
        (lambda: backend.payments.get_payments(building_id=building_id, unit_id=unit_id), []),
        (lambda: backend.billing.get_unit_invoices(unit_id), []),
        (lambda: backend.billing.get_unit_balance(unit_id), None),
        errors=(ApiError,),
        passthrough=(SessionExpiredError,),
    )
    return UnitDetail(unit=unit, residents=residents, payments=payments, invoices=invoices, balance=balance)


# ---------------------------------------------------------------------------
# Search filters
# ---------------------------------------------------------------------------

def _contains(value: Optional[str], query: str) -> bool:
    return bool(value) and query in value.lower()


def filter_users(users: List[User], query: str) -> List[User]:
    query = (query or "").strip().lower()
    if not query:
        return list(users)
    return [u for u in users if _contains(u.name, query) or _contains(u.email, query) or _contains(u.unit, query)]


def filter_payments(payments: List[Payment], query: str) -> List[Payment]:
    query = (query or "").strip().lower()
    if not query:
        return list(payments)
    return [
        p for p in payments
        if query in f"{p.amount:g}"
        or _contains(p.method, query)
        or any(_contains(period, query) for period in p.periods)
        or _contains(p.user_name, query)
    ]


def filter_invoices(invoices: List[Invoice], query: str) -> List[Invoice]:
    query = (query or "").strip().lower()
    if not query:
        return list(invoices)
    return [
        i for i in invoices
        if _contains(i.number, query) or _contains(i.user_name, query) or _contains(i.unit_name, query)
    ]


# ---------------------------------------------------------------------------
# Table builders
# ---------------------------------------------------------------------------

def users_df(users: List[User]) -> pd.DataFrame:
    if not users:
        return pd.DataFrame()
    return pd.DataFrame([
        {
            "id": u.id,
            "name": u.name,
            "email": u.email,
            "role": u.role,
            "status": u.status,
            "units": ", ".join(m.unit_name or m.unit_id for m in u.units) or u.unit,
        }
        for u in users
    ])


def payments_df(payments: List[Payment]) -> pd.DataFrame:
    if not payments:
        return pd.DataFrame()
    return pd.DataFrame([
        {
            "id": p.id,
            "date": p.payment_date,
            "resident": p.user_name,
            "amount": p.amount,
            "method": p.method,
            "periods": ", ".join(p.periods),
            "reference": p.reference,
            "status": p.status,
        }
        for p in payments
    ])


def invoices_df(invoices: List[Invoice]) -> pd.DataFrame:
    if not invoices:
        return pd.DataFrame()
    return pd.DataFrame([
        {
            "id": i.id,
            "number": i.receipt_number or i.number,
            "period": format_period(i.period),
            "unit": i.unit_name,
            "resident": i.user_name,
            "amount": i.amount,
            "paid": i.paid_amount,
            "outstanding": i.outstanding,
            "status": i.status,
            "due_date": i.due_date,
        }
        for i in invoices
    ])


def units_df(units: List[Unit], invoices: Optional[List[Invoice]] = None) -> pd.DataFrame:
    if not units:
        return pd.DataFrame()
    debts = debt_by_unit(invoices or [])
    df = pd.DataFrame([
        {"id": u.id, "name": u.name, "floor": u.floor, "aliquot": u.aliquot, "debt": debts.get(u.id, 0.0)}
        for u in units
    ])
    return df.sort_values(["floor", "name"]).reset_index(drop=True)


def buildings_df(buildings: List[Building]) -> pd.DataFrame:
    if not buildings:
        return pd.DataFrame()
    return pd.DataFrame([
        {
            "id": b.id,
            "name": b.name,
            "address": b.address,
            "rif": b.rif,
            "total_units": b.total_units,
            "monthly_fee": b.monthly_fee,
        }
        for b in buildings
    ])


def revenue_by_period(payments: List[Payment]) -> pd.DataFrame:
    """Approved amounts grouped by payment month"""
    rows = [
        {"period": (p.payment_date or "")[:7], "amount": p.amount}
        for p in payments
        if p.status == "APPROVED" and p.payment_date
    ]
    if not rows:
        return pd.DataFrame(columns=["period", "amount"])
    return pd.DataFrame(rows).groupby("period", as_index=False)["amount"].sum().sort_values("period")

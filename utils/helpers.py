"""
Helper utility functions
"""
from datetime import datetime, date
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dateutil import parser as date_parser

from config import settings

LABELS_PATH = Path(__file__).parent.parent / "config" / "labels.yaml"

DEFAULT_LABELS: Dict[str, Dict[str, str]] = {
    "payment_methods": {"PAGO_MOVIL": "Pago Móvil", "TRANSFER": "Transferencia", "CASH": "Efectivo"},
    "user_roles": {"admin": "Super Admin", "board": "Board Member", "resident": "Resident"},
    "building_roles": {"board": "Board", "owner": "Owner", "auditor": "Auditor",
                       "admin-local": "Admin Local", "resident": "Resident"},
}


@lru_cache(maxsize=1)
def load_labels() -> Dict[str, Dict[str, str]]:
    """Load display labels from YAML, falling back to built-in defaults"""
    try:
        with open(LABELS_PATH, "r", encoding="utf-8") as f:
            labels = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return DEFAULT_LABELS
    return {key: labels.get(key) or default for key, default in DEFAULT_LABELS.items()}


def to_float(value: Any) -> float:
    """Coerce a backend numeric (number, decimal string or None) to float"""
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def build_period(period: Optional[str], year: Any = None, month: Any = None) -> Optional[str]:
    """
    Normalize an invoice period to YYYY-MM
    Accepts an explicit period string or a year/month pair
    """
    if period:
        return str(period)
    if year and month:
        try:
            return f"{int(year)}-{int(month):02d}"
        except (TypeError, ValueError):
            return None
    return None


def format_currency(amount: float) -> str:
    """Format a number as currency"""
    if amount < 0:
        return f"-${abs(amount):,.2f}"
    return f"${amount:,.2f}"


def format_percentage(value: float) -> str:
    """Format a percentage value (already scaled to 0-100)"""
    return f"{value:.1f}%"


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse an ISO date/datetime string from the API"""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value)).date()
    except (ValueError, OverflowError):
        return None


def format_date(value: Union[str, date, None], fmt: str = settings.DATE_FORMAT) -> str:
    """Format a date for display"""
    if not value:
        return "--"
    parsed = parse_date(value)
    if parsed is None:
        return "Invalid date"
    return parsed.strftime(fmt)


def format_period(period: Optional[str]) -> str:
    """
    Format a YYYY-MM period as 'February 2026'
    Unparseable periods are returned unchanged
    """
    if not period:
        return "--"
    try:
        parsed = datetime.strptime(str(period).strip(), settings.PERIOD_FORMAT)
    except ValueError:
        return str(period)
    return parsed.strftime("%B %Y")


def format_payment_method(method: str) -> str:
    return load_labels()["payment_methods"].get(method, method)


def format_user_role(role: str) -> str:
    return load_labels()["user_roles"].get(role, role)


def format_building_role(role: Optional[str]) -> str:
    """Unknown building roles display as resident"""
    labels = load_labels()["building_roles"]
    return labels.get((role or "").lower(), labels["resident"])


def display_name(name: Optional[str], email: Optional[str]) -> str:
    """Name, else the local part of the email"""
    if name:
        return name
    if email:
        return email.split("@")[0]
    return "User"


def is_overdue(due_date: Union[str, date, None], is_paid: bool, today: Optional[date] = None) -> bool:
    """An unpaid invoice whose due date is already behind us"""
    if is_paid:
        return False
    due = parse_date(due_date)
    if due is None:
        return False
    return due < (today or date.today())

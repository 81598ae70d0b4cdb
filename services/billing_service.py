"""
Billing service: invoices, allocations and balances
"""
from typing import List, Optional

from models.entities import Invoice, InvoicePayment, PaymentAllocation, UnitBalance
from services.api_client import ApiClient


class BillingService:

    def __init__(self, client: ApiClient):
        self.client = client

    def get_invoices(
        self,
        building_id: Optional[str] = None,
        unit_id: Optional[str] = None,
        status: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> List[Invoice]:
        params = {
            "building_id": building_id,
            "unit_id": unit_id,
            "status": status,
            "month": month,
            "year": year,
            "user_id": user_id,
        }
        return [Invoice.from_dict(i) for i in self.client.get("/billing/invoices", params=params) or []]

    def get_invoice_by_id(self, invoice_id: str) -> Invoice:
        return Invoice.from_dict(self.client.get(f"/billing/invoices/{invoice_id}") or {})

    def get_invoice_payments(self, invoice_id: str) -> List[InvoicePayment]:
        """Payments joined with their allocation to this invoice"""
        rows = self.client.get(f"/billing/invoices/{invoice_id}/payments") or []
        return [InvoicePayment.from_dict(p) for p in rows]

    def get_payment_invoices(self, payment_id: str) -> List[PaymentAllocation]:
        """Every invoice a payment was spread across"""
        rows = self.client.get(f"/billing/payments/{payment_id}/invoices") or []
        return [PaymentAllocation.from_dict(a) for a in rows]

    def get_unit_invoices(self, unit_id: str) -> List[Invoice]:
        return [Invoice.from_dict(i) for i in self.client.get(f"/billing/units/{unit_id}/invoices") or []]

    def get_unit_balance(self, unit_id: str) -> UnitBalance:
        balance = UnitBalance.from_dict(self.client.get(f"/billing/units/{unit_id}/balance") or {})
        if not balance.unit_id:
            balance.unit_id = unit_id
        return balance

    def load_debt(self, payload: dict) -> Invoice:
        return Invoice.from_dict(self.client.post("/billing/debt", json=payload) or {})

"""
Payments service
"""
from typing import List, Optional

from models.entities import Payment
from services.api_client import ApiClient

ADMIN_PAYMENTS = "/payments/admin/payments"


class PaymentsService:

    def __init__(self, client: ApiClient):
        self.client = client

    def get_payments(
        self,
        building_id: Optional[str] = None,
        user_id: Optional[str] = None,
        unit_id: Optional[str] = None,
        status: Optional[str] = None,
        period: Optional[str] = None,
        year: Optional[str] = None,
    ) -> List[Payment]:
        params = {
            "building_id": building_id,
            "user_id": user_id,
            "unit_id": unit_id,
            "status": status,
            "period": period,
            "year": year,
        }
        return [Payment.from_dict(p) for p in self.client.get(ADMIN_PAYMENTS, params=params) or []]

    def get_payment_by_id(self, payment_id: str) -> Payment:
        return Payment.from_dict(self.client.get(f"/payments/{payment_id}") or {})

    def create_payment(self, fields: dict, proof: Optional[tuple] = None) -> Payment:
        """
        Register a payment as multipart form data.
        proof is an optional (file_name, bytes, content_type) tuple.
        """
        files = {"file": proof} if proof else {}
        data = {k: str(v) for k, v in fields.items() if v is not None}
        return Payment.from_dict(self.client.post(ADMIN_PAYMENTS, data=data, files=files) or {})

    def update_payment_status(self, payment_id: str, update: dict) -> Payment:
        payload = {k: v for k, v in update.items() if v is not None}
        return Payment.from_dict(self.client.patch(f"{ADMIN_PAYMENTS}/{payment_id}", json=payload) or {})

    def approve_payment(
        self,
        payment_id: str,
        notes: Optional[str] = None,
        approved_periods: Optional[List[str]] = None,
    ) -> Payment:
        return self.update_payment_status(
            payment_id,
            {"status": "APPROVED", "notes": notes, "approved_periods": approved_periods},
        )

    def reject_payment(self, payment_id: str, notes: Optional[str] = None) -> Payment:
        return self.update_payment_status(payment_id, {"status": "REJECTED", "notes": notes})

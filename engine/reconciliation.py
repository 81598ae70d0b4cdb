"""
Invoice/payment reconciliation for the billing views
"""
from dataclasses import dataclass, field
from typing import List, Optional

from config import settings
from models.entities import Invoice, InvoicePayment, Payment, PaymentAllocation
from services.billing_service import BillingService
from services.errors import ApiError
from services.payments_service import PaymentsService
from utils.concurrency import run_parallel
from utils.logging_config import logger


def progress_percentage(invoice: Invoice) -> float:
    """paid_amount / amount * 100; overpayment is not clamped here"""
    if not invoice.amount:
        return 0.0
    return invoice.paid_amount / invoice.amount * 100


def progress_bar_value(invoice: Invoice) -> int:
    """Bounded 0-100 value for a progress bar widget"""
    return int(max(0.0, min(100.0, progress_percentage(invoice))))


def invoice_display_id(invoice: Invoice) -> str:
    return invoice.receipt_number or invoice.number or invoice.id[:8]


def allocated_total(payments: List[InvoicePayment]) -> float:
    """What the listed payments contributed to the invoice"""
    return sum(p.allocated_amount for p in payments)


@dataclass
class AllocationCheck:
    allocated_total: float
    paid_amount: float

    @property
    def difference(self) -> float:
        return self.paid_amount - self.allocated_total

    @property
    def is_consistent(self) -> bool:
        return abs(self.difference) < settings.AMOUNT_TOLERANCE


def check_allocations(invoice: Invoice, payments: List[InvoicePayment]) -> AllocationCheck:
    """
    Compare the allocation rows against the invoice's paid_amount.
    Informational only; the backend owns allocation correctness.
    """
    check = AllocationCheck(allocated_total=allocated_total(payments), paid_amount=invoice.paid_amount)
    if not check.is_consistent:
        logger.warning(
            f"Invoice {invoice.id}: allocations sum {check.allocated_total:.2f} "
            f"but paid_amount is {invoice.paid_amount:.2f}"
        )
    return check


@dataclass
class InvoiceDetail:
    invoice: Invoice
    payments: List[InvoicePayment] = field(default_factory=list)

    @property
    def progress(self) -> float:
        return progress_percentage(self.invoice)

    @property
    def allocation_check(self) -> AllocationCheck:
        return check_allocations(self.invoice, self.payments)


def load_invoice_detail(billing: BillingService, invoice_id: str) -> InvoiceDetail:
    """Fetch the invoice and its payments together; failures propagate"""
    invoice, payments = run_parallel(
        lambda: billing.get_invoice_by_id(invoice_id),
        lambda: billing.get_invoice_payments(invoice_id),
    )
    return InvoiceDetail(invoice=invoice, payments=payments)


@dataclass
class PaymentDetail:
    payment: Optional[Payment] = None
    allocations: List[PaymentAllocation] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def is_partial(self) -> bool:
        """Payment loaded but its allocation spread did not"""
        return self.payment is not None and self.error is not None


def load_payment_detail(
    payments: PaymentsService,
    billing: BillingService,
    payment_id: str,
    current_invoice_id: Optional[str] = None,
) -> PaymentDetail:
    """
    Fetch a payment plus every allocation it made.
    When that fails, retry the payment alone so the dialog can still show it,
    with any allocations embedded in the payment payload.
    """
    try:
        payment, allocations = run_parallel(
            lambda: payments.get_payment_by_id(payment_id),
            lambda: billing.get_payment_invoices(payment_id),
        )
    except ApiError as e:
        logger.error(f"Failed to fetch payment details or allocations: {e}")
        try:
            payment = payments.get_payment_by_id(payment_id)
        except ApiError as inner:
            logger.error(f"Could not load payment {payment_id}: {inner}")
            return PaymentDetail(error="Could not load payment details")
        if not payment.allocations:
            return PaymentDetail(payment=payment, error="Allocations are unavailable")
        # Some payloads embed the allocations on the payment itself
        allocations = payment.allocations

    for allocation in allocations:
        allocation.is_current = current_invoice_id is not None and allocation.invoice_id == current_invoice_id
    return PaymentDetail(payment=payment, allocations=allocations)


def periods_to_approve(available: List[str], selected: List[str]) -> Optional[List[str]]:
    """
    Only a strict subset is sent; approving everything sends nothing
    and lets the backend apply the full payment.
    """
    if len(selected) < len(available):
        return [p for p in available if p in selected]
    return None

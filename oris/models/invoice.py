from __future__ import annotations
import datetime as dt
from enum import Enum
from typing import List, Literal, Optional

from pydantic import Field

from .common import Document, today
from .quote import QuoteLine

InvoiceType = Literal["INVOICE", "CREDIT_NOTE"]
INVOICE: InvoiceType = "INVOICE"
CREDIT_NOTE: InvoiceType = "CREDIT_NOTE"


class InvoiceStatus(str, Enum):
    PENDING = "À payer"
    PAID = "Payé"
    OVERDUE = "En retard"
    CANCELLED = "Annulé"  # gardé pour l'historique, l'avoir reste la voie légale


class Invoice(Document):
    number: str = ""
    type: InvoiceType = INVOICE
    quote_id: Optional[str] = None
    original_invoice_id: Optional[str] = None      # avoirs : facture annulée
    original_invoice_number: Optional[str] = None
    client_id: str
    date: dt.date = Field(default_factory=today)
    due_date: dt.date = Field(default_factory=today)
    status: InvoiceStatus = InvoiceStatus.PENDING
    items: List[QuoteLine] = Field(default_factory=list)
    total_ht: float = 0.0
    total_vat: float = 0.0
    total_ttc: float = 0.0

    @property
    def is_credit_note(self) -> bool:
        return self.type == CREDIT_NOTE

    @property
    def signed_total_ht(self) -> float:
        """Montant HT compté en CA (négatif pour un avoir)."""
        return -self.total_ht if self.is_credit_note else self.total_ht

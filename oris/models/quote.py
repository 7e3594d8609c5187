from __future__ import annotations
import datetime as dt
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator

from .common import Document, gen_id, today

VAT_RATES = (0, 10, 20)
DEFAULT_VAT_RATE = 20


class QuoteStatus(str, Enum):
    DRAFT = "Brouillon"
    SENT = "Envoyé"
    ACCEPTED = "Accepté"
    REJECTED = "Refusé"
    EXPIRED = "Expiré"


class QuoteLine(BaseModel):
    id: str = Field(default_factory=gen_id)
    description: str = ""
    quantity: float = Field(default=1.0, ge=0)
    unit_price: float = 0.0
    vat_rate: float = DEFAULT_VAT_RATE

    @field_validator("vat_rate")
    @classmethod
    def _known_rate(cls, v: float) -> float:
        if v not in VAT_RATES:
            raise ValueError(f"Taux de TVA non géré : {v} (attendu : {VAT_RATES})")
        return v

    @property
    def total_ht(self) -> float:
        return self.quantity * self.unit_price


class Totals(BaseModel):
    ht: float = 0.0
    vat: float = 0.0
    ttc: float = 0.0


class Quote(Document):
    number: str = ""
    client_id: str
    date: dt.date = Field(default_factory=today)
    valid_until: dt.date = Field(default_factory=today)
    status: QuoteStatus = QuoteStatus.DRAFT
    items: List[QuoteLine] = Field(default_factory=list)
    notes: str = ""
    total_ht: float = 0.0
    total_vat: float = 0.0
    total_ttc: float = 0.0

    def apply_totals(self, totals: Totals) -> None:
        self.total_ht = totals.ht
        self.total_vat = totals.vat
        self.total_ttc = totals.ttc

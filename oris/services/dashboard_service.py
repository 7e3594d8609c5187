from __future__ import annotations
import logging
import math
from datetime import date
from typing import Iterable, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from oris.models.certification import Certification
from oris.models.invoice import INVOICE, Invoice, InvoiceStatus
from oris.models.quote import QuoteStatus
from oris.services.certification_service import CertificationService
from oris.services.invoice_service import InvoiceService
from oris.services.quote_service import QuoteService
from oris.services.session_service import SessionService
from oris.storage.store import DataStore

logger = logging.getLogger(__name__)

MONTHS_FR = ["Jan", "Fév", "Mar", "Avr", "Mai", "Juin", "Juil", "Août", "Sep", "Oct", "Nov", "Déc"]

TrendDirection = Literal["up", "down", "neutral"]


class MonthBucket(BaseModel):
    name: str
    revenue: float = 0.0


class Dashboard(BaseModel):
    year: int
    current_year_revenue: float
    previous_year_revenue: float
    trend_label: str
    trend_direction: TrendDirection
    monthly: List[MonthBucket]
    pending_revenue: float
    overdue_revenue: float
    paid_global: float
    pending_quotes: int
    upcoming_sessions: int
    certification_alerts: List[Certification] = Field(default_factory=list)


def paid_revenue(invoices: Iterable[Invoice], year: int) -> float:
    """CA HT encaissé sur l'année (avoirs déduits)."""
    return math.fsum(
        inv.signed_total_ht for inv in invoices
        if inv.status == InvoiceStatus.PAID and inv.date.year == year
    )


def trend(current: float, previous: float) -> Tuple[str, TrendDirection]:
    if previous > 0:
        percent = (current - previous) / previous * 100
        sign = "+" if percent > 0 else ""
        return f"{sign}{percent:.0f}% vs N-1", ("up" if percent >= 0 else "down")
    if current > 0:
        return "Démarrage activité", "up"
    return "Pas de données N-1", "neutral"


class DashboardService:
    def __init__(
        self,
        store: DataStore,
        invoices: Optional[InvoiceService] = None,
        quotes: Optional[QuoteService] = None,
        sessions: Optional[SessionService] = None,
        certifications: Optional[CertificationService] = None,
    ) -> None:
        self.invoices = invoices or InvoiceService(store)
        self.quotes = quotes or QuoteService(store, invoices=self.invoices)
        self.sessions = sessions or SessionService(store)
        self.certifications = certifications or CertificationService(store)

    def snapshot(self, today: Optional[date] = None, alert_within_days: Optional[int] = None) -> Dashboard:
        today = today or date.today()
        year = today.year
        invoices = self.invoices.list_invoices()

        monthly = [MonthBucket(name=m) for m in MONTHS_FR]
        for idx in range(12):
            monthly[idx].revenue = math.fsum(
                inv.signed_total_ht for inv in invoices
                if inv.status == InvoiceStatus.PAID
                and inv.date.year == year and inv.date.month == idx + 1
            )

        current = paid_revenue(invoices, year)
        previous = paid_revenue(invoices, year - 1)
        label, direction = trend(current, previous)

        def _invoice_total(status: InvoiceStatus) -> float:
            return math.fsum(
                inv.total_ht for inv in invoices if inv.type == INVOICE and inv.status == status
            )

        snap = Dashboard(
            year=year,
            current_year_revenue=current,
            previous_year_revenue=previous,
            trend_label=label,
            trend_direction=direction,
            monthly=monthly,
            pending_revenue=_invoice_total(InvoiceStatus.PENDING),
            overdue_revenue=_invoice_total(InvoiceStatus.OVERDUE),
            paid_global=math.fsum(
                inv.signed_total_ht for inv in invoices if inv.status == InvoiceStatus.PAID
            ),
            pending_quotes=sum(1 for q in self.quotes.list_quotes() if q.status == QuoteStatus.SENT),
            # sessions en cours ou à venir (end_date >= today), pas le total historique
            upcoming_sessions=len(self.sessions.upcoming(today)),
            certification_alerts=self.certifications.alerts(today, alert_within_days),
        )
        logger.debug("Tableau de bord %s : CA %.2f € (%s)", year, current, label)
        return snap

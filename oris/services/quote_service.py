from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError as ModelError

from oris.errors import InvalidTransitionError, NotFoundError, ValidationError
from oris.models.common import in_days
from oris.models.invoice import Invoice
from oris.models.quote import DEFAULT_VAT_RATE, Quote, QuoteLine, QuoteStatus, Totals
from oris.services.catalog_service import CatalogService
from oris.services.invoice_service import InvoiceService
from oris.services.numbering import QUOTE_PREFIX, next_number
from oris.services.totals import compute_totals
from oris.services.transitions import QUOTE_TRANSITIONS, check_transition
from oris.storage.store import DataStore

logger = logging.getLogger(__name__)

VALIDITY_DAYS = 30
EDITABLE_FIELDS = ("description", "quantity", "unit_price", "vat_rate")


# ---------- Édition en cours (état transitoire) ---------- #

class QuoteDraft:
    """
    Lignes d'un devis en cours de saisie.
    Les totaux sont recalculés à chaque lecture, jamais mis en cache.
    """

    def __init__(self, catalog: Optional[CatalogService] = None, lines: Sequence[QuoteLine] = ()) -> None:
        self.catalog = catalog
        self.lines: List[QuoteLine] = [ln.model_copy(deep=True) for ln in lines]

    def add_line(self) -> QuoteLine:
        ln = QuoteLine(description="", quantity=1, unit_price=0, vat_rate=DEFAULT_VAT_RATE)
        self.lines.append(ln)
        return ln

    def _index(self, line_id: str) -> int:
        for i, ln in enumerate(self.lines):
            if ln.id == line_id:
                return i
        raise NotFoundError("Ligne", line_id)

    def update_line(self, line_id: str, field: str, value: Any) -> QuoteLine:
        """
        Met à jour un champ. Sur la description, un intitulé exact du catalogue
        impose le prix HT et l'intitulé ; sinon la saisie est conservée telle quelle.
        """
        if field not in EDITABLE_FIELDS:
            raise ValidationError(f"Champ de ligne inconnu : {field}")
        idx = self._index(line_id)
        data = self.lines[idx].model_dump()
        data[field] = value
        if field == "description" and self.catalog is not None:
            training = self.catalog.find_by_title(value)
            if training:
                data["unit_price"] = training.price_ht
                data["description"] = training.title
        try:
            updated = QuoteLine.model_validate(data)
        except ModelError as e:
            raise ValidationError(str(e)) from e
        self.lines[idx] = updated
        return updated

    def remove_line(self, line_id: str) -> None:
        self.lines = [ln for ln in self.lines if ln.id != line_id]

    @property
    def totals(self) -> Totals:
        return compute_totals(self.lines)


# ---------- Service ---------- #

class QuoteService:
    def __init__(
        self,
        store: DataStore,
        catalog: Optional[CatalogService] = None,
        invoices: Optional[InvoiceService] = None,
    ) -> None:
        self.repo = store.quotes
        self.catalog = catalog or CatalogService(store)
        self.invoices = invoices or InvoiceService(store)

    def new_draft(self, lines: Sequence[QuoteLine] = ()) -> QuoteDraft:
        return QuoteDraft(self.catalog, lines)

    # ----- Lecture ----- #

    def list_quotes(self) -> List[Quote]:
        out: List[Quote] = []
        for d in self.repo.list_all():
            try:
                out.append(Quote.from_record(d))
            except ModelError:
                logger.warning("Devis invalide ignoré : %s", d.get("id"))
        return out

    def get_quote(self, quote_id: str) -> Quote:
        d = self.repo.get(quote_id)
        if d is None:
            raise NotFoundError("Devis", quote_id)
        return Quote.from_record(d)

    def list_by_client(self, client_id: str) -> List[Quote]:
        return [q for q in self.list_quotes() if q.client_id == client_id]

    # ----- Numérotation / CRUD ----- #

    def _next_quote_number(self, year: int) -> str:
        return next_number(QUOTE_PREFIX, year, (d.get("number") or "" for d in self.repo.list_all()))

    def save(
        self,
        client_id: str,
        lines: Sequence[QuoteLine],
        issued_on: Optional[date] = None,
        valid_until: Optional[date] = None,
        notes: str = "",
    ) -> Quote:
        if not client_id:
            raise ValidationError("Veuillez sélectionner un client")
        if not lines:
            raise ValidationError("Veuillez ajouter au moins une ligne")
        issued_on = issued_on or date.today()
        q = Quote(
            number=self._next_quote_number(issued_on.year),
            client_id=client_id,
            date=issued_on,
            valid_until=valid_until or in_days(issued_on, VALIDITY_DAYS),
            status=QuoteStatus.SENT,
            items=[ln.model_copy(deep=True) for ln in lines],
            notes=notes,
        )
        q.apply_totals(compute_totals(q.items))
        rec = self.repo.add(q.to_payload())
        logger.info("Devis %s enregistré (%.2f € HT)", q.number, q.total_ht)
        return Quote.from_record(rec)

    def delete_quote(self, quote_id: str) -> bool:
        return self.repo.delete(quote_id)

    # ----- Statut ----- #

    def update_status(self, quote_id: str, status: QuoteStatus) -> Quote:
        q = self.get_quote(quote_id)
        target = QuoteStatus(status)
        if not check_transition("devis", QUOTE_TRANSITIONS, q.status, target):
            return q
        rec = self.repo.update(quote_id, {"status": target.value})
        logger.info("Devis %s : %s → %s", q.number, q.status.value, target.value)
        return Quote.from_record(rec)

    def expire_quotes(self, today: Optional[date] = None) -> List[Quote]:
        """Passe en « Expiré » les devis envoyés dont la validité est dépassée."""
        today = today or date.today()
        return [
            self.update_status(q.id, QuoteStatus.EXPIRED)
            for q in self.list_quotes()
            if q.status == QuoteStatus.SENT and q.valid_until < today
        ]

    # ----- Conversion ----- #

    def convert_to_invoice(self, quote_id: str, issued_on: Optional[date] = None) -> Invoice:
        """
        Transforme un devis envoyé ou accepté en facture, puis force le devis
        en « Accepté » (sans effet s'il l'est déjà).
        """
        q = self.get_quote(quote_id)
        if q.status not in (QuoteStatus.SENT, QuoteStatus.ACCEPTED):
            raise InvalidTransitionError("devis", q.status.value, QuoteStatus.ACCEPTED.value)
        inv = self.invoices.create_from_quote(q, issued_on)
        self.update_status(quote_id, QuoteStatus.ACCEPTED)
        return inv

from __future__ import annotations
import logging
from datetime import date
from typing import List, Optional, Sequence

from pydantic import ValidationError as ModelError

from oris.errors import DuplicateError, NotFoundError, ValidationError
from oris.models.common import in_days
from oris.models.invoice import CREDIT_NOTE, INVOICE, Invoice, InvoiceStatus
from oris.models.quote import Quote, QuoteLine
from oris.services.numbering import (
    CREDIT_NOTE_PREFIX, INVOICE_PREFIX, QUOTE_PREFIX, derive_number, next_number,
)
from oris.services.totals import compute_totals
from oris.services.transitions import INVOICE_TRANSITIONS, check_transition
from oris.storage.store import DataStore

logger = logging.getLogger(__name__)

PAYMENT_TERM_DAYS = 30


class InvoiceService:
    def __init__(self, store: DataStore):
        self.repo = store.invoices

    # ----------- lecture -----------
    def list_invoices(self) -> List[Invoice]:
        out: List[Invoice] = []
        for d in self.repo.list_all():
            try:
                out.append(Invoice.from_record(d))
            except ModelError:
                logger.warning("Facture invalide ignorée : %s", d.get("id"))
        return out

    def get_invoice(self, invoice_id: str) -> Invoice:
        d = self.repo.get(invoice_id)
        if d is None:
            raise NotFoundError("Facture", invoice_id)
        return Invoice.from_record(d)

    def list_by_quote(self, quote_id: str) -> List[Invoice]:
        return [Invoice.from_record(d) for d in self.repo.find(lambda x: x.get("quote_id") == quote_id)]

    def has_credit_note(self, invoice_id: str) -> bool:
        return self.repo.find_one(lambda x: x.get("original_invoice_id") == invoice_id) is not None

    # ----------- numérotation -----------
    def _numbers(self) -> List[str]:
        return [d.get("number") or "" for d in self.repo.list_all()]

    def _next_invoice_number(self, year: int) -> str:
        return next_number(INVOICE_PREFIX, year, self._numbers())

    # ----------- création -----------
    def create_invoice(
        self,
        client_id: str,
        lines: Sequence[QuoteLine],
        issued_on: Optional[date] = None,
        due_date: Optional[date] = None,
    ) -> Invoice:
        """Facture directe (hors devis)."""
        if not client_id:
            raise ValidationError("Veuillez sélectionner un client")
        if not lines:
            raise ValidationError("Veuillez ajouter au moins une ligne")
        issued_on = issued_on or date.today()
        items = [ln.model_copy(deep=True) for ln in lines]
        inv = Invoice(
            number=self._next_invoice_number(issued_on.year),
            type=INVOICE,
            client_id=client_id,
            date=issued_on,
            due_date=due_date or in_days(issued_on, PAYMENT_TERM_DAYS),
            status=InvoiceStatus.PENDING,
            items=items,
        )
        totals = compute_totals(items)
        inv.total_ht, inv.total_vat, inv.total_ttc = totals.ht, totals.vat, totals.ttc
        rec = self.repo.add(inv.to_payload())
        logger.info("Facture %s créée", inv.number)
        return Invoice.from_record(rec)

    def create_from_quote(self, quote: Quote, issued_on: Optional[date] = None) -> Invoice:
        """
        Facture issue d'un devis : lignes copiées, totaux repris du devis,
        échéance à 30 jours. Une seule facture par devis (contrainte du dépôt).
        """
        issued_on = issued_on or date.today()
        number = derive_number(quote.number, QUOTE_PREFIX, INVOICE_PREFIX)
        if number in self._numbers():
            fallback = self._next_invoice_number(issued_on.year)
            logger.warning("Numéro %s déjà utilisé, attribution de %s", number, fallback)
            number = fallback
        inv = Invoice(
            number=number,
            type=INVOICE,
            quote_id=quote.id,
            client_id=quote.client_id,
            date=issued_on,
            due_date=in_days(issued_on, PAYMENT_TERM_DAYS),
            status=InvoiceStatus.PENDING,
            items=[ln.model_copy(deep=True) for ln in quote.items],
            total_ht=quote.total_ht,
            total_vat=quote.total_vat,
            total_ttc=quote.total_ttc,
        )
        try:
            rec = self.repo.add(inv.to_payload(), unique="quote_id", where={"type": INVOICE})
        except DuplicateError as e:
            raise DuplicateError(f"Le devis {quote.number} a déjà été facturé.") from e
        logger.info("Devis %s converti en facture %s", quote.number, number)
        return Invoice.from_record(rec)

    # ----------- statut -----------
    def update_status(self, invoice_id: str, status: InvoiceStatus) -> Invoice:
        inv = self.get_invoice(invoice_id)
        target = InvoiceStatus(status)
        if not check_transition("facture", INVOICE_TRANSITIONS, inv.status, target):
            return inv
        rec = self.repo.update(invoice_id, {"status": target.value})
        logger.info("Facture %s : %s → %s", inv.number, inv.status.value, target.value)
        return Invoice.from_record(rec)

    def mark_overdue(self, today: Optional[date] = None) -> List[Invoice]:
        """Passe en retard les factures à payer dont l'échéance est dépassée."""
        today = today or date.today()
        changed: List[Invoice] = []
        for inv in self.list_invoices():
            if inv.type == INVOICE and inv.status == InvoiceStatus.PENDING and inv.due_date < today:
                changed.append(self.update_status(inv.id, InvoiceStatus.OVERDUE))
        return changed

    # ----------- avoirs -----------
    def create_credit_note(self, invoice_id: str, today: Optional[date] = None) -> Invoice:
        """
        Avoir : copie de la facture (lignes et totaux repris tels quels),
        daté du jour et considéré comme réglé. La facture d'origine n'est
        jamais modifiée. Un seul avoir par facture.
        """
        original = self.get_invoice(invoice_id)
        if original.is_credit_note:
            raise ValidationError("Impossible de créer un avoir sur un avoir.")
        if self.has_credit_note(invoice_id):
            raise DuplicateError("Un avoir existe déjà pour cette facture.")

        note = original.model_copy(deep=True, update={
            "id": "",
            "number": derive_number(original.number, INVOICE_PREFIX, CREDIT_NOTE_PREFIX),
            "type": CREDIT_NOTE,
            "original_invoice_id": original.id,
            "original_invoice_number": original.number,
            "date": today or date.today(),
            "status": InvoiceStatus.PAID,
        })
        try:
            rec = self.repo.add(note.to_payload(), unique="original_invoice_id")
        except DuplicateError as e:
            raise DuplicateError("Un avoir existe déjà pour cette facture.") from e
        logger.info("Avoir %s créé pour %s", note.number, original.number)
        return Invoice.from_record(rec)

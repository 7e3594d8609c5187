from datetime import date

import pytest

from oris.errors import DuplicateError, InvalidTransitionError, NotFoundError, ValidationError
from oris.models.invoice import INVOICE, InvoiceStatus
from oris.models.quote import QuoteStatus


# ---------- QuoteDraft ----------

def test_draft_new_line_defaults(quotes):
    draft = quotes.new_draft()
    ln = draft.add_line()
    assert (ln.description, ln.quantity, ln.unit_price, ln.vat_rate) == ("", 1, 0, 20)
    assert draft.totals.ht == 0


def test_draft_catalog_title_sets_price(quotes, training):
    draft = quotes.new_draft()
    ln = draft.add_line()
    updated = draft.update_line(ln.id, "description", training.title)
    assert updated.unit_price == 850
    assert updated.description == training.title
    assert draft.totals.ttc == pytest.approx(1020)


def test_draft_unknown_title_keeps_text_and_price(quotes, training):
    draft = quotes.new_draft()
    ln = draft.add_line()
    draft.update_line(ln.id, "unit_price", 99)
    updated = draft.update_line(ln.id, "description", "habilitation électrique br/b2v/bc")
    assert updated.unit_price == 99
    assert updated.description == "habilitation électrique br/b2v/bc"


def test_draft_rejects_bad_values(quotes):
    draft = quotes.new_draft()
    ln = draft.add_line()
    with pytest.raises(ValidationError):
        draft.update_line(ln.id, "vat_rate", 7)
    with pytest.raises(ValidationError):
        draft.update_line(ln.id, "quantity", -1)
    with pytest.raises(ValidationError):
        draft.update_line(ln.id, "id", "x")
    with pytest.raises(NotFoundError):
        draft.update_line("missing", "quantity", 2)


def test_draft_remove_line_recomputes_totals(quotes):
    draft = quotes.new_draft()
    a = draft.add_line()
    b = draft.add_line()
    draft.update_line(a.id, "unit_price", 100)
    draft.update_line(b.id, "unit_price", 50)
    assert draft.totals.ht == 150
    draft.remove_line(a.id)
    assert draft.totals.ht == 50
    assert [ln.id for ln in draft.lines] == [b.id]


# ---------- Enregistrement ----------

def test_save_requires_client_and_lines(quotes, client, lines):
    with pytest.raises(ValidationError, match="Veuillez sélectionner un client"):
        quotes.save("", lines)
    with pytest.raises(ValidationError, match="Veuillez ajouter au moins une ligne"):
        quotes.save(client.id, [])
    assert quotes.list_quotes() == []


def test_save_numbers_sends_and_totals(quotes, client, lines):
    q1 = quotes.save(client.id, lines, issued_on=date(2024, 5, 10))
    q2 = quotes.save(client.id, lines, issued_on=date(2024, 5, 12))
    assert q1.number == "DEV-2024-001"
    assert q2.number == "DEV-2024-002"
    assert q1.status == QuoteStatus.SENT
    assert q1.valid_until == date(2024, 6, 9)
    assert q1.total_ht == 2650
    assert q1.total_vat == pytest.approx(530)
    assert q1.total_ttc == q1.total_ht + q1.total_vat
    assert {q.number for q in quotes.list_quotes()} == {"DEV-2024-001", "DEV-2024-002"}


def test_numbering_never_reuses_after_delete(quotes, client, lines):
    q1 = quotes.save(client.id, lines, issued_on=date(2024, 1, 1))
    q2 = quotes.save(client.id, lines, issued_on=date(2024, 1, 2))
    quotes.delete_quote(q1.id)
    q3 = quotes.save(client.id, lines, issued_on=date(2024, 1, 3))
    assert q3.number == "DEV-2024-003"


# ---------- Statuts ----------

def test_status_machine(quotes, sent_quote):
    accepted = quotes.update_status(sent_quote.id, QuoteStatus.ACCEPTED)
    assert accepted.status == QuoteStatus.ACCEPTED
    # no-op sur le même statut
    assert quotes.update_status(sent_quote.id, QuoteStatus.ACCEPTED).status == QuoteStatus.ACCEPTED
    with pytest.raises(InvalidTransitionError):
        quotes.update_status(sent_quote.id, QuoteStatus.DRAFT)


def test_expire_quotes(quotes, client, lines):
    old = quotes.save(client.id, lines, issued_on=date(2024, 1, 1))
    fresh = quotes.save(client.id, lines, issued_on=date(2024, 3, 1))
    expired = quotes.expire_quotes(today=date(2024, 3, 5))
    assert [q.id for q in expired] == [old.id]
    assert quotes.get_quote(old.id).status == QuoteStatus.EXPIRED
    assert quotes.get_quote(fresh.id).status == QuoteStatus.SENT


# ---------- Conversion ----------

def test_convert_preserves_items_and_sets_due_date(quotes, sent_quote):
    inv = quotes.convert_to_invoice(sent_quote.id, issued_on=date(2024, 5, 20))
    assert inv.number == "FAC-2024-001"
    assert inv.type == INVOICE
    assert inv.quote_id == sent_quote.id
    assert inv.client_id == sent_quote.client_id
    assert inv.items == sent_quote.items
    assert (inv.total_ht, inv.total_vat, inv.total_ttc) == (
        sent_quote.total_ht, sent_quote.total_vat, sent_quote.total_ttc)
    assert inv.date == date(2024, 5, 20)
    assert inv.due_date == date(2024, 6, 19)
    assert inv.status == InvoiceStatus.PENDING
    assert quotes.get_quote(sent_quote.id).status == QuoteStatus.ACCEPTED


def test_convert_twice_is_refused(quotes, invoices, sent_quote):
    quotes.convert_to_invoice(sent_quote.id)
    with pytest.raises(DuplicateError):
        quotes.convert_to_invoice(sent_quote.id)
    assert len(invoices.list_by_quote(sent_quote.id)) == 1


def test_convert_refused_quote_is_invalid(quotes, sent_quote):
    quotes.update_status(sent_quote.id, QuoteStatus.REJECTED)
    with pytest.raises(InvalidTransitionError):
        quotes.convert_to_invoice(sent_quote.id)


def test_convert_falls_back_when_derived_number_taken(quotes, invoices, client, lines, sent_quote):
    invoices.create_invoice(client.id, lines, issued_on=date(2024, 5, 1))  # FAC-2024-001
    inv = quotes.convert_to_invoice(sent_quote.id, issued_on=date(2024, 5, 20))
    assert inv.number == "FAC-2024-002"

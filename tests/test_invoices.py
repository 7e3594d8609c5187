from datetime import date

import pytest

from oris.errors import DuplicateError, InvalidTransitionError, NotFoundError, ValidationError
from oris.models.invoice import CREDIT_NOTE, InvoiceStatus


@pytest.fixture
def invoice(invoices, client, lines):
    return invoices.create_invoice(client.id, lines, issued_on=date(2024, 6, 1))


def test_create_invoice_numbers_and_due_date(invoices, client, lines, invoice):
    assert invoice.number == "FAC-2024-001"
    assert invoice.due_date == date(2024, 7, 1)
    assert invoice.status == InvoiceStatus.PENDING
    assert invoice.total_ht == 2650
    second = invoices.create_invoice(client.id, lines, issued_on=date(2024, 6, 2))
    assert second.number == "FAC-2024-002"


def test_create_invoice_requires_client_and_lines(invoices, client, lines):
    with pytest.raises(ValidationError):
        invoices.create_invoice("", lines)
    with pytest.raises(ValidationError):
        invoices.create_invoice(client.id, [])


def test_credit_note_copies_invoice(invoices, invoice):
    note = invoices.create_credit_note(invoice.id, today=date(2024, 6, 15))
    assert note.id != invoice.id
    assert note.type == CREDIT_NOTE
    assert note.is_credit_note
    assert note.number == "AVR-2024-001"
    assert note.original_invoice_id == invoice.id
    assert note.original_invoice_number == "FAC-2024-001"
    assert note.status == InvoiceStatus.PAID
    assert note.date == date(2024, 6, 15)
    assert note.items == invoice.items
    assert note.total_ttc == invoice.total_ttc
    assert note.signed_total_ht == -invoice.total_ht
    # la facture d'origine est intacte
    assert invoices.get_invoice(invoice.id) == invoice


def test_second_credit_note_is_refused(invoices, invoice):
    invoices.create_credit_note(invoice.id)
    with pytest.raises(DuplicateError):
        invoices.create_credit_note(invoice.id)
    assert len(invoices.list_invoices()) == 2


def test_credit_note_on_credit_note_is_refused(invoices, invoice):
    note = invoices.create_credit_note(invoice.id)
    with pytest.raises(ValidationError):
        invoices.create_credit_note(note.id)


def test_credit_note_for_unknown_invoice(invoices):
    with pytest.raises(NotFoundError):
        invoices.create_credit_note("inconnue")


def test_status_transitions(invoices, invoice):
    paid = invoices.update_status(invoice.id, InvoiceStatus.PAID)
    assert paid.status == InvoiceStatus.PAID
    with pytest.raises(InvalidTransitionError):
        invoices.update_status(invoice.id, InvoiceStatus.PENDING)


def test_mark_overdue_only_touches_pending_invoices(invoices, client, lines, invoice):
    paid = invoices.create_invoice(client.id, lines, issued_on=date(2024, 5, 1))
    invoices.update_status(paid.id, InvoiceStatus.PAID)
    invoices.create_credit_note(paid.id, today=date(2024, 5, 2))
    recent = invoices.create_invoice(client.id, lines, issued_on=date(2024, 7, 20))

    changed = invoices.mark_overdue(today=date(2024, 7, 25))
    assert [i.id for i in changed] == [invoice.id]
    assert invoices.get_invoice(invoice.id).status == InvoiceStatus.OVERDUE
    assert invoices.get_invoice(recent.id).status == InvoiceStatus.PENDING
    assert invoices.get_invoice(paid.id).status == InvoiceStatus.PAID
    # idempotent
    assert invoices.mark_overdue(today=date(2024, 7, 25)) == []

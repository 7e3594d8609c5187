from datetime import date
from pathlib import Path

import pytest

from oris.errors import NotFoundError, RenderError
from oris.services import document_service
from oris.services.document_service import (
    MIN_ATTENDANCE_ROWS, NO_TRAINEE_MESSAGE, _clean_path, date_fr, day_header, eur,
)


@pytest.fixture
def session(sessions, training, client):
    return sessions.schedule(
        training.id, client.id, date(2024, 6, 10), date(2024, 6, 12),
        trainer="Marc Voltaire", location="Grenoble", trainees_count=2,
    )


@pytest.fixture
def no_pdf_engine(monkeypatch):
    monkeypatch.setattr(document_service, "_find_wkhtmltopdf", lambda configured=None: None)

    def fail(html, out_path, base_url):
        raise RenderError("WeasyPrint indisponible")

    monkeypatch.setattr(document_service, "_render_with_weasyprint", fail)


# ---------- Formats ----------

def test_formats():
    assert eur(1234.5) == "1 234,50 €"
    assert eur(None) == "0,00 €"
    assert date_fr(date(2024, 6, 1)) == "01/06/2024"
    assert date_fr(None) == ""
    assert day_header(date(2024, 6, 10)) == "lun. 10 juin"


def test_clean_path():
    assert _clean_path("") == ""
    assert _clean_path('"/usr/local/bin/wkhtmltopdf"') == "/usr/local/bin/wkhtmltopdf"


# ---------- Devis / factures ----------

def test_quote_view(documents, sent_quote):
    view = documents.quote_view(sent_quote.id)
    assert view.kind == "DEVIS"
    assert not view.is_invoice
    assert view.title == "DEVIS_DEV-2024-001_IRTEC Réseaux"
    assert view.filename == "Devis-DEV-2024-001.pdf"
    assert view.valid_until == date(2024, 6, 9)
    assert [ln.total_ht for ln in view.lines] == [2500, 150]
    assert view.company.name == "ORIS FORMATION"


def test_credit_note_view_and_html(documents, quotes, invoices, sent_quote):
    inv = quotes.convert_to_invoice(sent_quote.id, issued_on=date(2024, 5, 20))
    note = invoices.create_credit_note(inv.id, today=date(2024, 6, 1))
    view = documents.invoice_view(note.id)
    assert view.kind == "AVOIR"
    assert view.is_invoice
    assert view.net_label == "Net à déduire"
    assert view.filename == "Avoir-AVR-2024-001.pdf"
    html = documents.render_html(view)
    assert "Annule la facture N° FAC-2024-001" in html
    assert "Net à déduire" in html
    assert "BON POUR ACCORD" not in html
    assert "3 180,00 €" in html


def test_quote_html_has_signature_block(documents, sent_quote):
    html = documents.render_html(documents.quote_view(sent_quote.id))
    assert "BON POUR ACCORD" in html
    assert "DEV-2024-001" in html


def test_unknown_quote(documents):
    with pytest.raises(NotFoundError):
        documents.quote_view("inconnu")


# ---------- Émargement / attestations ----------

def test_attendance_sheet_pads_rows(documents, sessions, session):
    sessions.add_trainee(session.id, "Alice Martin")
    sheet = documents.attendance_sheet(session.id)
    assert len(sheet.rows) == MIN_ATTENDANCE_ROWS
    assert sheet.rows[0] == "Alice Martin"
    assert sheet.rows[1:] == [""] * (MIN_ATTENDANCE_ROWS - 1)
    assert sheet.days == [date(2024, 6, 10), date(2024, 6, 11), date(2024, 6, 12)]
    assert sheet.duration_hours == 21
    assert sheet.title == "EMARGEMENT_HAB-B2V_2024-06-10"
    assert sheet.filename == "Emargement-HAB-B2V.pdf"
    html = documents.render_html(sheet)
    assert html.count("Après-midi") == 3
    assert "mer. 12 juin" in html


def test_attendance_sheet_keeps_long_rosters(documents, sessions, session):
    for i in range(12):
        sessions.add_trainee(session.id, f"Stagiaire {i}")
    assert len(documents.attendance_sheet(session.id).rows) == 12


def test_certificates_without_trainees(documents, session):
    certs = documents.certificate_set(session.id)
    assert certs.is_empty
    assert certs.empty_message == NO_TRAINEE_MESSAGE
    html = documents.render_html(certs)
    assert NO_TRAINEE_MESSAGE in html
    assert "ATTESTATION" not in html.split("<body", 1)[1]


def test_one_certificate_per_trainee(documents, sessions, session):
    sessions.add_trainee(session.id, "Alice Martin")
    sessions.add_trainee(session.id, "Bob Durand")
    certs = documents.certificate_set(session.id)
    assert certs.empty_message is None
    assert certs.filename == "Attestations-HAB-B2V.pdf"
    html = documents.render_html(certs)
    assert html.count('class="certificate"') == 2
    assert "Bob Durand" in html
    assert "21.0 heures" in html


# ---------- Export ----------

def test_export_pdf_without_engine_raises(documents, sent_quote, no_pdf_engine):
    with pytest.raises(RenderError):
        documents.export_pdf(documents.quote_view(sent_quote.id))


def test_export_or_print_falls_back_to_html(documents, sent_quote, no_pdf_engine):
    path, is_pdf = documents.export_or_print(documents.quote_view(sent_quote.id))
    assert not is_pdf
    assert path.suffix == ".html"
    assert path.parent == documents.exports_dir / "impression"
    assert "DEV-2024-001" in path.read_text(encoding="utf-8")


def test_export_pdf_uses_wkhtmltopdf(documents, sent_quote, monkeypatch, tmp_path):
    calls = {}
    monkeypatch.setattr(document_service, "_find_wkhtmltopdf", lambda configured=None: "/opt/wkhtmltopdf")
    monkeypatch.setattr(document_service.pdfkit, "configuration", lambda wkhtmltopdf: wkhtmltopdf)

    def fake_from_string(html, out, options=None, configuration=None):
        calls["binary"] = configuration
        calls["title"] = options["title"]
        Path(out).write_bytes(b"%PDF-1.4")
        return True

    monkeypatch.setattr(document_service.pdfkit, "from_string", fake_from_string)
    out = documents.export_pdf(documents.quote_view(sent_quote.id), out_dir=tmp_path / "pdf")
    assert out == tmp_path / "pdf" / "Devis-DEV-2024-001.pdf"
    assert out.read_bytes().startswith(b"%PDF")
    assert calls == {"binary": "/opt/wkhtmltopdf", "title": "DEVIS_DEV-2024-001_IRTEC Réseaux"}


def test_export_pdf_falls_back_to_weasyprint(documents, sent_quote, monkeypatch):
    monkeypatch.setattr(document_service, "_find_wkhtmltopdf", lambda configured=None: "/opt/wkhtmltopdf")
    monkeypatch.setattr(document_service.pdfkit, "configuration", lambda wkhtmltopdf: wkhtmltopdf)

    def broken(*args, **kwargs):
        raise OSError("wkhtmltopdf a planté")

    used = []

    def fake_weasy(html, out_path, base_url):
        used.append(out_path)
        out_path.write_bytes(b"%PDF-1.7")

    monkeypatch.setattr(document_service.pdfkit, "from_string", broken)
    monkeypatch.setattr(document_service, "_render_with_weasyprint", fake_weasy)
    path, is_pdf = documents.export_or_print(documents.quote_view(sent_quote.id))
    assert is_pdf
    assert used == [path]

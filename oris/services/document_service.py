from __future__ import annotations
import logging
import os
import re
import datetime as dt
from pathlib import Path
from shutil import which
from typing import List, Literal, Optional, Tuple, Union

import pdfkit
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import BaseModel

from oris.errors import RenderError
from oris.models.client import Client
from oris.models.invoice import Invoice
from oris.models.quote import Quote
from oris.models.session import Session
from oris.models.settings import CompanySettings
from oris.models.training import HOURS_PER_DAY, TrainingModule
from oris.services.catalog_service import CatalogService
from oris.services.client_service import ClientService
from oris.services.invoice_service import InvoiceService
from oris.services.quote_service import QuoteService
from oris.services.session_service import SessionService, session_days
from oris.services.settings_service import SettingsService
from oris.storage.store import DataStore

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates" / "pdf"

MIN_ATTENDANCE_ROWS = 10
NO_TRAINEE_MESSAGE = "Aucun stagiaire enregistré pour cette session."

DAYS_FR = ["lun.", "mar.", "mer.", "jeu.", "ven.", "sam.", "dim."]
MONTHS_FR = ["janv.", "févr.", "mars", "avr.", "mai", "juin",
             "juil.", "août", "sept.", "oct.", "nov.", "déc."]

DocumentKind = Literal["DEVIS", "FACTURE", "AVOIR"]


# ---------- Formats ----------

def eur(value: float) -> str:
    """1234.5 -> '1 234,50 €'"""
    txt = f"{float(value or 0):,.2f}".replace(",", " ").replace(".", ",")
    return f"{txt} €"


def date_fr(d: Optional[dt.date]) -> str:
    return d.strftime("%d/%m/%Y") if d else ""


def day_header(d: dt.date) -> str:
    return f"{DAYS_FR[d.weekday()]} {d.day} {MONTHS_FR[d.month - 1]}"


def _slug(text: str) -> str:
    text = (text or "").strip()
    text = re.sub(r'[\\/:*?"<>|\n\r\t]', "_", text)
    text = re.sub(r"\s+", " ", text)
    return text or "Client"


# ---------- Vues des documents ----------

class LineView(BaseModel):
    description: str
    quantity: float
    unit_price: float
    vat_rate: float
    total_ht: float


class BillingDocumentView(BaseModel):
    kind: DocumentKind
    number: str
    date: dt.date
    valid_until: Optional[dt.date] = None
    original_invoice_number: Optional[str] = None
    company: CompanySettings
    client: Client
    lines: List[LineView]
    total_ht: float
    total_vat: float
    total_ttc: float

    @property
    def is_invoice(self) -> bool:
        return self.kind in ("FACTURE", "AVOIR")

    @property
    def net_label(self) -> str:
        return "Net à déduire" if self.kind == "AVOIR" else "Net à payer"

    @property
    def title(self) -> str:
        return f"{self.kind}_{self.number}_{self.client.name or 'Client'}"

    @property
    def filename(self) -> str:
        label = {"DEVIS": "Devis", "FACTURE": "Facture", "AVOIR": "Avoir"}[self.kind]
        return f"{label}-{self.number}.pdf"


class AttendanceSheet(BaseModel):
    company: CompanySettings
    client: Client
    training: TrainingModule
    session: Session
    days: List[dt.date]
    rows: List[str]          # noms, puis lignes vides ("")

    @property
    def duration_hours(self) -> float:
        return self.training.duration_days * HOURS_PER_DAY

    @property
    def title(self) -> str:
        return f"EMARGEMENT_{self.training.reference}_{self.session.start_date.isoformat()}"

    @property
    def filename(self) -> str:
        return f"Emargement-{self.training.reference}.pdf"


class CertificateSet(BaseModel):
    company: CompanySettings
    client: Client
    training: TrainingModule
    session: Session
    trainees: List[str]

    @property
    def is_empty(self) -> bool:
        return not self.trainees

    @property
    def empty_message(self) -> Optional[str]:
        return NO_TRAINEE_MESSAGE if self.is_empty else None

    @property
    def duration_hours(self) -> float:
        return self.training.duration_days * HOURS_PER_DAY

    @property
    def title(self) -> str:
        return f"ATTESTATIONS_{self.training.reference}_{self.session.start_date.isoformat()}"

    @property
    def filename(self) -> str:
        return f"Attestations-{self.training.reference}.pdf"


DocumentView = Union[BillingDocumentView, AttendanceSheet, CertificateSet]

TEMPLATE_FOR = {
    BillingDocumentView: "document.html",
    AttendanceSheet: "attendance.html",
    CertificateSet: "certificates.html",
}


# ---------- PDF helpers ----------

def _clean_path(p: str) -> str:
    """Corrige 'C\\:\\Program Files\\...' -> 'C:\\Program Files\\...' et normalise."""
    if not p:
        return ""
    p = p.strip().strip('"').strip("'")
    p = p.replace("\\:", ":")
    return os.path.normpath(p)


def _find_wkhtmltopdf(configured: Optional[str] = None) -> Optional[str]:
    """
    Localise wkhtmltopdf :
    - chemin configuré (WKHTMLTOPDF_PATH)
    - chemins Windows connus
    - PATH
    """
    if configured:
        path = _clean_path(configured)
        if Path(path).is_file():
            return path
        logger.warning("wkhtmltopdf introuvable à l'emplacement configuré : %s", path)

    candidates = [
        r"C:\Program Files\wkhtmltopdf\bin\wkhtmltopdf.exe",
        r"C:\Program Files (x86)\wkhtmltopdf\bin\wkhtmltopdf.exe",
    ]
    for c in candidates:
        if Path(c).is_file():
            return c

    found = which("wkhtmltopdf")
    return _clean_path(found) if found else None


def _render_with_weasyprint(html: str, out_path: Path, base_url: str) -> None:
    """Fallback WeasyPrint (si wkhtmltopdf absent ou en échec)."""
    try:
        from weasyprint import HTML
    except (ImportError, OSError) as e:
        raise RenderError(
            "Aucun wkhtmltopdf utilisable et WeasyPrint indisponible. "
            f"Utilisez l'impression navigateur. Détails : {e}"
        ) from e
    try:
        HTML(string=html, base_url=base_url).write_pdf(str(out_path))
    except Exception as e:
        raise RenderError(f"Échec WeasyPrint : {e}") from e


def build_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["eur"] = eur
    env.filters["date_fr"] = date_fr
    env.filters["day_header"] = day_header
    return env


# ---------- Service ----------

class DocumentService:
    """
    Projections des documents imprimables et rendu HTML/PDF.
    Le PDF passe par wkhtmltopdf (pdfkit) puis WeasyPrint ; si les deux
    échouent, `RenderError` est levée et l'appelant se rabat sur
    `print_fallback` (page HTML ouverte dans le navigateur).
    """

    def __init__(
        self,
        store: DataStore,
        exports_dir: Union[str, Path],
        wkhtmltopdf_path: Optional[str] = None,
        templates_dir: Path = TEMPLATES_DIR,
    ) -> None:
        self.exports_dir = Path(exports_dir)
        self.wkhtmltopdf_path = wkhtmltopdf_path
        self.templates_dir = templates_dir
        self.env = build_environment(templates_dir)
        self.clients = ClientService(store)
        self.catalog = CatalogService(store)
        self.invoices = InvoiceService(store)
        self.quotes = QuoteService(store, catalog=self.catalog, invoices=self.invoices)
        self.sessions = SessionService(store)
        self.settings = SettingsService(store)

    # ----- projections ----- #

    @staticmethod
    def _lines(doc: Union[Quote, Invoice]) -> List[LineView]:
        return [
            LineView(
                description=ln.description,
                quantity=ln.quantity,
                unit_price=ln.unit_price,
                vat_rate=ln.vat_rate,
                total_ht=ln.total_ht,
            )
            for ln in doc.items
        ]

    def quote_view(self, quote_id: str) -> BillingDocumentView:
        q = self.quotes.get_quote(quote_id)
        return BillingDocumentView(
            kind="DEVIS",
            number=q.number,
            date=q.date,
            valid_until=q.valid_until,
            company=self.settings.load(),
            client=self.clients.get(q.client_id),
            lines=self._lines(q),
            total_ht=q.total_ht,
            total_vat=q.total_vat,
            total_ttc=q.total_ttc,
        )

    def invoice_view(self, invoice_id: str) -> BillingDocumentView:
        inv = self.invoices.get_invoice(invoice_id)
        return BillingDocumentView(
            kind="AVOIR" if inv.is_credit_note else "FACTURE",
            number=inv.number,
            date=inv.date,
            original_invoice_number=inv.original_invoice_number,
            company=self.settings.load(),
            client=self.clients.get(inv.client_id),
            lines=self._lines(inv),
            total_ht=inv.total_ht,
            total_vat=inv.total_vat,
            total_ttc=inv.total_ttc,
        )

    def _session_context(self, session_id: str):
        s = self.sessions.get(session_id)
        return s, self.clients.get(s.client_id), self.catalog.get(s.training_id)

    def attendance_sheet(self, session_id: str) -> AttendanceSheet:
        s, client, training = self._session_context(session_id)
        names = [t.name for t in s.trainees]
        blanks = max(0, MIN_ATTENDANCE_ROWS - len(names))
        return AttendanceSheet(
            company=self.settings.load(),
            client=client,
            training=training,
            session=s,
            days=session_days(s.start_date, s.end_date),
            rows=names + [""] * blanks,
        )

    def certificate_set(self, session_id: str) -> CertificateSet:
        s, client, training = self._session_context(session_id)
        return CertificateSet(
            company=self.settings.load(),
            client=client,
            training=training,
            session=s,
            trainees=[t.name for t in s.trainees],
        )

    # ----- rendu ----- #

    def render_html(self, view: DocumentView) -> str:
        tpl = self.env.get_template(TEMPLATE_FOR[type(view)])
        return tpl.render(doc=view, company=view.company, title=view.title)

    def export_pdf(self, view: DocumentView, out_dir: Optional[Union[str, Path]] = None) -> Path:
        """
        Génère le PDF.
        Essaie wkhtmltopdf (pdfkit) en priorité, sinon fallback WeasyPrint.
        """
        html = self.render_html(view)
        target = Path(out_dir) if out_dir else self.exports_dir
        target.mkdir(parents=True, exist_ok=True)
        out_path = target / view.filename
        base_url = str(self.templates_dir.resolve())

        wkhtml = _find_wkhtmltopdf(self.wkhtmltopdf_path)
        if wkhtml:
            try:
                config = pdfkit.configuration(wkhtmltopdf=wkhtml)
                options = {
                    "enable-local-file-access": None,
                    "quiet": "",
                    "encoding": "UTF-8",
                    "title": view.title,
                }
                pdfkit.from_string(html, str(out_path), options=options, configuration=config)
                logger.info("PDF généré (wkhtmltopdf) : %s", out_path)
                return out_path
            except (IOError, OSError) as e:
                logger.warning("Échec wkhtmltopdf (%s). Fallback WeasyPrint...", e)

        _render_with_weasyprint(html, out_path, base_url=base_url)
        logger.info("PDF généré (WeasyPrint) : %s", out_path)
        return out_path

    def print_fallback(self, view: DocumentView) -> Path:
        """Écrit la page HTML à imprimer depuis le navigateur (Enregistrer au format PDF)."""
        target = self.exports_dir / "impression"
        target.mkdir(parents=True, exist_ok=True)
        path = target / f"{_slug(view.title)}.html"
        path.write_text(self.render_html(view), encoding="utf-8")
        logger.info("Page d'impression écrite : %s", path)
        return path

    def export_or_print(self, view: DocumentView) -> Tuple[Path, bool]:
        """Retourne (chemin, est_pdf)."""
        try:
            return self.export_pdf(view), True
        except RenderError as e:
            logger.warning("PDF indisponible, bascule sur l'impression : %s", e)
            return self.print_fallback(view), False

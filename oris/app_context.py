from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from oris.config import Settings, get_settings
from oris.services.calendar_service import CalendarService
from oris.services.catalog_service import CatalogService
from oris.services.certification_service import CertificationService
from oris.services.client_service import ClientService
from oris.services.dashboard_service import DashboardService
from oris.services.document_service import DocumentService
from oris.services.invoice_service import InvoiceService
from oris.services.quote_service import QuoteService
from oris.services.seed_service import SeedService
from oris.services.session_service import SessionService
from oris.services.settings_service import SettingsService
from oris.storage.store import DataStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Services partageant le même DataStore (injecté partout)."""

    settings: Settings
    store: DataStore
    clients: ClientService
    catalog: CatalogService
    invoices: InvoiceService
    quotes: QuoteService
    sessions: SessionService
    certifications: CertificationService
    company: SettingsService
    dashboard: DashboardService
    documents: DocumentService
    calendar: CalendarService
    seed: SeedService

    @classmethod
    def build(cls, settings: Optional[Settings] = None, store: Optional[DataStore] = None) -> "AppContext":
        settings = settings or get_settings()
        if store is None:
            logger.info("Données : %s", settings.data_dir)
            store = DataStore.from_directory(settings.data_dir)

        clients = ClientService(store)
        catalog = CatalogService(store)
        invoices = InvoiceService(store)
        quotes = QuoteService(store, catalog=catalog, invoices=invoices)
        sessions = SessionService(store)
        certifications = CertificationService(store, clients=clients)
        return cls(
            settings=settings,
            store=store,
            clients=clients,
            catalog=catalog,
            invoices=invoices,
            quotes=quotes,
            sessions=sessions,
            certifications=certifications,
            company=SettingsService(store),
            dashboard=DashboardService(
                store, invoices=invoices, quotes=quotes,
                sessions=sessions, certifications=certifications,
            ),
            documents=DocumentService(store, settings.exports_dir, settings.wkhtmltopdf_path),
            calendar=CalendarService(store, settings.exports_dir),
            seed=SeedService(store),
        )

    def refresh_statuses(self) -> None:
        """Échéances du jour : devis expirés, factures en retard."""
        expired = self.quotes.expire_quotes()
        overdue = self.invoices.mark_overdue()
        if expired or overdue:
            logger.info("%d devis expiré(s), %d facture(s) en retard", len(expired), len(overdue))

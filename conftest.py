import os
import sys
from datetime import date
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# racine du projet importable sans installation
sys.path.append(str(Path(__file__).resolve().parent))

from oris.models.client import Client, ClientStatus
from oris.models.quote import QuoteLine
from oris.models.training import TrainingCategory, TrainingModule
from oris.services.catalog_service import CatalogService
from oris.services.certification_service import CertificationService
from oris.services.client_service import ClientService
from oris.services.dashboard_service import DashboardService
from oris.services.document_service import DocumentService
from oris.services.invoice_service import InvoiceService
from oris.services.quote_service import QuoteService
from oris.services.session_service import SessionService
from oris.services.settings_service import SettingsService
from oris.storage.store import DataStore


@pytest.fixture
def store():
    return DataStore.in_memory()


@pytest.fixture
def clients(store):
    return ClientService(store)


@pytest.fixture
def catalog(store):
    return CatalogService(store)


@pytest.fixture
def invoices(store):
    return InvoiceService(store)


@pytest.fixture
def quotes(store, catalog, invoices):
    return QuoteService(store, catalog=catalog, invoices=invoices)


@pytest.fixture
def sessions(store):
    return SessionService(store)


@pytest.fixture
def certifications(store, clients):
    return CertificationService(store, clients=clients)


@pytest.fixture
def company(store):
    return SettingsService(store)


@pytest.fixture
def dashboard(store, invoices, quotes, sessions, certifications):
    return DashboardService(store, invoices=invoices, quotes=quotes,
                            sessions=sessions, certifications=certifications)


@pytest.fixture
def documents(store, tmp_path):
    return DocumentService(store, tmp_path / "exports")


@pytest.fixture
def client(clients):
    return clients.add_client(Client(
        name="IRTEC Réseaux",
        address="45 Avenue des Transformateurs",
        zip="38000",
        city="Grenoble",
        contact_name="Jean Dupont",
        email="j.dupont@irtec-reseaux.fr",
        phone="06 12 34 56 78",
        vat_number="FR 88 987654321",
        status=ClientStatus.CLIENT,
    ))


@pytest.fixture
def training(catalog):
    return catalog.add_training(TrainingModule(
        reference="HAB-B2V",
        title="Habilitation Électrique BR/B2V/BC",
        category=TrainingCategory.HABILITATION,
        duration_days=3,
        price_ht=850,
    ))


@pytest.fixture
def lines():
    return [
        QuoteLine(description="Formation Habilitation BR/B2V/BC", quantity=1, unit_price=2500, vat_rate=20),
        QuoteLine(description="Frais de déplacement (Forfait)", quantity=1, unit_price=150, vat_rate=20),
    ]


@pytest.fixture
def sent_quote(quotes, client, lines):
    return quotes.save(client.id, lines, issued_on=date(2024, 5, 10))

from __future__ import annotations
import logging
from typing import Any, Dict, List

from oris.models.certification import Certification
from oris.models.client import Client, ClientStatus
from oris.models.invoice import INVOICE, Invoice, InvoiceStatus
from oris.models.quote import Quote, QuoteLine, QuoteStatus
from oris.models.session import Session, Trainee
from oris.models.settings import SETTINGS_DOC_ID, CompanySettings
from oris.models.training import TrainingCategory, TrainingModule
from oris.services.totals import compute_totals
from oris.storage.store import DataStore

logger = logging.getLogger(__name__)

# Jeu de démonstration ; les clés "ref" ne sont que des alias locaux,
# remplacés par les identifiants attribués à l'écriture.
DEMO_CLIENTS: Dict[str, Dict[str, Any]] = {
    "irtec": dict(
        name="IRTEC Réseaux", siret="987 654 321 00045", vat_number="FR 88 987654321",
        address="45 Avenue des Transformateurs", city="Grenoble", zip="38000",
        contact_name="Jean Dupont", email="j.dupont@irtec-reseaux.fr",
        phone="06 12 34 56 78", status=ClientStatus.CLIENT,
    ),
    "elecpro": dict(
        name="ElecPro Solutions", siret="456 123 789 00011", vat_number="FR 44 456123789",
        address="12 ZI Nord", city="Villeurbanne", zip="69100",
        contact_name="Marie Martin", email="m.martin@elecpro.com",
        phone="04 72 00 00 00", status=ClientStatus.PROSPECT,
    ),
}

DEMO_CATALOG: Dict[str, Dict[str, Any]] = {
    "hab": dict(
        reference="HAB-B2V", title="Habilitation Électrique BR/B2V/BC",
        category=TrainingCategory.HABILITATION, duration_days=3, price_ht=850,
        description="Habilitation pour chargé d'intervention et chargé de consignation en basse tension.",
    ),
    "tst": dict(
        reference="TST-BAT", title="TST Module de Base (Batteries)",
        category=TrainingCategory.TST, duration_days=2, price_ht=1200,
        description="Travaux Sous Tension sur batteries d'accumulateurs stationnaires.",
    ),
    "hta": dict(
        reference="RES-HTA", title="Confection d'accessoires HTA",
        category=TrainingCategory.RESEAUX, duration_days=4, price_ht=1600,
        description="Raccordement de câbles HTA synthétiques (jonctions, extrémités).",
    ),
}

DEMO_QUOTES: List[Dict[str, Any]] = [
    dict(
        number="DEV-2024-042", client="irtec", date="2024-05-10", valid_until="2024-06-10",
        status=QuoteStatus.SENT, notes="Formation prévue sur site client.",
        items=[
            dict(description="Formation Habilitation BR/B2V/BC (6 stagiaires)", quantity=1, unit_price=2500, vat_rate=20),
            dict(description="Frais de déplacement (Forfait)", quantity=1, unit_price=150, vat_rate=20),
        ],
    ),
    dict(
        number="DEV-2024-045", client="elecpro", date="2024-05-12", valid_until="2024-06-12",
        status=QuoteStatus.DRAFT, notes="",
        items=[dict(description="Formation TST Module Base", quantity=2, unit_price=1200, vat_rate=20)],
    ),
]

DEMO_INVOICES: List[Dict[str, Any]] = [
    dict(
        number="FAC-2024-001", client="irtec", date="2024-04-01", due_date="2024-05-01",
        status=InvoiceStatus.PAID,
        items=[dict(description="Acompte 30% - Formation HTA", quantity=1, unit_price=600, vat_rate=20)],
    ),
    dict(
        number="FAC-2024-002", client="elecpro", date="2024-04-15", due_date="2024-05-15",
        status=InvoiceStatus.OVERDUE,
        items=[dict(description="Formation TST", quantity=1, unit_price=1200, vat_rate=20)],
    ),
]

DEMO_SESSIONS: List[Dict[str, Any]] = [
    dict(
        training="hab", client="irtec", start_date="2024-06-10", end_date="2024-06-12",
        trainer="Philippe Formateur", location="Grenoble (Site Client)", trainees_count=6,
        trainees=["Thomas Durand", "Sophie Martin", "Lucas Bernard"],
    ),
]

DEMO_CERTIFICATIONS: List[Dict[str, Any]] = [
    dict(trainee_name="Marc Voisin", company_name="IRTEC Réseaux", level="B2V", expiry_date="2024-06-15"),
    dict(trainee_name="Julie Dubois", company_name="ElecPro Solutions", level="BC", expiry_date="2024-07-01"),
    dict(trainee_name="Paul Richard", company_name="IRTEC Réseaux", level="TST-BAT", expiry_date="2024-05-20"),
]


class SeedService:
    """Initialise une base vide avec les données de démonstration, en un seul lot."""

    def __init__(self, store: DataStore):
        self.store = store

    def is_empty(self) -> bool:
        return not any(self.store[name].list_all() for name in self.store if name != "settings")

    def seed_demo_data(self, force: bool = False) -> Dict[str, int]:
        if not force and not self.is_empty():
            logger.info("Base non vide : données de démonstration ignorées")
            return {}

        batch = self.store.batch()
        client_ids: Dict[str, str] = {}
        training_ids: Dict[str, str] = {}

        for alias, data in DEMO_CLIENTS.items():
            client_ids[alias] = batch.set(self.store.clients, Client(**data).to_payload())
        for alias, data in DEMO_CATALOG.items():
            training_ids[alias] = batch.set(self.store.catalog, TrainingModule(**data).to_payload())

        for data in DEMO_QUOTES:
            fields = {k: v for k, v in data.items() if k != "client"}
            q = Quote(client_id=client_ids[data["client"]], **fields)
            q.apply_totals(compute_totals(q.items))
            batch.set(self.store.quotes, q.to_payload())

        for data in DEMO_INVOICES:
            fields = {k: v for k, v in data.items() if k != "client"}
            inv = Invoice(type=INVOICE, client_id=client_ids[data["client"]], **fields)
            totals = compute_totals(inv.items)
            inv.total_ht, inv.total_vat, inv.total_ttc = totals.ht, totals.vat, totals.ttc
            batch.set(self.store.invoices, inv.to_payload())

        for data in DEMO_SESSIONS:
            fields = {k: v for k, v in data.items() if k not in ("client", "training", "trainees")}
            s = Session(
                client_id=client_ids[data["client"]],
                training_id=training_ids[data["training"]],
                trainees=[Trainee(name=n) for n in data["trainees"]],
                **fields,
            )
            batch.set(self.store.sessions, s.to_payload())

        for data in DEMO_CERTIFICATIONS:
            batch.set(self.store.certifications, Certification(**data).to_payload())

        if self.store.settings.get(SETTINGS_DOC_ID) is None:
            batch.set(self.store.settings, CompanySettings.defaults().model_dump(mode="json"), SETTINGS_DOC_ID)

        total = len(batch)
        batch.commit()
        counts = {
            "clients": len(DEMO_CLIENTS),
            "catalog": len(DEMO_CATALOG),
            "quotes": len(DEMO_QUOTES),
            "invoices": len(DEMO_INVOICES),
            "sessions": len(DEMO_SESSIONS),
            "certifications": len(DEMO_CERTIFICATIONS),
        }
        logger.info("Données de démonstration écrites (%d documents)", total)
        return counts

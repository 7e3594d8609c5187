from __future__ import annotations
import logging
from datetime import date, timedelta
from typing import List, Optional

from pydantic import ValidationError as ModelError

from oris.errors import NotFoundError, ValidationError
from oris.models.certification import Certification
from oris.models.client import Client
from oris.services.client_service import ClientService
from oris.storage.store import DataStore

logger = logging.getLogger(__name__)


class CertificationService:
    """Habilitations des stagiaires et alertes de recyclage."""

    def __init__(self, store: DataStore, clients: Optional[ClientService] = None):
        self.repo = store.certifications
        self.clients = clients or ClientService(store)

    def list_certifications(self) -> List[Certification]:
        out: List[Certification] = []
        for d in self.repo.list_all():
            try:
                out.append(Certification.from_record(d))
            except ModelError:
                logger.warning("Habilitation invalide ignorée : %s", d.get("id"))
        return sorted(out, key=lambda c: c.expiry_date)

    def add(self, cert: Certification) -> Certification:
        if not cert.trainee_name.strip() or not cert.level.strip():
            raise ValidationError("Stagiaire et niveau sont obligatoires.")
        return Certification.from_record(self.repo.add(cert.to_payload()))

    def delete(self, cert_id: str) -> bool:
        return self.repo.delete(cert_id)

    def alerts(self, today: Optional[date] = None, within_days: Optional[int] = None) -> List[Certification]:
        """Habilitations à renouveler ; sans horizon, toutes sont listées."""
        if within_days is None:
            return self.list_certifications()
        limit = (today or date.today()) + timedelta(days=within_days)
        return [c for c in self.list_certifications() if c.expiry_date <= limit]

    def company_contact(self, company_name: str) -> Client:
        for c in self.clients.list_clients():
            if c.name == company_name:
                return c
        raise NotFoundError("Entreprise", company_name)

from __future__ import annotations
import logging
from typing import Dict, List

from pydantic import ValidationError as ModelError

from oris.errors import NotFoundError, ValidationError
from oris.models.client import Client
from oris.storage.store import DataStore

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "Client inconnu"


class ClientService:
    def __init__(self, store: DataStore):
        self.repo = store.clients

    def list_clients(self) -> List[Client]:
        out: List[Client] = []
        for d in self.repo.list_all():
            try:
                out.append(Client.from_record(d))
            except ModelError:
                # On ignore les entrées invalides pour ne pas casser l'UI
                logger.warning("Client invalide ignoré : %s", d.get("id"))
        return out

    def client_map(self) -> Dict[str, Client]:
        return {c.id: c for c in self.list_clients()}

    def get(self, client_id: str) -> Client:
        d = self.repo.get(client_id)
        if d is None:
            raise NotFoundError("Client", client_id)
        return Client.from_record(d)

    def display_name(self, client_id: str) -> str:
        d = self.repo.get(client_id) if client_id else None
        return (d or {}).get("name") or UNKNOWN_CLIENT

    def search(self, term: str) -> List[Client]:
        t = (term or "").strip().casefold()
        if not t:
            return self.list_clients()
        return [
            c for c in self.list_clients()
            if t in c.name.casefold() or t in (c.contact_name or "").casefold()
        ]

    def add_client(self, client: Client) -> Client:
        if not client.name.strip():
            raise ValidationError("La raison sociale est obligatoire.")
        rec = self.repo.add(client.to_payload())
        return Client.from_record(rec)

    def update_client(self, client: Client) -> Client:
        if not client.id:
            raise ValidationError("Client sans identifiant.")
        if not client.name.strip():
            raise ValidationError("La raison sociale est obligatoire.")
        rec = self.repo.update(client.id, client.to_payload())
        return Client.from_record(rec)

    def delete_client(self, client_id: str) -> bool:
        # pas de cascade : devis/factures gardent la référence
        return self.repo.delete(client_id)

from __future__ import annotations
import logging
from typing import List, Optional

from pydantic import ValidationError as ModelError

from oris.errors import NotFoundError, ValidationError
from oris.models.training import TrainingCategory, TrainingModule
from oris.storage.store import DataStore

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Catalogue des formations.
    - Hydrate JSON -> TrainingModule (entrées invalides ignorées)
    - Recherche exacte par intitulé pour le remplissage des lignes de devis
    """

    def __init__(self, store: DataStore) -> None:
        self.repo = store.catalog

    # ---------- Lecture ---------- #

    def list_trainings(self) -> List[TrainingModule]:
        out: List[TrainingModule] = []
        for d in self.repo.list_all():
            try:
                out.append(TrainingModule.from_record(d))
            except ModelError:
                logger.warning("Formation invalide ignorée : %s", d.get("id"))
        return out

    def get(self, training_id: str) -> TrainingModule:
        d = self.repo.get(training_id)
        if d is None:
            raise NotFoundError("Formation", training_id)
        return TrainingModule.from_record(d)

    def find_by_title(self, title: str) -> Optional[TrainingModule]:
        """Correspondance exacte sur l'intitulé (sensible à la casse)."""
        for t in self.list_trainings():
            if t.title == title:
                return t
        return None

    def by_category(self, category: TrainingCategory) -> List[TrainingModule]:
        return [t for t in self.list_trainings() if t.category == category]

    # ---------- Écriture ---------- #

    @staticmethod
    def _check(t: TrainingModule) -> None:
        if not t.reference.strip() or not t.title.strip():
            raise ValidationError("Référence et intitulé sont obligatoires.")

    def add_training(self, t: TrainingModule) -> TrainingModule:
        self._check(t)
        return TrainingModule.from_record(self.repo.add(t.to_payload()))

    def update_training(self, t: TrainingModule) -> TrainingModule:
        if not t.id:
            raise ValidationError("Formation sans identifiant.")
        self._check(t)
        return TrainingModule.from_record(self.repo.update(t.id, t.to_payload()))

    def delete_training(self, training_id: str) -> bool:
        return self.repo.delete(training_id)

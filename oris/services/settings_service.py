from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Union

from pydantic import ValidationError as ModelError

from oris.errors import ValidationError
from oris.models.settings import SETTINGS_DOC_ID, CompanySettings
from oris.storage.store import DataStore

logger = logging.getLogger(__name__)

LOGO_MAX_BYTES = 500 * 1024


class SettingsService:
    """Paramètres société : document unique `settings/company`."""

    def __init__(self, store: DataStore):
        self.repo = store.settings

    def load(self) -> CompanySettings:
        d = self.repo.get(SETTINGS_DOC_ID)
        if d is None:
            logger.info("Paramètres absents, initialisation avec les valeurs par défaut")
            defaults = CompanySettings.defaults()
            self.repo.set(SETTINGS_DOC_ID, defaults.model_dump(mode="json"))
            return defaults
        return CompanySettings.model_validate(d)

    def update(self, changes: Union[CompanySettings, Mapping[str, Any]]) -> CompanySettings:
        """Écriture fusionnée : seuls les champs fournis sont remplacés."""
        if isinstance(changes, CompanySettings):
            payload: Dict[str, Any] = changes.model_dump(mode="json")
        else:
            payload = dict(changes)
        current = self.load().model_dump(mode="json")
        try:
            merged = CompanySettings.model_validate({**current, **payload})
        except ModelError as e:
            raise ValidationError(str(e)) from e
        rec = self.repo.set(SETTINGS_DOC_ID, merged.model_dump(mode="json"), merge=True)
        logger.info("Paramètres société mis à jour")
        return CompanySettings.model_validate(rec)

    def set_logo(self, logo_url: str) -> CompanySettings:
        logo_url = (logo_url or "").strip()
        if not logo_url.startswith(("data:image/", "http://", "https://")):
            raise ValidationError("Logo attendu : image encodée (data:image/…) ou URL http(s).")
        if logo_url.startswith("data:") and len(logo_url) > LOGO_MAX_BYTES * 4 // 3 + 64:
            raise ValidationError("L'image est trop volumineuse (500 Ko maximum).")
        return self.update({"logo_url": logo_url})

    def clear_logo(self) -> CompanySettings:
        return self.update({"logo_url": None})

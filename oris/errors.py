from __future__ import annotations

from typing import Any, Optional


class OrisError(Exception):
    """Erreur métier de base : toujours traitée au point d'appel (pas de retry)."""


class ValidationError(OrisError):
    """Champ obligatoire manquant ou valeur refusée avant enregistrement."""


class InvalidTransitionError(ValidationError):
    def __init__(self, entity: str, current: Any, target: Any) -> None:
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(f"Transition interdite pour {entity} : {current} → {target}")


class NotFoundError(OrisError):
    def __init__(self, entity: str, key: Any) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} introuvable ({key})")


class DuplicateError(OrisError):
    """Un enregistrement unique existe déjà (ex: avoir pour une facture)."""


class StoreError(OrisError):
    def __init__(self, collection: str, message: str = "") -> None:
        self.collection = collection
        super().__init__(message or f"Écriture refusée sur '{collection}'")


class StorePermissionError(StoreError):
    def __init__(self, collection: str, detail: Optional[str] = None) -> None:
        msg = f"Permission refusée sur la collection '{collection}'"
        if detail:
            msg += f" : {detail}"
        super().__init__(collection, msg)


class RenderError(OrisError):
    """Échec de génération PDF : l'appelant bascule sur l'impression navigateur."""

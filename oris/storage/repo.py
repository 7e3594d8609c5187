from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
from uuid import uuid4

from oris.errors import DuplicateError, NotFoundError, StorePermissionError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Listener = Callable[[List[Record]], None]


class Repository:
    """
    Collection de documents (un dépôt par entité).

    - la clé est attribuée par le dépôt à la création ; elle n'est jamais
      stockée dans le payload et est réinjectée sous `id` à la lecture
    - `order_by` / `descending` : tri par défaut des listes
    - abonnés notifiés après chaque écriture (liste fraîche)
    - les sous-classes ne fournissent que `_read_raw` / `_write_raw`
    """

    def __init__(
        self,
        name: str,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        key: str = "id",
    ) -> None:
        self.name = name
        self.order_by = order_by
        self.descending = descending
        self.key = key
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

    # ---------------- I/O bas niveau ---------------- #

    def _read_raw(self) -> Dict[str, Record]:
        raise NotImplementedError

    def _write_raw(self, data: Mapping[str, Record]) -> None:
        raise NotImplementedError

    # ---------------- Helpers ---------------- #

    def _strip(self, payload: Mapping[str, Any]) -> Record:
        record = copy.deepcopy(dict(payload))
        record.pop(self.key, None)
        return record

    def _hydrate(self, doc_id: str, payload: Mapping[str, Any]) -> Record:
        out = copy.deepcopy(dict(payload))
        out[self.key] = doc_id
        return out

    def _sorted(self, rows: List[Record], order_by: Optional[str], descending: bool) -> List[Record]:
        if not order_by:
            return rows
        # les valeurs absentes partent en fin de liste quel que soit le sens
        present = [r for r in rows if r.get(order_by) is not None]
        missing = [r for r in rows if r.get(order_by) is None]
        present.sort(key=lambda r: r[order_by], reverse=descending)
        return present + missing

    def _notify(self) -> None:
        if not self._listeners:
            return
        rows = self.list_all()
        for listener in list(self._listeners):
            try:
                listener(rows)
            except Exception:
                logger.exception("Erreur de synchronisation (%s)", self.name)

    def _commit(self, data: Dict[str, Record]) -> None:
        self._write_raw(data)
        self._notify()

    # ---------------- Abonnements ---------------- #

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Enregistre un écouteur ; appelé immédiatement puis après chaque écriture."""
        self._listeners.append(listener)
        listener(self.list_all())

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---------------- Lecture ---------------- #

    def list_all(self, order_by: Optional[str] = None, descending: Optional[bool] = None) -> List[Record]:
        with self._lock:
            data = self._read_raw()
        rows = [self._hydrate(k, v) for k, v in data.items()]
        ob = order_by if order_by is not None else self.order_by
        desc = self.descending if descending is None else descending
        return self._sorted(rows, ob, desc)

    def get(self, doc_id: str) -> Optional[Record]:
        with self._lock:
            payload = self._read_raw().get(str(doc_id))
        return self._hydrate(str(doc_id), payload) if payload is not None else None

    def find(self, predicate: Callable[[Record], bool]) -> List[Record]:
        return [r for r in self.list_all() if predicate(r)]

    def find_one(self, predicate: Callable[[Record], bool]) -> Optional[Record]:
        for r in self.list_all():
            if predicate(r):
                return r
        return None

    # ---------------- Écriture ---------------- #

    @staticmethod
    def _conflicts(
        data: Mapping[str, Record],
        record: Mapping[str, Any],
        unique: Optional[str],
        where: Optional[Mapping[str, Any]],
    ) -> bool:
        if not unique or record.get(unique) is None:
            return False
        if where and any(record.get(k) != v for k, v in where.items()):
            return False
        for existing in data.values():
            if existing.get(unique) != record[unique]:
                continue
            if where and any(existing.get(k) != v for k, v in where.items()):
                continue
            return True
        return False

    def add(
        self,
        payload: Mapping[str, Any],
        *,
        unique: Optional[str] = None,
        where: Optional[Mapping[str, Any]] = None,
    ) -> Record:
        """
        Ajoute un document et retourne l'enregistrement hydraté.
        `unique` : champ dont la valeur (non nulle) ne peut exister qu'une fois
        parmi les documents satisfaisant `where`. Contrôle et écriture se font
        sous le même verrou.
        """
        record = self._strip(payload)
        with self._lock:
            data = self._read_raw()
            if self._conflicts(data, record, unique, where):
                raise DuplicateError(
                    f"{self.name}: un document avec {unique}={record[unique]} existe déjà"
                )
            doc_id = uuid4().hex
            data[doc_id] = record
            self._commit(data)
        logger.info("%s: ajout %s", self.name, doc_id)
        return self._hydrate(doc_id, record)

    def set(self, doc_id: str, payload: Mapping[str, Any], *, merge: bool = False) -> Record:
        """Écrit un document à une clé fixe (crée si absent)."""
        record = self._strip(payload)
        with self._lock:
            data = self._read_raw()
            if merge and doc_id in data:
                record = {**data[doc_id], **record}
            data[doc_id] = record
            self._commit(data)
        return self._hydrate(doc_id, record)

    def update(self, doc_id: str, fields: Mapping[str, Any]) -> Record:
        """Fusionne `fields` dans le document existant."""
        with self._lock:
            data = self._read_raw()
            if doc_id not in data:
                raise NotFoundError(self.name, doc_id)
            merged = {**data[doc_id], **self._strip(fields)}
            data[doc_id] = merged
            self._commit(data)
        return self._hydrate(doc_id, merged)

    def delete(self, doc_id: str) -> bool:
        with self._lock:
            data = self._read_raw()
            if doc_id not in data:
                return False
            data.pop(doc_id)
            self._commit(data)
        logger.info("%s: suppression %s", self.name, doc_id)
        return True

    # ---------------- Lots ---------------- #

    def snapshot(self) -> Dict[str, Record]:
        with self._lock:
            return copy.deepcopy(self._read_raw())

    def restore(self, data: Mapping[str, Record]) -> None:
        with self._lock:
            self._commit(copy.deepcopy(dict(data)))


class MemoryRepository(Repository):
    """Dépôt en mémoire (tests, démo). `read_only` simule un refus de permission."""

    def __init__(self, name: str, *, read_only: bool = False, **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self._data: Dict[str, Record] = {}
        self.read_only = read_only

    def _read_raw(self) -> Dict[str, Record]:
        return copy.deepcopy(self._data)

    def _write_raw(self, data: Mapping[str, Record]) -> None:
        if self.read_only:
            raise StorePermissionError(self.name)
        self._data = copy.deepcopy(dict(data))


class WriteBatch:
    """
    Écriture groupée tout-ou-rien sur plusieurs dépôts.
    En cas d'échec, les dépôts déjà écrits sont restaurés.
    """

    def __init__(self) -> None:
        self._ops: List[Tuple[Repository, Optional[str], Record]] = []

    def set(self, repo: Repository, payload: Mapping[str, Any], doc_id: Optional[str] = None) -> str:
        """Planifie une écriture ; retourne la clé (générée si absente)."""
        key = doc_id or uuid4().hex
        self._ops.append((repo, key, repo._strip(payload)))
        return key

    def __len__(self) -> int:
        return len(self._ops)

    def commit(self) -> None:
        grouped: Dict[int, Tuple[Repository, Dict[str, Record]]] = {}
        for repo, key, record in self._ops:
            _, staged = grouped.setdefault(id(repo), (repo, {}))
            staged[key] = record

        snapshots: List[Tuple[Repository, Dict[str, Record]]] = []
        try:
            for repo, staged in grouped.values():
                before = repo.snapshot()
                repo.restore({**before, **staged})
                snapshots.append((repo, before))
        except Exception:
            for repo, before in reversed(snapshots):
                try:
                    repo.restore(before)
                except Exception:
                    logger.exception("Restauration impossible (%s)", repo.name)
            raise
        logger.info("Lot écrit : %d documents", len(self._ops))
        self._ops.clear()

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterator, Tuple, Union

from oris.storage.json_repo import JsonRepository
from oris.storage.repo import MemoryRepository, Repository, WriteBatch

# nom de collection → (champ de tri, décroissant)
COLLECTIONS: Dict[str, Tuple[Any, bool]] = {
    "clients": (None, False),
    "quotes": ("date", True),
    "invoices": ("date", True),
    "sessions": ("start_date", False),
    "catalog": (None, False),
    "certifications": (None, False),
    "settings": (None, False),
}


class DataStore:
    """Regroupe les dépôts de l'application ; injecté dans chaque service."""

    def __init__(self, repos: Dict[str, Repository]) -> None:
        missing = set(COLLECTIONS) - set(repos)
        if missing:
            raise ValueError(f"Collections manquantes : {sorted(missing)}")
        self._repos = dict(repos)

    @classmethod
    def in_memory(cls) -> "DataStore":
        return cls({
            name: MemoryRepository(name, order_by=ob, descending=desc)
            for name, (ob, desc) in COLLECTIONS.items()
        })

    @classmethod
    def from_directory(cls, data_dir: Union[str, Path], **kwargs: Any) -> "DataStore":
        base = Path(data_dir)
        return cls({
            name: JsonRepository(base / f"{name}.json", name, order_by=ob, descending=desc, **kwargs)
            for name, (ob, desc) in COLLECTIONS.items()
        })

    def __getitem__(self, name: str) -> Repository:
        return self._repos[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._repos)

    @property
    def clients(self) -> Repository:
        return self._repos["clients"]

    @property
    def quotes(self) -> Repository:
        return self._repos["quotes"]

    @property
    def invoices(self) -> Repository:
        return self._repos["invoices"]

    @property
    def sessions(self) -> Repository:
        return self._repos["sessions"]

    @property
    def catalog(self) -> Repository:
        return self._repos["catalog"]

    @property
    def certifications(self) -> Repository:
        return self._repos["certifications"]

    @property
    def settings(self) -> Repository:
        return self._repos["settings"]

    def batch(self) -> WriteBatch:
        return WriteBatch()

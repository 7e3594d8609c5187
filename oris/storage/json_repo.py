from __future__ import annotations

import glob
import json
import logging
import shutil
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from oris.errors import StoreError, StorePermissionError
from oris.storage.repo import Record, Repository

logger = logging.getLogger(__name__)


def _json_default(o: Any) -> Any:
    if isinstance(o, (date, datetime)):
        return o.isoformat()
    return str(o)


class JsonRepository(Repository):
    """
    Dépôt JSON : un fichier par collection, objet {clé: payload}.
    - Rotation de backups (backup_enabled, backup_keep)
    - N'écrit pas si le contenu ne change pas (réduction du bruit et des .bak)
    - Refus d'accès disque remonté en StorePermissionError
    """

    def __init__(
        self,
        filepath: Union[str, Path],
        name: str = "entity",
        *,
        backup_enabled: bool = True,
        backup_keep: int = 5,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, **kwargs)
        self.filepath = Path(filepath)
        self.backup_enabled = backup_enabled
        self.backup_keep = max(0, int(backup_keep))

        try:
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            if not self.filepath.exists():
                self._write_raw({})
        except PermissionError as e:
            raise StorePermissionError(self.name, str(e)) from e

    # ---------------- I/O bas niveau ---------------- #

    def _read_raw(self) -> Dict[str, Record]:
        try:
            with self.filepath.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except PermissionError as e:
            raise StorePermissionError(self.name, str(e)) from e
        except json.JSONDecodeError:
            # Fichier corrompu → sauvegarde et repart sur collection vide
            backup = self.filepath.with_suffix(".corrupt.json")
            try:
                shutil.copy2(self.filepath, backup)
            except OSError:
                logger.warning("Sauvegarde du fichier corrompu impossible : %s", backup)
            logger.error("%s: fichier JSON corrompu, copie dans %s", self.name, backup)
            return {}
        return data if isinstance(data, dict) else {}

    def _rotate_backups(self) -> None:
        if not self.backup_enabled or self.backup_keep <= 0:
            return
        pattern = str(self.filepath.with_suffix(".*.bak.json"))
        files = sorted(glob.glob(pattern))
        # garde les plus récents
        for old in files[: max(0, len(files) - self.backup_keep)]:
            Path(old).unlink(missing_ok=True)

    def _write_raw(self, data: Mapping[str, Record]) -> None:
        new_dump = json.dumps(dict(data), ensure_ascii=False, indent=2, default=_json_default)
        try:
            # si contenu identique → ne rien faire
            if self.filepath.exists() and self.filepath.read_text(encoding="utf-8") == new_dump:
                return

            if self.backup_enabled and self.filepath.exists():
                ts = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
                shutil.copy2(self.filepath, self.filepath.with_suffix(f".{ts}.bak.json"))
                self._rotate_backups()

            tmp = self.filepath.with_suffix(".tmp")
            tmp.write_text(new_dump, encoding="utf-8")
            tmp.replace(self.filepath)
        except PermissionError as e:
            raise StorePermissionError(self.name, str(e)) from e
        except OSError as e:
            raise StoreError(self.name, f"Écriture impossible sur '{self.name}' : {e}") from e

from __future__ import annotations

from typing import Iterable

QUOTE_PREFIX = "DEV"
INVOICE_PREFIX = "FAC"
CREDIT_NOTE_PREFIX = "AVR"


def next_number(prefix: str, year: int, existing: Iterable[str], width: int = 3) -> str:
    """
    Numéro suivant `PREFIX-ANNEE-NNN` : plus grand numéro de l'année + 1.
    Les numéros hors format sont ignorés.
    """
    head = f"{prefix}-{year}-"
    max_n = 0
    for num in existing:
        if not isinstance(num, str) or not num.startswith(head):
            continue
        tail = num[len(head):]
        if tail.isdigit():
            max_n = max(max_n, int(tail))
    return f"{head}{max_n + 1:0{width}d}"


def derive_number(number: str, source: str, target: str) -> str:
    """
    Remplace la première occurrence de `source` par `target`
    (ex: FAC-2024-001 → AVR-2024-001), sinon ajoute `-target`.
    """
    if source in number:
        return number.replace(source, target, 1)
    return f"{number}-{target}"

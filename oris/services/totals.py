from __future__ import annotations

import math
from typing import Iterable

from oris.models.quote import QuoteLine, Totals


def compute_totals(lines: Iterable[QuoteLine]) -> Totals:
    """
    HT = Σ qté×PU ; TVA = Σ qté×PU×taux/100 ; TTC = HT + TVA.
    fsum : somme correctement arrondie, donc indépendante de l'ordre des lignes.
    """
    bases = [(ln.quantity * ln.unit_price, ln.vat_rate) for ln in lines]
    ht = math.fsum(b for b, _ in bases)
    vat = math.fsum(b * (rate / 100) for b, rate in bases)
    return Totals(ht=ht, vat=vat, ttc=ht + vat)

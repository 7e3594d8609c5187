from __future__ import annotations

from typing import Mapping, TypeVar

from oris.errors import InvalidTransitionError
from oris.models.invoice import InvoiceStatus
from oris.models.quote import QuoteStatus

S = TypeVar("S")

QUOTE_TRANSITIONS: Mapping[QuoteStatus, frozenset] = {
    QuoteStatus.DRAFT: frozenset({QuoteStatus.SENT}),
    QuoteStatus.SENT: frozenset({QuoteStatus.ACCEPTED, QuoteStatus.REJECTED, QuoteStatus.EXPIRED}),
    QuoteStatus.ACCEPTED: frozenset(),
    QuoteStatus.REJECTED: frozenset(),
    QuoteStatus.EXPIRED: frozenset(),
}

INVOICE_TRANSITIONS: Mapping[InvoiceStatus, frozenset] = {
    InvoiceStatus.PENDING: frozenset({InvoiceStatus.PAID, InvoiceStatus.OVERDUE, InvoiceStatus.CANCELLED}),
    InvoiceStatus.OVERDUE: frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELLED}),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELLED: frozenset(),
}


def check_transition(entity: str, table: Mapping[S, frozenset], current: S, target: S) -> bool:
    """
    True si la transition doit être écrite, False si c'est un no-op
    (même statut). Lève InvalidTransitionError sinon.
    """
    if current == target:
        return False
    if target not in table.get(current, frozenset()):
        raise InvalidTransitionError(entity, getattr(current, "value", current), getattr(target, "value", target))
    return True


def allowed_targets(table: Mapping[S, frozenset], current: S) -> frozenset:
    return table.get(current, frozenset())

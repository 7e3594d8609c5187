import itertools

import pytest

from oris.models.quote import QuoteLine
from oris.services.numbering import derive_number, next_number
from oris.services.totals import compute_totals


def _lines():
    return [
        QuoteLine(description="A", quantity=3, unit_price=0.1, vat_rate=20),
        QuoteLine(description="B", quantity=1, unit_price=1e6, vat_rate=10),
        QuoteLine(description="C", quantity=7, unit_price=0.3, vat_rate=0),
        QuoteLine(description="D", quantity=2.5, unit_price=19.99, vat_rate=20),
    ]


def test_ttc_is_exactly_ht_plus_vat():
    t = compute_totals(_lines())
    assert t.ttc == t.ht + t.vat


def test_totals_amounts():
    t = compute_totals([
        QuoteLine(description="Formation", quantity=2, unit_price=1200, vat_rate=20),
        QuoteLine(description="Support", quantity=1, unit_price=100, vat_rate=0),
    ])
    assert t.ht == 2500
    assert t.vat == pytest.approx(480)
    assert t.ttc == pytest.approx(2980)


def test_totals_do_not_depend_on_line_order():
    reference = compute_totals(_lines())
    for perm in itertools.permutations(_lines()):
        assert compute_totals(perm) == reference


def test_empty_lines_give_zero_totals():
    t = compute_totals([])
    assert (t.ht, t.vat, t.ttc) == (0, 0, 0)


def test_next_number_starts_at_one_and_is_per_year():
    assert next_number("DEV", 2024, []) == "DEV-2024-001"
    existing = ["DEV-2024-001", "DEV-2024-007", "DEV-2023-099", "FAC-2024-050", "bricolé", ""]
    assert next_number("DEV", 2024, existing) == "DEV-2024-008"
    assert next_number("DEV", 2025, existing) == "DEV-2025-001"


def test_derive_number_replaces_first_prefix():
    assert derive_number("FAC-2024-001", "FAC", "AVR") == "AVR-2024-001"
    assert derive_number("DEV-2024-042", "DEV", "FAC") == "FAC-2024-042"
    assert derive_number("FAC-FAC-1", "FAC", "AVR") == "AVR-FAC-1"


def test_derive_number_appends_suffix_without_prefix():
    assert derive_number("X-007", "FAC", "AVR") == "X-007-AVR"

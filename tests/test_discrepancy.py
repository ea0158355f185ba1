from decimal import Decimal
from types import SimpleNamespace

from cashdrawer.services import discrepancy


def make_session(opening, cash, card="0", mobile="0"):
    return SimpleNamespace(
        opening_amount=Decimal(opening),
        total_cash_sales=Decimal(cash),
        total_card_sales=Decimal(card),
        total_mobile_sales=Decimal(mobile),
    )


def test_balanced_drawer_needs_no_approval():
    expected = discrepancy.compute_expected_closing(make_session("1000", "500"))
    diff = discrepancy.compute_discrepancy(expected, Decimal("1500"))

    assert expected == Decimal("1500.00")
    assert diff == Decimal("0.00")
    assert discrepancy.requires_approval(diff) is False


def test_shortage_is_negative_and_needs_approval():
    expected = discrepancy.compute_expected_closing(make_session("1000", "500"))
    diff = discrepancy.compute_discrepancy(expected, Decimal("1400"))

    assert diff == Decimal("-100.00")
    assert discrepancy.requires_approval(diff) is True


def test_overage_also_needs_approval():
    assert discrepancy.requires_approval(Decimal("0.01")) is True


def test_card_and_mobile_sales_do_not_count_toward_drawer():
    session = make_session("200", "50", card="900", mobile="75")
    assert discrepancy.compute_expected_closing(session) == Decimal("250.00")


def test_float_amounts_do_not_leave_rounding_noise():
    expected = discrepancy.compute_expected_closing(make_session("0.1", "0.2"))
    assert discrepancy.compute_discrepancy(expected, 0.3) == Decimal("0.00")

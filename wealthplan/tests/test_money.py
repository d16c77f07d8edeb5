from decimal import Decimal

from wealthplan.core.money import format_money, parse_money, to_amount


def test_parse_money_strips_currency_and_separators():
    assert parse_money("SGD $1,234.50") == Decimal("1234.50")
    assert parse_money(" 2 500 ") == Decimal("2500")
    assert parse_money("-250") == Decimal("-250")


def test_parse_money_falls_back_to_default():
    assert parse_money(None) == Decimal("0")
    assert parse_money("") == Decimal("0")
    assert parse_money("n/a", default=7) == Decimal("7")
    assert parse_money(float("nan"), default=3) == Decimal("3")
    assert parse_money(True) == Decimal("0")


def test_parse_money_keeps_numbers_exact():
    assert parse_money(12.5) == Decimal("12.5")
    assert parse_money(0.1) == Decimal("0.1")
    assert parse_money(Decimal("3.333")) == Decimal("3.333")


def test_to_amount_returns_float():
    assert to_amount("$1,000") == 1000.0
    assert to_amount("junk", 5) == 5.0


def test_format_money():
    assert format_money(1234.5) == "SGD $1,234.50"
    assert format_money("-20") == "SGD -$20.00"
    assert format_money(0, currency="USD") == "USD $0.00"


def test_to_amount_rejects_numbers_too_large_for_a_float():
    assert to_amount("9" * 400) == 0.0
    assert to_amount("9" * 400, 12) == 12.0

from datetime import date, datetime

from wealthplan.core.ages import age_anchor, age_on, clamp_age, months_between, parse_date


def test_months_between_counts_whole_months_only():
    assert months_between(date(2000, 5, 20), date(2025, 6, 15)) == 300
    assert months_between(date(2000, 5, 15), date(2025, 6, 15)) == 301


def test_months_between_is_never_negative():
    assert months_between(date(2030, 1, 1), date(2025, 6, 15)) == 0


def test_age_anchor_reduces_to_years_and_months():
    anchor = age_anchor("1990-06-16", date(2025, 6, 15))
    assert anchor is not None
    assert anchor.years == 34
    assert anchor.months == 34 * 12 + 11


def test_missing_or_bad_birth_date_is_unavailable():
    assert age_anchor(None) is None
    assert age_on("", date(2025, 6, 15)) is None
    assert age_on("15/06/1990", date(2025, 6, 15)) is None


def test_parse_date_accepts_common_shapes():
    assert parse_date("1990-06-15T00:00:00Z") == date(1990, 6, 15)
    assert parse_date(datetime(1990, 6, 15, 8, 30)) == date(1990, 6, 15)
    assert parse_date(date(1990, 6, 15)) == date(1990, 6, 15)
    assert age_on("1990-06-15T00:00:00Z", date(2025, 6, 15)) == 35


def test_clamp_age():
    assert clamp_age(500) == 120
    assert clamp_age(-3) == 0
    assert clamp_age(64) == 64

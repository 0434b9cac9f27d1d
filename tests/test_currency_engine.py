import pytest

from currency_engine import customs_rate_for, to_zar
from models import ExchangeRates


def test_to_zar_converts_usd_and_passes_zar_through():
    rates = ExchangeRates(roe_origin=18.5)
    assert to_zar(100, "USD", rates) == 1850
    assert to_zar(50, "ZAR", rates) == 50
    assert to_zar(50, "zar", ExchangeRates()) == 50


def test_to_zar_eur_uses_eur_rate():
    assert to_zar(10, "EUR", ExchangeRates(roe_origin=18.5, roe_eur=20.25)) == pytest.approx(202.5)


def test_missing_rate_or_unknown_currency_contributes_zero():
    assert to_zar(100, "USD", ExchangeRates()) == 0.0
    assert to_zar(100, "EUR", ExchangeRates(roe_origin=18.5)) == 0.0
    assert to_zar(100, "GBP", ExchangeRates(roe_origin=18.5, roe_eur=20)) == 0.0
    assert to_zar("bad", "USD", ExchangeRates(roe_origin=18.5)) == 0.0


def test_customs_rate_prefers_override_and_eur_falls_back():
    rates = ExchangeRates(roe_origin=18.0, roe_customs=18.45)
    assert customs_rate_for("USD", rates) == 18.45
    assert customs_rate_for("EUR", rates) == 18.45
    assert customs_rate_for("EUR", ExchangeRates(roe_origin=18.0, roe_eur=20.0)) == 20.0
    assert customs_rate_for("USD", ExchangeRates(roe_origin=18.0)) == 18.0
    assert customs_rate_for("ZAR", rates) == 1.0
    assert customs_rate_for("GBP", rates) == 0.0

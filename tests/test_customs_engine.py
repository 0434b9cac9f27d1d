import pytest

from customs_engine import (
    agency_fee,
    compute_customs,
    compute_product_customs,
    compute_shipment_customs,
    davif_fee,
)
from models import CostEstimate, ExchangeRates, ProductLine


def _aggregate_estimate(**overrides):
    values = dict(
        rates=ExchangeRates(roe_origin=18.5),
        origin_charge_usd=1000,
        duties_zar=500,
        customs_declaration_zar=590,
        agency_fee_percent=3.5,
        agency_fee_min=1187,
    )
    values.update(overrides)
    return CostEstimate(**values)


def test_agency_fee_floor_and_percentage():
    assert agency_fee(1000, 3.5, 1187) == 1187
    assert agency_fee(100000, 3.5, 1187) == pytest.approx(3500)
    assert agency_fee(0, 3.5, 1187) == 0.0


def test_davif_fee_has_minimum_and_zero_base():
    assert davif_fee(10000) == pytest.approx(325)
    assert davif_fee(1000) == 125
    assert davif_fee(0) == 0.0


def test_aggregate_customs_vat_is_reported_not_charged():
    customs = compute_customs(_aggregate_estimate())
    assert customs.customs_value_zar == pytest.approx(18500)
    assert customs.duties_zar == 500
    assert customs.agency_fee_zar == 1187
    assert customs.vat_zar == pytest.approx(19000 * 0.15)
    assert customs.subtotal_zar == pytest.approx(500 + 590 + 1187)


def test_duty_not_applicable_zeroes_duties():
    customs = compute_customs(_aggregate_estimate(customs_duty_not_applicable=True))
    assert customs.duties_zar == 0.0
    assert customs.subtotal_zar == pytest.approx(590 + 1187)
    assert customs.vat_zar == pytest.approx(18500 * 0.15)


def test_aggregate_customs_uses_override_rate():
    customs = compute_customs(_aggregate_estimate(rates=ExchangeRates(roe_origin=18.0, roe_customs=18.5)))
    assert customs.customs_value_zar == pytest.approx(18500)


def test_product_customs_two_duty_lines():
    product = ProductLine(invoice_value=1000, currency="USD", duty_percent=10, duty_schedule1_percent=5)
    line = compute_product_customs(product, ExchangeRates(roe_origin=18.0, roe_customs=18.5))
    assert line.roe == 18.5
    assert line.customs_value_zar == pytest.approx(18500)
    assert line.duties_zar == pytest.approx(1850)
    assert line.schedule1_duty_zar == pytest.approx(925)
    assert line.duty_total_zar == pytest.approx(2775)
    assert line.vat_zar == pytest.approx((18500 + 1850 + 925) * 0.15)


def test_eur_line_without_eur_rate_uses_customs_usd_rate():
    line = compute_product_customs(ProductLine(invoice_value=100, currency="EUR"), ExchangeRates(roe_origin=18.0))
    assert line.customs_value_zar == pytest.approx(1800)


def test_shipment_customs_sums_lines_and_fees_on_total_value():
    estimate = CostEstimate(
        rates=ExchangeRates(roe_origin=18.5, roe_eur=20.0),
        customs_declaration_zar=590,
        agency_fee_percent=3.5,
        agency_fee_min=1187,
        products=(
            ProductLine(name="A", invoice_value=1200, currency="USD", duty_percent=10),
            ProductLine(name="B", invoice_value=2000, currency="EUR", duty_schedule1_percent=5),
        ),
    )
    customs = compute_shipment_customs(estimate, vat_rate=0.0)
    assert customs.customs_value_zar == pytest.approx(62200)
    assert customs.duties_zar == pytest.approx(2220)
    assert customs.schedule1_duty_zar == pytest.approx(2000)
    assert customs.agency_fee_zar == pytest.approx(2177)
    assert customs.vat_zar == 0.0
    assert customs.subtotal_zar == pytest.approx(2220 + 2000 + 590 + 2177)

"""Customs value, duties, VAT and clearing fees.

Two modes are supported:

* aggregate - a shipment captured without product lines; the customs value is
  the converted origin charge and duties are a flat ZAR figure;
* per product - each line carries its own currency and duty rates, and the
  shipment figures are the per-field sums over all lines.

VAT is computed for reference only and never enters the customs subtotal.
"""
from __future__ import annotations

from typing import Iterable

from currency_engine import customs_rate_for
from models import CostEstimate, CustomsBreakdown, ExchangeRates, ProductCustoms, ProductLine
from settings import SETTINGS
from values import to_number


def percent_fee(base: float, percent: float, minimum: float) -> float:
    """Percentage-of-value fee with a floor; no fee is charged on a zero base."""
    base = to_number(base)
    if base <= 0:
        return 0.0
    return max(base * to_number(percent) / 100.0, to_number(minimum))


def agency_fee(customs_value_zar: float, percent: float, minimum: float) -> float:
    return percent_fee(customs_value_zar, percent, minimum)


def davif_fee(customs_value_zar: float) -> float:
    """DAVIF levy: a percentage of customs value with a rand minimum."""
    return percent_fee(customs_value_zar, SETTINGS.davif_percent, SETTINGS.davif_min)


def aggregate_customs_value(estimate: CostEstimate) -> float:
    rates = estimate.rates
    usd = to_number(estimate.origin_charge_usd) * to_number(rates.customs_usd_rate)
    eur = to_number(estimate.origin_charge_eur) * to_number(rates.roe_eur)
    return usd + eur


def compute_customs(estimate: CostEstimate, *, vat_rate: float | None = None) -> CustomsBreakdown:
    """Customs for a shipment without product lines."""
    vat_rate = SETTINGS.vat_rate if vat_rate is None else vat_rate
    customs_value = aggregate_customs_value(estimate)
    duties = 0.0 if estimate.customs_duty_not_applicable else to_number(estimate.duties_zar)
    declaration = to_number(estimate.customs_declaration_zar)
    fee = agency_fee(customs_value, estimate.agency_fee_percent, estimate.agency_fee_min)
    return CustomsBreakdown(
        customs_value_zar=customs_value,
        duties_zar=duties,
        schedule1_duty_zar=0.0,
        customs_declaration_zar=declaration,
        agency_fee_zar=fee,
        vat_zar=(customs_value + duties) * vat_rate,
        subtotal_zar=duties + declaration + fee,
    )


def compute_product_customs(product: ProductLine, rates: ExchangeRates, *, vat_rate: float | None = None) -> ProductCustoms:
    vat_rate = SETTINGS.vat_rate if vat_rate is None else vat_rate
    roe = customs_rate_for(product.currency, rates)
    customs_value = to_number(product.invoice_value) * roe
    duties = customs_value * to_number(product.duty_percent) / 100.0
    schedule1 = customs_value * to_number(product.duty_schedule1_percent) / 100.0
    return ProductCustoms(
        customs_value_zar=customs_value,
        duties_zar=duties,
        schedule1_duty_zar=schedule1,
        vat_zar=(customs_value + duties + schedule1) * vat_rate,
        roe=roe,
    )


def sum_product_customs(products: Iterable[ProductLine], rates: ExchangeRates, *, vat_rate: float | None = None) -> ProductCustoms:
    customs_value = duties = schedule1 = vat = 0.0
    for product in products:
        line = compute_product_customs(product, rates, vat_rate=vat_rate)
        customs_value += line.customs_value_zar
        duties += line.duties_zar
        schedule1 += line.schedule1_duty_zar
        vat += line.vat_zar
    return ProductCustoms(
        customs_value_zar=customs_value,
        duties_zar=duties,
        schedule1_duty_zar=schedule1,
        vat_zar=vat,
    )


def compute_shipment_customs(estimate: CostEstimate, *, vat_rate: float | None = None) -> CustomsBreakdown:
    """Customs for a shipment with product lines, rolled up from every line."""
    summed = sum_product_customs(estimate.products, estimate.rates, vat_rate=vat_rate)
    declaration = to_number(estimate.customs_declaration_zar)
    fee = agency_fee(summed.customs_value_zar, estimate.agency_fee_percent, estimate.agency_fee_min)
    return CustomsBreakdown(
        customs_value_zar=summed.customs_value_zar,
        duties_zar=summed.duties_zar,
        schedule1_duty_zar=summed.schedule1_duty_zar,
        customs_declaration_zar=declaration,
        agency_fee_zar=fee,
        vat_zar=summed.vat_zar,
        subtotal_zar=summed.duties_zar + summed.schedule1_duty_zar + declaration + fee,
    )

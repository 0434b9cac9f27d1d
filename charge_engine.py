"""Category subtotals for origin, local (transport/cartage) and destination (port) charges."""
from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from currency_engine import to_zar
from models import CostEstimate, ProductLine, norm_currency
from settings import DESTINATION_CHARGE_FIELDS, LOCAL_CHARGE_FIELDS
from values import to_number


def _sum_named(charges: dict | None, names: Iterable[str]) -> float:
    charges = charges or {}
    return sum(to_number(charges.get(name)) for name in names)


def sum_local_charges(estimate: CostEstimate) -> float:
    return _sum_named(dict(estimate.local_charges), LOCAL_CHARGE_FIELDS)


def sum_destination_charges(estimate: CostEstimate) -> float:
    return _sum_named(dict(estimate.destination_charges), DESTINATION_CHARGE_FIELDS)


def sum_origin_charges(estimate: CostEstimate) -> float:
    """Origin charges for a shipment captured without product lines."""
    return (
        to_zar(estimate.origin_charge_usd, "USD", estimate.rates)
        + to_zar(estimate.origin_charge_eur, "EUR", estimate.rates)
    )


def origin_by_currency(products: Iterable[ProductLine]) -> dict[str, float]:
    """Invoice value per currency; each line lands in exactly one bucket."""
    buckets: dict[str, float] = defaultdict(float)
    for code in ("USD", "EUR", "ZAR"):
        buckets[code] = 0.0
    for product in products:
        buckets[norm_currency(product.currency)] += to_number(product.invoice_value)
    return dict(buckets)

"""Weight-share allocation of shared shipping costs across product lines."""
from __future__ import annotations

import logging
from typing import Sequence

from customs_engine import compute_product_customs
from models import ExchangeRates, ProductAllocation, ProductLine, norm_currency
from values import to_number

logger = logging.getLogger(__name__)


def total_weight_kg(products: Sequence[ProductLine]) -> float:
    return sum(to_number(p.weight_kg) for p in products)


def weight_ratios(products: Sequence[ProductLine]) -> list[float]:
    """Each line's share of the container weight; all zero when nothing is weighed."""
    total = total_weight_kg(products)
    if total <= 0:
        return [0.0 for _ in products]
    return [to_number(p.weight_kg) / total for p in products]


def allocate(
    products: Sequence[ProductLine],
    total_shipping_cost_zar: float,
    rates: ExchangeRates | None = None,
    *,
    vat_rate: float | None = None,
) -> list[ProductAllocation]:
    """Split the shipping pool by mass share and add each line's own duties.

    The pool covers origin, local and destination charges. A line's customs
    cost is its duty plus schedule-1 duty; VAT is carried for display only.
    """
    rates = rates or ExchangeRates()
    pool = to_number(total_shipping_cost_zar)
    ratios = weight_ratios(products)
    if products and not any(ratios):
        logger.debug("No product weight captured; %d lines allocated zero shipping cost", len(products))

    rows: list[ProductAllocation] = []
    for product, ratio in zip(products, ratios):
        weight = to_number(product.weight_kg)
        customs = compute_product_customs(product, rates, vat_rate=vat_rate)
        allocated = pool * ratio
        customs_cost = customs.duties_zar + customs.schedule1_duty_zar
        total_cost = allocated + customs_cost
        rows.append(
            ProductAllocation(
                name=product.name,
                hs_code=product.hs_code,
                currency=norm_currency(product.currency),
                weight_kg=weight,
                invoice_value=to_number(product.invoice_value),
                customs_value_zar=customs.customs_value_zar,
                weight_ratio=ratio,
                allocated_shipping_cost_zar=allocated,
                product_customs_cost_zar=customs_cost,
                vat_zar=customs.vat_zar,
                total_product_cost_zar=total_cost,
                cost_per_kg_zar=total_cost / weight if weight > 0 else 0.0,
            )
        )
    return rows

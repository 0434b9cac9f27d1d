"""End-to-end landed-cost calculation for one cost estimate."""
from __future__ import annotations

import logging
from typing import Any, Mapping

from allocation_engine import allocate, total_weight_kg
from charge_engine import origin_by_currency, sum_destination_charges, sum_local_charges
from currency_engine import to_zar
from customs_engine import compute_customs, compute_shipment_customs, davif_fee
from models import CostEstimate, Totals
from values import to_number

logger = logging.getLogger(__name__)


def _cost_per_kg(total_cost: float, product_weight: float, legacy_weight: float) -> tuple[float, float]:
    """Per-kg cost and the weight it was based on; product weight takes precedence."""
    if product_weight > 0:
        return total_cost / product_weight, product_weight
    if legacy_weight > 0:
        return total_cost / legacy_weight, legacy_weight
    return 0.0, 0.0


def calculate_all_totals(estimate: CostEstimate | Mapping[str, Any], *, vat_rate: float | None = None) -> Totals:
    """Compute every subtotal and grand total for ``estimate``.

    Accepts a ``CostEstimate`` or a raw record (snake_case or camelCase keys).
    Missing or invalid numbers count as zero; nothing here raises.
    """
    if isinstance(estimate, Mapping):
        estimate = CostEstimate.from_record(estimate)
    elif not isinstance(estimate, CostEstimate):
        estimate = CostEstimate()
    rates = estimate.rates

    local_subtotal = sum_local_charges(estimate)
    destination_subtotal = sum_destination_charges(estimate)

    if estimate.has_products:
        buckets = origin_by_currency(estimate.products)
        origin_usd, origin_eur, origin_zar = buckets["USD"], buckets["EUR"], buckets["ZAR"]
        customs = compute_shipment_customs(estimate, vat_rate=vat_rate)
    else:
        origin_usd = to_number(estimate.origin_charge_usd)
        origin_eur = to_number(estimate.origin_charge_eur)
        origin_zar = 0.0
        customs = compute_customs(estimate, vat_rate=vat_rate)

    origin_usd_zar = to_zar(origin_usd, "USD", rates)
    origin_eur_zar = to_zar(origin_eur, "EUR", rates)
    total_origin = origin_usd_zar + origin_eur_zar

    total_shipping = total_origin + local_subtotal + destination_subtotal
    total_in_warehouse = total_shipping + customs.subtotal_zar

    product_weight = total_weight_kg(estimate.products)
    per_kg, weight_basis = _cost_per_kg(total_in_warehouse, product_weight, to_number(estimate.total_gross_weight_kg))
    if estimate.has_products and product_weight <= 0 and weight_basis > 0:
        logger.debug("Estimate %s: products carry no weight, per-kg cost uses gross weight", estimate.reference_number or "-")

    allocations = allocate(estimate.products, total_shipping, rates, vat_rate=vat_rate) if estimate.has_products else []

    totals = Totals(
        customs_value_zar=customs.customs_value_zar,
        origin_charge_usd=origin_usd,
        origin_charge_eur=origin_eur,
        origin_charge_local_zar=origin_zar,
        origin_charge_usd_zar=origin_usd_zar,
        origin_charge_eur_zar=origin_eur_zar,
        total_origin_charges_zar=total_origin,
        local_charges_subtotal_zar=local_subtotal,
        destination_charges_subtotal_zar=destination_subtotal,
        duties_zar=customs.duties_zar,
        schedule1_duty_zar=customs.schedule1_duty_zar,
        customs_declaration_zar=customs.customs_declaration_zar,
        agency_fee_zar=customs.agency_fee_zar,
        customs_subtotal_zar=customs.subtotal_zar,
        vat_zar=customs.vat_zar,
        davif_zar=davif_fee(customs.customs_value_zar),
        total_shipping_cost_zar=total_shipping,
        total_in_warehouse_cost_zar=total_in_warehouse,
        total_weight_kg=weight_basis,
        all_in_warehouse_cost_per_kg_zar=per_kg,
        product_allocations=tuple(allocations),
    )
    logger.debug(
        "Estimate %s: %d products, shipping %.2f, in-warehouse %.2f ZAR",
        estimate.reference_number or "-",
        len(estimate.products),
        total_shipping,
        total_in_warehouse,
    )
    return totals

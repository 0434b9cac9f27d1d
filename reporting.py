"""Tabular views of computed totals for summary panels and exports."""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Iterable, Mapping

import pandas as pd

from costing_engine import calculate_all_totals
from models import CostEstimate, Totals
from values import round2, round4, to_number

ALLOCATION_COLUMNS = [
    "name",
    "hs_code",
    "currency",
    "weight_kg",
    "invoice_value",
    "customs_value_zar",
    "weight_ratio",
    "allocated_shipping_cost_zar",
    "product_customs_cost_zar",
    "vat_zar",
    "total_product_cost_zar",
    "cost_per_kg_zar",
]


def _as_estimate(estimate: CostEstimate | Mapping[str, Any]) -> CostEstimate:
    return estimate if isinstance(estimate, CostEstimate) else CostEstimate.from_record(estimate)


def totals_frame(totals: Totals) -> pd.DataFrame:
    record = totals.to_record()
    record.pop("products")
    return pd.DataFrame([record])


def allocation_frame(totals: Totals) -> pd.DataFrame:
    return pd.DataFrame([a.to_record() for a in totals.product_allocations], columns=ALLOCATION_COLUMNS)


def product_names(estimates: Iterable[CostEstimate | Mapping[str, Any]], supplier: str | None = None) -> list[str]:
    names: set[str] = set()
    for raw in estimates:
        est = _as_estimate(raw)
        if supplier and est.supplier_name != supplier:
            continue
        names.update(p.name for p in est.products if p.name)
    return sorted(names)


def supplier_cost_summary(estimates: Iterable[CostEstimate | Mapping[str, Any]], product: str | None = None) -> pd.DataFrame:
    """In-warehouse cost per supplier, optionally narrowed to one product.

    With a product filter each estimate contributes its in-warehouse cost
    pro-rated by that product's share of the container weight.
    """
    bucket: dict[str, dict[str, float]] = defaultdict(lambda: {"estimates": 0, "total_cost": 0.0, "weight": 0.0, "invoice_value": 0.0})
    for raw in estimates:
        est = _as_estimate(raw)
        relevant = [p for p in est.products if product is None or p.name == product]
        if product is not None and not relevant:
            continue
        totals = calculate_all_totals(est)
        container_weight = sum(to_number(p.weight_kg) for p in est.products)
        product_weight = sum(to_number(p.weight_kg) for p in relevant)
        share = product_weight / container_weight if product is not None and container_weight > 0 else 1.0
        weight = product_weight if product is not None else (totals.total_weight_kg or container_weight)

        rec = bucket[est.supplier_name or "Unknown"]
        rec["estimates"] += 1
        rec["total_cost"] += totals.total_in_warehouse_cost_zar * share
        rec["weight"] += weight
        rec["invoice_value"] += sum(to_number(p.invoice_value) for p in relevant)

    rows = []
    for supplier, rec in bucket.items():
        rows.append({
            "supplier": supplier,
            "estimates": int(rec["estimates"]),
            "total_cost_zar": round2(rec["total_cost"]),
            "total_weight_kg": round2(rec["weight"]),
            "total_invoice_value": round2(rec["invoice_value"]),
            "cost_per_kg_zar": round4(rec["total_cost"] / rec["weight"]) if rec["weight"] else 0.0,
        })
    columns = ["supplier", "estimates", "total_cost_zar", "total_weight_kg", "total_invoice_value", "cost_per_kg_zar"]
    return pd.DataFrame(rows, columns=columns).sort_values("supplier", ignore_index=True)

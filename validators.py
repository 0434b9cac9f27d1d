"""Caller-side checks run before a cost estimate reaches the engine.

The engine itself substitutes zero for anything unusable; these helpers are
for forms and uploads that want to tell the user what is wrong.
"""
from __future__ import annotations

import pandas as pd

from field_specs import validate_table_rows
from models import CostEstimate, norm_currency
from settings import SUPPORTED_CURRENCIES


def require_cols(df: pd.DataFrame, cols: list[str]) -> list[str]:
    missing = []
    for col in cols:
        if col not in df.columns or df[col].fillna("").astype(str).str.strip().eq("").any():
            missing.append(col)
    return missing


def validate_positive(df: pd.DataFrame, cols: list[str], allow_zero: bool = False) -> list[str]:
    errors = []
    for col in cols:
        if col not in df.columns:
            continue
        vals = pd.to_numeric(df[col], errors="coerce")
        bad = vals.lt(0) if allow_zero else vals.le(0)
        if vals.isna().any() or bad.any():
            cmp = ">= 0" if allow_zero else "> 0"
            errors.append(f"{col} must be numeric and {cmp}")
    return errors


def validate_with_specs(table_key: str, df: pd.DataFrame) -> list[str]:
    return validate_table_rows(table_key, df)


def validate_products(df: pd.DataFrame) -> list[str]:
    """Problems with a product-line grid, empty when it is safe to cost."""
    errors = [f"{col} is required for every product" for col in require_cols(df, ["name", "weight_kg", "currency"])]
    errors.extend(validate_positive(df, ["weight_kg"], allow_zero=True))
    errors.extend(validate_with_specs("products", df))
    if "weight_kg" in df.columns and not df.empty:
        weights = pd.to_numeric(df["weight_kg"], errors="coerce").fillna(0)
        if weights.sum() <= 0:
            errors.append("At least one product needs a weight for shipping costs to be allocated")
    return errors


def validate_estimate(estimate_row: dict) -> list[str]:
    return validate_with_specs("estimate", pd.DataFrame([estimate_row]))


def require_supported_currencies(estimate: CostEstimate) -> None:
    """Raise when any product line is invoiced in a currency the engine cannot convert."""
    bad = [i for i, p in enumerate(estimate.products) if norm_currency(p.currency) not in SUPPORTED_CURRENCIES]
    if bad:
        codes = sorted({norm_currency(estimate.products[i].currency) for i in bad})
        raise ValueError(
            f"Unsupported currency {', '.join(codes)}; expected one of {', '.join(SUPPORTED_CURRENCIES)} (bad row indexes: {', '.join(map(str, bad))})"
        )

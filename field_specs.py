from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import re
from typing import Any

import pandas as pd

from settings import DEFAULT_DESTINATION_CHARGES, DEFAULT_LOCAL_CHARGES, SUPPORTED_CURRENCIES


@dataclass(frozen=True)
class FieldSpec:
    field_type: str
    required: bool = False
    description: str = ""
    example: str = ""
    fmt: str = ""
    max_length: int | None = None
    regex: str | None = None
    allowed_chars: str = ""
    min_value: float | int | None = None
    max_value: float | int | None = None
    choices: list[str] | None = None
    notes: str = ""


def _charge_spec(name: str, default: float, group: str) -> FieldSpec:
    label = name.removesuffix("_zar").replace("_", " ")
    return FieldSpec("decimal", min_value=0, description=f"{group}: {label} (ZAR)", example=f"{default:g}", notes=f"Summed into the {group.lower()} subtotal.")


TABLE_SPECS: dict[str, dict[str, FieldSpec]] = {
    "products": {
        "name": FieldSpec("text", required=True, max_length=120, description="Product name", example="Frozen hake fillets"),
        "hs_code": FieldSpec("text", max_length=20, regex=r"^[0-9.]{4,20}$", allowed_chars="0-9, .", description="HS tariff code", example="0304.74.00"),
        "pack_size": FieldSpec("text", max_length=40, description="Pack size", example="10kg"),
        "pack_type": FieldSpec("text", max_length=40, description="Pack type", example="CARTON"),
        "weight_kg": FieldSpec("decimal", required=True, min_value=0, description="Weight in the shared container", example="600", notes="Drives the weight share of shipping costs."),
        "rate_per_kg": FieldSpec("decimal", min_value=0, description="Supplier price per kg", example="4.25", notes="Invoice value = weight x rate, rounded to cents."),
        "invoice_value": FieldSpec("decimal", min_value=0, description="Invoice value in line currency", example="2550"),
        "currency": FieldSpec("text", required=True, choices=list(SUPPORTED_CURRENCIES), description="Invoice currency", example="USD"),
        "duty_percent": FieldSpec("decimal", min_value=0, max_value=100, description="Customs duty %", example="10"),
        "duty_schedule1_percent": FieldSpec("decimal", min_value=0, max_value=100, description="Schedule 1 duty %", example="0"),
    },
    "estimate": {
        "reference_number": FieldSpec("text", required=True, max_length=40, regex=r"^[A-Z0-9_/-]{2,40}$", allowed_chars="A-Z, 0-9, _, /, -", description="Estimate reference", example="ICE-2026-0042"),
        "supplier_name": FieldSpec("text", max_length=120, description="Supplier display name", example="Oceana Seafoods"),
        "costing_date": FieldSpec("date", fmt="YYYY-MM-DD", description="Date the rates were captured", example="2026-03-01"),
        "roe_origin": FieldSpec("decimal", required=True, min_value=0, description="USD/ZAR rate of exchange", example="18.5", notes="Converts USD origin charges."),
        "roe_eur": FieldSpec("decimal", min_value=0, description="EUR/ZAR rate of exchange", example="20.1"),
        "roe_customs": FieldSpec("decimal", min_value=0, description="USD/ZAR rate for customs value", example="18.45", notes="Falls back to roe_origin when blank."),
        "origin_charge_usd": FieldSpec("decimal", min_value=0, description="Origin charges (USD)", example="1000"),
        "origin_charge_eur": FieldSpec("decimal", min_value=0, description="Origin charges (EUR)", example="0"),
        **{name: _charge_spec(name, default, "Local") for name, default in DEFAULT_LOCAL_CHARGES.items()},
        **{name: _charge_spec(name, default, "Destination") for name, default in DEFAULT_DESTINATION_CHARGES.items()},
        "duties_zar": FieldSpec("decimal", min_value=0, description="Customs duties (ZAR)", example="0", notes="Only used when no product lines are captured."),
        "customs_declaration_zar": FieldSpec("decimal", min_value=0, description="Customs declaration fee (ZAR)", example="590"),
        "agency_fee_percent": FieldSpec("decimal", min_value=0, max_value=100, description="Clearing agency fee %", example="3.5"),
        "agency_fee_min": FieldSpec("decimal", min_value=0, description="Clearing agency minimum fee (ZAR)", example="1187"),
        "total_gross_weight_kg": FieldSpec("decimal", min_value=0, description="Gross weight without product lines", example="18000", notes="Ignored when product lines carry weight."),
    },
}


def field_guide_df(table_key: str) -> pd.DataFrame:
    rows: list[dict[str, Any]] = []
    for col, spec in TABLE_SPECS.get(table_key, {}).items():
        rows.append(
            {
                "column": col,
                "type": spec.field_type,
                "required": spec.required,
                "format": spec.fmt or "-",
                "allowed": spec.allowed_chars or (", ".join(spec.choices) if spec.choices else (f"<= {spec.max_length} chars" if spec.max_length else "-")),
                "range": f"{spec.min_value if spec.min_value is not None else '-∞'} .. {spec.max_value if spec.max_value is not None else '∞'}" if spec.field_type in {"int", "decimal"} else "-",
                "example": spec.example,
                "notes": spec.notes or "-",
            }
        )
    return pd.DataFrame(rows)


def validate_table_rows(table_key: str, df: pd.DataFrame) -> list[str]:
    errors: list[str] = []
    specs = TABLE_SPECS.get(table_key, {})
    for i, (_, row) in enumerate(df.iterrows(), start=1):
        for col, spec in specs.items():
            if col not in df.columns:
                continue
            value = row.get(col)
            empty = pd.isna(value) or str(value).strip() == ""
            if spec.required and empty:
                errors.append(f"Row {i} ({col}): required. Example: {spec.example}")
                continue
            if empty:
                continue
            if spec.field_type == "date":
                try:
                    datetime.strptime(str(value), "%Y-%m-%d")
                except ValueError:
                    errors.append(f"Row {i} ({col}): must be YYYY-MM-DD. Example: {spec.example}")
            if spec.field_type in {"int", "decimal"}:
                num = pd.to_numeric(pd.Series([value]), errors="coerce").iloc[0]
                if pd.isna(num):
                    errors.append(f"Row {i} ({col}): must be numeric. Example: {spec.example}")
                    continue
                if spec.min_value is not None and num < spec.min_value:
                    errors.append(f"Row {i} ({col}): must be >= {spec.min_value}. Example: {spec.example}")
                if spec.max_value is not None and num > spec.max_value:
                    errors.append(f"Row {i} ({col}): must be <= {spec.max_value}. Example: {spec.example}")
                continue
            txt = str(value).strip()
            if spec.max_length and len(txt) > spec.max_length:
                errors.append(f"Row {i} ({col}): max length {spec.max_length}. Example: {spec.example}")
            if spec.regex and not re.fullmatch(spec.regex, txt):
                char_hint = f", {spec.allowed_chars} only" if spec.allowed_chars else ""
                errors.append(f"Row {i} ({col}): invalid format{char_hint}. Example: {spec.example}")
            if spec.choices and txt.upper() not in spec.choices:
                errors.append(f"Row {i} ({col}): must be one of {', '.join(spec.choices)}. Example: {spec.example}")
    return errors

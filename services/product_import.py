"""Product-line uploads (CSV/XLSX) for multi-product cost estimates."""
from __future__ import annotations

import io

import pandas as pd

from models import ProductLine
from validators import validate_products

REQUIRED_COLUMNS = ["name", "weight_kg", "currency"]
COLUMN_ALIASES = {
    "product": "name",
    "description": "name",
    "hs": "hs_code",
    "weight": "weight_kg",
    "kg": "weight_kg",
    "rate": "rate_per_kg",
    "invoice": "invoice_value",
    "duty": "duty_percent",
    "schedule1": "duty_schedule1_percent",
}


def read_product_upload(file_name: str, blob: bytes) -> pd.DataFrame:
    lower = file_name.lower()
    if lower.endswith(".csv"):
        return pd.read_csv(io.BytesIO(blob))
    if lower.endswith(".xlsx"):
        return pd.read_excel(io.BytesIO(blob))
    raise ValueError("Unsupported file format. Upload CSV or XLSX.")


def normalize_product_frame(frame: pd.DataFrame) -> pd.DataFrame:
    rename = {c: str(c).strip().lower().replace(" ", "_") for c in frame.columns}
    df = frame.rename(columns=rename)
    df = df.rename(columns={k: v for k, v in COLUMN_ALIASES.items() if k in df.columns and v not in df.columns}).copy()
    if "currency" in df.columns:
        df["currency"] = df["currency"].fillna("USD").astype(str).str.strip().str.upper()
    return df


def products_from_frame(frame: pd.DataFrame) -> list[ProductLine]:
    """Validate an uploaded grid and turn each row into a ``ProductLine``.

    Raises ``ValueError`` listing every problem when the grid is unusable.
    """
    df = normalize_product_frame(frame)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(missing)}")
    errors = validate_products(df)
    if errors:
        raise ValueError("; ".join(errors))
    records = df.astype(object).where(pd.notna(df), None).to_dict(orient="records")
    return [ProductLine.from_record(r) for r in records]


def load_products(file_name: str, blob: bytes) -> list[ProductLine]:
    return products_from_frame(read_product_upload(file_name, blob))

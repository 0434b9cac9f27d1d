"""Default estimate values and CSV template helpers."""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from pathlib import Path
import csv
import io
from typing import Any

from field_specs import TABLE_SPECS, field_guide_df
from models import CostEstimate, ExchangeRates
from settings import DEFAULT_DESTINATION_CHARGES, DEFAULT_LOCAL_CHARGES, SETTINGS


TEMPLATE_SPECS: list[tuple[str, str]] = [
    ("products", "products_template.csv"),
    ("estimate", "estimate_template.csv"),
]


def new_estimate(**overrides: Any) -> CostEstimate:
    """A blank estimate pre-filled with the rate-sheet charges and customs defaults."""
    estimate = CostEstimate(
        costing_date=date.today().isoformat(),
        container_type="20' Dry Container",
        inco_terms="CIF",
        port_of_discharge="CPT",
        rates=ExchangeRates(),
        local_charges=dict(DEFAULT_LOCAL_CHARGES),
        destination_charges=dict(DEFAULT_DESTINATION_CHARGES),
        customs_declaration_zar=SETTINGS.customs_declaration_zar,
        agency_fee_percent=SETTINGS.agency_fee_percent,
        agency_fee_min=SETTINGS.agency_fee_min,
    )
    return replace(estimate, **overrides) if overrides else estimate


def ensure_templates(template_dir: Path | str = "templates") -> None:
    template_dir = Path(template_dir)
    template_dir.mkdir(exist_ok=True)

    for table_key, fname in TEMPLATE_SPECS:
        cols = list(TABLE_SPECS[table_key].keys())
        sample_row = [TABLE_SPECS[table_key][col].example for col in cols]
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(cols)
        writer.writerow(sample_row)
        (template_dir / fname).write_text(buffer.getvalue(), encoding="utf-8")
        field_guide_df(table_key).to_csv(template_dir / f"{table_key}_field_guide.csv", index=False)

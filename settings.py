"""Engine defaults, overridable through environment variables."""
from __future__ import annotations

import math
import os
from dataclasses import dataclass


# AFI rate sheet defaults for the named local (transport/cartage) charges, ZAR.
DEFAULT_LOCAL_CHARGES: dict[str, float] = {
    "local_cartage_cpt_klapmuts_20ton_zar": 6970.0,
    "local_cartage_cpt_klapmuts_28ton_zar": 7500.0,
    "transport_dbn_to_pretoria_20ft_zar": 16640.0,
    "transport_dbn_to_pretoria_40ft_zar": 20380.0,
    "transport_dbn_to_whs_zar": 5350.0,
    "unpack_reload_zar": 5430.0,
    "storage_zar": 15.0,
    "outlying_depot_surcharge_zar": 964.0,
    "local_cartage_dbn_whs_pretoria_opt_a_zar": 17000.0,
    "local_cartage_dbn_whs_pretoria_opt_b_zar": 19260.0,
    "local_cartage_dbn_whs_pretoria_6m_zar": 10370.0,
    "local_cartage_dbn_whs_pretoria_12m_zar": 14330.0,
    "transport_pe_coega_to_pretoria_zar": 0.0,
}

# Destination (port/shipping) charge defaults, ZAR.
DEFAULT_DESTINATION_CHARGES: dict[str, float] = {
    "shipping_line_charges_zar": 0.0,
    "cargo_dues_20ft_zar": 1879.72,
    "cargo_dues_40ft_zar": 3759.42,
    "cto_fee_zar": 360.0,
    "port_health_inspection_zar": 620.0,
    "daff_inspection_zar": 620.0,
    "state_vet_cancellation_fee_zar": 290.0,
    "jnb_turn_in_zar": 0.0,
}

SUPPORTED_CURRENCIES = ("USD", "EUR", "ZAR")


@dataclass(frozen=True)
class EngineSettings:
    vat_rate: float = 0.15
    agency_fee_percent: float = 3.5
    agency_fee_min: float = 1187.0
    customs_declaration_zar: float = 590.0
    davif_percent: float = 3.25
    davif_min: float = 125.0
    log_level: str = "INFO"
    log_json: bool = False


def _env_number(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) and value >= 0 else default


def load_settings() -> EngineSettings:
    defaults = EngineSettings()
    return EngineSettings(
        vat_rate=_env_number("LANDED_COST_VAT_RATE", defaults.vat_rate),
        agency_fee_percent=_env_number("LANDED_COST_AGENCY_FEE_PERCENT", defaults.agency_fee_percent),
        agency_fee_min=_env_number("LANDED_COST_AGENCY_FEE_MIN", defaults.agency_fee_min),
        customs_declaration_zar=_env_number("LANDED_COST_DECLARATION_ZAR", defaults.customs_declaration_zar),
        davif_percent=_env_number("LANDED_COST_DAVIF_PERCENT", defaults.davif_percent),
        davif_min=_env_number("LANDED_COST_DAVIF_MIN", defaults.davif_min),
        log_level=(os.getenv("LANDED_COST_LOG_LEVEL") or defaults.log_level).strip().upper(),
        log_json=(os.getenv("LANDED_COST_LOG_JSON") or "").strip().lower() in {"1", "true", "yes"},
    )


SETTINGS = load_settings()

LOCAL_CHARGE_FIELDS: tuple[str, ...] = tuple(DEFAULT_LOCAL_CHARGES)
DESTINATION_CHARGE_FIELDS: tuple[str, ...] = tuple(DEFAULT_DESTINATION_CHARGES)

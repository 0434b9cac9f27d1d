"""Typed records for cost estimates, product lines and computed totals."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Mapping

from settings import DESTINATION_CHARGE_FIELDS, LOCAL_CHARGE_FIELDS
from values import non_negative, round2, round4, to_number


def _pick(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present, non-blank value among snake/camel aliases."""
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return default


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def norm_currency(currency: object) -> str:
    return str(currency or "USD").strip().upper() or "USD"


def derive_invoice_value(weight_kg: object, rate_per_kg: object) -> float:
    """Invoice value as captured on the costing form: round2(weight x rate)."""
    return round2(non_negative(weight_kg) * non_negative(rate_per_kg))


@dataclass(frozen=True)
class ExchangeRates:
    roe_origin: float = 0.0
    roe_eur: float = 0.0
    roe_customs: float | None = None

    @property
    def customs_usd_rate(self) -> float:
        return self.roe_customs if self.roe_customs else self.roe_origin

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ExchangeRates":
        customs = to_number(_pick(record, "roe_customs", "roeCustoms"))
        return cls(
            roe_origin=to_number(_pick(record, "roe_origin", "roeOrigin")),
            roe_eur=to_number(_pick(record, "roe_eur", "roeEur")),
            roe_customs=customs or None,
        )


@dataclass(frozen=True)
class ProductLine:
    name: str = ""
    hs_code: str = ""
    pack_size: str = ""
    pack_type: str = ""
    weight_kg: float = 0.0
    rate_per_kg: float = 0.0
    invoice_value: float = 0.0
    currency: str = "USD"
    duty_percent: float = 0.0
    duty_schedule1_percent: float = 0.0

    def with_weight(self, weight_kg: object) -> "ProductLine":
        weight = non_negative(weight_kg)
        return replace(self, weight_kg=weight, invoice_value=derive_invoice_value(weight, self.rate_per_kg))

    def with_rate(self, rate_per_kg: object) -> "ProductLine":
        rate = non_negative(rate_per_kg)
        return replace(self, rate_per_kg=rate, invoice_value=derive_invoice_value(self.weight_kg, rate))

    def with_invoice_value(self, invoice_value: object) -> "ProductLine":
        return replace(self, invoice_value=to_number(invoice_value))

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ProductLine":
        weight = non_negative(_pick(record, "weight_kg", "weightKg"))
        rate = non_negative(_pick(record, "rate_per_kg", "ratePerKg"))
        raw_invoice = _pick(record, "invoice_value", "invoiceValue")
        invoice = to_number(raw_invoice) if raw_invoice is not None else derive_invoice_value(weight, rate)
        return cls(
            name=str(_pick(record, "name", default="")),
            hs_code=str(_pick(record, "hs_code", "hsCode", default="")),
            pack_size=str(_pick(record, "pack_size", "packSize", default="")),
            pack_type=str(_pick(record, "pack_type", "packType", default="")),
            weight_kg=weight,
            rate_per_kg=rate,
            invoice_value=invoice,
            currency=norm_currency(_pick(record, "currency")),
            duty_percent=to_number(_pick(record, "duty_percent", "dutyPercent")),
            duty_schedule1_percent=to_number(_pick(record, "duty_schedule1_percent", "dutySchedule1Percent")),
        )


@dataclass(frozen=True)
class CostEstimate:
    reference_number: str = ""
    supplier_name: str = ""
    costing_date: str = ""
    container_type: str = ""
    inco_terms: str = ""
    port_of_discharge: str = ""
    status: str = "draft"
    notes: str = ""
    rates: ExchangeRates = field(default_factory=ExchangeRates)
    origin_charge_usd: float = 0.0
    origin_charge_eur: float = 0.0
    local_charges: Mapping[str, float] = field(default_factory=dict)
    destination_charges: Mapping[str, float] = field(default_factory=dict)
    duties_zar: float = 0.0
    customs_declaration_zar: float = 0.0
    agency_fee_percent: float = 0.0
    agency_fee_min: float = 0.0
    customs_duty_not_applicable: bool = False
    total_gross_weight_kg: float = 0.0
    products: tuple[ProductLine, ...] = ()

    @property
    def has_products(self) -> bool:
        return len(self.products) > 0

    def with_products(self, products: list[ProductLine] | tuple[ProductLine, ...]) -> "CostEstimate":
        """Replace the product lines and mirror their USD/EUR invoice buckets into the origin charges."""
        lines = tuple(products)
        usd = sum(p.invoice_value for p in lines if norm_currency(p.currency) == "USD")
        eur = sum(p.invoice_value for p in lines if norm_currency(p.currency) == "EUR")
        return replace(self, products=lines, origin_charge_usd=usd, origin_charge_eur=eur)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CostEstimate":
        raw_products = _pick(record, "products", default=None)
        if not isinstance(raw_products, (list, tuple)):
            raw_products = []
        products = tuple(ProductLine.from_record(p) for p in raw_products if isinstance(p, Mapping))
        return cls(
            reference_number=str(_pick(record, "reference_number", "referenceNumber", "reference", default="")),
            supplier_name=str(_pick(record, "supplier_name", "supplierName", default="")),
            costing_date=str(_pick(record, "costing_date", "costingDate", default="")),
            container_type=str(_pick(record, "container_type", "containerType", default="")),
            inco_terms=str(_pick(record, "inco_terms", "incoTerms", default="")),
            port_of_discharge=str(_pick(record, "port_of_discharge", "portOfDischarge", default="")),
            status=str(_pick(record, "status", default="draft")),
            notes=str(_pick(record, "notes", default="")),
            rates=ExchangeRates.from_record(record),
            origin_charge_usd=to_number(_pick(record, "origin_charge_usd", "originChargeUsd")),
            origin_charge_eur=to_number(_pick(record, "origin_charge_eur", "originChargeEur")),
            local_charges={name: to_number(record.get(name)) for name in LOCAL_CHARGE_FIELDS},
            destination_charges={name: to_number(record.get(name)) for name in DESTINATION_CHARGE_FIELDS},
            duties_zar=to_number(_pick(record, "duties_zar", "dutiesZar")),
            customs_declaration_zar=to_number(_pick(record, "customs_declaration_zar", "customsDeclarationZar")),
            agency_fee_percent=to_number(
                _pick(record, "agency_fee_percent", "agency_fee_percentage", "agencyFeePercent", "agencyFeePercentage")
            ),
            agency_fee_min=to_number(_pick(record, "agency_fee_min", "agencyFeeMin")),
            customs_duty_not_applicable=_flag(_pick(record, "customs_duty_not_applicable", "customsDutyNotApplicable")),
            total_gross_weight_kg=to_number(_pick(record, "total_gross_weight_kg", "totalGrossWeightKg")),
            products=products,
        )


@dataclass(frozen=True)
class ProductCustoms:
    customs_value_zar: float = 0.0
    duties_zar: float = 0.0
    schedule1_duty_zar: float = 0.0
    vat_zar: float = 0.0
    roe: float = 0.0

    @property
    def duty_total_zar(self) -> float:
        return self.duties_zar + self.schedule1_duty_zar


@dataclass(frozen=True)
class CustomsBreakdown:
    customs_value_zar: float = 0.0
    duties_zar: float = 0.0
    schedule1_duty_zar: float = 0.0
    customs_declaration_zar: float = 0.0
    agency_fee_zar: float = 0.0
    vat_zar: float = 0.0
    subtotal_zar: float = 0.0


@dataclass(frozen=True)
class ProductAllocation:
    name: str
    hs_code: str
    currency: str
    weight_kg: float
    invoice_value: float
    customs_value_zar: float
    weight_ratio: float
    allocated_shipping_cost_zar: float
    product_customs_cost_zar: float
    vat_zar: float
    total_product_cost_zar: float
    cost_per_kg_zar: float

    def to_record(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "hs_code": self.hs_code,
            "currency": self.currency,
            "weight_kg": round2(self.weight_kg),
            "invoice_value": round2(self.invoice_value),
            "customs_value_zar": round2(self.customs_value_zar),
            "weight_ratio": round4(self.weight_ratio),
            "allocated_shipping_cost_zar": round2(self.allocated_shipping_cost_zar),
            "product_customs_cost_zar": round2(self.product_customs_cost_zar),
            "vat_zar": round2(self.vat_zar),
            "total_product_cost_zar": round2(self.total_product_cost_zar),
            "cost_per_kg_zar": round4(self.cost_per_kg_zar),
        }


@dataclass(frozen=True)
class Totals:
    customs_value_zar: float = 0.0
    origin_charge_usd: float = 0.0
    origin_charge_eur: float = 0.0
    origin_charge_local_zar: float = 0.0
    origin_charge_usd_zar: float = 0.0
    origin_charge_eur_zar: float = 0.0
    total_origin_charges_zar: float = 0.0
    local_charges_subtotal_zar: float = 0.0
    destination_charges_subtotal_zar: float = 0.0
    duties_zar: float = 0.0
    schedule1_duty_zar: float = 0.0
    customs_declaration_zar: float = 0.0
    agency_fee_zar: float = 0.0
    customs_subtotal_zar: float = 0.0
    vat_zar: float = 0.0
    davif_zar: float = 0.0
    total_shipping_cost_zar: float = 0.0
    total_in_warehouse_cost_zar: float = 0.0
    total_weight_kg: float = 0.0
    all_in_warehouse_cost_per_kg_zar: float = 0.0
    product_allocations: tuple[ProductAllocation, ...] = ()

    @property
    def has_products(self) -> bool:
        return len(self.product_allocations) > 0

    def to_record(self) -> dict[str, Any]:
        """Persisted shape: money at 2 dp, per-kg figures at 4 dp."""
        record: dict[str, Any] = {}
        for key, value in asdict(self).items():
            if key == "product_allocations":
                continue
            record[key] = round4(value) if key.endswith("_per_kg_zar") else round2(value)
        record["products"] = [a.to_record() for a in self.product_allocations]
        return record

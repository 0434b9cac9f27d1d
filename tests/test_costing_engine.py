import json

import pytest

from costing_engine import calculate_all_totals
from models import CostEstimate, ExchangeRates, ProductLine, Totals


def _single_container_record(**extra):
    record = {
        "referenceNumber": "ICE-2026-0042",
        "originChargeUsd": 1000,
        "roeOrigin": 18.5,
        "agencyFeePercent": 3.5,
        "agencyFeeMin": 1187,
    }
    record.update(extra)
    return record


def _two_product_estimate():
    return CostEstimate(
        reference_number="ICE-2026-0043",
        rates=ExchangeRates(roe_origin=18.5, roe_eur=20.0),
        local_charges={"storage_zar": 1000},
        destination_charges={"cto_fee_zar": 500},
        customs_declaration_zar=590,
        agency_fee_percent=3.5,
        agency_fee_min=1187,
        products=(
            ProductLine(name="A", weight_kg=600, rate_per_kg=2, invoice_value=1200, currency="USD", duty_percent=10),
            ProductLine(name="B", weight_kg=400, rate_per_kg=5, invoice_value=2000, currency="EUR", duty_schedule1_percent=5),
        ),
    )


def test_end_to_end_without_products():
    totals = calculate_all_totals(_single_container_record())

    assert totals.customs_value_zar == pytest.approx(18500)
    assert totals.agency_fee_zar == 1187
    assert totals.total_origin_charges_zar == pytest.approx(18500)
    assert totals.total_shipping_cost_zar == pytest.approx(18500)
    assert totals.customs_subtotal_zar == pytest.approx(1187)
    assert totals.total_in_warehouse_cost_zar == pytest.approx(19687)
    assert totals.vat_zar == pytest.approx(2775)
    assert totals.davif_zar == pytest.approx(601.25)
    assert totals.total_weight_kg == 0
    assert totals.all_in_warehouse_cost_per_kg_zar == 0
    assert not totals.has_products


def test_declaration_and_duties_add_to_in_warehouse_cost():
    totals = calculate_all_totals(_single_container_record(customsDeclarationZar=590, dutiesZar=1000))
    assert totals.total_in_warehouse_cost_zar == pytest.approx(18500 + 1000 + 590 + 1187)


def test_legacy_gross_weight_drives_cost_per_kg_without_products():
    totals = calculate_all_totals(_single_container_record(totalGrossWeightKg=1000))
    assert totals.total_weight_kg == 1000
    assert totals.all_in_warehouse_cost_per_kg_zar == pytest.approx(19.687)


def test_product_path_totals_and_allocations():
    totals = calculate_all_totals(_two_product_estimate())

    assert totals.origin_charge_usd == 1200
    assert totals.origin_charge_eur == 2000
    assert totals.origin_charge_usd_zar == pytest.approx(22200)
    assert totals.origin_charge_eur_zar == pytest.approx(40000)
    assert totals.total_shipping_cost_zar == pytest.approx(63700)
    assert totals.customs_value_zar == pytest.approx(62200)
    assert totals.agency_fee_zar == pytest.approx(2177)
    assert totals.customs_subtotal_zar == pytest.approx(6987)
    assert totals.total_in_warehouse_cost_zar == pytest.approx(70687)
    assert totals.total_weight_kg == 1000
    assert totals.all_in_warehouse_cost_per_kg_zar == pytest.approx(70.687)

    a, b = totals.product_allocations
    assert a.allocated_shipping_cost_zar == pytest.approx(38220)
    assert a.total_product_cost_zar == pytest.approx(40440)
    assert a.cost_per_kg_zar == pytest.approx(67.4)
    assert b.allocated_shipping_cost_zar == pytest.approx(25480)
    assert b.total_product_cost_zar == pytest.approx(27480)
    assert b.cost_per_kg_zar == pytest.approx(68.7)


def test_product_weight_takes_precedence_over_gross_weight():
    from dataclasses import replace

    totals = calculate_all_totals(replace(_two_product_estimate(), total_gross_weight_kg=5000))
    assert totals.total_weight_kg == 1000


def test_products_without_weight_fall_back_to_gross_weight():
    estimate = CostEstimate(
        rates=ExchangeRates(roe_origin=10),
        total_gross_weight_kg=100,
        products=(ProductLine(name="A", invoice_value=100, currency="USD"),),
    )
    totals = calculate_all_totals(estimate)
    assert totals.total_in_warehouse_cost_zar == pytest.approx(1000)
    assert totals.total_weight_kg == 100
    assert totals.all_in_warehouse_cost_per_kg_zar == pytest.approx(10)
    assert totals.product_allocations[0].allocated_shipping_cost_zar == 0


def test_zar_products_enter_customs_value_but_not_shipping_cost():
    estimate = CostEstimate(products=(ProductLine(name="Local", weight_kg=10, invoice_value=300, currency="ZAR"),))
    totals = calculate_all_totals(estimate)
    assert totals.origin_charge_local_zar == 300
    assert totals.total_origin_charges_zar == 0
    assert totals.total_shipping_cost_zar == 0
    assert totals.customs_value_zar == 300
    assert totals.product_allocations[0].allocated_shipping_cost_zar == 0


def test_same_input_same_output():
    assert calculate_all_totals(_two_product_estimate()) == calculate_all_totals(_two_product_estimate())


def test_garbage_input_never_raises():
    assert calculate_all_totals({}) == Totals()
    assert calculate_all_totals(None) == Totals()
    totals = calculate_all_totals({"originChargeUsd": "abc", "roeOrigin": None, "products": "not-a-list"})
    assert totals.total_in_warehouse_cost_zar == 0


def test_to_record_rounds_money_and_per_kg_fields():
    record = calculate_all_totals(_two_product_estimate()).to_record()
    assert record["total_in_warehouse_cost_zar"] == 70687.0
    assert record["all_in_warehouse_cost_per_kg_zar"] == 70.687
    assert [p["name"] for p in record["products"]] == ["A", "B"]
    assert record["products"][0]["weight_ratio"] == 0.6


def test_huge_json_numbers_never_raise():
    totals = calculate_all_totals(json.loads('{"originChargeUsd": 1' + "0" * 400 + ', "roeOrigin": 18.5}'))
    assert totals.total_in_warehouse_cost_zar == 0


def test_large_charges_survive_persisted_rounding():
    record = calculate_all_totals(CostEstimate(local_charges={"storage_zar": 1e27})).to_record()
    assert record["local_charges_subtotal_zar"] == 1e27

"""
Shipping cost tests.

Tests:
1-3. Golden DHL arithmetic (standard, peak season, express)
4-6. Zone, carrier and service resolution errors
7-8. Minimum billable weight
9.   Weight round-trip against the weight model
10.  Carriers and services added in the rate table
11.  Stencil shipments
"""

from datetime import date

import pytest

from quote_engine.errors import (
    BelowMinimumWeight,
    UnrecognizedCarrier,
    UnrecognizedService,
    UnsupportedDestination,
)
from quote_engine.rate_tables import CarrierRate
from quote_engine.rounding import round_half_up
from quote_engine.schemas import StencilSpec
from quote_engine.shipping import ShippingCalculator
from quote_engine.weights import WeightModel

JUNE = date(2025, 6, 10)
DECEMBER = date(2025, 12, 10)


# ============================================================
# 1-3. Golden values — Zone 2 Europe, DHL: base 50, 9.5/kg, fuel 18%, peak 22%
# ============================================================

def test_dhl_standard_to_germany(rates, make_spec):
    """1.0kg chargeable: base 59.50, fuel 10.71, no peak, final 70.21."""
    result = ShippingCalculator(rates).shipping_cost(make_spec(), "DE", "dhl", "standard", JUNE)
    assert result.zone == "Zone 2 - Europe"
    assert result.actual_weight == 0.705
    assert result.volumetric_weight == 0.064
    assert result.chargeable_weight == 1.0
    assert result.base_cost == 59.50
    assert result.fuel_surcharge == 10.71
    assert result.peak_charge == 0
    assert result.final_cost == 70.21


def test_peak_surcharge_only_in_peak_months(rates, make_spec):
    """December adds 22% of base: 13.09, final 83.30."""
    result = ShippingCalculator(rates).shipping_cost(make_spec(), "de", "dhl", "standard",
                                                     DECEMBER)
    assert result.peak_charge == 13.09
    assert result.final_cost == 83.30
    no_date = ShippingCalculator(rates).shipping_cost(make_spec(), "de", "dhl", "standard")
    assert no_date.peak_charge == 0


def test_service_multiplier_scales_final_cost(rates, make_spec):
    """Express ×1.3, economy ×0.8."""
    calc = ShippingCalculator(rates)
    assert calc.shipping_cost(make_spec(), "de", "dhl", "express", DECEMBER).final_cost == 108.29
    assert calc.shipping_cost(make_spec(), "de", "dhl", "economy", JUNE).final_cost == 56.17


# ============================================================
# 4-6. Resolution errors
# ============================================================

def test_unknown_country_is_unsupported(rates, make_spec):
    """No default zone: an unlisted country fails."""
    with pytest.raises(UnsupportedDestination) as exc:
        ShippingCalculator(rates).shipping_cost(make_spec(), "zz", "dhl", "standard", JUNE)
    assert exc.value.field == "country"
    assert exc.value.value == "zz"


def test_unknown_carrier_rejected(rates, make_spec):
    with pytest.raises(UnrecognizedCarrier):
        ShippingCalculator(rates).shipping_cost(make_spec(), "de", "pigeon", "standard", JUNE)


def test_unknown_service_is_not_silently_standard(rates, make_spec):
    with pytest.raises(UnrecognizedService) as exc:
        ShippingCalculator(rates).shipping_cost(make_spec(), "de", "dhl", "overnight", JUNE)
    assert exc.value.value == "overnight"


# ============================================================
# 7-8. Minimum billable weight
# ============================================================

def test_weightless_shipment_below_minimum(rates):
    """Nothing to bill rounds to 0kg, under the 0.5kg floor."""
    with pytest.raises(BelowMinimumWeight) as exc:
        ShippingCalculator(rates).cost_for_weight(0, 0, "de")
    assert exc.value.minimum_kg == 0.5


def test_small_parcel_below_minimum_without_billing_increment(rates, make_spec):
    """With increment rounding disabled a single small board is refused, not bumped."""
    shipping = rates.shipping.model_copy(update={"billing_increment_kg": 0})
    bundle = rates.model_copy(update={"shipping": shipping})
    with pytest.raises(BelowMinimumWeight):
        ShippingCalculator(bundle).shipping_cost(make_spec(quantity=1), "de", "dhl",
                                                 "standard", JUNE)


# ============================================================
# 9. Round-trip
# ============================================================

def test_actual_weight_matches_weight_model(rates, make_spec):
    """single board grams × quantity / 1000 is exactly the reported actual weight."""
    spec = make_spec(quantity=37, layers=4)
    grams = WeightModel(rates.shipping).single_panel_weight_grams(spec)
    result = ShippingCalculator(rates).shipping_cost(spec, "us", "fedex", "standard", JUNE)
    assert result.actual_weight == round_half_up(grams * 37 / 1000, 3)
    assert result.chargeable_weight >= rates.shipping.min_weight_kg


# ============================================================
# 10-11. Table-driven carriers, stencil shipments
# ============================================================

def _rates_with_sf_in_europe(rates):
    """Bundle copy with an "sf" rate card in Zone 2 and an "overnight" service."""
    shipping = rates.shipping
    sf = CarrierRate(base_rate=30, price_per_kg=6.0, fuel_surcharge_pct=0.10,
                     peak_surcharge_pct=0.0)
    europe = shipping.zones[1]
    europe = europe.model_copy(update={"carriers": {**europe.carriers, "sf": sf}})
    zones = [europe if z.name == europe.name else z for z in shipping.zones]
    services = {**shipping.service_multipliers, "overnight": 1.5}
    shipping = shipping.model_copy(update={"zones": zones, "service_multipliers": services})
    return rates.model_copy(update={"shipping": shipping})


def test_carrier_added_in_rate_table_is_quoted(rates, make_spec):
    """1.0kg with sf: base 36.00, fuel 3.60, final 39.60; overnight ×1.5 = 59.40."""
    calc = ShippingCalculator(_rates_with_sf_in_europe(rates))
    result = calc.shipping_cost(make_spec(), "de", "sf", "standard", JUNE)
    assert result.carrier == "sf"
    assert result.service == "standard"
    assert result.base_cost == 36.00
    assert result.fuel_surcharge == 3.60
    assert result.final_cost == 39.60

    overnight = calc.shipping_cost(make_spec(), "de", "SF", "overnight", JUNE)
    assert overnight.service == "overnight"
    assert overnight.final_cost == 59.40


def test_stencil_shipment_rated_on_table_weight(rates):
    """Two 370x470 frameless stencils weigh 2.0kg: base 69.00, fuel 12.42, final 81.42."""
    spec = StencilSpec.from_payload(
        {"border_type": "non_framework", "size": "370x470", "quantity": 2}
    )
    result = ShippingCalculator(rates).stencil_shipping_cost(spec, "de", "dhl", "standard", JUNE)
    assert result.actual_weight == 2.0
    assert result.volumetric_weight == 0
    assert result.chargeable_weight == 2.0
    assert result.base_cost == 69.00
    assert result.fuel_surcharge == 12.42
    assert result.final_cost == 81.42

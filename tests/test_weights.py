"""
Weight model tests.

Tests:
1-4.  Single-board weight breakdown (reference board golden values)
5-7.  Shipment, volumetric and chargeable weight
8-9.  Material handling and overrides
"""

import pytest

from quote_engine.errors import UnknownOptionValue
from quote_engine.options import CopperWeight
from quote_engine.weights import (
    OZ_TO_MM,
    WeightModel,
    chargeable_weight_kg,
    copper_thickness_cm,
    volumetric_weight_kg,
)


# ============================================================
# 1-4. Single board
# ============================================================

def test_copper_thickness_conversion():
    """1oz copper is 0.035mm, i.e. 0.0035cm."""
    assert OZ_TO_MM == 0.035
    assert copper_thickness_cm(CopperWeight.ONE_OZ) == pytest.approx(0.0035)
    assert copper_thickness_cm(CopperWeight.TWO_OZ) == pytest.approx(0.007)


def test_reference_board_breakdown(rates, make_spec):
    """10×10cm 1.6mm FR4 2-layer 1oz: every component matches hand arithmetic."""
    parts = WeightModel(rates.shipping).breakdown(make_spec())
    assert parts["laminate"] == pytest.approx(29.6)           # 100 × 0.16 × 1.85
    assert parts["outer_copper"] == pytest.approx(4.704)      # 2 × 100 × 0.0035 × 8.96 × 0.75
    assert parts["inner_copper"] == 0
    assert parts["plating"] == pytest.approx(0.14112)
    assert parts["solder_mask"] == pytest.approx(0.5)
    assert parts["silkscreen"] == pytest.approx(0.3)


def test_single_panel_weight_rounded_to_two_places(rates, make_spec):
    """35.24512g rounds half-up to 35.25g."""
    assert WeightModel(rates.shipping).single_panel_weight_grams(make_spec()) == 35.25


def test_inner_layers_add_copper(rates, make_spec):
    """A 4-layer board carries two inner copper layers, 1oz by default."""
    model = WeightModel(rates.shipping)
    four = model.breakdown(make_spec(layers=4))
    assert four["inner_copper"] == pytest.approx(four["outer_copper"])
    heavier = model.breakdown(make_spec(layers=4, inner_copper_weight="2"))
    assert heavier["inner_copper"] == pytest.approx(2 * four["inner_copper"])


# ============================================================
# 5-7. Shipment weights
# ============================================================

def test_total_weight_is_single_times_quantity(rates, make_spec):
    """Shipment weight = rounded single-board grams × quantity / 1000."""
    model = WeightModel(rates.shipping)
    spec = make_spec()
    assert model.total_weight_kg(spec) == 0.705
    panel = make_spec(quantity=4, shipment_type="panel", panel_multiplier=5)
    assert model.total_weight_kg(panel) == 0.705


def test_volumetric_weight_converts_thickness_to_cm(rates, make_spec):
    """10 × 10 × 0.16cm × 20 / 5000 = 0.064kg."""
    assert volumetric_weight_kg(10, 10, 1.6, 20) == pytest.approx(0.064)
    assert WeightModel(rates.shipping).volumetric_weight_kg(make_spec()) == 0.064


def test_chargeable_weight_rounds_up_to_increment():
    """Greater of actual/volumetric, rounded up to the billing step."""
    assert chargeable_weight_kg(0.705, 0.064) == 0.705
    assert chargeable_weight_kg(0.705, 0.064, 0.5) == 1.0
    assert chargeable_weight_kg(0.2, 1.1, 0.5) == 1.5
    assert chargeable_weight_kg(1.0, 0.3, 0.5) == 1.0


# ============================================================
# 8-9. Materials and overrides
# ============================================================

def test_unknown_material_density_is_an_error(rates):
    """A material missing from the density table fails instead of weighing nothing."""
    with pytest.raises(UnknownOptionValue) as exc:
        rates.shipping.density("ceramic")
    assert exc.value.field == "pcb_type"


def test_copper_coverage_is_overridable(rates, make_spec):
    """Full coverage weighs more copper than the 0.75 default."""
    spec = make_spec()
    default = WeightModel(rates.shipping).breakdown(spec)["outer_copper"]
    full = WeightModel(rates.shipping, copper_coverage=1.0).breakdown(spec)["outer_copper"]
    assert full == pytest.approx(default / 0.75)

# Board weight model: laminate + copper + finish + mask/legend, per single board.
# Densities come from the shipping rate table (g/cm³); the modelling
# constants below are approximations, not measured values, and can be
# overridden per instance or subclass.

import math

from .options import CopperWeight
from .rate_tables import ShippingRates
from .rounding import round_half_up

# 1 oz/ft² copper foil is 35 µm thick
OZ_TO_MM = 0.035

# Share of copper left after etching
COPPER_COVERAGE = 0.75
# Pads, vias and surface finish on top of the copper mass
PLATING_WEIGHT_FACTOR = 0.03
# Area densities, g/cm² per face
SOLDER_MASK_G_PER_CM2 = 0.0025
SILKSCREEN_G_PER_CM2 = 0.0015

OUTER_LAYER_COUNT = 2


def copper_thickness_cm(copper: CopperWeight) -> float:
    """Convert copper weight in ounces to foil thickness in centimetres."""
    return copper.ounces * OZ_TO_MM / 10.0


def volumetric_weight_kg(length_cm: float, width_cm: float, height_mm: float,
                         quantity: int, divisor: float = 5000) -> float:
    """
    Carrier volumetric weight. Board thickness is given in mm and converted
    to cm; length and width are already in cm.
    """
    height_cm = height_mm / 10.0
    return length_cm * width_cm * height_cm * quantity / divisor


def chargeable_weight_kg(actual_kg: float, volumetric_kg: float,
                         billing_increment_kg: float = 0.0) -> float:
    """
    The greater of actual and volumetric weight, rounded up to the carrier's
    billing increment (0 disables the rounding).
    """
    weight = max(actual_kg, volumetric_kg)
    if billing_increment_kg > 0:
        steps = math.ceil(round(weight / billing_increment_kg, 9))
        weight = steps * billing_increment_kg
    return round_half_up(weight, 3)


class WeightModel:
    """Physical mass of a PCB order, driven by the shipping table's densities."""

    COPPER_COVERAGE = COPPER_COVERAGE
    PLATING_WEIGHT_FACTOR = PLATING_WEIGHT_FACTOR
    SOLDER_MASK_G_PER_CM2 = SOLDER_MASK_G_PER_CM2
    SILKSCREEN_G_PER_CM2 = SILKSCREEN_G_PER_CM2

    def __init__(self, rates: ShippingRates, copper_coverage: float = None):
        self.rates = rates
        if copper_coverage is not None:
            self.COPPER_COVERAGE = copper_coverage

    def breakdown(self, spec) -> dict:
        """Mass of every board component in grams, unrounded."""
        area = spec.single_area_cm2
        density = self.rates.density(spec.pcb_type.value)
        laminate = area * (spec.thickness_mm / 10.0) * density

        copper_density = self.rates.copper_density
        outer = (OUTER_LAYER_COUNT * area * copper_thickness_cm(spec.outer_copper_weight)
                 * copper_density * self.COPPER_COVERAGE)
        inner_layers = max(0, spec.layers - OUTER_LAYER_COUNT)
        inner = (inner_layers * area * copper_thickness_cm(spec.inner_copper)
                 * copper_density * self.COPPER_COVERAGE)

        plating = (outer + inner) * self.PLATING_WEIGHT_FACTOR
        solder_mask = area * self.SOLDER_MASK_G_PER_CM2 * 2
        silkscreen = area * self.SILKSCREEN_G_PER_CM2 * 2
        return {
            "laminate": laminate,
            "outer_copper": outer,
            "inner_copper": inner,
            "plating": plating,
            "solder_mask": solder_mask,
            "silkscreen": silkscreen,
        }

    def single_panel_weight_grams(self, spec) -> float:
        """Weight of one board in grams, rounded to 2 decimals."""
        return round_half_up(sum(self.breakdown(spec).values()), 2)

    def total_weight_kg(self, spec) -> float:
        """Shipment weight: single board × quantity × panel multiplier, in kg."""
        grams = self.single_panel_weight_grams(spec)
        return round_half_up(grams * spec.total_quantity / 1000.0, 3)

    def volumetric_weight_kg(self, spec) -> float:
        return round_half_up(
            volumetric_weight_kg(
                spec.length_cm, spec.width_cm, spec.thickness_mm,
                spec.total_quantity, self.rates.volumetric_divisor,
            ),
            3,
        )

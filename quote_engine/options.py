"""
Option sets for every enumerable field of a quote request.

Values match the strings the ordering frontend submits. A value outside its
set is rejected at validation time; nothing silently prices as zero.
"""

import enum


class ProductType(str, enum.Enum):
    PCB = "pcb"
    STENCIL = "stencil"


class PcbType(str, enum.Enum):
    FR4 = "fr4"
    ALUMINUM = "aluminum"
    ROGERS = "rogers"
    FLEX = "flex"
    RIGID_FLEX = "rigid-flex"


class SurfaceFinish(str, enum.Enum):
    HASL = "hasl"
    LEADFREE = "leadfree"
    ENIG = "enig"
    OSP = "osp"
    IMMERSION_SILVER = "immersion_silver"
    IMMERSION_TIN = "immersion_tin"


class CopperWeight(str, enum.Enum):
    """Copper weight in ounces per square foot."""
    HALF_OZ = "0.5"
    ONE_OZ = "1"
    TWO_OZ = "2"
    THREE_OZ = "3"
    FOUR_OZ = "4"

    @property
    def ounces(self) -> float:
        return float(self.value)


class HdiLevel(str, enum.Enum):
    NONE = "none"
    ONE_STEP = "1step"
    TWO_STEP = "2step"
    THREE_STEP = "3step"


class SolderMaskColor(str, enum.Enum):
    GREEN = "green"
    BLUE = "blue"
    RED = "red"
    BLACK = "black"
    WHITE = "white"
    YELLOW = "yellow"
    MATT_GREEN = "matt_green"
    MATT_BLACK = "matt_black"


class SilkscreenColor(str, enum.Enum):
    WHITE = "white"
    BLACK = "black"
    GREEN = "green"


class MinTrace(str, enum.Enum):
    """Minimum trace width / spacing in mil."""
    T10 = "10/10"
    T8 = "8/8"
    T6 = "6/6"
    T5 = "5/5"
    T4 = "4/4"
    T3_5 = "3.5/3.5"


class MinHole(str, enum.Enum):
    """Minimum finished drill size in mm."""
    H0_30 = "0.3"
    H0_25 = "0.25"
    H0_20 = "0.2"
    H0_15 = "0.15"


class TestMethod(str, enum.Enum):
    # not a test class; keep pytest from collecting it
    __test__ = False

    NONE = "none"
    FLYING_PROBE = "flying_probe"
    FIXTURE = "fixture"


class ProductReport(str, enum.Enum):
    NONE = "none"
    PRODUCTION_REPORT = "production_report"
    IMPEDANCE_REPORT = "impedance_report"
    MICROSECTION_REPORT = "microsection_report"
    TEST_REPORT = "test_report"


class ShipmentType(str, enum.Enum):
    SINGLE = "single"
    PANEL = "panel"
    PANEL_AGENT = "panel_agent"


class Carrier(str, enum.Enum):
    DHL = "dhl"
    FEDEX = "fedex"
    UPS = "ups"


class ShippingService(str, enum.Enum):
    EXPRESS = "express"
    STANDARD = "standard"
    ECONOMY = "economy"


class StencilBorderType(str, enum.Enum):
    FRAMEWORK = "framework"
    NON_FRAMEWORK = "non_framework"


# Fields priced through PricingRates.option_deltas, in breakdown order.
PRICED_OPTION_FIELDS = [
    "pcb_type",
    "outer_copper_weight",
    "inner_copper_weight",
    "surface_finish",
    "hdi",
    "solder_mask",
    "silkscreen",
    "min_trace",
    "min_hole",
    "test_method",
]

# Boolean process flags priced through PricingRates.boolean_deltas.
PRICED_FLAGS = [
    "gold_fingers",
    "impedance",
    "edge_plating",
    "castellated_holes",
    "smt_assembly",
    "full_inspection",
]

"""
Request and result models for the quoting engine.

Specifications are immutable per calculation; results are value objects built
fresh on every call. Use the ``from_payload`` constructors at the boundary so
validation failures surface as the engine's own error taxonomy.
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .errors import (
    InvalidDimensions,
    InvalidQuantity,
    QuoteError,
    UnknownOptionValue,
)
from .options import (
    Carrier,
    CopperWeight,
    HdiLevel,
    MinHole,
    MinTrace,
    PcbType,
    ProductReport,
    ShipmentType,
    ShippingService,
    SilkscreenColor,
    SolderMaskColor,
    StencilBorderType,
    SurfaceFinish,
    TestMethod,
)

LAYER_COUNTS = [1, 2, 4, 6, 8, 10, 12, 14, 16, 18, 20]

_DIMENSION_FIELDS = {"length_cm", "width_cm", "thickness_mm"}
_QUANTITY_FIELDS = {"quantity", "panel_multiplier", "different_designs"}
_FLAG_FIELDS = (
    "gold_fingers", "impedance", "edge_plating", "castellated_holes",
    "smt_assembly", "full_inspection", "urgent",
)


def _raise_quote_error(exc: ValidationError, field_options: dict):
    """Translate the first pydantic error into the matching QuoteError."""
    err = exc.errors()[0]
    field = str(err["loc"][0]) if err["loc"] else None
    value = err.get("input")
    original = (err.get("ctx") or {}).get("error")
    if isinstance(original, QuoteError):
        raise original from exc
    if field in _DIMENSION_FIELDS:
        raise InvalidDimensions(field, value) from exc
    if field in _QUANTITY_FIELDS:
        raise InvalidQuantity(field, value) from exc
    if field in field_options:
        allowed = [getattr(o, "value", o) for o in field_options[field]]
        raise UnknownOptionValue(field, value, allowed) from exc
    raise QuoteError(f"{field}: {err['msg']}", field=field, value=value) from exc


class PcbSpec(BaseModel):
    """A bare-board (optionally assembled) PCB order line."""

    pcb_type: PcbType = PcbType.FR4
    layers: int = 2
    outer_copper_weight: CopperWeight = CopperWeight.ONE_OZ
    inner_copper_weight: Optional[CopperWeight] = None
    thickness_mm: float = Field(1.6, gt=0)
    length_cm: float = Field(gt=0)
    width_cm: float = Field(gt=0)

    surface_finish: SurfaceFinish = SurfaceFinish.HASL
    hdi: HdiLevel = HdiLevel.NONE
    solder_mask: SolderMaskColor = SolderMaskColor.GREEN
    silkscreen: SilkscreenColor = SilkscreenColor.WHITE
    min_trace: MinTrace = MinTrace.T6
    min_hole: MinHole = MinHole.H0_30
    test_method: TestMethod = TestMethod.FLYING_PROBE

    gold_fingers: bool = False
    impedance: bool = False
    edge_plating: bool = False
    castellated_holes: bool = False
    smt_assembly: bool = False
    full_inspection: bool = False
    urgent: bool = False
    product_report: Optional[List[ProductReport]] = None

    shipment_type: ShipmentType = ShipmentType.SINGLE
    quantity: int = Field(ge=1)
    panel_multiplier: Optional[int] = Field(None, ge=1)
    different_designs: int = Field(1, ge=1)

    class Config:
        frozen = True

    @field_validator(*_FLAG_FIELDS, mode="before")
    @classmethod
    def _null_flag_is_false(cls, value):
        return False if value is None else value

    @model_validator(mode="after")
    def _check_consistency(self):
        if self.layers not in LAYER_COUNTS:
            raise UnknownOptionValue("layers", self.layers, LAYER_COUNTS)
        if self.shipment_type != ShipmentType.SINGLE and self.panel_multiplier is None:
            raise InvalidQuantity(
                "panel_multiplier", None,
                f"is required for shipment_type {self.shipment_type.value!r}",
            )
        return self

    @classmethod
    def from_payload(cls, payload: dict) -> "PcbSpec":
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            _raise_quote_error(exc, _PCB_FIELD_OPTIONS)

    # --- Derived quantities ---

    @property
    def panel_count(self) -> int:
        """Panel-set multiplier — 1 when boards ship as singles."""
        if self.shipment_type == ShipmentType.SINGLE:
            return 1
        return self.panel_multiplier

    @property
    def total_quantity(self) -> int:
        """Number of boards actually produced."""
        return self.quantity * self.panel_count

    @property
    def single_area_cm2(self) -> float:
        return self.length_cm * self.width_cm

    @property
    def total_area_m2(self) -> float:
        return self.single_area_cm2 * self.total_quantity / 10000.0

    @property
    def inner_copper(self) -> CopperWeight:
        """Inner-layer copper, 1oz unless the order says otherwise."""
        return self.inner_copper_weight or CopperWeight.ONE_OZ

    def option_value(self, field: str) -> Optional[str]:
        """
        Table key for a priced option field, or None when the option does not
        apply. Inner copper only exists from 4 layers up and defaults to 1oz.
        """
        if field == "inner_copper_weight":
            return self.inner_copper.value if self.layers >= 4 else None
        return getattr(self, field).value

    @property
    def max_copper_oz(self) -> float:
        if self.layers >= 4:
            return max(self.outer_copper_weight.ounces, self.inner_copper.ounces)
        return self.outer_copper_weight.ounces

    @property
    def billable_reports(self) -> List[ProductReport]:
        """Requested reports other than "none". Absent, [] and ["none"] all bill nothing."""
        return [r for r in (self.product_report or []) if r != ProductReport.NONE]


_PCB_FIELD_OPTIONS = {
    "pcb_type": list(PcbType),
    "outer_copper_weight": list(CopperWeight),
    "inner_copper_weight": list(CopperWeight),
    "surface_finish": list(SurfaceFinish),
    "hdi": list(HdiLevel),
    "solder_mask": list(SolderMaskColor),
    "silkscreen": list(SilkscreenColor),
    "min_trace": list(MinTrace),
    "min_hole": list(MinHole),
    "test_method": list(TestMethod),
    "product_report": list(ProductReport),
    "shipment_type": list(ShipmentType),
    "layers": LAYER_COUNTS,
}


class StencilSpec(BaseModel):
    """A laser-cut SMT solder-paste stencil order line."""

    border_type: StencilBorderType = StencilBorderType.NON_FRAMEWORK
    size: str
    electropolishing: bool = False
    quantity: int = Field(ge=1)

    class Config:
        frozen = True

    @classmethod
    def from_payload(cls, payload: dict) -> "StencilSpec":
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            _raise_quote_error(exc, {"border_type": list(StencilBorderType)})


# --- Results ---

class PricingResult(BaseModel):
    total_price: float
    unit_price: float
    quantity: int
    breakdown: Dict[str, float] = {}
    notes: List[str] = []
    lead_time_days: int
    lead_time_reason: List[str] = []
    min_order_qty: int = 1


class ShippingResult(BaseModel):
    zone: str
    carrier: str
    service: str
    actual_weight: float
    volumetric_weight: float
    chargeable_weight: float
    base_cost: float
    fuel_surcharge: float
    peak_charge: float
    final_cost: float


class DeliveryResult(BaseModel):
    delivery_date: date
    requested_days: int
    adjusted_days: int
    actual_working_days: int
    total_calendar_days: int
    skipped_days: List[str] = []
    reason: List[str] = []
    is_urgent: bool = False


class QuoteResult(BaseModel):
    pricing: PricingResult
    shipping: ShippingResult
    delivery: DeliveryResult
    grand_total: float


# --- API request bodies ---

class ShippingRequest(BaseModel):
    spec: dict
    country: str
    carrier: str = Carrier.DHL.value
    service: str = ShippingService.STANDARD.value
    order_date: Optional[date] = None


class StencilShippingRequest(BaseModel):
    spec: dict
    country: str
    carrier: str = Carrier.DHL.value
    service: str = ShippingService.STANDARD.value
    order_date: Optional[date] = None


class DeliveryRequest(BaseModel):
    production_days: int
    start: datetime
    is_urgent: bool = False


class QuoteRequest(BaseModel):
    spec: dict
    country: str
    carrier: str = Carrier.DHL.value
    service: str = ShippingService.STANDARD.value
    order_time: Optional[datetime] = None

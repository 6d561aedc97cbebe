"""
Reference-data tables — option prices, carrier rate cards, stencil sizes, calendar.

Tables live as versioned JSON files in quote_engine/data/ (or Settings.DATA_DIR)
and are parsed into frozen pydantic models. Nothing here mutates after load:
a reload builds a complete new RateBundle and swaps the single reference.
"""

import json
import logging
import threading
from datetime import date
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .business_calendar import Calendar
from .config import Settings, settings as default_settings
from .errors import (
    UnknownOptionValue,
    UnrecognizedCarrier,
    UnsupportedDestination,
    UrgentNotSupported,
)
from .options import PRICED_FLAGS, PRICED_OPTION_FIELDS
from .rounding import to_decimal

logger = logging.getLogger(__name__)


# --- Pricing ---

class DiscountBreakpoint(BaseModel):
    min_qty: int = Field(ge=1)
    discount: float = Field(ge=0, lt=1)

    class Config:
        frozen = True

    @property
    def multiplier(self) -> float:
        return float(1 - to_decimal(self.discount))


class DayThreshold(BaseModel):
    min: float
    days: int

    class Config:
        frozen = True


class LeadTimeRules(BaseModel):
    base_days: int = Field(ge=1)
    max_days: int = 20
    days_per_extra_layer_pair: int = 1
    option_days: Dict[str, Dict[str, int]] = {}
    thick_copper_days: Dict[str, int] = {}
    flag_days: Dict[str, int] = {}
    report_days: int = 0
    multi_panel_days: int = 0
    area_thresholds: List[DayThreshold] = []
    quantity_thresholds: List[DayThreshold] = []

    class Config:
        frozen = True

    @field_validator("area_thresholds", "quantity_thresholds")
    @classmethod
    def _sort_descending(cls, value):
        return sorted(value, key=lambda t: t.min, reverse=True)

    @field_validator("option_days")
    @classmethod
    def _known_option_fields(cls, value):
        unknown = set(value) - set(PRICED_OPTION_FIELDS)
        if unknown:
            raise ValueError(f"lead_time.option_days has unknown fields: {sorted(unknown)}")
        return value


class UrgentOption(BaseModel):
    fee: float = Field(ge=0)
    fee_type: Literal["fixed", "per_sqm"] = "fixed"

    class Config:
        frozen = True


class UrgentFeeTable(BaseModel):
    """
    Rush fees keyed "<layers>-<copper>-<area range>", e.g. "2-1oz-0-0.5".

    area_ranges are the upper bounds (total m²) of every range but the open
    last one. Each tier maps days saved to a fixed order fee or a fee per m²
    of total board area. A missing tier or day count means no rush service.
    """

    area_ranges: List[float] = [0.5, 1, 3]
    tiers: Dict[str, Dict[int, UrgentOption]] = {}

    class Config:
        frozen = True

    def area_range(self, area_m2: float) -> str:
        lower = 0
        for upper in self.area_ranges:
            if area_m2 <= upper:
                return f"{lower:g}-{upper:g}"
            lower = upper
        return f"{lower:g}+"

    @staticmethod
    def copper_class(ounces: float) -> str:
        for oz in (4, 3, 2):
            if ounces >= oz:
                return f"{oz}oz"
        return "1oz"

    def tier_key(self, layers: int, ounces: float, area_m2: float) -> str:
        return f"{layers}-{self.copper_class(ounces)}-{self.area_range(area_m2)}"

    def fee_for(self, layers: int, ounces: float, area_m2: float, reduce_days: int):
        """Returns (tier key, fee). Fails closed on anything the table does not list."""
        key = self.tier_key(layers, ounces, area_m2)
        fee = self._option_fee(key, area_m2, reduce_days)
        if fee is None:
            raise UrgentNotSupported(key, reduce_days)
        # A larger board area never pays less than the top of a smaller range.
        for upper in self.area_ranges:
            if upper >= area_m2:
                break
            below = self._option_fee(self.tier_key(layers, ounces, upper), upper, reduce_days)
            if below is not None and below > fee:
                fee = below
        return key, fee

    def _option_fee(self, key: str, area_m2: float, reduce_days: int):
        option = self.tiers.get(key, {}).get(reduce_days)
        if option is None:
            return None
        fee = to_decimal(option.fee)
        if option.fee_type == "per_sqm":
            fee = fee * to_decimal(area_m2)
        return fee


class PricingRates(BaseModel):
    version: str
    currency: str = "USD"
    base_fee: float = Field(ge=0)
    area_rate_per_cm2: float = Field(ge=0)
    per_layer_rate: float = Field(ge=0)
    price_floor: float = Field(ge=0)
    option_deltas: Dict[str, Dict[str, float]]
    boolean_deltas: Dict[str, float] = {}
    report_rate_per_item: float = 0.0
    urgent_fees: UrgentFeeTable = UrgentFeeTable()
    discount_breakpoints: List[DiscountBreakpoint] = []
    min_order_qty_by_layers: Dict[int, int] = {}
    lead_time: LeadTimeRules

    class Config:
        frozen = True

    @field_validator("discount_breakpoints")
    @classmethod
    def _sort_breakpoints(cls, value):
        # first match wins when walking from the highest threshold down
        return sorted(value, key=lambda b: b.min_qty, reverse=True)

    @model_validator(mode="after")
    def _known_fields(self):
        unknown = set(self.option_deltas) - set(PRICED_OPTION_FIELDS)
        if unknown:
            raise ValueError(f"option_deltas has unknown fields: {sorted(unknown)}")
        unknown = set(self.boolean_deltas) - set(PRICED_FLAGS)
        if unknown:
            raise ValueError(f"boolean_deltas has unknown flags: {sorted(unknown)}")
        return self

    def option_delta(self, field: str, value: str) -> float:
        """Price delta for one option value. A value missing from the table fails closed."""
        table = self.option_deltas.get(field)
        if table is None or value not in table:
            raise UnknownOptionValue(field, value, list(table or {}))
        return table[value]

    def discount_multiplier(self, quantity: int) -> float:
        for breakpoint in self.discount_breakpoints:
            if quantity >= breakpoint.min_qty:
                return breakpoint.multiplier
        return 1.0

    def min_order_qty(self, layers: int) -> int:
        return self.min_order_qty_by_layers.get(layers, 1)


# --- Shipping ---

class CarrierRate(BaseModel):
    base_rate: float = Field(ge=0)
    price_per_kg: float = Field(ge=0)
    fuel_surcharge_pct: float = Field(ge=0)
    peak_surcharge_pct: float = Field(ge=0)

    class Config:
        frozen = True


class Zone(BaseModel):
    name: str
    countries: List[str]
    carriers: Dict[str, CarrierRate]

    class Config:
        frozen = True

    @field_validator("countries")
    @classmethod
    def _lowercase(cls, value):
        return [c.strip().lower() for c in value]

    def rate_for(self, carrier: str) -> CarrierRate:
        if carrier not in self.carriers:
            raise UnrecognizedCarrier(carrier, zone=self.name)
        return self.carriers[carrier]


class ShippingRates(BaseModel):
    version: str
    zones: List[Zone]
    service_multipliers: Dict[str, float]
    densities: Dict[str, float]
    copper_density: float = 8.96
    min_weight_kg: float = Field(0.5, ge=0)
    billing_increment_kg: float = Field(0.5, ge=0)
    volumetric_divisor: float = Field(5000, gt=0)
    peak_months: List[int] = [11, 12, 1]

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _one_zone_per_country(self):
        seen = {}
        for zone in self.zones:
            for country in zone.countries:
                if country in seen:
                    raise ValueError(
                        f"Country {country!r} is listed in both "
                        f"{seen[country]!r} and {zone.name!r}"
                    )
                seen[country] = zone.name
        return self

    def zone_for(self, country: str) -> Zone:
        code = (country or "").strip().lower()
        for zone in self.zones:
            if code in zone.countries:
                return zone
        raise UnsupportedDestination(country)

    def carriers(self) -> List[str]:
        names = []
        for zone in self.zones:
            for name in zone.carriers:
                if name not in names:
                    names.append(name)
        return names

    def density(self, material: str) -> float:
        if material not in self.densities:
            raise UnknownOptionValue("pcb_type", material, list(self.densities))
        return self.densities[material]

    def is_peak(self, day: date) -> bool:
        return day.month in self.peak_months


# --- Stencils ---

class StencilSize(BaseModel):
    price_per_pcs: float = Field(ge=0)
    shipping_extra_per_pcs: float = Field(0.0, ge=0)
    weight_kg_per_pcs: float = Field(gt=0)
    max_effective_area: str = ""

    class Config:
        frozen = True


class StencilRates(BaseModel):
    version: str
    electropolishing_per_pcs: float = Field(ge=0)
    lead_time_days: int = Field(2, ge=1)
    sizes: Dict[str, Dict[str, StencilSize]]

    class Config:
        frozen = True

    def size_info(self, border_type: str, size: str) -> StencilSize:
        if border_type not in self.sizes:
            raise UnknownOptionValue("border_type", border_type, list(self.sizes))
        table = self.sizes[border_type]
        if size not in table:
            raise UnknownOptionValue("size", size, list(table))
        return table[size]


# --- Bundle ---

class RateBundle(BaseModel):
    pricing: PricingRates
    shipping: ShippingRates
    stencil: StencilRates
    calendar: Calendar

    class Config:
        frozen = True


def _read_json(path: Path) -> dict:
    with open(path) as f:
        return json.load(f)


def load_pricing_rates(path: Path) -> PricingRates:
    rates = PricingRates.model_validate(_read_json(path))
    logger.info(
        "Loaded pricing table %s from %s (%d option fields, %d breakpoints)",
        rates.version, path, len(rates.option_deltas), len(rates.discount_breakpoints),
    )
    return rates


def load_shipping_rates(path: Path) -> ShippingRates:
    rates = ShippingRates.model_validate(_read_json(path))
    logger.info(
        "Loaded shipping table %s from %s (%d zones)", rates.version, path, len(rates.zones),
    )
    return rates


def load_stencil_rates(path: Path) -> StencilRates:
    rates = StencilRates.model_validate(_read_json(path))
    logger.info(
        "Loaded stencil table %s from %s (%d sizes)",
        rates.version, path, sum(len(t) for t in rates.sizes.values()),
    )
    return rates


def load_calendar(path: Path, strict: bool = False) -> Calendar:
    data = _read_json(path)
    calendar = Calendar.build(
        holidays={date.fromisoformat(d): name for d, name in data.get("holidays", {}).items()},
        working_weekends=[date.fromisoformat(d) for d in data.get("working_weekends", [])],
        version=data.get("version", path.stem),
        strict=strict,
    )
    logger.info(
        "Loaded calendar %s from %s (%d holidays, %d working weekends)",
        calendar.version, path, len(calendar.holidays), len(calendar.working_weekends),
    )
    return calendar


def load_bundle(config: Settings = None) -> RateBundle:
    """Load every table named in the settings into one immutable bundle."""
    config = config or default_settings
    return RateBundle(
        pricing=load_pricing_rates(config.data_path(config.PRICING_TABLE_FILE)),
        shipping=load_shipping_rates(config.data_path(config.SHIPPING_TABLE_FILE)),
        stencil=load_stencil_rates(config.data_path(config.STENCIL_TABLE_FILE)),
        calendar=load_calendar(
            config.data_path(config.CALENDAR_FILE), strict=config.STRICT_CALENDAR,
        ),
    )


class RateTableStore:
    """
    Holds the current RateBundle.

    Readers call current() and keep the bundle they got for the whole calculation.
    reload() builds the replacement completely before swapping one reference, so
    no reader ever sees a half-updated table.
    """

    def __init__(self, loader=None):
        self._loader = loader or load_bundle
        self._bundle: Optional[RateBundle] = None
        self._lock = threading.Lock()

    def current(self) -> RateBundle:
        bundle = self._bundle
        if bundle is None:
            with self._lock:
                if self._bundle is None:
                    self._bundle = self._loader()
                bundle = self._bundle
        return bundle

    def reload(self) -> RateBundle:
        with self._lock:
            new_bundle = self._loader()
            old = self._bundle
            self._bundle = new_bundle
        logger.info(
            "Rate tables swapped: pricing %s -> %s, shipping %s -> %s",
            old.pricing.version if old else None, new_bundle.pricing.version,
            old.shipping.version if old else None, new_bundle.shipping.version,
        )
        return new_bundle

    def replace(self, bundle: RateBundle) -> None:
        """Swap in an already-built bundle (e.g. one loaded from a database)."""
        with self._lock:
            self._bundle = bundle
        logger.info("Rate tables replaced with pricing %s", bundle.pricing.version)


default_store = RateTableStore()


def get_rates() -> RateBundle:
    return default_store.current()

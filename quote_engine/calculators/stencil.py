"""
SMT stencil calculator.

Stencils are priced straight off the size table: per-piece price, plus a
shipping extra for the large frames, plus electropolishing when requested.
No quantity discount, fixed lead time.
"""

import logging
from datetime import datetime
from decimal import Decimal

from ..options import ProductType
from ..rate_tables import RateBundle, get_rates
from ..rounding import round_weight, to_decimal
from ..schemas import PricingResult, StencilSpec
from .base import BaseProductCalculator

logger = logging.getLogger(__name__)


class StencilCalculator(BaseProductCalculator):

    product_type = ProductType.STENCIL

    def __init__(self, rates: RateBundle = None):
        self.rates = (rates or get_rates()).stencil

    def calculate_price(self, spec: StencilSpec, order_time: datetime = None) -> PricingResult:
        info = self.rates.size_info(spec.border_type.value, spec.size)
        quantity = spec.quantity
        notes = []
        breakdown = {}

        price = to_decimal(info.price_per_pcs)
        breakdown["stencil"] = price * quantity
        notes.append(
            f"{spec.border_type.value} stencil {spec.size}mm: "
            f"${price:.2f} × {quantity} pcs"
        )
        if info.max_effective_area:
            notes.append(f"Maximum effective area: {info.max_effective_area}mm")

        extra = to_decimal(info.shipping_extra_per_pcs)
        if extra:
            breakdown["shipping_extra"] = extra * quantity
            notes.append(f"Oversize handling: ${extra:.2f} × {quantity} pcs")

        if spec.electropolishing:
            polish = to_decimal(self.rates.electropolishing_per_pcs)
            breakdown["electropolishing"] = polish * quantity
            notes.append(f"Electropolishing: ${polish:.2f} × {quantity} pcs")

        total = sum(breakdown.values(), Decimal(0))
        lead_days = self.calculate_lead_time(spec, order_time)

        logger.debug("Priced stencil %s/%s x%d: total=%s", spec.border_type.value,
                     spec.size, quantity, total)
        return self.make_result(
            total=total,
            quantity=quantity,
            breakdown=breakdown,
            notes=notes,
            lead_time_days=lead_days,
            lead_time_reason=[f"Stencil production time: {lead_days} days"],
        )

    def calculate_lead_time(self, spec: StencilSpec, order_time: datetime = None) -> int:
        return self.rates.lead_time_days

    def calculate_weight(self, spec: StencilSpec) -> float:
        info = self.rates.size_info(spec.border_type.value, spec.size)
        return round_weight(to_decimal(info.weight_kg_per_pcs) * spec.quantity)

"""
Abstract base class for all product calculators.

Input: a validated product spec (PcbSpec, StencilSpec)
Output: PricingResult, plus lead time (working days) and shipment weight (kg)
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime

from ..rounding import round_money
from ..schemas import PricingResult

logger = logging.getLogger(__name__)


class BaseProductCalculator(ABC):
    """All product calculators inherit from this."""

    product_type = None

    @abstractmethod
    def calculate_price(self, spec, order_time: datetime = None) -> PricingResult:
        """Price the spec. order_time only feeds the lead-time cutoff rule."""

    @abstractmethod
    def calculate_lead_time(self, spec, order_time: datetime = None) -> int:
        """Production lead time in working days."""

    @abstractmethod
    def calculate_weight(self, spec) -> float:
        """Actual shipment weight in kg."""

    # --- Helper methods for all calculators ---

    def format_price(self, value) -> float:
        """Currency rounding: half-up at 2 decimals."""
        return round_money(value)

    def make_result(self, total, quantity: int, breakdown: dict, notes: list,
                    lead_time_days: int, lead_time_reason: list,
                    min_order_qty: int = 1) -> PricingResult:
        """Build a PricingResult with every money figure rounded the same way."""
        total = self.format_price(total)
        return PricingResult(
            total_price=total,
            unit_price=self.format_price(total / quantity),
            quantity=quantity,
            breakdown={k: self.format_price(v) for k, v in breakdown.items()},
            notes=list(notes),
            lead_time_days=lead_time_days,
            lead_time_reason=list(lead_time_reason),
            min_order_qty=min_order_qty,
        )

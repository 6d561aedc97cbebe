"""
Production lead time — how many working days the factory needs for an order.

Rule-based: a base day count plus one increment per "hard" option, each
increment traceable to a reason line. The count is in working days; turning
it into a calendar date is the delivery estimator's job.
"""

import logging
import math
from datetime import datetime
from typing import List, Tuple

from .business_calendar import rush_adjusted_days
from .rate_tables import LeadTimeRules

logger = logging.getLogger(__name__)


class LeadTimeCalculator:
    """Working-day lead time for a PcbSpec, driven by LeadTimeRules."""

    def __init__(self, rules: LeadTimeRules, cutoff_hour: int = 20,
                 max_rush_reduction: int = 2):
        self.rules = rules
        self.cutoff_hour = cutoff_hour
        self.max_rush_reduction = max_rush_reduction

    def calculate(self, spec, order_time: datetime = None,
                  urgent: bool = None) -> Tuple[int, List[str]]:
        """
        Returns (days, reasons).

        order_time: when given, an order at/after the cutoff hour adds a day.
        urgent: overrides spec.urgent; pass False to get the uncompressed count.
        """
        rules = self.rules
        reasons = [f"Base production time: {rules.base_days} days"]
        days = rules.base_days

        days += self._layer_days(spec, reasons)
        days += self._option_days(spec, reasons)
        days += self._copper_days(spec, reasons)
        days += self._flag_days(spec, reasons)
        days += self._volume_days(spec, reasons)

        if days > rules.max_days:
            logger.warning(
                "Lead time %d days exceeds %d for %d-layer order; capped, needs evaluation",
                days, rules.max_days, spec.layers,
            )
            reasons.append(
                f"Lead time capped at {rules.max_days} days (was {days}) - "
                f"requires engineering evaluation"
            )
            days = rules.max_days

        if order_time is not None and order_time.hour >= self.cutoff_hour:
            days += 1
            reasons.append(
                f"Order placed at {order_time:%H:%M}, after the "
                f"{self.cutoff_hour}:00 cutoff: +1 day"
            )

        if urgent is None:
            urgent = spec.urgent
        if urgent:
            before = days
            days = rush_adjusted_days(days, self.max_rush_reduction)
            reasons.append(f"Rush service: {before} -> {days} days (-{before - days})")

        return days, reasons

    def _layer_days(self, spec, reasons: list) -> int:
        extra_layers = max(0, spec.layers - 2)
        if not extra_layers:
            return 0
        add = math.ceil(extra_layers / 2) * self.rules.days_per_extra_layer_pair
        reasons.append(f"{spec.layers} layers ({extra_layers} inner): +{add} days")
        return add

    def _option_days(self, spec, reasons: list) -> int:
        total = 0
        for field, table in self.rules.option_days.items():
            value = spec.option_value(field)
            if value is None:
                continue
            add = table.get(value, 0)
            if add:
                total += add
                reasons.append(f"{field.replace('_', ' ').capitalize()} {value}: +{add} days")
        return total

    def _copper_days(self, spec, reasons: list) -> int:
        oz = spec.max_copper_oz
        if oz <= 2:
            return 0
        add = self.rules.thick_copper_days.get(f"{oz:g}", 0)
        if add:
            reasons.append(f"Heavy copper {oz:g}oz: +{add} days")
        return add

    def _flag_days(self, spec, reasons: list) -> int:
        total = 0
        for flag, add in self.rules.flag_days.items():
            if add and getattr(spec, flag, False):
                total += add
                reasons.append(f"{flag.replace('_', ' ').capitalize()}: +{add} days")
        reports = spec.billable_reports
        if reports and self.rules.report_days:
            total += self.rules.report_days
            names = ", ".join(r.value for r in reports)
            reasons.append(f"Product reports ({names}): +{self.rules.report_days} days")
        if spec.different_designs > 1 and self.rules.multi_panel_days:
            total += self.rules.multi_panel_days
            reasons.append(
                f"Multi-design panel ({spec.different_designs} designs): "
                f"+{self.rules.multi_panel_days} days"
            )
        return total

    def _volume_days(self, spec, reasons: list) -> int:
        total = 0
        area = spec.total_area_m2
        for threshold in self.rules.area_thresholds:
            if area >= threshold.min:
                total += threshold.days
                reasons.append(
                    f"Total area {area:.2f}m² (>= {threshold.min:g}m²): +{threshold.days} days"
                )
                break
        quantity = spec.total_quantity
        for threshold in self.rules.quantity_thresholds:
            if quantity >= threshold.min:
                total += threshold.days
                reasons.append(
                    f"Quantity {quantity} (>= {threshold.min:g} pcs): +{threshold.days} days"
                )
                break
        return total

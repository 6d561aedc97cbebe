"""
PCB pricing engine.

    unit      = base fee + area × area rate + extra layers × layer rate
                + Σ option deltas + Σ flag deltas + billable reports × report rate
    total     = unit × quantity × quantity-discount multiplier
    total    += urgent fee (by layers, copper class, area range, days saved)
    total     = max(total, price floor)

Quantity is boards produced: the order quantity, times the panel-set
multiplier in panel shipment modes. Every component lands in the breakdown
(order totals, pre-discount) and gets a note line, so a quote can be
explained back to the customer line by line.
"""

import logging
from datetime import datetime
from decimal import Decimal

from ..business_calendar import rush_adjusted_days
from ..config import settings
from ..errors import UnknownOptionValue
from ..lead_time import LeadTimeCalculator
from ..options import PRICED_FLAGS, PRICED_OPTION_FIELDS, ProductType
from ..rate_tables import RateBundle, get_rates
from ..rounding import to_decimal
from ..schemas import PcbSpec, PricingResult
from ..weights import WeightModel
from .base import BaseProductCalculator

logger = logging.getLogger(__name__)


class PcbPricingEngine(BaseProductCalculator):
    """Prices bare-board and assembled PCB orders from the pricing rate table."""

    product_type = ProductType.PCB

    def __init__(self, rates: RateBundle = None, cutoff_hour: int = None,
                 max_rush_reduction: int = None):
        bundle = rates or get_rates()
        self.rates = bundle.pricing
        self.weight_model = WeightModel(bundle.shipping)
        self.lead_time = LeadTimeCalculator(
            bundle.pricing.lead_time,
            cutoff_hour=settings.ORDER_CUTOFF_HOUR if cutoff_hour is None else cutoff_hour,
            max_rush_reduction=(settings.MAX_RUSH_REDUCTION_DAYS
                                if max_rush_reduction is None else max_rush_reduction),
        )

    def price(self, spec: PcbSpec, order_time: datetime = None) -> PricingResult:
        return self.calculate_price(spec, order_time)

    def calculate_price(self, spec: PcbSpec, order_time: datetime = None) -> PricingResult:
        quantity = spec.total_quantity
        notes = []
        unit_components = {}

        unit_components.update(self._base_components(spec, notes))
        unit_components.update(self._option_components(spec, notes))
        unit_components.update(self._flag_components(spec, notes))
        unit_components.update(self._report_component(spec, notes))

        unit = sum(unit_components.values(), Decimal(0))
        breakdown = {name: value * quantity for name, value in unit_components.items()}
        gross = unit * quantity
        notes.append(f"Unit price before discount: ${unit:.4f} × {quantity} pcs = ${gross:.2f}")

        total = self._apply_discount(unit, quantity, gross, breakdown, notes)
        total += self._urgent_fee(spec, order_time, breakdown, notes)
        total = self._apply_floor(total, breakdown, notes)

        min_order_qty = self.rates.min_order_qty(spec.layers)
        if quantity < min_order_qty:
            logger.warning(
                "%d-layer order of %d pcs is below the minimum order quantity %d",
                spec.layers, quantity, min_order_qty,
            )
            notes.append(
                f"Minimum order quantity for {spec.layers}-layer boards is "
                f"{min_order_qty} pcs; ordered {quantity}"
            )

        lead_days, lead_reasons = self.lead_time.calculate(spec, order_time)

        logger.debug(
            "Priced %d-layer %s x%d: total=%s lead=%dd",
            spec.layers, spec.pcb_type.value, quantity, total, lead_days,
        )
        return self.make_result(
            total=total,
            quantity=quantity,
            breakdown=breakdown,
            notes=notes,
            lead_time_days=lead_days,
            lead_time_reason=lead_reasons,
            min_order_qty=min_order_qty,
        )

    def calculate_lead_time(self, spec: PcbSpec, order_time: datetime = None) -> int:
        days, _ = self.lead_time.calculate(spec, order_time)
        return days

    def calculate_weight(self, spec: PcbSpec) -> float:
        return self.weight_model.total_weight_kg(spec)

    # --- Components (per unit) ---

    def _base_components(self, spec: PcbSpec, notes: list) -> dict:
        rates = self.rates
        base_fee = to_decimal(rates.base_fee)
        area = to_decimal(spec.single_area_cm2)
        area_rate = to_decimal(rates.area_rate_per_cm2)
        area_cost = area * area_rate
        extra_layers = max(0, spec.layers - 2)
        layer_cost = extra_layers * to_decimal(rates.per_layer_rate)

        notes.append(f"Base fee: ${base_fee:.2f}/pc")
        notes.append(f"Board area: {area:.2f}cm² × ${area_rate}/cm² = ${area_cost:.4f}/pc")
        components = {"base_fee": base_fee, "area": area_cost}
        if extra_layers:
            components["layers"] = layer_cost
            notes.append(
                f"Layer surcharge: {extra_layers} extra layers × "
                f"${rates.per_layer_rate:.2f} = ${layer_cost:.2f}/pc"
            )
        return components

    def _option_components(self, spec: PcbSpec, notes: list) -> dict:
        components = {}
        for field in PRICED_OPTION_FIELDS:
            value = spec.option_value(field)
            if value is None:
                continue
            delta = to_decimal(self.rates.option_delta(field, value))
            if delta:
                components[field] = delta
                notes.append(f"{_label(field)} {value}: +${delta:.2f}/pc")
        return components

    def _flag_components(self, spec: PcbSpec, notes: list) -> dict:
        components = {}
        for flag in PRICED_FLAGS:
            if not getattr(spec, flag, False):
                continue
            if flag not in self.rates.boolean_deltas:
                raise UnknownOptionValue(flag, True, list(self.rates.boolean_deltas))
            delta = to_decimal(self.rates.boolean_deltas[flag])
            if delta:
                components[flag] = delta
                notes.append(f"{_label(flag)}: +${delta:.2f}/pc")
        return components

    def _report_component(self, spec: PcbSpec, notes: list) -> dict:
        reports = spec.billable_reports
        if not reports:
            return {}
        rate = to_decimal(self.rates.report_rate_per_item)
        cost = len(reports) * rate
        notes.append(
            f"Product reports ({', '.join(r.value for r in reports)}): "
            f"{len(reports)} × ${rate:.2f} = ${cost:.2f}/pc"
        )
        return {"product_report": cost}

    # --- Order-level adjustments ---

    def _apply_discount(self, unit: Decimal, quantity: int, gross: Decimal,
                        breakdown: dict, notes: list) -> Decimal:
        multiplier = to_decimal(self.rates.discount_multiplier(quantity))
        total = gross * multiplier
        if multiplier != 1:
            breakdown["quantity_discount"] = total - gross
            notes.append(
                f"Quantity discount {round(float(1 - multiplier) * 100, 4):g}% at {quantity} pcs: "
                f"-${gross - total:.2f}"
            )

        # Crossing a breakpoint never makes the whole order cheaper than
        # the largest order just below that breakpoint.
        protected = total
        for breakpoint in self.rates.discount_breakpoints:
            below = breakpoint.min_qty - 1
            if breakpoint.min_qty > quantity or below < 1:
                continue
            candidate = unit * below * to_decimal(self.rates.discount_multiplier(below))
            protected = max(protected, candidate)
        if protected > total:
            breakdown["breakpoint_protection"] = protected - total
            notes.append(
                f"Breakpoint price protection: total held at ${protected:.2f} "
                f"(price of the largest smaller order)"
            )
        return protected

    def _urgent_fee(self, spec: PcbSpec, order_time: datetime,
                    breakdown: dict, notes: list) -> Decimal:
        """Order-level rush fee for the working days the rush rule takes off."""
        if not spec.urgent:
            return Decimal(0)
        plain, _ = self.lead_time.calculate(spec, order_time, urgent=False)
        saved = plain - rush_adjusted_days(plain, self.lead_time.max_rush_reduction)
        if saved <= 0:
            notes.append(f"Urgent service: {plain}-day lead time cannot be shortened, no fee")
            return Decimal(0)
        tier, fee = self.rates.urgent_fees.fee_for(
            spec.layers, spec.max_copper_oz, spec.total_area_m2, saved,
        )
        breakdown["urgent"] = fee
        notes.append(f"Urgent service ({tier}), {saved} days faster: +${fee:.2f}")
        return fee

    def _apply_floor(self, total: Decimal, breakdown: dict, notes: list) -> Decimal:
        floor = to_decimal(self.rates.price_floor)
        if total < floor:
            breakdown["price_floor"] = floor - total
            notes.append(f"Minimum order value ${floor:.2f} applied (was ${total:.2f})")
            return floor
        return total


def _label(field: str) -> str:
    return field.replace("_", " ").capitalize()

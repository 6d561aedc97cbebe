"""
Shipping cost — zone-rated carrier pricing on chargeable weight.

    base    = zone.carrier.base_rate + chargeable kg × zone.carrier.price_per_kg
    fuel    = base × fuel_surcharge_pct
    peak    = base × peak_surcharge_pct      (peak months only)
    final   = (base + fuel + peak) × service multiplier

Chargeable weight is max(actual, volumetric) rounded up to the carrier billing
increment; anything below the table's minimum billable weight is refused.
"""

import logging
from datetime import date

from .calculators.stencil import StencilCalculator
from .errors import BelowMinimumWeight, UnrecognizedService
from .rate_tables import RateBundle, get_rates
from .rounding import round_money, round_weight, to_decimal
from .schemas import PcbSpec, ShippingResult, StencilSpec
from .weights import WeightModel, chargeable_weight_kg

logger = logging.getLogger(__name__)


class ShippingCalculator:
    """Carrier cost for PCB and stencil shipments, driven by the shipping rate table."""

    def __init__(self, rates: RateBundle = None):
        bundle = rates or get_rates()
        self.rates = bundle.shipping
        self.weight_model = WeightModel(self.rates)
        self.stencils = StencilCalculator(bundle)

    def shipping_cost(self, spec: PcbSpec, country: str, carrier: str = "dhl",
                      service: str = "standard", order_date: date = None) -> ShippingResult:
        actual = self.weight_model.total_weight_kg(spec)
        volumetric = self.weight_model.volumetric_weight_kg(spec)
        return self.cost_for_weight(actual, volumetric, country, carrier, service, order_date)

    def stencil_shipping_cost(self, spec: StencilSpec, country: str, carrier: str = "dhl",
                              service: str = "standard",
                              order_date: date = None) -> ShippingResult:
        # stencil sheets ship flat; the size table weight already covers the frame
        actual = self.stencils.calculate_weight(spec)
        return self.cost_for_weight(actual, 0.0, country, carrier, service, order_date)

    def cost_for_weight(self, actual_kg: float, volumetric_kg: float, country: str,
                        carrier: str = "dhl", service: str = "standard",
                        order_date: date = None) -> ShippingResult:
        """Rate a shipment whose weights are already known."""
        rates = self.rates
        carrier = _normalize(carrier)
        service = _normalize(service)
        if service not in rates.service_multipliers:
            raise UnrecognizedService(service, list(rates.service_multipliers))
        zone = rates.zone_for(country)
        card = zone.rate_for(carrier)

        chargeable = chargeable_weight_kg(actual_kg, volumetric_kg, rates.billing_increment_kg)
        if chargeable < rates.min_weight_kg:
            raise BelowMinimumWeight(chargeable, rates.min_weight_kg)

        weight = to_decimal(chargeable)
        base = to_decimal(card.base_rate) + weight * to_decimal(card.price_per_kg)
        fuel = base * to_decimal(card.fuel_surcharge_pct)
        peak = 0
        if order_date is not None and rates.is_peak(order_date):
            peak = base * to_decimal(card.peak_surcharge_pct)
        multiplier = to_decimal(rates.service_multipliers[service])
        final = (base + fuel + peak) * multiplier

        logger.debug(
            "Shipping %s via %s/%s (%s): %skg chargeable, final=%s",
            country, carrier, service, zone.name, chargeable, final,
        )
        return ShippingResult(
            zone=zone.name,
            carrier=carrier,
            service=service,
            actual_weight=round_weight(actual_kg),
            volumetric_weight=round_weight(volumetric_kg),
            chargeable_weight=chargeable,
            base_cost=round_money(base),
            fuel_surcharge=round_money(fuel),
            peak_charge=round_money(peak),
            final_cost=round_money(final),
        )


def _normalize(value) -> str:
    return str(getattr(value, "value", value) or "").strip().lower()

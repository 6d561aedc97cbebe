"""
Quote composition — price, shipping and delivery for one order.

    spec ──► PcbPricingEngine ──► production days ──► delivery estimator
      └────► WeightModel ──► ShippingCalculator

The module-level price / shipping_cost / estimate_delivery_date functions
are the engine's public surface; they read the current rate tables once per
call and hold no state between calls.
"""

import logging
from datetime import datetime

from .calculators.pcb import PcbPricingEngine
from .config import settings
from .delivery import estimate_delivery_date as _estimate_delivery_date
from .rate_tables import RateBundle, get_rates
from .rounding import round_money, to_decimal
from .schemas import DeliveryResult, PcbSpec, PricingResult, QuoteResult, ShippingResult
from .shipping import ShippingCalculator

logger = logging.getLogger(__name__)


class QuoteBuilder:
    """Runs the three calculators against one RateBundle and combines the results."""

    def __init__(self, rates: RateBundle = None, cutoff_hour: int = None,
                 max_rush_reduction: int = None):
        self.rates = rates or get_rates()
        self.cutoff_hour = settings.ORDER_CUTOFF_HOUR if cutoff_hour is None else cutoff_hour
        self.max_rush_reduction = (settings.MAX_RUSH_REDUCTION_DAYS
                                   if max_rush_reduction is None else max_rush_reduction)
        self.pricing = PcbPricingEngine(self.rates, self.cutoff_hour, self.max_rush_reduction)
        self.shipping = ShippingCalculator(self.rates)

    def build(self, spec: PcbSpec, country: str, carrier: str = "dhl",
              service: str = "standard", order_time: datetime = None) -> QuoteResult:
        order_time = order_time or datetime.now()

        pricing = self.pricing.price(spec, order_time)
        # Delivery applies cutoff and rush itself; hand it the plain count.
        production_days, _ = self.pricing.lead_time.calculate(spec, order_time=None,
                                                              urgent=False)
        delivery = _estimate_delivery_date(
            production_days, order_time, spec.urgent, self.rates.calendar,
            cutoff_hour=self.cutoff_hour, max_rush_reduction=self.max_rush_reduction,
        )
        shipping = self.shipping.shipping_cost(spec, country, carrier, service,
                                               order_time.date())

        grand_total = round_money(to_decimal(pricing.total_price)
                                  + to_decimal(shipping.final_cost))
        logger.info(
            "Quote %d-layer x%d to %s: product=%.2f shipping=%.2f total=%.2f ready=%s",
            spec.layers, spec.total_quantity, country, pricing.total_price,
            shipping.final_cost, grand_total, delivery.delivery_date,
        )
        return QuoteResult(
            pricing=pricing,
            shipping=shipping,
            delivery=delivery,
            grand_total=grand_total,
        )


def price(spec: PcbSpec, order_time: datetime = None) -> PricingResult:
    return PcbPricingEngine(get_rates()).price(spec, order_time)


def shipping_cost(spec: PcbSpec, country: str, carrier: str = "dhl",
                  service: str = "standard", order_date=None) -> ShippingResult:
    return ShippingCalculator(get_rates()).shipping_cost(spec, country, carrier, service,
                                                         order_date)


def estimate_delivery_date(production_days: int, start_instant, is_urgent: bool = False,
                           calendar=None) -> DeliveryResult:
    """Delivery estimate against the loaded holiday calendar unless one is given."""
    if calendar is None:
        calendar = get_rates().calendar
    return _estimate_delivery_date(
        production_days, start_instant, is_urgent, calendar,
        cutoff_hour=settings.ORDER_CUTOFF_HOUR,
        max_rush_reduction=settings.MAX_RUSH_REDUCTION_DAYS,
    )

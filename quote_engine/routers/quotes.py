from fastapi import APIRouter, Depends

from ..calculators.registry import get_calculator
from ..config import settings
from ..delivery import estimate_delivery_date
from ..quote import QuoteBuilder
from ..rate_tables import RateBundle, get_rates
from ..schemas import (
    DeliveryRequest,
    DeliveryResult,
    PcbSpec,
    PricingResult,
    QuoteRequest,
    QuoteResult,
    ShippingRequest,
    ShippingResult,
    StencilShippingRequest,
    StencilSpec,
)
from ..shipping import ShippingCalculator

router = APIRouter(prefix="/quotes", tags=["quotes"])


def get_rate_bundle() -> RateBundle:
    """Current rate tables; one bundle per request."""
    return get_rates()


@router.post("/price", response_model=PricingResult)
def price_pcb(payload: dict, rates: RateBundle = Depends(get_rate_bundle)):
    spec = PcbSpec.from_payload(payload)
    return get_calculator("pcb", rates).calculate_price(spec)


@router.post("/stencil/price", response_model=PricingResult)
def price_stencil(payload: dict, rates: RateBundle = Depends(get_rate_bundle)):
    spec = StencilSpec.from_payload(payload)
    return get_calculator("stencil", rates).calculate_price(spec)


@router.post("/shipping", response_model=ShippingResult)
def quote_shipping(request: ShippingRequest, rates: RateBundle = Depends(get_rate_bundle)):
    spec = PcbSpec.from_payload(request.spec)
    return ShippingCalculator(rates).shipping_cost(
        spec, request.country, request.carrier, request.service, request.order_date,
    )


@router.post("/stencil/shipping", response_model=ShippingResult)
def quote_stencil_shipping(request: StencilShippingRequest,
                           rates: RateBundle = Depends(get_rate_bundle)):
    spec = StencilSpec.from_payload(request.spec)
    return ShippingCalculator(rates).stencil_shipping_cost(
        spec, request.country, request.carrier, request.service, request.order_date,
    )


@router.post("/delivery", response_model=DeliveryResult)
def quote_delivery(request: DeliveryRequest, rates: RateBundle = Depends(get_rate_bundle)):
    return estimate_delivery_date(
        request.production_days, request.start, request.is_urgent, rates.calendar,
        cutoff_hour=settings.ORDER_CUTOFF_HOUR,
        max_rush_reduction=settings.MAX_RUSH_REDUCTION_DAYS,
    )


@router.post("/full", response_model=QuoteResult)
def full_quote(request: QuoteRequest, rates: RateBundle = Depends(get_rate_bundle)):
    spec = PcbSpec.from_payload(request.spec)
    return QuoteBuilder(rates).build(
        spec, request.country, request.carrier, request.service, request.order_time,
    )

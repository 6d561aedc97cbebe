"""
Calculator registry — maps product_type strings to calculator classes.
"""

from typing import Dict, List

from ..errors import UnknownOptionValue
from ..rate_tables import RateBundle
from .base import BaseProductCalculator
from .pcb import PcbPricingEngine
from .stencil import StencilCalculator

CALCULATOR_REGISTRY: Dict[str, type] = {
    "pcb": PcbPricingEngine,
    "stencil": StencilCalculator,
}


def get_calculator(product_type: str, rates: RateBundle = None) -> BaseProductCalculator:
    """Returns an instance of the calculator for a product type, or raises UnknownOptionValue."""
    if product_type not in CALCULATOR_REGISTRY:
        raise UnknownOptionValue("product_type", product_type, list(CALCULATOR_REGISTRY))
    return CALCULATOR_REGISTRY[product_type](rates=rates)


def has_calculator(product_type: str) -> bool:
    """Check if a calculator exists for a product type."""
    return product_type in CALCULATOR_REGISTRY


def list_calculators() -> List[str]:
    """List all registered product types."""
    return list(CALCULATOR_REGISTRY.keys())

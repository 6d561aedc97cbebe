"""
PCB quotation engine: parametric pricing, shipping cost and delivery dates.
"""

from .quote import QuoteBuilder, estimate_delivery_date, price, shipping_cost

__all__ = ["QuoteBuilder", "price", "shipping_cost", "estimate_delivery_date"]

"""
Read-through cache in front of QuoteBuilder.

Identical (spec, destination, carrier, service, order time) requests return
the stored QuoteResult. Keys are canonical JSON, so field order in the
incoming payload never matters. The cache is tied to one RateBundle; build a
new one after a rate-table reload.
"""

import json
import logging
import threading
from collections import OrderedDict
from datetime import datetime

from .quote import QuoteBuilder
from .rate_tables import RateBundle
from .schemas import PcbSpec, QuoteResult

logger = logging.getLogger(__name__)


def canonical_key(spec: PcbSpec, country: str, carrier: str, service: str,
                  order_time: datetime) -> str:
    payload = {
        "spec": spec.model_dump(mode="json"),
        "country": country.strip().lower(),
        "carrier": str(carrier).strip().lower(),
        "service": str(service).strip().lower(),
        "order_time": order_time.isoformat(),
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


class CachedQuoteBuilder:
    def __init__(self, builder: QuoteBuilder = None, rates: RateBundle = None,
                 max_entries: int = 1024):
        self.builder = builder or QuoteBuilder(rates)
        self.max_entries = max_entries
        self._entries = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def build(self, spec: PcbSpec, country: str, carrier: str = "dhl",
              service: str = "standard", order_time: datetime = None) -> QuoteResult:
        # without a fixed instant nothing is repeatable, so nothing is cached
        if order_time is None:
            return self.builder.build(spec, country, carrier, service, order_time)

        key = canonical_key(spec, country, carrier, service, order_time)
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                self.hits += 1
                return self._entries[key]
            self.misses += 1

        result = self.builder.build(spec, country, carrier, service, order_time)
        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Quote cache cleared")

    def __len__(self) -> int:
        return len(self._entries)

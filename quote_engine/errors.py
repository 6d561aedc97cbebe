"""
Validation failures raised by the quoting engine.

Every error names the offending field and value so the caller can fix the
input. All of them subclass ValueError. The engine performs no I/O, so none
of these is ever retryable.
"""


class QuoteError(ValueError):
    """Base class for every engine failure."""

    def __init__(self, message: str, field: str = None, value=None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.value = value

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "field": self.field,
            "value": self.value if self.value is None else str(self.value),
            "message": self.message,
        }


class UnknownOptionValue(QuoteError):
    """A specification field holds a value absent from its option table."""

    def __init__(self, field: str, value, allowed=None):
        message = f"Unknown value {value!r} for {field}"
        if allowed:
            message += f". Allowed: {sorted(str(a) for a in allowed)}"
        super().__init__(message, field=field, value=value)
        self.allowed = list(allowed or [])


class UnsupportedDestination(QuoteError):
    def __init__(self, country: str):
        super().__init__(
            f"Unsupported shipping destination: {country!r} is not in any zone",
            field="country", value=country,
        )


class BelowMinimumWeight(QuoteError):
    def __init__(self, chargeable_kg: float, minimum_kg: float):
        super().__init__(
            f"Chargeable weight {chargeable_kg}kg is below the minimum "
            f"billable weight of {minimum_kg}kg",
            field="chargeable_weight", value=chargeable_kg,
        )
        self.minimum_kg = minimum_kg


class InvalidQuantity(QuoteError):
    def __init__(self, field: str, value, reason: str = "must be >= 1"):
        super().__init__(f"Invalid {field}: {value!r} {reason}", field=field, value=value)


class InvalidDimensions(QuoteError):
    def __init__(self, field: str, value):
        super().__init__(f"Invalid {field}: {value!r} must be > 0", field=field, value=value)


class UnrecognizedCarrier(QuoteError):
    def __init__(self, carrier: str, zone: str = None):
        message = f"Unrecognized carrier: {carrier!r}"
        if zone:
            message += f" (no rate card in {zone})"
        super().__init__(message, field="carrier", value=carrier)


class UnrecognizedService(QuoteError):
    def __init__(self, service: str, allowed=None):
        message = f"Unrecognized shipping service: {service!r}"
        if allowed:
            message += f". Allowed: {sorted(allowed)}"
        super().__init__(message, field="service", value=service)


class CalendarConflict(QuoteError):
    """A date is both a holiday and a substituted working weekend."""

    def __init__(self, dates):
        dates = sorted(str(d) for d in dates)
        super().__init__(
            f"Dates listed as both holiday and working weekend: {', '.join(dates)}",
            field="working_weekends", value=dates,
        )
        self.dates = dates


class InvalidProductionDays(QuoteError):
    def __init__(self, value):
        super().__init__(
            f"Invalid production_days: {value!r} must be >= 1",
            field="production_days", value=value,
        )


class UrgentNotSupported(QuoteError):
    """Rush service has no fee for this board class, area or day saving."""

    def __init__(self, tier: str, reduce_days: int):
        super().__init__(
            f"Urgent service is not available for {tier} "
            f"(requested {reduce_days} days faster)",
            field="urgent", value=tier,
        )
        self.tier = tier
        self.reduce_days = reduce_days

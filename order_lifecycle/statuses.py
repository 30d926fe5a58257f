"""
Status catalog: order statuses, payment statuses, fulfillment and business types.
"""
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    PICKED_UP = "PICKED_UP"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    RETURNED = "RETURNED"
    REFUNDED = "REFUNDED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class FulfillmentType(str, Enum):
    DELIVERY = "DELIVERY"
    PICKUP = "PICKUP"
    DINE_IN = "DINE_IN"


class BusinessType(str, Enum):
    RESTAURANT = "RESTAURANT"
    CAFE = "CAFE"
    RETAIL = "RETAIL"
    GROCERY = "GROCERY"
    SALON = "SALON"
    SERVICES = "SERVICES"
    OTHER = "OTHER"


# Statuses from which the "mark as complete" shortcut is not offered.
TERMINAL_FOR_FULFILLMENT: frozenset[OrderStatus] = frozenset({
    OrderStatus.PICKED_UP,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
    OrderStatus.RETURNED,
    OrderStatus.REFUNDED,
})

# Fulfillment types completed by the customer collecting the order.
COLLECTED_TYPES: frozenset[FulfillmentType] = frozenset({
    FulfillmentType.PICKUP,
    FulfillmentType.DINE_IN,
})

RETAIL_BUSINESS_TYPES: frozenset[str] = frozenset({BusinessType.RETAIL.value})


def parse_status(value) -> OrderStatus | None:
    """Coerce a raw value to an OrderStatus, None when it is unknown or unset."""
    if value is None or value == "":
        return None
    try:
        return OrderStatus(value)
    except ValueError:
        return None


def parse_fulfillment_type(value) -> FulfillmentType | None:
    if value is None or value == "":
        return None
    try:
        return FulfillmentType(value)
    except ValueError:
        return None

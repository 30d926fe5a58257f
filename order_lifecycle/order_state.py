"""
Order lifecycle state machine. Valid transitions enforce business rules.

Every status may be re-saved at itself; the fulfillment type only matters at READY.
"""
from order_lifecycle.statuses import (
    COLLECTED_TYPES,
    TERMINAL_FOR_FULFILLMENT,
    FulfillmentType,
    OrderStatus,
    parse_fulfillment_type,
    parse_status,
)

S = OrderStatus

# Current status -> allowed next statuses (READY is resolved per fulfillment type)
VALID_TRANSITIONS: dict[OrderStatus, list[OrderStatus]] = {
    S.PENDING: [S.PENDING, S.CONFIRMED, S.CANCELLED],
    S.CONFIRMED: [S.CONFIRMED, S.PREPARING, S.CANCELLED],
    S.PREPARING: [S.PREPARING, S.READY, S.CANCELLED],
    S.PICKED_UP: [S.PICKED_UP, S.RETURNED, S.REFUNDED],
    S.OUT_FOR_DELIVERY: [S.OUT_FOR_DELIVERY, S.DELIVERED, S.CANCELLED],
    S.DELIVERED: [S.DELIVERED, S.RETURNED, S.REFUNDED],
    S.RETURNED: [S.RETURNED, S.REFUNDED],
    S.CANCELLED: [S.CANCELLED, S.REFUNDED],
    S.REFUNDED: [S.REFUNDED],  # terminal
}

READY_TRANSITIONS: dict[FulfillmentType, list[OrderStatus]] = {
    FulfillmentType.DELIVERY: [S.READY, S.OUT_FOR_DELIVERY, S.DELIVERED, S.CANCELLED],
    FulfillmentType.PICKUP: [S.READY, S.PICKED_UP, S.CANCELLED],
    FulfillmentType.DINE_IN: [S.READY, S.PICKED_UP, S.CANCELLED],
}

# Unknown or unset current status
FALLBACK_TRANSITIONS: list[OrderStatus] = [S.PENDING]

# Unknown or unset fulfillment type, for both the READY edges and final_status
UNKNOWN_TYPE_FALLBACK = FulfillmentType.PICKUP


def legal_next_states(current_status, order_type) -> list[OrderStatus]:
    """Statuses selectable after current_status, current status first. Never empty."""
    status = parse_status(current_status)
    if status is None:
        return list(FALLBACK_TRANSITIONS)
    if status is S.READY:
        fulfillment = parse_fulfillment_type(order_type) or UNKNOWN_TYPE_FALLBACK
        return list(READY_TRANSITIONS[fulfillment])
    return list(VALID_TRANSITIONS[status])


def is_valid_transition(current_status, target_status, order_type) -> bool:
    """True if target_status is allowed after current_status for this fulfillment type."""
    target = parse_status(target_status)
    if target is None:
        return False
    return target in legal_next_states(current_status, order_type)


def final_status(order_type) -> OrderStatus:
    """Canonical completion status for a fulfillment type; unknown types complete like PICKUP."""
    fulfillment = parse_fulfillment_type(order_type) or UNKNOWN_TYPE_FALLBACK
    if fulfillment in COLLECTED_TYPES:
        return S.PICKED_UP
    return S.DELIVERED


def can_shortcut(current_status) -> bool:
    """Whether "mark as complete" may jump straight to final_status()."""
    return parse_status(current_status) not in TERMINAL_FOR_FULFILLMENT

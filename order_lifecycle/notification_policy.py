"""
Decides whether a status change should offer the customer a message.

CONFIRMED and PREPARING are opt-in (unset flag -> no message). READY and
OUT_FOR_DELIVERY are opt-out (unset flag -> message), since the customer has
to act on them. READY never applies to delivery orders, which are announced
at OUT_FOR_DELIVERY instead.
"""
from order_lifecycle.models import NotificationSettings
from order_lifecycle.statuses import (
    FulfillmentType,
    OrderStatus,
    parse_fulfillment_type,
    parse_status,
)

F = FulfillmentType

CONFIRMED_FLAGS: dict[FulfillmentType, str] = {
    F.DELIVERY: "notify_delivery_on_confirmed",
    F.PICKUP: "notify_pickup_on_confirmed",
    F.DINE_IN: "notify_dine_in_on_confirmed",
}
PREPARING_FLAGS: dict[FulfillmentType, str] = {
    F.DELIVERY: "notify_delivery_on_preparing",
    F.PICKUP: "notify_pickup_on_preparing",
    F.DINE_IN: "notify_dine_in_on_preparing",
}
READY_FLAGS: dict[FulfillmentType, str] = {
    F.PICKUP: "notify_pickup_on_ready",
    F.DINE_IN: "notify_dine_in_on_ready",
}
OUT_FOR_DELIVERY_FLAGS: dict[FulfillmentType, str] = {
    F.DELIVERY: "notify_delivery_on_out_for_delivery",
}

# target status -> (flag per fulfillment type, value used when the flag is unset)
POLICY: dict[OrderStatus, tuple[dict[FulfillmentType, str], bool]] = {
    OrderStatus.CONFIRMED: (CONFIRMED_FLAGS, False),
    OrderStatus.PREPARING: (PREPARING_FLAGS, False),
    OrderStatus.READY: (READY_FLAGS, True),
    OrderStatus.OUT_FOR_DELIVERY: (OUT_FOR_DELIVERY_FLAGS, True),
}


def should_notify(target_status, order_type, settings: NotificationSettings | None) -> bool:
    if settings is None:
        settings = NotificationSettings()
    if not settings.notifications_globally_enabled:
        return False

    status = parse_status(target_status)
    if status not in POLICY:
        return False
    flags, default = POLICY[status]

    flag = flags.get(parse_fulfillment_type(order_type))
    if flag is None:
        return False  # status not applicable to this fulfillment type
    value = getattr(settings, flag)
    return default if value is None else value

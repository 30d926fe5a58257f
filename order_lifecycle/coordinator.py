"""
Applies a status transition to an order snapshot and lists the side effects the
caller must run. Nothing here touches storage or sends messages: the caller
persists the returned order, executes the side effects and decides whether to
hand the prepared notification to the customer.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from order_lifecycle.composer import compose
from order_lifecycle.errors import (
    InvalidTransitionError,
    MissingCancellationReasonError,
    OrderNotFoundError,
    ShortcutNotAllowedError,
)
from order_lifecycle.models import BusinessProfile, Order
from order_lifecycle.notification_policy import should_notify
from order_lifecycle.order_state import can_shortcut, final_status, is_valid_transition
from order_lifecycle.statuses import OrderStatus, PaymentStatus, parse_status

logger = logging.getLogger(__name__)

REJECTION_TAG = "[REJECTED]"


class SideEffectKind(str, Enum):
    REVERT_STOCK = "REVERT_STOCK"


@dataclass(frozen=True)
class SideEffect:
    kind: SideEffectKind
    order_id: str
    business_id: str | None = None

    @property
    def effect_id(self) -> str:
        # one request per kind per order
        return f"{self.kind.value}:{self.order_id}"


@dataclass(frozen=True)
class PreparedNotification:
    message: str
    phone: str
    status: OrderStatus


@dataclass(frozen=True)
class TransitionOptions:
    reason: str | None = None
    notify: bool = False
    business: BusinessProfile | None = None


@dataclass(frozen=True)
class TransitionOutcome:
    order: Order
    previous_status: OrderStatus
    side_effects: tuple[SideEffect, ...] = field(default_factory=tuple)
    notification: PreparedNotification | None = None

    @property
    def revert_stock(self) -> bool:
        return any(effect.kind is SideEffectKind.REVERT_STOCK for effect in self.side_effects)

    def to_dict(self) -> dict:
        return {
            "status": self.order.status.value,
            "notes": self.order.notes,
            "sideEffects": {"revertStock": self.revert_stock},
        }


def _append_note(notes: str | None, note: str) -> str:
    return f"{notes}\n\n{note}" if notes else note


def _prepare_notification(order: Order, status: OrderStatus, options: TransitionOptions) -> PreparedNotification | None:
    if not options.notify or options.business is None:
        return None
    if not should_notify(status, order.type, options.business.notification_settings):
        return None
    return PreparedNotification(
        message=compose(order, options.business, status_override=status),
        phone=order.customer.phone,
        status=status,
    )


def _finish(order: Order, target: OrderStatus, options: TransitionOptions, notes: str | None = None,
            side_effects: tuple[SideEffect, ...] = ()) -> TransitionOutcome:
    update = {"status": target}
    if notes is not None:
        update["notes"] = notes
    updated = order.model_copy(update=update)

    notification = None
    if target is not OrderStatus.CANCELLED:
        notification = _prepare_notification(updated, target, options)

    logger.info(
        "Order %s: %s -> %s (side_effects=%d, notification=%s)",
        order.id,
        order.status.value,
        target.value,
        len(side_effects),
        notification is not None,
    )
    return TransitionOutcome(
        order=updated,
        previous_status=order.status,
        side_effects=side_effects,
        notification=notification,
    )


def apply_transition(order: Order | None, target_status, options: TransitionOptions | None = None) -> TransitionOutcome:
    """
    Move order to target_status along a legal edge.

    Cancelling needs a non-empty reason, which is appended to the notes as
    "[REJECTED] <reason>", and requests a stock reversion the first time the
    order is cancelled. The notification policy is never consulted for a
    cancellation.
    """
    if order is None:
        raise OrderNotFoundError("Order not found")
    options = options or TransitionOptions()
    target = parse_status(target_status)

    if target is None or not is_valid_transition(order.status, target, order.type):
        logger.warning("Order %s: rejected transition %s -> %s", order.id, order.status.value, target_status)
        raise InvalidTransitionError(order.status, target_status)

    if target is not OrderStatus.CANCELLED:
        return _finish(order, target, options)

    reason = (options.reason or "").strip()
    if not reason:
        logger.warning("Order %s: cancellation rejected, no reason given", order.id)
        raise MissingCancellationReasonError(order.status, target, "A reason is required to cancel an order")

    side_effects: tuple[SideEffect, ...] = ()
    if order.status is not OrderStatus.CANCELLED:
        if not order.business_id:
            logger.warning("Order %s: no business_id, stock reversion will be dead-lettered", order.id)
        side_effects = (SideEffect(SideEffectKind.REVERT_STOCK, order.id, order.business_id),)
    notes = _append_note(order.notes, f"{REJECTION_TAG} {reason}")
    return _finish(order, target, options, notes=notes, side_effects=side_effects)


def mark_complete(order: Order | None, options: TransitionOptions | None = None) -> TransitionOutcome:
    """Jump straight to the fulfillment type's completion status."""
    if order is None:
        raise OrderNotFoundError("Order not found")
    if not can_shortcut(order.status):
        logger.warning("Order %s: mark complete rejected from %s", order.id, order.status.value)
        raise ShortcutNotAllowedError(
            order.status,
            final_status(order.type),
            f"Order is already {order.status.value.lower().replace('_', ' ')}",
        )
    return _finish(order, final_status(order.type), options or TransitionOptions())


def update_payment_status(order: Order | None, payment_status) -> Order:
    """Replace the payment status; not part of the status graph."""
    if order is None:
        raise OrderNotFoundError("Order not found")
    return order.model_copy(update={"payment_status": PaymentStatus(payment_status)})


def update_delivery_time(order: Order | None, delivery_time: datetime | None) -> Order:
    """Replace (or clear) the scheduled delivery / pickup / arrival time."""
    if order is None:
        raise OrderNotFoundError("Order not found")
    return order.model_copy(update={"delivery_time": delivery_time})

from datetime import datetime, timezone

import pytest

from order_lifecycle.coordinator import (
    SideEffectKind,
    TransitionOptions,
    apply_transition,
    mark_complete,
    update_delivery_time,
    update_payment_status,
)
from order_lifecycle.errors import (
    InvalidTransitionError,
    MissingCancellationReasonError,
    OrderNotFoundError,
    ShortcutNotAllowedError,
)
from order_lifecycle.statuses import OrderStatus, PaymentStatus

from _helper import all_enabled_settings, make_business, make_order


@pytest.mark.parametrize("reason", [None, "", "   "])
def test_cancel_without_reason_is_rejected(reason):
    order = make_order(status="PREPARING", type="PICKUP")
    with pytest.raises(MissingCancellationReasonError):
        apply_transition(order, "CANCELLED", TransitionOptions(reason=reason))
    assert order.status is OrderStatus.PREPARING
    assert order.notes is None


def test_illegal_edge_is_rejected():
    order = make_order(status="DELIVERED")
    with pytest.raises(InvalidTransitionError) as exc_info:
        apply_transition(order, "PREPARING")
    assert exc_info.value.current_status == "DELIVERED"
    assert exc_info.value.target_status == "PREPARING"
    assert order.status is OrderStatus.DELIVERED


def test_unknown_target_is_rejected():
    with pytest.raises(InvalidTransitionError):
        apply_transition(make_order(), "TELEPORTED")


def test_cancel_appends_note_and_requests_stock_reversion():
    order = make_order(status="CONFIRMED", notes="Ring the bell")
    outcome = apply_transition(order, "CANCELLED", TransitionOptions(reason=" Out of stock "))

    assert outcome.order.status is OrderStatus.CANCELLED
    assert outcome.order.notes == "Ring the bell\n\n[REJECTED] Out of stock"
    assert outcome.previous_status is OrderStatus.CONFIRMED
    assert [effect.kind for effect in outcome.side_effects] == [SideEffectKind.REVERT_STOCK]
    assert outcome.side_effects[0].effect_id == "REVERT_STOCK:ord-1"
    assert outcome.to_dict() == {
        "status": "CANCELLED",
        "notes": "Ring the bell\n\n[REJECTED] Out of stock",
        "sideEffects": {"revertStock": True},
    }
    # the input snapshot is untouched
    assert order.status is OrderStatus.CONFIRMED
    assert order.notes == "Ring the bell"


def test_cancel_without_existing_notes():
    outcome = apply_transition(make_order(), "CANCELLED", TransitionOptions(reason="Closed early"))
    assert outcome.order.notes == "[REJECTED] Closed early"


def test_cancel_never_prepares_a_notification():
    business = make_business(notification_settings=all_enabled_settings())
    outcome = apply_transition(
        make_order(),
        "CANCELLED",
        TransitionOptions(reason="Closed", notify=True, business=business),
    )
    assert outcome.notification is None


def test_resaving_cancelled_order_does_not_revert_stock_twice():
    order = make_order(status="CANCELLED", notes="[REJECTED] Closed")
    outcome = apply_transition(order, "CANCELLED", TransitionOptions(reason="Still closed"))
    assert outcome.side_effects == ()
    assert outcome.revert_stock is False


def test_plain_transition_has_no_side_effects_or_notification_by_default():
    outcome = apply_transition(make_order(), "CONFIRMED")
    assert outcome.order.status is OrderStatus.CONFIRMED
    assert outcome.side_effects == ()
    assert outcome.notification is None
    assert outcome.to_dict()["sideEffects"] == {"revertStock": False}


def test_notification_prepared_with_new_status():
    business = make_business(notification_settings=all_enabled_settings())
    outcome = apply_transition(
        make_order(status="READY"),
        "OUT_FOR_DELIVERY",
        TransitionOptions(notify=True, business=business),
    )
    assert outcome.notification is not None
    assert outcome.notification.status is OrderStatus.OUT_FOR_DELIVERY
    assert outcome.notification.phone == "+355 69 123 4567"
    assert "*Out for Delivery*" in outcome.notification.message


def test_notification_skipped_when_policy_says_no():
    business = make_business(notification_settings=all_enabled_settings(notify_delivery_on_confirmed=False))
    outcome = apply_transition(make_order(), "CONFIRMED", TransitionOptions(notify=True, business=business))
    assert outcome.notification is None


def test_notification_needs_a_business():
    outcome = apply_transition(make_order(), "CONFIRMED", TransitionOptions(notify=True))
    assert outcome.notification is None


def test_shortcut_from_ready_pickup():
    outcome = mark_complete(make_order(status="READY", type="PICKUP"))
    assert outcome.order.status is OrderStatus.PICKED_UP
    assert outcome.side_effects == ()


def test_shortcut_skips_intermediate_states():
    outcome = mark_complete(make_order(status="PENDING", type="DELIVERY"))
    assert outcome.order.status is OrderStatus.DELIVERED


@pytest.mark.parametrize("status", ["PICKED_UP", "DELIVERED", "CANCELLED", "RETURNED", "REFUNDED"])
def test_shortcut_rejected_once_complete(status):
    with pytest.raises(ShortcutNotAllowedError):
        mark_complete(make_order(status=status))


def test_refunded_is_terminal():
    for target in OrderStatus:
        if target is OrderStatus.REFUNDED:
            continue
        with pytest.raises(InvalidTransitionError):
            apply_transition(make_order(status="REFUNDED"), target, TransitionOptions(reason="x"))


def test_payment_status_update_ignores_status_graph():
    order = make_order(status="REFUNDED")
    updated = update_payment_status(order, "REFUNDED")
    assert updated.payment_status is PaymentStatus.REFUNDED
    assert updated.status is OrderStatus.REFUNDED
    with pytest.raises(ValueError):
        update_payment_status(order, "SETTLED")


def test_delivery_time_update():
    when = datetime(2025, 11, 7, 15, 0, tzinfo=timezone.utc)
    assert update_delivery_time(make_order(), when).delivery_time == when
    assert update_delivery_time(make_order(delivery_time=when), None).delivery_time is None


def test_missing_order():
    with pytest.raises(OrderNotFoundError):
        apply_transition(None, "CONFIRMED")
    with pytest.raises(OrderNotFoundError):
        update_payment_status(None, "PAID")
    with pytest.raises(OrderNotFoundError):
        update_delivery_time(None, None)


def test_cancel_without_business_warns(caplog):
    with caplog.at_level("WARNING", logger="order_lifecycle.coordinator"):
        outcome = apply_transition(make_order(business_id=None), "CANCELLED", TransitionOptions(reason="Closed"))
    assert outcome.side_effects[0].business_id is None
    assert "no business_id" in caplog.text

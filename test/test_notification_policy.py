import itertools

import pytest
from pydantic import ValidationError

from order_lifecycle.models import NotificationSettings
from order_lifecycle.notification_policy import should_notify
from order_lifecycle.statuses import FulfillmentType, OrderStatus

from _helper import all_enabled_settings


def _matrices():
    yield NotificationSettings(notifications_globally_enabled=True)
    yield all_enabled_settings()
    yield all_enabled_settings(notify_pickup_on_ready=False, notify_dine_in_on_ready=False)


@pytest.mark.parametrize("settings", list(_matrices()))
def test_ready_never_notifies_delivery(settings):
    assert should_notify("READY", "DELIVERY", settings) is False


@pytest.mark.parametrize("settings", list(_matrices()))
@pytest.mark.parametrize("order_type", ["PICKUP", "DINE_IN"])
def test_out_for_delivery_only_applies_to_delivery(settings, order_type):
    assert should_notify("OUT_FOR_DELIVERY", order_type, settings) is False


def test_global_switch_disables_everything():
    settings = all_enabled_settings(notifications_globally_enabled=False)
    for status, order_type in itertools.product(OrderStatus, FulfillmentType):
        assert should_notify(status, order_type, settings) is False


def test_missing_settings_never_notify():
    assert should_notify("READY", "PICKUP", None) is False


@pytest.mark.parametrize("status", ["CONFIRMED", "PREPARING"])
@pytest.mark.parametrize("order_type", ["DELIVERY", "PICKUP", "DINE_IN"])
def test_early_statuses_are_opt_in(status, order_type):
    assert should_notify(status, order_type, NotificationSettings(notifications_globally_enabled=True)) is False
    assert should_notify(status, order_type, all_enabled_settings()) is True


@pytest.mark.parametrize("order_type", ["PICKUP", "DINE_IN"])
def test_ready_is_opt_out_for_collected_orders(order_type):
    assert should_notify("READY", order_type, NotificationSettings(notifications_globally_enabled=True)) is True
    flag = f"notify_{order_type.lower()}_on_ready"
    assert should_notify("READY", order_type, all_enabled_settings(**{flag: False})) is False


def test_out_for_delivery_is_opt_out():
    assert should_notify("OUT_FOR_DELIVERY", "DELIVERY", NotificationSettings(notifications_globally_enabled=True)) is True
    settings = all_enabled_settings(notify_delivery_on_out_for_delivery=False)
    assert should_notify("OUT_FOR_DELIVERY", "DELIVERY", settings) is False


def test_flags_are_per_fulfillment_type():
    settings = NotificationSettings(notifications_globally_enabled=True, notify_pickup_on_confirmed=True)
    assert should_notify("CONFIRMED", "PICKUP", settings) is True
    assert should_notify("CONFIRMED", "DELIVERY", settings) is False
    assert should_notify("CONFIRMED", "DINE_IN", settings) is False


@pytest.mark.parametrize("status", ["PENDING", "PICKED_UP", "DELIVERED", "CANCELLED", "RETURNED", "REFUNDED", "BOGUS"])
def test_statuses_without_a_policy_are_silent(status):
    for order_type in FulfillmentType:
        assert should_notify(status, order_type, all_enabled_settings()) is False


def test_settings_accept_camel_case_and_reject_typos():
    settings = NotificationSettings.model_validate({
        "notificationsGloballyEnabled": True,
        "notifyDineInOnConfirmed": True,
    })
    assert should_notify("CONFIRMED", "DINE_IN", settings) is True

    with pytest.raises(ValidationError):
        NotificationSettings.model_validate({"notifyDinerOnConfirmed": True})

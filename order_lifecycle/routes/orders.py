from datetime import datetime

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from order_lifecycle.composer import whatsapp_link
from order_lifecycle.coordinator import (
    TransitionOptions,
    TransitionOutcome,
    apply_transition,
    mark_complete,
    update_delivery_time,
    update_payment_status,
)
from order_lifecycle.metrics import notifications_prepared_total, transitions_applied_total
from order_lifecycle.models import BusinessProfile, Order
from order_lifecycle.order_state import can_shortcut, final_status, legal_next_states
from order_lifecycle.queue import push_side_effects
from order_lifecycle.statuses import PaymentStatus

router = APIRouter(prefix="/orders", tags=["orders"])


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransitionBody(_Body):
    order: Order
    target_status: str = Field(..., description="Status to move the order to")
    reason: str | None = Field(default=None, description="Required when cancelling")
    business: BusinessProfile | None = None
    notify: bool = Field(default=False, description="Prepare a customer message if the business wants one")


class CompleteBody(_Body):
    order: Order
    business: BusinessProfile | None = None
    notify: bool = False


class PaymentStatusBody(_Body):
    order: Order
    payment_status: PaymentStatus


class DeliveryTimeBody(_Body):
    order: Order
    delivery_time: datetime | None = None


async def _outcome_response(outcome: TransitionOutcome) -> JSONResponse:
    queued = 0
    if outcome.side_effects:
        # a failed push propagates; the caller must not persist the new status
        queued = await push_side_effects(outcome.side_effects)
    transitions_applied_total.labels(target_status=outcome.order.status.value).inc()

    notification = None
    if outcome.notification is not None:
        notifications_prepared_total.labels(
            status=outcome.notification.status.value,
            order_type=outcome.order.type.value,
        ).inc()
        notification = {
            "message": outcome.notification.message,
            "whatsappLink": whatsapp_link(outcome.notification.phone, outcome.notification.message),
        }

    content = outcome.to_dict()
    content["sideEffectsQueued"] = queued
    content["order"] = outcome.order.model_dump(mode="json", by_alias=True)
    content["notification"] = notification
    return JSONResponse(status_code=200, content=content)


@router.get("/status-options")
async def status_options(
    status: str | None = Query(default=None),
    type: str | None = Query(default=None),
) -> dict:
    """Statuses selectable for an order, plus the "mark as complete" target."""
    return {
        "options": [s.value for s in legal_next_states(status, type)],
        "final_status": final_status(type).value,
        "can_mark_complete": can_shortcut(status),
    }


@router.post("/transition")
async def transition(body: TransitionBody) -> JSONResponse:
    outcome = apply_transition(
        body.order,
        body.target_status,
        TransitionOptions(reason=body.reason, notify=body.notify, business=body.business),
    )
    return await _outcome_response(outcome)


@router.post("/complete")
async def complete(body: CompleteBody) -> JSONResponse:
    outcome = mark_complete(body.order, TransitionOptions(notify=body.notify, business=body.business))
    return await _outcome_response(outcome)


@router.post("/payment-status")
async def payment_status(body: PaymentStatusBody) -> dict:
    order = update_payment_status(body.order, body.payment_status)
    return {"order": order.model_dump(mode="json", by_alias=True)}


@router.post("/delivery-time")
async def delivery_time(body: DeliveryTimeBody) -> dict:
    order = update_delivery_time(body.order, body.delivery_time)
    return {"order": order.model_dump(mode="json", by_alias=True)}

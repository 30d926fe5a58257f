from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from order_lifecycle.composer import compose, whatsapp_link
from order_lifecycle.models import BusinessProfile, NotificationSettings, Order
from order_lifecycle.notification_policy import should_notify

router = APIRouter(prefix="/notifications", tags=["notifications"])


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EligibilityBody(_Body):
    target_status: str
    type: str
    settings: NotificationSettings | None = None


class ComposeBody(_Body):
    order: Order
    business: BusinessProfile
    status: str | None = None


@router.post("/eligibility")
async def eligibility(body: EligibilityBody) -> dict:
    return {"notify": should_notify(body.target_status, body.type, body.settings)}


@router.post("/compose")
async def compose_message(body: ComposeBody) -> dict:
    """
    Message for a manual "send update" action. Nothing is sent: the caller opens
    the returned link so the operator can review and send it.
    """
    message = compose(body.order, body.business, status_override=body.status)
    return {
        "message": message,
        "whatsappLink": whatsapp_link(body.order.customer.phone, message),
    }

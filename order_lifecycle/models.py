"""
Plain records the lifecycle core consumes. Field names accept both camelCase and snake_case.
"""
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from order_lifecycle.statuses import FulfillmentType, OrderStatus, PaymentStatus


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Customer(_Record):
    name: str
    phone: str = ""
    tier: str | None = None


class ItemModifier(_Record):
    name: str
    price: Decimal = Field(default=Decimal("0"), ge=0)


class OrderItem(_Record):
    product_name: str = ""
    quantity: int = Field(default=1, ge=1)
    price: Decimal = Field(default=Decimal("0"), ge=0)
    modifiers: list[ItemModifier] = Field(default_factory=list)


class Order(_Record):
    # total = subtotal + delivery_fee + tax - discount is maintained by the caller
    id: str
    order_number: str
    business_id: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    type: FulfillmentType
    payment_status: PaymentStatus = PaymentStatus.PENDING
    subtotal: Decimal = Field(default=Decimal("0"), ge=0)
    delivery_fee: Decimal = Field(default=Decimal("0"), ge=0)
    tax: Decimal = Field(default=Decimal("0"), ge=0)
    discount: Decimal = Field(default=Decimal("0"), ge=0)
    total: Decimal = Field(default=Decimal("0"), ge=0)
    delivery_address: str | None = None
    country_code: str | None = None
    delivery_time: datetime | None = None
    notes: str | None = None
    customer: Customer
    items: list[OrderItem] = Field(default_factory=list)


class NotificationSettings(_Record):
    """
    Per-business matrix of which (fulfillment type, status) transitions offer a customer message.
    None means the flag was never set; the policy decides what that defaults to.
    """
    model_config = ConfigDict(extra="forbid")

    notifications_globally_enabled: bool = False
    notify_delivery_on_confirmed: bool | None = None
    notify_pickup_on_confirmed: bool | None = None
    notify_dine_in_on_confirmed: bool | None = None
    notify_delivery_on_preparing: bool | None = None
    notify_pickup_on_preparing: bool | None = None
    notify_dine_in_on_preparing: bool | None = None
    notify_pickup_on_ready: bool | None = None
    notify_dine_in_on_ready: bool | None = None
    notify_delivery_on_out_for_delivery: bool | None = None


class BusinessProfile(_Record):
    name: str
    business_type: str = "RESTAURANT"
    language: str = "en"
    translate_to_business_language: bool = True
    currency: str = "USD"
    time_format: str = "24"  # "12" or "24"
    timezone: str = "UTC"
    location_name: str | None = None
    whatsapp_number: str | None = None
    notification_settings: NotificationSettings = Field(default_factory=NotificationSettings)

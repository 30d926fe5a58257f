"""
Customer message composition: turns an order, the business profile and a status
into localized, currency-aware plain text for an external messaging channel.
"""
import re
from urllib.parse import quote

from order_lifecycle import formatting, translations
from order_lifecycle.models import BusinessProfile, Order
from order_lifecycle.statuses import RETAIL_BUSINESS_TYPES, FulfillmentType

WHATSAPP_BASE_URL = "https://wa.me"


def _business_kind(business: BusinessProfile) -> str | None:
    return "RETAIL" if business.business_type.upper() in RETAIL_BUSINESS_TYPES else None


def _status_key(status) -> str:
    return getattr(status, "value", status) or "PENDING"


def _localize_address(address: str, country_code: str | None, language: str) -> str:
    if not country_code:
        return address
    name = translations.country_name(country_code, language)
    if name == country_code:
        return address
    return re.sub(rf"\b{re.escape(country_code)}\b", name, address, flags=re.IGNORECASE)


def _location_line(order: Order, business: BusinessProfile, language: str) -> str | None:
    location = business.location_name or business.name
    if order.type is FulfillmentType.DELIVERY:
        if not order.delivery_address:
            return None
        address = _localize_address(order.delivery_address, order.country_code, language)
        return translations.phrase(language, "delivery_address").format(address=address)
    if order.type is FulfillmentType.PICKUP:
        return translations.phrase(language, "pickup_at").format(location=location)
    return translations.phrase(language, "dine_in_at").format(location=location)


def _time_line(order: Order, business: BusinessProfile, language: str) -> str | None:
    if order.delivery_time is None:
        return None
    label_key = {
        FulfillmentType.DELIVERY: "delivery_time",
        FulfillmentType.PICKUP: "pickup_time",
    }.get(order.type, "arrival_time")
    moment = formatting.to_business_time(order.delivery_time, business.timezone)
    rendered = formatting.format_scheduled_time(
        moment,
        formatting.locale_tag(language),
        formatting.uses_24_hour(business.time_format),
    )
    return translations.phrase(language, "scheduled_time").format(
        label=translations.phrase(language, label_key),
        time=rendered,
    )


def compose(order: Order, business: BusinessProfile, status_override=None) -> str:
    """
    Build the customer message for order at status_override (or its own status).

    Pass the status that was just written as status_override; the order snapshot
    may still carry the previous one.
    """
    language = formatting.resolve_language(business)
    kind = _business_kind(business)
    status = _status_key(status_override or order.status)
    label = translations.status_label(language, status, kind) or formatting.humanize_status(status)

    lines = [
        translations.phrase(language, "greeting").format(name=order.customer.name),
        "",
        translations.phrase(language, "status_updated").format(
            order_number=order.order_number,
            status=label,
        ),
        "",
    ]
    location = _location_line(order, business, language)
    if location:
        lines.append(location)
    lines.append(
        translations.phrase(language, "total").format(
            amount=formatting.format_currency(order.total, business.currency),
        )
    )
    scheduled = _time_line(order, business, language)
    if scheduled:
        lines.append(scheduled)

    sentence = translations.status_message(language, status, order.type.value, kind)
    if sentence:
        lines.extend(["", sentence])

    lines.extend(["", translations.phrase(language, "thank_you").format(business=business.name)])
    return "\n".join(lines)


def whatsapp_link(phone: str, message: str) -> str:
    """Deep link that opens a chat with phone, pre-filled with message."""
    digits = re.sub(r"[^0-9]", "", phone or "")
    return f"{WHATSAPP_BASE_URL}/{digits}?text={quote(message, safe='')}"

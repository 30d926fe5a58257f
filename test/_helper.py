"""
Shared builders for the test modules: orders, business profiles and an in-memory Redis stand-in.
"""
from decimal import Decimal

from redis.exceptions import ConnectionError as RedisConnectionError

from order_lifecycle.models import BusinessProfile, Customer, NotificationSettings, Order


def make_order(**overrides) -> Order:
    """DELIVERY order in PENDING with a customer and a $42.50 total unless overridden."""
    data = {
        "id": "ord-1",
        "order_number": "1001",
        "business_id": "biz-1",
        "status": "PENDING",
        "type": "DELIVERY",
        "subtotal": Decimal("38.00"),
        "delivery_fee": Decimal("3.00"),
        "tax": Decimal("1.50"),
        "discount": Decimal("0"),
        "total": Decimal("42.50"),
        "delivery_address": "123 Main St",
        "customer": Customer(name="Ana", phone="+355 69 123 4567"),
    }
    data.update(overrides)
    return Order(**data)


def make_business(**overrides) -> BusinessProfile:
    data = {
        "name": "Tirana Bites",
        "business_type": "RESTAURANT",
        "language": "en",
        "currency": "USD",
        "time_format": "24",
        "timezone": "UTC",
    }
    data.update(overrides)
    return BusinessProfile(**data)


def all_enabled_settings(**overrides) -> NotificationSettings:
    data = {
        "notifications_globally_enabled": True,
        "notify_delivery_on_confirmed": True,
        "notify_pickup_on_confirmed": True,
        "notify_dine_in_on_confirmed": True,
        "notify_delivery_on_preparing": True,
        "notify_pickup_on_preparing": True,
        "notify_dine_in_on_preparing": True,
        "notify_pickup_on_ready": True,
        "notify_dine_in_on_ready": True,
        "notify_delivery_on_out_for_delivery": True,
    }
    data.update(overrides)
    return NotificationSettings(**data)


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the queue and worker code."""

    def __init__(self, failing_lpushes=0):
        self.lists: dict[str, list[str]] = {}
        self.keys: dict[str, str] = {}
        self.failing_lpushes = failing_lpushes

    async def set(self, key, value, nx=False, ex=None):
        if nx and key in self.keys:
            return None
        self.keys[key] = value
        return True

    async def delete(self, key):
        return 1 if self.keys.pop(key, None) is not None else 0

    async def lpush(self, key, value):
        if self.failing_lpushes:
            self.failing_lpushes -= 1
            raise RedisConnectionError("connection reset")
        self.lists.setdefault(key, []).insert(0, value)
        return len(self.lists[key])

    async def rpop(self, key):
        items = self.lists.get(key)
        if not items:
            return None
        return items.pop()

    async def llen(self, key):
        return len(self.lists.get(key, []))

    async def aclose(self):
        pass

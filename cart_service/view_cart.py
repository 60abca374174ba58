"""Print the cart snapshot currently persisted in Redis.

    python -m cart_service.view_cart
"""

import sys
from typing import Optional

import redis

from cart_service.config import get_settings
from cart_service.exceptions import SnapshotDecodeError
from cart_service.models import load_snapshot


def main(redis_client: Optional[redis.Redis] = None, key: Optional[str] = None) -> int:
    settings = get_settings()
    key = key or settings.cart_storage_key

    try:
        if redis_client is None:
            redis_client = redis.Redis(
                host=settings.redis_host,
                port=settings.redis_port,
                db=settings.redis_db,
                decode_responses=True,
            )
        # PING fails fast when the server is unreachable
        redis_client.ping()
        raw = redis_client.get(key)
        ttl = redis_client.ttl(key) if raw else None
    except redis.RedisError as e:
        print(f"❌ Redis error: {e}")
        print("Make sure Redis is running: docker-compose up redis -d")
        return 1

    if not raw:
        print(f"No saved cart under {key}. Add items via the API first, e.g.:")
        print("\ncurl -X POST http://localhost:8001/cart/items \\")
        print('  -H "Content-Type: application/json" \\')
        print('  -d \'{"id": "1", "title": "Shirt", "image_url": "https://img/shirt.png", "price": 10}\'\n')
        return 0

    try:
        products = load_snapshot(raw)
    except SnapshotDecodeError as e:
        print(f"❌ Error: {e}")
        return 1

    print(f"✅ Found {len(products)} items under {key}")
    if ttl is not None and ttl >= 0:
        print(f"⏱️  TTL: {ttl} seconds remaining")
    for item in products:
        print(f"🛒 {item.id} {item.title}: {item.quantity} x {item.price:.2f} = {item.item_total:.2f}")
    print("-" * 50)
    print(f"Total: {sum(item.item_total for item in products):.2f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

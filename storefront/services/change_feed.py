# storefront/services/change_feed.py
import json
from typing import Any, AsyncIterator, Dict

import redis
import redis.asyncio as aioredis
from redis.exceptions import RedisError

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CHANGE_FEED_CHANNEL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ChangeFeed:
    """
    Real-time change notifications for the admin console.

    Writers publish {table, event, id} on a redis pub/sub channel,
    the admin stats stream listens and refreshes its numbers.
    """

    def __init__(self, url: str | None = None, channel: str | None = None):
        self.url = url or REDIS_URL
        self.channel = channel or CHANGE_FEED_CHANNEL
        self.redis = redis.Redis.from_url(self.url, decode_responses=True)

    @redis_retry()
    def _publish(self, payload: str) -> int:
        return self.redis.publish(self.channel, payload)

    def publish(self, table: str, event: str, record_id: int | None = None) -> bool:
        payload = json.dumps({"table": table, "event": event, "id": record_id})
        try:
            receivers = self._publish(payload)
        except RedisError as e:
            # the write already committed, a lost notification only delays a dashboard refresh
            logger.warning(f"Change feed publish failed for {table}/{event}: {e}")
            return False

        logger.info(f"Published {table}/{event} id={record_id} to {receivers} listener(s)")
        return True

    async def listen(self) -> AsyncIterator[Dict[str, Any]]:
        client = aioredis.from_url(self.url, decode_responses=True)
        pubsub = client.pubsub()
        await pubsub.subscribe(self.channel)
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                try:
                    yield json.loads(message["data"])
                except (TypeError, ValueError):
                    logger.warning(f"Skipping malformed change message: {message.get('data')!r}")
        finally:
            await pubsub.unsubscribe(self.channel)
            await pubsub.aclose()
            await client.aclose()

import logging
from typing import Optional

import redis
import redis.exceptions

logger = logging.getLogger(__name__)
CACHE_TTL = 86400


class LinkTargetCache:
    """Read-through cache of link id -> target.

    Targets never change after creation, so an entry is valid for as long as
    the row exists. Every Redis failure degrades to a miss.
    """

    def __init__(self, client: redis.Redis, ttl: int = CACHE_TTL):
        self.client = client
        self.ttl = ttl

    @classmethod
    def from_url(cls, url: str, ttl: int = CACHE_TTL) -> "LinkTargetCache":
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
            retry_on_timeout=True,
        )
        return cls(client, ttl)

    @staticmethod
    def _key(link_id: str) -> str:
        return f"link:{link_id}"

    def get(self, link_id: str) -> Optional[str]:
        try:
            cached = self.client.get(self._key(link_id))
        except redis.exceptions.RedisError as e:
            logger.warning(f"Redis lookup failed for {link_id}: {e}")
            return None

        if cached is None:
            return None
        if isinstance(cached, (bytes, bytearray)):
            cached = cached.decode()
        logger.debug(f"Cache HIT for {link_id} -> {cached[:50]}")
        return cached

    def put(self, link_id: str, target: str) -> None:
        try:
            self.client.setex(self._key(link_id), self.ttl, target)
            logger.debug(f"Cached {link_id} -> {target[:50]}")
        except redis.exceptions.RedisError as e:
            logger.warning(f"Failed to cache {link_id}, Redis unavailable: {e}")

    def evict(self, link_id: str) -> None:
        try:
            self.client.delete(self._key(link_id))
        except redis.exceptions.RedisError as e:
            logger.warning(f"Failed to evict {link_id} from cache: {e}")

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.exceptions.RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    def close(self) -> None:
        try:
            self.client.close()
        except redis.exceptions.RedisError:
            logger.debug("Error closing Redis client")

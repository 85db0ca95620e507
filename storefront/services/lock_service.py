# storefront/services/lock_service.py
import uuid
from contextlib import contextmanager

import redis
from redis.exceptions import RedisError

from storefront.domain.errors import CheckoutInProgressError
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# compare-and-delete in one Lua call; only the holder's token may release the key
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class CheckoutLockService:
    """
    Per-user checkout lock in Redis (SET NX EX).
    Keeps one user from placing two orders from the same cart at once.
    """

    def __init__(self, url: str | None = None, client=None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(user_id: int) -> str:
        return f"checkout:{user_id}:lock"

    @redis_retry()
    def acquire(self, user_id: int, token: str, ttl: int) -> bool:
        key = self._key(user_id)
        logger.info(f"Acquire lock {key}")
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release(self, user_id: int, token: str) -> bool:
        key = self._key(user_id)
        logger.info(f"Release lock {key}")
        return bool(self.redis.eval(_RELEASE_LUA, 1, key, token))

    @contextmanager
    def hold(self, user_id: int, ttl: int = CHECKOUT_LOCK_TTL_SECONDS):
        token = uuid.uuid4().hex
        if not self.acquire(user_id, token, ttl):
            raise CheckoutInProgressError(user_id)
        try:
            yield token
        finally:
            try:
                self.release(user_id, token)
            except RedisError as e:
                # the key still expires after ttl
                logger.warning(f"Failed to release checkout lock for user {user_id}: {e}")

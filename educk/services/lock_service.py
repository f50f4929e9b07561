# educk/services/lock_service.py
import uuid
from contextlib import contextmanager

import redis

from educk.domain.errors import CheckoutInProgressError
from educk.utils.retry import redis_retry
from educk.utils.settings import REDIS_URL, CHECKOUT_LOCK_TTL_SECONDS
from educk.utils.logging import get_logger

logger = get_logger(__name__)

# compare-and-delete in one atomic Lua call, so only the owner releases the lock
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Per-user checkout lock in Redis.
    - SET NX EX takes the lock, TTL frees it if the process dies
    - release only when the stored token is ours
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(user_id: int) -> str:
        return f"checkout:{user_id}:lock"

    @redis_retry()
    def acquire_checkout_lock(self, user_id: int, token: str, ttl: int) -> bool:
        key = self._key(user_id)
        logger.info(f"Acquire lock {key}")
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release_checkout_lock(self, user_id: int, token: str) -> bool:
        key = self._key(user_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def checkout_lock(self, user_id: int, ttl: int = CHECKOUT_LOCK_TTL_SECONDS):
        token = uuid.uuid4().hex
        if not self.acquire_checkout_lock(user_id, token, ttl):
            raise CheckoutInProgressError()
        try:
            yield
        finally:
            try:
                self.release_checkout_lock(user_id, token)
            except redis.RedisError as e:
                # the TTL frees the key
                logger.error(f"Could not release lock {self._key(user_id)}: {e}")


def get_lock_service() -> LockService:
    return LockService()

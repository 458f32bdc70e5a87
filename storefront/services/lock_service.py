import uuid
from contextlib import contextmanager

import redis
from redis.exceptions import RedisError

from storefront.domain.errors import Conflict
from storefront.utils.logging import get_logger
from storefront.utils.retry import redis_retry
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS, REDIS_URL

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje atomowo przez lua, skrypt dziala jako jedna nieprzerywalna operacja
#nie mozna wcisnac sie miedzy GET a DEL, wiec tu jest get + porownanie + del wszystko naraz


class LockService:
    """
    -blokada checkoutu uzytkownika (jeden place_order naraz na uzytkownika)
    -zwalnianie locka tylko przez wlasciciela tokenu
    -atomowosc przy pomocy lua
    Blokada w bazie (FOR UPDATE na koszyku) dalej jest zrodlem prawdy,
    redis tylko szybko odrzuca podwojne klikniecie.
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(user_id: int) -> str:
        return f"cart:{user_id}:checkout"

    @redis_retry()
    def acquire_checkout_lock(self, user_id: int, token: str, ttl: int) -> bool:
        key = self._key(user_id)
        logger.info(f"Acquire lock {key}")
        #SET cart:1:checkout "<token>" NX EX 30
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
        try:
            locked = self.acquire_checkout_lock(user_id, token, ttl)
        except RedisError as e:
            logger.error(f"Checkout lock unavailable for user {user_id}: {e}")
            raise Conflict("Checkout lock unavailable, retry the operation") from e

        if not locked:
            raise Conflict(f"Checkout already in progress for user {user_id}")

        try:
            yield
        finally:
            try:
                self.release_checkout_lock(user_id, token)
            except RedisError as e:
                # klucz i tak wygasnie po ttl
                logger.warning(f"Failed to release checkout lock for user {user_id}: {e}")

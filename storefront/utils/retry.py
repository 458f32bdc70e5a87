# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import redis

from storefront.domain.errors import Conflict
from storefront.utils.settings import CONFLICT_RETRY_ATTEMPTS


def conflict_retry():
    # caly use case od nowa, transakcja jest juz wycofana
    return retry(
        reraise=True,
        stop=stop_after_attempt(CONFLICT_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(Conflict),
    )


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )

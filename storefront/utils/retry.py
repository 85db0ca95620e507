# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests
import redis

from storefront.domain.errors import OrderNumberConflictError
from storefront.utils.settings import ORDER_NUMBER_ATTEMPTS


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(requests.RequestException),
    )


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )


def order_number_retry():
    # unique violation on orders.order_number -> rerun the whole transaction
    return retry(
        reraise=True,
        stop=stop_after_attempt(ORDER_NUMBER_ATTEMPTS),
        wait=wait_exponential(multiplier=0.01, min=0, max=0.1),
        retry=retry_if_exception_type(OrderNumberConflictError),
    )

"""PagerDuty API client used to trigger incidents."""

from .exceptions import (
    PagingClientError,
    PagingHTTPError,
    PagingResponseError,
    PagingTimeoutError,
)
from .pagerduty import PagerdutyClient, build_client_factory

__all__ = [
    "PagerdutyClient",
    "build_client_factory",
    # Exceptions
    "PagingClientError",
    "PagingHTTPError",
    "PagingResponseError",
    "PagingTimeoutError",
]

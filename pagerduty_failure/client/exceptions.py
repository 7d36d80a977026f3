"""Custom exceptions for the PagerDuty client."""

from typing import Optional


class PagingClientError(Exception):
    """Base exception for all PagerDuty client errors.

    Raised out of the client unchanged; the notifier and failure backend let
    it reach the host's failure-handling pipeline.
    """

    pass


class PagingHTTPError(PagingClientError):
    """HTTP request failed with a 4xx/5xx status or a transport error.

    ``status_code`` is 0 when no response was received.
    """

    def __init__(self, message: str, status_code: int, url: str, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.body = body


class PagingTimeoutError(PagingClientError):
    """HTTP request did not complete within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class PagingResponseError(PagingClientError):
    """Response could not be parsed as JSON."""

    pass

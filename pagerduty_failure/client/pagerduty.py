"""PagerDuty API client.

Triggers, acknowledges and resolves incidents through the Generic API
events endpoint, and lists incidents through the account's REST endpoint.

API Details:
    Events endpoint: https://events.pagerduty.com/generic/2010-04-15/create_event.json
    Method: POST
    Authentication: service key in the JSON body
    REST endpoint: https://{subdomain}.pagerduty.com/api/v1/incidents
    Authentication: HTTP basic (username, password)
"""

import logging
from typing import Any, Dict, Optional

import requests

from pagerduty_failure.logging import get_logger

from .exceptions import (
    PagingHTTPError,
    PagingResponseError,
    PagingTimeoutError,
)

logger = get_logger(__name__, component="client")


class PagerdutyClient:
    """Client for a single PagerDuty service and account.

    Missing settings are not checked here; PagerDuty rejects the request and
    the resulting PagingHTTPError is raised to the caller.

    Attributes:
        service_key: Generic API service key incidents are routed to
        subdomain: Account subdomain for the REST endpoint
        username: User for REST authentication
        password: Password for REST authentication
        timeout: HTTP request timeout in seconds
    """

    EVENTS_URL = "https://events.pagerduty.com/generic/2010-04-15/create_event.json"
    REST_URL_TEMPLATE = "https://{subdomain}.pagerduty.com/api/v1"

    def __init__(
        self,
        service_key: Optional[str] = None,
        subdomain: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: int = 30,
        user_agent: str = "PagerdutyFailure/1.0",
        session: Optional[requests.Session] = None,
    ) -> None:
        self.service_key = service_key
        self.subdomain = subdomain
        self.username = username
        self.password = password
        self.timeout = timeout

        # Only a session created here is closed by close()
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": user_agent})

    def close(self) -> None:
        """Release the HTTP connection pool of a client-created session."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "PagerdutyClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def incidents_url(self) -> str:
        """REST URL listing the account's incidents."""
        return f"{self.REST_URL_TEMPLATE.format(subdomain=self.subdomain)}/incidents"

    def trigger_incident(
        self,
        description: str,
        details: Optional[Dict[str, Any]] = None,
        incident_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Trigger a new incident (or append to an open one with ``incident_key``).

        Returns:
            Parsed PagerDuty response, e.g. {"status": "success", "incident_key": "..."}

        Raises:
            PagingHTTPError: On 4xx/5xx status or connection failure
            PagingTimeoutError: On request timeout
            PagingResponseError: On a response that is not JSON
        """
        return self._send_event("trigger", description, details, incident_key)

    def acknowledge_incident(
        self,
        incident_key: str,
        description: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Acknowledge the open incident identified by ``incident_key``."""
        return self._send_event("acknowledge", description, details, incident_key)

    def resolve_incident(
        self,
        incident_key: str,
        description: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Resolve the open incident identified by ``incident_key``."""
        return self._send_event("resolve", description, details, incident_key)

    def incidents(self, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """List incidents on the account, authenticating with username/password."""
        return self._make_request(
            self.incidents_url,
            method="GET",
            params=params,
            auth=(self.username or "", self.password or ""),
        )

    def _send_event(
        self,
        event_type: str,
        description: Optional[str],
        details: Optional[Dict[str, Any]],
        incident_key: Optional[str],
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "service_key": self.service_key,
            "event_type": event_type,
        }
        if description is not None:
            body["description"] = description
        if incident_key is not None:
            body["incident_key"] = incident_key
        if details is not None:
            body["details"] = details

        return self._make_request(self.EVENTS_URL, method="POST", json_data=body)

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        params: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        auth: Optional[tuple] = None,
    ) -> Dict[str, Any]:
        """Make an HTTP request and return the parsed JSON body.

        Raises:
            PagingHTTPError: On 4xx or 5xx HTTP status, or connection failure
            PagingTimeoutError: On request timeout
            PagingResponseError: On invalid JSON
        """
        event_type = json_data.get("event_type") if json_data else None

        try:
            logger.debug(
                f"HTTP {method} request to {url}",
                extra={
                    "event": "client.request",
                    "method": method,
                    "url": url,
                    "event_type": event_type,
                    "timeout": self.timeout,
                },
            )

            response = self._session.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                auth=auth,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={"event": "client.request.timeout", "url": url, "timeout": self.timeout},
            )
            raise PagingTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "client.request.error",
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise PagingHTTPError(
                f"Request to {url} failed: {e}",
                status_code=0,
                url=url,
            ) from e

        if response.status_code >= 400:
            # Retryable (5xx) or fatal (4xx)
            log_level = logging.WARNING if response.status_code >= 500 else logging.ERROR
            logger.log(
                log_level,
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "client.request.error",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            raise PagingHTTPError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
                url=url,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"Failed to parse JSON response from {url}",
                extra={"event": "client.request.error", "error_type": "JSONDecodeError", "url": url},
            )
            raise PagingResponseError(f"Failed to parse JSON response from {url}: {e}") from e

        logger.debug(
            "HTTP request succeeded",
            extra={
                "event": "client.request.succeeded",
                "status_code": response.status_code,
                "url": url,
            },
        )
        return data


def build_client_factory(timeout: int = 30, user_agent: str = "PagerdutyFailure/1.0"):
    """Return a FailureNotifier client factory with fixed HTTP settings.

    Example:
        >>> factory = build_client_factory(**app_config.client.model_dump())
        >>> notifier = FailureNotifier(config, client_factory=factory)
    """

    def factory(**settings) -> PagerdutyClient:
        return PagerdutyClient(timeout=timeout, user_agent=user_agent, **settings)

    return factory

"""Failure notifier that reports failed jobs as PagerDuty incidents.

Each report reads one snapshot of the configuration, resolves the service
key, builds the incident and hands it to a freshly constructed client,
which is closed again afterwards. Whatever the client returns or raises is
passed straight back.
"""

import logging
from typing import Any, Callable, Optional

from pagerduty_failure.client import PagerdutyClient
from pagerduty_failure.config.models import PagerdutyConfig, default_config
from pagerduty_failure.domain.models import FailureRecord
from pagerduty_failure.logging import get_logger
from pagerduty_failure.logging.context import log_context

from .payloads import build_incident_report, resolve_service_key

logger = get_logger(__name__, component="notifier")

ClientFactory = Callable[..., Any]


class FailureNotifier:
    """Reports failed jobs to PagerDuty.

    The notifier holds no per-report state. Retry, error translation and
    success checks are left to the client and the host.
    """

    def __init__(
        self,
        config: Optional[PagerdutyConfig] = None,
        client_factory: Optional[ClientFactory] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize the notifier.

        Args:
            config: Settings to read on each report (process-wide default if None)
            client_factory: Called with service_key, subdomain, username and
                password; must return an object with trigger_incident()
                (PagerdutyClient if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.config = config if config is not None else default_config
        self.client_factory = client_factory or PagerdutyClient
        self.logger = logger_instance or logger

    def service_key(self, record: FailureRecord) -> Optional[str]:
        """Return the service key an incident for ``record`` would be routed to."""
        return resolve_service_key(record.job_class, self.config.service_key)

    def report(self, record: FailureRecord) -> Any:
        """Trigger an incident for a failed job.

        Only debug-level trace lines are logged here; errors are never logged
        or suppressed by the notifier, they propagate to the host unchanged.

        Args:
            record: The failed job

        Returns:
            The client's trigger_incident() result, unchanged

        Raises:
            Whatever the client factory or trigger_incident() raises
        """
        settings = self.config.snapshot()
        service_key = resolve_service_key(record.job_class, settings.service_key)
        incident = build_incident_report(record)
        override = getattr(record.job_class, "pagerduty_service_key", None)

        with log_context(queue=record.queue_name, job_class=str(record.job_class)):
            self.logger.debug(
                "Triggering incident for failed job",
                extra={
                    "event": "notifier.report.started",
                    "service_key_source": "job_class" if override else "default",
                },
            )

            client = self.client_factory(
                service_key=service_key,
                subdomain=settings.subdomain,
                username=settings.username,
                password=settings.password,
            )
            try:
                result = client.trigger_incident(
                    description=incident.description,
                    details=incident.details,
                )
            finally:
                close = getattr(client, "close", None)
                if callable(close):
                    close()

            self.logger.debug(
                "Incident triggered for failed job",
                extra={"event": "notifier.report.sent"},
            )
            return result

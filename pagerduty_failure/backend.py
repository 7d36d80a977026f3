"""Failure backend that triggers PagerDuty incidents for failed jobs.

The host job system constructs one backend per failure and calls save()::

    backend = PagerdutyFailureBackend(exc, queue="mailers",
                                      payload={"class": SendMail, "args": [42]})
    backend.save()

Job classes route their incidents to another PagerDuty service by declaring
a ``pagerduty_service_key`` class attribute.
"""

from typing import Any, Callable, Mapping, Optional

from pagerduty_failure.config import models as config_models
from pagerduty_failure.domain.models import FailureRecord
from pagerduty_failure.notifier import FailureNotifier


class PagerdutyFailureBackend:
    """Handles a job exception by triggering an incident in PagerDuty.

    Args:
        exception: The exception the job raised
        queue: Name of the queue the job was taken from
        payload: Job payload with ``class`` (job class, its name, or a
            JobClassDescriptor) and ``args`` (the job arguments)
        notifier: Notifier to report through (one bound to the process-wide
            configuration if None)
    """

    def __init__(
        self,
        exception: BaseException,
        queue: str,
        payload: Mapping[str, Any],
        notifier: Optional[FailureNotifier] = None,
    ):
        self.exception = exception
        self.queue = queue
        self.payload = payload
        self.notifier = notifier or FailureNotifier()

    @classmethod
    def configure(
        cls, mutator: Callable[[config_models.PagerdutyConfig], None]
    ) -> config_models.PagerdutyConfig:
        """Configure the process-wide PagerDuty settings."""
        return config_models.configure(mutator)

    @classmethod
    def reset(cls) -> None:
        """Reset the process-wide PagerDuty settings."""
        config_models.reset()

    def failure_record(self) -> FailureRecord:
        return FailureRecord.from_exception(
            self.exception,
            queue_name=self.queue,
            job_class=self.payload["class"],
            job_arguments=self.payload.get("args", ()),
        )

    def service_key(self) -> Optional[str]:
        """Service key this failure will be routed to."""
        return self.notifier.service_key(self.failure_record())

    def save(self) -> Any:
        """Trigger an incident in PagerDuty for this failure."""
        return self.notifier.report(self.failure_record())

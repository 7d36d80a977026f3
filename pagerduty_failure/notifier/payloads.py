"""Service key resolution and incident payload construction."""

from typing import Optional

from pagerduty_failure.domain.models import FailureRecord, IncidentReport, JobClassDescriptor

DESCRIPTION_PREFIX = "Job raised an error: "


def resolve_service_key(job_class: JobClassDescriptor, default: Optional[str]) -> Optional[str]:
    """Pick the service key an incident for ``job_class`` is routed to.

    A non-empty per-class ``pagerduty_service_key`` wins; an unset or empty
    one falls through to ``default``, which is returned as-is even when unset.
    """
    override = getattr(job_class, "pagerduty_service_key", None)
    if override:
        return override
    return default


def build_incident_report(record: FailureRecord) -> IncidentReport:
    """Build the incident description and details for a failed job.

    Returns:
        IncidentReport whose details hold:
        - queue: queue the job ran on
        - class: job class name
        - args: the job arguments, same object as the record's
        - exception: repr of the exception (type and message)
        - backtrace: frames joined by newlines, in original order
    """
    return IncidentReport(
        description=f"{DESCRIPTION_PREFIX}{record.exception_message}",
        details={
            "queue": record.queue_name,
            "class": str(record.job_class),
            "args": record.job_arguments,
            "exception": record.exception_inspect,
            "backtrace": "\n".join(record.exception_backtrace),
        },
    )

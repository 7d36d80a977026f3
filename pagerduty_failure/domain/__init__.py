"""Domain models for failed jobs and PagerDuty incidents."""

from .models import FailureRecord, IncidentReport, JobClassDescriptor

__all__ = ["FailureRecord", "IncidentReport", "JobClassDescriptor"]

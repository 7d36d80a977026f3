"""Failure notifier: turns failed jobs into PagerDuty incidents.

- FailureNotifier: resolves the service key and triggers the incident
- resolve_service_key: per-class override vs. configured default
- build_incident_report: description and details for one failure
"""

from .payloads import build_incident_report, resolve_service_key
from .service import FailureNotifier

__all__ = [
    "FailureNotifier",
    "build_incident_report",
    "resolve_service_key",
]

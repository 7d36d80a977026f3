"""Report failed background jobs as PagerDuty incidents."""

from .backend import PagerdutyFailureBackend
from .bootstrap import setup_from_file
from .config import configure, default_config, reset
from .domain import FailureRecord, IncidentReport, JobClassDescriptor
from .notifier import FailureNotifier

__version__ = "1.0.0"

__all__ = [
    "PagerdutyFailureBackend",
    "FailureNotifier",
    "FailureRecord",
    "IncidentReport",
    "JobClassDescriptor",
    "configure",
    "default_config",
    "reset",
    "setup_from_file",
]

"""Core domain models for failed jobs and the incidents reported for them.

- JobClassDescriptor: identifies a job's class, with an optional service key override
- FailureRecord: read-only description of one failed job
- IncidentReport: the description and details sent to PagerDuty
"""

import traceback
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple, Union

OVERRIDE_ATTRIBUTE = "pagerduty_service_key"


@dataclass(frozen=True)
class JobClassDescriptor:
    """Identifies the class of a failed job.

    Attributes:
        name: Fully qualified job class name, used as the incident's ``class`` detail
        pagerduty_service_key: Optional per-class service key that takes
            precedence over the configured default when non-empty
    """

    name: str
    pagerduty_service_key: Optional[str] = None

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_job_class(cls, job_class: Union["JobClassDescriptor", type, str]) -> "JobClassDescriptor":
        """Build a descriptor from whatever the host uses to name a job class.

        Classes are named ``module.QualName`` and contribute their
        ``pagerduty_service_key`` when they declare one, either as a plain
        attribute or as a classmethod/staticmethod that is called here.
        Strings become a descriptor without an override.
        """
        if isinstance(job_class, JobClassDescriptor):
            return job_class

        if isinstance(job_class, str):
            return cls(name=job_class)

        if isinstance(job_class, type):
            module = job_class.__module__
            qualname = job_class.__qualname__
            name = qualname if module == "builtins" else f"{module}.{qualname}"
            override = getattr(job_class, OVERRIDE_ATTRIBUTE, None)
            if callable(override):
                override = override()
            return cls(name=name, pagerduty_service_key=override)

        raise TypeError(
            f"Cannot describe job class from {type(job_class).__name__}: {job_class!r}"
        )


@dataclass(frozen=True)
class FailureRecord:
    """Read-only description of one failed job.

    ``job_arguments`` is kept by reference so the incident carries exactly
    what the host handed over.
    """

    exception_message: str
    exception_inspect: str
    exception_backtrace: Tuple[str, ...]
    queue_name: str
    job_class: JobClassDescriptor
    job_arguments: Sequence[Any] = field(default_factory=tuple)

    @classmethod
    def from_exception(
        cls,
        exception: BaseException,
        queue_name: str,
        job_class: Union[JobClassDescriptor, type, str],
        job_arguments: Sequence[Any] = (),
    ) -> "FailureRecord":
        """Build a record from a raised exception.

        The backtrace holds one ``File "...", line N, in func`` entry per
        frame of ``exception.__traceback__``, outermost first. An exception
        that was never raised has an empty backtrace.

        Raises:
            ValueError: If exception is None
        """
        if exception is None:
            raise ValueError("Cannot build a failure record without an exception")

        return cls(
            exception_message=str(exception),
            exception_inspect=repr(exception),
            exception_backtrace=format_backtrace(exception),
            queue_name=queue_name,
            job_class=JobClassDescriptor.from_job_class(job_class),
            job_arguments=job_arguments,
        )


@dataclass(frozen=True)
class IncidentReport:
    """Description and details of an incident to trigger."""

    description: str
    details: Dict[str, Any]


def format_backtrace(exception: BaseException) -> Tuple[str, ...]:
    """Format the traceback of ``exception`` as one string per frame."""
    frames = traceback.extract_tb(exception.__traceback__)
    return tuple(
        f'File "{frame.filename}", line {frame.lineno}, in {frame.name}'
        for frame in frames
    )

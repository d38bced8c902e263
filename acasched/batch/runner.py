"""
Sequential batch runner that applies one lifecycle action to many Container Apps.
"""

import logging
from typing import Callable, Iterable, Optional

from .models import BatchReport, ContainerAppRef, LifecycleAction, OutcomeRecord, OutcomeStatus

logger = logging.getLogger(__name__)

# operation(action, app_name, resource_group) returns on success and raises on failure.
LifecycleOperation = Callable[[LifecycleAction, str, str], None]


def describe_error(error: BaseException) -> str:
    """
    Short, human-readable description of an error raised by a lifecycle call.

    Azure SDK errors carry the service message in ``message``; everything else
    falls back to ``str(error)`` and finally to the exception class name.
    """
    message = getattr(error, "message", None)
    if isinstance(message, str) and message.strip():
        return message.strip()
    text = str(error).strip()
    return text or type(error).__name__


class BatchLifecycleRunner:
    """
    Applies a lifecycle action to each Container App in turn.

    A failure on one app is logged and recorded, and processing moves on to the
    next app; nothing is retried. The runner keeps no state between calls.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def run(
        self,
        apps: Iterable[ContainerAppRef],
        action: LifecycleAction,
        resource_group: str,
        operation: LifecycleOperation,
    ) -> BatchReport:
        """
        Run ``operation`` for every app in discovery order.

        Args:
            apps: Container Apps to process (may be empty)
            action: Action applied to every app
            resource_group: Resource group shared by the batch
            operation: Callable performing the action on one app

        Returns:
            BatchReport with one OutcomeRecord per app
        """
        apps = list(apps)
        report = BatchReport(action=action)

        if not apps:
            self.log.info(
                f"No Container Apps found in resource group '{resource_group}'; nothing to {action.value}"
            )
            return report

        self.log.info(f"Found {len(apps)} Container App(s) to {action.value}")

        for app in apps:
            self.log.info(f"Attempting to {action.value} Container App '{app.name}'")
            try:
                operation(action, app.name, resource_group)
            except Exception as e:
                error = describe_error(e)
                self.log.error(f"Failed to {action.value} Container App '{app.name}': {error}")
                report.records.append(OutcomeRecord(app.name, action, OutcomeStatus.FAILED, error))
                continue

            self.log.info(f"Successfully {action.past_tense} Container App '{app.name}'")
            report.records.append(OutcomeRecord(app.name, action, OutcomeStatus.SUCCEEDED))

        self.log.info(
            f"Summary: {report.total} Container App(s) processed, "
            f"{report.succeeded} {action.past_tense}, {report.failed} failed"
        )
        if report.failed:
            names = ", ".join(record.name for record in report.failures())
            self.log.error(f"{report.failed} Container App(s) could not be {action.past_tense}: {names}")

        return report

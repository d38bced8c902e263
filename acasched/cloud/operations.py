"""
Start and stop calls for a single Container App.
"""

import logging

from ..batch.models import LifecycleAction
from ..batch.runner import LifecycleOperation

logger = logging.getLogger(__name__)


def lifecycle_operation(client) -> LifecycleOperation:
    """
    Bind a Container Apps client into a lifecycle operation for the runner.

    The returned callable blocks until the long-running operation finishes and
    lets any SDK error propagate to the caller.
    """

    def apply(action: LifecycleAction, app_name: str, resource_group: str) -> None:
        if action is LifecycleAction.START:
            poller = client.container_apps.begin_start(resource_group, app_name)
        elif action is LifecycleAction.STOP:
            poller = client.container_apps.begin_stop(resource_group, app_name)
        else:
            raise ValueError(f"Unsupported lifecycle action: {action}")
        poller.result()
        logger.debug(f"{action.label} operation for '{app_name}' completed")

    return apply

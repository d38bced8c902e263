"""
Batch lifecycle operations over a set of Container Apps.
"""

from .models import (
    ContainerAppRef,
    LifecycleAction,
    OutcomeStatus,
    OutcomeRecord,
    BatchReport,
    EXIT_SUCCESS,
    EXIT_FAILURE,
)
from .runner import BatchLifecycleRunner, describe_error

__all__ = [
    "ContainerAppRef",
    "LifecycleAction",
    "OutcomeStatus",
    "OutcomeRecord",
    "BatchReport",
    "EXIT_SUCCESS",
    "EXIT_FAILURE",
    "BatchLifecycleRunner",
    "describe_error",
]

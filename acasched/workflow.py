"""
End-to-end runs: preconditions, discovery, batch, remediation and exit code.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from .batch import BatchLifecycleRunner, BatchReport, EXIT_FAILURE, LifecycleAction
from .config import Settings
from .errors import AcaSchedError
from .logs import run_log
from .memory import MemoryReport, summarize_memory
from .provision import ensure_dependencies

if TYPE_CHECKING:
    from .remediation import RemediationResult, RemediationStep

logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    """Result of one start/stop invocation."""
    exit_code: int
    log_path: Path
    report: Optional[BatchReport] = None
    remediation: Optional["RemediationResult"] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exit_code": self.exit_code,
            "log_file": str(self.log_path),
            "report": self.report.to_dict() if self.report else None,
            "remediation": self.remediation.to_dict() if self.remediation else None,
            "error": self.error,
        }


def open_session(settings: Settings, connect: Optional[Callable] = None):
    """
    Check dependencies, build the Azure session and verify it.

    Raises:
        AcaSchedError: On any missing dependency or authentication failure
    """
    ensure_dependencies(install=settings.auto_install)

    # Imported after the dependency check.
    from .cloud.auth import check_session

    if connect is None:
        from .cloud.session import connect

    session = connect(settings)
    check_session(session.credential)
    return session


def execute_lifecycle(
    action: LifecycleAction,
    settings: Settings,
    resource_group: str,
    environment_name: str,
    environment_resource_group: Optional[str] = None,
    remediate: bool = True,
    remediation: Optional["RemediationStep"] = None,
    connect: Optional[Callable] = None,
    console: bool = True,
) -> RunOutcome:
    """
    Start or stop every Container App of an environment.

    Args:
        action: Lifecycle action to apply
        settings: Runtime settings
        resource_group: Resource group holding the Container Apps
        environment_name: Managed environment name
        environment_resource_group: Resource group of the managed environment;
            remediation runs only for stop when this is set
        remediate: Whether to run post-batch remediation on stop
        remediation: Remediation step (defaults to FailedStateTagger)
        connect: Session factory (defaults to cloud.session.connect)
        console: Whether to mirror log lines to stderr

    Returns:
        RunOutcome with the exit code for the process
    """
    with run_log(action.label, settings.log_dir, settings.log_prefix, console=console) as log_path:
        logger.info(
            f"{action.label} run for environment '{environment_name}' "
            f"in resource group '{resource_group}' (log: {log_path})"
        )

        try:
            session = open_session(settings, connect)

            from .cloud.discovery import discover_container_apps
            apps = discover_container_apps(session.client, resource_group, environment_name)
        except AcaSchedError as e:
            logger.error(f"Aborting before any Container App was {action.past_tense}: {e}")
            return RunOutcome(exit_code=EXIT_FAILURE, log_path=log_path, error=str(e))

        from .cloud.operations import lifecycle_operation
        report = BatchLifecycleRunner().run(apps, action, resource_group, lifecycle_operation(session.client))

        remediation_result = None
        if action is LifecycleAction.STOP and environment_resource_group and remediate:
            from .remediation import FailedStateTagger, apply_remediation

            step = remediation or FailedStateTagger()
            remediation_result = apply_remediation(
                step, session.client, environment_resource_group, environment_name
            )

        if report.exit_code == EXIT_FAILURE:
            logger.error(f"{action.label} run finished with {report.failed} failure(s)")
        else:
            logger.info(f"{action.label} run finished successfully")

        return RunOutcome(
            exit_code=report.exit_code,
            log_path=log_path,
            report=report,
            remediation=remediation_result,
        )


def execute_memory(
    settings: Settings,
    resource_group: str,
    environment_name: str,
    connect: Optional[Callable] = None,
) -> MemoryReport:
    """
    Estimate the memory reserved by an environment's Container Apps.

    Raises:
        AcaSchedError: On any precondition or discovery failure
    """
    session = open_session(settings, connect)

    from .cloud.discovery import list_environment_apps
    apps = list_environment_apps(session.client, resource_group, environment_name)
    return summarize_memory(apps, environment_name)

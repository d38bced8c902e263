"""
Post-batch remediation for the managed environment.

After a stop batch, a managed environment can be left in the ``Failed``
provisioning state. Patching its tags forces a fresh provisioning pass, which
clears the state. The step is pluggable so it can be swapped or disabled
without touching the batch runner.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from azure.core.exceptions import HttpResponseError

from .errors import RemediationError

logger = logging.getLogger(__name__)

FAILED_STATE = "failed"


@dataclass(frozen=True)
class RemediationResult:
    """What a remediation step observed and did."""
    environment: str
    provisioning_state: Optional[str]
    applied: bool
    tag_name: Optional[str] = None
    tag_value: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment,
            "provisioning_state": self.provisioning_state,
            "applied": self.applied,
            "tag_name": self.tag_name,
            "tag_value": self.tag_value,
        }


class RemediationStep(ABC):
    """Abstract base class for post-batch remediation strategies."""

    @abstractmethod
    def apply(self, client, resource_group: str, environment_name: str) -> RemediationResult:
        """
        Inspect the managed environment and remediate it if needed.

        Args:
            client: ContainerAppsAPIClient
            resource_group: Resource group of the managed environment
            environment_name: Managed environment name

        Returns:
            What was observed and whether anything was changed
        """
        pass


def _state_name(state) -> Optional[str]:
    if state is None:
        return None
    return str(getattr(state, "value", state))


def remediation_tag(now: datetime) -> Dict[str, str]:
    """Tag written to a failed environment: ``fix_<yyyyMMdd>`` = ``<yyyy-MM-dd>``."""
    return {f"fix_{now:%Y%m%d}": f"{now:%Y-%m-%d}"}


def merge_tags(existing: Optional[Dict[str, str]], new_tags: Dict[str, str]) -> Dict[str, str]:
    """Keep every existing tag except those replaced by ``new_tags``."""
    merged = {key: value for key, value in (existing or {}).items() if key not in new_tags}
    merged.update(new_tags)
    return merged


class FailedStateTagger(RemediationStep):
    """
    Re-tag a managed environment whose provisioning state is ``Failed``.

    Environments in any other state are left untouched.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock

    def apply(self, client, resource_group: str, environment_name: str) -> RemediationResult:
        try:
            environment = client.managed_environments.get(resource_group, environment_name)
        except HttpResponseError as e:
            raise RemediationError(f"Could not read managed environment '{environment_name}': {e.message or e}") from e

        state = _state_name(environment.provisioning_state)
        logger.info(f"Managed environment '{environment_name}' provisioning state: {state}")

        if (state or "").lower() != FAILED_STATE:
            return RemediationResult(environment=environment_name, provisioning_state=state, applied=False)

        tag = remediation_tag(self.clock())
        (tag_name, tag_value), = tag.items()
        logger.warning(
            f"Managed environment '{environment_name}' is in a failed state; applying tag {tag_name}={tag_value}"
        )

        environment.tags = merge_tags(environment.tags, tag)
        try:
            client.managed_environments.begin_update(resource_group, environment_name, environment).result()
        except HttpResponseError as e:
            raise RemediationError(f"Could not tag managed environment '{environment_name}': {e.message or e}") from e

        logger.info(f"Tagged managed environment '{environment_name}'")
        return RemediationResult(
            environment=environment_name,
            provisioning_state=state,
            applied=True,
            tag_name=tag_name,
            tag_value=tag_value,
        )


def apply_remediation(
    step: RemediationStep, client, resource_group: str, environment_name: str
) -> Optional[RemediationResult]:
    """
    Run a remediation step, logging instead of raising on failure.

    Returns:
        The step's result, or None if it raised
    """
    try:
        return step.apply(client, resource_group, environment_name)
    except Exception as e:
        logger.error(f"Remediation of environment '{environment_name}' failed: {e}")
        return None

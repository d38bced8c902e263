"""
Container App discovery filtered by managed environment.
"""

import logging
from typing import Any, List, Optional

from azure.core.exceptions import AzureError, HttpResponseError, ResourceNotFoundError

from ..batch.models import ContainerAppRef
from ..errors import DiscoveryError

logger = logging.getLogger(__name__)


def environment_id_of(app: Any) -> Optional[str]:
    """Read the managed environment resource id from an SDK ContainerApp."""
    return getattr(app, "managed_environment_id", None) or getattr(app, "environment_id", None)


def _last_segment(resource_id: str) -> str:
    return resource_id.rstrip("/").rsplit("/", 1)[-1]


def is_exact_match(environment_id: Optional[str], environment_name: str) -> bool:
    """True if the id's final segment is the environment name (case-insensitive)."""
    if not environment_id:
        return False
    return _last_segment(environment_id).lower() == environment_name.lower()


def is_suffix_match(environment_id: Optional[str], environment_name: str) -> bool:
    """True if the id ends with the environment name (case-insensitive)."""
    if not environment_id:
        return False
    return environment_id.rstrip("/").lower().endswith(environment_name.lower())


def filter_by_environment(apps: List[Any], environment_name: str) -> List[Any]:
    """
    Keep the apps attached to ``environment_name``, preserving order.

    Exact matches on the id's last segment win. Suffix matches are only used
    when no app matches exactly, so "preprod" is never picked up alongside
    "prod".

    Raises:
        ValueError: If the environment name is blank
    """
    if not environment_name or not environment_name.strip():
        raise ValueError("Environment name must not be empty")

    exact = [app for app in apps if is_exact_match(environment_id_of(app), environment_name)]
    suffix = [
        app for app in apps
        if is_suffix_match(environment_id_of(app), environment_name)
        and not is_exact_match(environment_id_of(app), environment_name)
    ]

    if exact:
        if suffix:
            skipped = ", ".join(app.name for app in suffix)
            logger.warning(
                f"Ignoring Container Apps whose environment only ends with '{environment_name}': {skipped}"
            )
        return exact

    if suffix:
        logger.warning(
            f"No environment named exactly '{environment_name}'; "
            f"using {len(suffix)} Container App(s) matched by suffix"
        )
    return suffix


def list_environment_apps(client, resource_group: str, environment_name: str) -> List[Any]:
    """
    List SDK ContainerApp objects in ``resource_group`` attached to the environment.

    Raises:
        DiscoveryError: If the environment name is blank, the resource group is
            missing, or the API call fails
    """
    if not environment_name or not environment_name.strip():
        raise DiscoveryError("Environment name must not be empty")

    logger.info(
        f"Listing Container Apps in resource group '{resource_group}' for environment '{environment_name}'"
    )
    try:
        apps = list(client.container_apps.list_by_resource_group(resource_group))
    except ResourceNotFoundError as e:
        raise DiscoveryError(f"Resource group '{resource_group}' not found") from e
    except HttpResponseError as e:
        raise DiscoveryError(f"Failed to list Container Apps in '{resource_group}': {e.message or e}") from e
    except AzureError as e:
        raise DiscoveryError(
            f"Could not reach Azure to list Container Apps in '{resource_group}': {e.message or e}"
        ) from e

    return filter_by_environment(apps, environment_name)


def discover_container_apps(client, resource_group: str, environment_name: str) -> List[ContainerAppRef]:
    """
    Discover the Container Apps a batch should act on.

    Args:
        client: ContainerAppsAPIClient
        resource_group: Resource group holding the apps
        environment_name: Managed environment name

    Returns:
        Apps in the order returned by the API
    """
    apps = list_environment_apps(client, resource_group, environment_name)
    refs = [
        ContainerAppRef(name=app.name, environment_id=environment_id_of(app), resource_group=resource_group)
        for app in apps
    ]
    logger.info(f"Discovered {len(refs)} Container App(s) in environment '{environment_name}'")
    return refs

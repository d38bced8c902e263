"""
Azure credential and management client construction.
"""

import logging
from dataclasses import dataclass
from typing import Any

from azure.identity import DefaultAzureCredential
from azure.mgmt.appcontainers import ContainerAppsAPIClient

from ..config import Settings

logger = logging.getLogger(__name__)


@dataclass
class AzureSession:
    """Credential and Container Apps client for one subscription."""
    credential: Any
    client: Any
    subscription_id: str


def connect(settings: Settings) -> AzureSession:
    """
    Create a credential and a Container Apps management client.

    Nothing is sent to Azure until the first call; use
    ``check_session`` to verify the credential.
    """
    # The SDK logs every HTTP request at INFO.
    logging.getLogger("azure").setLevel(logging.WARNING)

    credential = DefaultAzureCredential(exclude_interactive_browser_credential=True)
    client = ContainerAppsAPIClient(credential, settings.subscription_id)
    logger.debug(f"Created Container Apps client for subscription {settings.subscription_id}")
    return AzureSession(credential=credential, client=client, subscription_id=settings.subscription_id)

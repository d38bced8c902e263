"""
Active-session check against Azure Resource Manager.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from azure.core.exceptions import AzureError, ClientAuthenticationError

from ..errors import AuthError

logger = logging.getLogger(__name__)

ARM_SCOPE = "https://management.azure.com/.default"


@dataclass(frozen=True)
class SessionInfo:
    """Details of the token obtained for the management API."""
    expires_on: datetime


def check_session(credential) -> SessionInfo:
    """
    Verify that ``credential`` can obtain a management token.

    Raises:
        AuthError: If no credential in the chain can authenticate or the token
            endpoint cannot be reached
    """
    try:
        token = credential.get_token(ARM_SCOPE)
    except ClientAuthenticationError as e:
        raise AuthError(f"No active Azure session: {e.message or e}") from e
    except AzureError as e:
        raise AuthError(f"Could not verify the Azure session: {e.message or e}") from e

    expires_on = datetime.fromtimestamp(token.expires_on, tz=timezone.utc)
    logger.info(f"Azure session active (token valid until {expires_on.isoformat()})")
    return SessionInfo(expires_on=expires_on)

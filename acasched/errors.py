"""
Exception hierarchy for aca-scheduler.

Every error that should abort a run before any Container App is touched
derives from AcaSchedError, so the workflow can log it once and exit 1.
"""


class AcaSchedError(Exception):
    """Base class for fatal aca-scheduler errors."""


class ConfigError(AcaSchedError):
    """Settings are missing or invalid."""


class DependencyError(AcaSchedError):
    """A required client library is not importable and could not be installed."""


class AuthError(AcaSchedError):
    """No active Azure session could be established."""


class DiscoveryError(AcaSchedError):
    """Listing Container Apps for the resource group failed."""


class RemediationError(AcaSchedError):
    """The post-batch environment remediation failed."""

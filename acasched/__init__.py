"""
aca-scheduler - scheduled start/stop of Azure Container Apps.

This package provides a CLI that starts or stops every Container App attached
to a Container Apps managed environment, and a helper that estimates the
memory reserved by an environment's apps.
"""

__version__ = "0.1.0"

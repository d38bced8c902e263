"""
Dependency checks run once before anything talks to Azure.
"""

import importlib
import importlib.util
import logging
import subprocess
import sys
from typing import Dict

from .errors import DependencyError

logger = logging.getLogger(__name__)

# Import name -> distribution name on PyPI
REQUIRED_MODULES: Dict[str, str] = {
    "azure.identity": "azure-identity",
    "azure.mgmt.appcontainers": "azure-mgmt-appcontainers",
}


def is_importable(module: str) -> bool:
    """Check whether a (possibly dotted) module can be imported."""
    try:
        return importlib.util.find_spec(module) is not None
    except ModuleNotFoundError:
        # A missing parent package raises instead of returning None.
        return False


def ensure_dependency(module: str, distribution: str, install: bool = True) -> None:
    """
    Make sure ``module`` is importable, installing ``distribution`` if allowed.

    Args:
        module: Import name to check
        distribution: Package to install when the module is missing
        install: Whether pip may be run

    Raises:
        DependencyError: If the module is missing and could not be installed
    """
    if is_importable(module):
        logger.debug(f"Module {module} is available")
        return

    if not install:
        raise DependencyError(f"Required module {module} is not installed (pip install {distribution})")

    logger.info(f"Module {module} not found, installing {distribution}...")
    result = subprocess.run(
        [sys.executable, "-m", "pip", "install", "--quiet", distribution],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        detail = (result.stderr or result.stdout or "").strip().splitlines()
        reason = detail[-1] if detail else f"pip exited with code {result.returncode}"
        raise DependencyError(f"Failed to install {distribution}: {reason}")

    importlib.invalidate_caches()
    if not is_importable(module):
        raise DependencyError(f"Installed {distribution} but {module} is still not importable")

    logger.info(f"Installed {distribution}")


def ensure_dependencies(install: bool = True) -> None:
    """Check every module the Azure commands need."""
    for module, distribution in REQUIRED_MODULES.items():
        ensure_dependency(module, distribution, install=install)

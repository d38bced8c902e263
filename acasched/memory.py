"""
Memory and CPU reservation estimate for the Container Apps of one environment.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

GIB = 1024 ** 3

# Multipliers in bytes, keyed by lower-cased suffix
_UNITS = {
    "": 1,
    "k": 1000,
    "m": 1000 ** 2,
    "g": 1000 ** 3,
    "t": 1000 ** 4,
    "ki": 1024,
    "mi": 1024 ** 2,
    "gi": 1024 ** 3,
    "ti": 1024 ** 4,
}

_MEMORY_RE = re.compile(r"^\s*(\d+(?:\.\d*)?|\.\d+)\s*([KkMmGgTt]i?)?\s*$")


def parse_memory(text: str) -> float:
    """
    Convert a memory quantity such as "0.5Gi" or "512Mi" to GiB.

    Binary (Ki, Mi, Gi, Ti) and decimal (K, M, G, T) suffixes are accepted; a
    bare number is a count of bytes.

    Raises:
        ValueError: If the text is not a memory quantity
    """
    if text is None:
        raise ValueError("Memory value is missing")

    match = _MEMORY_RE.match(str(text))
    if not match:
        raise ValueError(f"Invalid memory value: {text!r}")

    amount, unit = match.groups()
    return float(amount) * _UNITS[(unit or "").lower()] / GIB


@dataclass
class AppMemory:
    """Resources requested by one Container App, per replica."""
    name: str
    containers: int
    memory_gib: float
    cpu_cores: float
    min_replicas: int = 0

    @property
    def memory_at_min_replicas_gib(self) -> float:
        return self.memory_gib * self.min_replicas


@dataclass
class MemoryReport:
    """Totals across every Container App of an environment."""
    environment: str
    apps: List[AppMemory] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)

    @property
    def total_memory_gib(self) -> float:
        return sum(app.memory_gib for app in self.apps)

    @property
    def total_cpu_cores(self) -> float:
        return sum(app.cpu_cores for app in self.apps)

    @property
    def total_memory_at_min_replicas_gib(self) -> float:
        return sum(app.memory_at_min_replicas_gib for app in self.apps)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment,
            "apps": [
                {
                    "name": app.name,
                    "containers": app.containers,
                    "memory_gib": round(app.memory_gib, 2),
                    "cpu_cores": round(app.cpu_cores, 2),
                    "min_replicas": app.min_replicas,
                }
                for app in self.apps
            ],
            "total_memory_gib": round(self.total_memory_gib, 2),
            "total_cpu_cores": round(self.total_cpu_cores, 2),
            "total_memory_at_min_replicas_gib": round(self.total_memory_at_min_replicas_gib, 2),
            "skipped": dict(self.skipped),
        }


def app_memory(app: Any) -> AppMemory:
    """
    Sum the resources of every container in an SDK ContainerApp template.

    Raises:
        ValueError: If a container's memory cannot be parsed
    """
    template = getattr(app, "template", None)
    containers = list(getattr(template, "containers", None) or [])

    memory_gib = 0.0
    cpu_cores = 0.0
    for container in containers:
        resources = getattr(container, "resources", None)
        if resources is None:
            continue
        if resources.memory is not None:
            memory_gib += parse_memory(resources.memory)
        cpu_cores += float(resources.cpu or 0)

    scale = getattr(template, "scale", None)
    min_replicas = getattr(scale, "min_replicas", None) or 0

    return AppMemory(
        name=app.name,
        containers=len(containers),
        memory_gib=memory_gib,
        cpu_cores=cpu_cores,
        min_replicas=int(min_replicas),
    )


def summarize_memory(apps: List[Any], environment: str) -> MemoryReport:
    """
    Build the memory report for an environment.

    Apps with unparseable memory values are left out of the totals and listed
    in ``skipped``.
    """
    report = MemoryReport(environment=environment)
    for app in apps:
        try:
            report.apps.append(app_memory(app))
        except ValueError as e:
            logger.warning(f"Skipping Container App '{app.name}': {e}")
            report.skipped[app.name] = str(e)

    logger.info(
        f"Environment '{environment}': {len(report.apps)} Container App(s), "
        f"{report.total_memory_gib:.2f} GiB memory, {report.total_cpu_cores:.2f} vCPU per replica"
    )
    return report

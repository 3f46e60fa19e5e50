"""Metadata reported by the connected Docker daemon."""

from dataclasses import dataclass
from typing import Any, Dict

# Storage driver used by Windows and LCOW containers
WINDOWS_FILTER_MARKER = "windowsfilter"


@dataclass(frozen=True)
class DaemonMetadata:
    """Facts about the daemon, captured once right after connecting."""

    api_version: str
    execution_driver: str
    server_version: str
    operating_system: str
    total_memory_bytes: int
    storage_driver: str = ""

    @classmethod
    def from_docker(cls, info: Dict[str, Any], version: Dict[str, Any]) -> "DaemonMetadata":
        """Build metadata from the ``info()`` and ``version()`` responses."""
        return cls(
            api_version=version.get("ApiVersion") or "",
            execution_driver=info.get("ExecutionDriver") or "",
            server_version=version.get("Version") or info.get("ServerVersion") or "",
            operating_system=info.get("OperatingSystem") or "",
            total_memory_bytes=int(info.get("MemTotal") or 0),
            storage_driver=info.get("Driver") or "",
        )

    @property
    def total_memory_mb(self) -> int:
        return self.total_memory_bytes // (1024 * 1024)

    @property
    def uses_windows_filter(self) -> bool:
        """True when the daemon runs Windows (or LCOW) containers."""
        return WINDOWS_FILTER_MARKER in self.storage_driver or WINDOWS_FILTER_MARKER in self.execution_driver

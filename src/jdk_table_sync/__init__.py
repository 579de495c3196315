"""
JDK Table Sync - keeps a JDK registry in line with a project's jdk.table.xml

Polls the project-scoped JDK table file, and when its content changes and
disagrees with the live registry, overwrites the registry entries with the
file's entries.
"""

__version__ = "0.1.0"

from .models import JdkEntry, ChangeStatus, SchedulerState, CycleReport
from .sync_exceptions import (
    JdkSyncError,
    JdkTableError,
    JdkTableParseError,
    ArtifactWriteError,
    RegistryError,
    RegistryLoadError,
    RegistrySaveError,
    SchedulerError,
)

__all__ = [
    "JdkEntry",
    "ChangeStatus",
    "SchedulerState",
    "CycleReport",
    "JdkSyncError",
    "JdkTableError",
    "JdkTableParseError",
    "ArtifactWriteError",
    "RegistryError",
    "RegistryLoadError",
    "RegistrySaveError",
    "SchedulerError",
]

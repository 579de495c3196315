"""
Settings Comparator

Decides whether the live registry disagrees with the project JDK table
closely enough to justify a reconciliation pass.
"""

from pathlib import Path
from typing import Optional

from ..logging_config import configure_logger_for_sync_trace
from ..models import JdkEntry
from .host import JdkRegistry, Project
from .table_reader import JdkTableReader

logger = configure_logger_for_sync_trace(__name__)


def is_valid_jdk(entry: JdkEntry) -> bool:
    """A registry entry is valid when its home path exists on disk."""
    if not entry.home_path:
        return False
    return Path(entry.home_path).exists()


class SettingsComparator:
    """
    Any-of divergence predicate between the table file and the registry.

    ::: This is-in-layer Service-Layer.
    ::: This is a comparator.
    ::: This is-in-process Main-Process.
    ::: This is stateless.

    An entry diverges when the registry has no entry of that name, or when
    the registry entry's home path exists on disk and differs from the
    file's. A registry entry whose own path is gone is treated as "unknown"
    and does not count as divergence.
    """

    def __init__(self, registry: JdkRegistry, reader: Optional[JdkTableReader] = None):
        self._registry = registry
        self._reader = reader or JdkTableReader()

    def has_divergence(self, project: Project) -> bool:
        """
        Check the project's table file against the registry.

        Returns:
            True on the first diverging entry, False when nothing diverges,
            the file is missing, or it lists no entries.

        Raises:
            JdkTableParseError: If the file exists but cannot be parsed
        """
        if not self._reader.has_settings(project):
            return False

        entries = self._reader.read(project)
        if not entries:
            return False

        for entry in entries:
            registered = self._registry.find_jdk(entry.name)
            if registered is None:
                logger.info(f"[Comparator] JDK {entry.name!r} is not registered")
                return True
            if is_valid_jdk(registered) and registered.home_path != entry.home_path:
                logger.info(
                    f"[Comparator] JDK {entry.name!r} home differs: "
                    f"{registered.home_path} -> {entry.home_path}"
                )
                return True

        return False

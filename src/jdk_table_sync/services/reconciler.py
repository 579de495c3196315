"""
Reconciler

Overwrites registry entries with the entries of the project JDK table file.
"""

from typing import List, Optional

from ..logging_config import configure_logger_for_sync_trace
from .host import JdkRegistry, Project
from .table_reader import JdkTableReader

logger = configure_logger_for_sync_trace(__name__)


class Reconciler:
    """
    Applies table-file entries onto the registry, replacing by name.

    ::: This is-in-layer Service-Layer.
    ::: This is a task.
    ::: This is-in-process Main-Process.
    ::: This is stateless.

    The file is re-read on every call. Within one write action each entry
    is removed (if registered) and then added, so the stored entry is
    replaced whole. The batch as a whole is not transactional: an error
    partway through leaves earlier entries applied.
    """

    def __init__(self, registry: JdkRegistry, reader: Optional[JdkTableReader] = None):
        self._registry = registry
        self._reader = reader or JdkTableReader()
        self.last_applied: List[str] = []

    def apply(self, project: Project) -> None:
        """
        Reconcile the registry with the project's table file.

        Raises:
            JdkTableParseError: If the file cannot be parsed (nothing is applied)
        """
        entries = self._reader.read(project)
        applied: List[str] = []
        self.last_applied = applied

        with self._registry.write_action():
            for entry in entries:
                existing = self._registry.find_jdk(entry.name)
                if existing is not None:
                    self._registry.remove_jdk(existing)
                    logger.info(f"[Reconciler] Removed JDK from per project settings: {entry.name}")
                self._registry.add_jdk(entry)
                applied.append(entry.name)
                logger.info(f"[Reconciler] Add JDK from per project settings: {entry.name}")

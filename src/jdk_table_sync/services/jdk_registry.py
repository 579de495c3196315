"""
Reference JDK Registry Implementations

In-memory and JSON-file backed registries implementing the JdkRegistry
interface. The CLI uses the JSON-file registry as a stand-in for the IDE's
global JDK table; tests use the in-memory one.

Registry file format (jdks.json):
{
    "version": "1.0",
    "updated_at": "2026-01-15T10:30:00Z",
    "jdks": [
        {"name": "corretto-17", "home_path": "/opt/jdks/17", "type_tag": "JavaSDK", "version": null}
    ]
}
"""

import json
import threading
from contextlib import contextmanager
from datetime import datetime, UTC
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from pydantic import ValidationError

from ..logging_config import configure_logger_for_sync_trace
from ..models import JdkEntry
from ..sync_exceptions import RegistryLoadError, RegistrySaveError
from .host import JdkRegistry

logger = configure_logger_for_sync_trace(__name__)


class InMemoryJdkRegistry(JdkRegistry):
    """
    Dict-backed registry keyed by entry name.

    ::: This is-in-layer Service-Layer.
    ::: This is a repository.
    ::: This is-in-process Main-Process.
    ::: This is stateful.

    A reentrant lock serializes write actions against each other and
    against reads from other threads.
    """

    def __init__(self, entries: Optional[Iterable[JdkEntry]] = None):
        self._lock = threading.RLock()
        self._entries: Dict[str, JdkEntry] = {}
        self._write_depth = 0
        self._dirty = False
        for entry in entries or []:
            self._entries[entry.name] = entry

    def find_jdk(self, name: str) -> Optional[JdkEntry]:
        with self._lock:
            return self._entries.get(name)

    def all_jdks(self) -> List[JdkEntry]:
        with self._lock:
            return list(self._entries.values())

    def remove_jdk(self, entry: JdkEntry) -> None:
        with self._lock:
            if self._entries.get(entry.name) == entry:
                del self._entries[entry.name]
                self._dirty = True

    def add_jdk(self, entry: JdkEntry) -> None:
        with self._lock:
            self._entries[entry.name] = entry
            self._dirty = True

    @contextmanager
    def write_action(self) -> Iterator["InMemoryJdkRegistry"]:
        with self._lock:
            self._write_depth += 1
            try:
                yield self
            finally:
                self._write_depth -= 1
                if self._write_depth == 0 and self._dirty:
                    self._dirty = False
                    self._on_write_complete()

    def _on_write_complete(self) -> None:
        """Hook run when the outermost write action that changed something exits."""
        pass

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class JsonFileJdkRegistry(InMemoryJdkRegistry):
    """
    Registry persisted to a JSON file.

    ::: This is-in-layer Infrastructure-Layer.
    ::: This is a repository.
    ::: This is-in-process Main-Process.
    ::: This is stateful.

    Loaded once on construction; saved when the outermost write action that
    changed something exits, including one that exits with an error (the
    batch is not transactional, so the file mirrors what was applied).
    """

    VERSION = "1.0"

    def __init__(self, path: Path):
        super().__init__()
        self._path = Path(path)
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        if not self._path.exists():
            logger.debug(f"[Registry] {self._path} does not exist, starting empty")
            return

        try:
            with open(self._path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            entries = [JdkEntry.from_dict(item) for item in data.get("jdks", [])]
        except (OSError, json.JSONDecodeError, ValidationError, AttributeError, TypeError) as e:
            raise RegistryLoadError(f"Cannot load JDK registry {self._path}: {e}") from e

        for entry in entries:
            self._entries[entry.name] = entry
        logger.debug(f"[Registry] Loaded {len(entries)} JDKs from {self._path}")

    def save(self) -> None:
        """Write the registry to its JSON file."""
        data = {
            "version": self.VERSION,
            "updated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "jdks": [entry.to_dict() for entry in self.all_jdks()],
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.error(f"[Registry] Failed to save {self._path}: {e}")
            raise RegistrySaveError(f"Cannot save JDK registry {self._path}: {e}") from e

    def _on_write_complete(self) -> None:
        self.save()

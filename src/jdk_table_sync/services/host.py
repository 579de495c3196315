"""
Host Collaborator Interfaces

The sync loop does not own the project model, the live JDK registry or the
notification channel. This module defines the seams it talks through:

- Project: base path and host OS identity
- JdkRegistry: lookup by name plus remove/add under an exclusive write action
- Notifier: fire-and-forget informational message

::: This is-in-layer Service-Layer.
::: This is-in-component Host-Integration.
"""

import sys
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from ..models import JdkEntry


class HostOS(str, Enum):
    """
    Operating-system identity used to pick the OS-specific table file.

    ::: This is-in-layer Utility-Layer.
    ::: This is a value-object.
    """
    WINDOWS = "windows"
    LINUX = "linux"
    MAC = "mac"
    OTHER = "other"


def detect_host_os(platform: Optional[str] = None) -> HostOS:
    """Map sys.platform (or the given platform string) to a HostOS."""
    platform = platform if platform is not None else sys.platform
    if platform == "win32" or platform == "cygwin":
        return HostOS.WINDOWS
    if platform == "darwin":
        return HostOS.MAC
    if platform.startswith("linux"):
        return HostOS.LINUX
    return HostOS.OTHER


@dataclass(frozen=True)
class Project:
    """
    A project the loop runs for.

    ::: This is-in-layer Service-Layer.
    ::: This is a value-object.
    """
    base_path: Path
    host_os: HostOS = field(default_factory=detect_host_os)

    def __post_init__(self):
        # Ensure base_path is a Path, not a string
        if not isinstance(self.base_path, Path):
            object.__setattr__(self, "base_path", Path(self.base_path))

    @property
    def name(self) -> str:
        return self.base_path.name

    @property
    def key(self) -> str:
        """Identity used to keep one loop per project."""
        return str(self.base_path.resolve())


class JdkRegistry(ABC):
    """
    Live registry of JDK entries owned by the host.

    ::: This is-in-layer Service-Layer.
    ::: This is a repository.
    ::: This is stateful.

    All remove/add calls made by the loop happen inside write_action(),
    which must give the caller exclusive access for its duration.
    """

    @abstractmethod
    def find_jdk(self, name: str) -> Optional[JdkEntry]:
        """Return the entry registered under name, or None."""
        pass

    @abstractmethod
    def all_jdks(self) -> List[JdkEntry]:
        """Snapshot of every registered entry."""
        pass

    @abstractmethod
    def remove_jdk(self, entry: JdkEntry) -> None:
        pass

    @abstractmethod
    def add_jdk(self, entry: JdkEntry) -> None:
        pass

    @abstractmethod
    def write_action(self) -> AbstractContextManager:
        """Context manager holding the exclusive mutation channel."""
        pass


class Notifier(ABC):
    """
    User-facing presentation channel.

    ::: This is-in-layer Presentation-Layer.
    ::: This is a handler.
    ::: This is stateless.
    """

    @abstractmethod
    def notify(self, project: Project, title: str, message: str) -> None:
        """Show an informational message. Must not block on user input."""
        pass

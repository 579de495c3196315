"""
Service Classes for the JDK table sync loop

Each service has a single responsibility: hashing, change detection,
comparison, reconciliation, heartbeat, scheduling, plus the host
collaborator seams and their reference implementations.
"""

from .config_loader import ConfigLoader, SyncConfig, load_config, get_config_loader
from .host import HostOS, Project, JdkRegistry, Notifier, detect_host_os
from .jdk_registry import InMemoryJdkRegistry, JsonFileJdkRegistry
from .notifiers import LoggingNotifier, ConsoleNotifier
from .table_locator import get_jdk_table_file
from .table_reader import JdkTableReader, parse_jdk_table
from .content_hasher import ContentHasher
from .change_detector import ChangeDetector, DetectorState
from .settings_comparator import SettingsComparator
from .reconciler import Reconciler
from .artifacts import write_artifact, artifact_path
from .heartbeat import HeartbeatEmitter, HeartbeatState
from .poll_scheduler import (
    PollScheduler,
    SchedulerManager,
    SchedulerStatus,
    get_scheduler_manager,
    start_background_checker,
)


__all__ = [
    "ConfigLoader",
    "SyncConfig",
    "load_config",
    "get_config_loader",
    "HostOS",
    "Project",
    "JdkRegistry",
    "Notifier",
    "detect_host_os",
    "InMemoryJdkRegistry",
    "JsonFileJdkRegistry",
    "LoggingNotifier",
    "ConsoleNotifier",
    "get_jdk_table_file",
    "JdkTableReader",
    "parse_jdk_table",
    "ContentHasher",
    "ChangeDetector",
    "DetectorState",
    "SettingsComparator",
    "Reconciler",
    "write_artifact",
    "artifact_path",
    "HeartbeatEmitter",
    "HeartbeatState",
    "PollScheduler",
    "SchedulerManager",
    "SchedulerStatus",
    "get_scheduler_manager",
    "start_background_checker",
]

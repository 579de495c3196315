"""
Heartbeat Emitter

Writes a health_check marker every `heartbeat_interval` scheduler wake-ups,
independent of whether anything was reconciled.
"""

from dataclasses import dataclass
from typing import Optional

from ..logging_config import configure_logger_for_sync_trace
from .artifacts import HEALTH_CHECK_SUFFIX, utc_timestamp, write_artifact
from .config_loader import DEFAULT_HEARTBEAT_INTERVAL
from .host import Project
from .table_reader import JdkTableReader

logger = configure_logger_for_sync_trace(__name__)


@dataclass
class HeartbeatState:
    """
    Wake-up counter of one emitter.

    ::: This is-in-layer Service-Layer.
    ::: This is a value-object.
    ::: This is stateful.

    Starts at -1 so the very first tick lands on 0 and fires.
    """
    counter: int = -1


class HeartbeatEmitter:
    """
    Modulo-counted liveness marker.

    ::: This is-in-layer Service-Layer.
    ::: This is a task.
    ::: This is-in-process Main-Process.
    ::: This is stateful.
    """

    def __init__(
        self,
        interval: int = DEFAULT_HEARTBEAT_INTERVAL,
        reader: Optional[JdkTableReader] = None,
        state: Optional[HeartbeatState] = None,
    ):
        if interval <= 0:
            raise ValueError(f"heartbeat interval must be positive, got {interval}")
        self._interval = interval
        self._reader = reader or JdkTableReader()
        self._state = state if state is not None else HeartbeatState()

    @property
    def interval(self) -> int:
        return self._interval

    @property
    def state(self) -> HeartbeatState:
        return self._state

    def tick(self, project: Project) -> bool:
        """
        Advance the counter by one wake-up and fire if due.

        Fires on ticks 0, interval, 2*interval, ... The counter is reset to 0
        before the marker is written, so it stays in [0, interval) even when
        the write fails.

        Returns:
            True if this tick fired

        Raises:
            ArtifactWriteError: If the health_check marker cannot be written
        """
        self._state.counter += 1
        if self._state.counter % self._interval != 0:
            return False

        self._state.counter = 0
        logger.info("[Heartbeat] JDK settings checker is still alive and checking for changes.")
        write_artifact(self._reader.table_file(project), HEALTH_CHECK_SUFFIX, utc_timestamp())
        return True

"""
Change Detector

Classifies the current state of the JDK table file against the digest seen
on the previous check of the same scheduler run.

| current digest | stored digest | outcome            | stored after |
|----------------|---------------|--------------------|--------------|
| None           | any           | ABSENT (no change) | unchanged    |
| present        | None          | FIRST_OBSERVATION  | current      |
| present        | different     | CHANGED            | current      |
| present        | equal         | UNCHANGED          | unchanged    |

The first observation of a run always counts as a change, so every run
attempts at least one reconciliation even if the file predates the loop.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..logging_config import configure_logger_for_sync_trace
from ..models import ChangeStatus
from .content_hasher import ContentHasher

logger = configure_logger_for_sync_trace(__name__)


@dataclass
class DetectorState:
    """
    Last digest seen by one detector.

    ::: This is-in-layer Service-Layer.
    ::: This is a value-object.
    ::: This is stateful.

    Set only by ChangeDetector; replaced, never cleared, until the owning
    scheduler restarts and hands in a fresh state.
    """
    last_digest: Optional[str] = None


class ChangeDetector:
    """
    Digest-based change detector.

    ::: This is-in-layer Service-Layer.
    ::: This is a detector.
    ::: This is-in-process Main-Process.
    ::: This is stateful.
    """

    def __init__(self, hasher: Optional[ContentHasher] = None, state: Optional[DetectorState] = None):
        self._hasher = hasher or ContentHasher()
        self._state = state if state is not None else DetectorState()

    @property
    def state(self) -> DetectorState:
        return self._state

    def classify(self, file_path: Path) -> ChangeStatus:
        """
        Hash the file, update the stored digest and report what happened.

        Args:
            file_path: The JDK table file to inspect

        Returns:
            ChangeStatus for this check
        """
        current = self._hasher.hash(file_path)

        if current is None:
            logger.debug("[Detector] It appears there is no custom JDK table. Reporting as the same.")
            return ChangeStatus.ABSENT

        if self._state.last_digest is None:
            self._state.last_digest = current
            logger.debug("[Detector] Initial run, reporting JDK table file as changed.")
            return ChangeStatus.FIRST_OBSERVATION

        if current != self._state.last_digest:
            self._state.last_digest = current
            logger.info(f"[Detector] JDK table file has changed: {file_path}")
            return ChangeStatus.CHANGED

        logger.debug("[Detector] JDK table file has not changed.")
        return ChangeStatus.UNCHANGED

    def check(self, file_path: Path) -> bool:
        """True if the file should be treated as changed since the last check."""
        return self.classify(file_path).is_change

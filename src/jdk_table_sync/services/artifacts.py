"""
Marker Artifacts

Plain-text marker files written next to the JDK table file:

- <table>.health_check.txt: written on every heartbeat
- <table>.updated.txt: written after every reconciliation

Both carry an ISO-8601 UTC timestamp.
"""

from datetime import datetime, UTC
from pathlib import Path
from typing import Optional

from ..logging_config import configure_logger_for_sync_trace
from ..sync_exceptions import ArtifactWriteError

logger = configure_logger_for_sync_trace(__name__)

HEALTH_CHECK_SUFFIX = "health_check"
UPDATED_SUFFIX = "updated"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with a Z suffix, e.g. 2026-01-15T10:30:00.123456Z."""
    now = now or datetime.now(UTC)
    return now.isoformat().replace("+00:00", "Z")


def artifact_path(table_file: Path, suffix: str) -> Path:
    """Get the marker path for a table file: <dir>/<name>.<suffix>.txt."""
    return table_file.parent / f"{table_file.name}.{suffix}.txt"


def write_artifact(table_file: Path, suffix: str, content: str) -> Path:
    """
    Write a marker artifact next to the table file.

    The settings directory is not created; if it is missing the write fails.

    Raises:
        ArtifactWriteError: If the file cannot be written (logged first)
    """
    path = artifact_path(table_file, suffix)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.error(f"[Artifacts] Failed to write to file: {path.absolute()}: {e}")
        raise ArtifactWriteError(path, e) from e
    return path

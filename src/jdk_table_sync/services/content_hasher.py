"""
Content Hasher

Computes a SHA-256 digest of a file's raw bytes for change detection.
"""

import hashlib
from pathlib import Path
from typing import Optional

from ..logging_config import configure_logger_for_sync_trace

logger = configure_logger_for_sync_trace(__name__)


class ContentHasher:
    """
    Stable digest of a file's bytes.

    ::: This is-in-layer Utility-Layer.
    ::: This is a helper.
    ::: This is stateless.
    """

    def __init__(self, algorithm: str = "sha256"):
        hashlib.new(algorithm)  # ValueError for unknown algorithms
        self._algorithm = algorithm

    def hash(self, file_path: Path) -> Optional[str]:
        """
        Hash the full content of a file.

        Returns:
            Hex digest, or None if the file does not exist or cannot be read.
            Read failures are logged and never raised.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            return None
        try:
            content = file_path.read_bytes()
        except OSError as e:
            logger.warning(f"[Hasher] Failed to calculate file hash for {file_path}: {e}")
            return None
        return hashlib.new(self._algorithm, content).hexdigest()

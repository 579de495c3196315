"""
JDK Table Reader

Parses the project JDK table file into JdkEntry objects.

Expected layout (IntelliJ jdk.table.xml):

    <application>
      <component name="ProjectJdkTable">
        <jdk version="2">
          <name value="corretto-17" />
          <type value="JavaSDK" />
          <version value="Amazon Corretto 17.0.9" />
          <homePath value="$PROJECT_DIR$/jdks/corretto-17" />
          <roots>...</roots>
        </jdk>
      </component>
    </application>

<jdk> elements are collected from anywhere in the document. The project
directory token is substituted in the raw text before parsing.
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from ..logging_config import configure_logger_for_sync_trace
from ..models import JdkEntry
from ..sync_exceptions import JdkTableParseError
from .config_loader import SyncConfig
from .host import Project
from .table_locator import get_jdk_table_file, has_project_jdk_settings

logger = configure_logger_for_sync_trace(__name__)

JDK_ELEMENT = "jdk"


def _child_value(element: ET.Element, tag: str) -> Optional[str]:
    child = element.find(tag)
    if child is None:
        return None
    return child.get("value")


def parse_jdk_table(text: str, source: str = "<string>") -> List[JdkEntry]:
    """
    Parse JDK table XML text.

    Args:
        text: Document text with placeholders already substituted
        source: Name used in error and log messages

    Returns:
        Entries in document order

    Raises:
        JdkTableParseError: If the text is not well-formed XML
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise JdkTableParseError(source, str(e)) from e

    entries: List[JdkEntry] = []
    for jdk_element in root.iter(JDK_ELEMENT):
        name = _child_value(jdk_element, "name")
        if not name:
            logger.warning(f"[TableReader] Skipping <jdk> without a name in {source}")
            continue
        try:
            entry = JdkEntry(
                name=name,
                home_path=_child_value(jdk_element, "homePath") or "",
                type_tag=_child_value(jdk_element, "type") or "JavaSDK",
                version=_child_value(jdk_element, "version"),
            )
        except ValidationError as e:
            raise JdkTableParseError(source, f"invalid <jdk> {name!r}: {e}") from e
        entries.append(entry)
    return entries


class JdkTableReader:
    """
    Locates and parses a project's JDK table file.

    ::: This is-in-layer Service-Layer.
    ::: This is a loader.
    ::: This is-in-process Main-Process.
    ::: This is stateless.

    Every call re-reads the file; nothing is cached between calls.
    """

    def __init__(self, config: Optional[SyncConfig] = None):
        self._config = config or SyncConfig()

    @property
    def config(self) -> SyncConfig:
        return self._config

    def table_file(self, project: Project) -> Path:
        """Get the authoritative table file path for the project."""
        return get_jdk_table_file(
            project,
            settings_dir=self._config.settings_dir,
            table_file_stem=self._config.table_file_stem,
        )

    def has_settings(self, project: Project) -> bool:
        """True when the project's table file exists and is a regular file."""
        return has_project_jdk_settings(self.table_file(project))

    def read(self, project: Project) -> List[JdkEntry]:
        """
        Read every JDK entry from the project's table file.

        Raises:
            JdkTableParseError: If the file cannot be read or parsed
        """
        table_file = self.table_file(project)
        try:
            raw = table_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise JdkTableParseError(table_file, str(e)) from e

        text = raw.replace(self._config.project_dir_token, str(project.base_path))
        entries = parse_jdk_table(text, source=str(table_file))
        logger.debug(f"[TableReader] Read {len(entries)} JDKs from {table_file}")
        return entries

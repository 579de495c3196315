"""
JDK Table File Location

Resolves which project JDK table file is authoritative for a project.

Resolution order inside <project>/<settings_dir> (no other search):
1. On Windows: jdk.table.win.xml, if it exists
2. On Linux:   jdk.table.lin.xml, if it exists
3. On macOS:   jdk.table.mac.xml, if it exists
4. Otherwise:  jdk.table.xml (whether or not it exists)
"""

from pathlib import Path
from typing import Dict

from .config_loader import DEFAULT_SETTINGS_DIR, DEFAULT_TABLE_FILE_STEM
from .host import HostOS, Project

TABLE_FILE_EXTENSION = ".xml"

OS_SPECIFIC_SUFFIXES: Dict[HostOS, str] = {
    HostOS.WINDOWS: ".win",
    HostOS.LINUX: ".lin",
    HostOS.MAC: ".mac",
}


def get_settings_dir(project: Project, settings_dir: str = DEFAULT_SETTINGS_DIR) -> Path:
    """Get the project-relative settings directory (.idea by default)."""
    return project.base_path / settings_dir


def get_jdk_table_file(
    project: Project,
    settings_dir: str = DEFAULT_SETTINGS_DIR,
    table_file_stem: str = DEFAULT_TABLE_FILE_STEM,
) -> Path:
    """
    Get the JDK table file the loop reads for this project.

    Args:
        project: Project supplying base path and host OS
        settings_dir: Project-relative settings directory
        table_file_stem: File name without OS suffix and extension

    Returns:
        The OS-specific file if it exists on the matching OS, else the
        all-OS file. The returned path may not exist.
    """
    folder = get_settings_dir(project, settings_dir)

    suffix = OS_SPECIFIC_SUFFIXES.get(project.host_os)
    if suffix:
        os_specific = folder / f"{table_file_stem}{suffix}{TABLE_FILE_EXTENSION}"
        if os_specific.exists():
            return os_specific

    return folder / f"{table_file_stem}{TABLE_FILE_EXTENSION}"


def has_project_jdk_settings(table_file: Path) -> bool:
    """True when the table file exists and is a regular file."""
    return table_file.exists() and table_file.is_file()

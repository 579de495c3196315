"""
Shared pytest fixtures for the JDK table sync tests.

This module provides a temporary project with an .idea folder, an
in-memory registry, a recording notifier and a helper that renders
jdk.table.xml documents.
"""

import os

# File logging off before the package configures its loggers at import
os.environ.setdefault("JDK_SYNC_DEBUG_LOG", "")

import threading
from typing import List, Tuple

import pytest

from jdk_table_sync.models import JdkEntry
from jdk_table_sync.services.config_loader import SyncConfig
from jdk_table_sync.services.host import HostOS, Notifier, Project
from jdk_table_sync.services.jdk_registry import InMemoryJdkRegistry


JDK_TEMPLATE = """    <jdk version="2">
      <name value="{name}" />
      <type value="{type_tag}" />
      <homePath value="{home}" />
      <roots />
    </jdk>
"""

TABLE_TEMPLATE = """<application>
  <component name="ProjectJdkTable">
{jdks}  </component>
</application>
"""


def render_jdk_table(entries: List[Tuple[str, str]], type_tag: str = "JavaSDK") -> str:
    """Render (name, home) pairs as a jdk.table.xml document."""
    jdks = "".join(JDK_TEMPLATE.format(name=name, home=home, type_tag=type_tag) for name, home in entries)
    return TABLE_TEMPLATE.format(jdks=jdks)


class RecordingNotifier(Notifier):
    """Notifier test double that records every call."""

    def __init__(self):
        self.calls = []
        self.called = threading.Event()

    def notify(self, project, title, message):
        self.calls.append((project, title, message))
        self.called.set()


@pytest.fixture
def project(tmp_path):
    """A Linux project rooted in a temporary directory with an .idea folder."""
    (tmp_path / ".idea").mkdir()
    return Project(tmp_path, host_os=HostOS.LINUX)


@pytest.fixture
def table_file(project):
    """Path of the all-OS table file (not created)."""
    return project.base_path / ".idea" / "jdk.table.xml"


@pytest.fixture
def write_table(table_file):
    """
    Write the all-OS table file.

    Returns:
        callable(entries) -> Path, where entries are (name, home) pairs
    """
    def _write(entries):
        table_file.write_text(render_jdk_table(entries), encoding="utf-8")
        return table_file
    return _write


@pytest.fixture
def jdk_home(tmp_path):
    """
    Create an existing JDK home directory.

    Returns:
        callable(name) -> str path of a created directory
    """
    def _make(name):
        home = tmp_path / "jdks" / name
        home.mkdir(parents=True, exist_ok=True)
        return str(home)
    return _make


@pytest.fixture
def registry():
    """Empty in-memory registry."""
    return InMemoryJdkRegistry()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def fast_config():
    """Config with a short poll interval for threaded tests."""
    return SyncConfig(poll_interval_seconds=0.05, heartbeat_interval=120)


@pytest.fixture
def entry():
    """
    Build a JdkEntry.

    Returns:
        callable(name, home) -> JdkEntry
    """
    def _make(name, home):
        return JdkEntry(name=name, home_path=home)
    return _make

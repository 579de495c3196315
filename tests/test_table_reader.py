"""
Tests for table file resolution and parsing.
"""

import pytest

from jdk_table_sync.sync_exceptions import JdkTableParseError
from jdk_table_sync.services.config_loader import SyncConfig
from jdk_table_sync.services.host import HostOS, Project, detect_host_os
from jdk_table_sync.services.table_locator import get_jdk_table_file
from jdk_table_sync.services.table_reader import JdkTableReader, parse_jdk_table


class TestTableLocator:
    """Test OS-specific table file resolution."""

    @pytest.mark.parametrize("host_os,suffix", [
        (HostOS.WINDOWS, "win"),
        (HostOS.LINUX, "lin"),
        (HostOS.MAC, "mac"),
    ])
    def test_os_specific_file_wins_when_present(self, tmp_path, host_os, suffix):
        """Test that the matching OS file is picked when it exists."""
        idea = tmp_path / ".idea"
        idea.mkdir()
        (idea / "jdk.table.xml").write_text("<application/>")
        (idea / f"jdk.table.{suffix}.xml").write_text("<application/>")

        assert get_jdk_table_file(Project(tmp_path, host_os)) == idea / f"jdk.table.{suffix}.xml"

    def test_other_os_file_is_ignored(self, tmp_path):
        """Test that a Windows file is not used on Linux."""
        idea = tmp_path / ".idea"
        idea.mkdir()
        (idea / "jdk.table.win.xml").write_text("<application/>")

        assert get_jdk_table_file(Project(tmp_path, HostOS.LINUX)) == idea / "jdk.table.xml"

    def test_falls_back_to_all_os_file_even_if_missing(self, tmp_path):
        """Test that the all-OS path is returned even when nothing exists."""
        assert get_jdk_table_file(Project(tmp_path, HostOS.MAC)) == tmp_path / ".idea" / "jdk.table.xml"

    def test_unknown_os_uses_all_os_file(self, tmp_path):
        """Test that an unrecognised OS only ever reads the all-OS file."""
        assert get_jdk_table_file(Project(tmp_path, HostOS.OTHER)).name == "jdk.table.xml"

    def test_custom_settings_dir_and_stem(self, tmp_path):
        """Test that the directory and stem are configurable."""
        path = get_jdk_table_file(Project(tmp_path, HostOS.LINUX), settings_dir="cfg", table_file_stem="sdks")
        assert path == tmp_path / "cfg" / "sdks.xml"

    @pytest.mark.parametrize("platform,expected", [
        ("win32", HostOS.WINDOWS),
        ("darwin", HostOS.MAC),
        ("linux", HostOS.LINUX),
        ("freebsd13", HostOS.OTHER),
    ])
    def test_detect_host_os(self, platform, expected):
        """Test sys.platform mapping."""
        assert detect_host_os(platform) == expected

    def test_project_accepts_string_path(self, tmp_path):
        """Test that Project normalises its base path."""
        project = Project(str(tmp_path), HostOS.LINUX)
        assert project.base_path == tmp_path
        assert project.name == tmp_path.name


class TestParseJdkTable:
    """Test XML parsing into entries."""

    def test_parses_entries_in_document_order(self):
        """Test that every <jdk> is read with its name, type, version and home."""
        text = """
        <application>
          <component name="ProjectJdkTable">
            <jdk version="2">
              <name value="corretto-17" />
              <type value="JavaSDK" />
              <version value="Amazon Corretto 17.0.9" />
              <homePath value="/opt/jdks/corretto-17" />
            </jdk>
            <jdk version="2">
              <name value="python-3.12" />
              <type value="Python SDK" />
              <homePath value="/usr/bin/python3.12" />
            </jdk>
          </component>
        </application>
        """
        entries = parse_jdk_table(text)

        assert [e.name for e in entries] == ["corretto-17", "python-3.12"]
        assert entries[0].home_path == "/opt/jdks/corretto-17"
        assert entries[0].version == "Amazon Corretto 17.0.9"
        assert entries[1].type_tag == "Python SDK"
        assert entries[1].version is None

    def test_empty_table(self):
        """Test that a table with no <jdk> yields no entries."""
        assert parse_jdk_table("<application><component name='ProjectJdkTable'/></application>") == []

    def test_nameless_jdk_is_skipped(self):
        """Test that a <jdk> without a name is ignored."""
        text = "<application><jdk><homePath value='/x'/></jdk><jdk><name value='a'/></jdk></application>"
        assert [e.name for e in parse_jdk_table(text)] == ["a"]

    def test_malformed_xml_raises(self):
        """Test that malformed XML raises JdkTableParseError."""
        with pytest.raises(JdkTableParseError):
            parse_jdk_table("<application><jdk>")


class TestJdkTableReader:
    """Test reading a project's table file."""

    def test_substitutes_project_dir_token(self, project, write_table):
        """Test that $PROJECT_DIR$ becomes the project base path before parsing."""
        write_table([("bundled", "$PROJECT_DIR$/jdks/17")])

        entries = JdkTableReader().read(project)

        assert entries[0].home_path == f"{project.base_path}/jdks/17"

    def test_custom_token(self, project, table_file):
        """Test that the placeholder token is configurable."""
        table_file.write_text("<application><jdk><name value='a'/><homePath value='@ROOT@/j'/></jdk></application>")

        entries = JdkTableReader(SyncConfig(project_dir_token="@ROOT@")).read(project)

        assert entries[0].home_path == f"{project.base_path}/j"

    def test_has_settings(self, project, write_table):
        """Test that has_settings requires an existing regular file."""
        reader = JdkTableReader()
        assert reader.has_settings(project) is False

        write_table([])
        assert reader.has_settings(project) is True

    def test_directory_is_not_settings(self, project, table_file):
        """Test that a directory named like the table file does not count."""
        table_file.mkdir()
        assert JdkTableReader().has_settings(project) is False

    def test_missing_file_raises_parse_error(self, project):
        """Test that reading a missing file raises JdkTableParseError."""
        with pytest.raises(JdkTableParseError):
            JdkTableReader().read(project)

    def test_undecodable_file_raises_parse_error(self, project, table_file):
        """Test that a file that is not UTF-8 raises JdkTableParseError."""
        table_file.write_bytes(b"<application><jdk><name value='\xff\xfe'/></jdk></application>")

        with pytest.raises(JdkTableParseError):
            JdkTableReader().read(project)

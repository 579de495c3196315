"""
Tests for ChangeDetector

Covers the four outcomes of a check and the state they leave behind.
"""

from unittest.mock import MagicMock

from jdk_table_sync.models import ChangeStatus
from jdk_table_sync.services.change_detector import ChangeDetector, DetectorState


class TestChangeDetector:
    """Test the digest state machine."""

    def test_first_observation_reports_changed(self, tmp_path):
        """Test that the first check of an existing file is a change."""
        path = tmp_path / "jdk.table.xml"
        path.write_text("<application/>")
        detector = ChangeDetector()

        assert detector.classify(path) == ChangeStatus.FIRST_OBSERVATION
        assert detector.state.last_digest is not None

    def test_unchanged_file_reports_no_change(self, tmp_path):
        """Test that a second check of the same bytes is not a change."""
        path = tmp_path / "jdk.table.xml"
        path.write_text("<application/>")
        detector = ChangeDetector()

        assert detector.check(path) is True
        assert detector.check(path) is False
        assert detector.classify(path) == ChangeStatus.UNCHANGED

    def test_modified_file_reports_changed(self, tmp_path):
        """Test that new content is a change and replaces the stored digest."""
        path = tmp_path / "jdk.table.xml"
        path.write_text("<application/>")
        detector = ChangeDetector()
        detector.check(path)
        old_digest = detector.state.last_digest

        path.write_text("<application><jdk/></application>")

        assert detector.classify(path) == ChangeStatus.CHANGED
        assert detector.state.last_digest != old_digest

    def test_absent_file_reports_no_change(self, tmp_path):
        """Test that a missing file never counts as a change."""
        detector = ChangeDetector()

        assert detector.classify(tmp_path / "missing.xml") == ChangeStatus.ABSENT
        assert detector.check(tmp_path / "missing.xml") is False
        assert detector.state.last_digest is None

    def test_deleted_file_keeps_last_digest(self, tmp_path):
        """Test that deleting the file reports no change and does not clear the digest."""
        path = tmp_path / "jdk.table.xml"
        path.write_text("<application/>")
        detector = ChangeDetector()
        detector.check(path)
        digest = detector.state.last_digest

        path.unlink()

        assert detector.check(path) is False
        assert detector.state.last_digest == digest

    def test_recreated_identical_file_is_not_a_change(self, tmp_path):
        """Test that restoring the same bytes after deletion is not a change."""
        path = tmp_path / "jdk.table.xml"
        path.write_text("<application/>")
        detector = ChangeDetector()
        detector.check(path)
        path.unlink()
        detector.check(path)

        path.write_text("<application/>")

        assert detector.check(path) is False

    def test_uses_injected_state(self, tmp_path):
        """Test that a pre-seeded state is honoured."""
        hasher = MagicMock()
        hasher.hash.return_value = "abc"
        state = DetectorState(last_digest="abc")
        detector = ChangeDetector(hasher=hasher, state=state)

        assert detector.check(tmp_path / "any.xml") is False
        assert detector.state is state

    def test_is_change_property(self):
        """Test which statuses count as a change."""
        assert ChangeStatus.FIRST_OBSERVATION.is_change
        assert ChangeStatus.CHANGED.is_change
        assert not ChangeStatus.UNCHANGED.is_change
        assert not ChangeStatus.ABSENT.is_change

"""
Tests for the reference JDK registries
"""

import json

import pytest

from jdk_table_sync.models import JdkEntry
from jdk_table_sync.sync_exceptions import RegistryLoadError
from jdk_table_sync.services.jdk_registry import InMemoryJdkRegistry, JsonFileJdkRegistry


class TestInMemoryJdkRegistry:
    """Test the dict-backed registry."""

    def test_add_find_remove(self, registry, entry):
        """Test the basic registry operations."""
        jdk = entry("corretto-17", "/opt/jdks/17")
        registry.add_jdk(jdk)

        assert registry.find_jdk("corretto-17") == jdk
        assert registry.all_jdks() == [jdk]

        registry.remove_jdk(jdk)
        assert registry.find_jdk("corretto-17") is None

    def test_remove_ignores_stale_entry(self, registry, entry):
        """Test that removing an entry that was since replaced keeps the new one."""
        registry.add_jdk(entry("a", "/new"))

        registry.remove_jdk(entry("a", "/old"))

        assert registry.find_jdk("a").home_path == "/new"

    def test_add_replaces_by_name(self, registry, entry):
        """Test that names are unique."""
        registry.add_jdk(entry("a", "/1"))
        registry.add_jdk(entry("a", "/2"))

        assert len(registry) == 1
        assert registry.find_jdk("a").home_path == "/2"

    def test_nested_write_actions_complete_once(self, entry):
        """Test that the completion hook runs once, at the outermost exit."""
        completions = []

        class CountingRegistry(InMemoryJdkRegistry):
            def _on_write_complete(self):
                completions.append(len(self))

        registry = CountingRegistry()
        with registry.write_action():
            registry.add_jdk(entry("a", "/a"))
            with registry.write_action():
                registry.add_jdk(entry("b", "/b"))
            assert completions == []

        assert completions == [2]

    def test_unchanged_write_action_does_not_complete(self):
        """Test that a write action with no mutation skips the hook."""
        completions = []

        class CountingRegistry(InMemoryJdkRegistry):
            def _on_write_complete(self):
                completions.append(True)

        with CountingRegistry().write_action():
            pass

        assert completions == []


class TestJsonFileJdkRegistry:
    """Test the JSON-file registry."""

    def test_missing_file_starts_empty(self, tmp_path):
        """Test that a registry file need not exist yet."""
        registry = JsonFileJdkRegistry(tmp_path / "jdks.json")

        assert registry.all_jdks() == []
        assert not registry.path.exists()

    def test_write_action_persists(self, tmp_path, entry):
        """Test that a completed write action saves and a new instance reloads it."""
        path = tmp_path / "state" / "jdks.json"
        registry = JsonFileJdkRegistry(path)
        with registry.write_action():
            registry.add_jdk(entry("corretto-17", "/opt/jdks/17"))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["version"] == JsonFileJdkRegistry.VERSION
        assert data["updated_at"].endswith("Z")
        assert data["jdks"][0]["name"] == "corretto-17"

        reloaded = JsonFileJdkRegistry(path)
        assert reloaded.find_jdk("corretto-17") == JdkEntry(name="corretto-17", home_path="/opt/jdks/17")

    def test_failed_write_action_still_saves(self, tmp_path, entry):
        """Test that entries applied before an error are persisted."""
        path = tmp_path / "jdks.json"
        registry = JsonFileJdkRegistry(path)

        with pytest.raises(RuntimeError):
            with registry.write_action():
                registry.add_jdk(entry("a", "/a"))
                raise RuntimeError("boom")

        assert JsonFileJdkRegistry(path).find_jdk("a") is not None

    @pytest.mark.parametrize("content", [
        "{ not json",
        '{"jdks": [{"home_path": "/no/name"}]}',
        '["not", "an", "object"]',
    ])
    def test_corrupt_file_raises(self, tmp_path, content):
        """Test that unreadable registry files raise RegistryLoadError."""
        path = tmp_path / "jdks.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(RegistryLoadError):
            JsonFileJdkRegistry(path)

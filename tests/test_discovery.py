"""
Tests de la recherche des documents source.
"""

import os

import pytest

from fakes import make_tree
from md_translator import discovery
from md_translator.discovery import discover_files
from md_translator.exceptions import DiscoveryError


class BrokenEntry:
    """Entrée de répertoire dont le type ne peut pas être lu."""

    def __init__(self, path):
        self.path = str(path)
        self.name = os.path.basename(self.path)

    def is_dir(self, follow_symlinks=True):
        raise PermissionError("stat refusé")

    def is_file(self, follow_symlinks=True):
        raise PermissionError("stat refusé")


class TestDiscoverFiles:
    def test_finds_markdown_recursively(self, source_dir):
        make_tree(
            source_dir,
            {
                "tar.md": "",
                "linux/apt.md": "",
                "linux/deep/nested/ls.md": "",
                "notes.txt": "",
                "README": "",
            },
        )

        files = discover_files(source_dir)

        assert sorted(files) == ["linux/apt.md", "linux/deep/nested/ls.md", "tar.md"]

    def test_extension_is_case_insensitive(self, source_dir):
        make_tree(source_dir, {"UPPER.MD": "", "Mixed.Md": "", "lower.md": ""})

        assert sorted(discover_files(source_dir)) == ["Mixed.Md", "UPPER.MD", "lower.md"]

    def test_directories_are_not_files(self, source_dir):
        (source_dir / "folder.md").mkdir()
        make_tree(source_dir, {"folder.md/inner.md": ""})

        assert discover_files(source_dir) == ["folder.md/inner.md"]

    def test_custom_extension(self, source_dir):
        make_tree(source_dir, {"a.rst": "", "b.md": "", "c/d.RST": ""})

        assert sorted(discover_files(source_dir, extension=".rst")) == ["a.rst", "c/d.RST"]

    def test_empty_directory(self, source_dir):
        assert discover_files(source_dir) == []

    def test_accepts_string_path(self, source_dir):
        make_tree(source_dir, {"a.md": ""})

        assert discover_files(str(source_dir)) == ["a.md"]


class TestDiscoveryErrors:
    def test_missing_root_is_fatal(self, tmp_path):
        with pytest.raises(DiscoveryError):
            discover_files(tmp_path / "absent")

    def test_root_is_a_file(self, tmp_path):
        path = tmp_path / "file.md"
        path.write_text("x", encoding="utf-8")

        with pytest.raises(DiscoveryError):
            discover_files(path)

    def test_unreadable_root_is_fatal(self, source_dir, monkeypatch):
        real_scandir = os.scandir

        def fake_scandir(path):
            if os.fspath(path) == os.fspath(source_dir):
                raise PermissionError("accès refusé")
            return real_scandir(path)

        monkeypatch.setattr(discovery.os, "scandir", fake_scandir)

        with pytest.raises(DiscoveryError, match="illisible"):
            discover_files(source_dir)

    def test_unreadable_subdirectory_is_skipped(self, source_dir, monkeypatch, caplog):
        make_tree(source_dir, {"ok/a.md": "", "locked/b.md": "", "c.md": ""})
        real_scandir = os.scandir

        def fake_scandir(path):
            if os.path.basename(os.fspath(path)) == "locked":
                raise PermissionError("accès refusé")
            return real_scandir(path)

        monkeypatch.setattr(discovery.os, "scandir", fake_scandir)

        with caplog.at_level("WARNING", logger="md_translator"):
            files = discover_files(source_dir)

        assert sorted(files) == ["c.md", "ok/a.md"]
        assert any("locked" in record.getMessage() for record in caplog.records)

    def test_unreadable_entry_is_skipped(self, source_dir, monkeypatch, caplog):
        make_tree(source_dir, {"a.md": ""})
        real_scandir = os.scandir

        def fake_scandir(path):
            entries = list(real_scandir(path))
            if os.fspath(path) == os.fspath(source_dir):
                entries.append(BrokenEntry(source_dir / "broken.md"))
            return iter(entries)

        monkeypatch.setattr(discovery.os, "scandir", fake_scandir)

        with caplog.at_level("WARNING", logger="md_translator"):
            files = discover_files(source_dir)

        assert files == ["a.md"]
        assert any("broken.md" in record.getMessage() for record in caplog.records)

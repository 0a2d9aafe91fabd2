"""
Tests de l'orchestration complète (run_translation).
"""

import pytest

from fakes import EchoBackend, make_tree
from md_translator.exceptions import DiscoveryError
from md_translator.pipeline import runner
from md_translator.pipeline.worker_pool import FileWorkerPool
from md_translator.settings import Settings


class RecordingFactory:
    """Fabrique de backend qui garde une trace des instances créées."""

    def __init__(self, **backend_kwargs):
        self.backend_kwargs = backend_kwargs
        self.created = []

    def __call__(self, settings):
        backend = EchoBackend(**self.backend_kwargs)
        self.created.append(backend)
        return backend


@pytest.fixture
def make_settings(make_config):
    def _make(**overrides):
        return Settings(run=make_config(**overrides), provider="openai", api_key="test-key")

    return _make


class TestRunTranslation:
    def test_translates_and_closes_backend(self, source_dir, target_dir, make_settings):
        make_tree(source_dir, {"a.md": "A", "b/c.md": "C"})
        factory = RecordingFactory()

        report = runner.run_translation(make_settings(), factory, show_progress=False)

        assert report.stats.processed == 2
        assert report.exit_code == 0
        assert report.elapsed >= 0
        assert len(factory.created) == 1
        assert factory.created[0].closed
        assert (target_dir / "b" / "c.md").read_text(encoding="utf-8") == "TRADUIT:C"

    def test_failures_give_exit_code_1(self, source_dir, make_settings):
        make_tree(source_dir, {"ok.md": "ok", "ko.md": "BOOM"})
        factory = RecordingFactory(fail_marker="BOOM")

        report = runner.run_translation(make_settings(), factory, show_progress=False)

        assert report.stats.failed == 1
        assert report.exit_code == 1
        assert factory.created[0].closed

    def test_backend_closed_when_pool_raises(self, source_dir, make_settings, monkeypatch):
        make_tree(source_dir, {"a.md": "A"})
        factory = RecordingFactory()

        def exploding_run(self, relative_paths):
            raise KeyboardInterrupt

        monkeypatch.setattr(FileWorkerPool, "run", exploding_run)

        with pytest.raises(KeyboardInterrupt):
            runner.run_translation(make_settings(), factory, show_progress=False)

        assert factory.created[0].closed

    def test_dry_run_never_creates_backend(self, source_dir, target_dir, make_settings):
        make_tree(source_dir, {"a.md": "A", "b.md": "B"})
        factory = RecordingFactory()

        report = runner.run_translation(make_settings(dry_run=True), factory, show_progress=False)

        assert factory.created == []
        assert report.dry_run
        assert report.stats.dry_run_hits == 2
        assert report.exit_code == 0
        assert not target_dir.exists()

    def test_no_files_skips_backend(self, make_settings):
        factory = RecordingFactory()

        report = runner.run_translation(make_settings(), factory, show_progress=False)

        assert factory.created == []
        assert report.stats.total == 0
        assert report.exit_code == 0

    def test_default_factory_is_create_backend(self, source_dir, make_settings, monkeypatch):
        make_tree(source_dir, {"a.md": "A"})
        factory = RecordingFactory()
        monkeypatch.setattr(runner, "create_backend", factory)

        report = runner.run_translation(make_settings(), show_progress=False)

        assert report.stats.processed == 1
        assert len(factory.created) == 1

    def test_missing_source_is_fatal(self, tmp_path, make_settings):
        settings = make_settings(source_dir=tmp_path / "absent")

        with pytest.raises(DiscoveryError):
            runner.run_translation(settings, RecordingFactory(), show_progress=False)

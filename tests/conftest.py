"""
Configuration pytest pour les tests md-translator.

Ce fichier contient les fixtures communes à tous les tests.
"""

import pytest

from md_translator.logger import LogSession
from md_translator.settings import RunConfig


@pytest.fixture(autouse=True)
def isolated_log_session(tmp_path):
    """Redirige les logs de session vers un répertoire temporaire."""
    LogSession.configure(tmp_path / "logs")
    yield tmp_path / "logs"
    LogSession.reset()


@pytest.fixture
def source_dir(tmp_path):
    """Répertoire source vide."""
    path = tmp_path / "pages"
    path.mkdir()
    return path


@pytest.fixture
def target_dir(tmp_path):
    """Répertoire cible (non créé : le pipeline s'en charge)."""
    return tmp_path / "pages.zh"


@pytest.fixture
def make_config(source_dir, target_dir):
    """Fabrique de RunConfig pointant sur source_dir / target_dir."""

    def _make(**overrides) -> RunConfig:
        values = dict(
            source_dir=source_dir,
            target_dir=target_dir,
            concurrency=4,
            overwrite=False,
            dry_run=False,
            timeout=5.0,
        )
        values.update(overrides)
        return RunConfig(**values)

    return _make

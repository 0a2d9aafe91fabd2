"""
Tests de bout en bout de la ligne de commande.
"""

import signal

import pytest

from fakes import EchoBackend, make_tree
from md_translator import cli
from md_translator.pipeline import runner
from md_translator.settings import API_KEY_ENV


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Répertoire de travail : pages/ avec deux documents, clé API définie."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(API_KEY_ENV, "test-key")
    monkeypatch.setattr(cli, "setup_signal_handlers", lambda: None)
    make_tree(tmp_path / "pages", {"tar.md": "# tar", "linux/apt.md": "# apt BOOM"})
    return tmp_path


def run_cli(project, *argv):
    return cli.main(["--log-dir", str(project / "logs"), *argv])


class TestMain:
    def test_dry_run(self, project, capsys):
        code = run_cli(project, "--dry-run")

        out = capsys.readouterr().out
        assert code == 0
        assert "Résumé" in out
        assert "dry-run" in out
        assert not (project / "pages.zh").exists()

    def test_translation_with_failure(self, project, monkeypatch, capsys):
        backend = EchoBackend(fail_marker="BOOM")
        monkeypatch.setattr(runner, "create_backend", lambda settings: backend)

        code = run_cli(project, "--concurrency", "2")

        assert code == 1
        assert backend.closed
        assert (project / "pages.zh" / "tar.md").read_text(encoding="utf-8") == "TRADUIT:# tar"
        assert not (project / "pages.zh" / "linux" / "apt.md").exists()
        assert "Échecs" in capsys.readouterr().out

    def test_successful_run(self, project, monkeypatch):
        monkeypatch.setattr(runner, "create_backend", lambda settings: EchoBackend())

        assert run_cli(project) == 0
        assert run_cli(project) == 0
        assert (project / "pages.zh" / "linux" / "apt.md").exists()

    def test_invalid_concurrency(self, project, capsys):
        code = run_cli(project, "--concurrency", "0")

        assert code == 1
        assert "configuration" in capsys.readouterr().err

    def test_invalid_value_in_config_file(self, project, capsys):
        (project / "config.toml").write_text('[general]\nconcurrency = "abc"\n', encoding="utf-8")

        code = run_cli(project, "--config", "config.toml")

        assert code == 1
        assert "Erreur de configuration" in capsys.readouterr().err

    def test_missing_api_key(self, project, monkeypatch, capsys):
        monkeypatch.delenv(API_KEY_ENV)

        assert run_cli(project) == 1
        assert API_KEY_ENV in capsys.readouterr().err

    def test_logs_written_to_log_dir(self, project):
        run_cli(project, "--dry-run")

        assert list((project / "logs").glob("run_*/md_translator.log"))

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--version"])

        assert exc_info.value.code == 0
        assert "md-translator" in capsys.readouterr().out


def test_sigterm_handler_is_registered(monkeypatch):
    registered = {}
    monkeypatch.setattr(cli.signal, "signal", lambda signum, handler: registered.setdefault(signum, handler))

    cli.setup_signal_handlers()

    assert registered[signal.SIGTERM] is cli._handle_sigterm

"""
Interface en ligne de commande.

Usage :
    md-translator --source pages --target pages.zh --concurrency 5
    md-translator --config config.toml --dry-run
    python -m md_translator --provider claude --model claude-3-5-sonnet-latest

Code de sortie : 0 si aucun fichier n'a échoué, 1 sinon (ou configuration
invalide), 130 sur Ctrl+C, 143 sur SIGTERM.
"""

import argparse
import logging
import os
import signal
import sys
from typing import Optional, Sequence

from . import __version__
from .config import lock_config
from .exceptions import BackendError, ConfigError, DiscoveryError
from .logger import LogSession, get_logger, set_console_level
from .pipeline import run_translation
from .settings import (
    API_KEY_ENV,
    DEFAULT_CONCURRENCY,
    DEFAULT_PROMPT_FILE,
    DEFAULT_SOURCE_DIR,
    DEFAULT_TARGET_DIR,
    DEFAULT_TIMEOUT,
    SUPPORTED_PROVIDERS,
    load_settings,
)

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Options de la CLI. Les valeurs absentes (None) laissent la place au fichier TOML."""
    parser = argparse.ArgumentParser(
        prog="md-translator",
        description="Traduit en parallèle une arborescence de documents Markdown via un LLM.",
        epilog=f"La clé API est lue dans la variable d'environnement {API_KEY_ENV} (ou .env).",
    )
    parser.add_argument("--source", help=f"Répertoire source (défaut: {DEFAULT_SOURCE_DIR})")
    parser.add_argument("--target", help=f"Répertoire cible (défaut: {DEFAULT_TARGET_DIR})")
    parser.add_argument(
        "--concurrency", type=int, help=f"Nombre de workers (défaut: {DEFAULT_CONCURRENCY})"
    )
    parser.add_argument(
        "--provider", help=f"Provider LLM ({', '.join(SUPPORTED_PROVIDERS)}, défaut: openai)"
    )
    parser.add_argument("--api-url", dest="api_url", help="URL de l'API (optionnel)")
    parser.add_argument("--model", help="Modèle à utiliser (défaut selon le provider)")
    parser.add_argument(
        "--prompt-file", dest="prompt_file", help=f"Template de prompt Jinja2 (défaut: {DEFAULT_PROMPT_FILE})"
    )
    parser.add_argument("--overwrite", action="store_true", help="Remplacer les fichiers cibles existants")
    parser.add_argument("--dry-run", dest="dry_run", action="store_true", help="Simulation : ni appel API, ni écriture")
    parser.add_argument("--config", help="Fichier de configuration TOML")
    parser.add_argument(
        "--timeout", type=float, help=f"Délai max d'un appel API en secondes (défaut: {DEFAULT_TIMEOUT:g})"
    )
    parser.add_argument("--ext", help="Extension des documents (défaut: .md)")
    parser.add_argument("--log-dir", dest="log_dir", help="Répertoire des logs (défaut: logs)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Logs DEBUG sur la console")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _handle_sigterm(signum, frame):
    # Arrêt brutal : les tâches en cours sont abandonnées
    logger.warning(f"Signal {signum} reçu, arrêt immédiat")
    logging.shutdown()
    os._exit(128 + signum)


def setup_signal_handlers() -> None:
    signal.signal(signal.SIGTERM, _handle_sigterm)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Point d'entrée de la CLI.

    Returns:
        Code de sortie du processus
    """
    args = build_parser().parse_args(argv)

    if args.log_dir:
        LogSession.configure(args.log_dir)
    if args.verbose:
        set_console_level(logging.DEBUG)
    lock_config()
    setup_signal_handlers()

    try:
        settings = load_settings(args)
    except ConfigError as e:
        print(f"\n❌ Erreur de configuration : {e}\n", file=sys.stderr)
        return 1

    run = settings.run
    logger.info(
        f"Configuration: source='{run.source_dir}', cible='{run.target_dir}', "
        f"workers={run.concurrency}, provider='{settings.provider}', "
        f"modèle='{settings.model or 'défaut'}', overwrite={run.overwrite}, "
        f"dry-run={run.dry_run}, timeout={run.timeout:g}s"
    )

    try:
        report = run_translation(settings)
    except DiscoveryError as e:
        print(f"\n❌ Recherche des fichiers impossible : {e}\n", file=sys.stderr)
        return 1
    except (ConfigError, BackendError) as e:
        print(f"\n❌ Initialisation du backend impossible : {e}\n", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n❌ Traduction interrompue par l'utilisateur", file=sys.stderr)
        return 130

    print(report.format_summary())
    return report.exit_code

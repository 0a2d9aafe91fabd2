"""
Orchestration complète d'une exécution.

    1. Recherche des fichiers (DiscoveryError = fatal)
    2. Création du backend (sauf en dry-run)
    3. Traitement par le FileWorkerPool
    4. Fermeture du backend, quelle que soit l'issue
    5. Rapport final
"""

import time
from typing import TYPE_CHECKING, Callable, Optional

from ..backends import create_backend
from ..discovery import discover_files
from ..logger import get_logger
from ..stats import RunReport, RunStats
from .worker_pool import FileWorkerPool

if TYPE_CHECKING:
    from ..backends.base import TranslationBackend
    from ..settings import Settings

logger = get_logger(__name__)

BackendFactory = Callable[["Settings"], "TranslationBackend"]


def run_translation(
    settings: "Settings",
    backend_factory: Optional[BackendFactory] = None,
    show_progress: bool = True,
) -> RunReport:
    """
    Traduit tous les documents du répertoire source.

    Le backend n'est créé qu'en dehors du dry-run, et il est fermé sur tous
    les chemins de sortie (succès, échec, interruption).

    Args:
        settings: Configuration validée
        backend_factory: Fabrique de backend (défaut: create_backend)
        show_progress: Afficher la barre de progression

    Returns:
        RunReport avec les statistiques et la durée totale

    Raises:
        DiscoveryError: Si le répertoire source ne peut pas être parcouru
        ConfigError: Si le backend ou le pool ne peut pas être configuré
    """
    start = time.monotonic()
    config = settings.run
    factory = backend_factory or create_backend

    if config.dry_run:
        logger.warning("🧪 Mode dry-run : aucun appel backend, aucune écriture")

    files = discover_files(config.source_dir, config.extension)
    if not files:
        logger.info("Aucun fichier à traduire")
        return RunReport(RunStats(), time.monotonic() - start, config.dry_run)

    if config.dry_run:
        stats = FileWorkerPool(config, None, show_progress).run(files)
    else:
        logger.info(f"Initialisation du backend '{settings.provider}'...")
        with factory(settings) as backend:
            stats = FileWorkerPool(config, backend, show_progress).run(files)

    report = RunReport(stats, time.monotonic() - start, config.dry_run)
    if report.exit_code != 0:
        logger.warning(f"Traitement terminé avec {stats.failed} échec(s), voir les logs")
    else:
        logger.info("Traitement terminé sans erreur")
    return report

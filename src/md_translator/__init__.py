"""
Traduction par lots de documents Markdown via LLM.

md-translator parcourt une arborescence de documents (pages tldr, docs...),
envoie chaque fichier à un backend de traduction (OpenAI, Claude, Gemini) et
écrit le résultat dans une arborescence cible identique.

Le processus :
1. Recherche des fichiers .md dans le répertoire source
2. Distribution des fichiers à un pool de workers (nombre fixe)
3. Pour chaque fichier : lecture → appel backend (avec timeout)
   → extraction des balises <translate> → écriture atomique
4. Rapport final (traduits, ignorés, échecs, dry-run, durée)

Fonctionnalités principales :
- Ré-exécution idempotente : les fichiers déjà traduits sont ignorés
  (sauf --overwrite)
- Mode dry-run : parcourt tout sans appel API ni écriture
- Échecs isolés : un fichier en erreur n'arrête pas les autres
- Logs détaillés de chaque requête LLM dans logs/run_YYYYMMDD_HHMMSS/

Organisation du package :
- discovery.py : Recherche des documents
- extraction.py : Extraction du contenu <translate>...</translate>
- persistence.py : Lecture source et écriture atomique
- stats.py : Compteurs thread-safe et rapport final
- pipeline/ : TaskQueue, FileWorker, FileWorkerPool, run_translation
- backends/ : Backends OpenAI, Claude, Gemini
- settings.py : Chargement et validation de la configuration
- cli.py : Ligne de commande

Usage minimal :
    >>> from pathlib import Path
    >>> from md_translator import RunConfig, Settings, run_translation
    >>>
    >>> settings = Settings(
    ...     run=RunConfig(source_dir=Path("pages"), target_dir=Path("pages.zh")),
    ...     provider="openai",
    ...     api_key="sk-...",
    ... )
    >>> report = run_translation(settings)
    >>> print(report.format_summary())

Configuration :
    La clé API est lue dans MK_TRANSLATOR_API_KEY (ou un fichier .env) :

        MK_TRANSLATOR_API_KEY=sk-votre-cle-ici
"""

__version__ = "0.1.0"

from .backends import TranslationBackend, create_backend
from .discovery import discover_files
from .exceptions import (
    BackendError,
    ConfigError,
    DiscoveryError,
    ExtractionError,
    TaskError,
    TranslatorError,
)
from .extraction import extract_translation
from .persistence import write_translation
from .pipeline import FileWorkerPool, run_translation
from .settings import RunConfig, Settings, load_settings
from .stats import Outcome, RunReport, RunStats, StatsAggregator

__all__ = [
    "__version__",
    # Pipeline
    "run_translation",
    "FileWorkerPool",
    "discover_files",
    "extract_translation",
    "write_translation",
    # Backends
    "TranslationBackend",
    "create_backend",
    # Configuration
    "RunConfig",
    "Settings",
    "load_settings",
    # Statistiques
    "Outcome",
    "RunReport",
    "RunStats",
    "StatsAggregator",
    # Exceptions
    "TranslatorError",
    "ConfigError",
    "DiscoveryError",
    "TaskError",
    "ExtractionError",
    "BackendError",
]

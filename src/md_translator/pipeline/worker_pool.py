"""
Pool de FileWorkers parallèles.

Architecture:
    discover_files() → TaskQueue (chargée une fois) → FileWorkers (N threads)
                                                     → StatsAggregator

Le nombre de workers est fixe pour toute l'exécution. ``run()`` bloque
jusqu'à ce que chaque worker ait vidé la queue et se soit arrêté ; les
statistiques ne sont lues qu'après ce join.
"""

import threading
from typing import TYPE_CHECKING, Optional, Sequence

from tqdm import tqdm

from ..exceptions import ConfigError
from ..logger import get_logger
from ..stats import RunStats, StatsAggregator
from .file_worker import FileWorker
from .task_queue import TaskQueue

if TYPE_CHECKING:
    from ..backends.base import TranslationBackend
    from ..settings import RunConfig

logger = get_logger(__name__)


class FileWorkerPool:
    """
    Distribue les fichiers découverts à ``config.concurrency`` workers.

    Une instance correspond à une exécution : ``run()`` ne peut être
    appelée qu'une fois.

    Attributes:
        config: Paramètres de l'exécution
        backend: Backend partagé par tous les workers (None en dry-run)
        task_queue: Queue partagée
        workers: Les FileWorker (créés par run())
        threads: Threads des workers

    Example:
        >>> pool = FileWorkerPool(config, backend)
        >>> stats = pool.run(["a.md", "b.md"])
        >>> stats.processed + stats.skipped + stats.failed + stats.dry_run_hits
        2
    """

    def __init__(
        self,
        config: "RunConfig",
        backend: Optional["TranslationBackend"],
        show_progress: bool = True,
    ):
        """
        Args:
            config: Paramètres de l'exécution (concurrency > 0)
            backend: Backend partagé, thread-safe (None seulement en dry-run)
            show_progress: Afficher une barre de progression tqdm

        Raises:
            ConfigError: Si config.concurrency <= 0
        """
        if config.concurrency <= 0:
            raise ConfigError(
                f"Le nombre de workers doit être supérieur à 0 (reçu: {config.concurrency})"
            )
        self.config = config
        self.backend = backend
        self.show_progress = show_progress
        self.task_queue = TaskQueue()
        self.workers: list[FileWorker] = []
        self.threads: list[threading.Thread] = []
        self._stats: Optional[StatsAggregator] = None

    def run(self, relative_paths: Sequence[str]) -> RunStats:
        """
        Traite tous les fichiers et retourne les statistiques finales.

        Args:
            relative_paths: Chemins relatifs retournés par discover_files()

        Returns:
            Statistiques figées après l'arrêt de tous les workers
        """
        total = self.task_queue.load(relative_paths)
        self._stats = StatsAggregator(total=total)
        logger.info(
            f"🚀 Traitement de {total} fichier(s) avec {self.config.concurrency} worker(s)"
        )

        with tqdm(
            total=total,
            desc="Traduction des fichiers",
            unit="fichier",
            ncols=100,
            bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}]",
            disable=not self.show_progress,
        ) as pbar:
            self.workers = [
                FileWorker(
                    worker_id=i + 1,
                    task_queue=self.task_queue,
                    config=self.config,
                    backend=self.backend,
                    stats=self._stats,
                    progress=pbar,
                )
                for i in range(self.config.concurrency)
            ]
            self.threads = [
                threading.Thread(target=worker.run, daemon=True, name=f"FileWorker-{worker.worker_id}")
                for worker in self.workers
            ]

            for thread in self.threads:
                thread.start()

            # Pas de timeout : chaque worker s'arrête quand la queue est vide
            for thread in self.threads:
                thread.join()

        logger.info("Tous les workers ont terminé")
        return self._stats.snapshot()

    def __repr__(self) -> str:
        return (
            f"FileWorkerPool(\n"
            f"  workers={self.config.concurrency},\n"
            f"  queue={self.task_queue!r},\n"
            f"  stats={self._stats!r}\n"
            f")"
        )

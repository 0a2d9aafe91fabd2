"""
Worker qui traduit les fichiers de la TaskQueue un par un.

Pour chaque tâche :
    chemins → fichier cible existant ? → lecture → dry-run ?
    → backend (avec timeout) → extraction <translate> → écriture

Chaque tâche se termine par exactement une issue (Outcome). Une erreur ne
concerne que sa tâche : elle est loggée, comptée, et le worker passe au
fichier suivant.
"""

import threading
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from ..exceptions import (
    BackendError,
    BackendTimeoutError,
    ExtractionError,
    SourceReadError,
    StatCheckError,
    WriteError,
)
from ..extraction import extract_translation
from ..logger import get_logger
from ..persistence import read_source, target_exists, write_translation
from ..stats import Outcome, StatsAggregator
from .task_queue import Task, TaskQueue

if TYPE_CHECKING:
    from tqdm import tqdm

    from ..backends.base import TranslationBackend
    from ..settings import RunConfig

logger = get_logger(__name__)


def call_with_timeout(func: Callable[[], str], timeout: float, name: str = "backend-call") -> str:
    """
    Exécute func dans un thread dédié et attend au plus ``timeout`` secondes.

    Si le délai expire, l'appel est abandonné (le thread daemon finit seul,
    son résultat est ignoré) et BackendTimeoutError est levée. Les autres
    workers ne sont pas affectés.

    Raises:
        BackendTimeoutError: Si le délai est dépassé
        Exception: Toute exception levée par func est propagée
    """
    result: dict[str, object] = {}

    def target():
        try:
            result["value"] = func()
        except Exception as e:
            result["error"] = e

    thread = threading.Thread(target=target, daemon=True, name=name)
    thread.start()
    thread.join(timeout)

    if thread.is_alive():
        raise BackendTimeoutError(f"Délai de {timeout:g}s dépassé")
    if "error" in result:
        raise result["error"]  # type: ignore[misc]
    return result["value"]  # type: ignore[return-value]


class FileWorker:
    """
    Consomme la TaskQueue jusqu'à épuisement.

    Attributes:
        worker_id: Identifiant du worker (pour les logs)
        task_queue: Queue partagée par tous les workers
        config: Paramètres de l'exécution
        backend: Backend partagé (None uniquement en dry-run)
        stats: Compteurs partagés
        handled_count: Nombre de tâches traitées par ce worker

    Example:
        >>> worker = FileWorker(1, task_queue, config, backend, stats)
        >>> worker.run()  # Retourne quand la queue est vide
    """

    def __init__(
        self,
        worker_id: int,
        task_queue: TaskQueue,
        config: "RunConfig",
        backend: Optional["TranslationBackend"],
        stats: StatsAggregator,
        progress: Optional["tqdm"] = None,
    ):
        self.worker_id = worker_id
        self.task_queue = task_queue
        self.config = config
        self.backend = backend
        self.stats = stats
        self.progress = progress
        self.handled_count = 0

    @property
    def _tag(self) -> str:
        return f"[Worker-{self.worker_id}]"

    def run(self) -> None:
        """Boucle principale : traite les tâches jusqu'à ce que la queue soit vide."""
        logger.debug(f"{self._tag} Démarré")

        while True:
            task = self.task_queue.next_task()
            if task is None:
                break

            try:
                outcome = self.process(task)
            except Exception as e:
                logger.exception(f"{self._tag} Erreur inattendue sur {task.relative_path}: {e}")
                outcome = Outcome.FAILED

            self.stats.increment(outcome)
            self.handled_count += 1
            if self.progress is not None:
                self.progress.update(1)

        logger.debug(f"{self._tag} Arrêté ({self.handled_count} tâche(s) traitée(s))")

    def process(self, task: Task) -> Outcome:
        """
        Traite un fichier et retourne son issue.

        Les erreurs attendues (TaskError, BackendError) sont converties en
        Outcome.FAILED ici, avec un log contenant le chemin et la cause.
        """
        source_path = self.config.source_dir / task.relative_path
        target_path = self.config.target_dir / task.relative_path
        logger.debug(f"{self._tag} Traitement: {task.relative_path} -> {target_path}")

        # 1. Fichier cible déjà présent ? (ni overwrite, ni dry-run)
        if not self.config.overwrite and not self.config.dry_run:
            try:
                if target_exists(target_path):
                    logger.info(f"{self._tag} ⏭️ Ignoré (déjà présent): {target_path}")
                    return Outcome.SKIPPED
            except StatCheckError as e:
                logger.error(f"{self._tag} ❌ {e}")
                return Outcome.FAILED

        # 2. Lecture du source
        try:
            content = read_source(source_path)
        except SourceReadError as e:
            logger.error(f"{self._tag} ❌ {e}")
            return Outcome.FAILED

        # 3. Dry-run : pas d'appel backend, pas d'écriture
        if self.config.dry_run:
            logger.info(f"{self._tag} 🧪 [dry-run] Serait traduit et écrit: {target_path}")
            return Outcome.DRY_RUN

        if self.backend is None:
            logger.error(f"{self._tag} ❌ Aucun backend configuré, {task.relative_path} ignoré")
            return Outcome.FAILED

        # 4. Appel du backend, borné par le timeout
        try:
            raw_output = self._translate(self.backend, content, task)
        except BackendTimeoutError as e:
            logger.error(f"{self._tag} ⏱️ Timeout pour {task.relative_path}: {e}")
            return Outcome.FAILED
        except BackendError as e:
            logger.error(f"{self._tag} ❌ Erreur backend pour {task.relative_path}: {e}")
            return Outcome.FAILED

        # 5. Extraction du contenu entre balises
        try:
            translated = extract_translation(raw_output)
        except ExtractionError as e:
            logger.error(f"{self._tag} ❌ Extraction impossible pour {task.relative_path}: {e}")
            return Outcome.FAILED

        # 6. Écriture
        try:
            written = write_translation(target_path, translated, self.config.overwrite)
        except WriteError as e:
            logger.error(f"{self._tag} ❌ {e}")
            return Outcome.FAILED

        if written:
            logger.info(f"{self._tag} ✅ Traduit: {target_path}")
        else:
            # Le fichier est apparu entre la vérification et l'écriture
            logger.info(f"{self._tag} ✅ Déjà présent au moment de l'écriture: {target_path}")
        return Outcome.PROCESSED

    def _translate(self, backend: "TranslationBackend", content: str, task: Task) -> str:
        context = Path(task.relative_path).with_suffix("").as_posix()
        return call_with_timeout(
            lambda: backend.translate(content, self.config.timeout, context=context),
            self.config.timeout,
            name=f"backend-{self.worker_id}",
        )

    def __repr__(self) -> str:
        return f"FileWorker(id={self.worker_id}, handled={self.handled_count})"

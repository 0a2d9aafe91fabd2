"""
Queue thread-safe des fichiers à traduire.

La queue est remplie en une seule fois avant le démarrage des workers, puis
fermée : aucun fichier n'est ajouté ensuite. Une queue vide signifie donc
que tout le travail a été distribué.
"""

import queue
import threading
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class Task:
    """
    Un document à traduire.

    Attributes:
        relative_path: Chemin relatif aux répertoires source ET cible ("/")
    """

    relative_path: str

    def __repr__(self) -> str:
        return f"Task({self.relative_path!r})"


class TaskQueue:
    """
    Queue chargée une fois, consommée par plusieurs workers.

    ``queue.Queue`` garantit qu'une tâche n'est remise qu'à un seul worker.

    Example:
        >>> tasks = TaskQueue()
        >>> tasks.load(["a.md", "b/c.md"])
        >>> tasks.next_task()
        Task('a.md')
    """

    def __init__(self):
        self._queue: Optional[queue.Queue[Task]] = None
        self._lock = threading.Lock()
        self._loaded = 0

    def load(self, relative_paths: Iterable[str]) -> int:
        """
        Charge toutes les tâches puis ferme la queue.

        La capacité est égale au nombre de tâches : le chargement ne bloque
        jamais.

        Returns:
            Nombre de tâches chargées

        Raises:
            RuntimeError: Si la queue a déjà été chargée
        """
        tasks = [Task(path) for path in relative_paths]
        with self._lock:
            if self._queue is not None:
                raise RuntimeError("TaskQueue déjà chargée")
            self._queue = queue.Queue(maxsize=max(len(tasks), 1))
            for task in tasks:
                self._queue.put_nowait(task)
            self._loaded = len(tasks)
        return self._loaded

    def next_task(self) -> Optional[Task]:
        """
        Retire la prochaine tâche, ou None si tout a été distribué.

        Ne bloque pas : la queue étant fermée, vide veut dire terminé.
        """
        if self._queue is None:
            return None
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    @property
    def loaded(self) -> int:
        return self._loaded

    def qsize(self) -> int:
        """Nombre approximatif de tâches restantes."""
        return self._queue.qsize() if self._queue is not None else 0

    def __repr__(self) -> str:
        return f"TaskQueue(loaded={self._loaded}, remaining={self.qsize()})"

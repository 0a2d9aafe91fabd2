"""
Configuration du logging pour md-translator.

Chaque module obtient son logger via ``get_logger(__name__)``. Deux sorties :
- la console, via ``tqdm.write`` pour ne pas casser la barre de progression ;
- un fichier par exécution : logs/run_YYYYMMDD_HHMMSS/md_translator.log

Le répertoire de session n'est résolu qu'au premier message écrit, ce qui
permet de le rediriger (``LogSession.configure``) après l'import des modules
et évite de créer des répertoires vides.
"""

import logging
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .config import LoggerLevel

DEFAULT_LOG_FILENAME = "md_translator.log"
ROOT_LOGGER_NAME = "md_translator"


class LogSession:
    """
    Répertoire unique regroupant les logs d'une exécution.

    Le répertoire est logs/run_YYYYMMDD_HHMMSS/ (ou <base_dir>/run_... si
    ``configure()`` a été appelé). Il est créé à la première demande.
    """

    _base_dir: Optional[Path] = None
    _session_dir: Optional[Path] = None
    _lock = threading.Lock()

    @classmethod
    def configure(cls, base_dir: str | Path) -> None:
        """Change le répertoire de base et démarre une nouvelle session."""
        with cls._lock:
            cls._base_dir = Path(base_dir)
            cls._session_dir = None

    @classmethod
    def get_session_dir(cls) -> Path:
        """Retourne (et crée si besoin) le répertoire de la session en cours."""
        with cls._lock:
            if cls._session_dir is None:
                base_dir = cls._base_dir or Path(LoggerLevel.log_dir)
                timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
                cls._session_dir = base_dir / f"run_{timestamp}"
            cls._session_dir.mkdir(parents=True, exist_ok=True)
            return cls._session_dir

    @classmethod
    def reset(cls):
        """Oublie la session courante (utile pour les tests)."""
        with cls._lock:
            cls._base_dir = None
            cls._session_dir = None


class TqdmLoggingHandler(logging.Handler):
    """Handler console qui passe par tqdm.write() pour cohabiter avec la barre."""

    def emit(self, record):
        try:
            tqdm.write(self.format(record), file=sys.stderr)
        except Exception:
            self.handleError(record)


class LazyFileHandler(logging.Handler):
    """
    Handler fichier qui n'ouvre le fichier qu'au premier message.

    Le chemin peut être fixe (``filename``) ou relatif à la session de logs
    (``session_filename``), auquel cas il est résolu au premier ``emit``.
    Si la session change ensuite (``LogSession.configure``/``reset``), le
    fichier est rouvert dans le nouveau répertoire.
    """

    def __init__(
        self,
        filename: Optional[Path] = None,
        session_filename: Optional[str] = None,
        mode: str = "a",
        encoding: str = "utf-8",
        level: int = logging.NOTSET,
    ):
        super().__init__(level)
        if filename is None and session_filename is None:
            raise ValueError("filename ou session_filename est requis")
        self.filename = filename
        self.session_filename = session_filename
        self.mode = mode
        self.encoding = encoding
        self._handler: Optional[logging.FileHandler] = None
        self._current_path: Optional[Path] = None

    def _target_path(self) -> Path:
        if self.filename is not None:
            return self.filename
        assert self.session_filename is not None
        return LogSession.get_session_dir() / self.session_filename

    def _ensure_handler(self) -> logging.FileHandler:
        path = self._target_path()
        if self._handler is None or path != self._current_path:
            if self._handler is not None:
                self._handler.close()
            path.parent.mkdir(parents=True, exist_ok=True)
            self._handler = logging.FileHandler(path, mode=self.mode, encoding=self.encoding)
            if self.formatter:
                self._handler.setFormatter(self.formatter)
            self._current_path = path
        return self._handler

    def emit(self, record):
        try:
            self.acquire()
            try:
                self._ensure_handler().emit(record)
            finally:
                self.release()
        except Exception:
            self.handleError(record)

    def close(self):
        if self._handler:
            self._handler.close()
        super().close()


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    log_filename: str = DEFAULT_LOG_FILENAME,
) -> logging.Logger:
    """
    Configure le logger racine du package (console + fichier de session).

    Les loggers des modules (md_translator.xxx) propagent vers celui-ci, un
    seul jeu de handlers suffit donc. Les niveaux viennent de LoggerLevel.

    Example:
        >>> logger = setup_logger()
        >>> logger.info("Traduction démarrée")
    """
    logger = logging.getLogger(name)
    logger.setLevel(LoggerLevel.level)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(LoggerLevel.console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_handler = LazyFileHandler(session_filename=log_filename)
    file_handler.setLevel(LoggerLevel.file_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def set_console_level(level: int) -> None:
    """Ajuste le niveau de la sortie console (ex: --verbose)."""
    for handler in setup_logger().handlers:
        if isinstance(handler, TqdmLoggingHandler):
            handler.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Récupère le logger d'un module, en configurant le logger racine au besoin.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Message de log")
    """
    setup_logger()
    return logging.getLogger(name)


def get_session_log_path(filename: str) -> Path:
    """
    Chemin complet d'un fichier dans le répertoire de session.

    Example:
        >>> get_session_log_path("llm_chunk_001.log")
        PosixPath('logs/run_20251023_143022/llm_chunk_001.log')
    """
    return LogSession.get_session_dir() / filename

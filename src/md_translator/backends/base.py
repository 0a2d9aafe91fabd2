"""
Interface commune des backends de traduction.

Un backend reçoit le document complet, rend le prompt (template Jinja2),
interroge le modèle et retourne la réponse BRUTE : l'extraction des balises
<translate> est faite ensuite par le pipeline.

Une seule instance est partagée par tous les workers d'une exécution :
``translate()`` doit donc être thread-safe. Les backends qui possèdent une
ressource (client HTTP...) la libèrent dans ``close()`` ; ils s'utilisent
comme context manager.
"""

import datetime
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from jinja2 import Environment, StrictUndefined

from ..exceptions import BackendError
from ..logger import get_logger, get_session_log_path
from ..settings import DEFAULT_PROMPT_TEMPLATE

logger = get_logger(__name__)


class TranslationBackend(ABC):
    """
    Backend de traduction (OpenAI, Claude, Gemini...).

    Les sous-classes implémentent ``_request()`` ; ``translate()`` s'occupe
    du rendu du prompt et du fichier de log de chaque requête.

    Attributes:
        name: Identifiant du provider (pour les logs)
        model: Nom du modèle utilisé
    """

    name: str = "backend"

    def __init__(
        self,
        model: str,
        prompt_template: str = DEFAULT_PROMPT_TEMPLATE,
        log_requests: bool = True,
    ):
        self.model = model
        self.log_requests = log_requests
        self._template = Environment(undefined=StrictUndefined).from_string(prompt_template)
        self._log_counter = 0
        self._log_lock = threading.Lock()

    def render_prompt(self, content: str) -> str:
        """Rend le template avec le document à traduire."""
        return self._template.render(content=content)

    def translate(self, content: str, timeout: float, context: Optional[str] = None) -> str:
        """
        Traduit un document et retourne la réponse brute du modèle.

        Args:
            content: Document source complet
            timeout: Délai maximum de l'appel, en secondes
            context: Contexte optionnel pour nommer le fichier de log

        Returns:
            Réponse brute (contient normalement <translate>...</translate>)

        Raises:
            BackendError: Authentification, réseau, timeout ou réponse vide
        """
        prompt = self.render_prompt(content)
        log_path = self._create_log(prompt, context) if self.log_requests else None

        try:
            response = self._request(prompt, timeout)
        except BackendError as e:
            if log_path:
                self._append_response(log_path, f"[ERREUR {type(e).__name__}: {e}]")
            raise

        if log_path:
            self._append_response(log_path, response)
        return response

    @abstractmethod
    def _request(self, prompt: str, timeout: float) -> str:
        """Envoie le prompt au modèle et retourne le texte de la réponse."""

    def close(self) -> None:
        """Libère les ressources du backend (aucune par défaut)."""

    def __enter__(self) -> "TranslationBackend":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        logger.debug(f"Fermeture du backend {self.name}")
        self.close()

    # -----------------------------------
    # 🔹 Log des requêtes
    # -----------------------------------
    def _create_log(self, prompt: str, context: Optional[str] = None) -> Path:
        """
        Crée le fichier de log d'une requête et y écrit l'en-tête.

        Nom : llm_<context>_<NNNN>_<timestamp>.log (ou llm_<NNNN>_<timestamp>.log)
        """
        timestamp = datetime.datetime.now().isoformat().replace(":", "-")
        with self._log_lock:
            self._log_counter += 1
            counter = self._log_counter

        if context:
            safe_context = context.replace("/", "_").replace("\\", "_")
            filename = f"llm_{safe_context}_{counter:04d}_{timestamp}.log"
        else:
            filename = f"llm_{counter:04d}_{timestamp}.log"

        log_path = get_session_log_path(filename)
        header = (
            f"=== LLM REQUEST LOG ===\n"
            f"Timestamp : {timestamp}\n"
            f"Provider  : {self.name}\n"
            f"Model     : {self.model}\n"
            f"Context   : {context or 'N/A'}\n"
            f"Prompt len: {len(prompt)} chars\n"
            f"{'-'*40}\n\n"
            f"--- PROMPT ---\n{prompt}\n\n"
            f"--- RESPONSE ---\n"
        )
        with open(log_path, "w", encoding="utf-8") as f:
            f.write(header)
        return log_path

    def _append_response(self, log_path: Path, response: str) -> None:
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(response.strip() + "\n")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"

"""
Backend Google Gemini (SDK google-genai).
"""

import httpx
from google import genai
from google.genai import errors, types

from ..exceptions import (
    BackendAuthError,
    BackendNetworkError,
    BackendResponseError,
    BackendTimeoutError,
)
from ..logger import get_logger
from ..settings import DEFAULT_PROMPT_TEMPLATE
from .base import TranslationBackend

logger = get_logger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"


def _finish_reason(response: types.GenerateContentResponse) -> str:
    if not response.candidates:
        return "aucun candidat"
    reason = response.candidates[0].finish_reason
    return reason.name if reason is not None else "inconnue"


class GeminiBackend(TranslationBackend):
    """Traduction via ``client.models.generate_content``."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        api_url: str = "",
        model: str = "",
        prompt_template: str = DEFAULT_PROMPT_TEMPLATE,
        log_requests: bool = True,
    ):
        if not api_key:
            raise BackendAuthError("La clé API Gemini ne peut pas être vide")
        super().__init__(model or DEFAULT_GEMINI_MODEL, prompt_template, log_requests)
        http_options = types.HttpOptions(base_url=api_url) if api_url else None
        self.client = genai.Client(api_key=api_key, http_options=http_options)
        logger.info(f"Client Gemini initialisé: modèle={self.model}")

    def _request(self, prompt: str, timeout: float) -> str:
        config = types.GenerateContentConfig(
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except httpx.TimeoutException as e:
            raise BackendTimeoutError(f"Gemini: délai de {timeout:.0f}s dépassé") from e
        except httpx.TransportError as e:
            raise BackendNetworkError(f"Gemini: connexion impossible: {e}") from e
        except errors.ClientError as e:
            raise BackendAuthError(f"Gemini: requête refusée ({e.code}): {e}") from e
        except errors.APIError as e:
            raise BackendNetworkError(f"Gemini: erreur serveur ({e.code}): {e}") from e

        if not response.text:
            raise BackendResponseError(
                f"Gemini: réponse sans contenu (raison de fin: {_finish_reason(response)})"
            )
        return response.text

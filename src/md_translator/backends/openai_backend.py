"""
Backend OpenAI (et API compatibles : DeepSeek, OpenRouter, serveurs locaux...).
"""

from typing import Optional

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    NotFoundError,
    OpenAIError,
    PermissionDeniedError,
    OpenAI,
)
from openai.types.chat import ChatCompletionMessageParam

from ..exceptions import (
    BackendAuthError,
    BackendError,
    BackendNetworkError,
    BackendResponseError,
    BackendTimeoutError,
)
from ..logger import get_logger
from ..settings import DEFAULT_PROMPT_TEMPLATE
from .base import TranslationBackend

logger = get_logger(__name__)

DEFAULT_OPENAI_URL = "https://api.openai.com/v1"
DEFAULT_OPENAI_MODEL = "gpt-3.5-turbo"


def _base_url(api_url: str) -> str:
    """Accepte aussi l'URL complète de l'endpoint (.../v1/chat/completions)."""
    if not api_url:
        return DEFAULT_OPENAI_URL
    return api_url.rstrip("/").removesuffix("/chat/completions")


class OpenAIBackend(TranslationBackend):
    """
    Traduction via l'API Chat Completions.

    Le client OpenAI est thread-safe et partagé par tous les workers. Les
    retries du SDK sont désactivés : un échec est définitif pour le run.
    """

    name = "openai"

    def __init__(
        self,
        api_key: str,
        api_url: str = "",
        model: str = "",
        prompt_template: str = DEFAULT_PROMPT_TEMPLATE,
        temperature: Optional[float] = None,
        log_requests: bool = True,
    ):
        if not api_key:
            raise BackendAuthError("La clé API OpenAI ne peut pas être vide")
        super().__init__(model or DEFAULT_OPENAI_MODEL, prompt_template, log_requests)
        self.base_url = _base_url(api_url)
        self.temperature = temperature
        self.client = OpenAI(api_key=api_key, base_url=self.base_url, max_retries=0)
        logger.info(f"Client OpenAI initialisé: url={self.base_url}, modèle={self.model}")

    def _request(self, prompt: str, timeout: float) -> str:
        messages: list[ChatCompletionMessageParam] = [
            {"role": "user", "content": prompt},
        ]
        extra = {} if self.temperature is None else {"temperature": self.temperature}

        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                timeout=timeout,
                **extra,
            )
        except APITimeoutError as e:
            raise BackendTimeoutError(f"OpenAI: délai de {timeout:.0f}s dépassé") from e
        except APIConnectionError as e:
            raise BackendNetworkError(f"OpenAI: connexion impossible: {e}") from e
        except (AuthenticationError, PermissionDeniedError, NotFoundError, BadRequestError) as e:
            raise BackendAuthError(f"OpenAI: requête refusée ({e.status_code}): {e}") from e
        except APIStatusError as e:
            raise BackendNetworkError(f"OpenAI: statut HTTP {e.status_code}: {e}") from e
        except OpenAIError as e:
            raise BackendError(f"OpenAI: {e}") from e

        if not resp.choices or not resp.choices[0].message.content:
            finish_reason = resp.choices[0].finish_reason if resp.choices else "inconnue"
            raise BackendResponseError(
                f"OpenAI: réponse sans contenu (raison de fin: {finish_reason})"
            )

        logger.debug(f"OpenAI: réponse reçue ({len(resp.choices[0].message.content)} chars)")
        return resp.choices[0].message.content

    def close(self) -> None:
        self.client.close()

"""
Backend Anthropic Claude (Messages API).
"""

from anthropic import (
    Anthropic,
    AnthropicError,
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    NotFoundError,
    PermissionDeniedError,
)

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

DEFAULT_CLAUDE_MODEL = "claude-3-sonnet-20240229"
DEFAULT_MAX_TOKENS = 4096


class ClaudeBackend(TranslationBackend):
    """Traduction via ``client.messages.create``."""

    name = "claude"

    def __init__(
        self,
        api_key: str,
        api_url: str = "",
        model: str = "",
        prompt_template: str = DEFAULT_PROMPT_TEMPLATE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        log_requests: bool = True,
    ):
        if not api_key:
            raise BackendAuthError("La clé API Claude ne peut pas être vide")
        super().__init__(model or DEFAULT_CLAUDE_MODEL, prompt_template, log_requests)
        self.max_tokens = max_tokens
        # Le SDK ajoute lui-même /v1/messages
        base_url = api_url.rstrip("/").removesuffix("/v1/messages") or None
        self.client = Anthropic(api_key=api_key, base_url=base_url, max_retries=0)
        logger.info(f"Client Claude initialisé: modèle={self.model}")

    def _request(self, prompt: str, timeout: float) -> str:
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
                timeout=timeout,
            )
        except APITimeoutError as e:
            raise BackendTimeoutError(f"Claude: délai de {timeout:.0f}s dépassé") from e
        except APIConnectionError as e:
            raise BackendNetworkError(f"Claude: connexion impossible: {e}") from e
        except (AuthenticationError, PermissionDeniedError, NotFoundError, BadRequestError) as e:
            raise BackendAuthError(f"Claude: requête refusée ({e.status_code}): {e}") from e
        except APIStatusError as e:
            raise BackendNetworkError(f"Claude: statut HTTP {e.status_code}: {e}") from e
        except AnthropicError as e:
            raise BackendError(f"Claude: {e}") from e

        text = "".join(block.text for block in response.content if block.type == "text")
        if not text:
            raise BackendResponseError(
                f"Claude: réponse sans contenu texte (raison de fin: {response.stop_reason})"
            )
        if response.stop_reason == "max_tokens":
            logger.warning(f"Claude: réponse tronquée (max_tokens={self.max_tokens})")
        return text

    def close(self) -> None:
        self.client.close()

"""
Backends de traduction interchangeables.

Le provider est choisi une fois, à la configuration, par ``create_backend()``.
Le pipeline ne manipule ensuite que l'interface TranslationBackend.
"""

from typing import TYPE_CHECKING

from ..exceptions import ConfigError
from ..settings import SUPPORTED_PROVIDERS
from .base import TranslationBackend

if TYPE_CHECKING:
    from ..settings import Settings


def create_backend(settings: "Settings") -> TranslationBackend:
    """
    Instancie le backend correspondant à ``settings.provider``.

    Les SDK sont importés à la demande : seul celui du provider choisi
    est chargé.

    Raises:
        ConfigError: Si le provider n'est pas supporté
        BackendAuthError: Si la clé API est vide
    """
    provider = settings.provider.lower()
    kwargs = dict(
        api_key=settings.api_key,
        api_url=settings.api_url,
        model=settings.model,
        prompt_template=settings.prompt_template,
    )

    if provider == "openai":
        from .openai_backend import OpenAIBackend

        return OpenAIBackend(**kwargs)
    if provider == "claude":
        from .claude_backend import ClaudeBackend

        return ClaudeBackend(**kwargs)
    if provider == "gemini":
        from .gemini_backend import GeminiBackend

        return GeminiBackend(**kwargs)

    raise ConfigError(
        f"Provider '{settings.provider}' non supporté. "
        f"Providers disponibles: {', '.join(SUPPORTED_PROVIDERS)}"
    )


__all__ = ["TranslationBackend", "create_backend", "SUPPORTED_PROVIDERS"]

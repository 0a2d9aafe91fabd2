"""
Exceptions du traducteur de documents Markdown.

Hiérarchie :
    TranslatorError
    ├── ConfigError          (fatal : configuration ou pool invalide)
    ├── DiscoveryError       (fatal : répertoire source illisible)
    ├── TaskError            (isolée à un fichier, comptée comme échec)
    │   ├── StatCheckError
    │   ├── SourceReadError
    │   ├── ExtractionError
    │   └── WriteError
    └── BackendError         (isolée à un fichier, comptée comme échec)
        ├── BackendAuthError
        ├── BackendNetworkError
        ├── BackendTimeoutError
        └── BackendResponseError

Seules ConfigError et DiscoveryError interrompent l'exécution. Toutes les
autres sont interceptées par le worker au niveau de la tâche.
"""

from pathlib import Path
from typing import Optional


class TranslatorError(Exception):
    """Classe de base de toutes les erreurs du traducteur."""


class ConfigError(TranslatorError):
    """Configuration invalide (provider inconnu, clé API absente, concurrence <= 0...)."""


class DiscoveryError(TranslatorError):
    """Le répertoire source ne peut pas être parcouru."""


class TaskError(TranslatorError):
    """
    Erreur limitée au traitement d'un seul fichier.

    Attributes:
        path: Chemin du fichier concerné
    """

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class StatCheckError(TaskError):
    """Impossible de vérifier l'existence du fichier cible (hors "fichier absent")."""


class SourceReadError(TaskError):
    """Lecture du fichier source impossible."""


class ExtractionError(TaskError):
    """
    Les balises <translate>...</translate> sont absentes de la réponse du backend.

    Attributes:
        preview: Les premiers caractères de la réponse brute (diagnostic)
    """

    def __init__(self, message: str, preview: str, path: Optional[Path] = None):
        self.preview = preview
        super().__init__(message, path)

    def __repr__(self) -> str:
        return f"ExtractionError(preview={self.preview[:40]!r}...)"


class WriteError(TaskError):
    """Création du répertoire parent ou écriture du fichier cible impossible."""


class BackendError(TranslatorError):
    """Échec d'un appel au backend de traduction."""


class BackendAuthError(BackendError):
    """Clé API refusée ou configuration du backend invalide."""


class BackendNetworkError(BackendError):
    """Erreur de transport (connexion refusée, DNS, erreur serveur...)."""


class BackendTimeoutError(BackendError):
    """L'appel au backend a dépassé le délai autorisé."""


class BackendResponseError(BackendError):
    """Réponse vide ou mal formée."""

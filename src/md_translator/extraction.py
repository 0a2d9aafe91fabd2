"""
Extraction de la traduction depuis la réponse brute du backend.

Le prompt demande au modèle d'encadrer sa traduction avec des balises :

    <translate>
    ...document traduit...
    </translate>

Tout ce qui est hors des balises est ignoré. L'absence de balises est une
erreur : la réponse n'est jamais recopiée telle quelle.
"""

import re

from .exceptions import ExtractionError

START_TAG = "<translate>"
END_TAG = "</translate>"
PREVIEW_LENGTH = 300

# DOTALL : la traduction s'étend sur plusieurs lignes
# (.*?) : non-greedy, s'arrête à la première balise fermante
TRANSLATE_TAG_PATTERN = re.compile(
    re.escape(START_TAG) + r"(.*?)" + re.escape(END_TAG), re.DOTALL
)


def _preview(raw_output: str) -> str:
    if len(raw_output) > PREVIEW_LENGTH:
        return raw_output[:PREVIEW_LENGTH] + "..."
    return raw_output


def extract_translation(raw_output: str) -> str:
    """
    Retourne le contenu des balises <translate>...</translate>.

    Si la recherche échoue sur la chaîne brute, elle est retentée une fois
    après suppression des espaces en début et fin de réponse.

    Args:
        raw_output: Réponse brute du backend

    Returns:
        Le texte entre les balises, sans espaces en début et fin

    Raises:
        ExtractionError: Si aucune paire de balises n'est trouvée

    Example:
        >>> extract_translation("bruit<translate> Bonjour </translate>bruit")
        'Bonjour'
    """
    match = TRANSLATE_TAG_PATTERN.search(raw_output)
    if match is None:
        match = TRANSLATE_TAG_PATTERN.search(raw_output.strip())

    if match is None:
        preview = _preview(raw_output)
        raise ExtractionError(
            f"Balises {START_TAG}...{END_TAG} introuvables dans la réponse du backend. "
            f"Aperçu ({PREVIEW_LENGTH} caractères max): {preview}",
            preview=preview,
        )

    return match.group(1).strip()

"""
Lecture des documents source et écriture atomique des traductions.
"""

import os
import tempfile
from pathlib import Path

from .exceptions import SourceReadError, StatCheckError, WriteError


def target_exists(path: Path) -> bool:
    """
    Indique si le fichier cible existe déjà.

    Contrairement à ``Path.exists()``, une erreur autre que "fichier absent"
    (permission refusée sur un répertoire parent...) n'est pas masquée.

    Raises:
        StatCheckError: Si l'état du fichier ne peut pas être déterminé
    """
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError as e:
        raise StatCheckError(f"Vérification de {path} impossible: {e}", path) from e
    return True


def read_source(path: Path) -> str:
    """Charge le contenu complet d'un document source (UTF-8)."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Lecture de {path} impossible: {e}", path) from e


def write_translation(path: Path, content: str, overwrite: bool) -> bool:
    """
    Écrit la traduction dans path en créant les répertoires parents.

    Sans overwrite, un fichier déjà présent est laissé intact et la fonction
    retourne False (ce n'est pas une erreur). L'écriture passe par un fichier
    temporaire du même répertoire puis ``os.replace`` : le fichier cible
    contient soit l'ancien contenu, soit le nouveau, jamais un contenu partiel.

    Args:
        path: Fichier cible
        content: Contenu traduit
        overwrite: Remplacer un fichier existant

    Returns:
        True si le fichier a été écrit, False s'il existait déjà

    Raises:
        WriteError: Si la vérification, la création du répertoire ou
                    l'écriture échoue
    """
    if not overwrite:
        try:
            if target_exists(path):
                return False
        except StatCheckError as e:
            raise WriteError(str(e), path) from e

    directory = path.parent
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(f"Création du répertoire {directory} impossible: {e}", path) from e

    try:
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{path.name}.", suffix=".tmp")
    except OSError as e:
        raise WriteError(f"Écriture de {path} impossible: {e}", path) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise WriteError(f"Écriture de {path} impossible: {e}", path) from e

    return True

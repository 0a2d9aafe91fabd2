"""
Recherche des documents à traduire dans le répertoire source.
"""

import os
from pathlib import Path

from .exceptions import DiscoveryError
from .logger import get_logger

logger = get_logger(__name__)


def discover_files(source_dir: str | Path, extension: str = ".md") -> list[str]:
    """
    Parcourt récursivement source_dir et retourne les documents trouvés.

    Un fichier est retenu si c'est un fichier régulier dont le nom se termine
    par ``extension`` (sans tenir compte de la casse). La liste complète n'est
    retournée qu'en fin de parcours : l'appelant a besoin du total avant de
    démarrer les workers.

    Politique d'erreurs :
        - racine absente, non répertoire ou illisible : DiscoveryError
        - sous-répertoire illisible : avertissement, sous-arbre ignoré
        - entrée dont le type ne peut être lu : avertissement, entrée ignorée

    Args:
        source_dir: Répertoire racine
        extension: Extension recherchée (défaut: ".md")

    Returns:
        Chemins relatifs à source_dir, séparateur "/". L'ordre n'est pas garanti.

    Raises:
        DiscoveryError: Si la racine ne peut pas être parcourue

    Example:
        >>> discover_files("pages")
        ['common/tar.md', 'linux/apt.md', ...]
    """
    root = Path(source_dir)
    suffix = extension.lower()
    logger.info(f"🔍 Recherche des fichiers '{suffix}' dans {root}")

    if not root.is_dir():
        raise DiscoveryError(f"Le répertoire source '{root}' n'existe pas ou n'est pas un répertoire")

    try:
        root_entries = list(os.scandir(root))
    except OSError as e:
        raise DiscoveryError(f"Répertoire source '{root}' illisible: {e}") from e

    files: list[str] = []
    pending: list[list[os.DirEntry]] = [root_entries]

    while pending:
        for entry in pending.pop():
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file()
            except OSError as e:
                logger.warning(f"⚠️ Entrée ignorée {entry.path!r}: {e}")
                continue

            if is_dir:
                try:
                    pending.append(list(os.scandir(entry.path)))
                except OSError as e:
                    logger.warning(f"⚠️ Répertoire ignoré {entry.path!r}: {e}")
                continue

            if is_file and entry.name.lower().endswith(suffix):
                relative = Path(entry.path).relative_to(root)
                files.append(relative.as_posix())

    logger.info(f"✅ Recherche terminée: {len(files)} fichier(s) trouvé(s)")
    return files

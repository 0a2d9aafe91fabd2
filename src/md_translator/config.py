"""
Réglages globaux du processus (niveaux et répertoire des logs).

Ces valeurs sont lues à l'import des modules, avant le chargement des
Settings d'une exécution. La CLI les verrouille une fois ses options
appliquées.
"""

import logging


class ConfigBase:
    # Attribut de classe pour le singleton
    _instance = None
    _locked: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self):
        if not self._locked:
            object.__setattr__(self, "_locked", True)

    def __setattr__(self, name, value):
        if self._locked:
            raise AttributeError(f"Configuration verrouillée: impossible de modifier '{name}'")
        super().__setattr__(name, value)


class LoggerLevel(ConfigBase):
    level: int = logging.DEBUG
    console_level: int = logging.INFO
    file_level: int = logging.DEBUG
    log_dir: str = "logs"


def lock_config():
    """Verrouille la configuration pour empêcher les modifications ultérieures."""
    LoggerLevel().lock()

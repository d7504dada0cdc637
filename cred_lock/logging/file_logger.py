"""Implementation concrete du logger avec fichier."""

import logging
import sys
from pathlib import Path
from typing import Optional

from cred_lock.logging.base import Logger

DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_FILE_MODE = 0o600


class FileLogger(Logger):
    """
    Logger qui ecrit dans un fichier avec option console.

    Caracteristiques:
    - Logger unique par fichier, handlers reutilises
    - Fichier cree en mode 0600 (le journal d'audit cite les profils)
    - Encodage UTF-8 explicite, flush apres chaque ligne
    - Pas de propagation vers le logger racine
    - Sortie console optionnelle sur stderr : stdout porte le
      document de credentials et ne doit rien recevoir d'autre
    """

    def __init__(
        self,
        log_file: str,
        level: str = "INFO",
        log_format: str = DEFAULT_FORMAT,
        console_output: bool = False
    ) -> None:
        """
        Initialise le logger.

        Args:
            log_file: Chemin du fichier de log ("~" est expanse)
            level: Nom du niveau de log (DEBUG, INFO, WARNING, ERROR)
            log_format: Format des lignes (syntaxe logging)
            console_output: Activer la sortie stderr en plus du fichier
        """
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(mode=LOG_FILE_MODE, exist_ok=True)
        self.log_file = str(path)

        log_level = logging.getLevelName(str(level).upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

        self.logger = logging.getLogger(f"cred_lock:{self.log_file}")
        self.logger.setLevel(log_level)
        self.logger.propagate = False

        self.handler: Optional[logging.Handler] = None
        if self.logger.handlers:
            self.handler = self.logger.handlers[0]
            return

        formatter = logging.Formatter(log_format)
        handlers: list[logging.Handler] = [
            logging.FileHandler(self.log_file, encoding="utf-8")
        ]
        if console_output:
            handlers.append(logging.StreamHandler(sys.stderr))
        for handler in handlers:
            handler.setLevel(log_level)
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
        self.handler = handlers[0]

    def _emit(self, level: int, message: str) -> None:
        self.logger.log(level, message)
        if self.handler:
            self.handler.flush()

    def log_info(self, message: str) -> None:
        """Log un message d'information."""
        self._emit(logging.INFO, message)

    def log_warning(self, message: str) -> None:
        """Log un avertissement."""
        self._emit(logging.WARNING, message)

    def log_error(self, message: str) -> None:
        """Log une erreur."""
        self._emit(logging.ERROR, message)

    def close(self) -> None:
        """Ferme et detache les handlers du logger."""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)
        self.handler = None

"""Executeur de commandes via subprocess.

SubprocessCommandExecutor pilote l'outil /usr/bin/security pour le
backend trousseau macOS. Seule la ligne de commande est journalisee ;
le texte envoye sur l'entree standard (qui peut porter un secret)
ne l'est jamais.

Example :

    executor = SubprocessCommandExecutor(logger=logger)
    result = executor.run(["security", "-i"], input=commands)
    print(result.return_code)
"""

import shlex
import subprocess  # nosec B404
import time
from typing import List, Optional, Sequence

from cred_lock.commands.base import CommandExecutor, CommandResult
from cred_lock.logging.base import Logger


def format_command(command: Sequence[str]) -> str:
    """Rend une commande lisible pour les logs (arguments cites)."""
    return shlex.join(command)


class SubprocessCommandExecutor(CommandExecutor):
    """Execute des commandes via subprocess.run, sortie capturee.

    Un code retour non nul n'est pas une exception : le backend
    appelant interprete le CommandResult. Un processus qui ne demarre
    pas donne return_code -1. Aucun timeout : l'invite SecurityAgent
    peut attendre l'utilisateur.

    Attributes:
        _logger: Logger optionnel.
    """

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self._logger = logger

    def _log(self, message: str, error: bool = False) -> None:
        if not self._logger:
            return
        if error:
            self._logger.log_error(message)
        else:
            self._logger.log_info(message)

    def run(
        self,
        command: List[str],
        input: Optional[str] = None,
    ) -> CommandResult:
        """Execute une commande et retourne le resultat.

        Args:
            command: Commande sous forme de liste.
            input: Texte envoye sur l'entree standard (None :
                entree standard heritee).

        Returns:
            CommandResult avec les sorties capturees.
        """
        printable = format_command(command)
        self._log(f"Execution : {printable}")

        start = time.monotonic()
        try:
            proc = subprocess.run(  # nosec B603
                command,
                input=input,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            self._log(f"Erreur systeme : {e}", error=True)
            return CommandResult(
                command, -1, "", str(e), False, time.monotonic() - start,
            )

        if proc.returncode != 0:
            self._log(
                f"Code retour {proc.returncode} : {printable}", error=True
            )
        return CommandResult(
            command=command,
            return_code=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
            success=proc.returncode == 0,
            duration=time.monotonic() - start,
        )

"""Interfaces abstraites et structures de donnees pour l'execution
de commandes systeme.

Ce module definit :
    - CommandResult : Resultat immuable d'une execution de commande.
    - CommandExecutor : Interface abstraite pour les executeurs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class CommandResult:
    """Resultat de l'execution d'une commande systeme.

    Attributes:
        command: Commande executee sous forme de liste.
        return_code: Code de retour du processus (-1 si le
            processus n'a pas pu etre lance).
        stdout: Sortie standard capturee.
        stderr: Sortie d'erreur capturee.
        success: True si la commande a reussi (code 0).
        duration: Duree d'execution en secondes.
    """

    command: List[str]
    return_code: int
    stdout: str
    stderr: str
    success: bool
    duration: float


class CommandExecutor(ABC):
    """Interface abstraite pour l'execution de commandes systeme."""

    @abstractmethod
    def run(
        self,
        command: List[str],
        input: Optional[str] = None,
    ) -> CommandResult:
        """Execute une commande et retourne le resultat.

        Les valeurs secretes passent par ``input`` (entree standard) :
        la ligne de commande est visible de tous les utilisateurs
        locaux et figure dans les logs.

        Args:
            command: Commande sous forme de liste.
            input: Texte envoye sur l'entree standard (None : aucun).

        Returns:
            Resultat de l'execution.
        """
        pass

"""Interfaces abstraites pour la gestion des erreurs."""

import sys
from abc import ABC, abstractmethod


class ErrorHandler(ABC):
    """Interface de base pour les handlers d'erreurs.

    Chaque implementation concrete definit une strategie
    de traitement des erreurs (affichage console, logging, etc.).
    """

    @abstractmethod
    def handle(self, error: BaseException) -> None:
        """Traite une erreur.

        Args:
            error: L'exception a traiter.
        """
        pass


class ErrorHandlerChain:
    """Diffuse les erreurs a tous les handlers enregistres.

    Chaque erreur est transmise a tous les handlers dans l'ordre
    d'ajout (ex: console puis logger).
    """

    def __init__(self) -> None:
        """Initialise la chaine avec une liste vide de handlers."""
        self.handlers: list[ErrorHandler] = []

    def add_handler(self, handler: ErrorHandler) -> None:
        """Ajoute un handler a la chaine.

        Args:
            handler: Le handler d'erreurs a ajouter.
        """
        self.handlers.append(handler)

    def handle(self, error: BaseException) -> None:
        """Fait passer l'erreur a travers tous les handlers.

        Args:
            error: L'exception a diffuser.
        """
        for handler in self.handlers:
            handler.handle(error)

    def handle_and_exit(
        self, error: BaseException, exit_code: int = 1
    ) -> None:
        """Gere l'erreur et termine le programme.

        Args:
            error: L'exception a traiter avant la sortie.
            exit_code: Code de sortie du programme (defaut: 1).
        """
        self.handle(error)
        sys.exit(exit_code)

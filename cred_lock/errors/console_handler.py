"""
    ConsoleErrorHandler (generique, configurable)

La sortie standard est reservee au document JSON lu par la CLI AWS :
tous les messages d'erreur partent sur stderr.
"""
import sys
from typing import TextIO

from cred_lock.errors.base import ErrorHandler
from cred_lock.errors.exceptions import (ApplicationError,
                                         ConfigurationError)


class ConsoleErrorHandler(ErrorHandler):
    """Handler pour afficher les erreurs dans la console.

    Distingue les erreurs connues (ApplicationError) des erreurs
    inattendues, et affiche un message de solution adapte au
    type d'erreur.
    """

    def __init__(
        self,
        base_error_type: type[Exception] = ApplicationError,
        solutions: dict[type[Exception], str] | None = None,
        stream: TextIO | None = None,
    ) -> None:
        """Initialise le handler console.

        Args:
            base_error_type: Classe de base pour distinguer erreurs
                connues/inconnues (defaut: ApplicationError).
            solutions: Dictionnaire {TypeException: "message solution"}.
                La premiere entree dont le type correspond (isinstance)
                est retenue, dans l'ordre d'insertion.
            stream: Flux de sortie (defaut: sys.stderr au moment de
                l'affichage).
        """
        self.base_error_type = base_error_type
        self.solutions = solutions or {}
        self._stream = stream

    def _print(self, message: str) -> None:
        print(message, file=self._stream or sys.stderr)

    def handle(self, error: BaseException) -> None:
        """Affiche l'erreur dans la console avec des messages utilisateur.

        Args:
            error: L'exception a afficher.
        """
        if isinstance(error, self.base_error_type):
            self._handle_known_error(error)
        else:
            self._handle_unknown_error(error)

    def _solution_for(self, error: BaseException) -> str:
        """Retourne la suggestion associee au type de l'erreur."""
        for error_type, solution in self.solutions.items():
            if isinstance(error, error_type):
                return solution
        if isinstance(error, ConfigurationError):
            return "Verifiez votre fichier de configuration."
        return "Voir les suggestions ci-dessus."

    def _handle_known_error(self, error: BaseException) -> None:
        """Gere les erreurs connues du projet.

        Affiche le type et le message de l'erreur, suivi d'une
        suggestion de solution adaptee via isinstance.

        Args:
            error: L'exception metier a traiter.
        """
        self._print(f"\n🛑 {type(error).__name__}: {str(error)}")
        self._print(f"\n🔧 Solution : {self._solution_for(error)}")

    def _handle_unknown_error(self, error: BaseException) -> None:
        """Gere les erreurs inattendues.

        Args:
            error: L'exception non prevue a afficher.
        """
        self._print(f"\n💥 Erreur inattendue: {str(error)}")
        self._print(f"Type: {type(error).__name__}")
        self._print(
            "\n📋 Cela peut etre un bug. Veuillez ouvrir une issue "
            "avec ces informations."
        )

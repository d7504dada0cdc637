"""
    LoggerErrorHandler

Ecrit dans le fichier de log la trace d'une commande en echec. Les
erreurs du magasin portent un ``kind`` (ErrorKind) repris entre
crochets pour filtrer le log sans analyser les messages.
"""
from cred_lock.errors.base import ErrorHandler
from cred_lock.errors.exceptions import ApplicationError
from cred_lock.logging.base import Logger


class LoggerErrorHandler(ErrorHandler):
    """Handler qui journalise les erreurs via le Logger injecte."""

    def __init__(self,
                 logger: Logger,
                 base_error_type: type[Exception] = ApplicationError
                 ) -> None:
        """Initialise le handler.

        Args:
            logger: Logger de destination.
            base_error_type: Classe de base des erreurs connues.
        """
        self.logger = logger
        self.base_error_type = base_error_type

    @staticmethod
    def _describe(error: BaseException) -> str:
        kind = getattr(error, "kind", None)
        name = type(error).__name__
        if kind is not None:
            name = f"{name} [{kind}]"
        return f"{name}: {error}"

    def handle(self, error: BaseException) -> None:
        """Journalise l'erreur, prefixee si elle est inattendue.

        Args:
            error: L'exception a journaliser.
        """
        if isinstance(error, self.base_error_type):
            self.logger.log_error(self._describe(error))
        else:
            self.logger.log_error(
                f"Erreur inattendue: {self._describe(error)}"
            )

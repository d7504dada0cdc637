"""Exceptions pour le module credentials.

Hierarchie fermee : chaque classe porte un ErrorKind dans l'attribut
de classe ``kind`` pour que l'appelant puisse brancher sur le type
d'erreur plutot que sur le texte du message. Toutes heritent de
ApplicationError pour s'integrer dans la chaine d'error handlers
(ConsoleErrorHandler, LoggerErrorHandler).
"""

from enum import StrEnum

from cred_lock.errors.exceptions import ApplicationError


class ErrorKind(StrEnum):
    """Categories d'erreurs du magasin de credentials."""

    CONTAINER_EXISTS = "container_exists"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    DECODE_FAILURE = "decode_failure"
    DUPLICATE_LABEL = "duplicate_label"
    BACKEND_FAILURE = "backend_failure"


class CredLockError(ApplicationError):
    """Exception de base pour toutes les erreurs du magasin."""

    kind: ErrorKind = ErrorKind.BACKEND_FAILURE


class ContainerExistsError(CredLockError):
    """Un conteneur portant ce nom existe deja."""

    kind = ErrorKind.CONTAINER_EXISTS


class NotFoundError(CredLockError):
    """Conteneur ou enregistrement introuvable."""

    kind = ErrorKind.NOT_FOUND


class ContainerNotFoundError(NotFoundError):
    """Aucun conteneur ne porte le nom demande."""


class RecordNotFoundError(NotFoundError):
    """Aucun enregistrement ne correspond au couple (label, account)."""


class PermissionDeniedError(CredLockError):
    """Le systeme (ou l'utilisateur via une invite) a refuse l'acces."""

    kind = ErrorKind.PERMISSION_DENIED


class DecodeFailureError(CredLockError):
    """Les octets du secret ne sont pas du texte UTF-8."""

    kind = ErrorKind.DECODE_FAILURE


class DuplicateLabelConflictError(CredLockError):
    """Le backend refuse un doublon de label."""

    kind = ErrorKind.DUPLICATE_LABEL


class BackendFailureError(CredLockError):
    """Toute autre erreur du magasin securise du systeme."""

    kind = ErrorKind.BACKEND_FAILURE

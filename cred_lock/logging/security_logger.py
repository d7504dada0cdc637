"""Journal d'audit des operations sur le magasin de credentials.

Chaque operation qui touche au conteneur securise (creation,
ajout, lecture, suppression d'un enregistrement, refus d'acces)
est tracee en JSON structure via le Logger injecte.

Les valeurs secretes ne sont jamais journalisees : seuls le nom
du conteneur, le profil et, au besoin, un identifiant de cle
d'acces masque figurent dans les details.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from cred_lock.logging.base import Logger

REDACTED = "********"
SECRET_DETAIL_KEYS = frozenset({
    "secret_access_key",
    "secretData",
    "session_token",
    "password",
})


class SecurityEventType(StrEnum):
    """Types d'evenements d'audit tracables."""

    CONTAINER_CREATED = "container.created"
    RECORD_ADDED = "record.added"
    RECORD_READ = "record.read"
    RECORD_REMOVED = "record.removed"
    ACCESS_DENIED = "access.denied"


@dataclass(frozen=True)
class SecurityEvent:
    """Evenement d'audit structure.

    Attributes:
        event_type: Type d'evenement (SecurityEventType).
        resource: Conteneur concerne.
        details: Contexte additionnel (profil, nombre d'elements...).
        severity: Niveau de severite (info, warning, error, critical).
        timestamp: Horodatage ISO 8601 UTC (auto-genere).
    """

    event_type: SecurityEventType
    resource: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    severity: str = "info"
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


def mask_access_key(access_key_id: str) -> str:
    """Masque un identifiant de cle d'acces pour les logs.

    Seuls les quatre derniers caracteres restent visibles.

    Args:
        access_key_id: Identifiant complet.

    Returns:
        Identifiant masque, ex: "****WXYZ".
    """
    if len(access_key_id) <= 4:
        return "*" * len(access_key_id)
    return "*" * 4 + access_key_id[-4:]


class SecurityLogger:
    """Logger specialise pour les evenements d'audit.

    Utilisation :
        audit = SecurityLogger(file_logger)
        audit.log_event(SecurityEvent(
            event_type=SecurityEventType.RECORD_ADDED,
            resource="aws-credlock",
            details={"profile": "default"},
        ))
    """

    def __init__(self, logger: Logger) -> None:
        """Initialise le logger d'audit.

        Args:
            logger: Instance de Logger pour l'emission des messages.
        """
        self._logger = logger

    def log_event(self, event: SecurityEvent) -> None:
        """Enregistre un evenement en JSON structure.

        Les details dont la cle designe un secret sont remplaces
        par des etoiles avant ecriture.

        Args:
            event: Evenement a journaliser.
        """
        details = {
            key: REDACTED if key in SECRET_DETAIL_KEYS else value
            for key, value in event.details.items()
        }
        message = json.dumps(
            {
                "security_event": str(event.event_type),
                "timestamp": event.timestamp,
                "resource": event.resource,
                "severity": event.severity,
                "details": details,
            },
            ensure_ascii=False,
            default=str,
        )
        emit = {
            "critical": self._logger.log_error,
            "error": self._logger.log_error,
            "warning": self._logger.log_warning,
        }.get(event.severity, self._logger.log_info)
        emit(message)

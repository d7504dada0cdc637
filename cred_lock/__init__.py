"""
cred-lock - credentials AWS dans le trousseau systeme.

Modules disponibles:
- credentials: magasin securise, backends, codec credential_process
- config: chargement et validation de la configuration (TOML, JSON)
- logging: Logger, FileLogger, journal d'audit
- errors: exceptions de base et handlers d'erreurs
- commands: execution de commandes systeme (outil security macOS)
- cli: point d'entree en ligne de commande
"""

__version__ = "1.0.0"

from cred_lock.logging import Logger, FileLogger
from cred_lock.config import CredLockSettings, load_settings
from cred_lock.credentials import (
    Credentials,
    CredentialManager,
    CredLockError,
    StoreSession,
    create_record_store,
    encode_to_json,
)

__all__ = [
    "__version__",
    "Logger",
    "FileLogger",
    "CredLockSettings",
    "load_settings",
    "Credentials",
    "CredentialManager",
    "CredLockError",
    "StoreSession",
    "create_record_store",
    "encode_to_json",
]

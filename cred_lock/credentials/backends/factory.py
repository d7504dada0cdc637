"""Selection du backend systeme au demarrage.

Le choix "auto" s'appuie sur keyring.get_keyring(), qui respecte
PYTHON_KEYRING_BACKEND et keyringrc.cfg, pour reconnaitre le
trousseau natif de la plateforme :

- keyring.backends.macOS          -> KeychainRecordStore
- keyring.backends.SecretService  -> SecretServiceRecordStore

Un backend chaine (keyring.backends.chainer) est parcouru dans son
ordre de priorite.
"""

from typing import Any, Callable, Dict, Iterable, Optional

import keyring

from cred_lock.credentials.backends.keychain import KeychainRecordStore
from cred_lock.credentials.backends.memory import InMemoryRecordStore
from cred_lock.credentials.backends.secret_service import (
    SecretServiceRecordStore,
)
from cred_lock.credentials.base import SecretRecordStore
from cred_lock.credentials.exceptions import BackendFailureError
from cred_lock.logging.base import Logger

KEYRING_MODULES: Dict[str, str] = {
    "keyring.backends.macOS": "keychain",
    "keyring.backends.SecretService": "secret-service",
}


def _flatten(backend: Any) -> Iterable[Any]:
    """Deplie un ChainerBackend en ses backends enfants."""
    children = getattr(backend, "backends", None)
    if children:
        for child in children:
            yield from _flatten(child)
    else:
        yield backend


def detect_backend_name(
    get_keyring: Callable[[], Any] = keyring.get_keyring,
) -> str:
    """Determine le backend natif via la resolution de keyring.

    Args:
        get_keyring: Fonction retournant le backend keyring actif
            (injectable pour les tests).

    Returns:
        "keychain" ou "secret-service".

    Raises:
        BackendFailureError: si aucun trousseau natif n'est reconnu.
    """
    active = get_keyring()
    for backend in _flatten(active):
        module = type(backend).__module__
        for prefix, name in KEYRING_MODULES.items():
            if module == prefix or module.startswith(prefix + "."):
                return name
    raise BackendFailureError(
        f"Aucun trousseau natif pris en charge "
        f"(backend keyring actif : {type(active).__name__}). "
        "Utilisez [store] backend = \"keychain\" ou \"secret-service\"."
    )


def create_record_store(
    backend: str = "auto",
    logger: Optional[Logger] = None,
    security_binary: str = "/usr/bin/security",
    get_keyring: Callable[[], Any] = keyring.get_keyring,
) -> SecretRecordStore:
    """Instancie le magasin d'enregistrements demande.

    Args:
        backend: "auto", "keychain", "secret-service" ou "memory".
        logger: Logger optionnel partage avec le backend.
        security_binary: Chemin de l'outil security (macOS).
        get_keyring: Resolution keyring pour le mode "auto".

    Returns:
        Instance de SecretRecordStore.

    Raises:
        BackendFailureError: backend inconnu ou non detectable.
    """
    if backend == "auto":
        backend = detect_backend_name(get_keyring)
        if logger:
            logger.log_info(f"Backend detecte : {backend}")

    if backend == "keychain":
        return KeychainRecordStore(
            security_binary=security_binary, logger=logger
        )
    if backend == "secret-service":
        return SecretServiceRecordStore(logger=logger)
    if backend == "memory":
        return InMemoryRecordStore(logger=logger)
    raise BackendFailureError(f"Backend inconnu : {backend!r}")

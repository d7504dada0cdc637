"""Magasin securise de credentials AWS.

Stocke des jeux (access key id, secret access key) dans un
conteneur nomme du trousseau systeme et les restitue au format
credential_process de la CLI AWS.

Backends :
    - KeychainRecordStore      : trousseau macOS (outil security)
    - SecretServiceRecordStore : Secret Service (GNOME Keyring,
      KWallet, KeePassXC)
    - InMemoryRecordStore      : portee isolee au processus

Exemple d'utilisation :

    from cred_lock.credentials import (
        CredentialManager,
        StoreSession,
        create_record_store,
    )

    store = create_record_store("auto")
    manager = CredentialManager(StoreSession(store, "aws-credlock"))
    for document in manager.render("default"):
        print(document)
"""

from cred_lock.credentials.backends import (
    InMemoryRecordStore,
    KeychainRecordStore,
    SecretServiceRecordStore,
    create_record_store,
    detect_backend_name,
)
from cred_lock.credentials.base import SecretRecordStore
from cred_lock.credentials.codec import decode, decode_secret, encode_to_json
from cred_lock.credentials.exceptions import (
    BackendFailureError,
    ContainerExistsError,
    ContainerNotFoundError,
    CredLockError,
    DecodeFailureError,
    DuplicateLabelConflictError,
    ErrorKind,
    NotFoundError,
    PermissionDeniedError,
    RecordNotFoundError,
)
from cred_lock.credentials.manager import CredentialManager
from cred_lock.credentials.models import (
    Container,
    ContainerSettings,
    Credentials,
    RecordQuery,
    SecretRecord,
)
from cred_lock.credentials.session import StoreSession

__all__ = [
    # ABC
    "SecretRecordStore",
    # Modeles
    "Container",
    "ContainerSettings",
    "Credentials",
    "RecordQuery",
    "SecretRecord",
    # Codec
    "decode",
    "decode_secret",
    "encode_to_json",
    # Exceptions
    "ErrorKind",
    "CredLockError",
    "ContainerExistsError",
    "NotFoundError",
    "ContainerNotFoundError",
    "RecordNotFoundError",
    "PermissionDeniedError",
    "DecodeFailureError",
    "DuplicateLabelConflictError",
    "BackendFailureError",
    # Backends
    "KeychainRecordStore",
    "SecretServiceRecordStore",
    "InMemoryRecordStore",
    "create_record_store",
    "detect_backend_name",
    # Session et facade
    "StoreSession",
    "CredentialManager",
]

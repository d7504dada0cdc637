"""Backends systeme du magasin d'enregistrements."""

from cred_lock.credentials.backends.factory import (
    create_record_store,
    detect_backend_name,
)
from cred_lock.credentials.backends.keychain import KeychainRecordStore
from cred_lock.credentials.backends.memory import InMemoryRecordStore
from cred_lock.credentials.backends.secret_service import (
    SecretServiceRecordStore,
)

__all__ = [
    "KeychainRecordStore",
    "SecretServiceRecordStore",
    "InMemoryRecordStore",
    "create_record_store",
    "detect_backend_name",
]

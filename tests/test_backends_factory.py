"""Tests de la selection du backend systeme."""

from unittest.mock import MagicMock

import pytest

from cred_lock.credentials import (
    BackendFailureError,
    InMemoryRecordStore,
    KeychainRecordStore,
    SecretServiceRecordStore,
    create_record_store,
    detect_backend_name,
)
from cred_lock.logging.base import Logger


def keyring_backend(module: str, name: str = "Keyring", **attrs):
    """Instance d'une classe dont le module imite un backend keyring."""
    cls = type(name, (), {"__module__": module, **attrs})
    return cls()


MACOS = keyring_backend("keyring.backends.macOS")
SECRET_SERVICE = keyring_backend("keyring.backends.SecretService")
FAIL = keyring_backend("keyring.backends.fail")


class TestDetectBackendName:
    """Tests de detect_backend_name."""

    def test_macos(self) -> None:
        assert detect_backend_name(lambda: MACOS) == "keychain"

    def test_secret_service(self) -> None:
        assert detect_backend_name(
            lambda: SECRET_SERVICE
        ) == "secret-service"

    def test_sous_module(self) -> None:
        backend = keyring_backend("keyring.backends.macOS.api")
        assert detect_backend_name(lambda: backend) == "keychain"

    def test_backend_chaine(self) -> None:
        chainer = keyring_backend(
            "keyring.backends.chainer",
            "ChainerBackend",
            backends=[FAIL, SECRET_SERVICE, MACOS],
        )
        assert detect_backend_name(lambda: chainer) == "secret-service"

    def test_aucun_trousseau_natif(self) -> None:
        with pytest.raises(BackendFailureError, match="Aucun trousseau"):
            detect_backend_name(lambda: FAIL)


class TestCreateRecordStore:
    """Tests de create_record_store."""

    def test_auto_macos(self) -> None:
        logger = MagicMock(spec=Logger)
        store = create_record_store(
            "auto", logger=logger, get_keyring=lambda: MACOS
        )
        assert isinstance(store, KeychainRecordStore)
        logger.log_info.assert_called_once()

    def test_auto_secret_service(self) -> None:
        store = create_record_store(
            "auto", get_keyring=lambda: SECRET_SERVICE
        )
        assert isinstance(store, SecretServiceRecordStore)

    def test_explicite_ne_consulte_pas_keyring(self) -> None:
        get_keyring = MagicMock()
        store = create_record_store("memory", get_keyring=get_keyring)
        assert isinstance(store, InMemoryRecordStore)
        get_keyring.assert_not_called()

    def test_keychain_explicite(self) -> None:
        store = create_record_store(
            "keychain", security_binary="/opt/security"
        )
        assert isinstance(store, KeychainRecordStore)
        assert store.backend_name == "keychain"

    def test_backend_inconnu(self) -> None:
        with pytest.raises(BackendFailureError, match="inconnu"):
            create_record_store("vault")

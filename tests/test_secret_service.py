"""Tests du backend Secret Service (D-Bus simule)."""

import unittest
from unittest.mock import MagicMock, patch

from secretstorage.exceptions import (
    LockedException,
    PromptDismissedException,
    SecretServiceNotAvailableException,
)

from cred_lock.credentials import (
    BackendFailureError,
    Container,
    ContainerExistsError,
    ContainerNotFoundError,
    ContainerSettings,
    PermissionDeniedError,
    RecordNotFoundError,
    RecordQuery,
    SecretServiceRecordStore,
)
from cred_lock.logging.base import Logger

MODULE = "cred_lock.credentials.backends.secret_service.secretstorage"
GENERIC = {"xdg:schema": "org.freedesktop.Secret.Generic"}


def make_item(label, account, secret=b"", locked=False):
    item = MagicMock()
    item.get_label.return_value = label
    item.get_attributes.return_value = {
        "xdg:schema": "org.freedesktop.Secret.Generic",
        "account": account,
    }
    item.get_secret.return_value = secret
    item.is_locked.return_value = locked
    item.unlock.return_value = False
    return item


def make_collection(label="aws-credlock", items=(), locked=False):
    collection = MagicMock()
    collection.get_label.return_value = label
    collection.is_locked.return_value = locked
    collection.unlock.return_value = False
    collection.search_items.side_effect = lambda attributes: iter(
        [
            item for item in items
            if all(
                item.get_attributes()[key] == value
                for key, value in attributes.items()
            )
        ]
    )
    return collection


class SecretServiceTestCase(unittest.TestCase):
    """Base : connexion D-Bus et module secretstorage simules."""

    def setUp(self):
        self.connection = MagicMock()
        self.factory = MagicMock(return_value=self.connection)
        self.logger = MagicMock(spec=Logger)
        self.store = SecretServiceRecordStore(
            connection_factory=self.factory, logger=self.logger
        )
        patcher = patch(MODULE)
        self.secretstorage = patcher.start()
        self.addCleanup(patcher.stop)
        self.secretstorage.get_all_collections.return_value = []

    def container_with(self, *items):
        collection = make_collection(items=items)
        return Container("aws-credlock", handle=collection), collection


class TestConnexion(SecretServiceTestCase):
    """Tests du cycle de vie de la connexion."""

    def test_backend_name(self):
        self.assertEqual(self.store.backend_name, "secret-service")

    def test_contexte_ouvre_et_ferme(self):
        with self.store:
            self.factory.assert_called_once()
        self.connection.close.assert_called_once()

    def test_connexion_reutilisee(self):
        self.store.connect()
        self.store.connect()
        self.factory.assert_called_once()

    def test_service_indisponible(self):
        self.factory.side_effect = SecretServiceNotAvailableException(
            "pas de bus"
        )
        with self.assertRaises(BackendFailureError):
            self.store.connect()

    def test_is_available(self):
        self.secretstorage.check_service_availability.return_value = True
        self.assertTrue(self.store.is_available())
        self.connection.close.assert_called_once()

    def test_is_available_sans_bus(self):
        self.factory.side_effect = SecretServiceNotAvailableException("x")
        self.assertFalse(self.store.is_available())


class TestCollections(SecretServiceTestCase):
    """Tests de creation et d'ouverture des collections."""

    def test_create(self):
        created = make_collection()
        self.secretstorage.create_collection.return_value = created

        container = self.store.create_container("aws-credlock")

        self.secretstorage.create_collection.assert_called_once_with(
            self.connection, "aws-credlock"
        )
        self.assertEqual(container.name, "aws-credlock")
        self.assertIs(container.handle, created)

    def test_create_existante(self):
        self.secretstorage.get_all_collections.return_value = [
            make_collection("login"), make_collection("aws-credlock"),
        ]
        with self.assertRaises(ContainerExistsError):
            self.store.create_container("aws-credlock")
        self.secretstorage.create_collection.assert_not_called()

    def test_create_invite_refusee(self):
        self.secretstorage.create_collection.side_effect = (
            PromptDismissedException("annule")
        )
        with self.assertRaises(PermissionDeniedError):
            self.store.create_container("aws-credlock")

    def test_open_absente(self):
        self.secretstorage.get_all_collections.return_value = [
            make_collection("login")
        ]
        with self.assertRaises(ContainerNotFoundError):
            self.store.open_container("aws-credlock")

    def test_open_deverrouille(self):
        collection = make_collection(locked=True)
        self.secretstorage.get_all_collections.return_value = [collection]

        container = self.store.open_container("aws-credlock")

        collection.unlock.assert_called_once()
        self.assertIs(container.handle, collection)

    def test_open_deverrouillage_annule(self):
        collection = make_collection(locked=True)
        collection.unlock.return_value = True
        self.secretstorage.get_all_collections.return_value = [collection]
        with self.assertRaises(PermissionDeniedError):
            self.store.open_container("aws-credlock")

    def test_apply_settings_journalise(self):
        container, collection = self.container_with()
        self.store.apply_settings(container, ContainerSettings())
        self.logger.log_warning.assert_called_once()
        collection.assert_not_called()


class TestItems(SecretServiceTestCase):
    """Tests de recherche, ajout et suppression d'items."""

    def test_search_par_label(self):
        container, _ = self.container_with(
            make_item("default", "k1", b"s1"),
            make_item("staging", "k2", b"s2"),
            make_item("default", "k3", b"s3"),
        )
        records = list(self.store.search(
            container, RecordQuery(label="default", load_secret_data=True)
        ))
        self.assertEqual(
            [(r.label, r.account, r.secret_data) for r in records],
            [("default", "k1", b"s1"), ("default", "k3", b"s3")],
        )

    def test_search_filtre_le_schema(self):
        container, collection = self.container_with()
        list(self.store.search(container, RecordQuery()))
        collection.search_items.assert_called_once_with(GENERIC)

    def test_search_borne(self):
        container, _ = self.container_with(
            make_item("a", "k"), make_item("b", "k"), make_item("c", "k"),
        )
        records = list(self.store.search(container, RecordQuery(limit=2)))
        self.assertEqual([r.label for r in records], ["a", "b"])

    def test_search_sans_secret(self):
        item = make_item("a", "k", b"s")
        container, _ = self.container_with(item)
        (record,) = self.store.search(container, RecordQuery())
        self.assertIsNone(record.secret_data)
        item.get_secret.assert_not_called()

    def test_search_deverrouille_l_item(self):
        item = make_item("a", "k", b"s", locked=True)
        container, _ = self.container_with(item)
        list(self.store.search(
            container, RecordQuery(load_secret_data=True)
        ))
        item.unlock.assert_called_once()

    def test_search_collection_verrouillee(self):
        item = make_item("a", "k")
        item.get_secret.side_effect = LockedException("verrouille")
        container, _ = self.container_with(item)
        with self.assertRaises(PermissionDeniedError):
            list(self.store.search(
                container, RecordQuery(load_secret_data=True)
            ))

    def test_insert(self):
        container, collection = self.container_with()
        self.store.insert(container, "default", "AKIA", b"secret")
        collection.create_item.assert_called_once_with(
            "default",
            {
                "xdg:schema": "org.freedesktop.Secret.Generic",
                "application": "cred-lock",
                "account": "AKIA",
            },
            b"secret",
            replace=False,
        )

    def test_insert_collection_verrouillee(self):
        container, collection = self.container_with()
        collection.create_item.side_effect = LockedException("verrouille")
        with self.assertRaises(PermissionDeniedError):
            self.store.insert(container, "default", "AKIA", b"s")

    def test_delete_par_identite(self):
        other = make_item("staging", "AKIA")
        target = make_item("default", "AKIA")
        container, _ = self.container_with(other, target)

        self.store.delete_by_identity(container, "default", "AKIA")

        target.delete.assert_called_once()
        other.delete.assert_not_called()

    def test_delete_absent(self):
        container, _ = self.container_with(make_item("default", "autre"))
        with self.assertRaises(RecordNotFoundError):
            self.store.delete_by_identity(container, "default", "AKIA")

    def test_delete_invite_refusee(self):
        target = make_item("default", "AKIA")
        target.delete.side_effect = PromptDismissedException("annule")
        container, _ = self.container_with(target)
        with self.assertRaises(PermissionDeniedError):
            self.store.delete_by_identity(container, "default", "AKIA")

    def test_conteneur_sans_handle_rouvert(self):
        collection = make_collection(items=[make_item("a", "k")])
        self.secretstorage.get_all_collections.return_value = [collection]
        records = list(self.store.search(
            Container("aws-credlock"), RecordQuery()
        ))
        self.assertEqual([r.label for r in records], ["a"])

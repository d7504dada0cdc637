"""Backend FreeDesktop Secret Service (Linux).

Un conteneur est une collection Secret Service dont le label est le
nom du conteneur. Compatibilites :
- GNOME Keyring
- KWallet (KDE Plasma 6)
- KeePassXC (avec "Enable Secret Service" active)

Chaque enregistrement est un item de la collection :
- label de l'item     -> label (profil)
- attribut "account"  -> account (identifiant de cle d'acces)
- secret de l'item    -> octets de la cle secrete

L'attribut "xdg:schema" marque les mots de passe generiques : la
recherche ne renvoie que les items de ce schema.

La politique de verrouillage automatique n'est pas exposee par
l'API Secret Service (elle releve du demon) : apply_settings la
journalise sans rien modifier.
"""

import itertools
from typing import Any, Callable, Dict, Iterator, Optional

import secretstorage
from secretstorage.exceptions import (
    ItemNotFoundException,
    LockedException,
    PromptDismissedException,
    SecretServiceNotAvailableException,
    SecretStorageException,
)

from cred_lock.credentials.base import SecretRecordStore
from cred_lock.credentials.exceptions import (
    BackendFailureError,
    ContainerExistsError,
    ContainerNotFoundError,
    PermissionDeniedError,
    RecordNotFoundError,
)
from cred_lock.credentials.models import (
    Container,
    ContainerSettings,
    RecordQuery,
    SecretRecord,
)
from cred_lock.logging.base import Logger

GENERIC_SCHEMA = "org.freedesktop.Secret.Generic"
SCHEMA_ATTRIBUTE = "xdg:schema"
ACCOUNT_ATTRIBUTE = "account"
APPLICATION_ATTRIBUTE = "application"
APPLICATION_NAME = "cred-lock"


class SecretServiceRecordStore(SecretRecordStore):
    """Magasin d'enregistrements sur une collection Secret Service.

    Attributes:
        _connection_factory: Ouvre une connexion D-Bus.
        _connection: Connexion courante (None hors contexte).
        _logger: Logger optionnel.
    """

    def __init__(
        self,
        connection_factory: Optional[Callable[[], Any]] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        """Initialise le backend Secret Service.

        Args:
            connection_factory: Fabrique de connexion D-Bus
                (defaut: secretstorage.dbus_init). Injectable
                pour les tests.
            logger: Logger optionnel (injection de dependance).
        """
        self._connection_factory = (
            connection_factory or secretstorage.dbus_init
        )
        self._connection: Any = None
        self._logger = logger

    def connect(self) -> None:
        if self._connection is not None:
            return
        try:
            self._connection = self._connection_factory()
        except SecretServiceNotAvailableException as exc:
            raise BackendFailureError(
                f"Service Secret Service indisponible : {exc}"
            ) from exc

    def close(self) -> None:
        if self._connection is not None:
            try:
                self._connection.close()
            finally:
                self._connection = None

    def _require_connection(self) -> Any:
        if self._connection is None:
            self.connect()
        return self._connection

    def _find_collection(self, name: str) -> Optional[Any]:
        connection = self._require_connection()
        try:
            for collection in secretstorage.get_all_collections(
                connection
            ):
                if collection.get_label() == name:
                    return collection
        except SecretStorageException as exc:
            raise BackendFailureError(
                f"Enumeration des collections impossible : {exc}"
            ) from exc
        return None

    def _unlock(self, target: Any, what: str) -> None:
        """Deverrouille une collection ou un item via l'invite systeme."""
        if not target.is_locked():
            return
        try:
            dismissed = target.unlock()
        except SecretStorageException as exc:
            raise PermissionDeniedError(
                f"Deverrouillage de {what} refuse : {exc}"
            ) from exc
        if dismissed:
            raise PermissionDeniedError(
                f"Deverrouillage de {what} annule par l'utilisateur"
            )

    def create_container(
        self,
        name: str,
        interactive_prompt: bool = True,
    ) -> Container:
        if self._find_collection(name) is not None:
            raise ContainerExistsError(
                f"La collection {name!r} existe deja"
            )
        # Le demon choisit seul d'afficher ou non l'invite de
        # phrase de passe : interactive_prompt n'a pas d'effet ici.
        try:
            collection = secretstorage.create_collection(
                self._require_connection(), name
            )
        except PromptDismissedException as exc:
            raise PermissionDeniedError(
                f"Creation de la collection {name!r} annulee"
            ) from exc
        except SecretStorageException as exc:
            raise BackendFailureError(
                f"Creation de la collection {name!r} impossible : {exc}"
            ) from exc
        if self._logger:
            self._logger.log_info(f"Collection creee : {name!r}")
        return Container(name=name, handle=collection)

    def open_container(self, name: str) -> Container:
        collection = self._find_collection(name)
        if collection is None:
            raise ContainerNotFoundError(
                f"Collection introuvable : {name!r}"
            )
        self._unlock(collection, f"la collection {name!r}")
        return Container(name=name, handle=collection)

    def _collection(self, container: Container) -> Any:
        if container.handle is not None:
            return container.handle
        return self.open_container(container.name).handle

    def apply_settings(
        self,
        container: Container,
        settings: ContainerSettings,
    ) -> None:
        if self._logger:
            self._logger.log_warning(
                f"Secret Service : la politique de verrouillage "
                f"(veille={settings.lock_on_sleep}, "
                f"delai={settings.lock_interval_seconds}) de "
                f"{container.name!r} se regle dans le demon du trousseau"
            )

    def _generic_items(self, collection: Any) -> Iterator[Any]:
        return collection.search_items({SCHEMA_ATTRIBUTE: GENERIC_SCHEMA})

    def search(
        self,
        container: Container,
        query: RecordQuery,
    ) -> Iterator[SecretRecord]:
        collection = self._collection(container)
        try:
            matches = (
                item for item in self._generic_items(collection)
                if query.label is None or item.get_label() == query.label
            )
            for item in itertools.islice(matches, query.limit):
                secret = None
                if query.load_secret_data:
                    self._unlock(item, f"l'item {item.get_label()!r}")
                    secret = item.get_secret()
                label = account = None
                if query.load_attributes:
                    label = item.get_label()
                    account = item.get_attributes().get(ACCOUNT_ATTRIBUTE)
                yield SecretRecord(
                    label=label, account=account, secret_data=secret
                )
        except LockedException as exc:
            raise PermissionDeniedError(
                f"Collection {container.name!r} verrouillee : {exc}"
            ) from exc
        except SecretStorageException as exc:
            raise BackendFailureError(
                f"Recherche dans {container.name!r} impossible : {exc}"
            ) from exc

    def insert(
        self,
        container: Container,
        label: str,
        account: str,
        secret: bytes,
    ) -> None:
        collection = self._collection(container)
        attributes: Dict[str, str] = {
            SCHEMA_ATTRIBUTE: GENERIC_SCHEMA,
            APPLICATION_ATTRIBUTE: APPLICATION_NAME,
            ACCOUNT_ATTRIBUTE: account,
        }
        try:
            collection.create_item(
                label, attributes, bytes(secret), replace=False
            )
        except LockedException as exc:
            raise PermissionDeniedError(
                f"Collection {container.name!r} verrouillee : {exc}"
            ) from exc
        except PromptDismissedException as exc:
            raise PermissionDeniedError(
                f"Ajout dans {container.name!r} annule"
            ) from exc
        except SecretStorageException as exc:
            raise BackendFailureError(
                f"Ajout de {label!r} impossible : {exc}"
            ) from exc

    def delete_by_identity(
        self,
        container: Container,
        label: str,
        account: str,
    ) -> None:
        collection = self._collection(container)
        try:
            for item in collection.search_items({
                SCHEMA_ATTRIBUTE: GENERIC_SCHEMA,
                ACCOUNT_ATTRIBUTE: account,
            }):
                if item.get_label() == label:
                    item.delete()
                    return
        except PromptDismissedException as exc:
            # sous-classe de ItemNotFoundException : a tester avant
            raise PermissionDeniedError(
                f"Suppression de {label!r} annulee"
            ) from exc
        except ItemNotFoundException as exc:
            raise RecordNotFoundError(
                f"Enregistrement introuvable : label={label!r}"
            ) from exc
        except LockedException as exc:
            raise PermissionDeniedError(
                f"Collection {container.name!r} verrouillee : {exc}"
            ) from exc
        except SecretStorageException as exc:
            raise BackendFailureError(
                f"Suppression de {label!r} impossible : {exc}"
            ) from exc
        raise RecordNotFoundError(
            f"Enregistrement introuvable : label={label!r}"
        )

    def is_available(self) -> bool:
        try:
            connection = self._connection_factory()
        except SecretStorageException:
            return False
        try:
            return bool(secretstorage.check_service_availability(connection))
        finally:
            connection.close()

    @property
    def backend_name(self) -> str:
        return "secret-service"

"""Facade des cas d'usage de cred-lock.

CredentialManager enchaine, pour chaque commande, l'ouverture du
conteneur (StoreSession), une operation du store et, pour get, la
conversion en document Credentials. Les resultats sont entierement
materialises avant d'etre rendus : en cas d'erreur, l'appelant n'a
rien affiche.
"""

from typing import List, Optional

from cred_lock.credentials.codec import decode, encode_to_json
from cred_lock.credentials.exceptions import (
    PermissionDeniedError,
    RecordNotFoundError,
)
from cred_lock.credentials.models import (
    ContainerSettings,
    Credentials,
    RecordQuery,
)
from cred_lock.credentials.session import StoreSession
from cred_lock.logging.base import Logger
from cred_lock.logging.security_logger import (
    SecurityEvent,
    SecurityEventType,
    SecurityLogger,
    mask_access_key,
)

DEFAULT_LIST_LIMIT = 100


class CredentialManager:
    """Cas d'usage init, list, get, add et remove.

    Usage typique :

        session = StoreSession(store, "aws-credlock")
        manager = CredentialManager(session)
        manager.add("default", "AKIA...", "secret")
        for document in manager.render("default"):
            print(document)

    Attributes:
        _session: Session sur le conteneur de l'outil.
        _settings: Politique appliquee par init.
        _list_limit: Nombre maximal de profils listes.
        _logger: Logger optionnel.
        _audit: Journal d'audit (si logger fourni).
    """

    def __init__(
        self,
        session: StoreSession,
        settings: Optional[ContainerSettings] = None,
        list_limit: int = DEFAULT_LIST_LIMIT,
        logger: Optional[Logger] = None,
    ) -> None:
        """Initialise le manager.

        Args:
            session: Session sur le conteneur.
            settings: Politique de verrouillage pour init (defaut:
                veille + 300 secondes).
            list_limit: Borne de la recherche de list.
            logger: Logger optionnel (injection de dependance).
        """
        self._session = session
        self._settings = settings or ContainerSettings()
        self._list_limit = list_limit
        self._logger = logger
        self._audit = SecurityLogger(logger) if logger else None

    def _log(self, message: str) -> None:
        if self._logger:
            self._logger.log_info(message)

    def _event(
        self,
        event_type: SecurityEventType,
        severity: str = "info",
        **details: object,
    ) -> None:
        if self._audit:
            self._audit.log_event(SecurityEvent(
                event_type=event_type,
                resource=self._session.container_name,
                details=dict(details),
                severity=severity,
            ))

    def init(self, interactive_prompt: bool = True) -> None:
        """Cree le conteneur et applique la politique de verrouillage.

        Raises:
            ContainerExistsError: si le conteneur existe deja.
            PermissionDeniedError: si le systeme refuse la creation.
        """
        try:
            with self._session.create(
                self._settings, interactive_prompt=interactive_prompt
            ):
                pass
        except PermissionDeniedError:
            self._event(
                SecurityEventType.ACCESS_DENIED,
                severity="warning",
                operation="init",
            )
            raise
        self._event(
            SecurityEventType.CONTAINER_CREATED,
            lock_on_sleep=self._settings.lock_on_sleep,
            lock_interval_seconds=self._settings.lock_interval_seconds,
        )

    def list_profiles(self) -> List[str]:
        """Liste les labels des enregistrements du conteneur.

        Les enregistrements sans label sont ignores.

        Returns:
            Labels dans l'ordre rendu par le systeme.
        """
        query = RecordQuery(
            limit=self._list_limit,
            load_secret_data=True,
            load_attributes=True,
        )
        with self._session.open() as container:
            labels = [
                record.label
                for record in self._session.store.search(container, query)
                if record.label is not None
            ]
        self._log(f"{len(labels)} profil(s) liste(s)")
        return labels

    def get(self, profile: str) -> List[Credentials]:
        """Lit les credentials d'un profil.

        Args:
            profile: Label recherche.

        Returns:
            Un document par enregistrement trouve (liste vide si
            aucun, ce n'est pas une erreur).
        """
        query = RecordQuery(
            label=profile,
            load_secret_data=True,
            load_attributes=True,
        )
        with self._session.open() as container:
            documents = [
                decode(record.to_attributes(), logger=self._logger)
                for record in self._session.store.search(container, query)
            ]
        self._event(
            SecurityEventType.RECORD_READ,
            profile=profile,
            matches=len(documents),
        )
        return documents

    def render(self, profile: str) -> List[str]:
        """Retourne les documents JSON indentes d'un profil."""
        return [encode_to_json(document) for document in self.get(profile)]

    def add(
        self,
        profile: str,
        access_key_id: str,
        secret_access_key: str,
    ) -> None:
        """Stocke un jeu de credentials sous un profil.

        Les valeurs sont supposees non vides (validees par l'invite).

        Args:
            profile: Label de l'enregistrement.
            access_key_id: Identifiant de la cle d'acces.
            secret_access_key: Cle secrete.
        """
        with self._session.open() as container:
            self._session.store.insert(
                container,
                profile,
                access_key_id,
                secret_access_key.encode("utf-8"),
            )
        self._event(
            SecurityEventType.RECORD_ADDED,
            profile=profile,
            access_key_id=mask_access_key(access_key_id),
        )

    def remove(self, profile: str) -> int:
        """Supprime tous les enregistrements d'un profil.

        Chaque enregistrement trouve par label est resolu en son
        account, puis supprime par identite (label, account).

        Args:
            profile: Label a supprimer.

        Returns:
            Nombre d'enregistrements supprimes.

        Raises:
            RecordNotFoundError: si aucun enregistrement ne porte ce
                label, ou si un enregistrement disparait entre la
                recherche et la suppression.
        """
        query = RecordQuery(
            label=profile,
            load_secret_data=False,
            load_attributes=True,
        )
        with self._session.open() as container:
            store = self._session.store
            accounts = [
                record.account or ""
                for record in store.search(container, query)
            ]
            if not accounts:
                raise RecordNotFoundError(
                    f"Aucun credential pour le profil {profile!r}"
                )
            for account in accounts:
                store.delete_by_identity(container, profile, account)
        self._event(
            SecurityEventType.RECORD_REMOVED,
            profile=profile,
            removed=len(accounts),
        )
        return len(accounts)

"""Backend en memoire du magasin d'enregistrements.

Portee isolee au processus : sert aux tests et a pointer l'outil
vers un espace de stockage jetable. Les conteneurs peuvent etre
partages entre plusieurs instances via le parametre ``containers``.
"""

import itertools
from typing import Dict, Iterator, List, Optional

from cred_lock.credentials.base import SecretRecordStore
from cred_lock.credentials.exceptions import (
    ContainerExistsError,
    ContainerNotFoundError,
    DuplicateLabelConflictError,
    RecordNotFoundError,
)
from cred_lock.credentials.models import (
    Container,
    ContainerSettings,
    RecordQuery,
    SecretRecord,
)
from cred_lock.logging.base import Logger


class InMemoryRecordStore(SecretRecordStore):
    """Magasin volatile, conteneurs indexes par nom.

    Attributes:
        _containers: Enregistrements par nom de conteneur.
        _settings: Politique appliquee par nom de conteneur.
        _unique_labels: Refuser les doublons de label.
        _logger: Logger optionnel.
    """

    def __init__(
        self,
        containers: Optional[Dict[str, List[SecretRecord]]] = None,
        unique_labels: bool = False,
        logger: Optional[Logger] = None,
    ) -> None:
        """Initialise le magasin.

        Args:
            containers: Etat initial (partage si fourni).
            unique_labels: Simuler un backend qui impose l'unicite
                des labels.
            logger: Logger optionnel (injection de dependance).
        """
        self._containers = containers if containers is not None else {}
        self._settings: Dict[str, ContainerSettings] = {}
        self._unique_labels = unique_labels
        self._logger = logger

    def _records(self, container: Container) -> List[SecretRecord]:
        try:
            return self._containers[container.name]
        except KeyError:
            raise ContainerNotFoundError(
                f"Conteneur introuvable : {container.name!r}"
            ) from None

    def create_container(
        self,
        name: str,
        interactive_prompt: bool = True,
    ) -> Container:
        if name in self._containers:
            raise ContainerExistsError(
                f"Le conteneur {name!r} existe deja"
            )
        self._containers[name] = []
        return Container(name=name)

    def open_container(self, name: str) -> Container:
        if name not in self._containers:
            raise ContainerNotFoundError(
                f"Conteneur introuvable : {name!r}"
            )
        return Container(name=name)

    def apply_settings(
        self,
        container: Container,
        settings: ContainerSettings,
    ) -> None:
        self._records(container)
        self._settings[container.name] = settings

    def settings_for(self, name: str) -> Optional[ContainerSettings]:
        """Retourne la politique appliquee a un conteneur."""
        return self._settings.get(name)

    def search(
        self,
        container: Container,
        query: RecordQuery,
    ) -> Iterator[SecretRecord]:
        # Copie : une suppression pendant l'iteration ne doit pas
        # decaler les resultats.
        records = list(self._records(container))
        matches = (
            record for record in records
            if query.label is None or record.label == query.label
        )
        for record in itertools.islice(matches, query.limit):
            yield SecretRecord(
                label=record.label if query.load_attributes else None,
                account=(
                    record.account if query.load_attributes else None
                ),
                secret_data=(
                    record.secret_data if query.load_secret_data
                    else None
                ),
            )

    def insert(
        self,
        container: Container,
        label: str,
        account: str,
        secret: bytes,
    ) -> None:
        records = self._records(container)
        if self._unique_labels and any(
            record.label == label for record in records
        ):
            raise DuplicateLabelConflictError(
                f"Le label {label!r} existe deja dans "
                f"{container.name!r}"
            )
        records.append(
            SecretRecord(
                label=label, account=account, secret_data=bytes(secret)
            )
        )
        if self._logger:
            self._logger.log_info(
                f"Enregistrement ajoute en memoire : label={label!r}"
            )

    def delete_by_identity(
        self,
        container: Container,
        label: str,
        account: str,
    ) -> None:
        records = self._records(container)
        for index, record in enumerate(records):
            if record.label == label and record.account == account:
                del records[index]
                return
        raise RecordNotFoundError(
            f"Enregistrement introuvable : label={label!r}"
        )

    def is_available(self) -> bool:
        return True

    @property
    def backend_name(self) -> str:
        return "memory"

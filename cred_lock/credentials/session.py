"""Cycle de vie du conteneur nomme.

StoreSession resout le nom du conteneur (valeur de configuration,
passee au constructeur) en un conteneur ouvert, le temps d'un bloc
with. La connexion au service systeme est liberee a la sortie du
bloc, y compris sur erreur. Aucun cache entre deux invocations.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from cred_lock.credentials.base import SecretRecordStore
from cred_lock.credentials.models import Container, ContainerSettings
from cred_lock.logging.base import Logger


class StoreSession:
    """Ouvre ou cree le conteneur de l'outil aupres d'un store.

    Attributes:
        _store: Backend systeme.
        _container_name: Nom du conteneur.
        _logger: Logger optionnel.
    """

    def __init__(
        self,
        store: SecretRecordStore,
        container_name: str,
        logger: Optional[Logger] = None,
    ) -> None:
        """Initialise la session.

        Args:
            store: Backend systeme.
            container_name: Nom du conteneur (ex: "aws-credlock").
            logger: Logger optionnel (injection de dependance).
        """
        if not container_name or not container_name.strip():
            raise ValueError("Le nom du conteneur ne peut pas etre vide.")
        self._store = store
        self._container_name = container_name
        self._logger = logger

    @property
    def store(self) -> SecretRecordStore:
        return self._store

    @property
    def container_name(self) -> str:
        return self._container_name

    @contextmanager
    def create(
        self,
        settings: ContainerSettings,
        interactive_prompt: bool = True,
    ) -> Iterator[Container]:
        """Cree le conteneur et lui applique sa politique.

        A ne lancer qu'une fois : un second appel leve
        ContainerExistsError.

        Args:
            settings: Politique de verrouillage.
            interactive_prompt: Laisser le systeme demander une
                phrase de passe.

        Yields:
            Le conteneur cree.
        """
        with self._store:
            container = self._store.create_container(
                self._container_name,
                interactive_prompt=interactive_prompt,
            )
            self._store.apply_settings(container, settings)
            if self._logger:
                self._logger.log_info(
                    f"Conteneur {self._container_name!r} initialise "
                    f"via {self._store.backend_name}"
                )
            yield container

    @contextmanager
    def open(self) -> Iterator[Container]:
        """Ouvre le conteneur existant.

        Yields:
            Le conteneur ouvert.

        Raises:
            ContainerNotFoundError: si le conteneur n'existe pas.
        """
        with self._store:
            yield self._store.open_container(self._container_name)

"""Interface abstraite du magasin securise d'enregistrements.

SecretRecordStore est la capacite attendue d'un backend systeme
(trousseau macOS, Secret Service, memoire) : creer/ouvrir un
conteneur nomme, regler sa politique de verrouillage, chercher,
inserer et supprimer des enregistrements generiques.

Un store s'utilise comme gestionnaire de contexte : l'entree
ouvre la connexion au service systeme, la sortie la libere,
y compris sur erreur.
"""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Iterator, Optional

from cred_lock.credentials.models import (
    Container,
    ContainerSettings,
    RecordQuery,
    SecretRecord,
)


class SecretRecordStore(ABC):
    """Interface CRUD sur les enregistrements d'un conteneur."""

    def connect(self) -> None:
        """Ouvre la connexion au service systeme (defaut: rien)."""

    def close(self) -> None:
        """Libere la connexion au service systeme (defaut: rien)."""

    def __enter__(self) -> "SecretRecordStore":
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    @abstractmethod
    def create_container(
        self,
        name: str,
        interactive_prompt: bool = True,
    ) -> Container:
        """Cree un nouveau conteneur nomme.

        Args:
            name: Nom du conteneur.
            interactive_prompt: Demander a l'utilisateur une phrase
                de passe de protection via l'invite du systeme.

        Returns:
            Le conteneur cree.

        Raises:
            ContainerExistsError: si le nom est deja pris.
            PermissionDeniedError: si le systeme refuse la creation.
            BackendFailureError: pour toute autre erreur.
        """
        pass  # pragma: no cover

    @abstractmethod
    def open_container(self, name: str) -> Container:
        """Ouvre un conteneur existant.

        Raises:
            ContainerNotFoundError: si aucun conteneur ne porte ce nom.
        """
        pass  # pragma: no cover

    @abstractmethod
    def apply_settings(
        self,
        container: Container,
        settings: ContainerSettings,
    ) -> None:
        """Applique la politique de verrouillage au conteneur."""
        pass  # pragma: no cover

    @abstractmethod
    def search(
        self,
        container: Container,
        query: RecordQuery,
    ) -> Iterator[SecretRecord]:
        """Cherche les enregistrements generiques du conteneur.

        La sequence est paresseuse, bornee par query.limit, dans
        l'ordre rendu par le systeme. Aucun resultat donne une
        sequence vide, pas une erreur.

        Args:
            container: Conteneur ouvert.
            query: Filtre (label) et options de chargement.

        Yields:
            Enregistrements correspondants.
        """
        pass  # pragma: no cover

    @abstractmethod
    def insert(
        self,
        container: Container,
        label: str,
        account: str,
        secret: bytes,
    ) -> None:
        """Cree un enregistrement.

        Les doublons de label sont acceptes, sauf si le backend
        impose l'unicite.

        Raises:
            DuplicateLabelConflictError: si le backend refuse le doublon.
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete_by_identity(
        self,
        container: Container,
        label: str,
        account: str,
    ) -> None:
        """Supprime l'enregistrement identifie par (label, account).

        Raises:
            RecordNotFoundError: si l'enregistrement n'existe pas.
        """
        pass  # pragma: no cover

    @abstractmethod
    def is_available(self) -> bool:
        """Indique si le backend est utilisable sur ce systeme."""
        pass  # pragma: no cover

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Nom court du backend (ex: "keychain", "memory")."""
        pass  # pragma: no cover

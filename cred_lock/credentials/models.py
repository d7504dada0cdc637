"""Modeles de donnees pour la gestion des credentials.

Ce module definit les dataclasses immuables du magasin :
Container, ContainerSettings, SecretRecord, RecordQuery, et le
document Credentials attendu par le protocole credential_process
de la CLI AWS.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

CREDENTIALS_VERSION = 1

LABEL_ATTRIBUTE = "label"
ACCOUNT_ATTRIBUTE = "account"
SECRET_DATA_ATTRIBUTE = "secretData"


@dataclass(frozen=True)
class ContainerSettings:
    """Politique de verrouillage d'un conteneur.

    Attributes:
        lock_on_sleep: Verrouiller quand la machine se met en veille.
        lock_interval_seconds: Verrouiller apres N secondes
            d'inactivite (None : pas de verrouillage temporise).
    """

    lock_on_sleep: bool = True
    lock_interval_seconds: Optional[int] = 300

    def __post_init__(self) -> None:
        """Valide les champs apres initialisation."""
        if (
            self.lock_interval_seconds is not None
            and self.lock_interval_seconds <= 0
        ):
            raise ValueError(
                "Le champ 'lock_interval_seconds' doit etre positif."
            )


@dataclass(frozen=True)
class Container:
    """Conteneur securise nomme, ouvert aupres d'un backend.

    Attributes:
        name: Nom du conteneur (ex: "aws-credlock").
        handle: Reference propre au backend (chemin de trousseau,
            collection Secret Service...). Opaque pour l'appelant.
    """

    name: str
    handle: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Valide les champs apres initialisation."""
        if not self.name or not self.name.strip():
            raise ValueError("Le champ 'name' ne peut pas etre vide.")


@dataclass(frozen=True)
class RecordQuery:
    """Filtre de recherche d'enregistrements generiques.

    Attributes:
        label: Label exact recherche (None : tous les labels).
        limit: Nombre maximal de resultats (None : pas de borne).
        load_secret_data: Charger les octets secrets.
        load_attributes: Charger label et account.
    """

    label: Optional[str] = None
    limit: Optional[int] = None
    load_secret_data: bool = False
    load_attributes: bool = True

    def __post_init__(self) -> None:
        """Valide les champs apres initialisation."""
        if self.limit is not None and self.limit <= 0:
            raise ValueError("Le champ 'limit' doit etre positif.")


@dataclass(frozen=True)
class SecretRecord:
    """Enregistrement secret generique d'un conteneur.

    Les trois champs peuvent manquer sur un enregistrement cree
    par un autre outil, ou quand la recherche ne les a pas charges.

    Attributes:
        label: Nom du profil.
        account: Identifiant de la cle d'acces.
        secret_data: Octets de la cle secrete.
    """

    label: Optional[str] = None
    account: Optional[str] = None
    secret_data: Optional[bytes] = field(default=None, repr=False)

    def to_attributes(self) -> Dict[str, Any]:
        """Retourne la table d'attributs brute de l'enregistrement.

        Returns:
            Dictionnaire avec les cles "label", "account" et
            "secretData", les valeurs absentes etant omises.
        """
        attributes: Dict[str, Any] = {}
        if self.label is not None:
            attributes[LABEL_ATTRIBUTE] = self.label
        if self.account is not None:
            attributes[ACCOUNT_ATTRIBUTE] = self.account
        if self.secret_data is not None:
            attributes[SECRET_DATA_ATTRIBUTE] = self.secret_data
        return attributes


@dataclass(frozen=True)
class Credentials:
    """Document credential_process de la CLI AWS.

    https://docs.aws.amazon.com/cli/latest/userguide/cli-configure-sourcing-external.html

    Attributes:
        access_key_id: Identifiant de la cle d'acces.
        secret_access_key: Cle secrete.
        session_token: Jeton de session (jamais stocke).
        expiration: Date d'expiration ISO 8601 (jamais stockee).
        version: Version du format, toujours 1.
    """

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)
    expiration: Optional[str] = None
    version: int = CREDENTIALS_VERSION

    def __post_init__(self) -> None:
        """Valide les champs apres initialisation."""
        if self.version != CREDENTIALS_VERSION:
            raise ValueError(
                f"Version de document non supportee : {self.version}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Retourne le document avec les noms de champs externes.

        L'ordre des cles est fixe ; les champs optionnels absents
        sont omis (jamais null).

        Returns:
            Dictionnaire pret a serialiser en JSON.
        """
        document: Dict[str, Any] = {
            "Version": self.version,
            "AccessKeyId": self.access_key_id,
            "SecretAccessKey": self.secret_access_key,
        }
        if self.session_token is not None:
            document["SessionToken"] = self.session_token
        if self.expiration is not None:
            document["Expiration"] = self.expiration
        return document

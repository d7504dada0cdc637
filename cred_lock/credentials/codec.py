"""Conversion entre enregistrements du magasin et documents JSON.

decode() ne leve jamais : un attribut manquant ou un secret
non decodable devient une chaine vide, pour que la CLI emette
toujours un document bien forme pour un enregistrement trouve.
"""

import json
from typing import Any, Mapping, Optional

from cred_lock.credentials.exceptions import DecodeFailureError
from cred_lock.credentials.models import (
    ACCOUNT_ATTRIBUTE,
    SECRET_DATA_ATTRIBUTE,
    Credentials,
)
from cred_lock.logging.base import Logger


def decode_secret(data: Any) -> str:
    """Decode la valeur secrete d'un enregistrement en texte.

    Args:
        data: Octets (ou texte deja decode) du secret.

    Returns:
        Secret en texte.

    Raises:
        DecodeFailureError: si les octets ne sont pas de l'UTF-8.
    """
    if isinstance(data, str):
        return data
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise DecodeFailureError(
            f"Type de secret inattendu : {type(data).__name__}"
        )
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeFailureError(
            "Le secret stocke n'est pas du texte UTF-8"
        ) from exc


def decode(
    attributes: Mapping[str, Any],
    logger: Optional[Logger] = None,
) -> Credentials:
    """Construit un document Credentials depuis une table d'attributs.

    Args:
        attributes: Table "account" / "secretData" (cf.
            SecretRecord.to_attributes()).
        logger: Logger optionnel pour signaler un secret illisible.

    Returns:
        Document version 1 sans jeton de session ni expiration.
    """
    access_key_id = attributes.get(ACCOUNT_ATTRIBUTE) or ""
    secret_access_key = ""
    raw_secret = attributes.get(SECRET_DATA_ATTRIBUTE)
    if raw_secret is not None:
        try:
            secret_access_key = decode_secret(raw_secret)
        except DecodeFailureError as exc:
            if logger:
                logger.log_warning(
                    f"{exc} (account={access_key_id!r}) : "
                    "valeur remplacee par une chaine vide"
                )
    return Credentials(
        access_key_id=str(access_key_id),
        secret_access_key=secret_access_key,
    )


def encode_to_json(credentials: Credentials, pretty: bool = True) -> str:
    """Serialise un document Credentials.

    Args:
        credentials: Document a serialiser.
        pretty: Indentation sur plusieurs lignes (defaut) ou
            forme compacte sans espaces.

    Returns:
        Texte JSON, champs dans l'ordre Version, AccessKeyId,
        SecretAccessKey, [SessionToken], [Expiration].
    """
    if pretty:
        return json.dumps(
            credentials.to_dict(), indent=2, ensure_ascii=False
        )
    return json.dumps(
        credentials.to_dict(),
        separators=(",", ":"),
        ensure_ascii=False,
    )

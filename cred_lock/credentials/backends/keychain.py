"""Backend trousseau macOS via l'outil /usr/bin/security.

Un conteneur est un trousseau nomme (ex: "aws-credlock", resolu par
security dans ~/Library/Keychains). Les enregistrements sont des
mots de passe generiques (classe "genp") :

- label   -> attribut 0x00000007 (et service "svce")
- account -> attribut "acct"
- secret  -> donnee du mot de passe

Correspondance des sous-commandes :

- create_container   : create-keychain -P (invite SecurityAgent)
- open_container     : show-keychain-info
- apply_settings     : set-keychain-settings -l -u -t <secondes>
- search             : dump-keychain puis find-generic-password -w
- insert             : add-generic-password via ``security -i`` (secret sur stdin)
- delete_by_identity : delete-generic-password -l -a
"""

import itertools
import platform
import re
import shutil
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence

from cred_lock.commands.base import CommandExecutor, CommandResult
from cred_lock.commands.runner import SubprocessCommandExecutor
from cred_lock.credentials.base import SecretRecordStore
from cred_lock.credentials.exceptions import (
    BackendFailureError,
    ContainerExistsError,
    ContainerNotFoundError,
    CredLockError,
    DuplicateLabelConflictError,
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

GENERIC_PASSWORD_CLASS = "genp"
LABEL_KEYS = ("0x00000007", "labl")
ACCOUNT_KEY = "acct"

# Code retour de security = OSStatus modulo 256
EXIT_ITEM_NOT_FOUND = 44           # errSecItemNotFound
EXIT_DUPLICATE_ITEM = 45           # errSecDuplicateItem
EXIT_DUPLICATE_KEYCHAIN = 48       # errSecDuplicateKeychain
EXIT_NO_SUCH_KEYCHAIN = 50         # errSecNoSuchKeychain
EXIT_PERMISSION_CODES = frozenset({
    36,     # errSecInteractionNotAllowed
    51,     # errSecAuthFailed
    128,    # errSecUserCanceled
})

_PERMISSION_MARKERS = (
    "user interaction is not allowed",
    "user canceled",
    "authorization",
    "not permitted",
    "denied",
    "authentication failed",
)

_ATTRIBUTE_LINE = re.compile(
    r'^\s*(?P<key>"[^"]*"|0x[0-9A-Fa-f]+)\s*<(?P<type>[^>]*)>='
    r'(?P<value>.*)$'
)
_QUOTED_LINE = re.compile(r'^(?P<key>\w+):\s*(?P<value>.*)$')
_OCTAL_ESCAPE = re.compile(rb'\\([0-7]{3})|\\(.)', re.DOTALL)


def _unescape(text: str) -> str:
    """Decode une chaine citee par security (echappements octaux)."""
    raw = text.encode("utf-8", errors="surrogateescape")

    def replace(match: "re.Match[bytes]") -> bytes:
        if match.group(1) is not None:
            return bytes([int(match.group(1), 8)])
        return match.group(2)

    return _OCTAL_ESCAPE.sub(replace, raw).decode(
        "utf-8", errors="replace"
    )


def parse_attribute_value(value: str) -> Optional[str]:
    """Interprete la partie droite d'une ligne d'attribut.

    Formes reconnues : <NULL>, "texte", 0x6869  "hi".

    Args:
        value: Texte apres le signe "=".

    Returns:
        Valeur decodee ou None.
    """
    value = value.strip()
    if not value or value == "<NULL>":
        return None
    if value.startswith('"') and value.endswith('"') and len(value) >= 2:
        return _unescape(value[1:-1])
    if value.startswith("0x"):
        hex_part = value.split()[0][2:]
        try:
            return bytes.fromhex(hex_part).decode(
                "utf-8", errors="replace"
            ).rstrip("\x00")
        except ValueError:
            return None
    return value


@dataclass
class KeychainItem:
    """Element brut lu dans la sortie de dump-keychain."""

    item_class: Optional[str] = None
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)

    @property
    def label(self) -> Optional[str]:
        for key in LABEL_KEYS:
            if self.attributes.get(key) is not None:
                return self.attributes[key]
        return None

    @property
    def account(self) -> Optional[str]:
        return self.attributes.get(ACCOUNT_KEY)


def parse_dump(output: str) -> Iterator[KeychainItem]:
    """Decoupe la sortie de ``security dump-keychain`` en elements.

    Chaque element commence par une ligne ``keychain: "..."``.

    Args:
        output: Sortie standard de dump-keychain.

    Yields:
        Elements dans l'ordre rendu par security.
    """
    current: Optional[KeychainItem] = None
    for line in output.splitlines():
        if line.startswith("keychain:"):
            if current is not None:
                yield current
            current = KeychainItem()
            continue
        if current is None:
            continue
        attribute = _ATTRIBUTE_LINE.match(line)
        if attribute:
            key = attribute.group("key").strip('"')
            current.attributes[key] = parse_attribute_value(
                attribute.group("value")
            )
            continue
        header = _QUOTED_LINE.match(line.strip())
        if header and header.group("key") == "class":
            current.item_class = parse_attribute_value(
                header.group("value")
            )
    if current is not None:
        yield current


def interactive_line(args: Sequence[str]) -> str:
    """Compose une ligne de commande pour ``security -i``.

    Chaque argument est place entre guillemets doubles, antislash et
    guillemet echappes.

    Args:
        args: Sous-commande et ses arguments.

    Returns:
        Ligne terminee par un saut de ligne.

    Raises:
        BackendFailureError: si un argument contient un saut de ligne.
    """
    quoted = []
    for arg in args:
        if "\n" in arg or "\r" in arg:
            raise BackendFailureError(
                "Saut de ligne interdit dans un argument de security"
            )
        escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
        quoted.append(f'"{escaped}"')
    return " ".join(quoted) + "\n"


class KeychainRecordStore(SecretRecordStore):
    """Magasin d'enregistrements sur un trousseau macOS.

    Attributes:
        _executor: Executeur de commandes (injectable pour les tests).
        _security: Chemin de l'outil security.
        _logger: Logger optionnel.
    """

    def __init__(
        self,
        executor: Optional[CommandExecutor] = None,
        security_binary: str = "/usr/bin/security",
        logger: Optional[Logger] = None,
    ) -> None:
        """Initialise le backend trousseau.

        Args:
            executor: Executeur de commandes. Par defaut un
                SubprocessCommandExecutor sans timeout.
            security_binary: Chemin de l'outil security.
            logger: Logger optionnel (injection de dependance).
        """
        self._executor = executor or SubprocessCommandExecutor(
            logger=logger
        )
        self._security = security_binary
        self._logger = logger

    def _run(self, *args: str) -> CommandResult:
        return self._executor.run([self._security, *args])

    def _run_interactive(self, *args: str) -> CommandResult:
        """Passe la sous-commande a ``security -i`` par l'entree standard.

        Les arguments (dont un eventuel secret) n'apparaissent pas dans
        la liste des processus.
        """
        return self._executor.run(
            [self._security, "-i"], input=interactive_line(args)
        )

    def _fail(
        self,
        result: CommandResult,
        action: str,
        not_found: type[CredLockError] = BackendFailureError,
        exists: type[CredLockError] = BackendFailureError,
    ) -> CredLockError:
        """Traduit un echec de security en erreur typee.

        Args:
            result: Resultat de la commande en echec.
            action: Description de l'operation pour le message.
            not_found: Erreur a lever pour "introuvable".
            exists: Erreur a lever pour "existe deja".

        Returns:
            L'exception a lever.
        """
        detail = (result.stderr or result.stdout).strip()
        message = f"{action} : {detail or f'code {result.return_code}'}"
        lowered = detail.lower()

        if result.return_code == -1:
            return BackendFailureError(
                f"{action} : impossible de lancer {self._security} "
                f"({detail})"
            )
        if (
            "could not be found" in lowered
            or result.return_code in (
                EXIT_ITEM_NOT_FOUND, EXIT_NO_SUCH_KEYCHAIN
            )
        ):
            return not_found(message)
        if (
            "already exists" in lowered
            or result.return_code in (
                EXIT_DUPLICATE_ITEM, EXIT_DUPLICATE_KEYCHAIN
            )
        ):
            return exists(message)
        if (
            any(marker in lowered for marker in _PERMISSION_MARKERS)
            or result.return_code in EXIT_PERMISSION_CODES
        ):
            return PermissionDeniedError(message)
        return BackendFailureError(message)

    def create_container(
        self,
        name: str,
        interactive_prompt: bool = True,
    ) -> Container:
        if interactive_prompt:
            result = self._run("create-keychain", "-P", name)
        else:
            result = self._run("create-keychain", "-p", "", name)
        if not result.success:
            raise self._fail(
                result,
                f"Creation du trousseau {name!r}",
                exists=ContainerExistsError,
            )
        if self._logger:
            self._logger.log_info(f"Trousseau cree : {name!r}")
        return Container(name=name, handle=name)

    def open_container(self, name: str) -> Container:
        result = self._run("show-keychain-info", name)
        if not result.success:
            raise self._fail(
                result,
                f"Ouverture du trousseau {name!r}",
                not_found=ContainerNotFoundError,
            )
        return Container(name=name, handle=name)

    def apply_settings(
        self,
        container: Container,
        settings: ContainerSettings,
    ) -> None:
        args: List[str] = ["set-keychain-settings"]
        if settings.lock_on_sleep:
            args.append("-l")
        if settings.lock_interval_seconds is not None:
            args.extend(["-u", "-t", str(settings.lock_interval_seconds)])
        args.append(container.name)
        result = self._run(*args)
        if not result.success:
            raise self._fail(
                result,
                f"Reglage du trousseau {container.name!r}",
                not_found=ContainerNotFoundError,
            )

    def _read_secret(
        self,
        container: Container,
        label: str,
        account: str,
    ) -> bytes:
        result = self._run(
            "find-generic-password",
            "-l", label,
            "-a", account,
            "-w", container.name,
        )
        if not result.success:
            raise self._fail(
                result,
                f"Lecture du secret {label!r}",
                not_found=RecordNotFoundError,
            )
        secret = result.stdout
        if secret.endswith("\n"):
            secret = secret[:-1]
        return secret.encode("utf-8")

    def search(
        self,
        container: Container,
        query: RecordQuery,
    ) -> Iterator[SecretRecord]:
        result = self._run("dump-keychain", container.name)
        if not result.success:
            raise self._fail(
                result,
                f"Lecture du trousseau {container.name!r}",
                not_found=ContainerNotFoundError,
            )
        matches = (
            item for item in parse_dump(result.stdout)
            if item.item_class == GENERIC_PASSWORD_CLASS
            and (query.label is None or item.label == query.label)
        )
        for item in itertools.islice(matches, query.limit):
            secret = None
            # Sans label ou sans account, find-generic-password pourrait
            # designer un autre element : secret laisse absent.
            if (
                query.load_secret_data
                and item.label is not None
                and item.account is not None
            ):
                secret = self._read_secret(
                    container, item.label, item.account
                )
            yield SecretRecord(
                label=item.label if query.load_attributes else None,
                account=item.account if query.load_attributes else None,
                secret_data=secret,
            )

    def insert(
        self,
        container: Container,
        label: str,
        account: str,
        secret: bytes,
    ) -> None:
        password = bytes(secret).decode("utf-8")
        result = self._run_interactive(
            "add-generic-password",
            "-l", label,
            "-s", label,
            "-a", account,
            "-w", password,
            container.name,
        )
        # En mode -i, l'echec d'une sous-commande peut laisser un
        # code retour nul : stderr fait foi.
        if not result.success or result.stderr.strip():
            raise self._fail(
                result,
                f"Ajout de {label!r} dans {container.name!r}",
                not_found=ContainerNotFoundError,
                exists=DuplicateLabelConflictError,
            )

    def delete_by_identity(
        self,
        container: Container,
        label: str,
        account: str,
    ) -> None:
        result = self._run(
            "delete-generic-password",
            "-l", label,
            "-a", account,
            container.name,
        )
        if not result.success:
            raise self._fail(
                result,
                f"Suppression de {label!r}",
                not_found=RecordNotFoundError,
            )

    def is_available(self) -> bool:
        return platform.system() == "Darwin" and (
            shutil.which(self._security) is not None
        )

    @property
    def backend_name(self) -> str:
        return "keychain"

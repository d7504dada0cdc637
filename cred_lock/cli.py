"""
cred-lock CLI : point d'entree.

Usage:
    cred-lock init                         # Cree le trousseau
    cred-lock list                         # Liste les profils
    cred-lock get PROFILE                  # Document credential_process
    cred-lock add-credentials PROFILE      # Stocke un jeu de credentials
    cred-lock remove-credentials PROFILE   # Supprime un profil

Dans ~/.aws/config :

    [profile default]
    credential_process = cred-lock get default

La sortie standard ne porte que les documents JSON (get) ou les
profils (list) ; messages et erreurs partent sur stderr.
"""

import argparse
import getpass
import sys
from typing import Callable, List, Optional, Sequence

from cred_lock import __version__
from cred_lock.config.settings import CredLockSettings, load_settings
from cred_lock.credentials.backends.factory import create_record_store
from cred_lock.credentials.base import SecretRecordStore
from cred_lock.credentials.exceptions import (
    BackendFailureError,
    ContainerExistsError,
    ContainerNotFoundError,
    DuplicateLabelConflictError,
    PermissionDeniedError,
    RecordNotFoundError,
)
from cred_lock.credentials.manager import CredentialManager
from cred_lock.credentials.models import ContainerSettings
from cred_lock.credentials.session import StoreSession
from cred_lock.errors.base import ErrorHandlerChain
from cred_lock.errors.console_handler import ConsoleErrorHandler
from cred_lock.errors.exceptions import ValidationError
from cred_lock.errors.logger_handler import LoggerErrorHandler
from cred_lock.logging.base import Logger
from cred_lock.logging.file_logger import FileLogger

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

SOLUTIONS: dict[type[Exception], str] = {
    ContainerExistsError: (
        "Le trousseau est deja initialise : 'init' ne se lance "
        "qu'une seule fois."
    ),
    ContainerNotFoundError: (
        "Lancez d'abord 'cred-lock init' ou verifiez [store] container."
    ),
    RecordNotFoundError: (
        "Verifiez le nom du profil avec 'cred-lock list'."
    ),
    PermissionDeniedError: (
        "Deverrouillez le trousseau et autorisez l'acces a cred-lock."
    ),
    DuplicateLabelConflictError: (
        "Supprimez d'abord le profil avec 'cred-lock remove-credentials'."
    ),
    BackendFailureError: (
        "Verifiez le backend configure ([store] backend)."
    ),
}

PromptFn = Callable[[str], str]


def build_parser() -> argparse.ArgumentParser:
    """Construit le parseur d'arguments."""
    parser = argparse.ArgumentParser(
        prog="cred-lock",
        description=(
            "Stocke des credentials AWS dans le trousseau systeme et "
            "les restitue au format credential_process."
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c", help="Fichier de configuration (.toml ou .json)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Recopie les logs sur stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init", help="Initialise le trousseau")
    subparsers.add_parser(
        "list", help="Liste les profils stockes dans le trousseau"
    )

    get_parser = subparsers.add_parser(
        "get", help="Affiche les credentials d'un profil"
    )
    get_parser.add_argument(
        "profile", help="Profil dont on veut les credentials"
    )

    add_parser = subparsers.add_parser(
        "add-credentials", aliases=["add"],
        help="Ajoute un jeu de credentials au trousseau",
    )
    add_parser.add_argument(
        "profile", help="Profil sous lequel stocker les credentials"
    )

    remove_parser = subparsers.add_parser(
        "remove-credentials", aliases=["remove"],
        help="Supprime les credentials d'un profil",
    )
    remove_parser.add_argument(
        "profile", help="Profil dont on supprime les credentials"
    )
    return parser


def prompt_secret(label: str, prompt: PromptFn = getpass.getpass) -> str:
    """Demande une valeur masquee, jusqu'a obtenir une reponse non vide.

    Args:
        label: Nom de la valeur demandee.
        prompt: Fonction de saisie masquee (defaut: getpass.getpass).

    Returns:
        Valeur saisie, sans espaces en bordure.
    """
    while True:
        value = prompt(f"🔑 Saisissez votre {label} : ").strip()
        if value:
            return value
        print("La valeur ne peut pas etre vide.", file=sys.stderr)


def build_logger(
    settings: CredLockSettings, verbose: bool = False
) -> Optional[Logger]:
    """Cree le FileLogger decrit par la section [logging].

    Un fichier de log impossible a creer n'interrompt pas la commande :
    un avertissement est ecrit sur stderr.

    Returns:
        Logger, ou None si aucun fichier n'est configure ou utilisable.
    """
    config = settings.logging
    if not config.file:
        return None
    level = "INFO" if verbose and config.level != "DEBUG" else config.level
    try:
        return FileLogger(
            config.file,
            level=level,
            log_format=config.format,
            console_output=config.console or verbose,
        )
    except OSError as e:
        print(
            f"Avertissement : journal {config.file} indisponible ({e}), "
            "execution sans log.",
            file=sys.stderr,
        )
        return None


def build_error_chain(logger: Optional[Logger]) -> ErrorHandlerChain:
    """Console (stderr) puis fichier de log si disponible."""
    chain = ErrorHandlerChain()
    chain.add_handler(ConsoleErrorHandler(solutions=SOLUTIONS))
    if logger:
        chain.add_handler(LoggerErrorHandler(logger))
    return chain


def build_manager(
    settings: CredLockSettings,
    logger: Optional[Logger],
    store: Optional[SecretRecordStore] = None,
) -> CredentialManager:
    """Assemble backend, session et manager depuis la configuration."""
    store_config = settings.store
    if store is None:
        store = create_record_store(
            store_config.backend,
            logger=logger,
            security_binary=store_config.security_binary,
        )
    session = StoreSession(store, store_config.container, logger=logger)
    return CredentialManager(
        session,
        settings=ContainerSettings(
            lock_on_sleep=store_config.lock_on_sleep,
            lock_interval_seconds=store_config.lock_interval_seconds,
        ),
        list_limit=store_config.list_limit,
        logger=logger,
    )


def validate_profile(profile: str) -> str:
    """Refuse un nom de profil vide ou fait d'espaces."""
    if not profile.strip():
        raise ValidationError("Le nom du profil ne peut pas etre vide.")
    return profile


def run_command(
    args: argparse.Namespace,
    manager: CredentialManager,
    prompt: PromptFn = getpass.getpass,
) -> List[str]:
    """Execute la commande et retourne les lignes a afficher."""
    if getattr(args, "profile", None) is not None:
        validate_profile(args.profile)
    if args.command == "init":
        manager.init()
        return []
    if args.command == "list":
        return manager.list_profiles()
    if args.command == "get":
        return manager.render(args.profile)
    if args.command in ("add-credentials", "add"):
        access_key_id = prompt_secret("access_key_id", prompt)
        secret_access_key = prompt_secret("secret_access_key", prompt)
        manager.add(args.profile, access_key_id, secret_access_key)
        return []
    if args.command in ("remove-credentials", "remove"):
        manager.remove(args.profile)
        return []
    raise ValueError(f"Commande inconnue : {args.command}")


def main(
    argv: Optional[Sequence[str]] = None,
    store: Optional[SecretRecordStore] = None,
    prompt: PromptFn = getpass.getpass,
) -> int:
    """Point d'entree de la CLI.

    Args:
        argv: Arguments (defaut: sys.argv[1:]).
        store: Backend impose (tests, portee isolee).
        prompt: Saisie masquee pour add-credentials.

    Returns:
        Code de sortie du processus.
    """
    args = build_parser().parse_args(argv)
    errors = build_error_chain(None)
    logger: Optional[Logger] = None

    try:
        settings = load_settings(args.config)
        logger = build_logger(settings, verbose=args.verbose)
        errors = build_error_chain(logger)
        manager = build_manager(settings, logger, store=store)
        lines = run_command(args, manager, prompt)
    except KeyboardInterrupt:
        print("\nInterrompu.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as error:  # noqa: BLE001
        # ConsoleErrorHandler distingue erreurs connues et bugs
        errors.handle(error)
        return EXIT_FAILURE

    for line in lines:
        print(line)
    return EXIT_OK


def run() -> None:
    """Entree du script console ``cred-lock``."""
    sys.exit(main())


if __name__ == "__main__":
    run()

"""Configuration de cred-lock.

Le fichier (TOML ou JSON) est cherche dans l'ordre :

1. chemin explicite (option --config)
2. variable d'environnement CRED_LOCK_CONFIG
3. ~/.config/cred-lock/config.toml
4. ~/.cred-lock.toml

Aucun fichier trouve : valeurs par defaut. Les variables
CRED_LOCK_CONTAINER et CRED_LOCK_BACKEND surchargent ensuite
la section [store].
"""

import json
import os
import tomllib
from pathlib import Path
from typing import Literal, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field, PositiveInt, field_validator
from pydantic import ValidationError as PydanticValidationError

from cred_lock.config.loader import ConfigLoader, FileConfigLoader
from cred_lock.errors.exceptions import FileConfigurationError

DEFAULT_CONTAINER_NAME = "aws-credlock"
DEFAULT_LOCK_INTERVAL_SECONDS = 300
DEFAULT_LIST_LIMIT = 100

CONFIG_ENV_VAR = "CRED_LOCK_CONFIG"
CONTAINER_ENV_VAR = "CRED_LOCK_CONTAINER"
BACKEND_ENV_VAR = "CRED_LOCK_BACKEND"

DEFAULT_SEARCH_PATHS: tuple[str, ...] = (
    "~/.config/cred-lock/config.toml",
    "~/.cred-lock.toml",
)

BackendName = Literal["auto", "keychain", "secret-service", "memory"]


class StoreSettings(BaseModel):
    """Section [store] : conteneur securise et backend."""

    model_config = {"extra": "forbid"}

    container: str = DEFAULT_CONTAINER_NAME
    backend: BackendName = "auto"
    lock_on_sleep: bool = True
    lock_interval_seconds: Optional[PositiveInt] = (
        DEFAULT_LOCK_INTERVAL_SECONDS
    )
    list_limit: PositiveInt = DEFAULT_LIST_LIMIT
    security_binary: str = "/usr/bin/security"

    @field_validator("container")
    @classmethod
    def container_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Le nom du conteneur ne peut pas etre vide")
        return value


class LoggingSettings(BaseModel):
    """Section [logging]."""

    model_config = {"extra": "forbid"}

    level: str = "WARNING"
    file: Optional[str] = "~/.local/state/cred-lock/cred-lock.log"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"
    console: bool = False

    @field_validator("level")
    @classmethod
    def known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Niveau de log inconnu: {value}")
        return level


class CredLockSettings(BaseModel):
    """Configuration complete de cred-lock."""

    model_config = {"extra": "forbid"}

    store: StoreSettings = Field(default_factory=StoreSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def find_config_file(
    config_path: Optional[Union[str, Path]] = None,
    search_paths: Sequence[Union[str, Path]] = DEFAULT_SEARCH_PATHS,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """Determine le fichier de configuration a charger.

    Un chemin explicite (argument ou CRED_LOCK_CONFIG) est retourne
    meme s'il n'existe pas, pour que le chargement echoue de facon
    visible. Les chemins de recherche, eux, sont optionnels.

    Args:
        config_path: Chemin explicite prioritaire.
        search_paths: Emplacements par defaut, dans l'ordre.
        environ: Environnement (defaut: os.environ).

    Returns:
        Chemin du fichier ou None.
    """
    env = os.environ if environ is None else environ
    explicit = config_path or env.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()
    for candidate in search_paths:
        path = Path(candidate).expanduser()
        if path.exists():
            return path
    return None


def load_settings(
    config_path: Optional[Union[str, Path]] = None,
    search_paths: Sequence[Union[str, Path]] = DEFAULT_SEARCH_PATHS,
    environ: Optional[Mapping[str, str]] = None,
    loader: Optional[ConfigLoader] = None,
) -> CredLockSettings:
    """Charge et valide la configuration.

    Args:
        config_path: Chemin explicite du fichier.
        search_paths: Emplacements de recherche.
        environ: Environnement (defaut: os.environ).
        loader: Chargeur injectable (defaut: FileConfigLoader).

    Returns:
        Configuration validee.

    Raises:
        FileConfigurationError: Fichier absent (chemin explicite),
            illisible ou non conforme au schema.
    """
    env = os.environ if environ is None else environ
    path = find_config_file(config_path, search_paths, env)

    if path is None:
        settings = CredLockSettings()
    else:
        loader = loader or FileConfigLoader()
        try:
            settings = loader.load(path, schema=CredLockSettings)
        except (
            FileNotFoundError,
            ValueError,
            tomllib.TOMLDecodeError,
            json.JSONDecodeError,
        ) as exc:
            # pydantic.ValidationError est une sous-classe de ValueError
            raise FileConfigurationError(
                f"Configuration invalide ({path}) : {exc}"
            ) from exc

    return _apply_env_overrides(settings, env)


def _apply_env_overrides(
    settings: CredLockSettings,
    environ: Mapping[str, str],
) -> CredLockSettings:
    """Applique CRED_LOCK_CONTAINER et CRED_LOCK_BACKEND."""
    overrides: dict[str, str] = {}
    if environ.get(CONTAINER_ENV_VAR):
        overrides["container"] = environ[CONTAINER_ENV_VAR]
    if environ.get(BACKEND_ENV_VAR):
        overrides["backend"] = environ[BACKEND_ENV_VAR]
    if not overrides:
        return settings

    data = settings.store.model_dump()
    data.update(overrides)
    try:
        store = StoreSettings.model_validate(data)
    except PydanticValidationError as exc:
        raise FileConfigurationError(
            f"Variable d'environnement invalide : {exc}"
        ) from exc
    return settings.model_copy(update={"store": store})

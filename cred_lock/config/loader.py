"""Lecture des fichiers de configuration de cred-lock.

Le format est deduit de l'extension (.toml ou .json). Le contenu doit
etre une table ; il peut ensuite etre valide par un modele pydantic.
"""

import json
import tomllib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Union

from pydantic import BaseModel


def _read_toml(path: Path) -> Any:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


READERS: Dict[str, Callable[[Path], Any]] = {
    ".toml": _read_toml,
    ".json": _read_json,
}


class ConfigLoader(ABC):
    """Source de configuration, substituable dans les tests."""

    @abstractmethod
    def load(
        self,
        config_path: Union[str, Path],
        schema: type | None = None
    ) -> Union[Dict[str, Any], Any]:
        """Charge un fichier de configuration.

        Args:
            config_path: Chemin du fichier.
            schema: Modele pydantic optionnel. Fourni, le resultat
                est une instance du modele ; sinon un dict brut.

        Returns:
            Dictionnaire ou instance du schema.
        """
        pass  # pragma: no cover


class FileConfigLoader(ConfigLoader):
    """Chargeur TOML/JSON avec validation pydantic optionnelle."""

    def load(
        self,
        config_path: Union[str, Path],
        schema: type | None = None
    ) -> Union[Dict[str, Any], Any]:
        """Lit puis valide un fichier de configuration.

        Raises:
            FileNotFoundError: Fichier absent.
            ValueError: Extension non supportee ou contenu qui n'est
                pas une table (les erreurs de syntaxe TOML/JSON et
                pydantic.ValidationError en derivent aussi).
            TypeError: schema n'est pas un BaseModel.
        """
        path = Path(config_path).expanduser()
        if not path.is_file():
            raise FileNotFoundError(
                f"Fichier de configuration non trouve: {path}"
            )

        reader = READERS.get(path.suffix.lower())
        if reader is None:
            raise ValueError(
                f"Extension non supportee: {path.suffix}. "
                f"Utilisez {' ou '.join(READERS)}"
            )

        data = reader(path)
        if not isinstance(data, dict):
            raise ValueError(
                f"{path.name} doit contenir une table, "
                f"recu: {type(data).__name__}"
            )
        if schema is None:
            return data
        return self._validate_with_schema(data, schema)

    @staticmethod
    def _validate_with_schema(data: Dict[str, Any], schema: type) -> Any:
        """Instancie le modele pydantic a partir du dict brut.

        Raises:
            TypeError: schema n'est pas une sous-classe de BaseModel.
        """
        if not (isinstance(schema, type) and issubclass(schema, BaseModel)):
            raise TypeError(
                f"Le schema doit etre une sous-classe de "
                f"pydantic.BaseModel, recu: {schema}"
            )
        return schema.model_validate(data)

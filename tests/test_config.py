"""Tests pour le module config."""

import json
import unittest
from pathlib import Path

import pytest
from pydantic import BaseModel

from cred_lock.config import (
    DEFAULT_CONTAINER_NAME,
    CredLockSettings,
    FileConfigLoader,
    find_config_file,
    load_settings,
)
from cred_lock.errors.exceptions import FileConfigurationError


class SampleConfig(BaseModel):
    """Modele Pydantic de test."""
    name: str
    count: int

    model_config = {"extra": "forbid"}


class TestFileConfigLoader:
    """Tests de FileConfigLoader."""

    def test_load_toml(self, tmp_path: Path) -> None:
        """Un fichier TOML est charge en dict."""
        path = tmp_path / "config.toml"
        path.write_text('[store]\ncontainer = "test"\n')

        assert FileConfigLoader().load(path) == {
            "store": {"container": "test"}
        }

    def test_load_json(self, tmp_path: Path) -> None:
        """Un fichier JSON est charge en dict."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"name": "x", "count": 1}))

        assert FileConfigLoader().load(path)["count"] == 1

    def test_load_avec_schema(self, tmp_path: Path) -> None:
        """Avec un schema, une instance du modele est retournee."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"name": "x", "count": 1}))

        result = FileConfigLoader().load(path, schema=SampleConfig)

        assert isinstance(result, SampleConfig)
        assert result.name == "x"

    def test_fichier_absent(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            FileConfigLoader().load(tmp_path / "absent.toml")

    def test_extension_non_supportee(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("store: {}")
        with pytest.raises(ValueError, match="Extension non supportee"):
            FileConfigLoader().load(path)

    def test_contenu_non_table(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="table"):
            FileConfigLoader().load(path)

    def test_schema_non_pydantic(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{}")
        with pytest.raises(TypeError, match="BaseModel"):
            FileConfigLoader().load(path, schema=dict)


class TestFindConfigFile:
    """Tests de la recherche du fichier de configuration."""

    def test_chemin_explicite_prioritaire(self, tmp_path: Path) -> None:
        explicit = tmp_path / "explicit.toml"
        assert find_config_file(explicit, environ={}) == explicit

    def test_variable_environnement(self, tmp_path: Path) -> None:
        path = tmp_path / "env.toml"
        environ = {"CRED_LOCK_CONFIG": str(path)}
        assert find_config_file(None, environ=environ) == path

    def test_premier_chemin_existant(self, tmp_path: Path) -> None:
        second = tmp_path / "second.toml"
        second.write_text("")
        found = find_config_file(
            None,
            search_paths=[tmp_path / "first.toml", second],
            environ={},
        )
        assert found == second

    def test_aucun_fichier(self, tmp_path: Path) -> None:
        assert find_config_file(
            None, search_paths=[tmp_path / "absent.toml"], environ={}
        ) is None


class TestLoadSettings(unittest.TestCase):
    """Tests de load_settings."""

    def setUp(self):
        import tempfile
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, name: str, content: str) -> Path:
        path = self.tmp / name
        path.write_text(content)
        return path

    def test_valeurs_par_defaut(self):
        """Sans fichier, la configuration par defaut est utilisee."""
        settings = load_settings(
            search_paths=[self.tmp / "absent.toml"], environ={}
        )
        self.assertEqual(settings.store.container, DEFAULT_CONTAINER_NAME)
        self.assertEqual(settings.store.backend, "auto")
        self.assertTrue(settings.store.lock_on_sleep)
        self.assertEqual(settings.store.lock_interval_seconds, 300)
        self.assertEqual(settings.store.list_limit, 100)

    def test_fichier_toml(self):
        path = self._write("config.toml", (
            "[store]\n"
            'container = "perso"\n'
            'backend = "memory"\n'
            "lock_interval_seconds = 600\n"
            "[logging]\n"
            'level = "debug"\n'
        ))
        settings = load_settings(path, environ={})
        self.assertEqual(settings.store.container, "perso")
        self.assertEqual(settings.store.backend, "memory")
        self.assertEqual(settings.store.lock_interval_seconds, 600)
        self.assertEqual(settings.logging.level, "DEBUG")

    def test_backend_inconnu(self):
        path = self._write("config.toml", '[store]\nbackend = "vault"\n')
        with self.assertRaises(FileConfigurationError):
            load_settings(path, environ={})

    def test_cle_inconnue(self):
        path = self._write("config.toml", "[store]\nfoo = 1\n")
        with self.assertRaises(FileConfigurationError):
            load_settings(path, environ={})

    def test_toml_invalide(self):
        path = self._write("config.toml", "[store\n")
        with self.assertRaises(FileConfigurationError):
            load_settings(path, environ={})

    def test_chemin_explicite_absent(self):
        with self.assertRaises(FileConfigurationError):
            load_settings(self.tmp / "absent.toml", environ={})

    def test_surcharges_environnement(self):
        settings = load_settings(
            search_paths=[],
            environ={
                "CRED_LOCK_CONTAINER": "isole",
                "CRED_LOCK_BACKEND": "memory",
            },
        )
        self.assertEqual(settings.store.container, "isole")
        self.assertEqual(settings.store.backend, "memory")
        self.assertIsInstance(settings, CredLockSettings)

    def test_surcharge_backend_invalide(self):
        with self.assertRaises(FileConfigurationError):
            load_settings(
                search_paths=[], environ={"CRED_LOCK_BACKEND": "vault"}
            )

    def test_conteneur_vide_refuse(self):
        path = self._write("config.toml", '[store]\ncontainer = "  "\n')
        with self.assertRaises(FileConfigurationError):
            load_settings(path, environ={})

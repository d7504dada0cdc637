"""Tests pour le module commands."""

from unittest.mock import MagicMock, patch

import pytest

from cred_lock.commands import (
    CommandExecutor,
    CommandResult,
    SubprocessCommandExecutor,
    format_command,
)
from cred_lock.logging.base import Logger


# --- Tests CommandResult ---


class TestCommandResult:
    """Tests pour la dataclass CommandResult."""

    def test_creation_avec_tous_les_champs(self):
        """Test de la création avec tous les champs."""
        result = CommandResult(
            command=["security", "list-keychains"],
            return_code=0,
            stdout="login.keychain",
            stderr="",
            success=True,
            duration=0.5,
        )
        assert result.command == ["security", "list-keychains"]
        assert result.return_code == 0
        assert result.stdout == "login.keychain"
        assert result.success is True
        assert result.duration == 0.5

    def test_frozen(self):
        """Test que la dataclass est immuable."""
        result = CommandResult(
            command=["ls"],
            return_code=0,
            stdout="",
            stderr="",
            success=True,
            duration=0.0,
        )
        with pytest.raises(AttributeError):
            result.return_code = 1


# --- Tests format_command ---


class TestFormatCommand:
    """Tests du rendu des commandes pour les logs."""

    def test_jointure_simple(self):
        assert format_command(["security", "dump-keychain"]) == (
            "security dump-keychain"
        )

    def test_arguments_cites(self):
        """Les arguments vides ou avec espaces restent lisibles."""
        assert format_command(["security", "-p", ""]) == "security -p ''"
        assert format_command(["security", "-l", "mon profil"]) == (
            "security -l 'mon profil'"
        )


# --- Tests SubprocessCommandExecutor ---


class TestSubprocessCommandExecutor:
    """Tests pour SubprocessCommandExecutor."""

    @pytest.fixture
    def logger(self):
        return MagicMock(spec=Logger)

    def test_implements_abc(self):
        assert isinstance(SubprocessCommandExecutor(), CommandExecutor)

    @patch("cred_lock.commands.runner.subprocess.run")
    def test_run_succes(self, mock_run, logger):
        """Test d'une commande reussie."""
        mock_run.return_value = MagicMock(
            returncode=0, stdout="ok\n", stderr=""
        )
        executor = SubprocessCommandExecutor(logger=logger)

        result = executor.run(["security", "show-keychain-info", "kc"])

        assert result.success is True
        assert result.return_code == 0
        assert result.stdout == "ok\n"
        mock_run.assert_called_once_with(
            ["security", "show-keychain-info", "kc"],
            input=None,
            capture_output=True,
            text=True,
        )
        logger.log_info.assert_called_once()
        logger.log_error.assert_not_called()

    @patch("cred_lock.commands.runner.subprocess.run")
    def test_run_code_retour_non_nul(self, mock_run, logger):
        """Un code retour non nul est rendu, pas leve."""
        mock_run.return_value = MagicMock(
            returncode=44, stdout="", stderr="could not be found"
        )
        executor = SubprocessCommandExecutor(logger=logger)

        result = executor.run(["security", "find-generic-password"])

        assert result.success is False
        assert result.return_code == 44
        assert result.stderr == "could not be found"
        logger.log_error.assert_called_once()
        assert "Code retour 44" in logger.log_error.call_args[0][0]

    @patch("cred_lock.commands.runner.subprocess.run")
    def test_entree_standard_transmise(self, mock_run):
        """Le texte input est passe a subprocess.run."""
        mock_run.return_value = MagicMock(
            returncode=0, stdout="", stderr=""
        )
        executor = SubprocessCommandExecutor()

        executor.run(["security", "-i"], input='"help"\n')

        assert mock_run.call_args.args[0] == ["security", "-i"]
        assert mock_run.call_args.kwargs["input"] == '"help"\n'

    @patch("cred_lock.commands.runner.subprocess.run")
    def test_entree_standard_absente_des_logs(self, mock_run, logger):
        """Le texte envoye sur stdin n'est jamais journalise."""
        mock_run.return_value = MagicMock(
            returncode=1, stdout="", stderr="boom"
        )
        executor = SubprocessCommandExecutor(logger=logger)

        executor.run(
            ["security", "-i"],
            input='"add-generic-password" "-w" "s3cret"\n',
        )

        logged = [
            call[0][0]
            for call in (
                logger.log_info.call_args_list
                + logger.log_error.call_args_list
            )
        ]
        assert logged
        assert all("s3cret" not in message for message in logged)

    @patch("cred_lock.commands.runner.subprocess.run")
    def test_binaire_introuvable(self, mock_run, logger):
        """Une OSError donne return_code -1 et le message en stderr."""
        mock_run.side_effect = FileNotFoundError(
            "No such file: /usr/bin/security"
        )
        executor = SubprocessCommandExecutor(logger=logger)

        result = executor.run(["/usr/bin/security", "dump-keychain"])

        assert result.success is False
        assert result.return_code == -1
        assert "/usr/bin/security" in result.stderr
        logger.log_error.assert_called_once()

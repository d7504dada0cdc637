"""Module d'execution de commandes systeme.

Classes disponibles :
    CommandResult : Resultat immuable d'une execution.
    CommandExecutor : Interface abstraite pour les executeurs.
    SubprocessCommandExecutor : Executeur concret via subprocess.
"""

from cred_lock.commands.base import (
    CommandResult,
    CommandExecutor,
)
from cred_lock.commands.runner import (
    SubprocessCommandExecutor,
    format_command,
)

__all__ = [
    "CommandResult",
    "CommandExecutor",
    "SubprocessCommandExecutor",
    "format_command",
]

"""Permet ``python -m cred_lock``."""

from cred_lock.cli import run

run()

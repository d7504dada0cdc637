"""Module de gestion des erreurs."""

from cred_lock.errors.base import ErrorHandler, ErrorHandlerChain
from cred_lock.errors.exceptions import (ApplicationError,
                                         ConfigurationError,
                                         FileConfigurationError,
                                         ValidationError)
from cred_lock.errors.console_handler import ConsoleErrorHandler
from cred_lock.errors.logger_handler import LoggerErrorHandler


__all__ = [
    "ApplicationError",
    "ConfigurationError",
    "FileConfigurationError",
    "ValidationError",
    "ErrorHandler",
    "ConsoleErrorHandler",
    "LoggerErrorHandler",
    "ErrorHandlerChain",
]

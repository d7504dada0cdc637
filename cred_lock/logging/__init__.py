"""Module de logging."""

from cred_lock.logging.base import Logger
from cred_lock.logging.file_logger import FileLogger
from cred_lock.logging.security_logger import (
    SecurityEvent,
    SecurityEventType,
    SecurityLogger,
    mask_access_key,
)

__all__ = [
    "Logger",
    "FileLogger",
    "SecurityEvent",
    "SecurityEventType",
    "SecurityLogger",
    "mask_access_key",
]

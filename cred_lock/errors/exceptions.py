"""
Module contenant les exceptions de base de cred-lock.

Les erreurs metier du magasin de credentials (cred_lock.credentials)
heritent de ApplicationError pour s'integrer dans la chaine
d'error handlers.
"""


class ApplicationError(Exception):
    """Exception de base pour toute l'application."""
    pass


class ConfigurationError(ApplicationError):
    """Exception de base pour toutes les configurations."""
    pass


class FileConfigurationError(ConfigurationError):
    """Fichier de configuration illisible ou invalide."""
    pass


class ValidationError(ApplicationError):
    """Exception de base pour toutes les validations."""
    pass

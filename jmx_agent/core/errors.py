"""
Exceptions de l'agent de requêtes JMX

Hiérarchie commune à la configuration, à l'exécution des requêtes
et aux writers de sortie.
"""


class AgentError(Exception):
    """Erreur de base de l'agent"""


class ConfigurationError(AgentError):
    """Configuration d'agent ou de requête invalide"""


class InvalidPattern(AgentError, ValueError):
    """
    Pattern de ressource impossible à analyser

    Attributes:
        pattern: Chaîne fautive telle que fournie
    """

    def __init__(self, pattern, reason: str = ""):
        self.pattern = pattern
        self.reason = reason
        message = f"Invalid object name: {pattern}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ManagementError(AgentError):
    """Erreur renvoyée par le serveur de management distant"""


class ConnectionIOError(ManagementError, IOError):
    """Échec d'entrée/sortie vers le serveur de management"""


class InstanceNotFound(ManagementError):
    """La ressource demandée n'existe plus sur le serveur"""


class IntrospectionFailure(ManagementError):
    """Impossible de lire les métadonnées de la ressource"""


class ReflectionFailure(ManagementError):
    """Le serveur n'a pas pu invoquer l'accesseur d'attribut"""


class UnmarshalFailure(ManagementError):
    """Valeur distante impossible à désérialiser"""


class RemoteClassNotFound(ManagementError):
    """Type de valeur distant indisponible localement"""


class WriterError(AgentError):
    """Échec d'un writer de sortie"""

"""
Classe de base des connexions au serveur de management

Une connexion n'est utilisée que par une exécution de requête à la fois ;
les exécutions concurrentes ouvrent chacune leur propre connexion.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

from ..model.pattern import ResourcePattern


class ManagementConnection(ABC):
    """
    Interface commune d'accès aux ressources gérées distantes
    """

    @abstractmethod
    def discover(self, pattern: ResourcePattern) -> List[ResourcePattern]:
        """
        Résout un pattern en noms de ressources concrets

        Raises:
            ConnectionIOError: En cas d'échec de communication
        """

    @abstractmethod
    def get_attribute_names(self, resource: ResourcePattern) -> List[str]:
        """Liste les attributs déclarés dans les métadonnées de la ressource"""

    @abstractmethod
    def get_class_name(self, resource: ResourcePattern) -> str:
        """Classe d'implémentation de la ressource"""

    def get_domain(self, resource: ResourcePattern) -> str:
        return resource.domain

    @abstractmethod
    def get_attribute_values(self, resource: ResourcePattern,
                             names: Sequence[str]) -> Dict[str, Any]:
        """
        Lit plusieurs attributs en un seul appel

        Raises:
            ConnectionIOError, InstanceNotFound, ReflectionFailure,
            UnmarshalFailure
        """

    def close(self):
        """Ferme la connexion"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

"""
Connexion vers un registre local de ressources

Sert aux tests et à l'intégration de l'agent dans un processus qui
expose lui-même ses ressources.
"""

from typing import Any, Dict, List, Optional, Sequence

from ..core.errors import InstanceNotFound
from ..model.pattern import ResourcePattern
from .base import ManagementConnection


class _Entry:
    def __init__(self, class_name: str, attributes: Dict[str, Any],
                 failure: Optional[Exception]):
        self.class_name = class_name
        self.attributes = attributes
        self.failure = failure


class InMemoryConnection(ManagementConnection):
    """
    Registre de ressources en mémoire

    Les ressources sont restituées dans leur ordre d'enregistrement.
    """

    def __init__(self):
        self._entries: Dict[ResourcePattern, _Entry] = {}
        self.fetch_calls: List[tuple] = []

    def register(self, name: str, class_name: str, attributes: Optional[Dict[str, Any]] = None,
                 failure: Optional[Exception] = None) -> ResourcePattern:
        """
        Enregistre une ressource

        Args:
            name: Nom concret, ex. ``java.lang:type=Memory``
            class_name: Classe de la ressource
            attributes: Valeurs des attributs
            failure: Exception levée à chaque lecture d'attributs

        Returns:
            ResourcePattern: Nom analysé
        """
        resource = ResourcePattern(name)
        self._entries[resource] = _Entry(class_name, dict(attributes or {}), failure)
        return resource

    def _entry(self, resource: ResourcePattern) -> _Entry:
        try:
            return self._entries[resource]
        except KeyError:
            raise InstanceNotFound(f"Ressource introuvable: {resource}") from None

    def discover(self, pattern: ResourcePattern) -> List[ResourcePattern]:
        return [resource for resource in self._entries if pattern.matches(resource)]

    def get_attribute_names(self, resource: ResourcePattern) -> List[str]:
        return list(self._entry(resource).attributes)

    def get_class_name(self, resource: ResourcePattern) -> str:
        return self._entry(resource).class_name

    def get_attribute_values(self, resource: ResourcePattern,
                             names: Sequence[str]) -> Dict[str, Any]:
        entry = self._entry(resource)
        self.fetch_calls.append((resource, tuple(names)))
        if entry.failure is not None:
            raise entry.failure
        return {name: entry.attributes[name] for name in names if name in entry.attributes}

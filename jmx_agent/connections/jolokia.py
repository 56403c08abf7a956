"""
Connexion HTTP vers un agent Jolokia

Ce module gère :
- La recherche des ressources correspondant à un pattern
- La lecture des métadonnées (attributs, classe)
- La lecture groupée des attributs
- La conversion des erreurs Jolokia en exceptions de l'agent
"""

from typing import Any, Dict, List, Optional, Sequence

import requests
import urllib3

from ..core.errors import (
    ConnectionIOError,
    InstanceNotFound,
    IntrospectionFailure,
    InvalidPattern,
    ManagementError,
    ReflectionFailure,
    RemoteClassNotFound,
    UnmarshalFailure,
)
from ..core.logger import get_logger
from ..model.pattern import ResourcePattern
from .base import ManagementConnection

USER_AGENT = 'JmxAgent/1.0.0'


def _escape_path(element: str) -> str:
    return element.replace('!', '!!').replace('/', '!/')


class JolokiaConnection(ManagementConnection):
    """
    Accès aux ressources JMX d'un serveur via son agent Jolokia

    Une instance par exécution de requête : la session HTTP n'est
    pas partagée entre threads.
    """

    def __init__(self, url: str, timeout: int = 30, verify_ssl: bool = True,
                 username: Optional[str] = None, password: Optional[str] = None):
        """
        Args:
            url: URL de l'agent, ex. ``http://host:8778/jolokia``
            timeout: Délai maximal d'une requête HTTP (secondes)
            verify_ssl: Vérifier le certificat du serveur
            username: Utilisateur HTTP (optionnel)
            password: Mot de passe HTTP (optionnel)
        """
        self.url = url.rstrip('/') + '/'
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.logger = get_logger()
        self._last_info = None

        self.session = requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'User-Agent': USER_AGENT
        })
        if username:
            self.session.auth = (username, password or '')

        if not verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    @classmethod
    def for_server(cls, server, timeout: int = 30, verify_ssl: bool = True) -> 'JolokiaConnection':
        """Crée une connexion vers un ServerContext"""
        return cls(server.url, timeout=timeout, verify_ssl=verify_ssl,
                   username=server.username, password=server.password)

    def _request(self, payload: Dict[str, Any]) -> Any:
        """
        Envoie une requête Jolokia et retourne son champ ``value``

        Raises:
            ConnectionIOError: Erreur réseau ou réponse HTTP invalide
            ManagementError: Erreur signalée par Jolokia
        """
        try:
            response = self.session.post(
                url=self.url,
                json=payload,
                timeout=self.timeout,
                verify=self.verify_ssl
            )
            response.raise_for_status()
            body = response.json()

        except requests.exceptions.Timeout as e:
            raise ConnectionIOError(f"Timeout Jolokia (>{self.timeout}s) sur {self.url}") from e
        except requests.exceptions.RequestException as e:
            raise ConnectionIOError(f"Erreur de connexion à {self.url}: {e}") from e
        except ValueError as e:
            raise ConnectionIOError(f"Réponse non-JSON de {self.url}") from e

        if not isinstance(body, dict):
            raise ConnectionIOError(f"Réponse Jolokia inattendue de {self.url}: {body!r}")

        status = body.get('status', 200)
        if status != 200:
            raise self._to_error(payload, body)

        return body.get('value')

    def _to_error(self, payload: Dict[str, Any], body: Dict[str, Any]) -> ManagementError:
        error_type = body.get('error_type') or ''
        message = f"{payload.get('type')} {payload.get('mbean') or payload.get('path')}: {body.get('error')}"
        details = f"{body.get('error') or ''}\n{body.get('stacktrace') or ''}"

        if 'InstanceNotFoundException' in error_type:
            return InstanceNotFound(message)
        if 'IntrospectionException' in error_type:
            return IntrospectionFailure(message)
        if 'ReflectionException' in error_type:
            return ReflectionFailure(message)
        if 'UnmarshalException' in error_type:
            error = UnmarshalFailure(message)
            if 'ClassNotFoundException' in details:
                error.__cause__ = RemoteClassNotFound(body.get('error'))
            return error
        return ManagementError(message)

    def discover(self, pattern: ResourcePattern) -> List[ResourcePattern]:
        self._last_info = None
        names = self._request({'type': 'search', 'mbean': str(pattern)}) or []
        if not isinstance(names, list):
            raise ConnectionIOError(f"Réponse de recherche inattendue pour {pattern}: {names!r}")

        resources = []
        for name in names:
            try:
                resources.append(ResourcePattern(name))
            except InvalidPattern:
                self.logger.warning(f"Nom de ressource ignoré (non analysable): {name}")
        return resources

    def _info(self, resource: ResourcePattern) -> Dict[str, Any]:
        """Métadonnées de la ressource, lues une fois pour la ressource courante"""
        if self._last_info is not None and self._last_info[0] == resource:
            return self._last_info[1]

        path = f"{_escape_path(resource.domain)}/{_escape_path(resource.key_property_list_string)}"
        info = self._request({'type': 'list', 'path': path})
        if not isinstance(info, dict):
            raise IntrospectionFailure(f"Métadonnées invalides pour {resource}")

        self._last_info = (resource, info)
        return info

    def get_attribute_names(self, resource: ResourcePattern) -> List[str]:
        attributes = self._info(resource).get('attr') or {}
        if not isinstance(attributes, dict):
            raise IntrospectionFailure(f"Liste d'attributs invalide pour {resource}")
        return list(attributes.keys())

    def get_class_name(self, resource: ResourcePattern) -> str:
        return self._info(resource).get('class') or ''

    def get_attribute_values(self, resource: ResourcePattern,
                             names: Sequence[str]) -> Dict[str, Any]:
        value = self._request({
            'type': 'read',
            'mbean': str(resource),
            'attribute': list(names)
        })
        if not isinstance(value, dict):
            raise ManagementError(f"Réponse de lecture invalide pour {resource}: {value!r}")
        return value

    def close(self):
        self.session.close()

"""
Chargement des fichiers de requêtes JSON

Format attendu ::

    {"servers": [{"alias": "app1", "url": "http://app1:8778/jolokia",
                  "queries": [{"obj": "java.lang:type=Memory",
                               "attr": ["HeapMemoryUsage"],
                               "outputWriters": [{"type": "log"}]}]}]}

Les serveurs de même URL répartis sur plusieurs fichiers sont fusionnés
et les requêtes égales n'y sont gardées qu'une fois.
"""

import json
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from .errors import AgentError, ConfigurationError
from .logger import get_logger
from ..model.query import QuerySpec
from ..model.server import ServerContext


@dataclass
class ServerEntry:
    """Serveur et requêtes qui lui sont associées"""
    server: ServerContext
    queries: List[QuerySpec] = field(default_factory=list)

    def add_query(self, query: QuerySpec) -> bool:
        if query in self.queries:
            return False
        self.queries.append(query)
        return True


def parse_servers(data, source: str = "<config>",
                  writer_resolver: Optional[Callable] = None) -> List[ServerEntry]:
    """
    Construit les serveurs et requêtes d'un document déjà décodé

    Raises:
        ConfigurationError: Structure ou requête invalide
    """
    if not isinstance(data, dict) or not isinstance(data.get('servers'), list):
        raise ConfigurationError(f"{source}: liste 'servers' attendue")

    entries = []
    for index, server_data in enumerate(data['servers']):
        if not isinstance(server_data, dict) or not server_data.get('url'):
            raise ConfigurationError(f"{source}: serveur #{index} sans 'url'")

        server = ServerContext(
            url=server_data['url'],
            alias=server_data.get('alias'),
            username=server_data.get('username'),
            password=server_data.get('password'),
        )
        entry = ServerEntry(server)

        for query_data in server_data.get('queries') or ():
            try:
                entry.add_query(QuerySpec.from_dict(query_data, writer_resolver))
            except ConfigurationError as e:
                raise ConfigurationError(f"{source}: {e}") from e
            except AgentError as e:
                raise ConfigurationError(f"{source}: requête invalide pour {server.label}: {e}") from e

        entries.append(entry)
    return entries


def load_servers(paths: Iterable[str],
                 writer_resolver: Optional[Callable] = None) -> List[ServerEntry]:
    """
    Charge et fusionne plusieurs fichiers de requêtes

    Args:
        paths: Chemins des fichiers JSON
        writer_resolver: Conversion des entrées ``outputWriters``

    Returns:
        list: Serveurs dans l'ordre de première apparition
    """
    logger = get_logger()
    merged = {}

    for path in paths:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigurationError(f"{path}: lecture impossible: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{path}: JSON invalide: {e}") from e

        for entry in parse_servers(data, path, writer_resolver):
            target = merged.setdefault(entry.server.url, ServerEntry(entry.server))
            for query in entry.queries:
                if not target.add_query(query):
                    logger.debug(f"Requête en double ignorée ({path}): {query!r}")

        logger.info(f"Fichier de requêtes chargé: {path}")

    return list(merged.values())

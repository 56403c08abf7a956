"""
Writer HTTP des résultats de requêtes

Envoie les résultats d'une exécution à une API centrale sous forme JSON.
"""

from datetime import datetime
from typing import Any, Dict, Optional

import requests

from ..core.errors import WriterError
from ..core.logger import get_logger
from .base import OutputWriter, OutputWriterFactory

USER_AGENT = 'JmxAgent/1.0.0'


class HttpWriter(OutputWriter):
    """
    Poste les résultats vers une URL

    Toute erreur HTTP est remontée sous forme de WriterError.
    """

    def __init__(self, url: str, auth_token: Optional[str] = None,
                 timeout: int = 30, verify_ssl: bool = True):
        self.url = url
        self.auth_token = auth_token
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.logger = get_logger()
        self.session = requests.Session()

    def _payload(self, server, query, results) -> Dict[str, Any]:
        return {
            'timestamp': datetime.now().isoformat(),
            'server': server.label,
            'query': str(query.pattern),
            'results': [
                {
                    'key': result.key(),
                    'attribute': result.attribute_name,
                    'type_name': result.type_name,
                    'value': result.value,
                    'epoch': result.epoch
                }
                for result in results
            ]
        }

    def do_write(self, server, query, results):
        headers = {
            'Content-Type': 'application/json',
            'User-Agent': USER_AGENT
        }
        if self.auth_token:
            headers['Authorization'] = f'Bearer {self.auth_token}'

        payload = self._payload(server, query, results)
        self.logger.debug(f"Envoi de {len(payload['results'])} résultat(s) vers {self.url}")

        try:
            response = self.session.post(
                url=self.url,
                json=payload,
                headers=headers,
                timeout=self.timeout,
                verify=self.verify_ssl
            )
        except requests.exceptions.Timeout as e:
            raise WriterError(f"Timeout lors de l'envoi (>{self.timeout}s) vers {self.url}") from e
        except requests.exceptions.RequestException as e:
            raise WriterError(f"Erreur de connexion à {self.url}: {e}") from e

        if response.status_code not in (200, 201, 202, 204):
            raise WriterError(f"Erreur serveur HTTP {response.status_code}: {response.text[:200]}")

    def close(self):
        self.session.close()


class HttpWriterFactory(OutputWriterFactory):
    """Fabrique de HttpWriter"""

    type_name = 'http'

    def __init__(self, url: str, auth_token: Optional[str] = None,
                 timeout: int = 30, verify_ssl: bool = True):
        if not url or not url.startswith(('http://', 'https://')):
            raise ValueError(f"URL de writer invalide: {url}")
        self.url = url
        self.auth_token = auth_token
        self.timeout = timeout
        self.verify_ssl = verify_ssl

    def create(self) -> HttpWriter:
        return HttpWriter(self.url, self.auth_token, self.timeout, self.verify_ssl)

    def to_dict(self) -> dict:
        return {'type': self.type_name, 'url': self.url,
                'timeout': self.timeout, 'verify_ssl': self.verify_ssl}

"""
Package des connexions aux serveurs de management

- Interface commune (classe abstraite)
- Connexion HTTP Jolokia
- Registre en mémoire
"""

from .base import ManagementConnection
from .jolokia import JolokiaConnection
from .memory import InMemoryConnection

__all__ = ['ManagementConnection', 'JolokiaConnection', 'InMemoryConnection']

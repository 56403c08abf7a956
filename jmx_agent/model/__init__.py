"""
Modèle des requêtes de l'agent

- Patterns de ressources
- Stratégies de nommage des clés
- Requêtes immuables et leur builder
- Résultats
"""

from .naming import NamingKind, NamingStrategy
from .pattern import ResourcePattern
from .query import Builder, QuerySpec
from .result import Result, ResultProcessor
from .server import ServerContext

__all__ = [
    'NamingKind', 'NamingStrategy', 'ResourcePattern', 'Builder',
    'QuerySpec', 'Result', 'ResultProcessor', 'ServerContext',
]

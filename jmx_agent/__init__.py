"""
Agent JMX - Exécution de requêtes sur des serveurs de management

Ce package résout des patterns de ressources JMX, lit leurs attributs,
nomme chaque valeur de manière stable et transmet les résultats à des
writers de sortie configurables.

Version: 1.0.0
"""

__version__ = "1.0.0"

from .core.config import AgentConfig
from .core.dispatcher import ResultDispatcher
from .core.executor import QueryExecutor, QueryOutcome
from .core.logger import AgentLogger
from .model import QuerySpec, ResourcePattern, Result, ServerContext

__all__ = [
    'AgentConfig', 'AgentLogger', 'QueryExecutor', 'QueryOutcome',
    'ResultDispatcher', 'QuerySpec', 'ResourcePattern', 'Result', 'ServerContext',
]

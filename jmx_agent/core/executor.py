"""
Module d'exécution des requêtes JMX

Ce module gère :
- La découverte des ressources correspondant au pattern d'une requête
- La lecture groupée des attributs de chaque ressource
- La construction des résultats
- L'isolation des échecs par ressource
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from .errors import ManagementError, RemoteClassNotFound, UnmarshalFailure
from .logger import get_logger
from ..model.result import Result, ResultProcessor


@dataclass
class QueryOutcome:
    """
    Bilan d'une exécution de requête

    Attributes:
        results: Résultats des ressources lues avec succès
        failures: Couples (ressource, exception) des ressources en échec
    """
    results: List[Result] = field(default_factory=list)
    failures: List[Tuple[object, Exception]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class QueryExecutor:
    """
    Exécute une requête contre une connexion de management

    Sans état : une même instance peut servir à plusieurs threads tant
    que chacun utilise sa propre connexion.
    """

    def __init__(self, logger=None):
        """
        Args:
            logger: Instance de AgentLogger (optionnel)
        """
        self.logger = logger.get_logger() if logger else get_logger()

    def query_names(self, query, connection) -> list:
        """
        Résout le pattern de la requête en ressources concrètes

        Raises:
            ConnectionIOError: Échec de communication ; toute l'exécution est abandonnée
        """
        return list(connection.discover(query.pattern))

    def fetch_results(self, query, connection, resource) -> List[Result]:
        """
        Lit les attributs d'une ressource et construit ses résultats

        Args:
            query: QuerySpec exécutée
            connection: ManagementConnection ouverte
            resource: Nom concret de la ressource

        Returns:
            list: Résultats de la ressource (vide si aucun attribut)

        Raises:
            ManagementError: Toute erreur autre qu'une classe distante introuvable
        """
        class_name = connection.get_class_name(resource)

        if query.attr:
            attributes = list(query.attr)
        else:
            attributes = list(connection.get_attribute_names(resource))

        if not attributes:
            return []

        try:
            self.logger.debug(f"Exécution de la ressource [{resource.canonical_name}] "
                              f"pour la requête [{query!r}]")

            values = connection.get_attribute_values(resource, attributes)

            return ResultProcessor(query, resource, values, class_name,
                                   connection.get_domain(resource)).get_results()

        except UnmarshalFailure as ue:
            if isinstance(ue.__cause__, RemoteClassNotFound):
                self.logger.debug(f"Désérialisation impossible, on continue "
                                  f"(type distant absent localement): {ue}")
                return []
            raise

    def execute(self, query, connection) -> QueryOutcome:
        """
        Découvre les ressources puis lit chacune d'elles

        Un échec de lecture n'abandonne que la ressource concernée.

        Returns:
            QueryOutcome: Résultats et échecs par ressource
        """
        outcome = QueryOutcome()

        for resource in self.query_names(query, connection):
            try:
                outcome.results.extend(self.fetch_results(query, connection, resource))
            except ManagementError as e:
                self.logger.error(f"Erreur de lecture de [{resource}] "
                                  f"(pattern {query.pattern}, attributs {list(query.attr)}): {e}")
                outcome.failures.append((resource, e))

        self.logger.debug(f"Requête [{query.pattern}] : {len(outcome.results)} résultat(s), "
                          f"{len(outcome.failures)} échec(s)")
        return outcome

"""
Interfaces des writers de sortie

Une fabrique est déclarée dans la configuration d'une requête ; elle
produit une seule instance de writer, créée avec la requête et
réutilisée par toutes ses exécutions.
"""

from abc import ABC, abstractmethod


class OutputWriter(ABC):
    """
    Destination des résultats d'une requête

    Une instance peut être appelée plusieurs fois à la suite ; les
    appels concurrents ne sont sûrs que si l'implémentation l'est.
    """

    @abstractmethod
    def do_write(self, server, query, results):
        """
        Écrit les résultats d'une exécution

        Args:
            server: ServerContext d'origine des résultats
            query: QuerySpec exécutée
            results: Séquence de Result, éventuellement vide
        """

    def close(self):
        """Libère les ressources du writer"""


class OutputWriterFactory(ABC):
    """Fabrique d'un writer de sortie"""

    @abstractmethod
    def create(self) -> OutputWriter:
        """Crée une nouvelle instance de writer"""

    def to_dict(self) -> dict:
        """Forme sérialisable de la fabrique"""
        return {'type': getattr(self, 'type_name', self.__class__.__name__)}

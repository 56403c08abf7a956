"""Transmission des résultats d'une requête à ses writers"""

from .logger import get_logger


class ResultDispatcher:
    """
    Appelle chaque writer d'une requête, dans l'ordre de configuration

    Le premier échec interrompt l'envoi : les writers suivants ne sont
    pas appelés.
    """

    def __init__(self, logger=None):
        self.logger = logger.get_logger() if logger else get_logger()

    def dispatch(self, server, query, results):
        """
        Args:
            server: ServerContext d'origine des résultats
            query: QuerySpec exécutée
            results: Résultats, éventuellement vides
        """
        results = list(results)
        for writer in query.output_writer_instances:
            writer.do_write(server, query, results)
        self.logger.debug(f"Writers exécutés pour la requête: {query!r}")

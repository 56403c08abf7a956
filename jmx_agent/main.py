"""
Point d'entrée principal de l'agent de requêtes JMX

Ce module orchestre les composants de l'agent et peut être exécuté :
- En mode service (exécutions périodiques)
- En mode exécution unique
- En mode validation de la configuration
"""

import argparse
import signal
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from jmx_agent.connections.jolokia import JolokiaConnection
from jmx_agent.core.config import AgentConfig, create_default_config
from jmx_agent.core.dispatcher import ResultDispatcher
from jmx_agent.core.errors import AgentError
from jmx_agent.core.executor import QueryExecutor
from jmx_agent.core.loader import ServerEntry, load_servers
from jmx_agent.core.logger import AgentLogger
from jmx_agent.core.scheduler import QueryScheduler


class JmxAgent:
    """
    Agent de requêtes JMX principal

    Charge les requêtes, les exécute contre chaque serveur et transmet
    les résultats aux writers.
    """

    def __init__(self, config_path=None, servers: Optional[List[ServerEntry]] = None,
                 connection_factory: Optional[Callable] = None):
        """
        Initialise l'agent

        Args:
            config_path: Chemin vers le fichier de configuration
            servers: Serveurs déjà chargés (sinon lus depuis queries_file)
            connection_factory: Crée une connexion pour un ServerContext
        """
        self.config = AgentConfig(config_path)

        self.logger = AgentLogger(self.config)
        self.app_logger = self.logger.get_logger()

        agent_config = self.config.get_agent_config()
        self.num_query_threads = agent_config['num_query_threads']

        if servers is None:
            servers = load_servers([agent_config['queries_file']])
        self.servers = servers

        self.connection_factory = connection_factory or self._jolokia_connection
        self.executor = QueryExecutor(self.logger)
        self.dispatcher = ResultDispatcher(self.logger)
        self.scheduler = None

        self.running = False
        self.shutdown_event = threading.Event()

        query_count = sum(len(entry.queries) for entry in self.servers)
        self.app_logger.info(f"Agent initialisé: {len(self.servers)} serveur(s), {query_count} requête(s)")

    def _jolokia_connection(self, server):
        jolokia_config = self.config.get_jolokia_config()
        return JolokiaConnection.for_server(
            server,
            timeout=jolokia_config['timeout'],
            verify_ssl=jolokia_config['verify_ssl']
        )

    def run_query(self, server, query) -> bool:
        """
        Exécute une requête puis envoie ses résultats

        Les erreurs sont journalisées ici, requête par requête.

        Returns:
            bool: True si l'exécution et l'envoi ont réussi
        """
        try:
            with self.connection_factory(server) as connection:
                outcome = self.executor.execute(query, connection)
            self.dispatcher.dispatch(server, query, outcome.results)
            return outcome.ok

        except AgentError as e:
            self.app_logger.error(f"Erreur sur la requête [{query.pattern}] du serveur {server.label}: {e}")
        except Exception:
            self.app_logger.exception(f"Erreur inattendue sur la requête [{query.pattern}] "
                                      f"du serveur {server.label}")
        return False

    def run_once(self) -> bool:
        """
        Exécute toutes les requêtes de tous les serveurs

        Returns:
            bool: True si toutes les requêtes ont réussi
        """
        tasks = [(entry.server, query) for entry in self.servers for query in entry.queries]
        if not tasks:
            self.app_logger.warning("Aucune requête configurée")
            return True

        with ThreadPoolExecutor(max_workers=self.num_query_threads,
                                thread_name_prefix="query") as pool:
            outcomes = list(pool.map(lambda task: self.run_query(*task), tasks))

        failed = outcomes.count(False)
        if failed:
            self.app_logger.warning(f"{failed}/{len(tasks)} requête(s) en échec")
        return not failed

    def run_service_mode(self):
        """
        Lance l'agent en mode service avec exécutions périodiques
        """
        self.app_logger.info("Démarrage de l'agent en mode service")

        try:
            self._setup_signal_handlers()

            self.scheduler = QueryScheduler(self.config, self.logger, self.run_once)
            self.scheduler.start()
            self.running = True

            while self.running and not self.shutdown_event.is_set():
                self.shutdown_event.wait(timeout=1.0)

        except KeyboardInterrupt:
            self.app_logger.info("Interruption clavier détectée")
        finally:
            self.shutdown()

    def _setup_signal_handlers(self):
        def signal_handler(signum, frame):
            self.app_logger.info(f"Signal {signal.Signals(signum).name} reçu - Arrêt en cours...")
            self.shutdown()

        for name in ('SIGTERM', 'SIGINT'):
            if hasattr(signal, name):
                signal.signal(getattr(signal, name), signal_handler)

    def shutdown(self):
        """
        Arrête le scheduler et ferme les writers
        """
        if not self.running:
            return

        self.app_logger.info("Arrêt de l'agent...")
        self.running = False
        self.shutdown_event.set()

        if self.scheduler:
            self.scheduler.stop()
            self.scheduler = None

        self.close_writers()
        self.app_logger.info("Agent arrêté proprement")

    def close_writers(self):
        """Ferme les writers de toutes les requêtes"""
        for entry in self.servers:
            for query in entry.queries:
                for writer in query.output_writer_instances:
                    writer.close()


def main(argv=None):
    """
    Point d'entrée principal avec gestion des arguments de ligne de commande
    """
    parser = argparse.ArgumentParser(
        description='Agent JMX - Exécution de requêtes et envoi des résultats'
    )
    parser.add_argument('--config', '-c', type=str,
                        help='Chemin vers le fichier de configuration')
    parser.add_argument('--mode', '-m', choices=['service', 'once', 'validate'],
                        default='service', help='Mode de fonctionnement de l\'agent')
    parser.add_argument('--create-config', action='store_true',
                        help='Crée un fichier de configuration par défaut')

    args = parser.parse_args(argv)

    if args.create_config:
        if not args.config:
            print("--config est requis avec --create-config")
            return 1
        create_default_config(args.config)
        print(f"Configuration par défaut créée: {args.config}")
        return 0

    if args.mode == 'validate':
        config = AgentConfig(args.config)
        if not config.validate():
            print("Configuration invalide")
            return 1
        try:
            load_servers([config.get('agent', 'queries_file')])
        except AgentError as e:
            print(f"Fichier de requêtes invalide: {e}")
            return 1
        print("Configuration valide")
        return 0

    try:
        agent = JmxAgent(args.config)
    except AgentError as e:
        print(f"Erreur initialisation agent: {e}")
        return 1

    if args.mode == 'once':
        try:
            return 0 if agent.run_once() else 1
        finally:
            agent.close_writers()

    agent.run_service_mode()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())

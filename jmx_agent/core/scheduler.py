"""
Module de planification pour l'agent de requêtes JMX

Ce module gère :
- L'exécution périodique de toutes les requêtes
- L'exécution en arrière-plan
- Le démarrage et l'arrêt du scheduler
"""

import threading
from typing import Callable

import schedule


class QueryScheduler:
    """
    Déclenche un callback à intervalle fixe

    Utilise la bibliothèque 'schedule' dans un thread dédié.
    """

    def __init__(self, config, logger, run_callback: Callable[[], None]):
        """
        Initialise le scheduler

        Args:
            config: Instance de AgentConfig
            logger: Instance de AgentLogger
            run_callback: Fonction exécutant toutes les requêtes
        """
        self.config = config
        self.logger = logger.get_logger()
        self.run_callback = run_callback

        self.is_running = False
        self.scheduler_thread = None
        self.stop_event = threading.Event()

        self.scheduler = schedule.Scheduler()
        self.period = None

        self._setup_schedule()

        self.logger.info("QueryScheduler initialisé")

    def _setup_schedule(self):
        """
        Configure la période d'exécution depuis la configuration
        """
        period = self.config.getint('agent', 'run_period_seconds', 60)
        if period < 1:
            self.logger.warning(f"Période invalide '{period}', utilisation de 60 secondes")
            period = 60
        self.period = period

        self.scheduler.clear()
        self.scheduler.every(period).seconds.do(self._scheduled_run)
        self.logger.info(f"Planification configurée: toutes les {period} secondes")

    def _scheduled_run(self):
        """
        Méthode appelée par le scheduler à chaque échéance
        """
        self.logger.debug("Exécution planifiée des requêtes")

        try:
            self.run_callback()
        except Exception:
            self.logger.exception("Erreur lors de l'exécution planifiée")

    @property
    def next_run(self):
        return self.scheduler.next_run

    def start(self):
        """
        Démarre le scheduler en arrière-plan
        """
        if self.is_running:
            self.logger.warning("Scheduler déjà en cours d'exécution")
            return

        self.is_running = True
        self.stop_event.clear()

        self.scheduler_thread = threading.Thread(
            target=self._scheduler_loop,
            name="QueryScheduler",
            daemon=True
        )
        self.scheduler_thread.start()

        self.logger.info(f"Scheduler démarré (période: {self.period}s)")

    def stop(self):
        """
        Arrête le scheduler et attend la fin du thread
        """
        if not self.is_running:
            self.logger.warning("Scheduler pas en cours d'exécution")
            return

        self.logger.info("Arrêt du scheduler...")

        self.is_running = False
        self.stop_event.set()

        if self.scheduler_thread and self.scheduler_thread.is_alive():
            self.scheduler_thread.join(timeout=5)

        self.logger.info("Scheduler arrêté")

    def _scheduler_loop(self):
        """
        Boucle principale du scheduler
        """
        self.logger.debug("Boucle du scheduler démarrée")

        while not self.stop_event.is_set():
            self.scheduler.run_pending()
            self.stop_event.wait(timeout=1)

        self.logger.debug("Boucle du scheduler terminée")

    def get_status(self) -> dict:
        """
        Retourne le statut actuel du scheduler

        Returns:
            dict: Informations sur l'état du scheduler
        """
        next_run = self.next_run
        return {
            'is_running': self.is_running,
            'period_seconds': self.period,
            'next_run': next_run.isoformat() if next_run else None,
            'scheduled_jobs_count': len(self.scheduler.get_jobs())
        }

"""
Module de configuration pour l'agent de requêtes JMX

Ce module gère la configuration de l'agent, incluant :
- Lecture du fichier de configuration INI
- Validation des paramètres
- Valeurs par défaut
"""

import os
import configparser
from typing import Dict, Any, Optional

DEFAULT_CONFIG_PATH = "/etc/jmx-agent/config.ini"


class AgentConfig:
    """
    Gestionnaire de configuration de l'agent

    Centralise les paramètres de l'agent, de la connexion Jolokia
    et du logging.
    """

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialise la configuration de l'agent

        Args:
            config_file: Chemin vers le fichier de configuration (optionnel)
        """
        self.config = configparser.ConfigParser()
        self.config_file = config_file or DEFAULT_CONFIG_PATH

        self._set_defaults()
        self._load_config()

    def _set_defaults(self):
        """
        Définit les valeurs de configuration par défaut
        """
        self.config.add_section('agent')
        self.config.set('agent', 'log_level', 'INFO')
        self.config.set('agent', 'queries_file', '/etc/jmx-agent/queries.json')
        self.config.set('agent', 'run_period_seconds', '60')
        self.config.set('agent', 'num_query_threads', '4')

        self.config.add_section('jolokia')
        self.config.set('jolokia', 'url', 'http://localhost:8778/jolokia')
        self.config.set('jolokia', 'timeout', '30')
        self.config.set('jolokia', 'verify_ssl', 'true')
        self.config.set('jolokia', 'username', '')
        self.config.set('jolokia', 'password', '')

        self.config.add_section('logging')
        self.config.set('logging', 'log_file', '/var/log/jmx-agent/agent.log')
        self.config.set('logging', 'max_log_size', '10485760')  # 10MB
        self.config.set('logging', 'backup_count', '5')

    def _load_config(self):
        """
        Charge la configuration depuis le fichier

        Si le fichier n'existe pas, les valeurs par défaut sont conservées.
        """
        if os.path.exists(self.config_file):
            try:
                self.config.read(self.config_file, encoding='utf-8')
                print(f"Configuration chargée depuis: {self.config_file}")
            except configparser.Error as e:
                print(f"Erreur lors du chargement de la configuration: {e}")
                print("Utilisation des valeurs par défaut")
        else:
            print(f"Fichier de configuration non trouvé: {self.config_file}")
            print("Utilisation des valeurs par défaut")

    def get(self, section: str, option: str, fallback: Any = None) -> str:
        return self.config.get(section, option, fallback=fallback)

    def getboolean(self, section: str, option: str, fallback: bool = False) -> bool:
        return self.config.getboolean(section, option, fallback=fallback)

    def getint(self, section: str, option: str, fallback: int = 0) -> int:
        return self.config.getint(section, option, fallback=fallback)

    def set(self, section: str, option: str, value: str):
        """
        Définit une valeur de configuration

        Args:
            section: Nom de la section
            option: Nom de l'option
            value: Nouvelle valeur
        """
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config.set(section, option, str(value))

    def save(self):
        """
        Sauvegarde la configuration dans le fichier

        Crée les dossiers parents si nécessaire.
        """
        config_dir = os.path.dirname(self.config_file)
        if config_dir and not os.path.exists(config_dir):
            os.makedirs(config_dir, exist_ok=True)

        with open(self.config_file, 'w', encoding='utf-8') as f:
            self.config.write(f)

        print(f"Configuration sauvegardée dans: {self.config_file}")

    def get_agent_config(self) -> Dict[str, Any]:
        """
        Récupère la configuration complète de l'agent

        Returns:
            dict: Configuration agent
        """
        return {
            'log_level': self.get('agent', 'log_level', 'INFO'),
            'queries_file': self.get('agent', 'queries_file'),
            'run_period_seconds': self.getint('agent', 'run_period_seconds', 60),
            'num_query_threads': self.getint('agent', 'num_query_threads', 4)
        }

    def get_jolokia_config(self) -> Dict[str, Any]:
        """
        Récupère la configuration de la connexion Jolokia par défaut

        Returns:
            dict: Configuration Jolokia
        """
        return {
            'url': self.get('jolokia', 'url'),
            'timeout': self.getint('jolokia', 'timeout', 30),
            'verify_ssl': self.getboolean('jolokia', 'verify_ssl', True),
            'username': self.get('jolokia', 'username', ''),
            'password': self.get('jolokia', 'password', '')
        }

    def validate(self) -> bool:
        """
        Valide la configuration courante

        Returns:
            bool: True si la configuration est valide, False sinon
        """
        errors = []

        url = self.get('jolokia', 'url')
        if not url or not url.startswith(('http://', 'https://')):
            errors.append("URL Jolokia invalide")

        log_level = self.get('agent', 'log_level')
        if log_level not in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']:
            errors.append("Niveau de log invalide")

        try:
            if self.getint('agent', 'run_period_seconds') < 1:
                errors.append("Période d'exécution invalide (doit être >= 1)")
            if self.getint('agent', 'num_query_threads') < 1:
                errors.append("Nombre de threads invalide (doit être >= 1)")
        except ValueError:
            errors.append("Valeur entière invalide dans la section [agent]")

        if errors:
            for error in errors:
                print(f"Erreur de configuration: {error}")
            return False

        return True


def create_default_config(config_path: str) -> AgentConfig:
    """
    Crée un fichier de configuration par défaut

    Args:
        config_path: Chemin où créer le fichier de configuration

    Returns:
        AgentConfig: Instance de configuration créée
    """
    config = AgentConfig(config_path)
    config.save()
    return config

"""Writer qui envoie chaque résultat dans le log de l'agent"""

import logging

from ..core.logger import get_logger
from .base import OutputWriter, OutputWriterFactory


class LogWriter(OutputWriter):
    """
    Écrit une ligne ``clé valeur`` par résultat
    """

    def __init__(self, level: int = logging.INFO, separator: str = "."):
        self.logger = get_logger()
        self.level = level
        self.separator = separator

    def do_write(self, server, query, results):
        for result in results:
            self.logger.log(self.level,
                            f"[{server.label}] {result.key(self.separator)} {result.value}")


class LogWriterFactory(OutputWriterFactory):
    """Fabrique de LogWriter"""

    type_name = 'log'

    def __init__(self, level: str = 'INFO', separator: str = "."):
        self.level = level.upper()
        self.separator = separator

    def create(self) -> LogWriter:
        return LogWriter(getattr(logging, self.level, logging.INFO), self.separator)

    def to_dict(self) -> dict:
        return {'type': self.type_name, 'level': self.level, 'separator': self.separator}

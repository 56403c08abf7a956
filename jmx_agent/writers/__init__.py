"""
Package des writers de sortie

Chaque entrée ``outputWriters`` d'une requête est un objet avec un champ
``type`` ; les autres champs sont passés à la fabrique correspondante.
"""

from typing import Any, Mapping

from ..core.errors import ConfigurationError
from .base import OutputWriter, OutputWriterFactory
from .http_writer import HttpWriter, HttpWriterFactory
from .log_writer import LogWriter, LogWriterFactory

WRITER_TYPES = {
    LogWriterFactory.type_name: LogWriterFactory,
    HttpWriterFactory.type_name: HttpWriterFactory,
}


def writer_factory_from_dict(entry: Any) -> OutputWriterFactory:
    """
    Convertit une entrée de configuration en fabrique de writer

    Args:
        entry: Fabrique déjà construite ou dictionnaire avec un champ ``type``

    Returns:
        OutputWriterFactory: Fabrique correspondante

    Raises:
        ConfigurationError: Type inconnu ou paramètres invalides
    """
    if isinstance(entry, OutputWriterFactory):
        return entry
    if not isinstance(entry, Mapping) or 'type' not in entry:
        raise ConfigurationError(f"Writer invalide (champ 'type' requis): {entry!r}")

    params = dict(entry)
    writer_type = params.pop('type')
    factory_class = WRITER_TYPES.get(writer_type)
    if factory_class is None:
        raise ConfigurationError(f"Type de writer inconnu: {writer_type}")

    try:
        return factory_class(**params)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Paramètres invalides pour le writer '{writer_type}': {e}") from e


__all__ = [
    'OutputWriter', 'OutputWriterFactory', 'HttpWriter', 'HttpWriterFactory',
    'LogWriter', 'LogWriterFactory', 'WRITER_TYPES', 'writer_factory_from_dict',
]

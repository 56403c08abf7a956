"""
Résolution des variables ``${nom}`` dans les valeurs de configuration

Les valeurs sont cherchées dans l'environnement du processus ; la forme
``${nom:défaut}`` fournit une valeur de repli.
"""

import os
import re
from typing import Iterable, List, Mapping, Optional

PLACEHOLDER = re.compile(r'\$\{([^}:]+)(?::([^}]*))?\}')


def resolve_props(value: Optional[str], environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Remplace les variables d'une chaîne

    Args:
        value: Chaîne à résoudre
        environ: Source des valeurs (os.environ par défaut)

    Returns:
        str: Chaîne résolue ; une variable inconnue sans défaut est conservée
    """
    if not value:
        return value

    environ = os.environ if environ is None else environ

    def _replace(match):
        name, default = match.group(1), match.group(2)
        if name in environ:
            return environ[name]
        if default is not None:
            return default
        return match.group(0)

    return PLACEHOLDER.sub(_replace, value)


def resolve_list(values: Iterable[str], environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """Résout chaque élément d'une liste"""
    return [resolve_props(value, environ) for value in values]

"""
Construction du fragment de clé issu des propriétés d'une ressource

Lorsqu'un pattern avec jokers correspond à plusieurs ressources, ce
fragment distingue les résultats de chacune dans la clé de sortie.
Trois stratégies existent, choisies une seule fois à la création
de la requête.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional, Tuple

DEFAULT_SEPARATOR = "_"
DOTTED_SEPARATOR = "."


class NamingKind(Enum):
    """Stratégies de nommage supportées"""
    DEFAULT = "default"
    PREPENDING = "prepending"
    USE_ALL = "use_all"


def parse_type_name_values(type_name_str: Optional[str]) -> dict:
    """
    Découpe une chaîne ``clé=valeur,clé=valeur`` en dictionnaire ordonné

    Args:
        type_name_str: Liste de propriétés d'un nom d'objet

    Returns:
        dict: Propriétés dans l'ordre de la chaîne
    """
    values = {}
    if not type_name_str:
        return values

    for element in type_name_str.split(','):
        key, eq, value = element.partition('=')
        if eq and key:
            values[key] = value
    return values


@dataclass(frozen=True)
class NamingStrategy:
    """
    Stratégie immuable, sûre en accès concurrent

    Attributes:
        kind: Variante de la stratégie
        separator: Séparateur des éléments du fragment
        prepended_names: Propriétés à placer en tête (PREPENDING)
    """
    kind: NamingKind
    separator: str = DEFAULT_SEPARATOR
    prepended_names: Tuple[str, ...] = ()

    @classmethod
    def select(cls, use_all_type_names: bool, type_names: Iterable[str],
               allow_dotted_keys: bool) -> 'NamingStrategy':
        """
        Choisit la stratégie selon les options de la requête

        Priorité : USE_ALL, puis PREPENDING si des type names sont
        configurés, sinon DEFAULT.
        """
        separator = DOTTED_SEPARATOR if allow_dotted_keys else DEFAULT_SEPARATOR
        type_names = tuple(type_names or ())

        if use_all_type_names:
            return cls(NamingKind.USE_ALL, separator)
        if type_names:
            return cls(NamingKind.PREPENDING, separator, type_names)
        return cls(NamingKind.DEFAULT, separator)

    def build(self, properties: Mapping[str, str], type_name_str: str = "") -> str:
        """
        Construit le fragment de clé d'une ressource

        Args:
            properties: Propriétés du nom concret de la ressource
            type_name_str: Fragment déjà calculé par défaut

        Returns:
            str: Fragment de clé, éventuellement vide
        """
        type_name_str = type_name_str or ""

        if self.kind is NamingKind.USE_ALL:
            return self.separator.join(
                f"{name}{self.separator}{value}" for name, value in properties.items()
            )

        if self.kind is NamingKind.PREPENDING:
            parts = [properties[name] for name in self.prepended_names
                     if properties.get(name) is not None]
            if type_name_str:
                parts.append(type_name_str)
            return self.separator.join(parts)

        return type_name_str

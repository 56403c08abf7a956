"""
Patterns de ressources gérées (noms d'objets JMX)

Un pattern se compose d'un domaine et d'une liste de propriétés
clé=valeur, par exemple ``java.lang:type=MemoryPool,name=*``.
Les valeurs (et le domaine) peuvent contenir les jokers ``*`` et ``?`` ;
un élément ``*`` seul rend la liste de propriétés ouverte.

Une valeur entre guillemets peut contenir ``,``, ``=`` et ``:`` ; elle
est conservée avec ses guillemets, comme le fait le serveur.
"""

from fnmatch import fnmatchcase
from types import MappingProxyType
from typing import List, Mapping, Optional

from ..core.errors import InvalidPattern

WILDCARD_CHARS = ('*', '?')
ILLEGAL_KEY_CHARS = (':', ',', '=', '*', '?', '"')
ILLEGAL_VALUE_CHARS = (':', ',', '=', '"', '\n')
QUOTED_ESCAPES = ('\\', '"', '*', '?', 'n')


def _has_wildcard(text: str) -> bool:
    return any(char in text for char in WILDCARD_CHARS)


def _split_properties(name: str, props: str) -> List[str]:
    """Découpe la liste de propriétés sur les virgules hors guillemets"""
    elements = []
    current = []
    quoted = False
    escaped = False

    for char in props:
        if escaped:
            escaped = False
        elif quoted and char == '\\':
            escaped = True
        elif char == '"':
            quoted = not quoted
        elif char == ',' and not quoted:
            elements.append(''.join(current))
            current = []
            continue
        current.append(char)

    if quoted or escaped:
        raise InvalidPattern(name, "unterminated quoted value")
    elements.append(''.join(current))
    return elements


def _check_value(name: str, key: str, value: str):
    if not value:
        raise InvalidPattern(name, f"empty value for key '{key}'")

    if not value.startswith('"'):
        if any(char in value for char in ILLEGAL_VALUE_CHARS):
            raise InvalidPattern(name, f"invalid character in value of key '{key}'")
        return

    if len(value) < 2 or not value.endswith('"'):
        raise InvalidPattern(name, f"invalid quoted value for key '{key}'")

    inner = value[1:-1]
    index = 0
    while index < len(inner):
        char = inner[index]
        if char == '\\':
            if index + 1 >= len(inner) or inner[index + 1] not in QUOTED_ESCAPES:
                raise InvalidPattern(name, f"invalid escape in value of key '{key}'")
            index += 2
            continue
        if char == '"':
            raise InvalidPattern(name, f"unescaped quote in value of key '{key}'")
        index += 1


class ResourcePattern:
    """
    Identifiant immuable d'une ou plusieurs ressources gérées

    Deux patterns sont égaux si leur domaine et leur ensemble de
    propriétés sont identiques, quel que soit l'ordre d'écriture.
    """

    __slots__ = ('_domain', '_properties', '_property_list_pattern', '_key_property_list')

    def __init__(self, name: str):
        """
        Analyse la forme texte d'un pattern

        Args:
            name: Chaîne ``domaine:clé=valeur,...``

        Raises:
            InvalidPattern: Si la chaîne n'est pas analysable
        """
        if not isinstance(name, str):
            raise InvalidPattern(name, "not a string")

        domain, sep, props = name.partition(':')
        if not sep:
            raise InvalidPattern(name, "missing domain separator")
        if not props:
            raise InvalidPattern(name, "empty key property list")

        properties = {}
        property_list_pattern = False

        for element in _split_properties(name, props):
            if element == '*':
                if property_list_pattern:
                    raise InvalidPattern(name, "duplicate property list wildcard")
                property_list_pattern = True
                continue

            key, eq, value = element.partition('=')
            if not eq:
                raise InvalidPattern(name, f"missing '=' in '{element}'")
            if not key:
                raise InvalidPattern(name, "empty key")
            if any(char in key for char in ILLEGAL_KEY_CHARS):
                raise InvalidPattern(name, f"invalid character in key '{key}'")
            _check_value(name, key, value)
            if key in properties:
                raise InvalidPattern(name, f"duplicate key '{key}'")
            properties[key] = value

        if not properties and not property_list_pattern:
            raise InvalidPattern(name, "empty key property list")

        self._domain = domain
        self._properties = MappingProxyType(properties)
        self._property_list_pattern = property_list_pattern
        self._key_property_list = ','.join(f"{k}={v}" for k, v in properties.items())

    def __setattr__(self, name, value):
        if hasattr(self, '_key_property_list'):
            raise AttributeError("ResourcePattern is immutable")
        super().__setattr__(name, value)

    @property
    def domain(self) -> str:
        return self._domain

    @property
    def properties(self) -> Mapping[str, str]:
        """Propriétés dans l'ordre d'écriture d'origine"""
        return self._properties

    @property
    def key_property_list_string(self) -> str:
        return self._key_property_list

    @property
    def canonical_name(self) -> str:
        """Nom avec les propriétés triées par clé"""
        props = ','.join(f"{k}={self._properties[k]}" for k in sorted(self._properties))
        if self._property_list_pattern:
            props = f"{props},*" if props else '*'
        return f"{self._domain}:{props}"

    @property
    def is_property_list_pattern(self) -> bool:
        return self._property_list_pattern

    @property
    def is_pattern(self) -> bool:
        """True si le pattern peut désigner plusieurs ressources"""
        return (self._property_list_pattern
                or _has_wildcard(self._domain)
                or any(_has_wildcard(v) for v in self._properties.values()))

    def get_key_property(self, key: str) -> Optional[str]:
        return self._properties.get(key)

    def matches(self, name: 'ResourcePattern') -> bool:
        """
        Vérifie si un nom concret correspond à ce pattern

        Args:
            name: Identifiant concret d'une ressource

        Returns:
            bool: True si le domaine et les propriétés correspondent
        """
        if not fnmatchcase(name.domain, self._domain):
            return False

        for key, value in self._properties.items():
            candidate = name.get_key_property(key)
            if candidate is None or not fnmatchcase(candidate, value):
                return False

        if not self._property_list_pattern:
            return set(name.properties) == set(self._properties)
        return True

    def __eq__(self, other):
        if not isinstance(other, ResourcePattern):
            return NotImplemented
        return (self._domain == other._domain
                and dict(self._properties) == dict(other._properties)
                and self._property_list_pattern == other._property_list_pattern)

    def __hash__(self):
        return hash(self.canonical_name)

    def __str__(self):
        props = self._key_property_list
        if self._property_list_pattern:
            props = f"{props},*" if props else '*'
        return f"{self._domain}:{props}"

    def __repr__(self):
        return f"ResourcePattern({str(self)!r})"

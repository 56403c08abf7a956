"""
Description immuable d'une requête JMX

Une requête indique le pattern à interroger, les attributs à lire, la
manière de nommer les résultats et les writers qui les reçoivent.
Elle est créée une fois au chargement de la configuration puis
partagée entre les exécutions, éventuellement concurrentes.
"""

from typing import Any, Callable, Iterable, List, Mapping, Optional

from ..core.errors import ConfigurationError
from ..core.logger import get_logger
from ..core.properties import resolve_list
from .naming import NamingStrategy
from .pattern import ResourcePattern

# Ordre canonique des champs de configuration
FIELD_ORDER = (
    'obj', 'attr', 'typeNames', 'resultAlias', 'keys',
    'allowDottedKeys', 'useAllTypeNames', 'outputWriters', 'useObjDomainAsKey',
)


def _list_field(data: Mapping[str, Any], name: str, str_items: bool = True) -> list:
    """
    Lit un champ liste de la configuration (absent ou null = liste vide)

    Raises:
        ConfigurationError: Si la valeur n'est pas une liste (de textes)
    """
    value = data.get(name)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"Champ '{name}' invalide (liste attendue): {value!r}")
    if str_items and not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"Champ '{name}' invalide (liste de textes attendue): {value!r}")
    return list(value)


def _bool_field(data: Mapping[str, Any], name: str) -> bool:
    value = data.get(name)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigurationError(f"Champ '{name}' invalide (booléen attendu): {value!r}")
    return value


class QuerySpec:
    """
    Requête JMX immuable

    L'égalité ne porte que sur le pattern, les type names, les attributs,
    l'alias et le nombre de writers : deux requêtes qui ne diffèrent que
    par une option booléenne sont égales. Cela permet de fusionner les
    doublons issus de plusieurs fichiers de configuration.
    """

    __slots__ = (
        '_pattern', '_attr', '_keys', '_type_names', '_result_alias',
        '_use_obj_domain_as_key', '_allow_dotted_keys', '_use_all_type_names',
        '_output_writers', '_output_writer_instances', '_naming_strategy',
    )

    def __init__(self, obj: str,
                 keys: Optional[Iterable[str]] = None,
                 attr: Optional[Iterable[str]] = None,
                 type_names: Optional[Iterable[str]] = None,
                 result_alias: Optional[str] = None,
                 use_obj_domain_as_key: bool = False,
                 allow_dotted_keys: bool = False,
                 use_all_type_names: bool = False,
                 output_writers: Optional[Iterable] = None):
        """
        Construit la requête et instancie ses writers

        Args:
            obj: Pattern de ressource, ex. ``java.lang:type=Memory``
            keys: Clés supplémentaires
            attr: Attributs à lire (vide = tous les attributs)
            type_names: Propriétés utilisées pour nommer les résultats
            result_alias: Préfixe remplaçant le nom de classe
            use_obj_domain_as_key: Préfixe par le domaine plutôt que la classe
            allow_dotted_keys: Séparateur ``.`` au lieu de ``_``
            use_all_type_names: Nomme avec toutes les propriétés
            output_writers: Fabriques de writers

        Raises:
            InvalidPattern: Si ``obj`` n'est pas un pattern valide
        """
        self._pattern = ResourcePattern(obj)
        self._attr = tuple(resolve_list(attr or ()))
        self._keys = tuple(resolve_list(keys or ()))
        self._type_names = tuple(dict.fromkeys(type_names or ()))
        self._result_alias = result_alias
        self._use_obj_domain_as_key = bool(use_obj_domain_as_key)
        self._allow_dotted_keys = bool(allow_dotted_keys)
        self._use_all_type_names = bool(use_all_type_names)
        self._output_writers = tuple(output_writers or ())

        self._naming_strategy = NamingStrategy.select(
            self._use_all_type_names, self._type_names, self._allow_dotted_keys
        )

        # Un writer par fabrique, créé maintenant
        self._output_writer_instances = tuple(
            factory.create() for factory in self._output_writers
        )

    def __setattr__(self, name, value):
        if hasattr(self, '_output_writer_instances'):
            raise AttributeError("QuerySpec is immutable")
        super().__setattr__(name, value)

    @classmethod
    def build(cls, obj: str, attr=None, keys=None, type_names=None, result_alias=None,
              use_obj_domain_as_key=False, allow_dotted_keys=False,
              use_all_type_names=False, output_writers=None) -> 'QuerySpec':
        return cls(obj, keys=keys, attr=attr, type_names=type_names,
                   result_alias=result_alias,
                   use_obj_domain_as_key=use_obj_domain_as_key,
                   allow_dotted_keys=allow_dotted_keys,
                   use_all_type_names=use_all_type_names,
                   output_writers=output_writers)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any],
                  writer_resolver: Optional[Callable[[Any], Any]] = None) -> 'QuerySpec':
        """
        Construit une requête depuis une configuration structurée

        Les champs inconnus sont ignorés.

        Args:
            data: Entrée de requête (obj, attr, typeNames, ...)
            writer_resolver: Convertit une entrée ``outputWriters`` en fabrique

        Returns:
            QuerySpec: Requête construite
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Entrée de requête invalide: {data!r}")
        if 'obj' not in data:
            raise ConfigurationError(f"Champ 'obj' manquant dans la requête: {data!r}")

        if writer_resolver is None:
            from ..writers import writer_factory_from_dict
            writer_resolver = writer_factory_from_dict

        writers = [writer_resolver(entry) for entry in _list_field(data, 'outputWriters', str_items=False)]

        result_alias = data.get('resultAlias')
        if result_alias is not None and not isinstance(result_alias, str):
            raise ConfigurationError(f"Champ 'resultAlias' invalide (texte attendu): {result_alias!r}")

        return cls(
            data['obj'],
            keys=_list_field(data, 'keys'),
            attr=_list_field(data, 'attr'),
            type_names=_list_field(data, 'typeNames'),
            result_alias=result_alias,
            use_obj_domain_as_key=_bool_field(data, 'useObjDomainAsKey'),
            allow_dotted_keys=_bool_field(data, 'allowDottedKeys'),
            use_all_type_names=_bool_field(data, 'useAllTypeNames'),
            output_writers=writers,
        )

    def to_dict(self) -> dict:
        """Forme sérialisable, dans l'ordre canonique, sans valeurs nulles"""
        values = {
            'obj': str(self._pattern),
            'attr': list(self._attr),
            'typeNames': list(self._type_names),
            'resultAlias': self._result_alias,
            'keys': list(self._keys),
            'allowDottedKeys': self._allow_dotted_keys,
            'useAllTypeNames': self._use_all_type_names,
            'outputWriters': [factory.to_dict() for factory in self._output_writers],
            'useObjDomainAsKey': self._use_obj_domain_as_key,
        }
        return {name: values[name] for name in FIELD_ORDER if values[name] is not None}

    @property
    def pattern(self) -> ResourcePattern:
        return self._pattern

    @property
    def attr(self) -> tuple:
        return self._attr

    @property
    def keys(self) -> tuple:
        return self._keys

    @property
    def type_names(self) -> tuple:
        """
        Propriétés utilisées pour distinguer les ressources d'un pattern

        Pour ``name=PS Eden Space,type=MemoryPool``, le type name
        ``name`` expose ``PS Eden Space`` dans la clé.
        """
        return self._type_names

    @property
    def result_alias(self) -> Optional[str]:
        return self._result_alias

    @property
    def use_obj_domain_as_key(self) -> bool:
        return self._use_obj_domain_as_key

    @property
    def allow_dotted_keys(self) -> bool:
        return self._allow_dotted_keys

    @property
    def use_all_type_names(self) -> bool:
        return self._use_all_type_names

    @property
    def output_writers(self) -> tuple:
        return self._output_writers

    @property
    def output_writer_instances(self) -> tuple:
        return self._output_writer_instances

    @property
    def naming_strategy(self) -> NamingStrategy:
        return self._naming_strategy

    def make_type_name_value_string(self, properties: Mapping[str, str], type_name_str: str = "") -> str:
        return self._naming_strategy.build(properties, type_name_str)

    def _identity(self):
        return (self._pattern, list(self._type_names), self._attr,
                self._result_alias, len(self._output_writers))

    def __eq__(self, other):
        if other is self:
            return True
        if other is None or type(other) is not type(self):
            return False
        return self._identity() == other._identity()

    def __hash__(self):
        return hash((self._pattern, self._type_names, self._attr,
                     self._result_alias, len(self._output_writers)))

    def __repr__(self):
        return (f"QuerySpec(obj={str(self._pattern)!r}, attr={list(self._attr)}, "
                f"keys={list(self._keys)}, typeNames={list(self._type_names)}, "
                f"resultAlias={self._result_alias!r}, "
                f"useObjDomainAsKey={self._use_obj_domain_as_key}, "
                f"allowDottedKeys={self._allow_dotted_keys}, "
                f"useAllTypeNames={self._use_all_type_names})")

    @staticmethod
    def builder() -> 'Builder':
        return Builder()


class Builder:
    """
    Accumulateur de paramètres pour QuerySpec

    Non thread-safe : une instance sert à une seule séquence de
    construction. Les doublons sont conservés.
    """

    def __init__(self):
        self._obj = None
        self._attr: List[str] = []
        self._result_alias = None
        self._keys: List[str] = []
        self._use_obj_domain_as_key = False
        self._allow_dotted_keys = False
        self._use_all_type_names = False
        self._output_writers: List = []
        self._type_names: List[str] = []

    def set_obj(self, obj: str) -> 'Builder':
        self._obj = obj
        return self

    def add_attr(self, *attr: str) -> 'Builder':
        self._attr.extend(attr)
        return self

    def set_result_alias(self, result_alias: Optional[str]) -> 'Builder':
        self._result_alias = result_alias
        return self

    def add_key(self, key: str) -> 'Builder':
        return self.add_keys(key)

    def add_keys(self, *keys: str) -> 'Builder':
        self._keys.extend(keys)
        return self

    def set_type_names(self, type_names: Iterable[str]) -> 'Builder':
        self._type_names.extend(type_names)
        return self

    def add_type_names(self, *type_names: str) -> 'Builder':
        return self.set_type_names(type_names)

    def set_use_obj_domain_as_key(self, value: bool) -> 'Builder':
        self._use_obj_domain_as_key = value
        return self

    def set_allow_dotted_keys(self, value: bool) -> 'Builder':
        self._allow_dotted_keys = value
        return self

    def set_use_all_type_names(self, value: bool) -> 'Builder':
        self._use_all_type_names = value
        return self

    def add_output_writer(self, factory) -> 'Builder':
        return self.add_output_writers(factory)

    def add_output_writers(self, *factories) -> 'Builder':
        self._output_writers.extend(factories)
        return self

    def build(self) -> QuerySpec:
        query = QuerySpec(
            self._obj,
            keys=self._keys,
            attr=self._attr,
            type_names=self._type_names,
            result_alias=self._result_alias,
            use_obj_domain_as_key=self._use_obj_domain_as_key,
            allow_dotted_keys=self._allow_dotted_keys,
            use_all_type_names=self._use_all_type_names,
            output_writers=self._output_writers,
        )
        get_logger().debug(f"Requête construite: {query!r}")
        return query

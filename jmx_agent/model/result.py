"""
Résultats d'une requête et leur construction

Un résultat associe une clé ordonnée à la valeur brute d'un attribut.
Les valeurs composites sont transmises telles quelles aux writers.
"""

import time
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Result:
    """
    Valeur d'un attribut d'une ressource

    Attributes:
        attribute_name: Nom de l'attribut lu
        class_name: Classe de la ressource
        obj_domain: Domaine du nom de la ressource
        type_name: Liste de propriétés du nom concret
        key_parts: Éléments ordonnés de la clé
        value: Valeur brute renvoyée par le serveur
        epoch: Horodatage en millisecondes
        key_alias: Alias de résultat de la requête
    """
    attribute_name: str
    class_name: str
    obj_domain: str
    type_name: str
    key_parts: Tuple[str, ...]
    value: Any
    epoch: int
    key_alias: Optional[str] = None

    def key(self, separator: str = ".") -> str:
        return separator.join(self.key_parts)


class ResultProcessor:
    """
    Transforme les valeurs lues sur une ressource en résultats

    La clé de chaque résultat se compose du préfixe (alias, domaine ou
    nom de classe), du fragment de nommage de la requête puis du nom
    de l'attribut.
    """

    def __init__(self, query, resource, attributes: Mapping[str, Any],
                 class_name: str, obj_domain: str, epoch: Optional[int] = None):
        """
        Args:
            query: QuerySpec à l'origine de la lecture
            resource: ResourcePattern concret de la ressource
            attributes: Valeurs lues, par nom d'attribut
            class_name: Classe de la ressource
            obj_domain: Domaine de la ressource
            epoch: Horodatage imposé (millisecondes)
        """
        self.query = query
        self.resource = resource
        self.attributes = attributes
        self.class_name = class_name or ""
        self.obj_domain = obj_domain or ""
        self.epoch = epoch if epoch is not None else int(time.time() * 1000)

    def _prefix(self) -> str:
        if self.query.result_alias:
            return self.query.result_alias

        prefix = self.obj_domain if self.query.use_obj_domain_as_key else self.class_name
        if not self.query.allow_dotted_keys:
            prefix = prefix.replace('.', '_')
        return prefix

    def get_results(self) -> List[Result]:
        """
        Construit un résultat par attribut lu

        Returns:
            list: Résultats dans l'ordre des attributs
        """
        prefix = self._prefix()
        fragment = self.query.make_type_name_value_string(self.resource.properties)

        results = []
        for attribute_name, value in self.attributes.items():
            key_parts = [part for part in (prefix, fragment) if part]
            key_parts.append(attribute_name)
            results.append(Result(
                attribute_name=attribute_name,
                class_name=self.class_name,
                obj_domain=self.obj_domain,
                type_name=self.resource.key_property_list_string,
                key_parts=tuple(key_parts),
                value=value,
                epoch=self.epoch,
                key_alias=self.query.result_alias,
            ))
        return results

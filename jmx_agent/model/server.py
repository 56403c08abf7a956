"""Serveur distant auquel appartiennent les requêtes et leurs résultats"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ServerContext:
    """
    Identifie le serveur de management interrogé

    Attributes:
        url: URL de l'agent Jolokia du serveur
        alias: Nom lisible utilisé par les writers
        username: Utilisateur HTTP (optionnel)
        password: Mot de passe HTTP (optionnel)
    """
    url: str
    alias: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def label(self) -> str:
        return self.alias or self.url

    def __repr__(self):
        return f"ServerContext(url={self.url!r}, alias={self.alias!r})"

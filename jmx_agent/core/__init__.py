"""
Module Core - Composants principaux de l'agent de requêtes JMX

Ce module contient les fonctionnalités de base de l'agent :
- Configuration
- Logging
- Exécution des requêtes et envoi des résultats
- Planification des exécutions
"""

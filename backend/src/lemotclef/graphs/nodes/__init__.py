"""
Personas — Les trois voix de Le Mot Clef, appelées en chaîne.

- Cledor : l'étymologiste (analyse structurée du mot)
- Cora   : la curatrice visuelle (prompt d'image + requêtes d'archives)
- David  : le réalisateur (timeline vidéo 12 scènes)
"""

from .cledor import Cledor
from .cora import Cora, default_curation
from .david import David

__all__ = ["Cledor", "Cora", "David", "default_curation"]

"""Le Mot Clef — étymologies illustrées de mots français (API)."""

__version__ = "1.0.0"

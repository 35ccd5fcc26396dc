"""Match tracking core: teams, players, matches and their event ledgers."""

__version__ = "0.1.0"

class VaultIndexError(Exception):
    """Base class for errors that stop the indexer from starting."""


class ConfigNotFoundError(VaultIndexError):
    """No Obsidian configuration file exists in any candidate location."""

"""Track technologies and cities of players in a shared strategy game session."""

__version__ = "0.1.0"
__all__ = ["cities", "commands", "markdown", "models", "store", "sync", "technologies"]
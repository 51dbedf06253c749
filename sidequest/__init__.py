"""SQLite persistence layer, domain models and entry point of the Sidequest server."""

__version__ = "0.1.0"
__all__ = ["models", "database", "persistable", "server_user", "server"]
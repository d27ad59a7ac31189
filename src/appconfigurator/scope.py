"""Configuration sub-trees paired with the dotted path that addresses them."""

from dataclasses import dataclass

from appconfigurator.configuration import Configuration

__all__ = ["ConfigurationScope", "qualified_path"]


def qualified_path(path: str, name: str) -> str:
    """Join a scope path and a key, omitting the separator at the root.

    Example:
        >>> qualified_path("", "db")      # "db"
        >>> qualified_path("db", "pool")  # "db.pool"
    """
    return f"{path}.{name}" if path else name


@dataclass(frozen=True)
class ConfigurationScope:
    """A configuration sub-tree and the path it was reached by.

    The path is only used to report where a failure happened; lookups are
    always made against ``configuration`` with keys relative to it.

    Attributes:
        configuration: The configuration sub-tree.
        path: Dotted path of the sub-tree from the root, ``""`` at the root.
    """

    configuration: Configuration
    path: str = ""

    def descend(self, key: str) -> "ConfigurationScope":
        """Return the scope for the sub-tree under ``key``."""
        return ConfigurationScope(
            self.configuration.subset(key), qualified_path(self.path, key)
        )

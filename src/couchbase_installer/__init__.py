"""Couchbase Server node installer."""

__version__ = "0.1.0"

# Export protocol interfaces for type hints and dependency injection
from couchbase_installer.protocols import (
    ArtifactDownloader,
    CommandExecutor,
    FileSystem,
)

__all__ = [
    "__version__",
    "ArtifactDownloader",
    "CommandExecutor",
    "FileSystem",
]

"""Resource storages used by the install steps."""

from blueprint.resources.local_directory import LocalDirectoryFetcher
from blueprint.resources.storage import ResourceStorages

__all__ = ["ResourceStorages", "LocalDirectoryFetcher"]

"""Registry of resource fetchers.

Each resource type ("wordpress.org/plugins", "self/themes", ...) maps to an
ordered list of fetchers. A download asks them in registration order and the
first one that returns a path wins.
"""

from typing import Dict, List, Union

from blueprint.logging import get_logger
from blueprint.protocols import ResourceFetcher

logger = get_logger(__name__)


class ResourceStorages:
    """Keyed collection of resource fetchers with multi-provider fallback."""

    def __init__(self):
        self._storages: Dict[str, List[ResourceFetcher]] = {}

    def add_storage(self, resource_type: str, fetcher: ResourceFetcher) -> None:
        """Register a fetcher for a resource type, after any existing ones."""
        self._storages.setdefault(resource_type, []).append(fetcher)
        logger.debug(
            f"Registered {type(fetcher).__name__} for resource type '{resource_type}'"
        )

    def register(self, fetcher: ResourceFetcher) -> None:
        """Register a fetcher under the resource type it declares."""
        self.add_storage(fetcher.get_supported_resource(), fetcher)

    def is_supported(self, resource_type: str) -> bool:
        return bool(self._storages.get(resource_type))

    def get_supported_types(self) -> List[str]:
        return [name for name, fetchers in self._storages.items() if fetchers]

    def get_fetchers(self, resource_type: str) -> List[ResourceFetcher]:
        return list(self._storages.get(resource_type, []))

    def download(self, slug: str, resource_type: str) -> Union[str, bool]:
        """
        Fetch a resource by slug.

        Args:
            slug: Resource slug, e.g. "akismet"
            resource_type: Registered resource type

        Returns:
            Local path from the first fetcher that found the resource, or
            False when none did
        """
        for fetcher in self._storages.get(resource_type, []):
            found = fetcher.download(slug)
            if found:
                logger.debug(
                    f"Resolved '{slug}' ({resource_type}) with {type(fetcher).__name__}"
                )
                return found

        logger.debug(f"No fetcher found '{slug}' for resource type '{resource_type}'")
        return False

    def __len__(self) -> int:
        return sum(len(fetchers) for fetchers in self._storages.values())

    def __contains__(self, resource_type: str) -> bool:
        return self.is_supported(resource_type)

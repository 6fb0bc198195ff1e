"""Fetcher that serves packages from a local directory."""

import os
from typing import Optional

from blueprint.logging import get_logger

logger = get_logger(__name__)


class LocalDirectoryFetcher:
    """Looks up ``<slug>.zip`` (or an unpacked ``<slug>/`` folder) in a directory."""

    def __init__(self, directory: str, resource_type: str):
        self.directory = directory
        self.resource_type = resource_type

    def get_supported_resource(self) -> str:
        return self.resource_type

    def download(self, slug: str) -> Optional[str]:
        # Slugs are plain names; anything path-like is refused
        if not slug or os.path.basename(slug) != slug or slug in (".", ".."):
            logger.warning(f"Refusing suspicious resource slug: {slug!r}")
            return None

        for candidate in (f"{slug}.zip", slug):
            path = os.path.join(self.directory, candidate)
            if os.path.exists(path):
                return path

        return None

    def __repr__(self) -> str:
        return f"LocalDirectoryFetcher({self.directory!r}, {self.resource_type!r})"

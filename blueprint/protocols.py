"""Contracts for the host collaborators blueprint talks to.

The host application owns authorization, option storage, statement execution
and plugin/theme installation. Blueprint only sees these narrow interfaces,
expressed with typing.Protocol so any object with the right methods fits.
"""

from typing import Any, Dict, List, NamedTuple, Optional, Protocol


class ExecutionOutcome(NamedTuple):
    """What the statement engine reports for one statement."""

    affected_rows: int = 0
    error: Optional[str] = None


class Authorizer(Protocol):
    """Answers capability questions for the acting user."""

    def actor_can(self, capability: str) -> bool: ...  # noqa: E704


class OptionStore(Protocol):
    """Key/value site configuration."""

    def get_option(self, name: str, default: Any = None) -> Any: ...  # noqa: E704

    def update_option(self, name: str, value: Any) -> bool: ...  # noqa: E704


class StatementExecutor(Protocol):
    """Transactional raw statement execution."""

    table_prefix: str

    def begin(self) -> None: ...  # noqa: E704

    def execute(self, sql: str) -> ExecutionOutcome: ...  # noqa: E704

    def commit(self) -> None: ...  # noqa: E704

    def rollback(self) -> None: ...  # noqa: E704


class RowSource(Protocol):
    """Read access to table rows, used by exporters that emit runSql steps."""

    def fetch_rows(self, table: str) -> List[Dict[str, Any]]: ...  # noqa: E704


class ExtensionManager(Protocol):
    """Plugin and theme primitives of the host (install, activate, list)."""

    def get_plugins(self) -> Dict[str, Dict[str, Any]]:
        """Installed plugins keyed by plugin path ("akismet/akismet.php")."""
        ...

    def is_plugin_active(self, plugin_path: str) -> bool: ...  # noqa: E704

    def install_plugin(self, package_path: str) -> Optional[str]:
        """Install a plugin package, return its plugin path or None."""
        ...

    def activate_plugin(self, plugin_path: str) -> Optional[str]:
        """Activate a plugin, return an error message or None."""
        ...

    def get_themes(self) -> Dict[str, Dict[str, Any]]:
        """Installed themes keyed by folder name."""
        ...

    def get_current_theme(self) -> Optional[str]: ...  # noqa: E704

    def install_theme(self, package_path: str) -> Optional[str]:
        """Install a theme package, return its folder name or None."""
        ...

    def switch_theme(self, folder_name: str) -> Optional[str]:
        """Activate a theme, return an error message or None."""
        ...


class ResourceFetcher(Protocol):
    """Downloads a resource package by slug."""

    def get_supported_resource(self) -> str: ...  # noqa: E704

    def download(self, slug: str) -> Optional[str]:
        """Return a local path, or None/"" when this fetcher has nothing."""
        ...

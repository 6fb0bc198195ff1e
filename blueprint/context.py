"""Blueprint context.

The context carries the host collaborators and the registries built for one
export or import run. Processors and exporters receive it at construction
time instead of reaching for module-level state.
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import Optional

from blueprint.audit import BlueprintLogger
from blueprint.protocols import (
    Authorizer,
    ExtensionManager,
    OptionStore,
    RowSource,
    StatementExecutor,
)
from blueprint.resources.storage import ResourceStorages


@dataclass(frozen=True)
class BlueprintContext:
    """
    Immutable container for the services a run needs.

    Attributes:
        authorizer: Answers actor_can() for capability checks
        options: Site option store
        statements: Transactional statement engine for runSql
        extensions: Plugin and theme primitives
        rows: Table reader for exporters that emit runSql steps
        storages: Resource fetchers for install steps
        logger: Audit trail sink
        run_id: Identifier of this run
    """

    authorizer: Authorizer
    options: Optional[OptionStore] = None
    statements: Optional[StatementExecutor] = None
    extensions: Optional[ExtensionManager] = None
    rows: Optional[RowSource] = None
    storages: ResourceStorages = field(default_factory=ResourceStorages)
    logger: BlueprintLogger = field(default_factory=BlueprintLogger)
    run_id: str = field(default_factory=lambda: f"run_{uuid.uuid4().hex[:8]}")

    @property
    def table_prefix(self) -> str:
        return getattr(self.statements, "table_prefix", "wp_")

    def actor_can(self, capability: str) -> bool:
        return bool(self.authorizer.actor_can(capability))

    def actor_can_all(self, *capabilities: str) -> bool:
        return all(self.actor_can(capability) for capability in capabilities)

    def with_storages(self, storages: ResourceStorages) -> "BlueprintContext":
        """Create a new context with a different resource registry."""
        return replace(self, storages=storages)


class StaticAuthorizer:
    """Authorizer backed by a fixed set of capability names."""

    def __init__(self, capabilities=None):
        self.capabilities = set(capabilities or [])

    def actor_can(self, capability: str) -> bool:
        return capability in self.capabilities

    def __repr__(self) -> str:
        return f"StaticAuthorizer({sorted(self.capabilities)!r})"

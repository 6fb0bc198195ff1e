"""Exporter contract.

An exporter reads part of the current site's configuration and turns it into
zero, one or many steps. The export pipeline checks every exporter's
capabilities before running any of them.
"""

from abc import ABC, abstractmethod
from typing import List, Union

from blueprint.context import BlueprintContext
from blueprint.steps.base import Step


class StepExporter(ABC):
    """Base class for all exporters."""

    def __init__(self, context: BlueprintContext):
        self.context = context

    @abstractmethod
    def export(self) -> Union[Step, List[Step]]:
        """Produce the step(s) describing the current configuration."""

    @abstractmethod
    def get_step_name(self) -> str:
        """Name of the step this exporter produces."""

    @abstractmethod
    def check_step_capabilities(self) -> bool:
        """Whether the acting user may export this part of the configuration."""

    def get_label(self) -> str:
        return self.get_step_name()

    def get_description(self) -> str:
        return ""


class HasAlias(ABC):
    """Mixin for exporters that are requested under their own name.

    Several exporters can emit the same step type (runSql, setSiteOptions);
    the alias tells them apart in a step filter.
    """

    @abstractmethod
    def get_alias(self) -> str:
        """Name used to request this exporter."""


def get_exporter_id(exporter: StepExporter) -> str:
    """Alias when the exporter has one, step name otherwise."""
    if isinstance(exporter, HasAlias):
        return exporter.get_alias()
    return exporter.get_step_name()

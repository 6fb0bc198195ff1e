"""Step processor contract.

Every importer declares the step class it handles, gates itself with a
capability check and turns a step document into a StepProcessorResult.
The import pipeline calls check_step_capabilities() before process(), and
calls process() at most once per document.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Type

from blueprint.context import BlueprintContext
from blueprint.results import StepProcessorResult
from blueprint.steps.base import Step


class StepProcessor(ABC):
    """Base class for all importers."""

    def __init__(self, context: BlueprintContext):
        self.context = context

    @abstractmethod
    def process(self, schema: Dict[str, Any]) -> StepProcessorResult:
        """Apply the step and report what happened."""

    @abstractmethod
    def get_step_class(self) -> Type[Step]:
        """Step class whose documents this processor handles."""

    @abstractmethod
    def check_step_capabilities(self, schema: Dict[str, Any]) -> bool:
        """Whether the acting user may run this step."""

    def get_step_name(self) -> str:
        return self.get_step_class().get_step_name()

    def get_schema(self) -> Dict[str, Any]:
        return self.get_step_class().get_schema()

    def new_result(self) -> StepProcessorResult:
        return StepProcessorResult.success(self.get_step_name())

"""Registry mapping step names to their processors.

Built once per import run from the built-in processors plus any externally
supplied ones. Lookup is an exact match on the step name, and the last
registration for a name wins, so an external processor can replace a
built-in one.
"""

from typing import Any, Dict, Iterable, List, Optional

from blueprint.exceptions import NotFoundError
from blueprint.importers.base import StepProcessor
from blueprint.logging import get_logger

logger = get_logger(__name__)


class StepProcessorRegistry:
    """Step name -> processor index."""

    def __init__(self, processors: Optional[Iterable[Any]] = None):
        self._processors: Dict[str, Any] = {}
        for processor in processors or []:
            self.register(processor)

    def register(self, processor: Any, step_name: Optional[str] = None) -> None:
        """
        Register a processor.

        Args:
            processor: Processor instance, normally a StepProcessor
            step_name: Name to register under; defaults to the name the
                processor declares

        Raises:
            ValueError: If no step name is given and the processor declares none
        """
        if step_name is None:
            if not hasattr(processor, "get_step_name"):
                raise ValueError(
                    f"Cannot determine the step name of {type(processor).__name__}; "
                    "pass step_name explicitly"
                )
            step_name = processor.get_step_name()

        if step_name in self._processors:
            logger.debug(
                f"Overriding processor for '{step_name}' with {type(processor).__name__}"
            )
        self._processors[step_name] = processor

    def get(self, step_name: str) -> Optional[Any]:
        return self._processors.get(step_name)

    def require(self, step_name: str) -> Any:
        """
        Return the processor for a step name.

        Raises:
            NotFoundError: If nothing is registered under the name
        """
        if step_name not in self._processors:
            raise NotFoundError(step_name, self.get_step_names())
        return self._processors[step_name]

    @staticmethod
    def is_valid_processor(processor: Any) -> bool:
        return isinstance(processor, StepProcessor)

    def get_step_names(self) -> List[str]:
        return list(self._processors)

    def __contains__(self, step_name: str) -> bool:
        return step_name in self._processors

    def __len__(self) -> int:
        return len(self._processors)

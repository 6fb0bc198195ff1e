"""Step results.

A StepProcessorResult collects the leveled messages produced while one step
runs. It starts out successful; the first error flips it to failed and it
never flips back. An import run yields an ordered list of these, one per
step plus a leading "ImportSchema" entry.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Union


class MessageLevel(Enum):
    """Message severity, ordered from most to least verbose."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class Message(NamedTuple):
    """One leveled message."""

    level: MessageLevel
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.level.value, "message": self.text}


class StepProcessorResult:
    """Outcome of processing one step."""

    def __init__(self, step_name: str, success: bool = True):
        self.step_name = step_name
        self._success = success
        self._messages: List[Message] = []

    @classmethod
    def success(cls, step_name: str) -> "StepProcessorResult":
        """Create a successful result with no messages."""
        return cls(step_name, True)

    def add_message(self, level: Union[MessageLevel, str], text: str) -> None:
        level = MessageLevel(level)
        self._messages.append(Message(level, text))
        if level is MessageLevel.ERROR:
            self._success = False

    def add_debug(self, text: str) -> None:
        self.add_message(MessageLevel.DEBUG, text)

    def add_info(self, text: str) -> None:
        self.add_message(MessageLevel.INFO, text)

    def add_warn(self, text: str) -> None:
        self.add_message(MessageLevel.WARN, text)

    def add_error(self, text: str) -> None:
        self.add_message(MessageLevel.ERROR, text)

    def merge(self, other: "StepProcessorResult") -> None:
        """Absorb another result's messages and success flag."""
        self._messages.extend(other.get_messages())
        self._success = self._success and other.is_success()

    def is_success(self) -> bool:
        return self._success

    def get_step_name(self) -> str:
        return self.step_name

    def get_messages(
        self, level: Optional[Union[MessageLevel, str]] = None
    ) -> List[Message]:
        """Return messages in insertion order, optionally only those of one level."""
        if level is None or level == "all":
            return list(self._messages)
        level = MessageLevel(level)
        return [message for message in self._messages if message.level is level]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step_name,
            "success": self._success,
            "messages": [message.to_dict() for message in self._messages],
        }

    def __repr__(self) -> str:
        return (
            f"StepProcessorResult(step_name={self.step_name!r}, "
            f"success={self._success}, messages={len(self._messages)})"
        )


def is_run_successful(results: Iterable[StepProcessorResult]) -> bool:
    """True when no result in an import run failed."""
    return all(result.is_success() for result in results)


class JsonResultFormatter:
    """Flattens a list of results into JSON-friendly rows."""

    def __init__(self, results: List[StepProcessorResult]):
        self.results = results

    def format(self, message_type: str = "debug") -> List[Dict[str, str]]:
        """Return one row per message.

        Args:
            message_type: Minimum level to include ("debug" keeps everything,
                "error" only errors), or "all".

        Returns:
            List of {"step", "type", "message"} dictionaries
        """
        order = list(MessageLevel)
        if message_type == "all":
            minimum = 0
        else:
            minimum = order.index(MessageLevel(message_type))

        rows = []
        for result in self.results:
            for message in result.get_messages():
                if order.index(message.level) < minimum:
                    continue
                rows.append({"step": result.get_step_name(), **message.to_dict()})
        return rows

    def is_success(self) -> bool:
        return is_run_successful(self.results)

"""Exception hierarchy for blueprint export and import.

Export is all-or-nothing and raises these exceptions. Import reports per-step
failures through Results and only raises while loading a schema document.
"""

from typing import Any, Dict, List, Optional


class BlueprintError(Exception):
    """Base exception for all blueprint errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        suggested_actions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.context = context or {}
        self.suggested_actions = suggested_actions or []

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "suggested_actions": self.suggested_actions,
        }

    def __str__(self) -> str:
        base_message = self.message

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_message += f" (Context: {context_str})"

        return base_message


class ValidationError(BlueprintError):
    """Malformed input: landing page, schema document, step payload or resource type."""


class AuthorizationError(ValidationError):
    """The actor lacks a capability required by an exporter or step."""

    def __init__(self, step_name: str, message: Optional[str] = None):
        super().__init__(
            message
            or f"Current user does not have the required capabilities to export {step_name}",
            context={"step": step_name},
            suggested_actions=[
                "Run the export as a user with the required capabilities",
                f"Remove '{step_name}' from the requested steps",
            ],
        )
        self.step_name = step_name


class SecurityRejection(BlueprintError):
    """A runSql statement was rejected by one of the security gates."""

    def __init__(self, gate: str, message: str):
        super().__init__(message, context={"gate": gate})
        self.gate = gate

    def __str__(self) -> str:
        return self.message


class ExecutionError(BlueprintError):
    """A collaborator (statement engine, extension manager) reported a fault."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        context = {}
        if original_error is not None:
            context["original_error_type"] = type(original_error).__name__
        super().__init__(message, context=context)
        self.original_error = original_error


class NotFoundError(BlueprintError):
    """No processor or exporter is registered for a step type."""

    def __init__(self, step_name: str, available: Optional[List[str]] = None):
        self.step_name = step_name
        self.available = available or []
        suggestions = []
        if self.available:
            suggestions.append(f"Available steps: {', '.join(sorted(self.available))}")
        super().__init__(
            f"Unable to find an importer for {step_name}",
            context={"step": step_name},
            suggested_actions=suggestions,
        )

"""Blueprint - declarative export and import of site configuration."""

__version__ = "0.1.0"
__package_name__ = "site-blueprint"

# Initialize logging with default configuration
from blueprint.logging import configure_logging

# Set up default logging configuration
configure_logging()

from .context import BlueprintContext, StaticAuthorizer
from .exceptions import (
    AuthorizationError,
    BlueprintError,
    ExecutionError,
    NotFoundError,
    SecurityRejection,
    ValidationError,
)
from .export_schema import ExportSchema
from .import_schema import ImportSchema
from .results import JsonResultFormatter, StepProcessorResult, is_run_successful

__all__ = [
    "BlueprintContext",
    "StaticAuthorizer",
    "BlueprintError",
    "ValidationError",
    "AuthorizationError",
    "SecurityRejection",
    "ExecutionError",
    "NotFoundError",
    "ExportSchema",
    "ImportSchema",
    "StepProcessorResult",
    "JsonResultFormatter",
    "is_run_successful",
]

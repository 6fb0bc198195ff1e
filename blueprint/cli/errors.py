"""CLI-specific exceptions with Rich display support."""

from typing import List, Optional


class BlueprintCLIError(Exception):
    """Base exception for CLI operations with Rich display support."""

    def __init__(self, message: str, suggestions: Optional[List[str]] = None):
        self.message = message
        self.suggestions = suggestions or []
        super().__init__(message)


class ProfileLoadError(BlueprintCLIError):
    """Raised when a profile cannot be read or does not validate."""

    def __init__(self, profile_path: str, reason: str):
        self.profile_path = profile_path
        self.reason = reason
        message = f"Profile '{profile_path}' could not be loaded"
        suggestions = [
            "Check the file path passed to --profile",
            "Check the YAML syntax and the section names",
        ]
        super().__init__(message, suggestions)


class ImportRejectedError(BlueprintCLIError):
    """Raised when the site refuses to run an import at all."""

    def __init__(self, file_path: str, reasons: List[str]):
        self.file_path = file_path
        self.reasons = reasons
        message = f"Import of '{file_path}' was rejected"
        suggestions = [
            "Set import.setup_mode or import.allow_override in the profile",
            "Check the size limit in import.max_payload_bytes",
        ]
        super().__init__(message, suggestions)

"""
Exceptions Module
Error taxonomy for the rule extraction workflow.

Notices are non-fatal conditions shown to the user; inference errors come
from the model call. None of them end the session.
"""


class RuleHarvesterError(Exception):
    """Base class for all Rule Harvester errors."""

    title = "Error"


class WorkflowNotice(RuleHarvesterError):
    """Non-fatal condition that leaves the workflow state unchanged."""

    title = "Notice"


class EmptyInput(WorkflowNotice):
    """Raised when the document has no paragraphs to process."""

    title = "No text to process"

    def __init__(self, message: str = "Please enter some text to extract rules from."):
        super().__init__(message)


class AlreadyComplete(WorkflowNotice):
    """Raised when extraction is requested past the last paragraph."""

    title = "Processing complete"

    def __init__(self, message: str = "All paragraphs have been processed."):
        super().__init__(message)


class EmptyExport(WorkflowNotice):
    """Raised when an export is requested with no extracted rules."""

    title = "Nothing to export"

    def __init__(self, message: str = "There are no rules to export."):
        super().__init__(message)


class InferenceError(RuleHarvesterError):
    """Base class for failures of the model call."""


class MissingCredential(InferenceError):
    """Raised when no API key is configured."""

    def __init__(self, message: str = "API key not set. Please configure it in settings."):
        super().__init__(message)


class TransportError(InferenceError):
    """Raised when the model endpoint returns a non-success status or is unreachable."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(InferenceError):
    """Raised when the model response does not contain a usable rule."""

    def __init__(self, message: str = "Failed to parse rule from LLM response"):
        super().__init__(message)

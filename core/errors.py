# =============================================================================
# core/errors.py  -  Error taxonomy for every tool call
# =============================================================================
#
# Every failure that can reach a caller is one of these classes.  The
# envelope builder (core/contracts.py) is the ONLY place that catches them
# and turns them into an error envelope; handlers just raise.
#
#   SchemaViolation     bad / missing / out-of-range argument
#   ConfigurationError  a credential is missing from the environment
#   UnknownToolError    the tool name is not in the adapter's registry
#   ProviderError       an external capability failed or timed out
#   ExtractionError     strict handler could not find JSON in provider text
# =============================================================================

from typing import Any, Optional


class ContentCreatorError(Exception):
    """Base class: a human-readable message plus a machine-readable code."""

    code = "CONTENT_CREATOR_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class SchemaViolation(ContentCreatorError):
    """Arguments failed the tool's declared contract.

    ``violations`` is a list of ``{"path", "kind", "message"}`` dicts, one per
    broken constraint.  ``path`` uses the wire (camelCase) field names, so a
    missing ``idea.platform`` and a bad ``count`` can be told apart without
    parsing the message.
    """

    code = "SCHEMA_VIOLATION"

    def __init__(self, tool_name: str, violations: list[dict]):
        summary = "; ".join(f"{v['path'] or '<root>'}: {v['message']}" for v in violations)
        super().__init__(f"Invalid arguments for {tool_name}: {summary}", violations)
        self.tool_name = tool_name
        self.violations = violations


class ConfigurationError(ContentCreatorError):
    code = "CONFIGURATION_ERROR"


class UnknownToolError(ContentCreatorError):
    code = "UNKNOWN_TOOL"

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class ProviderError(ContentCreatorError):
    code = "PROVIDER_ERROR"


class ExtractionError(ProviderError):
    code = "EXTRACTION_FAILED"

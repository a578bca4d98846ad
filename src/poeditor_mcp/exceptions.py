"""
Exception hierarchy for the POEditor MCP server.

Every failure raised by the adapter, the configuration loader or a tool
contract is a subclass of POEditorError, so callers and tests can branch on
the error kind instead of parsing message text.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "POEditorError",
    "ConfigurationError",
    "InputValidationError",
    "MissingProjectIdError",
    "TransportError",
    "MalformedResponseError",
    "RemoteAPIError",
]


class POEditorError(Exception):
    """Base exception for all POEditor MCP errors.

    Attributes:
        message: Human-readable error message
        details: Optional dictionary of additional error context
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(POEditorError):
    """A required startup setting is missing or invalid.

    Fatal: the server exits before registering any tool.
    """


class InputValidationError(POEditorError):
    """Tool arguments failed validation. No network call was made."""


class MissingProjectIdError(POEditorError):
    """Neither an explicit project_id nor a default project id is available."""


class TransportError(POEditorError):
    """The HTTP exchange with POEditor failed (connection, timeout, protocol)."""


class MalformedResponseError(POEditorError):
    """POEditor answered with a body that is not a JSON object.

    Attributes:
        raw_text: The response body exactly as received
    """

    def __init__(self, raw_text: str, details: dict[str, Any] | None = None):
        super().__init__(f"POEditor: invalid JSON response: {raw_text}", details)
        self.raw_text = raw_text


class RemoteAPIError(POEditorError):
    """POEditor returned a JSON envelope whose status is not "success".

    The code and message are passed through from the remote service as
    opaque strings.

    Attributes:
        code: Remote error code, or None when the envelope carried none
        remote_message: Remote error message, or the generic fallback
    """

    def __init__(
        self,
        code: str | None,
        remote_message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(f"POEditor API error {code or ''}: {remote_message}", details)
        self.code = code
        self.remote_message = remote_message

"""
POEditor MCP Server - POEditor translation management exposed as MCP tools, built with FastMCP.
"""

from .client import POEditorClient
from .config import POEditorConfig
from .exceptions import *
from .main import create_server

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("poeditor-mcp")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable
__all__ = [
    "create_server",
    "POEditorClient",
    "POEditorConfig",
    "POEditorError",
    "ConfigurationError",
    "InputValidationError",
    "MissingProjectIdError",
    "TransportError",
    "MalformedResponseError",
    "RemoteAPIError",
]

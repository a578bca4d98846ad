"""
HTTP adapter for the POEditor v2 API.

Every POEditor endpoint takes a form-encoded POST carrying the API token and
answers with a JSON envelope:

    {"response": {"status": "success", "code": "200", "message": "OK"},
     "result": {...}}

This module turns one endpoint call into one request, unwraps the envelope
and raises a typed POEditorError for anything that is not a success.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from .config import POEditorConfig
from .exceptions import MalformedResponseError, RemoteAPIError, TransportError

logger = logging.getLogger("poeditor-mcp")

TOKEN_FIELD = "api_token"
SUCCESS_STATUS = "success"
UNKNOWN_ERROR_MESSAGE = "Unknown POEditor error"


class POEditorClient:
    """Authenticated caller for POEditor endpoints.

    Holds no state besides the configuration; each call opens its own
    httpx client and performs exactly one request.
    """

    def __init__(self, config: POEditorConfig):
        self.config = config

    def endpoint_url(self, endpoint: str) -> str:
        return f"{self.config.api_base}/{endpoint.lstrip('/')}"

    async def call(self, endpoint: str, form: Mapping[str, str]) -> Any:
        """
        POST a form to a POEditor endpoint and return the result payload.

        Args:
            endpoint: Endpoint path segment (e.g., "terms/list")
            form: Form fields, values already stringified. Must not contain
                  the api_token field.

        Returns:
            The "result" fragment of the response envelope, or None when the
            endpoint returns no result body.

        Raises:
            ValueError: If form contains the reserved api_token field
            TransportError: If the request could not be completed
            MalformedResponseError: If the body is not a JSON object
            RemoteAPIError: If the envelope status is not "success"
        """
        if TOKEN_FIELD in form:
            raise ValueError(f"'{TOKEN_FIELD}' is reserved and injected from configuration")

        body = {TOKEN_FIELD: self.config.api_token.get_secret_value(), **form}
        url = self.endpoint_url(endpoint)
        logger.debug(f"POST {endpoint} fields={sorted(form)}")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(url, data=body)
                text = response.text
        except httpx.RequestError as e:
            logger.warning(f"POEditor request to {endpoint} failed: {e!r}")
            raise TransportError(
                f"Failed to reach POEditor ({endpoint}): {e}",
                details={"endpoint": endpoint},
            ) from e

        return parse_envelope(text, endpoint=endpoint)


def parse_envelope(text: str, endpoint: str = "") -> Any:
    """
    Validate a raw POEditor response body and extract its result.

    Args:
        text: Raw response body
        endpoint: Endpoint name, used for diagnostics only

    Returns:
        The "result" fragment, or None if absent.

    Raises:
        MalformedResponseError: If text is not a JSON object
        RemoteAPIError: If response.status is not "success"
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        logger.warning(f"POEditor returned non-JSON body for {endpoint}")
        raise MalformedResponseError(text, details={"endpoint": endpoint}) from None

    if not isinstance(payload, dict):
        raise MalformedResponseError(text, details={"endpoint": endpoint})

    envelope = payload.get("response")
    if not isinstance(envelope, dict):
        envelope = {}

    if envelope.get("status") != SUCCESS_STATUS:
        code = envelope.get("code")
        message = envelope.get("message") or UNKNOWN_ERROR_MESSAGE
        logger.warning(f"POEditor error on {endpoint}: code={code} message={message}")
        raise RemoteAPIError(
            str(code) if code is not None else None,
            str(message),
            details={"endpoint": endpoint},
        )

    return payload.get("result")

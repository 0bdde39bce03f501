"""Stdio tool server speaking newline-delimited JSON-RPC 2.0.

Implements the subset of the Model Context Protocol a tool-only server
needs: initialize, ping, tools/list and tools/call. Requests are handled
one at a time, so update checks against the repository never overlap.
"""

import json
from dataclasses import dataclass
from typing import Any, TextIO

from common.constants import SERVER_NAME, SERVER_VERSION
from common.logger import get_logger

from .registry import ToolArgumentError, ToolRegistry

logger = get_logger(__name__)

PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


@dataclass(frozen=True)
class Request:
    """Validated incoming message. ``request_id`` is None for notifications."""

    request_id: str | int | None
    method: str
    params: dict[str, Any]

    @property
    def is_notification(self) -> bool:
        return self.request_id is None


class InvalidRequest(Exception):
    def __init__(self, code: int, message: str, request_id: str | int | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.request_id = request_id


class StdioServer:
    """Dispatch JSON-RPC messages to the tool registry."""

    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    def serve(self, in_stream: TextIO, out_stream: TextIO) -> None:
        """Process JSON lines from in_stream until EOF."""
        tools = ", ".join(self.registry.names())
        logger.info(f"{SERVER_NAME} {SERVER_VERSION} serving tools: {tools}")
        for raw_line in in_stream:
            line = raw_line.strip()
            if not line:
                continue
            response = self.handle_line(line)
            if response is None:
                continue
            out_stream.write(json.dumps(response, ensure_ascii=False) + "\n")
            out_stream.flush()

    def handle_line(self, raw_line: str) -> dict[str, Any] | None:
        """Handle one raw line; returns None for notifications."""
        try:
            payload = json.loads(raw_line)
        except json.JSONDecodeError:
            return error_response(None, PARSE_ERROR, "Parse error")
        return self.handle_payload(payload)

    def handle_payload(self, payload: Any) -> dict[str, Any] | None:
        try:
            request = parse_request(payload)
        except InvalidRequest as e:
            return error_response(e.request_id, e.code, e.message)

        try:
            result = self.dispatch(request)
        except InvalidRequest as e:
            if request.is_notification:
                return None
            return error_response(request.request_id, e.code, e.message)
        except Exception:
            logger.exception(f"Unhandled error while handling {request.method}")
            if request.is_notification:
                return None
            return error_response(request.request_id, INTERNAL_ERROR, "Internal error")

        if request.is_notification:
            return None
        return {"jsonrpc": "2.0", "id": request.request_id, "result": result}

    def dispatch(self, request: Request) -> dict[str, Any]:
        method = request.method
        if method == "initialize":
            return {
                "protocolVersion": request.params.get("protocolVersion", PROTOCOL_VERSION),
                "capabilities": {"tools": {}},
                "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
            }
        if method == "notifications/initialized" or method == "ping":
            return {}
        if method == "tools/list":
            return {"tools": self.registry.describe()}
        if method == "tools/call":
            return self.call_tool(request.params)
        raise InvalidRequest(METHOD_NOT_FOUND, f"Method not found: {method}")

    def call_tool(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        arguments = params.get("arguments") or {}
        if not isinstance(name, str) or not name:
            raise InvalidRequest(
                INVALID_PARAMS, "tools/call params.name must be a non-empty string"
            )
        if not isinstance(arguments, dict):
            raise InvalidRequest(INVALID_PARAMS, "tools/call params.arguments must be an object")

        try:
            outcome = self.registry.dispatch(name, arguments)
        except ToolArgumentError as e:
            raise InvalidRequest(INVALID_PARAMS, str(e)) from e

        logger.debug(f"{name} -> ok={outcome.ok} error_code={outcome.error_code}")
        return {
            "content": [{"type": "text", "text": outcome.text}],
            "isError": not outcome.ok,
        }


def parse_request(payload: Any) -> Request:
    """Validate a JSON-RPC envelope.

    Raises:
        InvalidRequest: If the envelope is not a JSON-RPC 2.0 request
    """
    if not isinstance(payload, dict):
        raise InvalidRequest(INVALID_REQUEST, "Request must be an object")

    request_id = payload.get("id")
    if request_id is not None and (
        isinstance(request_id, bool) or not isinstance(request_id, str | int)
    ):
        raise InvalidRequest(INVALID_REQUEST, "Request id must be a string or integer")
    if payload.get("jsonrpc") != "2.0":
        raise InvalidRequest(INVALID_REQUEST, "jsonrpc must be '2.0'", request_id)

    method = payload.get("method")
    if not isinstance(method, str) or not method:
        raise InvalidRequest(
            INVALID_REQUEST, "Request method must be a non-empty string", request_id
        )

    params = payload.get("params", {})
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise InvalidRequest(INVALID_PARAMS, "Request params must be an object", request_id)

    return Request(request_id=request_id, method=method, params=params)


def error_response(request_id: str | int | None, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}

"""JSON-RPC 2.0 server for MCP tool calls over text streams."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any

from agentcom.mcp.tools import all_tools

log = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
JSONRPC_VERSION = "2.0"
ERR_INVALID_REQUEST = -32600
ERR_METHOD_NOT_FOUND = -32601
ERR_INVALID_PARAMS = -32602
ERR_INTERNAL_ERROR = -32603

ToolHandler = Callable[[Any], Any]


@dataclass
class RPCError:
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        doc: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            doc["data"] = self.data
        return doc


def _response(
    request_id: Any, result: Any = None, error: RPCError | None = None
) -> dict[str, Any]:
    doc: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION}
    if request_id is not None:
        doc["id"] = request_id
    if result is not None:
        doc["result"] = result
    if error is not None:
        doc["error"] = error.to_dict()
    return doc


def _error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return _response(request_id, error=RPCError(code, message))


def _tool_result(text: str, is_error: bool) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "isError": is_error}


def _json_default(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    raise TypeError(f"cannot encode {type(value).__name__}")


def _encode(value: Any) -> str:
    return json.dumps(
        value,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        default=_json_default,
    )


def _read_values(reader) -> Iterator[Any]:
    decoder = json.JSONDecoder()
    buffer = ""
    while True:
        chunk = reader.readline()
        if isinstance(chunk, (bytes, bytearray)):
            chunk = bytes(chunk).decode("utf-8")
        eof = not chunk
        buffer += chunk
        while True:
            text = buffer.lstrip(" \t\r\n")
            if not text:
                buffer = ""
                break
            try:
                value, end = decoder.raw_decode(text)
            except json.JSONDecodeError as exc:
                if eof or exc.pos < len(exc.doc.rstrip()):
                    raise ValueError(f"decode request: {exc}") from exc
                buffer = text
                break
            buffer = text[end:]
            yield value
        if eof:
            return


def _as_request(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError("decode request: request must be a JSON object")
    for key in ("jsonrpc", "method"):
        field_value = value.get(key)
        if field_value is not None and not isinstance(field_value, str):
            raise ValueError(f"decode request: field {key!r} must be a string")
    return value


class McpServer:
    """Serves MCP requests: initialisation, tool listing and tool calls."""

    def __init__(self, project: str = "") -> None:
        self.project = project
        self.initialized = False
        self._tools: dict[str, ToolHandler] = {}

    def register_tool(self, name: str, handler: ToolHandler) -> None:
        """Install the handler called for tools/call with this tool name."""
        self._tools[name] = handler

    def run(self, reader, writer) -> None:
        """Answer requests read from reader until it ends; one response per line."""
        for value in _read_values(reader):
            response = self.route(_as_request(value))
            if response is None:
                continue
            writer.write(_encode(response) + "\n")
            writer.flush()

    def route(self, request: dict[str, Any]) -> dict[str, Any] | None:
        """Return the response to one request, or None when none is due."""
        request_id = request.get("id")
        if request.get("jsonrpc") != JSONRPC_VERSION:
            if request_id is None:
                return None
            return _error(request_id, ERR_INVALID_REQUEST, "Invalid Request")

        method = request.get("method")
        if method == "initialize":
            return self._initialize(request_id)
        if method == "notifications/initialized":
            log.debug("mcp initialized notification received")
            return None
        if method in ("tools/list", "tools/call"):
            if not self.initialized:
                return _error(request_id, ERR_INVALID_REQUEST, "Server not initialized")
            if method == "tools/list":
                return _response(
                    request_id, {"tools": [tool.to_dict() for tool in all_tools()]}
                )
            return self._call_tool(request)
        if request_id is None:
            return None
        return _error(request_id, ERR_METHOD_NOT_FOUND, "Method not found")

    def _initialize(self, request_id: Any) -> dict[str, Any]:
        self.initialized = True
        return _response(
            request_id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": "agentcom", "version": "1.0.0"},
            },
        )

    def _call_tool(self, request: dict[str, Any]) -> dict[str, Any]:
        request_id = request.get("id")
        params = request.get("params")
        if not isinstance(params, dict):
            return _error(request_id, ERR_INVALID_PARAMS, "Invalid params")
        name = params.get("name")
        if not isinstance(name, str) or not name:
            return _error(request_id, ERR_INVALID_PARAMS, "Invalid params")

        handler = self._tools.get(name)
        if handler is None:
            return _response(request_id, _tool_result(f"unknown tool: {name}", True))

        try:
            result = handler(params.get("arguments"))
        except Exception as exc:
            log.debug("mcp tool call failed tool=%s error=%s", name, exc)
            return _response(request_id, _tool_result(str(exc), True))

        try:
            text = _encode(result)
        except (TypeError, ValueError):
            return _error(request_id, ERR_INTERNAL_ERROR, "Internal error")
        return _response(request_id, _tool_result(text, False))
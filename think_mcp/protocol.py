#!/usr/bin/env python3
"""
JSON-RPC records exchanged over the stdio channel.

Inbound lines are decoded into an McpRequest or a DecodeFailure; outbound
records are plain dicts built by make_result / make_error so the "id" key is
always present (null when it could not be determined).

Request ids must be a string, a number or absent. A line whose id is any
other JSON value (object, array, boolean) is a DecodeFailure with no
recoverable id, so it is dropped without a reply.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr, ValidationError

# ============================================================================
# PROTOCOL CONSTANTS
# ============================================================================

JSONRPC_VERSION = "2.0"
EXECUTE_METHOD = "mcp/execute"
SERVER_INFO_METHOD = "mcp/server_info"

PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602

RequestId = Optional[Union[StrictStr, StrictInt, StrictFloat]]

_STRING_PATTERN = re.compile(r'"(?:[^"\\]|\\.)*"')
# Member value after an "id" key: a string or number literal
_ID_VALUE_PATTERN = re.compile(
    r'\s*:\s*("(?:[^"\\]|\\.)*"|-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)'
)


class ProtocolError(Exception):
    """A request failed validation; carries the JSON-RPC error code."""

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


# ============================================================================
# REQUEST MODELS
# ============================================================================

class McpRequest(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    jsonrpc: Any = None
    id: RequestId = None
    method: Any = None
    params: Any = None


class ExecuteParams(BaseModel):
    model_config = ConfigDict(extra="allow")

    tool: Any = None
    arguments: Any = None


class ThinkArguments(BaseModel):
    model_config = ConfigDict(extra="allow")

    prompt: Optional[StrictStr] = None


@dataclass(frozen=True)
class DecodeFailure:
    """Why a line could not be turned into a request, plus any salvaged id."""
    reason: str
    recovered_id: RequestId = None


def recover_id(line: str) -> RequestId:
    """Best-effort scan of unparseable text for the request id.

    Only an "id" member of the outermost object counts; ids inside nested
    objects or arrays (params, arguments) are skipped.
    """
    stack = []
    pos = 0
    while pos < len(line):
        char = line[pos]
        if char == '"':
            string = _STRING_PATTERN.match(line, pos)
            if string is None:
                return None
            pos = string.end()
            if stack == ["{"] and string.group() == '"id"':
                value = _ID_VALUE_PATTERN.match(line, pos)
                if value is not None:
                    try:
                        return json.loads(value.group(1))
                    except json.JSONDecodeError:
                        return None
            continue
        if char in "{[":
            stack.append(char)
        elif char in "}]":
            if not stack:
                return None
            stack.pop()
        pos += 1
    return None


def decode_request(line: str) -> Union[McpRequest, DecodeFailure]:
    """Decode one framed line into a request or a failure reason."""
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        return DecodeFailure(reason=f"Invalid JSON: {e}", recovered_id=recover_id(line))

    if not isinstance(data, dict):
        return DecodeFailure(reason=f"Expected a JSON object, got {type(data).__name__}")

    try:
        return McpRequest.model_validate(data)
    except ValidationError as e:
        return DecodeFailure(reason=f"Invalid request envelope: {e.errors()[0]['msg']}")


def parse_execute_params(params: Any) -> ExecuteParams:
    if params is None:
        raise ProtocolError(INVALID_PARAMS, "Invalid params")
    try:
        return ExecuteParams.model_validate(params)
    except ValidationError:
        raise ProtocolError(INVALID_PARAMS, "Invalid params")


def parse_think_arguments(arguments: Any) -> str:
    """Validate think arguments and return the trimmed prompt."""
    if arguments is None:
        raise ProtocolError(INVALID_PARAMS, "Missing required parameter: prompt")
    if not isinstance(arguments, dict):
        raise ProtocolError(INVALID_PARAMS, "Invalid params")
    try:
        args = ThinkArguments.model_validate(arguments)
    except ValidationError:
        raise ProtocolError(INVALID_PARAMS, "Invalid params: prompt must be a string")

    if args.prompt is None:
        raise ProtocolError(INVALID_PARAMS, "Missing required parameter: prompt")

    prompt = args.prompt.strip()
    if not prompt:
        raise ProtocolError(INVALID_PARAMS, "Prompt cannot be empty")
    return prompt


# ============================================================================
# RESPONSE BUILDERS
# ============================================================================

def make_result(message_id: RequestId, output: str) -> Dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": message_id,
        "result": {
            "output": output
        }
    }


def make_error(message_id: RequestId, code: int, message: str) -> Dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": message_id,
        "error": {
            "code": code,
            "message": message
        }
    }

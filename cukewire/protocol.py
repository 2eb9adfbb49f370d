"""JSON encoding of wire protocol messages and the handler that answers requests."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from .commands import (
    BeginScenarioCommand,
    EndScenarioCommand,
    FailingCommand,
    FailureResponse,
    InvokeCommand,
    PendingResponse,
    SnippetTextCommand,
    SnippetTextResponse,
    StepMatchesCommand,
    StepMatchesResponse,
    SuccessResponse,
    WireCommand,
    WireResponse,
)
from .engine import CukeEngine

_log = logging.getLogger(__name__)

_FAIL = '["fail"]'


class WireMessageCodecException(Exception):
    """A response could not be encoded."""


def _elements(value: Any) -> list[Any]:
    """Iterate a JSON value the lenient way: arrays and objects yield members."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return list(value.values())
    return [value]


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Expected a string, got {value!r}")
    return value


def _object(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(f"Expected an object, got {value!r}")
    return value


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        raise TypeError(f"Expected an array, got {value!r}")
    return [_string(item) for item in value]


def _scenario_tags(args: Any) -> tuple[str, ...]:
    if args is None:
        return ()
    return tuple(_string(tag) for tag in _elements(_object(args)["tags"]))


def _fill_table(json_table: list[Any], table: list[list[str]]) -> None:
    rows = len(json_table)
    if rows == 0:
        return
    columns = len(_strings(json_table[0]))
    del table[rows:]
    table.extend([] for _ in range(rows - len(table)))
    for target, json_row in zip(table, json_table):
        values = _strings(json_row)
        if len(values) == columns:
            target.extend(values)


def _decode_begin_scenario(args: Any) -> WireCommand:
    return BeginScenarioCommand(_scenario_tags(args))


def _decode_end_scenario(args: Any) -> WireCommand:
    return EndScenarioCommand(_scenario_tags(args))


def _decode_step_matches(args: Any) -> WireCommand:
    return StepMatchesCommand(_string(_object(args)["name_to_match"]))


def _decode_invoke(args: Any) -> WireCommand:
    params = _object(args)
    step_id = _string(params["id"])
    invoke_args: list[str] = []
    table: list[list[str]] = []
    for arg in _elements(params["args"]):
        if isinstance(arg, str):
            invoke_args.append(arg)
        elif isinstance(arg, list):
            _fill_table(arg, table)
    return InvokeCommand(step_id, tuple(invoke_args), tuple(tuple(row) for row in table))


def _decode_snippet_text(args: Any) -> WireCommand:
    params = _object(args)
    return SnippetTextCommand(
        _string(params["step_keyword"]),
        _string(params["step_name"]),
        _string(params["multiline_arg_class"]),
    )


_DECODERS: dict[str, Callable[[Any], WireCommand]] = {
    "begin_scenario": _decode_begin_scenario,
    "end_scenario": _decode_end_scenario,
    "step_matches": _decode_step_matches,
    "invoke": _decode_invoke,
    "snippet_text": _decode_snippet_text,
}


def _payload(response: WireResponse) -> list[Any]:
    match response:
        case SuccessResponse():
            return ["success"]
        case FailureResponse(message=message, exception_type=exception_type):
            detail = {}
            if message:
                detail["message"] = message
            if exception_type:
                detail["exception"] = exception_type
            return ["fail", detail] if detail else ["fail"]
        case PendingResponse(message=message):
            return ["pending", message]
        case StepMatchesResponse(matching_steps=steps):
            matches = []
            for step in steps:
                entry: dict[str, Any] = {
                    "id": step.id,
                    "args": [{"val": a.value, "pos": int(a.position)} for a in step.args],
                }
                if step.source:
                    entry["source"] = step.source
                if step.regexp:
                    entry["regexp"] = step.regexp
                matches.append(entry)
            return ["success", matches]
        case SnippetTextResponse(step_snippet=snippet):
            return ["success", snippet]
    raise TypeError(f"Unknown response {response!r}")


class JsonWireMessageCodec:
    """Turns JSON requests into commands and responses into JSON."""

    def decode(self, request: str) -> WireCommand:
        """Decode a request; anything not understood becomes a FailingCommand."""
        try:
            message = json.loads(request)
            if not isinstance(message, list) or not message:
                raise ValueError("Request is not a non-empty array")
            decoder = _DECODERS.get(_string(message[0]))
            if decoder is not None:
                args = message[1] if len(message) > 1 else None
                return decoder(args)
        except Exception:
            _log.debug("Error decoding wire protocol command %r", request, exc_info=True)
        return FailingCommand()

    def encode(self, response: WireResponse) -> str:
        """Encode a response as compact JSON with sorted keys and raw UTF-8."""
        try:
            return json.dumps(
                _payload(response),
                ensure_ascii=False,
                separators=(",", ":"),
                sort_keys=True,
            )
        except Exception as exc:
            raise WireMessageCodecException("Error decoding wire protocol response") from exc


class WireProtocolHandler:
    """Answers one request line with one response line."""

    def __init__(self, codec: JsonWireMessageCodec, engine: CukeEngine) -> None:
        self.codec = codec
        self.engine = engine

    def handle(self, request: str) -> str:
        try:
            command = self.codec.decode(request)
            return self.codec.encode(command.run(self.engine))
        except Exception:
            _log.debug("Error handling request %r", request, exc_info=True)
            return _FAIL
"""Response module generation.

For every operation this emits:

- a dataclass envelope ``<Operation>Response`` holding the raw body, status
  code and headers, plus one optional attribute per decodable response
- ``parse_<operation>_response()`` which builds the envelope and runs the
  operation's dispatch chain over it
- ``<operation>_result()`` for operations with a single 2xx JSON response
  and/or an empty 2xx response, returning the success payload or raising
  ``UnexpectedResponse``

Operations whose responses cannot be classified are left out of the module
and reported in ``ResponsesOutput.failures``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from ..content_types import DEFAULT_CONTENT_TYPE_TABLES, ContentTypeClass, ContentTypeTables
from ..errors import ClassificationError
from ..ir import OperationIR
from .analysis import has_empty_2xx_response, has_valid_request_and_response, single_2xx_json_definition
from .classifier import ClassifiedResponse, ResponseTypeDefinition, classify
from .dispatch import CONTENT_TYPE_HEADER, DispatchNames, is_handled, synthesize
from .emitter import TypeEmitter
from .naming import operation_identifier, response_type_name, snake_case
from .profile import GenerationProfile

logger = logging.getLogger(__name__)

_INDENT = "    "

UNEXPECTED_RESPONSE = "UnexpectedResponse"
_DISPATCH_HEADERS = "_dispatch_headers"


@dataclass(frozen=True)
class OperationFailure:
    """An operation left out of the generated module, and why."""

    operation: str
    reason: str


@dataclass
class ResponsesOutput:
    code: str
    exports: list[str] = field(default_factory=list)
    failures: list[OperationFailure] = field(default_factory=list)


@dataclass
class _ModuleState:
    profile: GenerationProfile
    names: DispatchNames
    typing_imports: set[str] = field(default_factory=lambda: {"cast"})
    families: set[ContentTypeClass] = field(default_factory=set)
    exports: list[str] = field(default_factory=list)


def response_payload(operation_id: str, names: DispatchNames = DispatchNames()) -> str:
    """The expression constructing an operation's envelope from the raw response.

    Example:
        >>> response_payload("listPets")
        'ListPetsResponse(body=body, status_code=status_code, headers=headers)'
    """
    return (
        f"{response_type_name(operation_id)}("
        f"body={names.body}, status_code={names.status}, headers={names.headers})"
    )


def generate_responses(
    operations: Sequence[OperationIR],
    schema_names: frozenset[str],
    profile: GenerationProfile,
    tables: ContentTypeTables = DEFAULT_CONTENT_TYPE_TABLES,
    names: DispatchNames = DispatchNames(),
) -> ResponsesOutput:
    """Generate the response parsing module for ``operations``.

    Args:
        operations: Operations to generate parsers for
        schema_names: Component schema names response schemas may reference
        profile: Generation profile controlling Python version features
        tables: Content-type family tables
        names: Variable names used inside the generated parse functions

    Returns:
        ResponsesOutput with the module source, the public names it defines,
        and the operations that had to be skipped
    """
    state = _ModuleState(profile=profile, names=names)
    failures: list[OperationFailure] = []
    seen: set[str] = set()
    taken: set[str] = {UNEXPECTED_RESPONSE, _DISPATCH_HEADERS}
    body_lines: list[str] = []

    for operation in operations:
        op_id = operation_identifier(operation)
        if op_id in seen:
            failures.append(OperationFailure(op_id, "duplicate operation identifier"))
            logger.warning(
                "Skipping %s %s: duplicate operation identifier %s",
                operation.method.upper(),
                operation.path,
                op_id,
            )
            continue
        seen.add(op_id)

        function_base = snake_case(op_id)
        generated = {response_type_name(op_id), f"parse_{function_base}_response", f"{function_base}_result"}
        clashing = sorted(generated & taken)
        if clashing:
            failures.append(OperationFailure(op_id, f"generated name {clashing[0]} clashes with another operation"))
            logger.warning("Skipping %s: generated name %s is already defined", op_id, clashing[0])
            continue

        emitter = TypeEmitter(profile, schema_names)
        try:
            classified = classify(operation, tables, emitter)
        except ClassificationError as exc:
            failures.append(OperationFailure(op_id, exc.message))
            logger.warning("Skipping %s: %s", op_id, exc.message)
            continue
        state.typing_imports.update(emitter.imports)
        body_lines.extend(_emit_operation(operation, op_id, classified, tables, state))
        taken.update(generated)

    lines = _emit_header(state)
    lines.extend(_emit_runtime_helpers())
    lines.extend(body_lines)
    lines.append("__all__ = [")
    lines.extend(f"    {name!r}," for name in [UNEXPECTED_RESPONSE, *state.exports])
    lines.append("]")
    return ResponsesOutput(
        code="\n".join(lines).rstrip() + "\n",
        exports=[UNEXPECTED_RESPONSE, *state.exports],
        failures=failures,
    )


def _emit_header(state: _ModuleState) -> list[str]:
    lines = ["# ruff: noqa: F401"]
    if state.profile.use_future_annotations:
        lines.append("from __future__ import annotations")
    lines.append("")
    if ContentTypeClass.JSON in state.families:
        lines.append("import json")
    lines.append("from collections.abc import Mapping")
    lines.append("from dataclasses import dataclass")
    lines.append(f"from typing import {', '.join(sorted(state.typing_imports))}")
    if ContentTypeClass.XML in state.families:
        lines.append("from xml.etree import ElementTree")
    if ContentTypeClass.YAML in state.families:
        lines.append("")
        lines.append("import yaml")
    lines.extend(["", ""])
    return lines


def _emit_runtime_helpers() -> list[str]:
    return [
        "class UnexpectedResponse(Exception):",
        "    def __init__(self, status_code: int, body: bytes) -> None:",
        "        super().__init__(f'unexpected response status {status_code}')",
        "        self.status_code = status_code",
        "        self.body = body",
        "",
        "",
        f"def {_DISPATCH_HEADERS}(headers: Mapping[str, str]) -> dict[str, str]:",
        "    for key, value in headers.items():",
        f"        if key.lower() == {CONTENT_TYPE_HEADER.lower()!r}:",
        f"            return {{{CONTENT_TYPE_HEADER!r}: value}}",
        "    return {}",
        "",
        "",
    ]


def _emit_operation(
    operation: OperationIR,
    op_id: str,
    classified: list[ClassifiedResponse],
    tables: ContentTypeTables,
    state: _ModuleState,
) -> list[str]:
    names = state.names
    type_name = response_type_name(op_id)
    function_base = snake_case(op_id)

    fields: dict[str, str] = {}
    for record in classified:
        if isinstance(record, ResponseTypeDefinition) and is_handled(record, tables) and record.field_name:
            fields[record.field_name] = record.type_name
            state.families.add(record.content_class)

    lines = ["@dataclass(slots=True)" if state.profile.use_dataclass_slots else "@dataclass"]
    lines.append(f"class {type_name}:")
    lines.append(f'{_INDENT}"""Responses of {operation.method.upper()} {operation.path}."""')
    lines.append("")
    lines.append(f"{_INDENT}body: bytes")
    lines.append(f"{_INDENT}status_code: int")
    lines.append(f"{_INDENT}headers: Mapping[str, str]")
    for field_name, field_type in fields.items():
        lines.append(f"{_INDENT}{field_name}: {_optional(field_type, state)} = None")
    lines.extend(["", ""])

    parse_name = f"parse_{function_base}_response"
    params = f"{names.status}: int, {names.headers}: Mapping[str, str], {names.body}: bytes"
    lines.append(f"def {parse_name}({params}) -> {type_name}:")
    lines.append(f"{_INDENT}{names.envelope} = {response_payload(op_id, names)}")
    if fields:
        lines.append(f"{_INDENT}{names.headers} = {_DISPATCH_HEADERS}({names.headers})")
    fragment = synthesize(op_id, classified, tables, names)
    lines.extend(f"{_INDENT}{line}" for line in fragment.splitlines())
    lines.append(f"{_INDENT}return {names.envelope}")
    lines.extend(["", ""])
    state.exports.extend([type_name, parse_name])

    if has_valid_request_and_response(operation, classified):
        result_name = f"{function_base}_result"
        lines.extend(_emit_result(result_name, type_name, operation, classified, state))
        state.exports.append(result_name)
    return lines


def _emit_result(
    result_name: str,
    type_name: str,
    operation: OperationIR,
    classified: list[ClassifiedResponse],
    state: _ModuleState,
) -> list[str]:
    single = single_2xx_json_definition(classified)
    empty = has_empty_2xx_response(operation)
    raise_line = f"{_INDENT}{_INDENT}raise UnexpectedResponse(response.status_code, response.body)"
    if single is None:
        return [
            f"def {result_name}(response: {type_name}) -> None:",
            f"{_INDENT}if response.status_code // 100 != 2:",
            raise_line,
            "",
            "",
        ]
    if empty:
        return [
            f"def {result_name}(response: {type_name}) -> {_optional(single.type_name, state)}:",
            f"{_INDENT}if response.status_code // 100 != 2:",
            raise_line,
            f"{_INDENT}return response.{single.field_name}",
            "",
            "",
        ]
    return [
        f"def {result_name}(response: {type_name}) -> {single.type_name}:",
        f"{_INDENT}if response.{single.field_name} is None:",
        raise_line,
        f"{_INDENT}return response.{single.field_name}",
        "",
        "",
    ]


def _optional(annotation: str, state: _ModuleState) -> str:
    if annotation.endswith("| None") or annotation.startswith("Optional["):
        return annotation
    if not state.profile.use_pep604:
        state.typing_imports.add("Optional")
    return state.profile.optional(annotation)

from __future__ import annotations

import keyword
import re

from ..content_types import ContentTypeClass
from ..ir import OperationIR
from ..status import ResponseKey

RESPONSE_TYPE_SUFFIX = "Response"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def operation_name(method: str, path: str) -> str:
    """Convert an operation method and path to a PascalCase name.

    Example:
        >>> operation_name("get", "/users/{id}")
        'GetUsersId'
    """
    return _pascal(f"{method}_{path}")


def operation_identifier(operation: OperationIR) -> str:
    """The stable identifier of an operation: its operationId, or a name derived from method and path."""
    if operation.operation_id:
        return operation.operation_id
    return operation_name(operation.method, operation.path)


def response_type_name(operation_id: str) -> str:
    """Name of the envelope class generated for an operation.

    Example:
        >>> response_type_name("listPets")
        'ListPetsResponse'
    """
    if operation_id.isidentifier():
        base = operation_id[:1].upper() + operation_id[1:]
    else:
        base = _pascal(operation_id)
    return f"{base}{RESPONSE_TYPE_SUFFIX}"


def snake_case(name: str) -> str:
    """Convert an operation identifier to a snake_case function name.

    Example:
        >>> snake_case("getPetById")
        'get_pet_by_id'
    """
    words = _CAMEL_BOUNDARY.sub("_", name)
    cleaned = re.sub(r"[^0-9a-zA-Z]+", "_", words).strip("_").lower()
    if not cleaned or cleaned[0].isdigit():
        cleaned = f"op_{cleaned}"
    if keyword.iskeyword(cleaned):
        cleaned = f"{cleaned}_"
    return cleaned


def envelope_field_name(content_class: ContentTypeClass, response_key: ResponseKey) -> str:
    """Envelope attribute that receives the decoded body for a response key.

    Example:
        >>> from dispatchify.status import parse_response_key
        >>> envelope_field_name(ContentTypeClass.JSON, parse_response_key("2XX"))
        'json_2xx'
    """
    return f"{content_class.value}_{response_key.text.lower()}"


def _pascal(raw: str) -> str:
    cleaned: list[str] = []
    prev_underscore = False
    for ch in raw:
        if ch.isalnum():
            cleaned.append(ch.lower())
            prev_underscore = False
        elif not prev_underscore:
            cleaned.append("_")
            prev_underscore = True
    name = "".join(cleaned).strip("_")
    return name.replace("_", " ").title().replace(" ", "")

from __future__ import annotations

from typing import Sequence

from ..content_types import ContentTypeClass
from ..ir import OperationIR
from .classifier import ClassifiedResponse, ResponseTypeDefinition
from .emitter import OPEN_TYPE


def json_response_definitions(classified: Sequence[ClassifiedResponse]) -> list[ResponseTypeDefinition]:
    """Only the records with a JSON-family content type."""
    return [
        record
        for record in classified
        if isinstance(record, ResponseTypeDefinition) and record.content_class is ContentTypeClass.JSON
    ]


def single_2xx_json_definition(classified: Sequence[ClassifiedResponse]) -> ResponseTypeDefinition | None:
    """The JSON record of the operation's only 2xx JSON response.

    Returns None when there is no such record, when several 2xx JSON records
    exist, or when its type is the open sentinel.
    """
    found: ResponseTypeDefinition | None = None
    for record in json_response_definitions(classified):
        if not record.response_key.text.startswith("2"):
            continue
        if found is not None:
            return None
        found = record
    if found is None or found.type_name == OPEN_TYPE:
        return None
    return found


def has_empty_2xx_response(operation: OperationIR) -> bool:
    """Whether the operation declares a 2xx response without content (mostly 204)."""
    return any(
        response.defined and not response.content and response.status.startswith("2")
        for response in operation.responses
    )


def has_single_2xx_json_response(classified: Sequence[ClassifiedResponse]) -> bool:
    return single_2xx_json_definition(classified) is not None


def has_valid_or_no_body(operation: OperationIR) -> bool:
    """Whether the operation has no request body, or one that declares content."""
    if not operation.has_body or operation.request_body is None:
        return True
    return len(operation.request_body.content) > 0


def has_valid_request_and_response(operation: OperationIR, classified: Sequence[ClassifiedResponse]) -> bool:
    return has_valid_or_no_body(operation) and (
        has_empty_2xx_response(operation) or has_single_2xx_json_response(classified)
    )

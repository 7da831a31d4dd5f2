"""Intermediate Representation (IR) for OpenAPI documents.

The IR keeps only what response dispatch generation needs: the operations
of a document, their responses keyed by status pattern, the media types of
each response, and the named component schemas.

Key classes:
- IRDocument: Root container for schemas and operations
- OperationIR: One endpoint + method pair
- ResponseIR: One entry of an operation's ``responses`` mapping
- MediaTypeIR: One content type of a response or request body
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, cast

from .errors import SpecError
from .openapi import (
    ComponentsObject,
    MediaTypeObject,
    OpenAPIDocument,
    OperationObject,
    PathItemObject,
    RequestBodyObject,
    ResponseObject,
    SchemaObject,
)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


@dataclass(frozen=True)
class SchemaIR:
    """A named schema from ``components/schemas``."""

    name: str
    schema: SchemaObject


@dataclass(frozen=True)
class MediaTypeIR:
    """A media type entry.

    Attributes:
        content_type: The MIME type as written in the document
        schema: The schema for the content, if specified
    """

    content_type: str
    schema: SchemaObject | None


@dataclass(frozen=True)
class ResponseIR:
    """An entry of an operation's ``responses`` mapping.

    Attributes:
        status: The response key as written ("200", "4XX", "default")
        description: Human-readable description of the response
        content: Media types the response may carry; empty for no-content responses
        ref: A ``$ref`` left unresolved in the response object, if any
        defined: False when the response entry has no object value at all
    """

    status: str
    description: str | None
    content: list[MediaTypeIR]
    ref: str | None = None
    defined: bool = True


@dataclass(frozen=True)
class RequestBodyIR:
    required: bool
    content: list[MediaTypeIR]


@dataclass(frozen=True)
class OperationIR:
    """Intermediate representation of an HTTP operation.

    Attributes:
        method: The HTTP method (lowercase: "get", "post", etc.)
        path: The URL path template (e.g., "/users/{id}")
        operation_id: Unique operation identifier from the document, if any
        request_body: The request body definition, if any
        responses: Responses in document order
    """

    method: str
    path: str
    operation_id: str | None
    request_body: RequestBodyIR | None
    responses: list[ResponseIR]

    @property
    def has_body(self) -> bool:
        return self.request_body is not None


@dataclass(frozen=True)
class IRDocument:
    schemas: list[SchemaIR]
    operations: list[OperationIR]

    @property
    def schema_names(self) -> frozenset[str]:
        return frozenset(schema.name for schema in self.schemas)


def build_ir(document: OpenAPIDocument) -> IRDocument:
    """Build the IR from a parsed OpenAPI document.

    The document is normally resolved first with ``load_openapi``. References
    that are still present are carried into the IR untouched; the classifier
    decides whether they are usable.
    """
    components = cast(ComponentsObject, document.get("components") or {})
    schemas = [SchemaIR(name=name, schema=schema) for name, schema in (components.get("schemas") or {}).items()]

    paths = document.get("paths") or {}
    if not isinstance(paths, dict):
        raise SpecError("'paths' must be an object")
    operations: list[OperationIR] = []
    for path, item in cast(dict[str, PathItemObject], paths).items():
        if not isinstance(item, dict):
            raise SpecError(f"Path item for {path!r} must be an object")
        operations.extend(_build_path_operations(path, item))
    return IRDocument(schemas=schemas, operations=operations)


def _build_path_operations(path: str, item: PathItemObject) -> Iterable[OperationIR]:
    for method in HTTP_METHODS:
        operation = cast(OperationObject | None, item.get(method))
        if not operation:
            continue
        responses = operation.get("responses") or {}
        if not isinstance(responses, dict):
            raise SpecError(f"Responses of {method.upper()} {path} must be an object")
        yield OperationIR(
            method=method,
            path=path,
            operation_id=operation.get("operationId"),
            request_body=_build_request_body(cast(RequestBodyObject | None, operation.get("requestBody"))),
            responses=_build_responses(cast(dict[str, ResponseObject], responses)),
        )


def _build_request_body(request_body: RequestBodyObject | None) -> RequestBodyIR | None:
    if not request_body:
        return None
    return RequestBodyIR(
        required=bool(request_body.get("required", False)),
        content=_build_media_types(request_body.get("content") or {}),
    )


def _build_responses(responses: dict[str, ResponseObject]) -> list[ResponseIR]:
    result: list[ResponseIR] = []
    for status, response in responses.items():
        # YAML turns unquoted status codes into integers.
        status = str(status)
        if not isinstance(response, dict):
            result.append(ResponseIR(status=status, description=None, content=[], defined=False))
            continue
        ref = response.get("$ref")
        result.append(
            ResponseIR(
                status=status,
                description=response.get("description"),
                content=_build_media_types(response.get("content") or {}),
                ref=ref if isinstance(ref, str) else None,
            )
        )
    return result


def _build_media_types(content: dict[str, MediaTypeObject]) -> list[MediaTypeIR]:
    result: list[MediaTypeIR] = []
    for content_type, media_type in content.items():
        schema = media_type.get("schema") if isinstance(media_type, dict) else None
        result.append(MediaTypeIR(content_type=content_type, schema=schema))
    return result

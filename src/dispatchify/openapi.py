"""Typed views of the parts of an OpenAPI 3 document that dispatchify reads.

Only response-related structure is described. Everything else in a document
(parameters, security, servers, tags, ...) passes through untyped.
"""

from __future__ import annotations

from typing import TypedDict

SchemaObject = TypedDict(
    "SchemaObject",
    {
        "type": str,
        "items": "SchemaObject",
        "properties": dict[str, "SchemaObject"],
        "additionalProperties": object,
        "nullable": bool,
        "enum": list[object],
        "oneOf": list["SchemaObject"],
        "anyOf": list["SchemaObject"],
        "allOf": list["SchemaObject"],
        "$ref": str,
        # Component name, attached by the loader when a ref is expanded
        "x-dispatchify-schema-name": str,
    },
    total=False,
)


class MediaTypeObject(TypedDict, total=False):
    schema: SchemaObject


ResponseObject = TypedDict(
    "ResponseObject",
    {
        "$ref": str,
        "description": str,
        "content": dict[str, MediaTypeObject],
    },
    total=False,
)


class RequestBodyObject(TypedDict, total=False):
    required: bool
    content: dict[str, MediaTypeObject]


class OperationObject(TypedDict, total=False):
    operationId: str
    requestBody: RequestBodyObject
    responses: dict[str, ResponseObject]


class PathItemObject(TypedDict, total=False):
    get: OperationObject
    put: OperationObject
    post: OperationObject
    delete: OperationObject
    options: OperationObject
    head: OperationObject
    patch: OperationObject
    trace: OperationObject


class ComponentsObject(TypedDict, total=False):
    schemas: dict[str, SchemaObject]
    responses: dict[str, ResponseObject]


class InfoObject(TypedDict, total=False):
    title: str
    version: str


class OpenAPIDocument(TypedDict, total=False):
    openapi: str
    info: InfoObject
    paths: dict[str, PathItemObject]
    components: ComponentsObject

"""Response classification.

``classify()`` flattens an operation's responses into one record per
(response key, content type) pair, in a deterministic order: response keys
by specificity tier then text, content types lexicographically within a key.
A response without any content yields a ``NoContentResponse`` marker instead.

Classification is all-or-nothing. Any structural problem (an unresolved
reference, an invalid response key) raises ``ClassificationError`` and no
records are returned for the operation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..content_types import DEFAULT_CONTENT_TYPE_TABLES, ContentTypeClass, ContentTypeTables
from ..errors import ClassificationError
from ..ir import OperationIR, ResponseIR
from ..openapi import SchemaObject
from ..status import ResponseKey, parse_response_key
from .emitter import OPEN_TYPE, TypeEmitter
from .naming import envelope_field_name, operation_identifier
from .profile import GenerationProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResponseTypeDefinition:
    """One content type of one response, with the type its body decodes into.

    Attributes:
        response_key: The parsed response key
        content_type: The content type exactly as declared
        content_class: The family ``content_type`` belongs to
        type_name: Python type of the decoded body; ``OPEN_TYPE`` if unknown
        field_name: Envelope attribute for the decoded body, None for unsupported content
        schema: The declared schema, if any
    """

    response_key: ResponseKey
    content_type: str
    content_class: ContentTypeClass
    type_name: str
    field_name: str | None
    schema: SchemaObject | None

    @property
    def decodable(self) -> bool:
        return self.content_class.is_known and self.type_name != OPEN_TYPE


@dataclass(frozen=True)
class NoContentResponse:
    """Marker for a response key that declares no content at all (e.g. 204)."""

    response_key: ResponseKey


ClassifiedResponse = ResponseTypeDefinition | NoContentResponse


def classify(
    operation: OperationIR,
    tables: ContentTypeTables = DEFAULT_CONTENT_TYPE_TABLES,
    emitter: TypeEmitter | None = None,
) -> list[ClassifiedResponse]:
    """Flatten an operation's responses into classified records.

    Args:
        operation: The operation to classify
        tables: Content-type family tables
        emitter: Type emitter used to name target types. A fresh emitter
            that knows no component schemas is used when omitted.

    Raises:
        ClassificationError: If any response cannot be reduced to records.
    """
    op_id = operation_identifier(operation)
    if emitter is None:
        emitter = TypeEmitter(GenerationProfile.from_version("3.10"))

    keyed: dict[ResponseKey, ResponseIR] = {}
    for response in operation.responses:
        key = parse_response_key(response.status, operation=op_id)
        if key in keyed:
            raise ClassificationError(f"duplicate response key {key.text!r}", operation=op_id)
        keyed[key] = response

    records: list[ClassifiedResponse] = []
    for key in sorted(keyed, key=lambda item: (item.tier, item.text)):
        response = keyed[key]
        if not response.defined:
            logger.warning("Response %s.%s has no value", op_id, key.text)
            continue
        if response.ref is not None:
            raise ClassificationError(
                f"unresolved response reference {response.ref!r} for {key.text!r}",
                operation=op_id,
            )
        if not response.content:
            records.append(NoContentResponse(response_key=key))
            continue
        for media in sorted(response.content, key=lambda item: item.content_type):
            content_class = tables.classify(media.content_type)
            try:
                type_name = emitter.apply_nullable(emitter.emit(media.schema), media.schema)
            except ClassificationError as exc:
                raise ClassificationError(
                    f"{exc.message} in response {key.text!r} ({media.content_type})",
                    operation=op_id,
                ) from exc
            records.append(
                ResponseTypeDefinition(
                    response_key=key,
                    content_type=media.content_type,
                    content_class=content_class,
                    type_name=type_name,
                    field_name=envelope_field_name(content_class, key) if content_class.is_known else None,
                    schema=media.schema,
                )
            )

    logger.debug("Classified %d response record(s) for %s", len(records), op_id)
    return records

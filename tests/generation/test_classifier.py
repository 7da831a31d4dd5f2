from __future__ import annotations

import logging

import pytest

from dispatchify.content_types import ContentTypeClass, ContentTypeTables
from dispatchify.errors import ClassificationError
from dispatchify.generation.classifier import NoContentResponse, ResponseTypeDefinition, classify
from dispatchify.generation.emitter import OPEN_TYPE, TypeEmitter
from dispatchify.generation.profile import GenerationProfile
from dispatchify.ir import MediaTypeIR, OperationIR, ResponseIR


def _operation(responses: list[ResponseIR], operation_id: str | None = "getPet") -> OperationIR:
    return OperationIR(
        method="get",
        path="/pets/{id}",
        operation_id=operation_id,
        request_body=None,
        responses=responses,
    )


def _emitter() -> TypeEmitter:
    return TypeEmitter(GenerationProfile.from_version("3.12"), frozenset({"Pet"}))


class TestClassify:
    def test_flattens_content_types(self) -> None:
        operation = _operation(
            [
                ResponseIR(
                    status="200",
                    description="ok",
                    content=[
                        MediaTypeIR(content_type="text/yaml", schema={"$ref": "#/components/schemas/Pet"}),
                        MediaTypeIR(content_type="application/json", schema={"$ref": "#/components/schemas/Pet"}),
                    ],
                )
            ]
        )
        records = classify(operation, emitter=_emitter())
        assert records == [
            ResponseTypeDefinition(
                response_key=records[0].response_key,
                content_type="application/json",
                content_class=ContentTypeClass.JSON,
                type_name="Pet",
                field_name="json_200",
                schema={"$ref": "#/components/schemas/Pet"},
            ),
            ResponseTypeDefinition(
                response_key=records[0].response_key,
                content_type="text/yaml",
                content_class=ContentTypeClass.YAML,
                type_name="Pet",
                field_name="yaml_200",
                schema={"$ref": "#/components/schemas/Pet"},
            ),
        ]

    def test_orders_response_keys_by_specificity(self) -> None:
        operation = _operation(
            [
                ResponseIR(status="default", description=None, content=[]),
                ResponseIR(status="2XX", description=None, content=[]),
                ResponseIR(status="404", description=None, content=[]),
                ResponseIR(status="200", description=None, content=[]),
            ]
        )
        records = classify(operation)
        assert [record.response_key.text for record in records] == ["200", "404", "2XX", "default"]

    def test_no_content_marker(self) -> None:
        operation = _operation([ResponseIR(status="204", description="deleted", content=[])])
        records = classify(operation)
        assert len(records) == 1
        assert isinstance(records[0], NoContentResponse)
        assert records[0].response_key.text == "204"

    def test_open_type_is_kept_but_not_decodable(self) -> None:
        operation = _operation(
            [
                ResponseIR(
                    status="200",
                    description=None,
                    content=[
                        MediaTypeIR(
                            content_type="application/json",
                            schema={"anyOf": [{"type": "string"}, {"type": "integer"}]},
                        )
                    ],
                )
            ]
        )
        (record,) = classify(operation)
        assert isinstance(record, ResponseTypeDefinition)
        assert record.type_name == OPEN_TYPE
        assert record.decodable is False

    def test_unsupported_content_type_has_no_field(self) -> None:
        operation = _operation(
            [
                ResponseIR(
                    status="200",
                    description=None,
                    content=[MediaTypeIR(content_type="application/octet-stream", schema={"type": "string"})],
                )
            ]
        )
        (record,) = classify(operation)
        assert isinstance(record, ResponseTypeDefinition)
        assert record.content_class is ContentTypeClass.UNSUPPORTED
        assert record.field_name is None
        assert record.decodable is False

    def test_uses_given_tables(self) -> None:
        tables = ContentTypeTables(
            version="test",
            json=frozenset({"application/vnd.api+json"}),
            yaml=frozenset(),
            xml=frozenset(),
        )
        operation = _operation(
            [
                ResponseIR(
                    status="200",
                    description=None,
                    content=[
                        MediaTypeIR(content_type="application/vnd.api+json", schema={"type": "string"}),
                        MediaTypeIR(content_type="application/json", schema={"type": "string"}),
                    ],
                )
            ]
        )
        records = classify(operation, tables=tables)
        classes = {
            record.content_type: record.content_class
            for record in records
            if isinstance(record, ResponseTypeDefinition)
        }
        assert classes == {
            "application/json": ContentTypeClass.UNSUPPORTED,
            "application/vnd.api+json": ContentTypeClass.JSON,
        }

    def test_empty_operation(self) -> None:
        assert classify(_operation([])) == []

    def test_skips_undefined_response_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        operation = _operation(
            [
                ResponseIR(status="200", description=None, content=[], defined=False),
                ResponseIR(status="404", description=None, content=[]),
            ]
        )
        with caplog.at_level(logging.WARNING, logger="dispatchify.generation.classifier"):
            records = classify(operation)
        assert [record.response_key.text for record in records] == ["404"]
        assert "getPet.200 has no value" in caplog.text

    def test_is_deterministic(self) -> None:
        operation = _operation(
            [
                ResponseIR(
                    status="5XX",
                    description=None,
                    content=[
                        MediaTypeIR(content_type="text/plain", schema=None),
                        MediaTypeIR(content_type="application/xml", schema={"type": "string"}),
                    ],
                ),
                ResponseIR(status="201", description=None, content=[]),
            ]
        )
        assert classify(operation) == classify(operation)


class TestClassificationErrors:
    def test_unresolved_schema_ref_is_fatal(self) -> None:
        operation = _operation(
            [
                ResponseIR(
                    status="200",
                    description=None,
                    content=[
                        MediaTypeIR(content_type="application/json", schema={"$ref": "#/components/schemas/Missing"})
                    ],
                ),
                ResponseIR(status="404", description=None, content=[]),
            ]
        )
        with pytest.raises(ClassificationError) as exc_info:
            classify(operation, emitter=_emitter())
        assert exc_info.value.operation == "getPet"
        assert "Missing" in str(exc_info.value)
        assert str(exc_info.value).startswith("getPet: ")

    def test_external_schema_ref_is_fatal(self) -> None:
        operation = _operation(
            [
                ResponseIR(
                    status="200",
                    description=None,
                    content=[MediaTypeIR(content_type="text/plain", schema={"$ref": "other.yaml#/Pet"})],
                )
            ]
        )
        with pytest.raises(ClassificationError, match="unresolved schema reference"):
            classify(operation, emitter=_emitter())

    def test_unresolved_response_ref_is_fatal(self) -> None:
        operation = _operation(
            [ResponseIR(status="404", description=None, content=[], ref="#/components/responses/NotFound")]
        )
        with pytest.raises(ClassificationError, match="unresolved response reference"):
            classify(operation)

    @pytest.mark.parametrize(
        "status",
        [
            pytest.param("2xx", id="lowercase-range"),
            pytest.param("6XX", id="range-out-of-bounds"),
            pytest.param("20", id="two-digits"),
            pytest.param("ok", id="text"),
        ],
    )
    def test_invalid_response_key_is_fatal(self, status: str) -> None:
        operation = _operation([ResponseIR(status=status, description=None, content=[])])
        with pytest.raises(ClassificationError, match="invalid response key"):
            classify(operation)

    def test_duplicate_response_key_is_fatal(self) -> None:
        operation = _operation(
            [
                ResponseIR(status="200", description=None, content=[]),
                ResponseIR(status="200", description=None, content=[]),
            ]
        )
        with pytest.raises(ClassificationError, match="duplicate response key"):
            classify(operation)

    def test_derived_operation_name_in_error(self) -> None:
        operation = _operation([ResponseIR(status="bad", description=None, content=[])], operation_id=None)
        with pytest.raises(ClassificationError) as exc_info:
            classify(operation)
        assert exc_info.value.operation == "GetPetsId"

from __future__ import annotations

import pytest

from dispatchify.content_types import (
    DEFAULT_CONTENT_TYPE_TABLES,
    ContentTypeClass,
    ContentTypeTables,
    normalize_content_type,
)


class TestDefaultTables:
    @pytest.mark.parametrize(
        ("content_type", "expected"),
        [
            pytest.param("application/json", ContentTypeClass.JSON, id="json"),
            pytest.param("text/x-json", ContentTypeClass.JSON, id="x-json"),
            pytest.param("application/yaml", ContentTypeClass.YAML, id="yaml"),
            pytest.param("application/x-yaml", ContentTypeClass.YAML, id="x-yaml"),
            pytest.param("text/yaml", ContentTypeClass.YAML, id="text-yaml"),
            pytest.param("text/x-yaml", ContentTypeClass.YAML, id="text-x-yaml"),
            pytest.param("application/xml", ContentTypeClass.XML, id="xml"),
            pytest.param("text/xml", ContentTypeClass.XML, id="text-xml"),
            pytest.param("application/octet-stream", ContentTypeClass.UNSUPPORTED, id="octet-stream"),
            pytest.param("text/plain", ContentTypeClass.UNSUPPORTED, id="text-plain"),
            pytest.param("application/problem+json", ContentTypeClass.UNSUPPORTED, id="suffix-not-member"),
        ],
    )
    def test_classify(self, content_type: str, expected: ContentTypeClass) -> None:
        assert DEFAULT_CONTENT_TYPE_TABLES.classify(content_type) is expected

    def test_classify_ignores_parameters_and_case(self) -> None:
        assert DEFAULT_CONTENT_TYPE_TABLES.classify("Application/JSON; charset=utf-8") is ContentTypeClass.JSON

    def test_version(self) -> None:
        assert DEFAULT_CONTENT_TYPE_TABLES.version == "1"

    def test_members(self) -> None:
        assert DEFAULT_CONTENT_TYPE_TABLES.members(ContentTypeClass.XML) == frozenset({"application/xml", "text/xml"})
        assert DEFAULT_CONTENT_TYPE_TABLES.members(ContentTypeClass.UNSUPPORTED) == frozenset()

    def test_families_are_disjoint(self) -> None:
        tables = DEFAULT_CONTENT_TYPE_TABLES
        assert not (tables.json & tables.yaml)
        assert not (tables.json & tables.xml)
        assert not (tables.yaml & tables.xml)


class TestContentTypeClass:
    def test_header_substrings(self) -> None:
        assert ContentTypeClass.JSON.header_substring == "json"
        assert ContentTypeClass.YAML.header_substring == "yaml"
        assert ContentTypeClass.XML.header_substring == "xml"
        with pytest.raises(ValueError):
            _ = ContentTypeClass.UNSUPPORTED.header_substring

    def test_rank_order(self) -> None:
        ranks = [member.rank for member in ContentTypeClass]
        assert ranks == sorted(ranks)
        assert ContentTypeClass.UNSUPPORTED.rank == max(ranks)

    def test_is_known(self) -> None:
        assert [member for member in ContentTypeClass if not member.is_known] == [ContentTypeClass.UNSUPPORTED]


class TestCustomTables:
    def test_swapped_membership(self) -> None:
        tables = ContentTypeTables(
            version="2",
            json=frozenset({"application/vnd.api+json"}),
            yaml=frozenset(),
            xml=frozenset({"application/atom+xml"}),
        )
        assert tables.classify("application/vnd.api+json") is ContentTypeClass.JSON
        assert tables.classify("application/json") is ContentTypeClass.UNSUPPORTED
        assert tables.classify("application/atom+xml") is ContentTypeClass.XML


def test_normalize_content_type() -> None:
    assert normalize_content_type(" text/XML ;charset=utf-8") == "text/xml"

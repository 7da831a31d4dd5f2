"""Content-type families recognised by the dispatch synthesizer.

Membership is a closed, exact lookup against versioned tables. Changing a
table changes which responses get a decoder in the generated code, so any
change to ``DEFAULT_CONTENT_TYPE_TABLES`` must bump its ``version``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ContentTypeClass(Enum):
    """The family a response content type belongs to.

    The value of each known family doubles as the substring the generated
    code looks for in the runtime ``Content-Type`` header, and as the prefix
    of the envelope attribute that receives the decoded body.
    """

    JSON = "json"
    YAML = "yaml"
    XML = "xml"
    UNSUPPORTED = "unsupported"

    @property
    def is_known(self) -> bool:
        return self is not ContentTypeClass.UNSUPPORTED

    @property
    def rank(self) -> int:
        return _CLASS_RANKS[self]

    @property
    def header_substring(self) -> str:
        if not self.is_known:
            raise ValueError("unsupported content types have no header substring")
        return self.value


_CLASS_RANKS = {
    ContentTypeClass.JSON: 0,
    ContentTypeClass.YAML: 1,
    ContentTypeClass.XML: 2,
    ContentTypeClass.UNSUPPORTED: 3,
}


@dataclass(frozen=True)
class ContentTypeTables:
    """Versioned membership tables for the known content-type families."""

    version: str
    json: frozenset[str]
    yaml: frozenset[str]
    xml: frozenset[str]

    def classify(self, content_type: str) -> ContentTypeClass:
        media_type = normalize_content_type(content_type)
        for content_class in (ContentTypeClass.JSON, ContentTypeClass.YAML, ContentTypeClass.XML):
            if media_type in self.members(content_class):
                return content_class
        return ContentTypeClass.UNSUPPORTED

    def members(self, content_class: ContentTypeClass) -> frozenset[str]:
        if content_class is ContentTypeClass.JSON:
            return self.json
        if content_class is ContentTypeClass.YAML:
            return self.yaml
        if content_class is ContentTypeClass.XML:
            return self.xml
        return frozenset()


def normalize_content_type(content_type: str) -> str:
    """Lower-case a content type and drop any MIME parameters.

    Example:
        >>> normalize_content_type("Application/JSON; charset=utf-8")
        'application/json'
    """
    return content_type.split(";", 1)[0].strip().lower()


DEFAULT_CONTENT_TYPE_TABLES = ContentTypeTables(
    version="1",
    json=frozenset({"application/json", "text/x-json"}),
    yaml=frozenset({"application/yaml", "application/x-yaml", "text/yaml", "text/x-yaml"}),
    xml=frozenset({"application/xml", "text/xml"}),
)

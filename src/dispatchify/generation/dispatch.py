"""Dispatch synthesis.

Turns classified response records into a single ``if``/``elif`` chain that,
given a status code, the response headers and the raw body, decodes the body
into the envelope attribute of the first matching response.

The first true condition wins, so clause order is what makes the generated
code correct. Clauses are ordered by ``ClauseKey``:

1. specificity tier (exact code, range wildcard, default)
2. handled (decodable) clauses before unhandled ones
3. content-type family
4. response key text

Two records that produce the same key collapse into one clause; the record
seen last provides the body. Unhandled clauses only test the status code, so
all unhandled records of one response key share a key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NamedTuple, Sequence

from ..content_types import DEFAULT_CONTENT_TYPE_TABLES, ContentTypeClass, ContentTypeTables
from ..status import SpecificityTier, match_expression
from .classifier import ClassifiedResponse, NoContentResponse, ResponseTypeDefinition
from .emitter import OPEN_TYPE

logger = logging.getLogger(__name__)

HANDLED = 0
UNHANDLED = 1
UNHANDLED_CLASS_RANK = ContentTypeClass.UNSUPPORTED.rank

CONTENT_TYPE_HEADER = "Content-Type"

_DECODERS = {
    ContentTypeClass.JSON: "json.loads({body})",
    ContentTypeClass.YAML: "yaml.safe_load({body})",
    ContentTypeClass.XML: "ElementTree.fromstring({body})",
}


@dataclass(frozen=True)
class DispatchNames:
    """Names of the variables the generated fragment expects in scope.

    Attributes:
        status: Integer HTTP status code
        headers: Mapping of response headers with a ``get`` method
        body: Raw response body bytes
        envelope: Pre-built envelope object receiving decoded bodies
    """

    status: str = "status_code"
    headers: str = "headers"
    body: str = "body"
    envelope: str = "response"


class ClauseKey(NamedTuple):
    # No content-type field: records sharing a key render the same condition.
    tier: SpecificityTier
    handled_rank: int
    class_rank: int
    response_key: str


@dataclass(frozen=True)
class CaseClause:
    key: ClauseKey
    condition: str
    body: tuple[str, ...]

    def render(self, keyword: str = "if", indent: str = "    ") -> list[str]:
        return [f"{keyword} {self.condition}:", *(f"{indent}{line}" for line in self.body)]


def is_handled(record: ClassifiedResponse, tables: ContentTypeTables = DEFAULT_CONTENT_TYPE_TABLES) -> bool:
    """Whether a decode step can be generated for ``record``.

    The record's family must be a known one, its own content type must
    classify into that same family, and its target type must not be the
    open sentinel.
    """
    if not isinstance(record, ResponseTypeDefinition):
        return False
    return (
        record.content_class.is_known
        and tables.classify(record.content_type) is record.content_class
        and record.type_name != OPEN_TYPE
        and record.field_name is not None
    )


def clause_key(record: ClassifiedResponse, tables: ContentTypeTables = DEFAULT_CONTENT_TYPE_TABLES) -> ClauseKey:
    key = record.response_key
    if isinstance(record, ResponseTypeDefinition) and is_handled(record, tables):
        return ClauseKey(key.tier, HANDLED, record.content_class.rank, key.text)
    return ClauseKey(key.tier, UNHANDLED, UNHANDLED_CLASS_RANK, key.text)


def build_case_clauses(
    classified: Sequence[ClassifiedResponse],
    tables: ContentTypeTables = DEFAULT_CONTENT_TYPE_TABLES,
    names: DispatchNames = DispatchNames(),
) -> list[CaseClause]:
    """Build the deduplicated clauses for ``classified`` in evaluation order."""
    clauses: dict[ClauseKey, CaseClause] = {}
    for record in classified:
        key = clause_key(record, tables)
        if isinstance(record, ResponseTypeDefinition) and key.handled_rank == HANDLED:
            clause = _handled_clause(key, record, names)
        else:
            clause = _unhandled_clause(key, record, tables, names)
        clauses[key] = clause
    return [clauses[key] for key in sorted(clauses)]


def synthesize(
    operation_id: str,
    classified: Sequence[ClassifiedResponse],
    tables: ContentTypeTables = DEFAULT_CONTENT_TYPE_TABLES,
    names: DispatchNames = DispatchNames(),
) -> str:
    """Generate the dispatch fragment for one operation.

    Returns:
        The ``if``/``elif`` chain as source text starting at column zero, or
        an empty string when there is nothing to dispatch on.
    """
    if not classified:
        return ""
    clauses = build_case_clauses(classified, tables, names)
    if not clauses:
        return ""
    lines: list[str] = []
    for index, clause in enumerate(clauses):
        lines.extend(clause.render("if" if index == 0 else "elif"))
    logger.debug("Synthesized %d dispatch clause(s) for %s", len(clauses), operation_id)
    return "\n".join(lines) + "\n"


def content_type_condition(content_class: ContentTypeClass, names: DispatchNames = DispatchNames()) -> str:
    return f'"{content_class.header_substring}" in {names.headers}.get("{CONTENT_TYPE_HEADER}", "")'


def _handled_clause(key: ClauseKey, record: ResponseTypeDefinition, names: DispatchNames) -> CaseClause:
    status_condition = match_expression(names.status, record.response_key)
    condition = content_type_condition(record.content_class, names)
    if not record.response_key.is_default:
        condition = f"{condition} and {status_condition}"
    decode = _DECODERS[record.content_class].format(body=names.body)
    body = (
        f"dest = cast({record.type_name!r}, {decode})",
        f"{names.envelope}.{record.field_name} = dest",
    )
    return CaseClause(key=key, condition=condition, body=body)


def _unhandled_clause(
    key: ClauseKey,
    record: ClassifiedResponse,
    tables: ContentTypeTables,
    names: DispatchNames,
) -> CaseClause:
    condition = match_expression(names.status, record.response_key)
    if isinstance(record, NoContentResponse):
        return CaseClause(key=key, condition=condition, body=("pass  # No content-type",))
    if record.content_class.is_known and tables.classify(record.content_type) is record.content_class:
        comment = f"# Content-type ({record.content_type}) has no typed decoder"
    else:
        comment = f"# Content-type ({record.content_type}) unsupported"
    return CaseClause(key=key, condition=condition, body=(comment, "pass"))

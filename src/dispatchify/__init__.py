from .content_types import DEFAULT_CONTENT_TYPE_TABLES, ContentTypeClass, ContentTypeTables
from .errors import ClassificationError, DispatchifyError, SpecError
from .generation import (
    OPEN_TYPE,
    DispatchNames,
    GenerationProfile,
    NoContentResponse,
    ResponseTypeDefinition,
    classify,
    generate_responses,
    synthesize,
)
from .generator import GenerationResult, PackageSpec, generate_package
from .ir import IRDocument, build_ir
from .loader import load_openapi, resolve_refs
from .status import ResponseKey, SpecificityTier, match_expression, parse_response_key

__all__ = [
    "DispatchifyError",
    "SpecError",
    "ClassificationError",
    "ContentTypeClass",
    "ContentTypeTables",
    "DEFAULT_CONTENT_TYPE_TABLES",
    "OPEN_TYPE",
    "DispatchNames",
    "GenerationProfile",
    "NoContentResponse",
    "ResponseTypeDefinition",
    "classify",
    "synthesize",
    "generate_responses",
    "GenerationResult",
    "PackageSpec",
    "generate_package",
    "IRDocument",
    "build_ir",
    "load_openapi",
    "resolve_refs",
    "ResponseKey",
    "SpecificityTier",
    "match_expression",
    "parse_response_key",
]

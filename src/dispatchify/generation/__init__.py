from .analysis import (
    has_empty_2xx_response,
    has_single_2xx_json_response,
    has_valid_or_no_body,
    has_valid_request_and_response,
    json_response_definitions,
    single_2xx_json_definition,
)
from .classifier import ClassifiedResponse, NoContentResponse, ResponseTypeDefinition, classify
from .dispatch import CaseClause, ClauseKey, DispatchNames, build_case_clauses, synthesize
from .emitter import OPEN_TYPE, TypeEmitter
from .naming import response_type_name
from .profile import GenerationProfile
from .responses import OperationFailure, ResponsesOutput, generate_responses, response_payload

__all__ = [
    "OPEN_TYPE",
    "CaseClause",
    "ClassifiedResponse",
    "ClauseKey",
    "DispatchNames",
    "GenerationProfile",
    "NoContentResponse",
    "OperationFailure",
    "ResponseTypeDefinition",
    "ResponsesOutput",
    "TypeEmitter",
    "build_case_clauses",
    "classify",
    "generate_responses",
    "has_empty_2xx_response",
    "has_single_2xx_json_response",
    "has_valid_or_no_body",
    "has_valid_request_and_response",
    "json_response_definitions",
    "response_payload",
    "response_type_name",
    "single_2xx_json_definition",
    "synthesize",
]

# =============================================================================
# core/models.py  --  Data Models (the "nouns" of the system)
# =============================================================================
#
# Two kinds of models live here:
#
#   1. WIRE SCHEMAS (pydantic):  SearchRequest is what the host sends us,
#      SearchResponse is what the AutoRAG API sends back.  Both are strict:
#      "true" is not a boolean and 5.0 is not an integer.  A malformed value
#      is rejected, never coerced.
#
#   2. VALIDATION OUTCOMES (dataclasses):  validating never raises.  It
#      returns a ValidationOutcome holding either the parsed value or EVERY
#      violation found, so callers can inspect all of them at once.
#
# SINGLE SOURCE OF TRUTH:
#   The tool descriptor's input schema is SearchRequest.model_json_schema().
#   The same class validates incoming arguments, so the advertised schema and
#   the enforced rules cannot drift apart.
#
# ABSENT-SAFE RESPONSES:
#   The AutoRAG API sometimes omits fields and sometimes sends them as null.
#   Everything optional below accepts both.  Use SearchResult.items rather
#   than SearchResult.data when iterating.
# =============================================================================

import math
from dataclasses import dataclass, field
from typing import Annotated, Any, Generic, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

T = TypeVar("T")


def _drop_null_defaults(schema: dict[str, Any]) -> None:
    # Optional request fields default to None only to mark "not supplied";
    # null is not an accepted value, so it must not show up as a default.
    for prop in schema.get("properties", {}).values():
        if "default" in prop and prop["default"] is None:
            del prop["default"]


def _whole_float_to_int(value: Any) -> Any:
    # JSON Schema "integer" includes 5.0, so the validator must too.
    # 2.5, bools and strings fall through to the strict int check.
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return value


# -----------------------------------------------------------------------------
# SearchRequest -- the arguments of one autorag_search call
# -----------------------------------------------------------------------------
# Omitted optional fields are filled from ServiceConfig defaults by the
# gateway; they are left as None here so we can tell "omitted" apart from
# "explicitly supplied".
# -----------------------------------------------------------------------------
class SearchRequest(BaseModel):
    model_config = ConfigDict(strict=True, json_schema_extra=_drop_null_defaults)

    query: str = Field(min_length=1, description="the search query.")
    rewrite_query: bool = Field(
        default=None,
        description="rewrite query for better retrieval accuracy.",
    )
    # Bounds sit before the coercion so they apply to the plain int schema.
    max_num_results: Annotated[
        int, Field(ge=1, le=20), BeforeValidator(_whole_float_to_int)
    ] = Field(
        default=None,
        description="maximum number of results to return (1-20).",
    )
    score_threshold: float = Field(
        default=None,
        ge=0,
        le=1,
        allow_inf_nan=False,
        description="minimum score for a result to be considered a match (0-1).",
    )

    def supplied_fields(self) -> dict[str, Any]:
        """Only the fields the caller actually passed."""
        return self.model_dump(exclude_unset=True)


# -----------------------------------------------------------------------------
# Response side -- mirrors the AutoRAG search payload
# -----------------------------------------------------------------------------
class ContentChunk(BaseModel):
    """One piece of a matched document's content."""

    model_config = ConfigDict(strict=True)

    text: Optional[str] = None
    type: Optional[str] = None


class SearchResultItem(BaseModel):
    """A single scored match."""

    model_config = ConfigDict(strict=True)

    score: float
    attributes: Optional[dict[str, Any]] = None
    content: Optional[list[ContentChunk]] = None
    file_id: Optional[str] = None
    filename: Optional[str] = None


class SearchResult(BaseModel):
    model_config = ConfigDict(strict=True)

    search_query: str
    data: Optional[list[SearchResultItem]] = None
    has_more: Optional[bool] = None
    next_page: Optional[str] = None
    object: Optional[str] = None

    @property
    def items(self) -> list[SearchResultItem]:
        return self.data or []


class SearchResponse(BaseModel):
    """The envelope the AutoRAG search endpoint is contracted to return."""

    model_config = ConfigDict(strict=True)

    success: bool
    result: SearchResult

    def to_json(self) -> str:
        # exclude_unset keeps the payload faithful: fields the API omitted
        # stay omitted, fields it sent as null stay null.
        return self.model_dump_json(exclude_unset=True)


# -----------------------------------------------------------------------------
# Validation outcomes
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Violation:
    """One failed constraint, e.g. path="max_num_results", message="..."."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


@dataclass
class ValidationOutcome(Generic[T]):
    """Either a parsed value or the full list of violations, never both."""

    value: Optional[T] = None
    violations: list[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations


def violations_from(error: ValidationError) -> list[Violation]:
    """Flatten a pydantic ValidationError into Violations, in field order."""
    return [
        Violation(
            path=".".join(str(part) for part in err["loc"]),
            message=err["msg"],
        )
        for err in error.errors()
    ]


def validate_search_request(arguments: Mapping[str, Any]) -> ValidationOutcome[SearchRequest]:
    try:
        return ValidationOutcome(value=SearchRequest.model_validate(arguments))
    except ValidationError as e:
        return ValidationOutcome(violations=violations_from(e))


def validate_search_response(body: Union[str, bytes]) -> ValidationOutcome[SearchResponse]:
    """Parse a raw response body; invalid JSON is reported as a violation too."""
    try:
        return ValidationOutcome(value=SearchResponse.model_validate_json(body))
    except ValidationError as e:
        return ValidationOutcome(violations=violations_from(e))


def search_request_schema() -> dict[str, Any]:
    return SearchRequest.model_json_schema()

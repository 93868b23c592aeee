"""Input validation with strong typing."""

from dataclasses import dataclass
from typing import Any, Literal
from returns.result import Result, Success, Failure

from pydantic import BaseModel, Field, field_validator, ConfigDict

from .json import JSONParseError, validate_json_depth, validate_json_size


# Validation limits
MAX_SCHEMA_SIZE = 512 * 1024  # 512KB
MAX_SCHEMA_DEPTH = 40
MAX_PROMPT_LENGTH = 2_000
MAX_EVENT_VALUE_LENGTH = 10_000


class ValidationError(Exception):
    """Validation failed."""

    pass


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None
    value: Any | None = None


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(
        strict=True, validate_assignment=True, extra="forbid", frozen=True
    )


class PromptRequest(RequestValidator):
    """Free-text prompt asking the shell for an app."""

    prompt: str = Field(min_length=1, max_length=MAX_PROMPT_LENGTH)

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        """Ensure prompt is non-empty after stripping."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Prompt cannot be empty")
        return stripped


class EventRequest(RequestValidator):
    """User interaction routed to a rendered element."""

    target: str = Field(min_length=1, max_length=256, description="Element path")
    type: Literal["click", "change"]
    value: str | None = Field(default=None, max_length=MAX_EVENT_VALUE_LENGTH)


class SchemaValidator:
    """Validates raw schema documents before they become SchemaNodes."""

    @staticmethod
    def validate(
        schema: dict[str, Any],
        schema_json: str | None = None,
        max_size: int = MAX_SCHEMA_SIZE,
        max_depth: int = MAX_SCHEMA_DEPTH,
    ) -> None:
        """
        Check size, depth and the top-level shape of a schema document.

        Raises:
            ValidationError: If validation fails
        """
        try:
            if schema_json is not None:
                validate_json_size(schema_json, max_size, "Schema")
            validate_json_depth(schema, max_depth)
        except JSONParseError as e:
            raise ValidationError(str(e)) from e

        if not isinstance(schema, dict):
            raise ValidationError("Schema node must be an object")

        if "type" not in schema:
            raise ValidationError("Schema node missing required 'type' field")

        children = schema.get("children", [])
        if not isinstance(children, list):
            raise ValidationError("Schema 'children' must be a list")


def validate_schema(
    schema: dict[str, Any], schema_json: str | None = None
) -> Result[None, ValidationResult]:
    """
    Validate a schema document (Result pattern version).

    Returns:
        Result indicating success or validation error
    """
    try:
        SchemaValidator.validate(schema, schema_json)
        return Success(None)
    except ValidationError as e:
        return Failure(ValidationResult(str(e), field="schema"))

"""
Barrel + Verse Backend — Shared Schema Building Blocks
========================================================

What:  Base model configuration, the Price type and the error/health envelopes.
How:   Every schema inherits ApiModel: snake_case in Python, camelCase on the
       wire (isPublished, longDescription, ...), and constructible from ORM
       rows via from_attributes.
"""

import re
from decimal import Decimal
from typing import Annotated, Any, ClassVar, List, Optional, Tuple, Union

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# NUMERIC(10, 2): at most 8 integer digits. ASCII digits only, matched in full.
PRICE_PATTERN = re.compile(r"[0-9]{1,8}(\.[0-9]{1,2})?")


class ApiModel(BaseModel):
    """Base for all API schemas: camelCase aliases, populate by either name."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _decimal_to_text(value: Any) -> Any:
    # NUMERIC columns come back as Decimal; render with the column's scale
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    return value


def _normalise_price(value: str) -> str:
    if not PRICE_PATTERN.fullmatch(value):
        raise ValueError(
            "must be a decimal string with at most 8 digits before and 2 after the point, e.g. '19.99'"
        )
    return f"{Decimal(value):.2f}"


# Fixed-point money value carried as text end to end: "20" -> "20.00", "19.99" -> "19.99"
Price = Annotated[str, BeforeValidator(_decimal_to_text), AfterValidator(_normalise_price)]


class PartialUpdateModel(ApiModel):
    """
    Base for PUT payloads where every field is optional.

    Fields listed in `non_nullable_fields` may be omitted but not sent as
    null, because their columns are NOT NULL.
    """

    non_nullable_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_for_required_columns(self):
        for name in self.non_nullable_fields:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def changes(self) -> dict:
        """Only the fields the client actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class ValidationIssue(BaseModel):
    """One field-level problem in a rejected request body."""
    field: str = Field(description="Dotted path of the offending field, e.g. 'body.price'")
    message: str = Field(description="Human-readable description of the problem")
    type: str = Field(description="Machine-readable error type from the validator")


class ErrorResponse(BaseModel):
    """
    Standardized error body for every non-2xx response.

    `error` is a message string, or a list of ValidationIssue for 400s caused
    by schema validation.

    Example:
        {"error": "Invalid credentials", "request_id": "a1b2c3d4"}
    """
    error: Union[str, List[ValidationIssue]] = Field(description="Error message or field errors")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class SuccessResponse(BaseModel):
    """Body of logout and delete responses."""
    success: bool = True


class HealthResponse(BaseModel):
    """Health check response showing service and storage status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    storage: str = Field(description="Active storage backend: memory, database")
    storage_status: str = Field(description="Storage reachability: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

"""
Failure classification and response envelope.

Every error the inventory tool can explain to a user derives from
``KnownError``. API endpoints convert these into an ``ApiResponse`` so the
presentation layer always receives a classified outcome.

Recoverable vs fatal:
- MalformedRowError: a single CSV row is skipped; the import continues.
- MissingHeaderError: the whole import is aborted.
- Invalid*Error: the single inventory operation is rejected; existing
  inventory state is left untouched.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # CSV codec failures
    MALFORMED_ROW = "malformed_row"
    MISSING_HEADER = "missing_header"

    # Inventory validation failures
    INVALID_QUANTITY = "invalid_quantity"
    INVALID_PRICE = "invalid_price"
    INVALID_CONDITION = "invalid_condition"
    INVALID_CARD = "invalid_card"
    INVALID_INPUT = "invalid_input"

    # Catalog failures
    NOT_FOUND = "not_found"
    EXTERNAL_API_ERROR = "external_api_error"

    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel):
    """Response envelope for failures surfaced by API endpoints."""

    outcome: OutcomeType
    failure: FailureDetail | None = None

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse":
        """Create a response for a failure the system can explain."""
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def unknown_failure(cls, detail: str | None = None) -> "ApiResponse":
        """Create a response for an unexpected failure."""
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="Something went wrong and the cause is unknown.",
                detail=detail,
                suggestion="If this persists, please report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


# =============================================================================
# CSV CODEC ERRORS
# =============================================================================


class MalformedRowError(KnownError):
    """A CSV data row whose field count does not match the header."""

    def __init__(self, line_number: int, expected: int, actual: int):
        self.line_number = line_number
        self.expected = expected
        self.actual = actual
        super().__init__(
            kind=FailureKind.MALFORMED_ROW,
            message=f"Row {line_number} has {actual} columns, expected {expected}",
            suggestion="Check the row for an unescaped comma or quote.",
        )


class MissingHeaderError(KnownError):
    """Input has no header line naming marketplace columns."""

    def __init__(self, detail: str | None = None):
        super().__init__(
            kind=FailureKind.MISSING_HEADER,
            message="The CSV file has no recognizable header line.",
            detail=detail,
            suggestion="Export the file again from the marketplace and retry.",
        )


# =============================================================================
# INVENTORY VALIDATION ERRORS
# =============================================================================


class InvalidQuantityError(KnownError):
    """Quantity is not a positive integer within limits."""

    def __init__(self, value: object, detail: str | None = None):
        self.value = value
        super().__init__(
            kind=FailureKind.INVALID_QUANTITY,
            message=f"Quantity must be a positive integer, got {value!r}",
            detail=detail,
        )


class InvalidPriceError(KnownError):
    """Price is not a non-negative number within limits."""

    def __init__(self, value: object, detail: str | None = None):
        self.value = value
        super().__init__(
            kind=FailureKind.INVALID_PRICE,
            message=f"Price must be a non-negative number, got {value!r}",
            detail=detail,
        )


class InvalidConditionError(KnownError):
    """Condition is not one of the configured labels."""

    def __init__(self, value: object, allowed: list[str]):
        self.value = value
        self.allowed = allowed
        super().__init__(
            kind=FailureKind.INVALID_CONDITION,
            message=f"Invalid condition: {value!r}",
            detail=f"Allowed conditions: {', '.join(allowed)}",
        )


class InvalidCardError(KnownError):
    """Card data is missing a required field."""

    def __init__(self, message: str):
        super().__init__(kind=FailureKind.INVALID_CARD, message=message)


# =============================================================================
# CATALOG ERRORS
# =============================================================================


class InvalidQueryError(KnownError):
    """Search query is blank or too long."""

    def __init__(self, message: str):
        super().__init__(kind=FailureKind.INVALID_INPUT, message=message)


class CatalogError(KnownError):
    """The card catalog could not be reached or returned an error."""

    def __init__(self, message: str, detail: str | None = None, status_code: int = 502):
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message=message,
            detail=detail,
            suggestion="Try the search again in a moment.",
            status_code=status_code,
        )


class CardNotFoundError(KnownError):
    """The catalog has no card with the requested id."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Card not found: {card_id}",
            suggestion="Search by name to find the card's catalog id.",
            status_code=404,
        )

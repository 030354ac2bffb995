"""
Error hierarchy for cepquery.

    CEPError
    ├── ValidationError            raised before any network call
    │   ├── MissingFieldError
    │   ├── InvalidCriterionTypeError
    │   ├── CriterionTooLongError
    │   ├── InvalidDateFormatError
    │   ├── InvalidClabeError
    │   ├── InvalidAmountError
    │   ├── InvalidBankCodeError
    │   └── InvalidFormatError
    ├── HttpRequestFailedError
    ├── InvalidBankListFormatError
    └── XmlParseError
"""

from typing import Any, Optional


class CEPError(Exception):
    """Base class for every error raised by cepquery."""


class ValidationError(CEPError):
    """Lookup criteria or download options were rejected."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        self.field = field
        self.value = value
        super().__init__(message)


class MissingFieldError(ValidationError):
    def __init__(self, field: str):
        super().__init__(f"Required field missing: {field}", field=field)


class InvalidCriterionTypeError(ValidationError):
    def __init__(self, value: Any):
        super().__init__(
            "Invalid tipoCriterio. Must be 'T' (tracking key) or 'R' (reference number)",
            field="tipoCriterio",
            value=value,
        )


class CriterionTooLongError(ValidationError):
    def __init__(self, criterion_type: str, max_length: int, value: str):
        kind = "Reference number" if criterion_type == "R" else "Tracking key"
        self.max_length = max_length
        super().__init__(
            f"{kind} cannot exceed {max_length} characters",
            field="criterio",
            value=value,
        )


class InvalidDateFormatError(ValidationError):
    def __init__(self, value: Any):
        super().__init__(
            "Invalid date format. Use dd-mm-yyyy or dd/mm/yyyy", field="fecha", value=value
        )


class InvalidClabeError(ValidationError):
    def __init__(self, value: Any):
        super().__init__("Invalid CLABE format. Must be 18 digits", field="cuenta", value=value)


class InvalidAmountError(ValidationError):
    def __init__(self, value: Any):
        super().__init__("Invalid amount format", field="monto", value=value)


class InvalidBankCodeError(ValidationError):
    def __init__(self, field: str, value: Any):
        super().__init__("Invalid bank codes. Must be numeric", field=field, value=value)


class InvalidFormFlagError(ValidationError):
    def __init__(self, field: str, value: Any):
        super().__init__(f"Invalid {field}. Must be an integer", field=field, value=value)


class InvalidFormatError(ValidationError):
    def __init__(self, value: Any):
        super().__init__(
            "Invalid format. Must be 'XML', 'PDF', or 'ZIP'", field="formato", value=value
        )


class HttpRequestFailedError(CEPError):
    """
    Wraps any transport or HTTP status failure. The underlying message is kept verbatim.
    """

    def __init__(self, message: str, cause: Optional[str] = None):
        self.cause = cause
        super().__init__(f"{message}: {cause}" if cause else message)


class InvalidBankListFormatError(CEPError):
    def __init__(self, detail: str = ""):
        self.detail = detail
        message = "Invalid instituciones format"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class XmlParseError(CEPError):
    """The payment receipt is not well-formed XML."""

    def __init__(self, details: str):
        self.details = details
        super().__init__(f"Failed to parse XML: {details}")

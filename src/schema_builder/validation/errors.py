"""
Validation Error Types for compiled schema validators.

Provides structured error handling for values that don't match a schema:
- ValidationErrorDetail: Single violation with the path of the offending value
- ValidationError: Exception carrying every violation and the flattened text
"""

from typing import Any, List, Optional


class ValidationErrorDetail:
    """
    Details about a single validation error.

    Attributes:
        path: Path to the offending value in the validated data
            (e.g., "data.options.temperature", "data[2].name")
        keyword: Schema keyword that failed (type, required, enum, minItems, ...)
        message: Human-readable error message
        value: The actual value that failed validation (optional)
    """

    def __init__(
        self,
        path: str,
        keyword: str,
        message: str,
        value: Optional[Any] = None,
    ):
        self.path = path
        self.keyword = keyword
        self.message = message
        self.value = value

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        result = {
            "path": self.path,
            "keyword": self.keyword,
            "message": self.message,
        }
        if self.value is not None:
            result["value"] = self.value
        return result

    def __str__(self) -> str:
        return f"{self.path} {self.message}"

    def __repr__(self) -> str:
        return f"ValidationErrorDetail(path={self.path!r}, keyword={self.keyword!r}, message={self.message!r})"


def errors_text(errors: List[ValidationErrorDetail], separator: str = ", ") -> str:
    """Flatten error entries into one line, like "data.a is not of type 'string', ..."."""
    if not errors:
        return "No errors"
    return separator.join(str(error) for error in errors)


class ValidationError(Exception):
    """
    Exception raised when a value does not conform to a schema.

    Errors are aggregated: every violation found by the validator is kept,
    not only the first one.

    Attributes:
        errors: List of ValidationErrorDetail instances
    """

    def __init__(self, errors: List[ValidationErrorDetail]):
        self.errors = errors
        super().__init__(f"Invalid parameters: {errors_text(errors)}")

    def to_dict(self) -> dict:
        """
        Convert to HTTP 422 response format.

        Returns:
            Dict with:
                - success: False
                - message: Flattened error text
                - errors: List of error details
        """
        return {
            "success": False,
            "message": str(self),
            "errors": [e.to_dict() for e in self.errors],
        }

    def __repr__(self) -> str:
        return f"ValidationError({len(self.errors)} errors)"

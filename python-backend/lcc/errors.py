"""Structured failures raised by the Localization Content Comparer.

Every exception carries an :class:`ErrorInfo` so API and CLI callers can
report a category, a user-facing message and a suggested action instead of
a bare traceback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Categories of failure surfaced to callers."""

    FILE_ACCESS = "file_access"
    DATA_VALIDATION = "data_validation"
    NETWORK_CONNECTION = "network_connection"
    API_AUTHENTICATION = "api_authentication"
    API_RATE_LIMIT = "api_rate_limit"
    API_PROCESSING = "api_processing"
    CONFIGURATION = "configuration"
    USER_INPUT = "user_input"
    SYSTEM_RESOURCE = "system_resource"
    UNEXPECTED_ERROR = "unexpected_error"


class ErrorSeverity(str, Enum):
    """How badly the current operation is affected."""

    LOW = "low"  # caller can continue with minor issues
    MEDIUM = "medium"  # feature unavailable, application functional
    HIGH = "high"  # current operation failed
    CRITICAL = "critical"  # application state compromised


@dataclass(frozen=True)
class ErrorInfo:
    """Standardised error description."""

    category: ErrorCategory
    severity: ErrorSeverity
    user_message: str
    technical_details: str = ""
    suggested_action: str = ""
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "user_message": self.user_message,
            "technical_details": self.technical_details,
            "suggested_action": self.suggested_action,
            "context": dict(self.context),
        }


class LccError(Exception):
    """Base class for all comparer failures."""

    def __init__(self, info: ErrorInfo) -> None:
        super().__init__(info.technical_details or info.user_message)
        self.info = info


class InputValidationError(LccError):
    """Inputs were rejected before any computation took place."""


class DimensionMismatchError(LccError):
    """Two embedding vectors of different length were compared.

    This indicates the embedding provider broke its fixed-length contract.
    """

    def __init__(self, left: int, right: int) -> None:
        super().__init__(
            ErrorInfo(
                category=ErrorCategory.API_PROCESSING,
                severity=ErrorSeverity.HIGH,
                user_message="Embedding vectors have different dimensions.",
                technical_details=f"Cannot compare vectors of length {left} and {right}",
                suggested_action="Regenerate embeddings for both lists with the same model.",
                context={"left": left, "right": right},
            )
        )
        self.left = left
        self.right = right


class EmbeddingProviderError(LccError):
    """The embedding collaborator failed for a whole request."""


class ConfigurationError(LccError):
    """A configured value is missing or out of range."""


def empty_records(side: str) -> InputValidationError:
    return InputValidationError(
        ErrorInfo(
            category=ErrorCategory.DATA_VALIDATION,
            severity=ErrorSeverity.HIGH,
            user_message=f"There is no {side} data to compare.",
            technical_details=f"{side.capitalize()} records are None or empty",
            suggested_action=f"Make sure the {side} file contains valid rows.",
            context={"side": side},
        )
    )


def invalid_threshold(value: object) -> InputValidationError:
    return InputValidationError(
        ErrorInfo(
            category=ErrorCategory.USER_INPUT,
            severity=ErrorSeverity.HIGH,
            user_message="Similarity threshold must be between 0.0 and 1.0.",
            technical_details=f"Invalid similarity threshold: {value!r}",
            suggested_action="Choose a threshold between 0.0 and 1.0.",
            context={"threshold": value},
        )
    )


def file_not_found(path: object) -> LccError:
    return LccError(
        ErrorInfo(
            category=ErrorCategory.FILE_ACCESS,
            severity=ErrorSeverity.HIGH,
            user_message="The requested file could not be found.",
            technical_details=f"File not found: {path}",
            suggested_action="Check the file path and try again.",
            context={"path": str(path)},
        )
    )


def invalid_tabular_format(path: object, details: str) -> InputValidationError:
    return InputValidationError(
        ErrorInfo(
            category=ErrorCategory.DATA_VALIDATION,
            severity=ErrorSeverity.HIGH,
            user_message="The CSV file has an invalid format.",
            technical_details=f"Invalid CSV format in {path}: {details}",
            suggested_action="The file needs a 'ContentId,Content' header row.",
            context={"path": str(path)},
        )
    )


def validate_threshold(threshold: Optional[float]) -> float:
    """Return ``threshold`` as a float or raise :class:`InputValidationError`."""

    try:
        value = float(threshold)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise invalid_threshold(threshold) from None
    # NaN fails both comparisons
    if not 0.0 <= value <= 1.0:
        raise invalid_threshold(threshold)
    return value
